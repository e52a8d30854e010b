"""Tests for the ``uri-spine`` CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from urispine import __version__
from urispine.cli import utils
from urispine.cli.app import app
from urispine.cli.term import parse_fields
from urispine.core.errors import InvalidOptsError
from urispine.core.index import InMemoryIndex
from urispine.core.service import UriService
from urispine.core.settings import get_settings

runner = CliRunner()

BASE = "http://x.org/t/"


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch):
    """Keep log lines out of captured command output."""
    monkeypatch.setenv("URI_SERVICE_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cli_service(monkeypatch, tmp_path):
    """Point every CLI command at one file database and one in-memory index."""
    url = f"sqlite:///{tmp_path / 'uri.db'}"
    index = InMemoryIndex()

    def _make_service(database=None, solr_url=None, local_uri_base=None):
        return UriService(local_uri_base=local_uri_base or BASE, database=url, index=index)

    monkeypatch.setattr(utils, "make_service", _make_service)
    return index


@pytest.fixture
def ready(cli_service):
    result = runner.invoke(app, ["db", "setup"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["vocab", "create", "names", "Names"])
    assert result.exit_code == 0, result.output
    return cli_service


def invoke_json(args):
    result = runner.invoke(app, [*args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestApp:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"uri-spine {__version__}" in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("db", "vocab", "term"):
            assert command in result.output


class TestDb:
    def test_setup_then_rerun(self, cli_service):
        first = runner.invoke(app, ["db", "setup"])
        assert first.exit_code == 0
        assert "vocabularies" in first.output
        second = runner.invoke(app, ["db", "setup"])
        assert second.exit_code == 0
        assert "already exist" in second.output

    def test_check_without_tables(self, cli_service):
        result = runner.invoke(app, ["db", "check"])
        assert result.exit_code == 1
        assert "Required tables not found" in result.output

    def test_check_ok(self, ready):
        result = runner.invoke(app, ["db", "check"])
        assert result.exit_code == 0
        assert "Required tables present" in result.output

    def test_missing_configuration(self, monkeypatch):
        def _unconfigured(*args, **kwargs):
            raise InvalidOptsError("solr_url")

        monkeypatch.setattr(utils, "make_service", _unconfigured)
        result = runner.invoke(app, ["db", "check"])
        assert result.exit_code == 1
        assert "InvalidOptsError" in result.output


class TestVocab:
    def test_create_and_list(self, ready):
        runner.invoke(app, ["vocab", "create", "places", "Places"])
        rows = invoke_json(["vocab", "list"])
        assert rows == [
            {"string_key": "names", "display_label": "Names"},
            {"string_key": "places", "display_label": "Places"},
        ]

    def test_create_duplicate(self, ready):
        result = runner.invoke(app, ["vocab", "create", "names", "Again"])
        assert result.exit_code == 1
        assert "ExistingVocabularyStringKeyError" in result.output

    def test_create_invalid_key(self, ready):
        result = runner.invoke(app, ["vocab", "create", "all", "All"])
        assert result.exit_code == 1
        assert "InvalidVocabularyStringKeyError" in result.output

    def test_update(self, ready):
        record = invoke_json(["vocab", "update", "names", "Personal Names"])
        assert record == {"string_key": "names", "display_label": "Personal Names"}

    def test_update_missing(self, ready):
        result = runner.invoke(app, ["vocab", "update", "nope", "Label"])
        assert result.exit_code == 1
        assert "NonExistentVocabularyError" in result.output

    def test_delete_with_confirmation(self, ready):
        result = runner.invoke(app, ["vocab", "delete", "names"], input="y\n")
        assert result.exit_code == 0
        assert invoke_json(["vocab", "list"]) == []

    def test_delete_aborted(self, ready):
        result = runner.invoke(app, ["vocab", "delete", "names"], input="n\n")
        assert result.exit_code != 0
        assert len(invoke_json(["vocab", "list"])) == 1

    def test_delete_missing_warns(self, ready):
        result = runner.invoke(app, ["vocab", "delete", "nope", "--yes"])
        assert result.exit_code == 0
        assert "No vocabulary" in result.output

    def test_list_empty(self, cli_service):
        runner.invoke(app, ["db", "setup"])
        result = runner.invoke(app, ["vocab", "list"])
        assert result.exit_code == 0
        assert "No vocabularies found" in result.output


class TestTerm:
    def test_create_with_uri_and_fields(self, ready):
        record = invoke_json(
            ["term", "create", "names", "Cat", "--uri", "http://x.org/1",
             "-f", "born=1850", "-f", "place=New York", "-f", 'tags=["a","b"]']
        )
        assert record == {
            "uri": "http://x.org/1",
            "value": "Cat",
            "vocabulary_string_key": "names",
            "is_local": False,
            "born": 1850,
            "place": "New York",
            "tags": ["a", "b"],
        }

    def test_create_local(self, ready):
        record = invoke_json(["term", "create", "names", "Local"])
        assert record["is_local"] is True
        assert record["uri"].startswith(BASE + "names/")

    def test_create_duplicate_uri(self, ready):
        runner.invoke(app, ["term", "create", "names", "Cat", "--uri", "http://x.org/1"])
        result = runner.invoke(app, ["term", "create", "names", "Dog", "--uri", "http://x.org/1"])
        assert result.exit_code == 1
        assert "ExistingUriError" in result.output

    def test_create_invalid_uri(self, ready):
        result = runner.invoke(app, ["term", "create", "names", "Cat", "--uri", "not a uri"])
        assert result.exit_code == 1
        assert "InvalidUriError" in result.output

    def test_create_bad_field(self, ready):
        result = runner.invoke(app, ["term", "create", "names", "Cat", "-f", "oops"])
        assert result.exit_code == 2

    def test_find(self, ready):
        runner.invoke(app, ["term", "create", "names", "Cat", "--uri", "http://x.org/1"])
        record = invoke_json(["term", "find", "http://x.org/1"])
        assert record["value"] == "Cat"

    def test_find_missing(self, ready):
        result = runner.invoke(app, ["term", "find", "http://x.org/404"])
        assert result.exit_code == 1
        assert "No term found" in result.output

    def test_search(self, ready):
        for i, value in enumerate(["Catastrophe", "Cat", "Dog"]):
            runner.invoke(app, ["term", "create", "names", value, "--uri", f"http://x.org/{i}"])
        rows = invoke_json(["term", "search", "names", "cat"])
        assert [r["value"] for r in rows] == ["Cat", "Catastrophe"]

    def test_search_paging(self, ready):
        for i in range(5):
            runner.invoke(app, ["term", "create", "names", f"Term {i}", "--uri", f"http://x.org/{i}"])
        rows = invoke_json(["term", "search", "names", "--limit", "2", "--start", "4"])
        assert [r["value"] for r in rows] == ["Term 4"]

    def test_search_table_output(self, ready):
        runner.invoke(app, ["term", "create", "names", "Cat", "--uri", "http://x.org/1"])
        result = runner.invoke(app, ["term", "search", "names", "Cat"])
        assert result.exit_code == 0
        assert "Cat" in result.output

    def test_delete(self, ready):
        runner.invoke(app, ["term", "create", "names", "Cat", "--uri", "http://x.org/1"])
        result = runner.invoke(app, ["term", "delete", "http://x.org/1"])
        assert result.exit_code == 0
        assert runner.invoke(app, ["term", "find", "http://x.org/1"]).exit_code == 1


class TestParseFields:
    def test_json_and_plain_values(self):
        assert parse_fields(["a=1", "b=true", "c=text", "d=[1,2]", "e="]) == {
            "a": 1,
            "b": True,
            "c": "text",
            "d": [1, 2],
            "e": "",
        }

    def test_value_may_contain_equals(self):
        assert parse_fields(["q=a=b"]) == {"q": "a=b"}


class TestMakeService:
    def test_overrides_build_solr_service(self):
        service = utils.make_service(
            database="sqlite://",
            solr_url="http://solr.test/solr/uri_service",
            local_uri_base=BASE,
        )
        try:
            assert service.index.url == "http://solr.test/solr/uri_service/"
            assert service.local_uri_base == BASE
        finally:
            service.disconnect()
