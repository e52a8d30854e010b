"""
CLI: ``uri-spine term`` — term creation, lookup and search.

Additional fields are passed as ``--field key=value``. Values are read as
JSON when they parse (``year=1850``, ``tags=["a","b"]``, ``living=true``)
and as plain strings otherwise (``place=New York``).
"""

from __future__ import annotations

import json
from typing import Any

import typer

from urispine.cli.utils import console, err_console, open_service, output_record, output_records

app = typer.Typer(no_args_is_help=True)


def parse_fields(pairs: list[str]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--field")
        try:
            fields[key] = json.loads(raw)
        except json.JSONDecodeError:
            fields[key] = raw
    return fields


@app.command("create")
def create_term(
    vocabulary_string_key: str = typer.Argument(..., help="Vocabulary key"),
    value: str = typer.Argument(..., help="Display value"),
    uri: str | None = typer.Option(None, "--uri", help="Term URI (omit to mint a local URI)"),
    field: list[str] = typer.Option([], "--field", "-f", help="Additional field key=value"),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    local_uri_base: str | None = typer.Option(None, "--local-uri-base"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Create a term, or a local term when no --uri is given."""
    fields = parse_fields(field)
    with open_service(database, solr_url, local_uri_base) as service:
        if uri is None:
            term = service.create_local_term(vocabulary_string_key, value, fields)
        else:
            term = service.create_term(vocabulary_string_key, value, uri, fields)
    output_record(term.to_view(), as_json=json_out, title="Term")


@app.command("find")
def find_term(
    uri: str = typer.Argument(...),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Look up a term by URI in the search index."""
    with open_service(database, solr_url) as service:
        term = service.find_term_by_uri(uri)
    if term is None:
        err_console.print(f"[yellow]No term found with uri {uri}[/yellow]")
        raise typer.Exit(code=1)
    output_record(term, as_json=json_out, title="Term")


@app.command("search")
def search_terms(
    vocabulary_string_key: str = typer.Argument(...),
    text: str = typer.Argument("", help="Partial value; empty matches all"),
    limit: int = typer.Option(10, "--limit", "-n"),
    start: int = typer.Option(0, "--start"),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Ranked partial-match search within a vocabulary."""
    with open_service(database, solr_url) as service:
        terms = service.find_terms_by_query(vocabulary_string_key, text, limit, start)
    output_records(terms, as_json=json_out, title="Terms")


@app.command("delete")
def delete_term(
    uri: str = typer.Argument(...),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
) -> None:
    """Delete a term from the store and the index."""
    with open_service(database, solr_url) as service:
        service.delete_term(uri)
    console.print(f"[green]Deleted[/green] {uri}")
