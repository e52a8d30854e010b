"""
Shared pytest fixtures and configuration for uri-spine tests.

This module provides:
- In-memory SQLite engine with the required tables
- InMemoryIndex standing in for Solr
- A fully wired UriService and a vocabulary to write terms into

Usage:
    Fixtures are auto-discovered by pytest. Request them as test arguments:

    def test_something(service, vocabulary):
        service.create_term(vocabulary, "Cat", "http://id.example.org/cat")
"""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from urispine.core.index import InMemoryIndex
from urispine.core.orm import UriServiceBase, create_uri_engine
from urispine.core.service import UriService

LOCAL_URI_BASE = "http://id.library.example.edu/term/"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo logging configuration done by a test (the CLI configures it per run)."""
    yield
    structlog.reset_defaults()


# =============================================================================
# Store / index fixtures
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_uri_engine("sqlite://")
    UriServiceBase.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def index() -> InMemoryIndex:
    return InMemoryIndex()


@pytest.fixture
def service(engine, index) -> Generator[UriService, None, None]:
    """UriService over the in-memory engine and index."""
    svc = UriService(local_uri_base=LOCAL_URI_BASE, database=engine, index=index)
    yield svc
    svc.disconnect()


@pytest.fixture
def vocabulary(service) -> str:
    """A created vocabulary; returns its string key."""
    service.create_vocabulary("names", "Names")
    return "names"
