"""SQLAlchemy 2.0 ORM layer for the uri-spine store of record.

Modules
-------
base        UriServiceBase (declarative base)
session     Engine factory, UriServiceSession, unique-violation helper
tables      VocabularyTable, TermTable
"""

from __future__ import annotations

from urispine.core.orm.base import UriServiceBase
from urispine.core.orm.session import (
    UriServiceSession,
    create_uri_engine,
    is_unique_violation,
    uri_session_factory,
)
from urispine.core.orm.tables import (
    REQUIRED_TABLES,
    TERMS,
    VOCABULARIES,
    TermTable,
    VocabularyTable,
)

__all__ = [
    "REQUIRED_TABLES",
    "TERMS",
    "VOCABULARIES",
    "TermTable",
    "UriServiceBase",
    "UriServiceSession",
    "VocabularyTable",
    "create_uri_engine",
    "is_unique_violation",
    "uri_session_factory",
]
