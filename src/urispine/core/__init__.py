"""
uri-spine core — controlled-vocabulary terms in a relational store of record,
mirrored into a search index.

Modules:
    validation    key / URI / additional-field checks
    fields        additional-field value → index suffix typing
    projection    term record ⇄ index document
    vocabularies  vocabulary registry
    terms         term coordinator (store + index writes)
    query         term reads from the index
    index         SearchIndex protocol, InMemoryIndex, SolrIndex
    service       UriService facade and lifecycle
    orm           SQLAlchemy tables, engine and session factories
    errors        typed error hierarchy
    logging       structlog configuration
    settings      pydantic-settings configuration
"""

from urispine.core.errors import (
    ExistingUriError,
    ExistingVocabularyStringKeyError,
    InvalidAdditionalFieldKeyError,
    InvalidOptsError,
    InvalidUriError,
    InvalidVocabularyStringKeyError,
    LocalUriGenerationError,
    NonExistentUriError,
    NonExistentVocabularyError,
    UnsupportedObjectTypeError,
    UriServiceError,
)
from urispine.core.index import InMemoryIndex, SearchIndex, SolrIndex
from urispine.core.models import Term, TermView, Vocabulary
from urispine.core.service import UriService

__all__ = [
    "ExistingUriError",
    "ExistingVocabularyStringKeyError",
    "InMemoryIndex",
    "InvalidAdditionalFieldKeyError",
    "InvalidOptsError",
    "InvalidUriError",
    "InvalidVocabularyStringKeyError",
    "LocalUriGenerationError",
    "NonExistentUriError",
    "NonExistentVocabularyError",
    "SearchIndex",
    "SolrIndex",
    "Term",
    "TermView",
    "UnsupportedObjectTypeError",
    "UriService",
    "UriServiceError",
    "Vocabulary",
]
