"""
UriService — the public entry point of uri-spine.

Composes the vocabulary registry, the term coordinator and the query gateway
over one store engine and one search index. Construct one instance at
startup and pass it to whatever needs it; there is no module-level client.

Examples:
    >>> from urispine.core.index import InMemoryIndex
    >>> service = UriService(
    ...     local_uri_base="http://id.example.org/term/",
    ...     database="sqlite://",
    ...     index=InMemoryIndex(),
    ... )
    >>> service.create_required_tables()
    ['vocabularies', 'terms']
    >>> service.create_vocabulary("names", "Names")
    Vocabulary(string_key='names', display_label='Names')
    >>> service.create_term("names", "Cat", "http://id.example.org/cat")
    Term(uri='http://id.example.org/cat', ...)
    >>> service.find_term_by_uri("http://id.example.org/cat")["value"]
    'Cat'

Tags:
    uri-spine, service, facade, lifecycle
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from urispine.core.errors import InvalidOptsError
from urispine.core.fields import FieldValue
from urispine.core.index import SearchIndex, SolrIndex
from urispine.core.logging import get_logger
from urispine.core.models import Term, TermView, Vocabulary
from urispine.core.orm import REQUIRED_TABLES, UriServiceBase, create_uri_engine, uri_session_factory
from urispine.core.query import QueryGateway
from urispine.core.settings import UriServiceSettings, get_settings
from urispine.core.terms import TermCoordinator
from urispine.core.vocabularies import VocabularyRegistry

logger = get_logger(__name__)


class UriService:
    """Vocabulary and term operations over a store engine and a search index.

    Parameters:
        local_uri_base: Base URI for locally minted terms.
        database: SQLAlchemy ``Engine`` or database URL.
        index: Search index backend, or a Solr core URL.

    Raises:
        InvalidOptsError: a required collaborator is missing.
    """

    def __init__(
        self,
        *,
        local_uri_base: str | None,
        database: Engine | str | None,
        index: SearchIndex | str | None,
    ) -> None:
        if not local_uri_base:
            raise InvalidOptsError("local_uri_base")
        if database is None or database == "":
            raise InvalidOptsError("database")
        if index is None or index == "":
            raise InvalidOptsError("solr")
        if isinstance(index, str):
            index = SolrIndex(index)

        self.local_uri_base = local_uri_base
        self.engine: Engine | None = (
            database if isinstance(database, Engine) else create_uri_engine(database)
        )
        self.index: SearchIndex | None = index

        sessions = uri_session_factory(self.engine)
        self.vocabularies = VocabularyRegistry(sessions)
        self.terms = TermCoordinator(sessions, index, self.vocabularies, local_uri_base)
        self.queries = QueryGateway(index)

    @classmethod
    def from_settings(cls, settings: UriServiceSettings | None = None) -> UriService:
        """Build a Solr-backed service from :class:`UriServiceSettings`."""
        settings = (settings or get_settings()).require()
        engine = create_uri_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
        )
        index = SolrIndex(
            settings.solr_url,
            pool_size=settings.solr_pool_size,
            timeout=settings.solr_pool_timeout_seconds,
        )
        return cls(local_uri_base=settings.local_uri_base, database=engine, index=index)

    # -- lifecycle -------------------------------------------------------------

    def disconnect(self) -> None:
        """Dispose of the engine pool and close the index. Idempotent."""
        if self.engine is not None:
            engine, self.engine = self.engine, None
            engine.dispose()
        if self.index is not None:
            index, self.index = self.index, None
            index.close()
        logger.info("service.disconnected")

    def _require_connected(self) -> None:
        if self.engine is None or self.index is None:
            raise InvalidOptsError("database", "The uri service has been disconnected.")

    def test_connection(self) -> None:
        """Round-trip the store and the index; connection errors propagate."""
        self._require_connected()
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        self.index.ping()

    def connected(self) -> bool:
        if self.engine is None or self.index is None:
            return False
        try:
            self.test_connection()
        except (OperationalError, httpx.HTTPError) as exc:
            logger.warning("service.connection_failed", error=str(exc))
            return False
        return True

    def required_tables_exist(self) -> bool:
        self._require_connected()
        existing = set(inspect(self.engine).get_table_names())
        return set(REQUIRED_TABLES) <= existing

    def create_required_tables(self) -> list[str]:
        """Create missing tables, skipping existing ones. Returns the names created."""
        self._require_connected()
        existing = set(inspect(self.engine).get_table_names())
        created = []
        for name in REQUIRED_TABLES:
            if name in existing:
                logger.info("table.skipped", table=name, reason="already exists")
                continue
            UriServiceBase.metadata.tables[name].create(self.engine)
            logger.info("table.created", table=name)
            created.append(name)
        return created

    # -- vocabularies ----------------------------------------------------------

    def create_vocabulary(self, string_key: str, display_label: str) -> Vocabulary:
        return self.vocabularies.create(string_key, display_label)

    def find_vocabulary(self, string_key: str) -> Vocabulary | None:
        return self.vocabularies.find(string_key)

    def list_vocabularies(self) -> list[Vocabulary]:
        return self.vocabularies.list_vocabularies()

    def update_vocabulary(self, string_key: str, display_label: str) -> Vocabulary:
        return self.vocabularies.update(string_key, display_label)

    def delete_vocabulary(self, string_key: str) -> None:
        self.vocabularies.delete(string_key)

    # -- terms -----------------------------------------------------------------

    def create_term(
        self,
        vocabulary_string_key: str,
        value: str,
        uri: str,
        additional_fields: Mapping[str, FieldValue] | None = None,
        *,
        commit: bool = True,
    ) -> Term:
        return self.terms.create_term(
            vocabulary_string_key, value, uri, additional_fields, commit=commit
        )

    def create_local_term(
        self,
        vocabulary_string_key: str,
        value: str,
        additional_fields: Mapping[str, FieldValue] | None = None,
        *,
        commit: bool = True,
    ) -> Term:
        return self.terms.create_local_term(
            vocabulary_string_key, value, additional_fields, commit=commit
        )

    def find_term_by_uri(self, uri: str) -> TermView | None:
        return self.queries.find_term_by_uri(uri)

    def find_term_record(self, uri: str) -> Term | None:
        return self.terms.find_term_record(uri)

    def find_terms_by_query(
        self,
        vocabulary_string_key: str,
        value_query: str = "",
        limit: int = 10,
        start: int = 0,
    ) -> list[TermView]:
        return self.queries.find_terms_by_query(vocabulary_string_key, value_query, limit, start)

    def update_term(
        self,
        uri: str,
        *,
        value: str | None = None,
        additional_fields: Mapping[str, FieldValue | None] | None = None,
        merge_additional_fields: bool = True,
        commit: bool = True,
    ) -> Term:
        return self.terms.update_term(
            uri,
            value=value,
            additional_fields=additional_fields,
            merge_additional_fields=merge_additional_fields,
            commit=commit,
        )

    def delete_term(self, uri: str, *, commit: bool = True) -> None:
        self.terms.delete_term(uri, commit=commit)

    def commit_index(self) -> None:
        """Make index writes issued with ``commit=False`` visible."""
        self._require_connected()
        self.index.commit()


__all__ = ["UriService"]
