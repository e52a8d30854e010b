"""
Term coordinator — writes terms to the store of record and the search index.

Each write is one store transaction followed by an index write issued from
inside that transaction, so the store commits only after the index accepted
the document:

Architecture:
    ::

        create_term / update_term
        ┌──────────────────────────────────────────────────────────────┐
        │ 1. check vocabulary, uri, additional fields                   │
        │ 2. build index document (rejects unsupported value shapes)    │
        │ 3. BEGIN store transaction                                     │
        │      insert/update row, flush                                  │
        │        └─ unique(uri_hash) violation → ExistingUriError        │
        │      index.add(doc); index.commit() if commit                  │
        │ 4. COMMIT store transaction                                    │
        └──────────────────────────────────────────────────────────────┘

    Failure windows:
        - index.add fails          → store rolls back, nothing persisted
        - anything fails after
          index.add returned       → store rolls back; the reverse index
          (index commit, store       write is staged (delete the new doc,
          commit, ...)               restore the previous one) and
                                     committed if ``commit``; logged as
                                     ``term.store_index_divergence`` with
                                     ``compensated`` true or false

    The two systems share no transaction and there is no reconciliation job;
    when the reverse write fails too (index unreachable) the divergence log
    is the only record of the window.

Concurrency:
    The coordinator keeps no per-call state. Concurrent creates of the same
    URI race on the store's unique ``uri_hash`` index: one wins, the others
    get :class:`ExistingUriError` and never reach the index. Concurrent
    update/delete of one URI can leave the index in the state of whichever
    index write landed last.

Tags:
    uri-spine, terms, dual-write, solr, sqlalchemy
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from urispine.core.errors import (
    ExistingUriError,
    LocalUriGenerationError,
    NonExistentUriError,
    NonExistentVocabularyError,
)
from urispine.core.fields import FieldValue
from urispine.core.hashing import uri_hash
from urispine.core.index import SearchIndex
from urispine.core.logging import get_logger
from urispine.core.models import Term
from urispine.core.orm import TermTable, is_unique_violation
from urispine.core.projection import to_index_document
from urispine.core.validation import validate_additional_fields, validate_uri
from urispine.core.vocabularies import VocabularyRegistry

logger = get_logger(__name__)

MAX_LOCAL_URI_ATTEMPTS = 5


def serialize_additional_fields(additional_fields: Mapping[str, Any]) -> str:
    return json.dumps(dict(additional_fields), separators=(",", ":"))


def deserialize_additional_fields(raw: str | None) -> dict[str, FieldValue]:
    return json.loads(raw) if raw else {}


def _to_term(row: TermTable) -> Term:
    return Term(
        uri=row.uri,
        vocabulary_string_key=row.vocabulary_string_key,
        value=row.value,
        is_local=bool(row.is_local),
        additional_fields=deserialize_additional_fields(row.additional_fields),
    )


class TermCoordinator:
    """Create, update and delete terms across the store and the index.

    Parameters:
        sessions: ``sessionmaker`` bound to the store of record.
        index: Search index backend.
        vocabularies: Registry used to check that a vocabulary exists.
        local_uri_base: Base URI under which local terms are minted.
        uuid_factory: Source of random identifiers for local URIs.
    """

    def __init__(
        self,
        sessions: sessionmaker[Session],
        index: SearchIndex,
        vocabularies: VocabularyRegistry,
        local_uri_base: str,
        *,
        uuid_factory: Callable[[], Any] = uuid.uuid4,
    ) -> None:
        self._sessions = sessions
        self._index = index
        self._vocabularies = vocabularies
        self.local_uri_base = local_uri_base
        self._uuid_factory = uuid_factory

    # -- create ----------------------------------------------------------------

    def create_term(
        self,
        vocabulary_string_key: str,
        value: str,
        uri: str,
        additional_fields: Mapping[str, FieldValue] | None = None,
        *,
        commit: bool = True,
    ) -> Term:
        """Create a term with a caller-supplied URI.

        Raises:
            NonExistentVocabularyError, InvalidUriError,
            InvalidAdditionalFieldKeyError, UnsupportedObjectTypeError,
            ExistingUriError
        """
        return self._create(
            vocabulary_string_key, value, uri, additional_fields, is_local=False, commit=commit
        )

    def create_local_term(
        self,
        vocabulary_string_key: str,
        value: str,
        additional_fields: Mapping[str, FieldValue] | None = None,
        *,
        commit: bool = True,
    ) -> Term:
        """Create a term under a freshly minted local URI.

        A URI collision regenerates the random part and retries, up to
        :data:`MAX_LOCAL_URI_ATTEMPTS` attempts in total.

        Raises:
            LocalUriGenerationError: every attempt collided.
        """
        for attempt in range(1, MAX_LOCAL_URI_ATTEMPTS + 1):
            uri = self.local_uri(vocabulary_string_key)
            try:
                return self._create(
                    vocabulary_string_key, value, uri, additional_fields, is_local=True, commit=commit
                )
            except ExistingUriError:
                logger.error("term.local_uri_collision", uri=uri, attempt=attempt)
        raise LocalUriGenerationError(vocabulary_string_key, MAX_LOCAL_URI_ATTEMPTS)

    def local_uri(self, vocabulary_string_key: str) -> str:
        """``<local_uri_base>/<vocabulary_string_key>/<random uuid>``."""
        return f"{self.local_uri_base.rstrip('/')}/{vocabulary_string_key}/{self._uuid_factory()}"

    def _create(
        self,
        vocabulary_string_key: str,
        value: str,
        uri: str,
        additional_fields: Mapping[str, FieldValue] | None,
        *,
        is_local: bool,
        commit: bool,
    ) -> Term:
        fields = dict(additional_fields or {})

        if not self._vocabularies.exists(vocabulary_string_key):
            raise NonExistentVocabularyError(vocabulary_string_key).with_context(uri=uri)
        if not is_local:
            validate_uri(uri)
        validate_additional_fields(fields)

        term = Term(
            uri=uri,
            vocabulary_string_key=vocabulary_string_key,
            value=value,
            is_local=is_local,
            additional_fields=fields,
        )
        doc = to_index_document(term)

        index_written = False
        try:
            with self._sessions.begin() as session:
                session.add(
                    TermTable(
                        vocabulary_string_key=vocabulary_string_key,
                        uri=uri,
                        uri_hash=uri_hash(uri),
                        value=value,
                        is_local=is_local,
                        additional_fields=serialize_additional_fields(fields),
                    )
                )
                try:
                    session.flush()
                except IntegrityError as exc:
                    if is_unique_violation(exc):
                        raise ExistingUriError(uri, cause=exc) from exc
                    raise
                self._index.add(doc)
                index_written = True
                if commit:
                    self._index.commit()
        except Exception as exc:
            if index_written:
                self._revert_index(
                    uri, "create", exc, lambda: self._index.delete_by_field("uri", uri), commit
                )
            raise

        logger.info(
            "term.created",
            uri=uri,
            vocabulary_string_key=vocabulary_string_key,
            is_local=is_local,
        )
        return term

    # -- read (store of record) --------------------------------------------------

    def find_term_record(self, uri: str) -> Term | None:
        """Read a term from the store, bypassing the index."""
        with self._sessions() as session:
            row = session.scalars(select(TermTable).where(TermTable.uri_hash == uri_hash(uri))).first()
            return _to_term(row) if row is not None else None

    # -- update ----------------------------------------------------------------

    def update_term(
        self,
        uri: str,
        *,
        value: str | None = None,
        additional_fields: Mapping[str, FieldValue | None] | None = None,
        merge_additional_fields: bool = True,
        commit: bool = True,
    ) -> Term:
        """Update a term's value and/or additional fields.

        With ``merge_additional_fields`` the supplied fields are merged onto
        the existing ones and any key whose merged value is ``None`` is
        removed; that is how a single field is cleared. Without it the
        supplied map replaces the existing one wholesale.

        Raises:
            NonExistentUriError, InvalidAdditionalFieldKeyError,
            UnsupportedObjectTypeError
        """
        index_written = False
        previous_doc: dict[str, Any] = {}
        try:
            with self._sessions.begin() as session:
                row = session.scalars(
                    select(TermTable).where(TermTable.uri_hash == uri_hash(uri))
                ).first()
                if row is None:
                    raise NonExistentUriError(uri)
                previous_doc = to_index_document(_to_term(row))

                new_value = value if value is not None else row.value
                new_fields: dict[str, Any] = deserialize_additional_fields(row.additional_fields)
                if additional_fields is not None:
                    if merge_additional_fields:
                        new_fields.update(additional_fields)
                        new_fields = {k: v for k, v in new_fields.items() if v is not None}
                    else:
                        new_fields = dict(additional_fields)
                validate_additional_fields(new_fields)

                term = Term(
                    uri=row.uri,
                    vocabulary_string_key=row.vocabulary_string_key,
                    value=new_value,
                    is_local=bool(row.is_local),
                    additional_fields=new_fields,
                )
                doc = to_index_document(term)

                row.value = new_value
                row.additional_fields = serialize_additional_fields(new_fields)
                session.flush()
                self._index.add(doc)
                index_written = True
                if commit:
                    self._index.commit()
        except Exception as exc:
            if index_written:
                self._revert_index(
                    uri, "update", exc, lambda: self._index.add(previous_doc), commit
                )
            raise

        logger.info("term.updated", uri=uri)
        return term

    # -- delete ----------------------------------------------------------------

    def delete_term(self, uri: str, *, commit: bool = True) -> None:
        """Remove a term from the store and the index.

        Both removals are attempted even when the term does not exist.
        """
        index_written = False
        previous_doc: dict[str, Any] | None = None
        try:
            with self._sessions.begin() as session:
                row = session.scalars(
                    select(TermTable).where(TermTable.uri_hash == uri_hash(uri))
                ).first()
                if row is not None:
                    previous_doc = to_index_document(_to_term(row))
                    session.delete(row)
                    session.flush()
                self._index.delete_by_field("uri", uri)
                index_written = True
                if commit:
                    self._index.commit()
        except Exception as exc:
            if index_written and previous_doc is not None:
                self._revert_index(
                    uri, "delete", exc, lambda: self._index.add(previous_doc), commit
                )
            raise
        logger.info("term.deleted", uri=uri, existed=previous_doc is not None)

    # -- index -----------------------------------------------------------------

    def _revert_index(
        self,
        uri: str,
        operation: str,
        error: Exception,
        undo: Callable[[], None],
        commit: bool,
    ) -> None:
        """Stage the reverse of an index write whose store transaction failed.

        Never raises; the caller re-raises *error*.
        """
        try:
            undo()
            if commit:
                self._index.commit()
        except Exception as undo_error:  # index still failing
            logger.error(
                "term.store_index_divergence",
                uri=uri,
                operation=operation,
                error=str(error),
                compensated=False,
                compensation_error=str(undo_error),
            )
            return
        logger.error(
            "term.store_index_divergence",
            uri=uri,
            operation=operation,
            error=str(error),
            compensated=True,
        )


__all__ = [
    "MAX_LOCAL_URI_ATTEMPTS",
    "TermCoordinator",
    "deserialize_additional_fields",
    "serialize_additional_fields",
]
