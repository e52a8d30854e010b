"""Vocabulary registry — create/find/update/delete vocabulary rows.

Deleting a vocabulary never touches its terms; orphaned terms remain in the
store and the index until deleted individually.

Tags:
    uri-spine, repository, vocabularies
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from urispine.core.errors import ExistingVocabularyStringKeyError, NonExistentVocabularyError
from urispine.core.logging import get_logger
from urispine.core.models import Vocabulary
from urispine.core.orm import VocabularyTable, is_unique_violation
from urispine.core.validation import validate_vocabulary_key

logger = get_logger(__name__)


def _to_vocabulary(row: VocabularyTable) -> Vocabulary:
    return Vocabulary(string_key=row.string_key, display_label=row.display_label)


class VocabularyRegistry:
    """CRUD for the ``vocabularies`` table.

    Parameters:
        sessions: ``sessionmaker`` bound to the store of record. Each call
                  runs in its own short transaction.
    """

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions

    def create(self, string_key: str, display_label: str) -> Vocabulary:
        """Create a vocabulary.

        Raises:
            InvalidVocabularyStringKeyError: key is malformed or ``"all"``.
            ExistingVocabularyStringKeyError: key is already taken.
        """
        validate_vocabulary_key(string_key)
        try:
            with self._sessions.begin() as session:
                session.add(VocabularyTable(string_key=string_key, display_label=display_label))
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ExistingVocabularyStringKeyError(string_key, cause=exc) from exc
            raise
        logger.info("vocabulary.created", string_key=string_key)
        return Vocabulary(string_key=string_key, display_label=display_label)

    def find(self, string_key: str) -> Vocabulary | None:
        with self._sessions() as session:
            row = session.scalars(
                select(VocabularyTable).where(VocabularyTable.string_key == string_key)
            ).first()
            return _to_vocabulary(row) if row is not None else None

    def exists(self, string_key: str) -> bool:
        return self.find(string_key) is not None

    def list_vocabularies(self) -> list[Vocabulary]:
        """All vocabularies, ordered by string key."""
        with self._sessions() as session:
            rows = session.scalars(select(VocabularyTable).order_by(VocabularyTable.string_key))
            return [_to_vocabulary(row) for row in rows]

    def update(self, string_key: str, display_label: str) -> Vocabulary:
        """Change the display label.

        Raises:
            NonExistentVocabularyError: no vocabulary has this key.
        """
        with self._sessions.begin() as session:
            row = session.scalars(
                select(VocabularyTable).where(VocabularyTable.string_key == string_key)
            ).first()
            if row is None:
                raise NonExistentVocabularyError(string_key)
            row.display_label = display_label
        logger.info("vocabulary.updated", string_key=string_key)
        return Vocabulary(string_key=string_key, display_label=display_label)

    def delete(self, string_key: str) -> None:
        """Delete unconditionally; a missing key is not an error."""
        with self._sessions.begin() as session:
            result = session.execute(
                delete(VocabularyTable).where(VocabularyTable.string_key == string_key)
            )
        logger.info("vocabulary.deleted", string_key=string_key, rows=result.rowcount)


__all__ = ["VocabularyRegistry"]
