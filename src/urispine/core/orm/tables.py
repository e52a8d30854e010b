"""SQLAlchemy 2.0 table definitions for vocabularies and terms.

``terms.uri`` is ``TEXT`` because a URI may be up to ~2000 characters,
longer than MySQL allows for an indexed utf8 column. Uniqueness is enforced
on ``terms.uri_hash`` (SHA-256 hex digest) instead. There is deliberately no
foreign key from ``terms.vocabulary_string_key`` to ``vocabularies``:
vocabulary existence is checked by the service at write time.

Usage::

    from urispine.core.orm import UriServiceBase, create_uri_engine

    engine = create_uri_engine("sqlite:///uri_service.db")
    UriServiceBase.metadata.create_all(engine)
"""

from __future__ import annotations

from sqlalchemy import CHAR, Boolean, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from urispine.core.hashing import URI_HASH_LENGTH
from urispine.core.orm.base import UriServiceBase

VOCABULARIES = "vocabularies"
TERMS = "terms"

REQUIRED_TABLES = (VOCABULARIES, TERMS)


class VocabularyTable(UriServiceBase):
    __tablename__ = VOCABULARIES

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    string_key: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    display_label: Mapped[str | None] = mapped_column(String(255))


class TermTable(UriServiceBase):
    __tablename__ = TERMS

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vocabulary_string_key: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    uri: Mapped[str] = mapped_column(Text, nullable=False)
    uri_hash: Mapped[str] = mapped_column(CHAR(URI_HASH_LENGTH), unique=True, nullable=False)
    value: Mapped[str | None] = mapped_column(Text)
    is_local: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)
    additional_fields: Mapped[str | None] = mapped_column(Text)


__all__ = [
    "REQUIRED_TABLES",
    "TERMS",
    "TermTable",
    "VOCABULARIES",
    "VocabularyTable",
]
