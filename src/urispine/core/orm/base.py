"""Declarative base for the uri-spine store of record.

Uses SQLAlchemy 2.0 ``DeclarativeBase``. Column types are declared
explicitly on each table because the DDL has to stay portable across
SQLite, PostgreSQL and MySQL (fixed-width ``uri_hash``, bounded
``string_key``).
"""

from __future__ import annotations

from sqlalchemy import Boolean, Text
from sqlalchemy.orm import DeclarativeBase


class UriServiceBase(DeclarativeBase):
    """Shared declarative base for every uri-spine table."""

    type_annotation_map = {
        str: Text,
        bool: Boolean,
    }
