"""SQLAlchemy engine factory, session factory and constraint helpers.

This module provides:

* ``create_uri_engine``     -- Create a SA engine from a URL with pool settings.
* ``UriServiceSession``     -- A pre-configured ``Session`` subclass.
* ``uri_session_factory``   -- ``sessionmaker`` producing ``UriServiceSession``.
* ``is_unique_violation``   -- Classify an ``IntegrityError`` as a unique conflict.

Tags:
    uri-spine, orm, sqlalchemy, session, engine
"""

from __future__ import annotations

import threading
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Driver messages for unique-constraint failures:
#   sqlite:   "UNIQUE constraint failed: terms.uri_hash"
#   postgres: "duplicate key value violates unique constraint ..."
#   mysql:    "Duplicate entry '...' for key 'uri_hash'"
_UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _serialize_checkouts(engine: Engine) -> None:
    """Hand the shared connection to one thread at a time.

    A thread keeps it from checkout to checkin, so transactions from
    different threads never interleave on the one DBAPI connection.
    Re-entrant for nested checkouts within a thread.
    """
    lock = threading.RLock()

    @event.listens_for(engine, "checkout")
    def _acquire(dbapi_connection: Any, _rec: Any, _proxy: Any) -> None:
        lock.acquire()

    @event.listens_for(engine, "checkin")
    def _release(dbapi_connection: Any, _rec: Any) -> None:
        lock.release()


def create_uri_engine(
    url: str = "sqlite:///uri_service.db",
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``sqlite:///…``, ``postgresql://…``, etc.)
    echo:
        If ``True``, log all SQL to stdout.
    pool_size, max_overflow, pool_timeout:
        Connection pool parameters (ignored for SQLite).
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every pooled connection
            # would see its own empty database.
            kwargs.setdefault("poolclass", StaticPool)
            engine = _sa_create_engine(url, echo=echo, **kwargs)
            _serialize_checkouts(engine)
            return engine

        engine = _sa_create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        return engine

    pool_kwargs: dict[str, Any] = {}
    if pool_size is not None:
        pool_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        pool_kwargs["max_overflow"] = max_overflow
    if pool_timeout is not None:
        pool_kwargs["pool_timeout"] = pool_timeout

    return _sa_create_engine(url, echo=echo, **pool_kwargs, **kwargs)


class UriServiceSession(Session):
    """Pre-configured session with ``expire_on_commit=False``.

    Rows loaded inside a transaction stay readable after it commits.
    """

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def uri_session_factory(engine: Engine) -> sessionmaker[UriServiceSession]:
    """Return a ``sessionmaker`` bound to *engine* that produces ``UriServiceSession`` instances."""
    return sessionmaker(bind=engine, class_=UriServiceSession, expire_on_commit=False)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when *exc* was raised by a unique constraint (not NOT NULL, FK, ...)."""
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS)


__all__ = [
    "UriServiceSession",
    "create_uri_engine",
    "is_unique_violation",
    "uri_session_factory",
]
