"""
Search index abstraction with in-memory and Solr implementations.

The index is the query-optimized mirror of the store of record. It is not
transactional: writes are staged and become visible to readers only after
``commit()``, which callers may defer to batch several writes.

Architecture:
    ::

        SearchIndex (Protocol)
        ├── InMemoryIndex  — single process, dev and tests
        └── SolrIndex      — Solr over HTTP (httpx connection pool)

        API: add(doc)
             commit()
             delete_by_field(field, value)
             select(filters, rows, start)        → {"numFound", "docs"}
             suggest(text, filters, rows, start) → {"numFound", "docs"}
             ping()
             close()

    Ranking of ``suggest`` results belongs to the backend. Callers page with
    ``rows``/``start`` and must not re-sort.

Examples:
    >>> index = InMemoryIndex()
    >>> index.add({"uri": "http://id.example.org/1", "value": "Cat",
    ...            "vocabulary_string_key": "animals", "is_local": False})
    >>> index.select({"uri": "http://id.example.org/1"})["numFound"]
    0
    >>> index.commit()
    >>> index.select({"uri": "http://id.example.org/1"})["numFound"]
    1

Tags:
    search, solr, index, protocol, uri-spine
"""

from __future__ import annotations

import re
import threading
import time
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from urispine.core.logging import get_logger

logger = get_logger(__name__)

IndexResponse = dict[str, Any]

_SOLR_SPECIAL = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/;\s])')


def solr_escape(value: str) -> str:
    """Backslash-escape Lucene query syntax characters and whitespace."""
    return _SOLR_SPECIAL.sub(r"\\\1", value)


class SearchIndex(Protocol):
    """Protocol for search index backends."""

    def add(self, doc: Mapping[str, Any]) -> None:
        """Stage *doc*, replacing any document with the same ``uri``."""
        ...

    def commit(self) -> None:
        """Make all staged writes visible to readers."""
        ...

    def delete_by_field(self, field: str, value: str) -> None:
        """Stage deletion of every document whose *field* equals *value*.

        No-op if nothing matches.
        """
        ...

    def select(
        self, filters: Mapping[str, str], *, rows: int = 10, start: int = 0
    ) -> IndexResponse:
        """Exact-match lookup; every filter must match."""
        ...

    def suggest(
        self,
        text: str,
        filters: Mapping[str, str],
        *,
        rows: int = 10,
        start: int = 0,
    ) -> IndexResponse:
        """Ranked partial-text match on ``value``; empty *text* matches all."""
        ...

    def ping(self) -> None:
        """Raise if the index is unreachable."""
        ...

    def close(self) -> None:
        """Release connections held by the backend."""
        ...


# ------------------------------------------------------------------ #
# In-Memory Index
# ------------------------------------------------------------------ #


class InMemoryIndex:
    """Dict-backed index that mimics the Solr ``suggest`` handler.

    Ranking, best first:

    1. value equals the query (case-insensitive)
    2. query matches whole word(s) of the value
    3. query starts a word of the value
    4. query appears anywhere inside the value

    Ties sort alphabetically by value, then by uri. Non-empty queries
    shorter than ``min_query_length`` characters match nothing, like the
    edge n-gram analyzer of the Solr schema. Thread-safe.
    """

    def __init__(self, *, min_query_length: int = 3):
        self._docs: dict[str, dict[str, Any]] = {}
        self._pending: list[tuple[str, Any]] = []
        self._lock = threading.Lock()
        self._version = 0
        self._min_query_length = min_query_length
        self.commits = 0

    def add(self, doc: Mapping[str, Any]) -> None:
        with self._lock:
            self._pending.append(("add", dict(doc)))

    def commit(self) -> None:
        with self._lock:
            for op, payload in self._pending:
                if op == "add":
                    self._version += 1
                    stored = dict(payload)
                    stored["_version_"] = self._version
                    stored["timestamp"] = time.time()
                    self._docs[stored["uri"]] = stored
                else:
                    field, value = payload
                    for uri in [u for u, d in self._docs.items() if d.get(field) == value]:
                        del self._docs[uri]
            self._pending.clear()
            self.commits += 1

    def delete_by_field(self, field: str, value: str) -> None:
        with self._lock:
            self._pending.append(("delete", (field, value)))

    @property
    def pending(self) -> int:
        """Number of staged, uncommitted writes."""
        return len(self._pending)

    def _filtered(self, filters: Mapping[str, str]) -> list[dict[str, Any]]:
        with self._lock:
            return [
                dict(doc)
                for doc in self._docs.values()
                if all(doc.get(k) == v for k, v in filters.items())
            ]

    @staticmethod
    def _page(docs: list[dict[str, Any]], rows: int, start: int) -> IndexResponse:
        return {"numFound": len(docs), "start": start, "docs": docs[start:start + rows]}

    def select(
        self, filters: Mapping[str, str], *, rows: int = 10, start: int = 0
    ) -> IndexResponse:
        docs = sorted(self._filtered(filters), key=lambda d: d["uri"])
        return self._page(docs, rows, start)

    def _rank(self, query: str, value: str) -> int | None:
        candidate = " ".join(value.lower().split())
        if candidate == query:
            return 0
        if query not in candidate:
            return None
        if re.search(rf"(?<!\w){re.escape(query)}(?!\w)", candidate):
            return 1
        if re.search(rf"(?<!\w){re.escape(query)}", candidate):
            return 2
        return 3

    def suggest(
        self,
        text: str,
        filters: Mapping[str, str],
        *,
        rows: int = 10,
        start: int = 0,
    ) -> IndexResponse:
        query = " ".join(text.lower().split())
        docs = self._filtered(filters)

        if not query:
            ranked = [(0, doc) for doc in docs]
        elif len(query) < self._min_query_length:
            ranked = []
        else:
            ranked = []
            for doc in docs:
                tier = self._rank(query, str(doc.get("value") or ""))
                if tier is not None:
                    ranked.append((tier, doc))

        ranked.sort(key=lambda item: (item[0], str(item[1].get("value") or "").lower(), item[1]["uri"]))
        for tier, doc in ranked:
            doc["score"] = float(4 - tier)
        return self._page([doc for _, doc in ranked], rows, start)

    def ping(self) -> None:
        return None

    def close(self) -> None:
        return None

    def clear(self) -> None:
        """Drop every document and staged write. Testing only."""
        with self._lock:
            self._docs.clear()
            self._pending.clear()


# ------------------------------------------------------------------ #
# Solr Index
# ------------------------------------------------------------------ #


class SolrIndex:
    """Solr core accessed over HTTP.

    Uses one pooled ``httpx.Client`` for the lifetime of the index. HTTP and
    transport errors are raised as ``httpx`` exceptions, unwrapped.

    Expects the core's ``suggest`` request handler to implement the ranked
    partial match, and ``uri`` to be the schema's unique key.

    Example:
        index = SolrIndex("http://localhost:8983/solr/uri_service", pool_size=5, timeout=5.0)
        index.add({"uri": "http://id.example.org/1", "value": "Cat", ...})
        index.commit()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 5,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ):
        self.url = url.rstrip("/") + "/"
        self._client = client or httpx.Client(
            base_url=self.url,
            timeout=timeout,
            limits=httpx.Limits(max_connections=pool_size, max_keepalive_connections=pool_size),
        )

    def _update(self, payload: Any) -> None:
        response = self._client.post("update", params={"wt": "json"}, json=payload)
        response.raise_for_status()

    def _get(self, handler: str, params: Mapping[str, Any]) -> IndexResponse:
        response = self._client.get(handler, params={**params, "wt": "json"})
        response.raise_for_status()
        return response.json()["response"]

    @staticmethod
    def _filter_queries(filters: Mapping[str, str]) -> list[str]:
        return [f"{field}:{solr_escape(str(value))}" for field, value in filters.items()]

    def add(self, doc: Mapping[str, Any]) -> None:
        self._update([dict(doc)])

    def commit(self) -> None:
        self._update({"commit": {}})

    def delete_by_field(self, field: str, value: str) -> None:
        self._update({"delete": {"query": f"{field}:{solr_escape(value)}"}})

    def select(
        self, filters: Mapping[str, str], *, rows: int = 10, start: int = 0
    ) -> IndexResponse:
        return self._get(
            "select",
            {"q": "*:*", "fq": self._filter_queries(filters), "rows": rows, "start": start},
        )

    def suggest(
        self,
        text: str,
        filters: Mapping[str, str],
        *,
        rows: int = 10,
        start: int = 0,
    ) -> IndexResponse:
        return self._get(
            "suggest",
            {
                "q": "*" if text == "" else solr_escape(text),
                "fq": self._filter_queries(filters),
                "rows": rows,
                "start": start,
            },
        )

    def ping(self) -> None:
        response = self._client.get("admin/ping", params={"wt": "json"})
        response.raise_for_status()

    def close(self) -> None:
        logger.debug("solr.client_closed", url=self.url)
        self._client.close()


__all__ = [
    "InMemoryIndex",
    "IndexResponse",
    "SearchIndex",
    "SolrIndex",
    "solr_escape",
]
