"""Query gateway — term reads served by the search index.

Reads go to the index, not the store, so a write with ``commit=False`` is
not visible here until the index is committed.
"""

from __future__ import annotations

from urispine.core.index import SearchIndex
from urispine.core.models import TermView
from urispine.core.projection import from_index_document


class QueryGateway:
    """Builds index queries and projects the hits into term views."""

    def __init__(self, index: SearchIndex) -> None:
        self._index = index

    def find_term_by_uri(self, uri: str) -> TermView | None:
        """Exact lookup on ``uri``; ``None`` unless exactly one document matches."""
        response = self._index.select({"uri": uri}, rows=2)
        if response["numFound"] == 1:
            return from_index_document(response["docs"][0])
        return None

    def find_terms_by_query(
        self,
        vocabulary_string_key: str,
        value_query: str = "",
        limit: int = 10,
        start: int = 0,
    ) -> list[TermView]:
        """Ranked partial match on ``value`` within one vocabulary.

        An empty *value_query* matches every term of the vocabulary. Results
        keep the index's order.
        """
        response = self._index.suggest(
            value_query,
            {"vocabulary_string_key": vocabulary_string_key},
            rows=limit,
            start=start,
        )
        return [from_index_document(doc) for doc in response["docs"]]


__all__ = ["QueryGateway"]
