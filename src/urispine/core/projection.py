"""
Projection between term records and search index documents.

Architecture:
    ::

        Term (store row)                      index document
        ┌──────────────────────────┐          ┌──────────────────────────┐
        │ uri                      │ ───────▶ │ uri                      │
        │ value                    │          │ value                    │
        │ vocabulary_string_key    │          │ vocabulary_string_key    │
        │ is_local                 │          │ is_local                 │
        │ additional_fields        │          │ <key><suffix> per field  │
        │   {"born": 1850}         │          │   born_isi: 1850         │
        └──────────────────────────┘          └──────────────────────────┘
                                                      │
        term view (flat dict)      ◀───────────────── ┘
        {"uri", "value", "vocabulary_string_key", "is_local", "born": 1850}

    The reverse direction strips the text after the last underscore of every
    non-core field name. A caller key such as ``"place_ssi"`` indexed as
    ``"place_ssi_ssi"`` round-trips, but a suffix-looking segment can never be
    told apart from a real one without changing the wire format, so the
    mapping is knowingly lossy for such keys.

Tags:
    solr, projection, serialization, uri-spine
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from urispine.core.fields import solr_field_name
from urispine.core.models import Term, TermView
from urispine.core.validation import CORE_FIELD_NAMES

# Added by the index itself, never part of a term.
INDEX_BOOKKEEPING_FIELDS = frozenset({"_version_", "timestamp", "score"})


def to_index_document(term: Term) -> dict[str, Any]:
    """Build the index document for *term*.

    Raises:
        UnsupportedObjectTypeError: an additional field value has no suffix.
    """
    doc: dict[str, Any] = {
        "uri": term.uri,
        "value": term.value,
        "is_local": term.is_local,
        "vocabulary_string_key": term.vocabulary_string_key,
    }
    for key, value in term.additional_fields.items():
        doc[solr_field_name(key, value)] = value
    return doc


def strip_suffix(field_name: str) -> str:
    """Drop the trailing ``_<segment>`` from *field_name*, if any."""
    head, sep, tail = field_name.rpartition("_")
    return head if sep and tail else field_name


def from_index_document(doc: Mapping[str, Any]) -> TermView:
    """Convert an index document back into the public term view."""
    view: TermView = {}
    for key, value in doc.items():
        if key in INDEX_BOOKKEEPING_FIELDS:
            continue
        if key in CORE_FIELD_NAMES:
            view[key] = value
        else:
            view[strip_suffix(key)] = value
    return view


__all__ = [
    "INDEX_BOOKKEEPING_FIELDS",
    "from_index_document",
    "strip_suffix",
    "to_index_document",
]
