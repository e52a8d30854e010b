"""Record types for vocabularies and terms.

``Vocabulary`` and ``Term`` mirror rows of the store of record. Reads served
by the search index return the flat term view instead (a plain dict with the
four core fields plus one entry per additional field), which is what
:meth:`Term.to_view` produces from a store row.

Tags:
    uri-spine, models, dataclass

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from urispine.core.fields import FieldValue

TermView = dict[str, Any]


@dataclass(frozen=True)
class Vocabulary:
    """A named collection of terms, keyed by ``string_key``."""

    string_key: str
    display_label: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Term:
    """A URI-identified entry within a vocabulary."""

    uri: str
    vocabulary_string_key: str
    value: str
    is_local: bool = False
    additional_fields: dict[str, FieldValue] = field(default_factory=dict)

    def to_view(self) -> TermView:
        """Flatten into the public term view (additional fields inlined)."""
        view: TermView = {
            "uri": self.uri,
            "value": self.value,
            "vocabulary_string_key": self.vocabulary_string_key,
            "is_local": self.is_local,
        }
        view.update(self.additional_fields)
        return view


__all__ = ["Term", "TermView", "Vocabulary"]
