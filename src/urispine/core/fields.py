"""
Suffix typing for additional fields in the search index.

The index schema is declared with dynamic fields keyed by name suffix, so an
additional field's value shape decides the name it is indexed under:

    ========================  =========
    value shape               suffix
    ========================  =========
    ``str``                   ``_ssi``
    ``bool``                  ``_bsi``
    ``int``                   ``_isi``
    list of ``int``           ``_isim``
    any other list            ``_ssim``
    ========================  =========

Anything else raises :class:`~urispine.core.errors.UnsupportedObjectTypeError`.

Lists are typed by their first element only. Boolean lists have no suffix of
their own and are indexed like string lists; heterogeneous lists are not
checked beyond the first element.

Examples:
    >>> solr_suffix_for("Cat")
    '_ssi'
    >>> solr_suffix_for([1, 2, 3])
    '_isim'
    >>> solr_field_name("birth_year", 1850)
    'birth_year_isi'

Tags:
    solr, dynamic-fields, metadata, uri-spine
"""

from __future__ import annotations

from typing import Any, Union

from urispine.core.errors import UnsupportedObjectTypeError

# Shapes accepted as additional field values.
FieldValue = Union[str, bool, int, list[str], list[int]]

STRING_SUFFIX = "_ssi"
BOOLEAN_SUFFIX = "_bsi"
INTEGER_SUFFIX = "_isi"
INTEGER_ARRAY_SUFFIX = "_isim"
STRING_ARRAY_SUFFIX = "_ssim"

SUFFIXES = (
    STRING_SUFFIX,
    BOOLEAN_SUFFIX,
    INTEGER_SUFFIX,
    INTEGER_ARRAY_SUFFIX,
    STRING_ARRAY_SUFFIX,
)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def solr_suffix_for(value: Any) -> str:
    """Return the index field suffix for *value*.

    Raises:
        UnsupportedObjectTypeError: *value* is not a supported shape.
    """
    if isinstance(value, (list, tuple)):
        if value and _is_integer(value[0]):
            return INTEGER_ARRAY_SUFFIX
        return STRING_ARRAY_SUFFIX
    # bool before int
    if isinstance(value, str):
        return STRING_SUFFIX
    if isinstance(value, bool):
        return BOOLEAN_SUFFIX
    if _is_integer(value):
        return INTEGER_SUFFIX
    raise UnsupportedObjectTypeError(
        f"Unable to determine solr suffix for unsupported object type: {type(value).__name__}",
        value=value,
    )


def solr_field_name(key: str, value: Any) -> str:
    return key + solr_suffix_for(value)


__all__ = [
    "BOOLEAN_SUFFIX",
    "FieldValue",
    "INTEGER_ARRAY_SUFFIX",
    "INTEGER_SUFFIX",
    "STRING_ARRAY_SUFFIX",
    "STRING_SUFFIX",
    "SUFFIXES",
    "solr_field_name",
    "solr_suffix_for",
]
