"""
Identifier and metadata validation.

Pure functions: each returns ``None`` on success and raises a typed
:class:`~urispine.core.errors.ValidationError` subclass on failure.

Rules:
    - Keys (vocabulary string keys and additional field keys) start with a
      lowercase letter and contain only lowercase letters, digits and
      underscores.
    - ``"all"`` is reserved and never a valid vocabulary key.
    - Term URIs are absolute ``http``/``https`` URIs.
    - Additional field keys never shadow a core field name.

Examples:
    >>> validate_key("subject_terms")
    >>> validate_key("_hidden")
    Traceback (most recent call last):
    ...
    urispine.core.errors.InvalidKeyError: Invalid key ...

Tags:
    validation, uri, vocabulary, uri-spine
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from urispine.core.errors import (
    InvalidAdditionalFieldKeyError,
    InvalidKeyError,
    InvalidUriError,
    InvalidVocabularyStringKeyError,
)

KEY_PATTERN = re.compile(r"\A[a-z][a-z0-9_]*\Z")

# scheme://authority[/path][?query][#fragment], no whitespace anywhere
URI_PATTERN = re.compile(
    r"\A(?P<scheme>https?)://"
    r"(?P<authority>(?:[^\s/?#@]+@)?(?:\[[0-9A-Fa-f:.]+\]|[^\s/?#:@\[\]]+)(?::\d*)?)"
    r"(?P<path>/[^\s?#]*)?"
    r"(?:\?[^\s#]*)?"
    r"(?:#\S*)?\Z",
    re.IGNORECASE,
)

CORE_FIELD_NAMES = ("uri", "vocabulary_string_key", "value", "is_local")

RESERVED_VOCABULARY_KEYS = frozenset({"all"})

_KEY_RULE = "can only include lower case letters, numbers or underscores, but cannot start with an underscore"


def is_valid_key(key: Any) -> bool:
    return isinstance(key, str) and KEY_PATTERN.match(key) is not None


def validate_key(key: Any) -> None:
    """Raise :class:`InvalidKeyError` unless *key* matches the key grammar."""
    if not is_valid_key(key):
        raise InvalidKeyError(f"Invalid key ({_KEY_RULE}): {key!r}", value=key)


def validate_vocabulary_key(string_key: Any) -> None:
    """Validate a vocabulary string key, rejecting reserved words."""
    if isinstance(string_key, str) and string_key in RESERVED_VOCABULARY_KEYS:
        raise InvalidVocabularyStringKeyError(
            f'The value "{string_key}" is a reserved word and cannot be used '
            "as the string_key value for a vocabulary.",
            value=string_key,
        )
    if not is_valid_key(string_key):
        raise InvalidVocabularyStringKeyError(
            f"Invalid key ({_KEY_RULE}): {string_key!r}",
            value=string_key,
        )


def is_valid_uri(uri: Any) -> bool:
    return isinstance(uri, str) and URI_PATTERN.match(uri) is not None


def validate_uri(uri: Any) -> None:
    """Raise :class:`InvalidUriError` unless *uri* is an absolute http(s) URI."""
    if not is_valid_uri(uri):
        raise InvalidUriError(f"Invalid URI supplied: {uri!r}", value=uri)


def validate_additional_fields(additional_fields: Mapping[str, Any]) -> None:
    """Check every additional field key.

    Keys must pass the key grammar and must not be one of
    :data:`CORE_FIELD_NAMES`. Values are not inspected here; their shapes
    are checked when the index document is built.
    """
    for key in additional_fields:
        if key in CORE_FIELD_NAMES:
            raise InvalidAdditionalFieldKeyError(
                f'Cannot supply the key "{key}" as an additional field because it is a reserved key.',
                value=key,
            ).with_context(field_key=key)
        if not is_valid_key(key):
            raise InvalidAdditionalFieldKeyError(
                f"Invalid key ({_KEY_RULE}): {key!r}",
                value=key,
            ).with_context(field_key=str(key))


__all__ = [
    "CORE_FIELD_NAMES",
    "KEY_PATTERN",
    "RESERVED_VOCABULARY_KEYS",
    "URI_PATTERN",
    "is_valid_key",
    "is_valid_uri",
    "validate_additional_fields",
    "validate_key",
    "validate_uri",
    "validate_vocabulary_key",
]
