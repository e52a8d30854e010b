"""
Structured error types for uri-spine.

Every failure the service reports is a distinct, typed condition so calling
code can branch on failure kind instead of parsing messages. Errors carry a
category, a retryable flag and structured context for logging.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       UriServiceError                            │
        │            (category, retryable, context, cause)                 │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError           ValidationError         ConflictError     │
        │  (CONFIG)              (VALIDATION)            (CONFLICT)        │
        │      │                      │                       │            │
        │  InvalidOptsError      InvalidKeyError         ExistingUriError  │
        │                          InvalidVocabulary...  ExistingVocab...  │
        │                          InvalidAdditional...  LocalUriGen...    │
        │                        InvalidUriError                           │
        │                        UnsupportedObjectType                     │
        │                                                                  │
        │  NotFoundError                                                   │
        │  (NOT_FOUND)                                                     │
        │      │                                                           │
        │  NonExistentVocabularyError   NonExistentUriError                │
        └─────────────────────────────────────────────────────────────────┘

    Store (``sqlalchemy.exc``) and index (``httpx``) transport errors are
    never wrapped in this hierarchy; they reach the caller unchanged.

Examples:
    >>> error = ExistingUriError("http://id.example.org/1")
    >>> error.category
    <ErrorCategory.CONFLICT: 'CONFLICT'>
    >>> error.to_dict()["context"]
    {'uri': 'http://id.example.org/1'}

Tags:
    error-handling, exception-hierarchy, uri-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"             # Missing or invalid initialization options
    VALIDATION = "VALIDATION"     # Malformed keys, URIs, metadata shapes
    CONFLICT = "CONFLICT"         # Uniqueness violations
    NOT_FOUND = "NOT_FOUND"       # Missing vocabulary or term
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        vocabulary_string_key: Vocabulary the operation targeted
        uri: Term URI the operation targeted
        field_key: Additional-field key that failed validation
        metadata: Additional key-value pairs
    """

    vocabulary_string_key: str | None = None
    uri: str | None = None
    field_key: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["vocabulary_string_key", "uri", "field_key"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class UriServiceError(Exception):
    """
    Base exception for all uri-spine errors.

    Subclasses set ``default_category`` and ``default_retryable``. None of
    the service's own errors are retryable: each one describes input or
    state that has to change before the call can succeed.

    Examples:
        >>> error = UriServiceError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(uri="http://id.example.org/1").context.uri
        'http://id.example.org/1'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> UriServiceError:
        """
        Add context to this error (fluent API).

        Usage:
            raise NonExistentUriError(uri).with_context(operation="update")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(UriServiceError):
    """Configuration error. Never retryable."""

    default_category = ErrorCategory.CONFIG


class InvalidOptsError(ConfigError):
    """A required initialization option was not supplied."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Must supply {key!r} to initialize the uri service.")


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(UriServiceError):
    """Input validation error. Never retryable - input must be fixed."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, value: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class InvalidKeyError(ValidationError):
    """Key does not match the lowercase/digit/underscore key grammar."""


class InvalidVocabularyStringKeyError(InvalidKeyError):
    """Vocabulary string key is malformed or reserved."""


class InvalidAdditionalFieldKeyError(InvalidKeyError):
    """Additional field key is malformed or collides with a core field name."""


class InvalidUriError(ValidationError):
    """URI is not an absolute http/https URI."""


class UnsupportedObjectTypeError(ValidationError):
    """Additional field value has a shape with no index suffix."""


# =============================================================================
# CONFLICT ERRORS
# =============================================================================


class ConflictError(UriServiceError):
    """Uniqueness violation in the store of record."""

    default_category = ErrorCategory.CONFLICT


class ExistingVocabularyStringKeyError(ConflictError):
    """A vocabulary with this string key already exists."""

    def __init__(self, string_key: str, **kwargs: Any):
        super().__init__(f"A vocabulary already exists with string key: {string_key}", **kwargs)
        self.context.vocabulary_string_key = string_key


class ExistingUriError(ConflictError):
    """A term with this URI already exists (detected via uri_hash)."""

    def __init__(self, uri: str, **kwargs: Any):
        super().__init__(
            f"A term already exists with uri: {uri} (conflict found via uri_hash check)",
            **kwargs,
        )
        self.context.uri = uri


class LocalUriGenerationError(ConflictError):
    """Every generated local URI collided with an existing term."""

    def __init__(self, vocabulary_string_key: str, attempts: int, **kwargs: Any):
        super().__init__(
            f"Could not generate a unique local uri in vocabulary "
            f"{vocabulary_string_key!r} after {attempts} attempts",
            **kwargs,
        )
        self.attempts = attempts
        self.context.vocabulary_string_key = vocabulary_string_key


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(UriServiceError):
    """Referenced record does not exist."""

    default_category = ErrorCategory.NOT_FOUND


class NonExistentVocabularyError(NotFoundError):
    """No vocabulary with the given string key."""

    def __init__(self, string_key: str, **kwargs: Any):
        super().__init__(f"There is no vocabulary with string key: {string_key}", **kwargs)
        self.context.vocabulary_string_key = string_key


class NonExistentUriError(NotFoundError):
    """No term with the given URI."""

    def __init__(self, uri: str, **kwargs: Any):
        super().__init__(f"No term found with uri: {uri}", **kwargs)
        self.context.uri = uri


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "UriServiceError",
    "ConfigError",
    "InvalidOptsError",
    "ValidationError",
    "InvalidKeyError",
    "InvalidVocabularyStringKeyError",
    "InvalidAdditionalFieldKeyError",
    "InvalidUriError",
    "UnsupportedObjectTypeError",
    "ConflictError",
    "ExistingVocabularyStringKeyError",
    "ExistingUriError",
    "LocalUriGenerationError",
    "NotFoundError",
    "NonExistentVocabularyError",
    "NonExistentUriError",
]
