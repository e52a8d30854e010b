"""Tests for the uri-spine error hierarchy."""

import pytest

from urispine.core.errors import (
    ConfigError,
    ConflictError,
    ErrorCategory,
    ErrorContext,
    ExistingUriError,
    ExistingVocabularyStringKeyError,
    InvalidAdditionalFieldKeyError,
    InvalidKeyError,
    InvalidOptsError,
    InvalidUriError,
    InvalidVocabularyStringKeyError,
    LocalUriGenerationError,
    NonExistentUriError,
    NonExistentVocabularyError,
    NotFoundError,
    UnsupportedObjectTypeError,
    UriServiceError,
    ValidationError,
)


class TestErrorContext:
    def test_empty_context_serializes_empty(self):
        assert ErrorContext().to_dict() == {}

    def test_only_set_fields_serialized(self):
        ctx = ErrorContext(uri="http://id.example.org/1", metadata={"operation": "update"})
        assert ctx.to_dict() == {"uri": "http://id.example.org/1", "operation": "update"}


class TestUriServiceError:
    def test_defaults(self):
        err = UriServiceError("boom")
        assert err.category == ErrorCategory.INTERNAL
        assert err.retryable is False
        assert str(err) == "boom"

    def test_with_context_known_and_metadata_keys(self):
        err = UriServiceError("boom").with_context(uri="http://x.org/1", operation="delete")
        assert err.context.uri == "http://x.org/1"
        assert err.context.metadata == {"operation": "delete"}

    def test_cause_is_chained(self):
        cause = RuntimeError("db down")
        err = UriServiceError("boom", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "db down"

    def test_repr(self):
        assert repr(NotFoundError("gone")) == "NotFoundError('gone', category=NOT_FOUND)"


class TestCategories:
    @pytest.mark.parametrize(
        "error, category",
        [
            (InvalidOptsError("solr"), ErrorCategory.CONFIG),
            (InvalidKeyError("bad"), ErrorCategory.VALIDATION),
            (InvalidUriError("bad"), ErrorCategory.VALIDATION),
            (UnsupportedObjectTypeError("bad"), ErrorCategory.VALIDATION),
            (ExistingUriError("http://x.org/1"), ErrorCategory.CONFLICT),
            (ExistingVocabularyStringKeyError("names"), ErrorCategory.CONFLICT),
            (LocalUriGenerationError("names", 5), ErrorCategory.CONFLICT),
            (NonExistentVocabularyError("names"), ErrorCategory.NOT_FOUND),
            (NonExistentUriError("http://x.org/1"), ErrorCategory.NOT_FOUND),
        ],
    )
    def test_category(self, error, category):
        assert error.category == category
        assert error.retryable is False

    def test_subclass_relationships(self):
        assert issubclass(InvalidOptsError, ConfigError)
        assert issubclass(InvalidVocabularyStringKeyError, InvalidKeyError)
        assert issubclass(InvalidAdditionalFieldKeyError, InvalidKeyError)
        assert issubclass(InvalidKeyError, ValidationError)
        assert issubclass(LocalUriGenerationError, ConflictError)
        assert issubclass(NonExistentUriError, NotFoundError)
        assert issubclass(NotFoundError, UriServiceError)


class TestSpecificErrors:
    def test_invalid_opts_names_key(self):
        err = InvalidOptsError("local_uri_base")
        assert err.key == "local_uri_base"
        assert "local_uri_base" in str(err)

    def test_existing_uri_sets_context(self):
        err = ExistingUriError("http://id.example.org/1")
        assert err.to_dict()["context"] == {"uri": "http://id.example.org/1"}

    def test_local_uri_generation_records_attempts(self):
        err = LocalUriGenerationError("names", 5)
        assert err.attempts == 5
        assert err.context.vocabulary_string_key == "names"
        assert "5 attempts" in str(err)

    def test_validation_error_value_in_dict(self):
        err = UnsupportedObjectTypeError("bad", value={"a": 1})
        assert err.to_dict()["value"] == "{'a': 1}"
