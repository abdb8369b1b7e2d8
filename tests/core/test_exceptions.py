"""
Test suite for the exception hierarchy.

System role: Verification of error messages and HTTP status mapping
"""

import pytest

from chunkstore.core.exceptions import (
    ChunkNotFoundError,
    ChunkStoreException,
    DimensionMismatchError,
    EmbeddingGenerationFailedError,
    InvalidProviderError,
    MissingRequiredEmbeddingError,
    ProviderNotConfiguredError,
    StoreOperationError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (ValidationError("content is required", field="content"), 400),
        (DimensionMismatchError(384, 3, field="embedding_local"), 400),
        (MissingRequiredEmbeddingError("embedding_local", "local"), 400),
        (InvalidProviderError("gemini", ["openai", "local", "both"]), 400),
        (ChunkNotFoundError(1, 10), 404),
        (ProviderNotConfiguredError("OPENAI_API_KEY is not configured"), 500),
        (EmbeddingGenerationFailedError("failed"), 502),
        (StoreOperationError("failed", operation="upsert"), 500),
    ],
)
def test_status_codes(error: ChunkStoreException, status_code: int) -> None:
    assert isinstance(error, ChunkStoreException)
    assert error.status_code == status_code


def test_dimension_mismatch_message_names_field_and_lengths() -> None:
    error = DimensionMismatchError(384, 10, field="embedding_local")

    assert error.message == "embedding_local must have exactly 384 dimensions, got 10"
    assert error.details == {"expected": 384, "actual": 10, "field": "embedding_local"}


def test_missing_embedding_message_names_provider() -> None:
    error = MissingRequiredEmbeddingError("embedding_local", "both")

    assert error.message == "embedding_local is required for provider 'both'"
    assert error.field == "embedding_local"


def test_invalid_provider_lists_allowed_values() -> None:
    error = InvalidProviderError("gemini", ["openai", "local"])

    assert error.message == "Invalid provider 'gemini'. Must be one of: openai, local"


def test_generation_failure_keeps_last_error() -> None:
    cause = TimeoutError("slow")
    error = EmbeddingGenerationFailedError("failed", last_error=cause, attempts=3)

    assert error.last_error is cause
    assert error.details == {"error_type": "TimeoutError", "attempts": 3}
    assert "Details" in str(error)


def test_validation_error_without_field_has_no_details() -> None:
    error = ValidationError("bad input")

    assert str(error) == "bad input"
    assert error.field is None
