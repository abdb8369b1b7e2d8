"""
Exception hierarchy for the chunk store application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and carry
the HTTP status they surface as.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ChunkStoreException(Exception):
    """Base exception for all chunk store errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ChunkStoreException):
    """Raised when a required field is missing or malformed."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class DimensionMismatchError(ChunkStoreException):
    """Raised when a vector's length differs from its provider's fixed dimension."""

    status_code = 400

    def __init__(
        self,
        expected: int,
        actual: int,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Dimension required by the provider
            actual: Dimension that was supplied or returned
            field: Field holding the offending vector
            details: Additional context
        """
        details = details or {}
        details.update({"expected": expected, "actual": actual})
        if field:
            details["field"] = field
        self.expected = expected
        self.actual = actual
        self.field = field
        label = field or "embedding"
        super().__init__(
            f"{label} must have exactly {expected} dimensions, got {actual}",
            details,
        )


class MissingRequiredEmbeddingError(ChunkStoreException):
    """Raised when a caller-supplied embedding is required but absent."""

    status_code = 400

    def __init__(self, field: str, provider: str | None = None) -> None:
        """
        Initialize missing embedding error.

        Args:
            field: Name of the missing embedding field
            provider: Provider selection that required it
        """
        details: dict[str, Any] = {"field": field}
        if provider:
            details["provider"] = provider
        self.field = field
        message = f"{field} is required"
        if provider:
            message = f"{field} is required for provider '{provider}'"
        super().__init__(message, details)


class InvalidProviderError(ChunkStoreException):
    """Raised when the provider selector is not a recognized value."""

    status_code = 400

    def __init__(self, value: Any, allowed: list[str]) -> None:
        """
        Initialize invalid provider error.

        Args:
            value: Provider value that was received
            allowed: Accepted provider values
        """
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid provider '{value}'. Must be one of: {', '.join(allowed)}",
            {"provider": str(value)},
        )


class ChunkNotFoundError(ChunkStoreException):
    """Raised when no chunk exists for an (id, channel_id) key."""

    status_code = 404

    def __init__(self, chunk_id: int, channel_id: int) -> None:
        """
        Initialize chunk not found error.

        Args:
            chunk_id: Chunk ID
            channel_id: Partition key the lookup was routed with
        """
        super().__init__(
            f"Chunk {chunk_id} not found in channel {channel_id}",
            {"chunk_id": chunk_id, "channel_id": channel_id},
        )


class ProviderNotConfiguredError(ChunkStoreException):
    """Raised when the remote embedding provider has no credentials."""

    status_code = 500


class EmbeddingGenerationFailedError(ChunkStoreException):
    """Raised when the remote provider fails after exhausting retries."""

    status_code = 502

    def __init__(
        self,
        message: str,
        last_error: BaseException | None = None,
        attempts: int | None = None,
    ) -> None:
        """
        Initialize embedding generation error.

        Args:
            message: Error message
            last_error: Last exception raised by the provider
            attempts: Number of attempts made
        """
        details: dict[str, Any] = {}
        if last_error is not None:
            details["error_type"] = type(last_error).__name__
        if attempts is not None:
            details["attempts"] = attempts
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(message, details)


class StoreOperationError(ChunkStoreException):
    """Raised when a database operation on the chunk table fails."""

    status_code = 500

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store operation error.

        Args:
            message: Error message
            operation: Operation that failed (insert, upsert, search, get)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        self.operation = operation
        super().__init__(message, details)
