"""Core domain layer: exception taxonomy."""

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

__all__ = [
    "ChunkNotFoundError",
    "ChunkStoreException",
    "DimensionMismatchError",
    "EmbeddingGenerationFailedError",
    "InvalidProviderError",
    "MissingRequiredEmbeddingError",
    "ProviderNotConfiguredError",
    "StoreOperationError",
    "ValidationError",
]
