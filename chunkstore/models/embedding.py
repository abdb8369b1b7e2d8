"""
Embedding vector models and schemas.

EmbeddingPair holds the two optional vectors of a chunk and refuses to be
built with neither present. validate_vector enforces fixed dimensionality
on caller-supplied vectors.

Dependencies: pydantic, chunkstore.core.exceptions
System role: Embedding value types and /embed API contracts
"""

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from chunkstore.core.exceptions import (
    DimensionMismatchError,
    MissingRequiredEmbeddingError,
    ValidationError,
)
from chunkstore.models.provider import (
    LOCAL_DIMENSIONS,
    OPENAI_DIMENSIONS,
    EmbeddingProvider,
)


def validate_vector(
    vector: Any,
    expected: int,
    field: str,
    provider: str | None = None,
) -> list[float]:
    """
    Validate a vector's presence, element types and exact length.

    Args:
        vector: Candidate vector (any sequence of numbers)
        expected: Required number of elements
        field: Field name used in error messages
        provider: Provider selection that required the vector, for messages

    Returns:
        list[float]: The vector as a list of floats

    Raises:
        MissingRequiredEmbeddingError: If vector is None
        ValidationError: If vector is not a sequence of finite numbers
        DimensionMismatchError: If vector length differs from expected
    """
    if vector is None:
        raise MissingRequiredEmbeddingError(field, provider)
    if isinstance(vector, (str, bytes, dict)) or not hasattr(vector, "__iter__"):
        raise ValidationError(f"{field} must be an array of numbers", field=field)

    values = list(vector)
    if len(values) != expected:
        raise DimensionMismatchError(expected, len(values), field=field)

    result: list[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"{field} must be an array of numbers", field=field
                ) from None
        if not math.isfinite(value):
            raise ValidationError(f"{field} must contain only finite numbers", field=field)
        result.append(float(value))
    return result


@dataclass(frozen=True)
class EmbeddingPair:
    """
    The two embedding columns of a chunk, each optional.

    At least one side must be present. Lengths are checked at construction,
    so a pair that exists is always writable.

    Attributes:
        openai: 1536-dim vector for embedding_openai, or None
        local: 384-dim vector for embedding_local, or None
    """

    openai: list[float] | None = None
    local: list[float] | None = None

    def __post_init__(self) -> None:
        if self.openai is None and self.local is None:
            raise MissingRequiredEmbeddingError("embedding_openai or embedding_local")
        if self.openai is not None and len(self.openai) != OPENAI_DIMENSIONS:
            raise DimensionMismatchError(
                OPENAI_DIMENSIONS, len(self.openai), field="embedding_openai"
            )
        if self.local is not None and len(self.local) != LOCAL_DIMENSIONS:
            raise DimensionMismatchError(
                LOCAL_DIMENSIONS, len(self.local), field="embedding_local"
            )

    @property
    def provider_tag(self) -> EmbeddingProvider:
        """Provenance tag matching the populated sides."""
        if self.openai is not None and self.local is not None:
            return EmbeddingProvider.BOTH
        if self.openai is not None:
            return EmbeddingProvider.OPENAI
        return EmbeddingProvider.LOCAL

    def column_values(self) -> dict[str, list[float]]:
        """Column values for the populated sides only."""
        values: dict[str, list[float]] = {}
        if self.openai is not None:
            values["embedding_openai"] = self.openai
        if self.local is not None:
            values["embedding_local"] = self.local
        return values


class EmbedRequest(BaseModel):
    """Request schema for server-side embedding generation."""

    text: str | None = Field(default=None, description="Text to embed")


class EmbedResponse(BaseModel):
    """Response schema for server-side embedding generation."""

    embedding: list[float]
    dimensions: int
    provider: EmbeddingProvider = EmbeddingProvider.OPENAI
