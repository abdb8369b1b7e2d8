"""
Embedding provider selection.

Closed set of provider selections validated once at the API boundary and
dispatched on afterwards. The two embedding spaces have fixed dimensions.

Dependencies: chunkstore.core.exceptions
System role: Provider routing vocabulary shared by ingestion and search
"""

import enum
from typing import Any

from chunkstore.core.exceptions import InvalidProviderError

OPENAI_DIMENSIONS = 1536
LOCAL_DIMENSIONS = 384


class EmbeddingProvider(str, enum.Enum):
    """
    Embedding provider selection.

    OPENAI: remote encoder invoked by the server (1536 dims)
    LOCAL: local encoder run by the caller, vector sent with the request (384 dims)
    BOTH: OPENAI generated server-side plus LOCAL supplied by the caller
    """

    OPENAI = "openai"
    LOCAL = "local"
    BOTH = "both"

    @property
    def requires_openai(self) -> bool:
        """Whether this selection writes or queries the OpenAI column."""
        return self in (EmbeddingProvider.OPENAI, EmbeddingProvider.BOTH)

    @property
    def requires_local(self) -> bool:
        """Whether this selection writes or queries the local column."""
        return self in (EmbeddingProvider.LOCAL, EmbeddingProvider.BOTH)

    @property
    def column_name(self) -> str:
        """
        Name of the single vector column targeted by this provider.

        Raises:
            ValueError: For BOTH, which spans two columns
        """
        if self is EmbeddingProvider.OPENAI:
            return "embedding_openai"
        if self is EmbeddingProvider.LOCAL:
            return "embedding_local"
        raise ValueError("BOTH does not map to a single embedding column")

    @property
    def dimensions(self) -> int:
        """Fixed vector dimension of a single-column provider."""
        if self is EmbeddingProvider.OPENAI:
            return OPENAI_DIMENSIONS
        if self is EmbeddingProvider.LOCAL:
            return LOCAL_DIMENSIONS
        raise ValueError("BOTH does not have a single dimension")


class UpsertAction(str, enum.Enum):
    """Outcome of a single-item upsert."""

    CREATED = "created"
    UPDATED = "updated"


_ALIASES = {
    "a": EmbeddingProvider.OPENAI,
    "b": EmbeddingProvider.LOCAL,
}


def parse_provider(value: Any, allow_both: bool = True) -> EmbeddingProvider:
    """
    Parse a provider selector from request input.

    Accepts the enum, its wire values (case-insensitive) and the "A"/"B"
    labels for the remote and local providers.

    Args:
        value: Raw provider value
        allow_both: Whether BOTH is acceptable (False for search)

    Returns:
        EmbeddingProvider: Parsed selection

    Raises:
        InvalidProviderError: If value is not a recognized selection
    """
    allowed = [p.value for p in EmbeddingProvider if allow_both or p is not EmbeddingProvider.BOTH]

    if isinstance(value, EmbeddingProvider):
        provider = value
    elif isinstance(value, str):
        key = value.strip().lower()
        provider = _ALIASES.get(key)
        if provider is None:
            try:
                provider = EmbeddingProvider(key)
            except ValueError:
                raise InvalidProviderError(value, allowed) from None
    else:
        raise InvalidProviderError(value, allowed)

    if provider is EmbeddingProvider.BOTH and not allow_both:
        raise InvalidProviderError(value, allowed)
    return provider
