"""Remote embedding provider adapters."""

from chunkstore.boundary.embeddings.openai_embedder import (
    TRANSIENT_ERRORS,
    OpenAIEmbedder,
    is_transient_error,
)

__all__ = ["TRANSIENT_ERRORS", "OpenAIEmbedder", "is_transient_error"]
