"""
Embedding resolution service.

Turns a provider selection plus request inputs into the EmbeddingPair to
be written, and exposes server-side generation for the /embed endpoint.

Dependencies: chunkstore.boundary.embeddings, chunkstore.models
System role: Provider dispatch for ingestion and search
"""

import logging
from typing import Any

from chunkstore.boundary.embeddings.openai_embedder import OpenAIEmbedder
from chunkstore.models.embedding import EmbeddingPair, validate_vector
from chunkstore.models.provider import LOCAL_DIMENSIONS, EmbeddingProvider

logger = logging.getLogger(__name__)


class EmbeddingService:
    """Embedding service orchestrator."""

    def __init__(self, embedder: OpenAIEmbedder) -> None:
        """
        Initialize embedding service.

        Args:
            embedder: Remote (OpenAI) embedder
        """
        self.embedder = embedder

    async def resolve(
        self,
        provider: EmbeddingProvider,
        content: str,
        embedding_local: Any = None,
    ) -> EmbeddingPair:
        """
        Produce the vectors a write with ``provider`` should store.

        The caller-supplied local vector is validated before the remote
        provider is called, so a bad local vector never costs an API call.

        Args:
            provider: Parsed provider selection
            content: Chunk text (embedded for openai and both)
            embedding_local: Caller-supplied 384-dim vector

        Returns:
            EmbeddingPair: Vectors to write

        Raises:
            MissingRequiredEmbeddingError: local/both without embedding_local
            DimensionMismatchError: Wrong vector length
            ProviderNotConfiguredError: openai/both without an API key
            EmbeddingGenerationFailedError: Remote generation failed
        """
        local = None
        if provider.requires_local:
            local = validate_vector(
                embedding_local,
                LOCAL_DIMENSIONS,
                field="embedding_local",
                provider=provider.value,
            )

        openai = None
        if provider.requires_openai:
            openai = await self.embedder.embed(content)

        return EmbeddingPair(openai=openai, local=local)

    async def generate(self, text: str | None) -> dict:
        """
        Generate an OpenAI embedding for text.

        Args:
            text: Text to embed

        Returns:
            dict: embedding, dimensions and provider ("openai")
        """
        embedding = await self.embedder.embed(text or "")
        logger.info(
            "Embedding generated",
            extra={"dimensions": len(embedding), "text_length": len(text or "")},
        )
        return {
            "embedding": embedding,
            "dimensions": len(embedding),
            "provider": EmbeddingProvider.OPENAI,
        }
