"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: chunkstore.configs, chunkstore.application, chunkstore.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.application.services import (
    BulkUpsertService,
    ChunkService,
    EmbeddingService,
    SearchService,
)
from chunkstore.boundary.db import get_async_db
from chunkstore.boundary.embeddings import OpenAIEmbedder
from chunkstore.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._embedder = None

    @property
    def embedder(self) -> OpenAIEmbedder:
        """Get cached OpenAI embedder."""
        if self._embedder is None:
            self._embedder = OpenAIEmbedder.from_settings(get_settings().embeddings)
        return self._embedder

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedder = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_embedder() -> OpenAIEmbedder:
    """Get the cached OpenAI embedder."""
    return get_service_cache().embedder


def get_embedding_service(
    embedder: OpenAIEmbedder = Depends(get_embedder),
) -> EmbeddingService:
    """
    Get embedding service instance.

    Args:
        embedder: OpenAI embedder (injected via Depends)

    Returns:
        EmbeddingService: Embedding service instance
    """
    return EmbeddingService(embedder=embedder)


def get_chunk_service(
    db: AsyncSession = Depends(get_async_db),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> ChunkService:
    """
    Get chunk service instance.

    Args:
        db: Async database session (injected via Depends)
        embedding_service: Embedding service (injected via Depends)

    Returns:
        ChunkService: Chunk service instance
    """
    return ChunkService(db=db, embedding_service=embedding_service)


def get_bulk_upsert_service(
    chunk_service: ChunkService = Depends(get_chunk_service),
) -> BulkUpsertService:
    """
    Get bulk upsert service instance.

    Args:
        chunk_service: Chunk service (injected via Depends)

    Returns:
        BulkUpsertService: Bulk upsert service sharing the request session
    """
    return BulkUpsertService(chunk_service=chunk_service)


def get_search_service(
    db: AsyncSession = Depends(get_async_db),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SearchService:
    """
    Get search service instance.

    Args:
        db: Async database session (injected via Depends)
        embedding_service: Embedding service (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        SearchService: Search service instance
    """
    return SearchService(
        db=db,
        embedding_service=embedding_service,
        default_limit=settings.search.default_limit,
        max_limit=settings.search.max_limit,
    )
