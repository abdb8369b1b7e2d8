"""Dependency injection for API routes."""

from chunkstore.api.deps.dependencies import (
    ServiceCache,
    get_bulk_upsert_service,
    get_chunk_service,
    get_embedder,
    get_embedding_service,
    get_search_service,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_bulk_upsert_service",
    "get_chunk_service",
    "get_embedder",
    "get_embedding_service",
    "get_search_service",
    "get_service_cache",
    "get_settings_dependency",
]
