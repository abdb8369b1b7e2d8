"""Application services: ingestion, bulk ingestion, search and embedding."""

from chunkstore.application.services.bulk_upsert_service import (
    BulkItemResult,
    BulkUpsertResult,
    BulkUpsertService,
)
from chunkstore.application.services.chunk_service import ChunkService, to_chunk_dict
from chunkstore.application.services.embedding_service import EmbeddingService
from chunkstore.application.services.search_service import SearchService

__all__ = [
    "BulkItemResult",
    "BulkUpsertResult",
    "BulkUpsertService",
    "ChunkService",
    "EmbeddingService",
    "SearchService",
    "to_chunk_dict",
]
