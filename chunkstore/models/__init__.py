"""API contracts and domain value types."""

from chunkstore.models.chunk import (
    BulkItemResultResponse,
    BulkUpsertItem,
    BulkUpsertRequest,
    BulkUpsertResponse,
    ChunkEnvelope,
    ChunkResponse,
    CreateChunkRequest,
    UpsertChunkRequest,
    UpsertChunkResponse,
)
from chunkstore.models.embedding import (
    EmbeddingPair,
    EmbedRequest,
    EmbedResponse,
    validate_vector,
)
from chunkstore.models.provider import (
    LOCAL_DIMENSIONS,
    OPENAI_DIMENSIONS,
    EmbeddingProvider,
    UpsertAction,
    parse_provider,
)
from chunkstore.models.search import SearchRequest, SearchResponse

__all__ = [
    "BulkItemResultResponse",
    "BulkUpsertItem",
    "BulkUpsertRequest",
    "BulkUpsertResponse",
    "ChunkEnvelope",
    "ChunkResponse",
    "CreateChunkRequest",
    "UpsertChunkRequest",
    "UpsertChunkResponse",
    "EmbeddingPair",
    "EmbedRequest",
    "EmbedResponse",
    "validate_vector",
    "LOCAL_DIMENSIONS",
    "OPENAI_DIMENSIONS",
    "EmbeddingProvider",
    "UpsertAction",
    "parse_provider",
    "SearchRequest",
    "SearchResponse",
]
