"""
Chunk domain models and schemas.

Request/response schemas for chunk creation, keyed upsert and bulk upsert.

Dependencies: pydantic
System role: Chunk API contracts
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chunkstore.models.provider import EmbeddingProvider, UpsertAction


class CreateChunkRequest(BaseModel):
    """Request schema for inserting a chunk with caller-supplied embeddings."""

    channel_id: int = Field(..., description="Partition key (part of the primary key)")
    user_id: int = Field(..., description="Owning user")
    writer_channel_id: int | None = Field(None, description="Optional writer channel")
    content: str = Field(..., description="Chunk text")
    embedding_openai: list[float] | None = Field(None, description="1536-dim OpenAI vector")
    embedding_local: list[float] | None = Field(None, description="384-dim local vector")
    metadata: dict[str, Any] | None = Field(None, description="Opaque metadata document")


class UpsertChunkRequest(BaseModel):
    """Request schema for a keyed single-item upsert."""

    id: int | None = Field(None, description="Existing chunk ID; omit to create")
    content: str = Field(..., description="Chunk text")
    channel_id: int = Field(..., description="Partition key (part of the primary key)")
    user_id: int = Field(..., description="Owning user")
    writer_channel_id: int | None = Field(None, description="Optional writer channel")
    metadata: dict[str, Any] | None = Field(None, description="Opaque metadata document")
    provider: str | None = Field(None, description="openai, local or both")
    embedding_local: list[float] | None = Field(
        None, description="384-dim local vector (required for local and both)"
    )


class BulkUpsertItem(BaseModel):
    """
    One element of a bulk upsert payload.

    Every field is optional here so that missing values surface as
    per-item errors from the upsert operation instead of rejecting the batch.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    content: str | None = None
    channel_id: int | None = None
    user_id: int | None = None
    writer_channel_id: int | None = None
    metadata: dict[str, Any] | None = None
    embedding_local: list[float] | None = None


class BulkUpsertRequest(BaseModel):
    """Request schema for bulk upsert; provider applies to every item."""

    provider: str | None = Field(None, description="openai, local or both")
    items: list[Any] = Field(default_factory=list, description="Item payloads")


class ChunkResponse(BaseModel):
    """Response schema for a stored chunk."""

    id: int
    channel_id: int
    user_id: int
    writer_channel_id: int | None
    content: str
    embedding_openai: list[float] | None
    embedding_local: list[float] | None
    embedding_provider: EmbeddingProvider
    metadata: dict[str, Any] | None
    created_at: datetime
    distance: float | None = Field(
        default=None, description="Cosine distance to the query (search results only)"
    )


class ChunkEnvelope(BaseModel):
    """Response schema wrapping a single chunk."""

    chunk: ChunkResponse


class UpsertChunkResponse(BaseModel):
    """Response schema for single-item upsert."""

    chunk: ChunkResponse
    action: UpsertAction


class BulkItemResultResponse(BaseModel):
    """Per-item outcome in a bulk upsert response, index matches input order."""

    index: int
    success: bool
    chunk: ChunkResponse | None = None
    action: UpsertAction | None = None
    error: str | None = None


class BulkUpsertResponse(BaseModel):
    """Response schema for bulk upsert."""

    results: list[BulkItemResultResponse]
    success_count: int
    error_count: int
    total: int
