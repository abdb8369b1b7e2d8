"""
Search request/response schemas.

Dependencies: pydantic
System role: Similarity search API contracts
"""

from pydantic import BaseModel, Field

from chunkstore.models.chunk import ChunkResponse
from chunkstore.models.provider import EmbeddingProvider


class SearchRequest(BaseModel):
    """Request schema for similarity search."""

    text: str | None = Field(None, description="Query text (required for openai)")
    embedding: list[float] | None = Field(
        None, description="Precomputed 384-dim query vector (required for local)"
    )
    provider: str | None = Field(None, description="openai or local")
    limit: int | None = Field(None, description="Number of results (default 5)")


class SearchResponse(BaseModel):
    """Response schema for similarity search."""

    results: list[ChunkResponse]
    provider: EmbeddingProvider
