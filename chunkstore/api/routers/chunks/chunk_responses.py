"""
Chunk response mapping utilities.

Transforms service dictionaries and results into Pydantic response models.

Dependencies: chunkstore.models, chunkstore.application.services
System role: Chunk response transformation
"""

from typing import Any

from chunkstore.application.services import BulkUpsertResult
from chunkstore.models.chunk import (
    BulkItemResultResponse,
    BulkUpsertResponse,
    ChunkEnvelope,
    ChunkResponse,
    UpsertChunkResponse,
)
from chunkstore.models.provider import UpsertAction


def map_chunk_to_response(chunk_data: dict[str, Any]) -> ChunkResponse:
    """
    Transform chunk data dictionary into ChunkResponse.

    Args:
        chunk_data: Dictionary produced by to_chunk_dict

    Returns:
        ChunkResponse: Pydantic model for API response
    """
    return ChunkResponse(**chunk_data)


def map_chunk_to_envelope(chunk_data: dict[str, Any]) -> ChunkEnvelope:
    """Wrap a chunk dictionary as {"chunk": ...}."""
    return ChunkEnvelope(chunk=map_chunk_to_response(chunk_data))


def map_upsert_to_response(
    chunk_data: dict[str, Any],
    action: UpsertAction,
) -> UpsertChunkResponse:
    """Build the single-item upsert response."""
    return UpsertChunkResponse(chunk=map_chunk_to_response(chunk_data), action=action)


def map_bulk_result_to_response(result: BulkUpsertResult) -> BulkUpsertResponse:
    """
    Transform a BulkUpsertResult into BulkUpsertResponse.

    Args:
        result: Ordered per-item outcomes

    Returns:
        BulkUpsertResponse: Results in input order with counts
    """
    return BulkUpsertResponse(
        results=[
            BulkItemResultResponse(
                index=item.index,
                success=item.success,
                chunk=map_chunk_to_response(item.chunk) if item.chunk else None,
                action=item.action,
                error=item.error,
            )
            for item in result.results
        ],
        success_count=result.success_count,
        error_count=result.error_count,
        total=result.total,
    )
