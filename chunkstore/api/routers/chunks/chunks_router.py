"""
Chunk API endpoints.

Routes:
- POST /chunks - Insert chunk with caller-supplied embeddings
- POST /chunks/upsert - Create or update one chunk for a provider
- POST /chunks/bulk-upsert - Best-effort upsert of many chunks
- GET /chunks/{channel_id}/{chunk_id} - Get single chunk by composite key

Dependencies: chunkstore.application.services, chunkstore.models
System role: Chunk ingestion HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from chunkstore.api.deps.dependencies import (
    get_bulk_upsert_service,
    get_chunk_service,
)
from chunkstore.application.services import BulkUpsertService, ChunkService
from chunkstore.models.chunk import (
    BulkUpsertRequest,
    BulkUpsertResponse,
    ChunkEnvelope,
    CreateChunkRequest,
    UpsertChunkRequest,
    UpsertChunkResponse,
)
from chunkstore.models.provider import UpsertAction

from .chunk_error_handling import handle_chunk_errors
from .chunk_responses import (
    map_bulk_result_to_response,
    map_chunk_to_envelope,
    map_upsert_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chunks", tags=["chunks"])


@router.post("", response_model=ChunkEnvelope, status_code=201)
@handle_chunk_errors
async def create_chunk(
    request: CreateChunkRequest,
    chunk_service: ChunkService = Depends(get_chunk_service),
) -> ChunkEnvelope:
    """
    Insert a chunk whose embeddings are supplied by the caller.

    Args:
        request: CreateChunkRequest with at least one embedding
        chunk_service: Injected ChunkService

    Returns:
        ChunkEnvelope: Created chunk

    Raises:
        HTTPException(400): Missing fields, wrong lengths or no embedding
        HTTPException(500): Insert failed
    """
    logger.info(
        "Creating chunk",
        extra={
            "channel_id": request.channel_id,
            "has_openai": request.embedding_openai is not None,
            "has_local": request.embedding_local is not None,
        },
    )

    chunk_data = await chunk_service.create_chunk(
        channel_id=request.channel_id,
        user_id=request.user_id,
        writer_channel_id=request.writer_channel_id,
        content=request.content,
        embedding_openai=request.embedding_openai,
        embedding_local=request.embedding_local,
        metadata=request.metadata,
    )
    return map_chunk_to_envelope(chunk_data)


@router.post("/upsert", response_model=UpsertChunkResponse)
@handle_chunk_errors
async def upsert_chunk(
    request: UpsertChunkRequest,
    response: Response,
    chunk_service: ChunkService = Depends(get_chunk_service),
) -> UpsertChunkResponse:
    """
    Create or update one chunk, embedding it for the selected provider.

    Args:
        request: UpsertChunkRequest; id selects the row to update
        response: Outgoing response (status set from the action)
        chunk_service: Injected ChunkService

    Returns:
        UpsertChunkResponse: 200 with action "updated", 201 with action "created"

    Raises:
        HTTPException(400): Invalid provider, fields or embedding
        HTTPException(500): Provider not configured or write failed
        HTTPException(502): Embedding generation failed
    """
    logger.info(
        "Upserting chunk",
        extra={
            "chunk_id": request.id,
            "channel_id": request.channel_id,
            "provider": request.provider,
        },
    )

    chunk_data, action = await chunk_service.upsert_chunk(
        provider=request.provider,
        content=request.content,
        channel_id=request.channel_id,
        user_id=request.user_id,
        writer_channel_id=request.writer_channel_id,
        metadata=request.metadata,
        id=request.id,
        embedding_local=request.embedding_local,
    )

    response.status_code = (
        status.HTTP_201_CREATED if action is UpsertAction.CREATED else status.HTTP_200_OK
    )
    return map_upsert_to_response(chunk_data, action)


@router.post("/bulk-upsert", response_model=BulkUpsertResponse)
@handle_chunk_errors
async def bulk_upsert_chunks(
    request: BulkUpsertRequest,
    bulk_service: BulkUpsertService = Depends(get_bulk_upsert_service),
) -> BulkUpsertResponse:
    """
    Upsert many chunks with one provider; failures are reported per item.

    Args:
        request: BulkUpsertRequest with provider and items
        bulk_service: Injected BulkUpsertService

    Returns:
        BulkUpsertResponse: Per-item results in input order

    Raises:
        HTTPException(400): Invalid provider or oversized batch
    """
    logger.info(
        "Bulk upserting chunks",
        extra={"provider": request.provider, "item_count": len(request.items)},
    )

    result = await bulk_service.bulk_upsert(request.provider, request.items)
    return map_bulk_result_to_response(result)


@router.get("/{channel_id}/{chunk_id}", response_model=ChunkEnvelope)
@handle_chunk_errors
async def get_chunk(
    channel_id: int,
    chunk_id: int,
    chunk_service: ChunkService = Depends(get_chunk_service),
) -> ChunkEnvelope:
    """
    Get single chunk by its composite key.

    Raises:
        HTTPException(404): Chunk not found
    """
    chunk_data = await chunk_service.get_chunk(chunk_id=chunk_id, channel_id=channel_id)
    return map_chunk_to_envelope(chunk_data)
