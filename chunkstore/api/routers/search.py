"""
Similarity search API endpoint.

Routes: POST /search

Dependencies: chunkstore.application.services, chunkstore.models
System role: Similarity search HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from chunkstore.api.deps.dependencies import get_search_service
from chunkstore.application.services import SearchService
from chunkstore.models.search import SearchRequest, SearchResponse

from .chunks.chunk_error_handling import handle_chunk_errors
from .chunks.chunk_responses import map_chunk_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
@handle_chunk_errors
async def search_chunks(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Find the chunks closest to a query in one provider's embedding space.

    Args:
        request: SearchRequest with text (openai) or embedding (local)
        search_service: Injected SearchService

    Returns:
        SearchResponse: Results ascending by cosine distance

    Raises:
        HTTPException(400): Invalid provider, missing text or embedding
        HTTPException(502): Query embedding generation failed
    """
    results, provider = await search_service.search(
        provider=request.provider,
        text=request.text,
        embedding=request.embedding,
        limit=request.limit,
    )
    return SearchResponse(
        results=[map_chunk_to_response(chunk) for chunk in results],
        provider=provider,
    )
