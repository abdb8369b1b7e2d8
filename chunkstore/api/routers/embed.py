"""
Embedding generation API endpoint.

Routes: POST /embed

Only the OpenAI provider is exposed; local embeddings are computed by callers.

Dependencies: chunkstore.application.services, chunkstore.models
System role: Server-side embedding HTTP API
"""

from fastapi import APIRouter, Depends

from chunkstore.api.deps.dependencies import get_embedding_service
from chunkstore.application.services import EmbeddingService
from chunkstore.models.embedding import EmbedRequest, EmbedResponse

from .chunks.chunk_error_handling import handle_chunk_errors

router = APIRouter(prefix="/embed", tags=["embeddings"])


@router.post("", response_model=EmbedResponse)
@handle_chunk_errors
async def embed_text(
    request: EmbedRequest,
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> EmbedResponse:
    """
    Generate an OpenAI embedding for text.

    Raises:
        HTTPException(400): Empty text
        HTTPException(500): Provider not configured
        HTTPException(502): Generation failed
    """
    result = await embedding_service.generate(request.text)
    return EmbedResponse(**result)
