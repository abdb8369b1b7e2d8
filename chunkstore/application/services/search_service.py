"""
Similarity search service.

Routes a query to the embedding column of the selected provider. Rows
lacking that column are never candidates.

Dependencies: chunkstore.boundary.db.CRUD, chunkstore.application.services
System role: Read-only similarity search
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.application.services.chunk_service import resolve_provider, to_chunk_dict
from chunkstore.application.services.embedding_service import EmbeddingService
from chunkstore.boundary.db.CRUD.chunk_crud import chunk_crud
from chunkstore.core.exceptions import StoreOperationError, ValidationError
from chunkstore.models.embedding import validate_vector
from chunkstore.models.provider import LOCAL_DIMENSIONS, EmbeddingProvider
from chunkstore.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class SearchService:
    """Search service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        embedding_service: EmbeddingService,
        default_limit: int = 5,
        max_limit: int = 100,
    ) -> None:
        """
        Initialize search service.

        Args:
            db: Async SQLAlchemy session
            embedding_service: Used to embed openai query text
            default_limit: Result count when limit is omitted
            max_limit: Largest accepted limit
        """
        self.db = db
        self.embedding_service = embedding_service
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def search(
        self,
        provider: Any,
        text: str | None = None,
        embedding: Any = None,
        limit: int | None = None,
    ) -> tuple[list[dict], EmbeddingProvider]:
        """
        Return the chunks closest to the query, ascending by cosine distance.

        For openai the text is embedded server-side and any supplied
        embedding is ignored. For local the supplied 384-dim embedding is
        used as-is and text is never embedded. Ties are returned in
        whatever order the store produces.

        Args:
            provider: openai or local (None means openai)
            text: Query text
            embedding: Precomputed local query vector
            limit: Number of results

        Returns:
            tuple[list[dict], EmbeddingProvider]: Chunk dicts with distance, and the provider used

        Raises:
            InvalidProviderError: Unknown provider, or both
            ValidationError: Missing text for openai, limit out of range
            MissingRequiredEmbeddingError: Missing embedding for local
            DimensionMismatchError: Local embedding of the wrong length
        """
        selected = resolve_provider(provider, allow_both=False)

        if limit is None:
            limit = self.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= self.max_limit:
            raise ValidationError(
                f"limit must be an integer between 1 and {self.max_limit}", field="limit"
            )

        if selected is EmbeddingProvider.OPENAI:
            if not isinstance(text, str) or not text.strip():
                raise ValidationError("text is required for provider 'openai'", field="text")
            query_vector = await self.embedding_service.embedder.embed(text)
        else:
            query_vector = validate_vector(
                embedding, LOCAL_DIMENSIONS, field="embedding", provider=selected.value
            )

        try:
            rows = await chunk_crud.search_similar(self.db, selected, query_vector, limit)
        except SQLAlchemyError as e:
            logger.error(
                "Similarity search failed",
                extra={"error_type": type(e).__name__, "provider": selected.value},
            )
            raise StoreOperationError("Search failed", operation="search") from e

        log_with_context(
            logger,
            logging.INFO,
            "Similarity search completed",
            provider=selected,
            limit=limit,
            result_count=len(rows),
            query_vector=query_vector,
        )
        return [to_chunk_dict(chunk, distance) for chunk, distance in rows], selected
