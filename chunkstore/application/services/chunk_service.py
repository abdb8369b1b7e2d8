"""
Chunk service orchestrator.

Coordinates single-item chunk writes (keyed upsert and direct insert) and
keyed lookup. Each successful write commits on its own.

Dependencies: chunkstore.boundary.db.CRUD, chunkstore.application.services.embedding_service
System role: Chunk ingestion use case orchestration
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.application.services.embedding_service import EmbeddingService
from chunkstore.boundary.db.CRUD.chunk_crud import chunk_crud
from chunkstore.boundary.db.models.chunk_model import ChunkModel
from chunkstore.core.exceptions import (
    ChunkNotFoundError,
    MissingRequiredEmbeddingError,
    StoreOperationError,
    ValidationError,
)
from chunkstore.models.embedding import EmbeddingPair, validate_vector
from chunkstore.models.provider import (
    LOCAL_DIMENSIONS,
    OPENAI_DIMENSIONS,
    EmbeddingProvider,
    UpsertAction,
    parse_provider,
)
from chunkstore.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


def _vector_to_list(vector: Any) -> list[float] | None:
    # pgvector returns numpy arrays on read
    if vector is None:
        return None
    return [float(value) for value in vector]


def to_chunk_dict(chunk: ChunkModel, distance: float | None = None) -> dict:
    """
    Map a ChunkModel row to a response dictionary.

    Args:
        chunk: Stored chunk row
        distance: Cosine distance to a query vector (search only)

    Returns:
        dict: Chunk fields with vectors as plain lists of floats
    """
    data = {
        "id": chunk.id,
        "channel_id": chunk.channel_id,
        "user_id": chunk.user_id,
        "writer_channel_id": chunk.writer_channel_id,
        "content": chunk.content,
        "embedding_openai": _vector_to_list(chunk.embedding_openai),
        "embedding_local": _vector_to_list(chunk.embedding_local),
        "embedding_provider": EmbeddingProvider(chunk.embedding_provider),
        "metadata": chunk.chunk_metadata,
        "created_at": chunk.created_at,
    }
    if distance is not None:
        data["distance"] = distance
    return data


def resolve_provider(value: Any, allow_both: bool = True) -> EmbeddingProvider:
    """Parse a provider selector; an omitted selector means openai."""
    if value is None:
        return EmbeddingProvider.OPENAI
    return parse_provider(value, allow_both=allow_both)


def _require(value: Any, field: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)


class ChunkService:
    """Chunk service orchestrator."""

    def __init__(self, db: AsyncSession, embedding_service: EmbeddingService) -> None:
        """
        Initialize chunk service.

        Args:
            db: Async SQLAlchemy session
            embedding_service: Provider dispatch for embedding resolution
        """
        self.db = db
        self.embedding_service = embedding_service

    async def upsert_chunk(
        self,
        provider: EmbeddingProvider | str | None,
        content: str | None,
        channel_id: int | None,
        user_id: int | None,
        writer_channel_id: int | None = None,
        metadata: dict[str, Any] | None = None,
        id: int | None = None,
        embedding_local: Any = None,
    ) -> tuple[dict, UpsertAction]:
        """
        Create or update one chunk, embedding it for the selected provider.

        Embeddings are resolved before anything is written, so a failed
        embedding leaves the store untouched. With ``id`` the row under
        (id, channel_id) is created or updated in place and only the
        resolved embedding column(s) are overwritten.

        Args:
            provider: openai, local or both (None means openai)
            content: Chunk text
            channel_id: Partition key
            user_id: Owning user
            writer_channel_id: Optional writer channel
            metadata: Optional metadata document
            id: Existing chunk ID; None lets the store assign one
            embedding_local: Caller-supplied 384-dim vector (local, both)

        Returns:
            tuple[dict, UpsertAction]: Stored chunk and CREATED/UPDATED

        Raises:
            ValidationError: Missing content, channel_id or user_id
            InvalidProviderError: Unknown provider selection
            MissingRequiredEmbeddingError: local/both without embedding_local
            DimensionMismatchError: Wrong vector length
            ProviderNotConfiguredError: Remote provider has no credentials
            EmbeddingGenerationFailedError: Remote generation failed
            StoreOperationError: Database write failed
        """
        _require(content, "content")
        _require(channel_id, "channel_id")
        _require(user_id, "user_id")
        selected = resolve_provider(provider)

        embeddings = await self.embedding_service.resolve(selected, content, embedding_local)

        fields = {
            "channel_id": channel_id,
            "user_id": user_id,
            "writer_channel_id": writer_channel_id,
            "content": content,
            "embeddings": embeddings,
            "metadata": metadata,
        }

        try:
            if id is not None:
                chunk = await chunk_crud.upsert_by_key(self.db, id=id, **fields)
                action = UpsertAction.UPDATED
            else:
                chunk = await chunk_crud.insert_chunk(self.db, **fields)
                action = UpsertAction.CREATED
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to upsert chunk",
                extra={"error_type": type(e).__name__, "chunk_id": id, "channel_id": channel_id},
            )
            raise StoreOperationError("Failed to upsert chunk", operation="upsert") from e

        log_with_context(
            logger,
            logging.INFO,
            "Chunk upserted",
            chunk_id=chunk.id,
            channel_id=chunk.channel_id,
            action=action,
            provider=selected,
            embedding_openai=embeddings.openai,
            embedding_local=embeddings.local,
        )
        return to_chunk_dict(chunk), action

    async def create_chunk(
        self,
        channel_id: int,
        user_id: int,
        content: str,
        writer_channel_id: int | None = None,
        embedding_openai: Any = None,
        embedding_local: Any = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict:
        """
        Insert a chunk whose embeddings are supplied by the caller.

        No embedding is generated on this path.

        Raises:
            ValidationError: Missing field or malformed vector
            MissingRequiredEmbeddingError: Neither embedding supplied
            DimensionMismatchError: Wrong vector length
            StoreOperationError: Database write failed
        """
        _require(content, "content")
        _require(channel_id, "channel_id")
        _require(user_id, "user_id")
        if embedding_openai is None and embedding_local is None:
            raise MissingRequiredEmbeddingError("embedding_openai or embedding_local")

        embeddings = EmbeddingPair(
            openai=(
                validate_vector(embedding_openai, OPENAI_DIMENSIONS, "embedding_openai")
                if embedding_openai is not None
                else None
            ),
            local=(
                validate_vector(embedding_local, LOCAL_DIMENSIONS, "embedding_local")
                if embedding_local is not None
                else None
            ),
        )

        try:
            chunk = await chunk_crud.insert_chunk(
                self.db,
                channel_id=channel_id,
                user_id=user_id,
                writer_channel_id=writer_channel_id,
                content=content,
                embeddings=embeddings,
                metadata=metadata,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to create chunk",
                extra={"error_type": type(e).__name__, "channel_id": channel_id},
            )
            raise StoreOperationError("Failed to create chunk", operation="insert") from e

        log_with_context(
            logger,
            logging.INFO,
            "Chunk created",
            chunk_id=chunk.id,
            channel_id=chunk.channel_id,
            provider=embeddings.provider_tag,
            embedding_openai=embeddings.openai,
            embedding_local=embeddings.local,
        )
        return to_chunk_dict(chunk)

    async def get_chunk(self, chunk_id: int, channel_id: int) -> dict:
        """
        Get chunk by its composite key.

        Args:
            chunk_id: Chunk ID
            channel_id: Partition key

        Returns:
            dict: Chunk data

        Raises:
            ChunkNotFoundError: No chunk under (chunk_id, channel_id)
            StoreOperationError: Database read failed
        """
        try:
            chunk = await chunk_crud.get_by_key(self.db, id=chunk_id, channel_id=channel_id)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to get chunk",
                extra={"error_type": type(e).__name__, "chunk_id": chunk_id},
            )
            raise StoreOperationError("Failed to get chunk", operation="get") from e

        if chunk is None:
            raise ChunkNotFoundError(chunk_id, channel_id)
        return to_chunk_dict(chunk)
