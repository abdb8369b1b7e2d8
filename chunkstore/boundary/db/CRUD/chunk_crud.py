"""
Chunk CRUD operations.

Extends BaseCRUD with the composite-key upsert that touches only the
embedding columns being written, and cosine-distance search over one
embedding column.

Dependencies: sqlalchemy, pgvector, chunkstore.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Any, Sequence

from sqlalchemy import case, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.boundary.db.CRUD.base_crud import BaseCRUD
from chunkstore.boundary.db.models.chunk_model import ChunkModel
from chunkstore.models.embedding import EmbeddingPair
from chunkstore.models.provider import EmbeddingProvider


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """
    CRUD operations for ChunkModel.

    Every write and key lookup is routed by channel_id.
    """

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def insert_chunk(
        self,
        session: AsyncSession,
        *,
        channel_id: int,
        user_id: int,
        content: str,
        embeddings: EmbeddingPair,
        writer_channel_id: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChunkModel:
        """
        Insert a new chunk; the store assigns id and created_at.

        Args:
            session: Async database session
            channel_id: Partition key
            user_id: Owning user
            content: Chunk text
            embeddings: Vectors to store (unset side stays NULL)
            writer_channel_id: Optional writer channel
            metadata: Optional metadata document

        Returns:
            ChunkModel: Inserted row
        """
        return await self.create(
            session,
            channel_id=channel_id,
            user_id=user_id,
            writer_channel_id=writer_channel_id,
            content=content,
            chunk_metadata=metadata,
            embedding_provider=embeddings.provider_tag.value,
            **embeddings.column_values(),
        )

    def build_upsert_statement(
        self,
        *,
        id: int,
        channel_id: int,
        user_id: int,
        content: str,
        embeddings: EmbeddingPair,
        writer_channel_id: int | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        """
        Build INSERT ... ON CONFLICT (id, channel_id) DO UPDATE for a keyed write.

        The conflict branch sets content, ownership, metadata, the provider
        tag and only the embedding column(s) present in ``embeddings``.
        created_at and the other embedding column keep their stored values,
        and the tag becomes 'both' when the untouched column is populated.

        Returns:
            Insert: Statement returning the resulting ChunkModel
        """
        values: dict[Any, Any] = {
            ChunkModel.id: id,
            ChunkModel.channel_id: channel_id,
            ChunkModel.user_id: user_id,
            ChunkModel.writer_channel_id: writer_channel_id,
            ChunkModel.content: content,
            ChunkModel.chunk_metadata: metadata,
            ChunkModel.embedding_provider: embeddings.provider_tag.value,
        }
        if embeddings.openai is not None:
            values[ChunkModel.embedding_openai] = embeddings.openai
        if embeddings.local is not None:
            values[ChunkModel.embedding_local] = embeddings.local

        stmt = pg_insert(ChunkModel).values(values)
        excluded = stmt.excluded

        tag = embeddings.provider_tag
        if tag is EmbeddingProvider.OPENAI:
            tag_on_conflict = case(
                (ChunkModel.embedding_local.isnot(None), EmbeddingProvider.BOTH.value),
                else_=EmbeddingProvider.OPENAI.value,
            )
        elif tag is EmbeddingProvider.LOCAL:
            tag_on_conflict = case(
                (ChunkModel.embedding_openai.isnot(None), EmbeddingProvider.BOTH.value),
                else_=EmbeddingProvider.LOCAL.value,
            )
        else:
            tag_on_conflict = excluded["embedding_provider"]

        set_: dict[Any, Any] = {
            ChunkModel.user_id: excluded["user_id"],
            ChunkModel.writer_channel_id: excluded["writer_channel_id"],
            ChunkModel.content: excluded["content"],
            ChunkModel.chunk_metadata: excluded["metadata"],
            ChunkModel.embedding_provider: tag_on_conflict,
        }
        if embeddings.openai is not None:
            set_[ChunkModel.embedding_openai] = excluded["embedding_openai"]
        if embeddings.local is not None:
            set_[ChunkModel.embedding_local] = excluded["embedding_local"]

        stmt = stmt.on_conflict_do_update(
            index_elements=[ChunkModel.id, ChunkModel.channel_id],
            set_=set_,
        )
        return stmt.returning(ChunkModel)

    async def upsert_by_key(self, session: AsyncSession, **kwargs: Any) -> ChunkModel:
        """
        Create or update the chunk identified by (id, channel_id).

        The id sequence is advanced past ``id`` in the same transaction.

        Args:
            session: Async database session
            **kwargs: Arguments of build_upsert_statement

        Returns:
            ChunkModel: Row as stored after the write
        """
        stmt = self.build_upsert_statement(**kwargs)
        result = await session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        chunk = result.one()
        await session.execute(self.build_sequence_advance_statement(kwargs["id"]))
        return chunk

    def build_sequence_advance_statement(self, id: int):
        """
        Build a setval() that keeps the id sequence ahead of an explicit id.

        A keyed write bypasses the BIGSERIAL default, so without this a later
        id-less insert could draw the same id and collide on (id, channel_id).
        nextval is drawn first so the sequence never moves backwards.

        Args:
            id: Id just written under a caller-chosen key

        Returns:
            Select: SELECT setval(seq, greatest(id, nextval(seq)))
        """
        sequence = func.pg_get_serial_sequence(ChunkModel.__tablename__, "id")
        return select(func.setval(sequence, func.greatest(id, func.nextval(sequence))))

    def build_search_statement(
        self,
        provider: EmbeddingProvider,
        query_vector: list[float],
        limit: int,
    ):
        """
        Build the cosine-distance query for one embedding column.

        Rows whose column for ``provider`` is NULL are excluded regardless
        of their embedding_provider tag.

        Args:
            provider: OPENAI or LOCAL
            query_vector: Query vector of the provider's dimension
            limit: Maximum number of rows

        Returns:
            Select: Statement yielding (ChunkModel, distance) rows
        """
        column = getattr(ChunkModel, provider.column_name)
        distance = column.cosine_distance(query_vector).label("distance")
        return (
            select(ChunkModel, distance)
            .where(column.isnot(None))
            .order_by(distance)
            .limit(limit)
        )

    async def search_similar(
        self,
        session: AsyncSession,
        provider: EmbeddingProvider,
        query_vector: list[float],
        limit: int,
    ) -> Sequence[tuple[ChunkModel, float]]:
        """
        Return the closest chunks by cosine distance, ascending.

        Args:
            session: Async database session
            provider: OPENAI or LOCAL
            query_vector: Query vector of the provider's dimension
            limit: Maximum number of rows

        Returns:
            Sequence of (ChunkModel, distance) pairs
        """
        stmt = self.build_search_statement(provider, query_vector, limit)
        result = await session.execute(stmt)
        return [(row[0], float(row[1])) for row in result.all()]


chunk_crud = ChunkCRUD()
