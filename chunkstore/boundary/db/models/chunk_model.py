"""
Chunk ORM model.

Stores a text chunk with two independent, nullable pgvector columns, one
per embedding provider, keyed by the composite (id, channel_id) so that
the table can be distributed on channel_id.

Dependencies: sqlalchemy, pgvector, chunkstore.boundary.db.base
System role: Chunk persistence for ingestion and similarity search
"""

from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import BigInteger, CheckConstraint, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from chunkstore.boundary.db.base import Base, CreatedAtMixin
from chunkstore.models.provider import LOCAL_DIMENSIONS, OPENAI_DIMENSIONS


class ChunkModel(Base, CreatedAtMixin):
    """
    Chunk ORM model.

    Attributes:
        id: Store-generated BIGSERIAL, unique only together with channel_id
        channel_id: Partition/distribution key, part of the primary key
        user_id: Owning user
        writer_channel_id: Optional descriptive channel reference
        content: Chunk text
        embedding_openai: vector(1536), NULL until the openai provider embeds the chunk
        embedding_local: vector(384), NULL until a local embedding is supplied
        embedding_provider: Advisory tag: openai, local or both
        chunk_metadata: Opaque JSONB document (column "metadata")
        created_at: Insert timestamp (UTC, never updated)

    Constraints:
        (id, channel_id) primary key
        at least one embedding column is non-null
    """

    __tablename__ = "chunks"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    channel_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    writer_channel_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    embedding_openai: Mapped[Any] = mapped_column(
        Vector(OPENAI_DIMENSIONS),
        nullable=True,
    )

    embedding_local: Mapped[Any] = mapped_column(
        Vector(LOCAL_DIMENSIONS),
        nullable=True,
    )

    embedding_provider: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="openai",
        server_default="openai",
    )

    chunk_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "embedding_openai IS NOT NULL OR embedding_local IS NOT NULL",
            name="ck_chunks_has_embedding",
        ),
        CheckConstraint(
            "embedding_provider IN ('openai', 'local', 'both')",
            name="ck_chunks_embedding_provider",
        ),
        Index(
            "chunks_embedding_openai_idx",
            "embedding_openai",
            postgresql_using="hnsw",
            postgresql_ops={"embedding_openai": "vector_cosine_ops"},
        ),
        Index(
            "chunks_embedding_local_idx",
            "embedding_local",
            postgresql_using="hnsw",
            postgresql_ops={"embedding_local": "vector_cosine_ops"},
        ),
    )
