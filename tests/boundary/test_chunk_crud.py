"""
Test suite for ChunkCRUD.

Statements are compiled with the PostgreSQL dialect and inspected; the
session is mocked.

System role: Verification of keyed upsert and column-routed search SQL
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from chunkstore.boundary.db.CRUD.chunk_crud import chunk_crud
from chunkstore.models.embedding import EmbeddingPair
from chunkstore.models.provider import EmbeddingProvider


def compile_sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def set_clause(sql: str) -> str:
    return sql.split("DO UPDATE SET")[1].split("RETURNING")[0]


def build_upsert(embeddings: EmbeddingPair):
    return chunk_crud.build_upsert_statement(
        id=7,
        channel_id=10,
        user_id=100,
        content="updated text",
        embeddings=embeddings,
        metadata={"k": "v"},
    )


class TestBuildUpsertStatement:
    """Test suite for the ON CONFLICT upsert statement."""

    def test_conflicts_on_composite_key(self, openai_vector) -> None:
        sql = compile_sql(build_upsert(EmbeddingPair(openai=openai_vector)))

        assert "INSERT INTO chunks" in sql
        assert "ON CONFLICT (id, channel_id) DO UPDATE" in sql
        assert "RETURNING" in sql

    def test_openai_write_leaves_local_column_alone(self, openai_vector) -> None:
        sql = set_clause(compile_sql(build_upsert(EmbeddingPair(openai=openai_vector))))

        assert "embedding_openai = excluded.embedding_openai" in sql
        assert "embedding_local = excluded.embedding_local" not in sql
        assert "chunks.embedding_local IS NOT NULL" in sql

    def test_local_write_leaves_openai_column_alone(self, local_vector) -> None:
        sql = set_clause(compile_sql(build_upsert(EmbeddingPair(local=local_vector))))

        assert "embedding_local = excluded.embedding_local" in sql
        assert "embedding_openai = excluded.embedding_openai" not in sql
        assert "chunks.embedding_openai IS NOT NULL" in sql

    def test_both_write_sets_both_columns(self, openai_vector, local_vector) -> None:
        pair = EmbeddingPair(openai=openai_vector, local=local_vector)
        sql = set_clause(compile_sql(build_upsert(pair)))

        assert "embedding_openai = excluded.embedding_openai" in sql
        assert "embedding_local = excluded.embedding_local" in sql
        assert "embedding_provider = excluded.embedding_provider" in sql

    def test_created_at_never_updated(self, openai_vector) -> None:
        sql = set_clause(compile_sql(build_upsert(EmbeddingPair(openai=openai_vector))))

        assert "created_at" not in sql
        assert "content = excluded.content" in sql
        assert "metadata = excluded.metadata" in sql


class TestBuildSearchStatement:
    """Test suite for the cosine-distance search statement."""

    @pytest.mark.parametrize(
        ("provider", "column", "other"),
        [
            (EmbeddingProvider.OPENAI, "embedding_openai", "embedding_local"),
            (EmbeddingProvider.LOCAL, "embedding_local", "embedding_openai"),
        ],
    )
    def test_routes_to_provider_column(self, provider, column, other) -> None:
        vector = [0.1] * provider.dimensions
        sql = compile_sql(chunk_crud.build_search_statement(provider, vector, 5))
        where = sql.split("WHERE")[1]

        assert f"chunks.{column} <=>" in sql
        assert f"chunks.{column} IS NOT NULL" in where
        assert other not in where
        assert "ORDER BY distance" in sql
        assert "LIMIT" in sql

    def test_provider_tag_not_used_as_filter(self) -> None:
        sql = compile_sql(
            chunk_crud.build_search_statement(EmbeddingProvider.LOCAL, [0.1] * 384, 5)
        )

        assert "embedding_provider" not in sql.split("WHERE")[1]


class TestChunkCRUDSession:
    """Test suite for ChunkCRUD methods that touch the session."""

    @pytest.mark.asyncio
    async def test_search_similar_returns_rows_with_float_distance(
        self, mock_db_session, make_chunk
    ) -> None:
        chunk = make_chunk()
        result = MagicMock()
        result.all.return_value = [(chunk, 0.25)]
        mock_db_session.execute = AsyncMock(return_value=result)

        rows = await chunk_crud.search_similar(
            mock_db_session, EmbeddingProvider.OPENAI, [0.1] * 1536, 5
        )

        assert rows == [(chunk, 0.25)]
        assert isinstance(rows[0][1], float)

    @pytest.mark.asyncio
    async def test_upsert_by_key_returns_single_row(
        self, mock_db_session, make_chunk, local_vector
    ) -> None:
        chunk = make_chunk(embedding_local=local_vector, embedding_provider="both")
        scalars = MagicMock()
        scalars.one.return_value = chunk
        mock_db_session.scalars = AsyncMock(return_value=scalars)

        stored = await chunk_crud.upsert_by_key(
            mock_db_session,
            id=1,
            channel_id=10,
            user_id=100,
            content="hello",
            embeddings=EmbeddingPair(local=local_vector),
        )

        assert stored is chunk
        _, kwargs = mock_db_session.scalars.call_args
        assert kwargs["execution_options"] == {"populate_existing": True}
        advance = compile_sql(mock_db_session.execute.call_args.args[0])
        assert "setval" in advance
        assert "pg_get_serial_sequence" in advance

    @pytest.mark.asyncio
    async def test_insert_chunk_tags_provider(self, mock_db_session, local_vector) -> None:
        chunk = await chunk_crud.insert_chunk(
            mock_db_session,
            channel_id=10,
            user_id=100,
            content="hello",
            embeddings=EmbeddingPair(local=local_vector),
        )

        assert chunk.embedding_provider == "local"
        assert chunk.embedding_openai is None
        mock_db_session.add.assert_called_once_with(chunk)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_by_key_requires_full_key(self, mock_db_session) -> None:
        with pytest.raises(ValueError, match="channel_id"):
            await chunk_crud.get_by_key(mock_db_session, id=1)

        mock_db_session.execute.assert_not_called()


class TestSequenceAdvance:
    """Test suite for keeping the id sequence ahead of keyed writes."""

    def test_setval_never_moves_sequence_backwards(self) -> None:
        stmt = chunk_crud.build_sequence_advance_statement(500)
        compiled = stmt.compile(dialect=postgresql.dialect())
        sql = str(compiled)

        assert "setval(pg_get_serial_sequence(" in sql
        assert "greatest(" in sql
        assert "nextval(pg_get_serial_sequence(" in sql
        assert 500 in compiled.params.values()
        assert "chunks" in compiled.params.values()
