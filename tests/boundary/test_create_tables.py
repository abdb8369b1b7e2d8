"""
Test suite for schema bootstrap.

The sync engine is mocked; executed SQL text is inspected.

System role: Verification of extension, distribution and tuning DDL
"""

from unittest.mock import MagicMock, patch

from chunkstore.boundary.db import create_tables
from chunkstore.boundary.db.models.chunk_model import ChunkModel


def executed_sql(conn: MagicMock) -> list[str]:
    return [str(call.args[0]) for call in conn.execute.call_args_list]


def mock_engine() -> tuple[MagicMock, MagicMock]:
    engine = MagicMock()
    conn = MagicMock()
    engine.begin.return_value.__enter__.return_value = conn
    return engine, conn


def test_create_all_tables_enables_vector_extension() -> None:
    engine, conn = mock_engine()

    with patch.object(create_tables, "get_engine", return_value=engine), patch.object(
        create_tables.Base.metadata, "create_all"
    ) as create_all:
        create_tables.create_all_tables()

    assert "CREATE EXTENSION IF NOT EXISTS vector" in executed_sql(conn)
    create_all.assert_called_once_with(bind=engine)


def test_distribute_skips_already_distributed_table() -> None:
    engine, conn = mock_engine()
    conn.execute.return_value.first.return_value = (1,)

    with patch.object(create_tables, "get_engine", return_value=engine), patch.object(
        create_tables.Base.metadata, "create_all"
    ):
        create_tables.create_all_tables(distribute=True)

    assert not any("create_distributed_table" in sql for sql in executed_sql(conn))


def test_distribute_on_channel_id() -> None:
    engine, conn = mock_engine()
    conn.execute.return_value.first.return_value = None

    with patch.object(create_tables, "get_engine", return_value=engine), patch.object(
        create_tables.Base.metadata, "create_all"
    ):
        create_tables.create_all_tables(distribute=True)

    assert "SELECT create_distributed_table('chunks', 'channel_id')" in executed_sql(conn)


def test_configure_database_sets_hnsw_ef_search() -> None:
    engine, conn = mock_engine()

    with patch.object(create_tables, "get_engine", return_value=engine):
        create_tables.configure_database()

    statements = executed_sql(conn)
    assert any("hnsw.ef_search = 200" in sql for sql in statements)
    assert any("max_parallel_workers_per_gather = 4" in sql for sql in statements)


def test_chunk_table_shape() -> None:
    table = ChunkModel.__table__

    assert [c.name for c in table.primary_key.columns] == ["id", "channel_id"]
    assert table.c.embedding_openai.type.dim == 1536
    assert table.c.embedding_local.type.dim == 384
    assert table.c.embedding_openai.nullable and table.c.embedding_local.nullable
    assert {index.name for index in table.indexes} == {
        "chunks_embedding_openai_idx",
        "chunks_embedding_local_idx",
    }


def test_main_reset_drops_before_creating() -> None:
    calls = []

    with patch.object(create_tables, "drop_all_tables", side_effect=lambda: calls.append("drop")), patch.object(
        create_tables, "create_all_tables", side_effect=lambda distribute: calls.append("create")
    ), patch("chunkstore.observability.logger.configure_logging"):
        create_tables.main(["--reset"])

    assert calls == ["drop", "create"]


def test_main_without_reset_keeps_tables() -> None:
    with patch.object(create_tables, "drop_all_tables") as drop, patch.object(
        create_tables, "create_all_tables"
    ) as create, patch("chunkstore.observability.logger.configure_logging"):
        create_tables.main([])

    drop.assert_not_called()
    create.assert_called_once_with(distribute=False)


def test_drop_all_tables_uses_sync_engine() -> None:
    engine, _ = mock_engine()

    with patch.object(create_tables, "get_engine", return_value=engine), patch.object(
        create_tables.Base.metadata, "drop_all"
    ) as drop_all:
        create_tables.drop_all_tables()

    drop_all.assert_called_once_with(bind=engine)
