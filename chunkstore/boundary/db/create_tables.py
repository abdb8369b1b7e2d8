"""
Database table creation script.

Creates the pgvector extension, the chunks table with its HNSW indexes,
optionally distributes it with Citus, and applies database-level tuning.

Dependencies: sqlalchemy, chunkstore.configs
System role: Database schema initialization

Usage:
    python -m chunkstore.boundary.db.create_tables [--distribute] [--configure]
"""

import argparse
import logging

from sqlalchemy import text

from chunkstore.boundary.db.base import Base
from chunkstore.boundary.db.connection import get_engine
from chunkstore.configs import get_settings

# Import all models to register them with Base.metadata
from chunkstore.boundary.db.models.chunk_model import ChunkModel  # noqa: F401

logger = logging.getLogger(__name__)


def create_all_tables(distribute: bool = False) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE EXTENSION/TABLE/INDEX IF NOT EXISTS, so safe to run
    multiple times. Distribution is skipped when the table is already a
    Citus distributed table.

    Args:
        distribute: Distribute chunks on channel_id (requires Citus)

    Raises:
        SQLAlchemyError: If connection or DDL fails
    """
    engine = get_engine()

    with engine.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))

    Base.metadata.create_all(bind=engine)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})

    if distribute:
        with engine.begin() as conn:
            already = conn.execute(
                text(
                    "SELECT 1 FROM pg_dist_partition "
                    "WHERE logicalrelid = 'chunks'::regclass"
                )
            ).first()
            if already:
                logger.info("chunks is already distributed")
            else:
                conn.execute(text("SELECT create_distributed_table('chunks', 'channel_id')"))
                logger.info("chunks distributed on channel_id")


def configure_database() -> None:
    """
    Apply database-level performance settings for pgvector and Citus.

    These are set with ALTER DATABASE because session settings do not
    propagate to Citus workers. Reconnect for them to take effect.

    Raises:
        SQLAlchemyError: If the ALTER DATABASE statements fail
    """
    settings = get_settings()
    db_name = settings.database.db
    ef_search = int(settings.search.hnsw_ef_search)

    engine = get_engine()
    with engine.begin() as conn:
        conn.execute(text(f'ALTER DATABASE "{db_name}" SET hnsw.ef_search = {ef_search}'))
        conn.execute(text(f"ALTER DATABASE \"{db_name}\" SET maintenance_work_mem = '2GB'"))
        conn.execute(
            text(f'ALTER DATABASE "{db_name}" SET max_parallel_workers_per_gather = 4')
        )
    logger.info(
        "Database settings applied; reconnect for them to take effect",
        extra={"database": db_name, "hnsw_ef_search": ef_search},
    )


def drop_all_tables() -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Raises:
        SQLAlchemyError: If database connection fails or drop fails
    """
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All tables dropped")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the chunk store schema")
    parser.add_argument("--distribute", action="store_true", help="Distribute chunks with Citus")
    parser.add_argument("--configure", action="store_true", help="Apply database-level tuning")
    parser.add_argument(
        "--reset", action="store_true", help="Drop existing tables before creating them"
    )
    args = parser.parse_args(argv)

    from chunkstore.observability.logger import configure_logging

    configure_logging(get_settings().log_level)
    if args.reset:
        drop_all_tables()
    create_all_tables(distribute=args.distribute)
    if args.configure:
        configure_database()


if __name__ == "__main__":
    main()
