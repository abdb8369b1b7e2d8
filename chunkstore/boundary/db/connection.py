"""
Database connection management.

Provides SQLAlchemy engines, session factory, and FastAPI dependency
for database session injection.

Dependencies: sqlalchemy, chunkstore.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from chunkstore.configs import get_settings


def get_engine() -> Engine:
    """
    Create sync SQLAlchemy engine for schema bootstrap scripts.

    Returns:
        Engine: Configured SQLAlchemy engine

    Usage:
        engine = get_engine()
        with engine.begin() as conn:
            conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database

    return create_engine(
        db_config.database_url,
        echo=db_config.echo_sql,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Sessions use autoflush=False and expire_on_commit=False so returned ORM
    objects stay readable after services commit.

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and ensures it's closed
    after the route completes, even if exceptions occur. Services commit their
    own writes.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Usage:
        @router.get("/chunks/{channel_id}/{chunk_id}")
        async def get_chunk(..., db: AsyncSession = Depends(get_async_db)):
            return await chunk_crud.get_by_key(db, id=chunk_id, channel_id=channel_id)
    """
    session_factory = get_async_session_factory()
    async with session_factory() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose the cached async engine and its pooled connections."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
        get_async_session_factory.cache_clear()
        get_async_engine.cache_clear()
