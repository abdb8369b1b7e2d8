"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, CreatedAtMixin: Model building blocks
  - get_engine(): Sync engine for schema bootstrap
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ChunkModel: Chunk table
  - chunk_crud: CRUD operation singleton

Dependencies: sqlalchemy, pgvector, chunkstore.configs
System role: Database adapter for the partitioned chunk table
"""

from chunkstore.boundary.db.base import Base, CreatedAtMixin
from chunkstore.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    get_engine,
)
from chunkstore.boundary.db.models.chunk_model import ChunkModel
from chunkstore.boundary.db.CRUD import BaseCRUD, ChunkCRUD, chunk_crud

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "get_engine",
    # Models
    "ChunkModel",
    # CRUD
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
]
