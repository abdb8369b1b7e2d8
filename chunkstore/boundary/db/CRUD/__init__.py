"""
CRUD operations for database models.

Exports base CRUD class and the chunk CRUD implementation with a
pre-instantiated singleton for direct use.

Usage:
    from chunkstore.boundary.db.CRUD import chunk_crud

    chunk = await chunk_crud.get_by_key(db, id=chunk_id, channel_id=channel_id)
"""

from chunkstore.boundary.db.CRUD.base_crud import BaseCRUD
from chunkstore.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud

__all__ = [
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
]
