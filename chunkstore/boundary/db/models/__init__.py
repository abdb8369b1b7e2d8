"""ORM models."""

from chunkstore.boundary.db.models.chunk_model import ChunkModel

__all__ = ["ChunkModel"]
