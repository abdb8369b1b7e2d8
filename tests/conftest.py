"""
Shared test fixtures and configuration for entire test suite.

Provides: Vector factories, chunk row factory, database session and embedder mocks
Dependencies: pytest, sqlalchemy
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.boundary.db.models.chunk_model import ChunkModel
from chunkstore.models.provider import LOCAL_DIMENSIONS, OPENAI_DIMENSIONS

CREATED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def openai_vector() -> list[float]:
    """1536-dim vector shaped like an OpenAI embedding."""
    return [0.01] * OPENAI_DIMENSIONS


@pytest.fixture
def local_vector() -> list[float]:
    """384-dim vector shaped like a local embedding."""
    return [0.02] * LOCAL_DIMENSIONS


@pytest.fixture
def make_chunk():
    """
    Factory building detached ChunkModel rows.

    Returns:
        Callable: make_chunk(**overrides) -> ChunkModel
    """

    def _make(**overrides) -> ChunkModel:
        fields = {
            "id": 1,
            "channel_id": 10,
            "user_id": 100,
            "writer_channel_id": None,
            "content": "hello world",
            "embedding_openai": [0.01] * OPENAI_DIMENSIONS,
            "embedding_local": None,
            "embedding_provider": "openai",
            "chunk_metadata": {"source": "test"},
            "created_at": CREATED_AT,
        }
        fields.update(overrides)
        return ChunkModel(**fields)

    return _make


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_embedder(openai_vector):
    """
    Create mock OpenAIEmbedder.

    Returns:
        AsyncMock: embed() returns a 1536-dim vector
    """
    embedder = AsyncMock()
    embedder.embed = AsyncMock(return_value=openai_vector)
    embedder.is_configured = True
    embedder.model = "text-embedding-3-small"
    return embedder
