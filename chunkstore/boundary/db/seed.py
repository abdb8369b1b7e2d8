"""
Seed script populating the chunks table with sample data.

Inserts chunks carrying random vectors for both providers so that search
can be exercised without an OpenAI key or a local encoder.

Dependencies: sqlalchemy, chunkstore.boundary.db
System role: Development data seeding

Usage:
    python -m chunkstore.boundary.db.seed [--count N]
"""

import argparse
import asyncio
import logging
import random

from chunkstore.boundary.db.connection import dispose_engine, get_async_session_factory
from chunkstore.boundary.db.CRUD.chunk_crud import chunk_crud
from chunkstore.models.embedding import EmbeddingPair
from chunkstore.models.provider import LOCAL_DIMENSIONS, OPENAI_DIMENSIONS

logger = logging.getLogger(__name__)

SAMPLE_CONTENT = [
    "The quick brown fox jumps over the lazy dog",
    "Machine learning models require large amounts of training data",
    "Vector databases enable semantic search capabilities",
    "PostgreSQL is a powerful relational database",
    "Citus extends PostgreSQL for distributed workloads",
    "pgvector adds vector similarity search to PostgreSQL",
    "HNSW indexes provide fast approximate nearest neighbor search",
    "Embeddings represent text as high-dimensional vectors",
    "Cosine distance is commonly used for semantic similarity",
    "Database sharding distributes data across multiple nodes",
    "Semantic search finds meaning beyond keyword matching",
    "Full-text search and vector search complement each other",
]


def random_vector(dimensions: int, rng: random.Random) -> list[float]:
    return [rng.random() for _ in range(dimensions)]


async def seed_database(count: int = len(SAMPLE_CONTENT), seed: int | None = None) -> int:
    """
    Insert ``count`` sample chunks with both embeddings populated.

    Args:
        count: Number of chunks to insert
        seed: Optional RNG seed for reproducible vectors

    Returns:
        int: Number of chunks inserted
    """
    rng = random.Random(seed)
    session_factory = get_async_session_factory()

    async with session_factory() as session:
        for index in range(count):
            await chunk_crud.insert_chunk(
                session,
                channel_id=(index % 3) + 1,
                user_id=(index % 5) + 1,
                writer_channel_id=(index % 3) + 1 if index % 2 == 0 else None,
                content=SAMPLE_CONTENT[index % len(SAMPLE_CONTENT)],
                embeddings=EmbeddingPair(
                    openai=random_vector(OPENAI_DIMENSIONS, rng),
                    local=random_vector(LOCAL_DIMENSIONS, rng),
                ),
                metadata={
                    "category": ["tech", "database", "ai"][index % 3],
                    "importance": (index % 5) + 1,
                },
            )
        await session.commit()

    logger.info("Seed completed", extra={"chunk_count": count})
    return count


async def _run(count: int) -> None:
    try:
        await seed_database(count)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    from chunkstore.observability.logger import configure_logging

    parser = argparse.ArgumentParser(description="Seed the chunks table")
    parser.add_argument("--count", type=int, default=len(SAMPLE_CONTENT))
    args = parser.parse_args()

    configure_logging()
    asyncio.run(_run(args.count))
