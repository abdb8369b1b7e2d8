"""
chunkstore: dual-provider embedding storage and similarity search service.

Stores text chunks with OpenAI (1536-dim) and/or local (384-dim) embeddings
in a partitioned PostgreSQL + pgvector store and routes similarity queries
to the matching vector column.
"""

__version__ = "0.1.0"
