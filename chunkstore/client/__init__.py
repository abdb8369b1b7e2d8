"""Caller-side tooling: local embedding encoder and async API client."""

from chunkstore.client.api_client import ChunkStoreClient, ChunkStoreClientError
from chunkstore.client.local_encoder import (
    EncoderState,
    LoadProgress,
    LocalEncoder,
    LocalEncoderError,
)

__all__ = [
    "ChunkStoreClient",
    "ChunkStoreClientError",
    "EncoderState",
    "LoadProgress",
    "LocalEncoder",
    "LocalEncoderError",
]
