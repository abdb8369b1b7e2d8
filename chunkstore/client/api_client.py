"""
Async HTTP client for the chunk store API.

Wraps the /api/v1 endpoints. With a LocalEncoder attached, the client
computes local embeddings itself for local and both requests, since the
server never runs the local model.

Dependencies: httpx, chunkstore.client.local_encoder
System role: Caller-side API access
"""

import logging
from typing import Any

import httpx

from chunkstore.client.local_encoder import LocalEncoder, LocalEncoderError
from chunkstore.configs.embeddings import EmbeddingSettings
from chunkstore.models.provider import EmbeddingProvider, parse_provider

logger = logging.getLogger(__name__)


class ChunkStoreClientError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


class ChunkStoreClient:
    """
    Chunk store API client.

    Usage:
        async with ChunkStoreClient.with_local_encoder("http://localhost:8000") as client:
            results = await client.search("hello", provider="local")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        encoder: LocalEncoder | None = None,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Server root URL (without /api/v1)
            encoder: Local encoder used for local/both requests
            timeout: Request timeout in seconds
            http_client: Preconfigured httpx client (tests, custom transports)
        """
        self.encoder = encoder
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api/v1",
            timeout=timeout,
        )

    @classmethod
    def with_local_encoder(
        cls,
        base_url: str = "http://localhost:8000",
        settings: EmbeddingSettings | None = None,
        **kwargs: Any,
    ) -> "ChunkStoreClient":
        """Build a client whose encoder follows the EMBEDDING_LOCAL_* settings."""
        return cls(base_url, encoder=LocalEncoder.from_settings(settings), **kwargs)

    async def __aenter__(self) -> "ChunkStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict:
        response = await self._http.post(path, json=payload)
        return self._handle(response)

    def _handle(self, response: httpx.Response) -> dict:
        if response.is_success:
            return response.json()
        try:
            message = response.json().get("detail", response.reason_phrase)
        except ValueError:
            message = response.text or response.reason_phrase
        logger.warning(
            "Chunk store request failed",
            extra={"path": response.request.url.path, "status_code": response.status_code},
        )
        raise ChunkStoreClientError(response.status_code, str(message))

    async def _local_embedding(
        self,
        provider: EmbeddingProvider,
        text: str | None,
        embedding: list[float] | None,
    ) -> list[float] | None:
        if not provider.requires_local or embedding is not None:
            return embedding
        if self.encoder is None or not text:
            return None
        return await self.encoder.embed(text)

    async def search(
        self,
        text: str | None = None,
        provider: EmbeddingProvider | str = EmbeddingProvider.OPENAI,
        embedding: list[float] | None = None,
        limit: int = 5,
    ) -> list[dict]:
        """
        Search chunks by similarity.

        For local, ``embedding`` is computed from ``text`` with the attached
        encoder when not given.

        Returns:
            list[dict]: Result chunks, ascending by distance
        """
        selected = parse_provider(provider, allow_both=False)
        payload: dict[str, Any] = {"provider": selected.value, "limit": limit}
        if selected is EmbeddingProvider.OPENAI:
            payload["text"] = text
        else:
            payload["embedding"] = await self._local_embedding(selected, text, embedding)
        data = await self._post("/search", _drop_none(payload))
        return data["results"]

    async def create_chunk(
        self,
        channel_id: int,
        user_id: int,
        content: str,
        writer_channel_id: int | None = None,
        embedding_openai: list[float] | None = None,
        embedding_local: list[float] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict:
        """Insert a chunk with caller-supplied embeddings."""
        data = await self._post(
            "/chunks",
            _drop_none(
                {
                    "channel_id": channel_id,
                    "user_id": user_id,
                    "writer_channel_id": writer_channel_id,
                    "content": content,
                    "embedding_openai": embedding_openai,
                    "embedding_local": embedding_local,
                    "metadata": metadata,
                }
            ),
        )
        return data["chunk"]

    async def upsert_chunk(
        self,
        content: str,
        channel_id: int,
        user_id: int,
        provider: EmbeddingProvider | str = EmbeddingProvider.OPENAI,
        id: int | None = None,
        writer_channel_id: int | None = None,
        metadata: dict[str, Any] | None = None,
        embedding_local: list[float] | None = None,
    ) -> dict:
        """
        Create or update one chunk.

        Returns:
            dict: {"chunk": ..., "action": "created" | "updated"}
        """
        selected = parse_provider(provider)
        payload = {
            "id": id,
            "content": content,
            "channel_id": channel_id,
            "user_id": user_id,
            "writer_channel_id": writer_channel_id,
            "metadata": metadata,
            "provider": selected.value,
            "embedding_local": await self._local_embedding(selected, content, embedding_local),
        }
        return await self._post("/chunks/upsert", _drop_none(payload))

    async def bulk_upsert(
        self,
        items: list[dict[str, Any]],
        provider: EmbeddingProvider | str = EmbeddingProvider.OPENAI,
    ) -> dict:
        """
        Upsert many chunks with one provider.

        Items lacking embedding_local get one from the attached encoder for
        local and both. An item the encoder cannot embed is sent without a
        vector and comes back as that item's error.

        Returns:
            dict: results, success_count, error_count, total
        """
        selected = parse_provider(provider)
        prepared = []
        for item in items:
            item = dict(item)
            try:
                item["embedding_local"] = await self._local_embedding(
                    selected, item.get("content"), item.get("embedding_local")
                )
            except (ValueError, LocalEncoderError) as e:
                logger.warning(
                    "Local embedding failed for bulk item",
                    extra={"index": len(prepared), "error_type": type(e).__name__},
                )
                item.pop("embedding_local", None)
            prepared.append(_drop_none(item))
        return await self._post(
            "/chunks/bulk-upsert", {"provider": selected.value, "items": prepared}
        )

    async def get_chunk(self, channel_id: int, chunk_id: int) -> dict:
        """Get one chunk by its composite key."""
        response = await self._http.get(f"/chunks/{channel_id}/{chunk_id}")
        return self._handle(response)["chunk"]

    async def embed(self, text: str) -> list[float]:
        """Generate an OpenAI embedding server-side."""
        data = await self._post("/embed", {"text": text})
        return data["embedding"]
