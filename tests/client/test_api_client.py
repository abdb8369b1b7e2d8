"""
Test suite for ChunkStoreClient.

Requests are served by an httpx.MockTransport.

System role: Verification of caller-side request shaping
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from chunkstore.client.api_client import ChunkStoreClient, ChunkStoreClientError
from chunkstore.client.local_encoder import LocalEncoderError
from chunkstore.configs.embeddings import EmbeddingSettings
from chunkstore.core.exceptions import InvalidProviderError


class Recorder:
    def __init__(self, status_code: int = 200, body: dict | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_client(recorder: Recorder, encoder=None) -> ChunkStoreClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(recorder),
        base_url="http://test/api/v1",
    )
    return ChunkStoreClient(encoder=encoder, http_client=http)


@pytest.fixture
def mock_encoder() -> AsyncMock:
    encoder = AsyncMock()
    encoder.embed = AsyncMock(return_value=[0.02] * 384)
    return encoder


class TestSearch:
    """Test suite for ChunkStoreClient.search."""

    @pytest.mark.asyncio
    async def test_openai_sends_text(self) -> None:
        recorder = Recorder(body={"results": [{"id": 1}], "provider": "openai"})

        results = await make_client(recorder).search("hello", provider="openai", limit=3)

        assert results == [{"id": 1}]
        assert recorder.requests[-1].url.path == "/api/v1/search"
        assert recorder.last_json == {"provider": "openai", "limit": 3, "text": "hello"}

    @pytest.mark.asyncio
    async def test_local_encodes_text_with_attached_encoder(self, mock_encoder) -> None:
        recorder = Recorder(body={"results": [], "provider": "local"})

        await make_client(recorder, encoder=mock_encoder).search("hello", provider="local")

        mock_encoder.embed.assert_awaited_once_with("hello")
        assert recorder.last_json["embedding"] == [0.02] * 384
        assert "text" not in recorder.last_json

    @pytest.mark.asyncio
    async def test_both_is_rejected_locally(self) -> None:
        recorder = Recorder()

        with pytest.raises(InvalidProviderError):
            await make_client(recorder).search("hello", provider="both")

        assert recorder.requests == []


class TestWrites:
    """Test suite for upsert and bulk upsert."""

    @pytest.mark.asyncio
    async def test_upsert_both_attaches_local_vector(self, mock_encoder) -> None:
        recorder = Recorder(body={"chunk": {"id": 1}, "action": "created"})

        result = await make_client(recorder, encoder=mock_encoder).upsert_chunk(
            "hello", channel_id=10, user_id=100, provider="both"
        )

        assert result["action"] == "created"
        assert recorder.last_json["provider"] == "both"
        assert len(recorder.last_json["embedding_local"]) == 384
        assert "id" not in recorder.last_json

    @pytest.mark.asyncio
    async def test_upsert_openai_never_encodes_locally(self, mock_encoder) -> None:
        recorder = Recorder(body={"chunk": {"id": 1}, "action": "updated"})

        await make_client(recorder, encoder=mock_encoder).upsert_chunk(
            "hello", channel_id=10, user_id=100, id=1
        )

        mock_encoder.embed.assert_not_called()
        assert "embedding_local" not in recorder.last_json

    @pytest.mark.asyncio
    async def test_bulk_upsert_fills_missing_local_vectors(self, mock_encoder) -> None:
        recorder = Recorder(body={"results": [], "success_count": 0, "error_count": 0, "total": 0})
        items = [
            {"content": "a", "channel_id": 1, "user_id": 1},
            {"content": "b", "channel_id": 1, "user_id": 1, "embedding_local": [0.3] * 384},
        ]

        await make_client(recorder, encoder=mock_encoder).bulk_upsert(items, provider="local")

        sent = recorder.last_json["items"]
        assert sent[0]["embedding_local"] == [0.02] * 384
        assert sent[1]["embedding_local"] == [0.3] * 384
        mock_encoder.embed.assert_awaited_once_with("a")
        assert "embedding_local" not in items[0]

    @pytest.mark.asyncio
    async def test_bulk_upsert_sends_batch_when_one_item_cannot_be_encoded(
        self, mock_encoder
    ) -> None:
        recorder = Recorder(body={"results": [], "success_count": 0, "error_count": 0, "total": 0})
        mock_encoder.embed.side_effect = [
            [0.02] * 384,
            ValueError("text cannot be empty"),
            [0.04] * 384,
        ]
        items = [
            {"content": "a", "channel_id": 1, "user_id": 1},
            {"content": "   ", "channel_id": 1, "user_id": 1},
            {"content": "c", "channel_id": 1, "user_id": 1},
        ]

        await make_client(recorder, encoder=mock_encoder).bulk_upsert(items, provider="local")

        sent = recorder.last_json["items"]
        assert len(sent) == 3
        assert sent[0]["embedding_local"] == [0.02] * 384
        assert "embedding_local" not in sent[1]
        assert sent[2]["embedding_local"] == [0.04] * 384

    @pytest.mark.asyncio
    async def test_bulk_upsert_survives_encoder_failure(self, mock_encoder) -> None:
        recorder = Recorder(body={"results": [], "success_count": 0, "error_count": 0, "total": 0})
        mock_encoder.embed.side_effect = LocalEncoderError("model failed to load")

        await make_client(recorder, encoder=mock_encoder).bulk_upsert(
            [{"content": "a", "channel_id": 1, "user_id": 1}], provider="both"
        )

        assert recorder.last_json["items"] == [{"content": "a", "channel_id": 1, "user_id": 1}]


class TestErrors:
    """Test suite for non-2xx handling."""

    @pytest.mark.asyncio
    async def test_raises_with_server_detail(self) -> None:
        recorder = Recorder(status_code=400, body={"detail": "Invalid provider 'x'"})

        with pytest.raises(ChunkStoreClientError) as exc_info:
            await make_client(recorder).embed("hello")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid provider 'x'"

    @pytest.mark.asyncio
    async def test_get_chunk_not_found(self) -> None:
        recorder = Recorder(status_code=404, body={"detail": "Chunk 3 not found in channel 9"})

        with pytest.raises(ChunkStoreClientError) as exc_info:
            await make_client(recorder).get_chunk(channel_id=9, chunk_id=3)

        assert exc_info.value.status_code == 404
        assert recorder.requests[-1].url.path == "/api/v1/chunks/9/3"


def test_with_local_encoder_follows_settings() -> None:
    settings = EmbeddingSettings(
        _env_file=None, local_model="sentence-transformers/paraphrase-MiniLM-L3-v2"
    )

    client = ChunkStoreClient.with_local_encoder("http://test", settings=settings)

    assert client.encoder.model_name == "sentence-transformers/paraphrase-MiniLM-L3-v2"
    assert client.encoder.dimensions == 384
    assert client._http.base_url == httpx.URL("http://test/api/v1/")
