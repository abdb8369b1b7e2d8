"""
Test suite for the search and embed routers.

System role: Verification of search/embed HTTP contracts
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from chunkstore.api.deps.dependencies import get_embedding_service, get_search_service
from chunkstore.api.main import create_app
from chunkstore.core.exceptions import (
    EmbeddingGenerationFailedError,
    InvalidProviderError,
    MissingRequiredEmbeddingError,
    ProviderNotConfiguredError,
    ValidationError,
)
from chunkstore.models.provider import EmbeddingProvider


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def mock_search_service():
    return AsyncMock()


@pytest.fixture
def mock_embedding_service():
    return AsyncMock()


@pytest.fixture(autouse=True)
def override_services(client, mock_search_service, mock_embedding_service):
    client.app.dependency_overrides[get_search_service] = lambda: mock_search_service
    client.app.dependency_overrides[get_embedding_service] = lambda: mock_embedding_service
    yield
    client.app.dependency_overrides.clear()


class TestSearchEndpoint:
    """POST /api/v1/search"""

    def test_returns_results_with_distance(self, client, mock_search_service) -> None:
        mock_search_service.search.return_value = (
            [
                {
                    "id": 1,
                    "channel_id": 10,
                    "user_id": 100,
                    "writer_channel_id": None,
                    "content": "hello",
                    "embedding_openai": None,
                    "embedding_local": [0.02] * 384,
                    "embedding_provider": EmbeddingProvider.LOCAL,
                    "metadata": None,
                    "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
                    "distance": 0.12,
                }
            ],
            EmbeddingProvider.LOCAL,
        )

        response = client.post(
            "/api/v1/search",
            json={"provider": "local", "embedding": [0.02] * 384, "limit": 3},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["provider"] == "local"
        assert body["results"][0]["distance"] == pytest.approx(0.12)
        assert mock_search_service.search.call_args.kwargs["limit"] == 3

    @pytest.mark.parametrize(
        "error",
        [
            InvalidProviderError("both", ["openai", "local"]),
            ValidationError("text is required for provider 'openai'", field="text"),
            MissingRequiredEmbeddingError("embedding", "local"),
        ],
    )
    def test_bad_requests(self, client, mock_search_service, error) -> None:
        mock_search_service.search.side_effect = error

        response = client.post("/api/v1/search", json={"provider": "openai"})

        assert response.status_code == 400
        assert response.json()["detail"] == error.message


class TestEmbedEndpoint:
    """POST /api/v1/embed"""

    def test_returns_embedding(self, client, mock_embedding_service) -> None:
        mock_embedding_service.generate.return_value = {
            "embedding": [0.1] * 1536,
            "dimensions": 1536,
            "provider": EmbeddingProvider.OPENAI,
        }

        response = client.post("/api/v1/embed", json={"text": "hello"})

        assert response.status_code == 200
        assert response.json()["dimensions"] == 1536
        assert response.json()["provider"] == "openai"

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationError("text cannot be empty", field="text"), 400),
            (ProviderNotConfiguredError("OPENAI_API_KEY is not configured"), 500),
            (EmbeddingGenerationFailedError("OpenAI embedding generation failed"), 502),
        ],
    )
    def test_errors(self, client, mock_embedding_service, error, status_code) -> None:
        mock_embedding_service.generate.side_effect = error

        response = client.post("/api/v1/embed", json={"text": ""})

        assert response.status_code == status_code
