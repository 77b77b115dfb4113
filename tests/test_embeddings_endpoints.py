import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from content_ai.main import app
from content_ai.api.dependencies import get_embedding_generator
from content_ai.db import EmbeddingStore
from content_ai.embeddings.embedder import Embedder, EmbeddingError
from content_ai.embeddings.generator import EmbeddingGenerator


@pytest.fixture
def mock_store():
    mock = AsyncMock(spec=EmbeddingStore)
    mock.delete_for_record.return_value = 2
    return mock


@pytest.fixture
def mock_embedder():
    mock = AsyncMock(spec=Embedder)
    mock.embed_text.return_value = [0.1] * 1536
    return mock


@pytest.fixture
def client(mock_store, mock_embedder):
    generator = EmbeddingGenerator(mock_store, mock_embedder)
    app.dependency_overrides[get_embedding_generator] = lambda: generator

    with TestClient(app) as c:
        yield c

    app.dependency_overrides = {}


def test_generate_embeddings(client, mock_store, mock_embedder):
    payload = {
        "type": "UPDATE",
        "table": "content_items",
        "record": {"id": "0b7c", "org_id": "org-1", "body": "word " * 200, "title": "T"},
    }

    resp = client.post("/generate-embeddings", json=payload)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Generated 3 embeddings."}
    mock_store.delete_for_record.assert_awaited_once_with("0b7c")
    assert mock_store.add_chunk.await_count == 3


def test_empty_body_generates_nothing(client, mock_store, mock_embedder):
    resp = client.post("/generate-embeddings", json={"record": {"id": 5, "org_id": 1}})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Generated 0 embeddings."}
    mock_store.delete_for_record.assert_awaited_once_with("5")
    mock_embedder.embed_text.assert_not_called()


def test_embedding_failure_returns_400(client, mock_embedder):
    mock_embedder.embed_text.side_effect = EmbeddingError("Embedding generation failed: HTTPStatusError")

    resp = client.post("/generate-embeddings", json={"record": {"id": "r", "org_id": "o", "body": "text"}})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Embedding generation failed: HTTPStatusError"}


def test_missing_record_returns_400(client, mock_store):
    resp = client.post("/generate-embeddings", json={"id": "r"})

    assert resp.status_code == 400
    data = resp.json()
    assert list(data) == ["error"]
    assert data["error"].startswith("Invalid request: record")
    mock_store.delete_for_record.assert_not_called()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
