import json

import httpx
import pytest

from content_ai.embeddings.embedder import Embedder, EmbeddingError


def make_embedder(handler):
    return Embedder(
        api_key="sk-test",
        model="text-embedding-3-small",
        base_url="https://api.example.test/v1/embeddings",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_embed_text_sends_single_input():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"data": [{"embedding": [1, 0.5, -2]}]})

    vector = await make_embedder(handler).embed_text("hello")

    assert vector == [1.0, 0.5, -2.0]
    assert seen["body"] == {"model": "text-embedding-3-small", "input": "hello"}
    assert seen["auth"] == "Bearer sk-test"


@pytest.mark.asyncio
async def test_http_error_raises_embedding_error():
    embedder = make_embedder(lambda request: httpx.Response(429, json={"error": "rate limited"}))

    with pytest.raises(EmbeddingError):
        await embedder.embed_text("hello")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {},
    {"data": "nope"},
    {"data": [{"vector": [1]}]},
    {"data": [{"embedding": ["a"]}]},
    {"data": []},
])
async def test_malformed_response_raises_embedding_error(payload):
    embedder = make_embedder(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(EmbeddingError):
        await embedder.embed_text("hello")
