import json

import httpx
import pytest

from content_ai.core.errors import CompletionError
from content_ai.llm.client import LLMClient


def make_client(handler):
    return LLMClient(
        api_key="sk-test",
        url="https://api.example.test/v1/chat/completions",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_chat_uses_fixed_model_and_token_ceiling():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "Sports"}}]})

    reply = await make_client(handler).chat([{"role": "user", "content": "hi"}])

    assert reply == "Sports"
    assert seen["model"] == "gpt-4o-mini"
    assert seen["max_tokens"] == 4000
    assert seen["temperature"] == 0.7
    assert seen["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
async def test_temperature_override():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    await make_client(handler).chat([{"role": "user", "content": "hi"}], temperature=0.0)
    assert seen["temperature"] == 0.0


@pytest.mark.asyncio
async def test_non_2xx_includes_status_in_error():
    client = make_client(lambda request: httpx.Response(500, text="upstream down"))

    with pytest.raises(CompletionError, match="500 - upstream down"):
        await client.chat([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
async def test_malformed_completion_raises():
    client = make_client(lambda request: httpx.Response(200, json={"choices": []}))

    with pytest.raises(CompletionError):
        await client.chat([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
async def test_transport_error_raises_completion_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CompletionError):
        await make_client(handler).chat([{"role": "user", "content": "hi"}])
