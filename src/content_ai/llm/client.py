from typing import List, Dict, Any, Optional
import logging

import httpx

from ..config import settings
from ..core.errors import CompletionError

logger = logging.getLogger("content_ai.llm")


class LLMClient:
    """
    Minimal chat-completion client for the OpenAI API.

    Every call uses the configured model and max-token ceiling; only the
    message list and the sampling temperature vary per call.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.openai_api_key.get_secret_value()
        self.model = model or settings.chat_model
        self.url = url or settings.chat_completions_url
        self.max_tokens = max_tokens or settings.chat_max_tokens
        self.timeout = timeout or settings.http_timeout
        self._transport = transport

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        """
        Returns the assistant message text, e.g. "Technology".

        Raises CompletionError on transport failures, non-2xx statuses and
        responses without a text message.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": settings.chat_temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            logger.error("Completion request failed (%s): %s", type(exc).__name__, exc)
            raise CompletionError(f"OpenAI API request failed: {type(exc).__name__}") from exc

        if resp.is_error:
            raise CompletionError(f"OpenAI API error: {resp.status_code} - {resp.text}")

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise CompletionError("OpenAI API returned a malformed completion") from exc

        if not isinstance(content, str):
            raise CompletionError("OpenAI API returned no message content")
        return content
