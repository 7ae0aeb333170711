"""
LLM vendor clients for the compatibility report.

Two interchangeable backends behind the same generate/stream contract:
- GroqClient: direct SDK call (Llama 3.3 70B Versatile on Groq).
- OpenAICompatibleClient: any OpenAI-style /chat/completions URL, streamed
  as Server-Sent Events.

Both yield plain text deltas so the server relays identical framing.
"""
import json
import logging
from typing import AsyncIterator, Optional, Protocol

import httpx
from groq import AsyncGroq
from pydantic import BaseModel, ConfigDict, Field

from core.errors import VendorConfigurationFailure, VendorRequestFailed
from core.settings import Settings

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 2048
VENDOR_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


class AIConfig(BaseModel):
    """Per-user override of the server's endpoint, key and model."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    model: Optional[str] = None


class LLMClient(Protocol):
    async def generate(self, prompt: str) -> str: ...

    def stream(self, prompt: str) -> AsyncIterator[str]: ...


def _messages(prompt: str) -> list[dict]:
    return [{"role": "user", "content": prompt}]


def parse_sse_line(line: str) -> str | None:
    """
    Content delta carried by one SSE line, or None. Non-data lines, the
    [DONE] sentinel and unparsable payloads are skipped.
    """
    if not line.startswith("data: "):
        return None

    data = line[len("data: "):].strip()
    if data == "[DONE]":
        return None

    try:
        payload = json.loads(data)
        return payload["choices"][0]["delta"].get("content") or None
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        logger.warning("[LLM] Failed to parse SSE data line %r: %s", data[:80], e)
        return None


class OpenAICompatibleClient:
    def __init__(self, endpoint: str, api_key: str, model: str, http_client: httpx.AsyncClient | None = None):
        self.endpoint = endpoint
        self.api_key = api_key
        self.model = model
        self._http_client = http_client

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _client(self) -> httpx.AsyncClient:
        return self._http_client or httpx.AsyncClient(timeout=VENDOR_TIMEOUT)

    async def generate(self, prompt: str) -> str:
        logger.info("[LLM] Using custom endpoint: %s", self.endpoint)
        client = self._client()
        try:
            response = await client.post(
                self.endpoint,
                headers=self._headers(),
                json={"model": self.model, "messages": _messages(prompt)},
            )
        finally:
            if client is not self._http_client:
                await client.aclose()

        if response.status_code >= 400:
            raise VendorRequestFailed(response.text[:500], response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise VendorRequestFailed(f"Failed to parse JSON from custom endpoint: {e}") from e

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            text = ""
        if not text:
            raise VendorRequestFailed("Invalid response format from custom endpoint: missing choices[0].message.content")
        return text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        logger.info("[LLM] Using custom endpoint for streaming: %s", self.endpoint)
        client = self._client()
        try:
            async with client.stream(
                "POST",
                self.endpoint,
                headers=self._headers(),
                json={"model": self.model, "messages": _messages(prompt), "stream": True},
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise VendorRequestFailed(body[:500], response.status_code)

                async for line in response.aiter_lines():
                    content = parse_sse_line(line)
                    if content:
                        yield content
        finally:
            if client is not self._http_client:
                await client.aclose()


class GroqClient:
    def __init__(self, api_key: str, model: str, sdk_client: AsyncGroq | None = None):
        self.model = model
        self._client = sdk_client or AsyncGroq(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        logger.info("[LLM] Using Groq SDK, model %s", self.model)
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=_messages(prompt),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        text = response.choices[0].message.content or ""
        if not text:
            raise VendorRequestFailed("Empty response from Groq")
        return text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        logger.info("[LLM] Using Groq SDK for streaming, model %s", self.model)
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=_messages(prompt),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
            stream=True,
        )
        async for chunk in response:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content


def select_client(config: AIConfig | None, settings: Settings, http_client: httpx.AsyncClient | None = None) -> LLMClient:
    """
    User config wins over server defaults. A custom endpoint is used only
    when it is an http(s) URL; otherwise the Groq SDK.
    """
    config = config or AIConfig()
    api_key = config.api_key or settings.api_key
    endpoint = config.endpoint or settings.custom_endpoint
    model = config.model or settings.model

    if not api_key:
        raise VendorConfigurationFailure("MISSING_API_KEY")

    if endpoint and endpoint.startswith("http"):
        return OpenAICompatibleClient(endpoint, api_key, model, http_client=http_client)
    return GroqClient(api_key, model)
