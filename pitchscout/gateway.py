"""
AI Gateway Client
=================

Async client for the hosted chat-completions gateway that produces every
analysis, report, match and coaching reply.

Usage:
    async with AIGatewayClient(api_key="...") as gateway:
        content = await gateway.complete(messages)
        data = parse_json_content(content, "Failed to parse analysis results")

Non-2xx answers are mapped to GatewayError by status (429, 402, other) and
are never retried.
"""

import json
import logging
import re
from typing import Any, Optional

import httpx

from pitchscout.config import settings
from pitchscout.errors import GatewayConfigurationError, GatewayError, ResponseParseError

logger = logging.getLogger(__name__)

# ```json ... ``` first, then a bare ``` ... ``` block
_JSON_FENCE = re.compile(r"```json\n?([\s\S]*?)\n?```")
_ANY_FENCE = re.compile(r"```\n?([\s\S]*?)\n?```")


def strip_code_fences(content: str) -> str:
    """Return the body of the first Markdown code block, or the content as-is."""
    match = _JSON_FENCE.search(content) or _ANY_FENCE.search(content)
    if match and match.group(1):
        return match.group(1)
    return content


def parse_json_content(content: str, error_message: str) -> Any:
    """
    Parse model output as JSON after removing Markdown code fences.

    Raises:
        ResponseParseError: with ``error_message`` if the text is not JSON
    """
    try:
        return json.loads(strip_code_fences(content))
    except (json.JSONDecodeError, TypeError):
        logger.error(f"Failed to parse AI response: {content[:500]}")
        raise ResponseParseError(error_message)


class AIGatewayClient:
    """
    Chat-completions client bound to one model identifier.

    Use as an async context manager, or call ``close()`` when done. A
    pre-built ``httpx.AsyncClient`` may be injected (tests pass one backed
    by ``httpx.MockTransport``).
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.url = url or settings.ai_gateway_url
        self.model = model or settings.ai_model
        self._timeout = timeout or settings.ai_request_timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "AIGatewayClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def client(self) -> httpx.AsyncClient:
        """Return the HTTP client, lazily creating it if needed."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_request(self, messages: list[dict[str, str]], stream: bool) -> httpx.Request:
        if not self.is_configured():
            raise GatewayConfigurationError("AI_GATEWAY_API_KEY is not configured")
        return self.client.build_request(
            "POST",
            self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={"model": self.model, "messages": messages, "stream": stream},
        )

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """
        Run a non-streaming completion and return the first choice's text.

        Raises:
            GatewayConfigurationError: if no API key is configured
            GatewayError: on any non-2xx answer
        """
        request = self._build_request(messages, stream=False)
        try:
            response = await self.client.send(request)
        except httpx.RequestError as e:
            logger.error(f"AI gateway request failed: {e}")
            raise GatewayError(f"AI gateway request failed: {e.__class__.__name__}")

        if not response.is_success:
            logger.error(f"AI gateway error: {response.status_code} {response.text[:500]}")
            raise GatewayError.from_status(response.status_code)

        try:
            data = response.json()
        except ValueError:
            raise ResponseParseError("AI gateway returned a non-JSON body")

        content = None
        choices = data.get("choices") if isinstance(data, dict) else None
        if choices:
            content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise GatewayError("No content in AI response")
        return content

    async def open_stream(self, messages: list[dict[str, str]]) -> httpx.Response:
        """
        Start a streaming completion and return the open upstream response.

        The caller owns the response and must ``aclose()`` it once the body
        has been relayed. Errors are raised before any byte is streamed.
        """
        request = self._build_request(messages, stream=True)
        try:
            response = await self.client.send(request, stream=True)
        except httpx.RequestError as e:
            logger.error(f"AI gateway stream request failed: {e}")
            raise GatewayError(f"AI gateway request failed: {e.__class__.__name__}")

        if not response.is_success:
            body = await response.aread()
            await response.aclose()
            logger.error(f"AI gateway error: {response.status_code} {body[:500]!r}")
            raise GatewayError.from_status(response.status_code)
        return response
