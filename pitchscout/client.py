"""
PitchScout API client.

Async HTTP client used by the CLI (and usable from notebooks or scripts).
Uploads are validated locally before any network call; coaching replies
are streamed and decoded fragment by fragment.

Usage:
    async with PitchScoutClient(token="...") as api:
        video = await api.upload_video(Path("match.mp4"))
        async for fragment in api.stream_chat("How do I improve my first touch?", intent="improvement"):
            print(fragment, end="")
"""

import logging
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import httpx

from pitchscout.config import settings
from pitchscout.errors import ApiClientError
from pitchscout.sse import aiter_deltas
from pitchscout.storage import validate_video_file

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict):
        if isinstance(data.get("error"), str):
            return data["error"]
        if "detail" in data:
            return str(data["detail"])
    return f"HTTP {response.status_code}"


class PitchScoutClient:
    """Thin async client over the PitchScout REST API."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 300.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "PitchScoutClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        if not self.token:
            raise ApiClientError("No access token. Pass --token or set API_TOKEN", 401)
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self.client.request(
            method, f"{self.base_url}{path}", headers=self._headers(), **kwargs
        )
        if not response.is_success:
            raise ApiClientError(_error_message(response), response.status_code)
        return response.json()

    async def upload_video(self, path: Path, title: Optional[str] = None) -> dict[str, Any]:
        """
        Upload a local video file.

        Raises:
            VideoValidationError: before any request if the file is not a
                video or is over the size ceiling
            ApiClientError: if the API rejects the upload
        """
        content_type = validate_video_file(path)
        logger.info(f"Uploading {path.name} ({content_type})")
        files = {"file": (path.name, path.read_bytes(), content_type)}
        data = {"title": title} if title else None
        return await self._request("POST", "/videos", files=files, data=data)

    async def analyze_video(self, position: str, **context: Any) -> dict[str, Any]:
        return await self._request("POST", "/analyze-video", json={"position": position, **context})

    async def get_usage(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/usage/me")

    async def stream_chat(
        self,
        message: str,
        intent: str = "general",
        history: Optional[list[dict[str, str]]] = None,
    ) -> AsyncIterator[str]:
        """Send one message to the coach and yield reply fragments as they arrive."""
        messages = list(history or []) + [{"role": "user", "content": message}]
        async with self.client.stream(
            "POST",
            f"{self.base_url}/sports-coach-chat",
            headers=self._headers(),
            json={"messages": messages, "intent": intent},
        ) as response:
            if not response.is_success:
                await response.aread()
                raise ApiClientError(_error_message(response), response.status_code)
            async for fragment in aiter_deltas(response.aiter_bytes()):
                yield fragment
