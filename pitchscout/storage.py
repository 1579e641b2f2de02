"""
Video storage in the BaaS object store.

Uploads go to the ``videos`` bucket through the storage REST API and are
referenced afterwards by their public URL. Validation is shared with the
CLI client so bad files are rejected before any network call.
"""

import logging
import mimetypes
import re
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

import httpx

from pitchscout.config import settings
from pitchscout.errors import StorageError, VideoValidationError

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def validate_video(content_type: Optional[str], size_bytes: int, max_bytes: Optional[int] = None) -> None:
    """
    Reject non-video MIME types and files above the size ceiling.

    Raises:
        VideoValidationError: 400 for the wrong type, 413 when too large
    """
    max_bytes = max_bytes if max_bytes is not None else settings.max_video_size_bytes
    if not content_type or not content_type.startswith("video/"):
        raise VideoValidationError("Invalid file type. Please select a video file", 400)
    if size_bytes > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise VideoValidationError(f"File too large. Maximum file size is {limit_mb}MB", 413)


def validate_video_file(path: Path, max_bytes: Optional[int] = None) -> str:
    """Validate a local file by guessed MIME type and size; return the MIME type."""
    content_type, _ = mimetypes.guess_type(path.name)
    validate_video(content_type, path.stat().st_size, max_bytes)
    return content_type


def build_object_path(user_id: UUID, file_name: str) -> str:
    """``<user_id>/<uuid>-<sanitized name>`` inside the bucket."""
    safe_name = _UNSAFE_NAME_CHARS.sub("_", Path(file_name).name).strip("._") or "video"
    return f"{user_id}/{uuid4().hex}-{safe_name}"


class VideoStorage:
    """Thin async client for the object storage REST API."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        bucket: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.storage_url).rstrip("/")
        self.service_key = service_key if service_key is not None else settings.storage_service_key
        self.bucket = bucket or settings.storage_bucket
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(300.0))
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def public_url(self, object_path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{object_path}"

    async def upload(self, object_path: str, content: bytes, content_type: str) -> str:
        """
        Store ``content`` at ``object_path`` and return its public URL.

        Raises:
            StorageError: if the storage API rejects the upload
        """
        headers = {"Content-Type": content_type, "x-upsert": "false"}
        if self.service_key:
            headers["Authorization"] = f"Bearer {self.service_key}"
            headers["apikey"] = self.service_key

        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{object_path}"
        try:
            response = await self.client.post(url, content=content, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Storage upload failed for {object_path}: {e}")
            raise StorageError("Video upload failed")

        if not response.is_success:
            logger.error(f"Storage upload rejected: {response.status_code} {response.text[:300]}")
            raise StorageError(f"Video upload failed: {response.status_code}")

        logger.info(f"Stored video {object_path} ({len(content)} bytes)")
        return self.public_url(object_path)
