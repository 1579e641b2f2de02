"""
Tests for Video Uploads
=======================

Tests for:
- POST /api/v1/videos
- Upload validation shared with the client
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from pitchscout.config import settings
from pitchscout.errors import VideoValidationError
from pitchscout.models import PlayerVideo
from pitchscout.storage import build_object_path, validate_video


def test_validate_video_rejects_wrong_type_and_size():
    with pytest.raises(VideoValidationError) as exc_info:
        validate_video("image/png", 10, max_bytes=100)
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid file type. Please select a video file"

    with pytest.raises(VideoValidationError) as exc_info:
        validate_video("video/mp4", 3 * 1024 * 1024, max_bytes=2 * 1024 * 1024)
    assert exc_info.value.status_code == 413
    assert exc_info.value.message == "File too large. Maximum file size is 2MB"

    validate_video("video/quicktime", 100, max_bytes=100)


def test_object_path_is_scoped_to_user_and_sanitized():
    user_id = uuid4()
    path = build_object_path(user_id, "../My Match (final).mp4")

    owner, name = path.split("/")
    assert owner == str(user_id)
    assert name.endswith("-My_Match_final_.mp4")
    assert build_object_path(user_id, "a.mp4") != build_object_path(user_id, "a.mp4")


@pytest.mark.asyncio
async def test_upload_stores_object_and_links_profile(
    client: AsyncClient, user_id, auth_headers, storage_stub, count_rows
):
    profile = await client.put(
        "/api/v1/players/me", json={"display_name": "Sam Carter"}, headers=auth_headers
    )

    response = await client.post(
        "/api/v1/videos",
        files={"file": ("match.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")},
        data={"title": "Cup final", "description": "Second half"},
        headers=auth_headers,
    )
    assert response.status_code == 201

    video = response.json()
    assert video["title"] == "Cup final"
    assert video["content_type"] == "video/mp4"
    assert video["size_bytes"] == 12
    assert video["video_url"].startswith(f"https://storage.test/storage/v1/object/public/videos/{user_id}/")

    upload = storage_stub.uploads[0]
    assert upload.url.path.startswith(f"/storage/v1/object/videos/{user_id}/")
    assert upload.headers["authorization"] == "Bearer service-key"
    assert upload.content == b"\x00\x00\x00\x18ftypmp42"

    detail = await client.get(f"/api/v1/players/{profile.json()['id']}")
    assert [v["id"] for v in detail.json()["videos"]] == [video["id"]]
    assert await count_rows(PlayerVideo) == 1


@pytest.mark.asyncio
async def test_upload_without_profile_uses_file_name(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/videos",
        files={"file": ("training.webm", b"webm-bytes", "video/webm")},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["title"] == "training.webm"


@pytest.mark.asyncio
async def test_non_video_is_rejected(client: AsyncClient, auth_headers, storage_stub, count_rows):
    response = await client.post(
        "/api/v1/videos",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type. Please select a video file"}
    assert storage_stub.uploads == []
    assert await count_rows(PlayerVideo) == 0


@pytest.mark.asyncio
async def test_oversized_video_is_rejected(
    client: AsyncClient, auth_headers, storage_stub, count_rows, monkeypatch
):
    monkeypatch.setattr(settings, "max_video_size_mb", 1)

    response = await client.post(
        "/api/v1/videos",
        files={"file": ("long.mp4", b"x" * (1024 * 1024 + 1), "video/mp4")},
        headers=auth_headers,
    )
    assert response.status_code == 413
    assert response.json() == {"error": "File too large. Maximum file size is 1MB"}
    assert storage_stub.uploads == []
    assert await count_rows(PlayerVideo) == 0


@pytest.mark.asyncio
async def test_storage_failure_is_502(client: AsyncClient, auth_headers, storage_stub, count_rows):
    storage_stub.status_code = 500

    response = await client.post(
        "/api/v1/videos",
        files={"file": ("match.mp4", b"data", "video/mp4")},
        headers=auth_headers,
    )
    assert response.status_code == 502
    assert response.json() == {"error": "Video upload failed: 500"}
    assert await count_rows(PlayerVideo) == 0


@pytest.mark.asyncio
async def test_upload_requires_authentication(client: AsyncClient, storage_stub):
    response = await client.post(
        "/api/v1/videos", files={"file": ("match.mp4", b"data", "video/mp4")}
    )
    assert response.status_code == 401
    assert storage_stub.uploads == []
