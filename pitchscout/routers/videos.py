"""
Videos Router
=============

Multipart video upload into the ``videos`` storage bucket.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.config import settings
from pitchscout.dependencies import CurrentUser, get_current_user, get_db, get_storage
from pitchscout.models import PlayerProfile, PlayerVideo
from pitchscout.schemas import PlayerVideoRead
from pitchscout.storage import VideoStorage, build_object_path, validate_video

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["Videos"])

CHUNK_SIZE = 1024 * 1024


async def _read_limited(upload: UploadFile, max_bytes: int) -> bytes:
    """Read the upload, stopping one chunk past the ceiling."""
    buffer = bytearray()
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            break
    return bytes(buffer)


@router.post("", response_model=PlayerVideoRead, status_code=status.HTTP_201_CREATED)
async def upload_video(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: VideoStorage = Depends(get_storage),
) -> PlayerVideo:
    """
    Upload a match video.

    Non-video MIME types are rejected with 400 and files over the size
    ceiling with 413, before anything is sent to storage. The video is
    attached to the caller's profile when one exists.
    """
    max_bytes = settings.max_video_size_bytes
    validate_video(file.content_type, file.size or 0, max_bytes)

    content = await _read_limited(file, max_bytes)
    validate_video(file.content_type, len(content), max_bytes)

    file_name = file.filename or "video"
    object_path = build_object_path(user.id, file_name)
    public_url = await storage.upload(object_path, content, file.content_type)

    profile_id = await db.scalar(select(PlayerProfile.id).where(PlayerProfile.user_id == user.id))

    video = PlayerVideo(
        player_id=profile_id,
        user_id=user.id,
        title=title or file_name,
        description=description,
        storage_path=object_path,
        video_url=public_url,
        content_type=file.content_type,
        size_bytes=len(content),
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)

    logger.info(f"Video uploaded: id={video.id} path={object_path} size={len(content)}")
    return video
