import asyncio
import functools
import logging
import mimetypes
import os
import re
import time
import uuid
from typing import Optional

import cv2
from fastapi import UploadFile

from core.config import UPLOADS_MOUNT
from core.errors import NotFoundError, PayloadTooLargeError, ValidationError
from schemas.video import VideoRecord
from services.blob_storage import LocalBlobStorage
from services.video_store import VideoStore

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_EXT_RE = re.compile(r"^\.[a-zA-Z0-9]{1,8}$")
MAX_TITLE_SLUG = 64


def sanitize_title(title: str) -> str:
    slug = _NON_ALNUM.sub("", title).lower()[:MAX_TITLE_SLUG]
    return slug or "video"


def guess_extension(filename: Optional[str], content_type: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if _EXT_RE.match(ext):
        return ext
    ext = mimetypes.guess_extension(content_type) or ""
    if _EXT_RE.match(ext):
        return ext.lower()
    return ".mp4"


def build_storage_name(title: str, ext: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"video_{now_ms}_{sanitize_title(title)}_{uuid.uuid4().hex[:8]}{ext}"


def public_url(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}{UPLOADS_MOUNT}/{name}"


def get_video_duration(path: str) -> float:
    duration = 0.0
    try:
        cap = cv2.VideoCapture(path)
        if cap.isOpened():
            fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
            frames = float(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0)
            if fps > 0 and frames > 0:
                duration = round(frames / fps, 3)
        cap.release()
    except Exception as e:
        logger.warning("Could not read video duration for %s: %s", path, e)
    return duration


async def probe_duration(path: str) -> float:
    """
    Run the OpenCV probe in a threadpool so we don't block the event loop.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(get_video_duration, path))


async def read_upload(file: UploadFile, max_bytes: int) -> bytes:
    # Read one byte past the ceiling so oversize is detected before any write.
    if file.size is not None and file.size > max_bytes:
        raise PayloadTooLargeError(f"Video exceeds the {max_bytes} byte limit")
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise PayloadTooLargeError(f"Video exceeds the {max_bytes} byte limit")
    return content


async def upload_video(
    store: VideoStore,
    blobs: LocalBlobStorage,
    file: Optional[UploadFile],
    title: Optional[str],
    uploader: str,
    base_url: str,
    max_bytes: int,
) -> VideoRecord:
    if file is None:
        raise ValidationError("No video file provided")

    content_type = file.content_type or ""
    if not content_type.startswith("video/"):
        raise ValidationError("Only video files are allowed!")

    title = (title or "").strip()
    if not title:
        raise ValidationError("Video title is required")

    try:
        content = await read_upload(file, max_bytes)
    finally:
        await file.close()
    if not content:
        raise ValidationError("No video file provided")

    ext = guess_extension(file.filename, content_type)
    name = build_storage_name(title, ext)
    path = await blobs.save(name, content)
    duration = await probe_duration(str(path))

    record = VideoRecord(
        id=uuid.uuid4().hex,
        title=title,
        location_id=name,
        url=public_url(base_url, name),
        uploader=uploader,
        duration=duration,
        format=ext.lstrip("."),
        views=0,
    )
    # Blob first: a failed append leaves an unreferenced file, never a broken record.
    await store.append(record)
    logger.info("Uploaded video %s (%d bytes) as %s", title, len(content), name)
    return record


async def increment_views(store: VideoStore, location_id: str) -> int:
    def bump(record: VideoRecord) -> VideoRecord:
        return record.model_copy(update={"views": (record.views or 0) + 1})

    updated = await store.update(location_id, bump)
    if updated is None:
        raise NotFoundError("Video not found")
    return updated.views


async def delete_video(store: VideoStore, blobs: LocalBlobStorage, location_id: str) -> bool:
    """
    Remove the blob, then the record.

    A blob deletion failure propagates before the metadata is touched so the
    record never outlives its file. Returns whether a record was removed.
    """
    await blobs.delete(location_id)
    removed = await store.remove_by_key(location_id)
    if removed:
        logger.info("Deleted video %s", location_id)
    else:
        logger.info("Delete requested for unknown video %s", location_id)
    return removed
