import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.deps import get_base_url, get_blob_storage, get_settings, get_store
from core.config import Settings
from core.errors import NotFoundError, PortalError
from core.security import Identity, require_admin, require_user
from schemas.video import MessageResponse, UploadResponse, VideoRecord, ViewResponse
from services.blob_storage import LocalBlobStorage
from services.video_service import delete_video, increment_views, upload_video
from services.video_store import VideoStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("", response_model=List[VideoRecord])
async def list_videos(
    _: Identity = Depends(require_user),
    store: VideoStore = Depends(get_store),
):
    try:
        return await store.list()
    except PortalError:
        raise
    except Exception:
        logger.exception("Error fetching videos")
        raise HTTPException(status_code=500, detail="Failed to fetch videos")


@router.post("/upload", status_code=201, response_model=UploadResponse)
async def upload(
    video: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    identity: Identity = Depends(require_admin),
    store: VideoStore = Depends(get_store),
    blobs: LocalBlobStorage = Depends(get_blob_storage),
    settings: Settings = Depends(get_settings),
    base_url: str = Depends(get_base_url),
):
    try:
        record = await upload_video(
            store,
            blobs,
            video,
            title,
            uploader=identity.user_id,
            base_url=base_url,
            max_bytes=settings.max_upload_bytes,
        )
    except PortalError:
        raise
    except Exception:
        logger.exception("Error uploading video")
        raise HTTPException(status_code=500, detail="Failed to upload video")

    return UploadResponse(message="Video uploaded successfully", video=record)


@router.get("/{location_id}", response_model=VideoRecord)
async def get_video(
    location_id: str,
    _: Identity = Depends(require_user),
    store: VideoStore = Depends(get_store),
):
    record = await store.find_by_key(location_id)
    if record is None:
        raise NotFoundError("Video not found")
    return record


# Open to any client, signed in or not.
@router.post("/{location_id}/view", response_model=ViewResponse)
async def count_view(location_id: str, store: VideoStore = Depends(get_store)):
    try:
        views = await increment_views(store, location_id)
    except PortalError:
        raise
    except Exception:
        logger.exception("Error incrementing view for %s", location_id)
        raise HTTPException(status_code=500, detail="Failed to increment view count")

    return ViewResponse(message="View counted", views=views)


@router.delete("/{location_id}", response_model=MessageResponse)
async def remove_video(
    location_id: str,
    _: Identity = Depends(require_admin),
    store: VideoStore = Depends(get_store),
    blobs: LocalBlobStorage = Depends(get_blob_storage),
):
    try:
        await delete_video(store, blobs, location_id)
    except PortalError:
        raise
    except Exception:
        logger.exception("Error deleting video %s", location_id)
        raise HTTPException(status_code=500, detail="Failed to delete video")

    return MessageResponse(message="Video deleted successfully")
