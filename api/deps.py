from fastapi import Request

from core.config import Settings
from services.blob_storage import LocalBlobStorage
from services.video_store import VideoStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> VideoStore:
    return request.app.state.store


def get_blob_storage(request: Request) -> LocalBlobStorage:
    return request.app.state.blobs


def get_base_url(request: Request) -> str:
    settings: Settings = request.app.state.settings
    return settings.public_base_url or str(request.base_url)
