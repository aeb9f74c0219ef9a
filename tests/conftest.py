import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app
from services import video_service
from services.blob_storage import LocalBlobStorage
from services.video_store import VideoStore

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"

ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}
USER_HEADERS = {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path / "data",
        videos_file=tmp_path / "data" / "videos.json",
        upload_dir=tmp_path / "uploads",
        auth_tokens={
            ADMIN_TOKEN: {"userId": "admin-1", "role": "admin"},
            USER_TOKEN: {"userId": "user-1", "role": "user"},
        },
    )


@pytest.fixture
def store(tmp_path):
    return VideoStore(tmp_path / "data" / "videos.json")


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStorage(tmp_path / "uploads")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture(autouse=True)
def no_duration_probe(monkeypatch):
    # Test payloads are not real videos; keep OpenCV out of the request path.
    monkeypatch.setattr(video_service, "get_video_duration", lambda path: 0.0)
