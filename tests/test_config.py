from pathlib import Path

from core.config import MAX_UPLOAD_BYTES, UPLOAD_DIR, Settings


def test_defaults(monkeypatch):
    for name in ("DATA_DIR", "VIDEOS_FILE", "UPLOAD_DIR", "MAX_UPLOAD_BYTES",
                 "PUBLIC_BASE_URL", "CORS_ORIGINS", "AUTH_TOKENS", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.max_upload_bytes == MAX_UPLOAD_BYTES == 100 * 1024 * 1024
    assert settings.upload_dir == UPLOAD_DIR
    assert settings.videos_file == settings.data_dir / "videos.json"
    assert settings.public_base_url is None
    assert settings.cors_origins == ["*"]
    assert settings.port == 10000


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "u"))
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://videos.example.com")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, http://localhost:3000")
    monkeypatch.setenv("AUTH_TOKENS", '{"t": {"userId": "u1", "role": "admin"}}')
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.data_dir == tmp_path / "d"
    assert settings.videos_file == tmp_path / "d" / "videos.json"
    assert settings.upload_dir == Path(tmp_path / "u")
    assert settings.max_upload_bytes == 2048
    assert settings.public_base_url == "https://videos.example.com"
    assert settings.cors_origins == ["http://localhost:5173", "http://localhost:3000"]
    assert settings.auth_tokens == {"t": {"userId": "u1", "role": "admin"}}
    assert settings.log_level == "DEBUG"


def test_public_base_url_is_used_for_video_urls(settings):
    from fastapi.testclient import TestClient

    from main import create_app

    from .conftest import ADMIN_HEADERS

    settings.public_base_url = "https://videos.example.com/"
    client = TestClient(create_app(settings))
    resp = client.post(
        "/videos/upload",
        files={"video": ("a.webm", b"abc", "video/webm")},
        data={"title": "Clip"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201
    video = resp.json()["video"]
    assert video["format"] == "webm"
    assert video["url"] == f"https://videos.example.com/uploads/{video['locationId']}"
