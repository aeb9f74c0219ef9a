import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
UPLOAD_DIR = BASE_DIR / "uploads"
VIDEOS_FILE = DATA_DIR / "videos.json"

UPLOADS_MOUNT = "/uploads"
MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100 MiB
CHUNK_SIZE = 1024 * 1024  # 1 MiB for blob writes


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


class Settings(BaseModel):
    data_dir: Path = DATA_DIR
    videos_file: Path = VIDEOS_FILE
    upload_dir: Path = UPLOAD_DIR
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    public_base_url: Optional[str] = None
    cors_origins: List[str] = ["*"]
    auth_tokens: dict = {}
    auth_tokens_file: Optional[Path] = None
    frontend_dist: Optional[Path] = None
    api_prefix: str = "/api"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 10000

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = _env_path("DATA_DIR", DATA_DIR)
        origins = os.getenv("CORS_ORIGINS", "*")
        tokens_file = os.getenv("AUTH_TOKENS_FILE")
        frontend = os.getenv("FRONTEND_DIST")

        return cls(
            data_dir=data_dir,
            videos_file=_env_path("VIDEOS_FILE", data_dir / "videos.json"),
            upload_dir=_env_path("UPLOAD_DIR", UPLOAD_DIR),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES)),
            public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            auth_tokens=json.loads(os.getenv("AUTH_TOKENS") or "{}"),
            auth_tokens_file=Path(tokens_file) if tokens_file else None,
            frontend_dist=Path(frontend) if frontend else None,
            api_prefix=os.getenv("API_PREFIX", "/api").rstrip("/"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 10000)),
        )
