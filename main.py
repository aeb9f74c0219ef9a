import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from api.frontend import FrontendFiles
from api.routes.health import router as health_router
from api.routes.videos import router as videos_router
from core.config import UPLOADS_MOUNT, Settings
from core.errors import PortalError
from core.security import TokenRegistry
from schemas.video import MessageResponse
from services.blob_storage import LocalBlobStorage
from services.video_store import VideoStore

logger = logging.getLogger(__name__)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    blobs = LocalBlobStorage(settings.upload_dir)
    blobs.ensure_dir()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(title="Video Portal", version="1.0.0")
    app.state.settings = settings
    app.state.store = VideoStore(settings.videos_file)
    app.state.blobs = blobs
    app.state.tokens = TokenRegistry.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PortalError, portal_error_handler)

    # Served both at the root and under the prefix the bundled frontend calls.
    for prefix in dict.fromkeys(["", settings.api_prefix]):
        app.include_router(videos_router, prefix=prefix, include_in_schema=not prefix)
        app.include_router(health_router, prefix=prefix, include_in_schema=not prefix)

    app.mount(UPLOADS_MOUNT, StaticFiles(directory=settings.upload_dir), name="uploads")

    dist = settings.frontend_dist
    if dist is not None and dist.is_dir():
        app.mount("/", FrontendFiles(directory=dist, api_prefix=settings.api_prefix), name="frontend")
    else:
        @app.get("/", response_model=MessageResponse)
        def read_root():
            return MessageResponse(message="Video portal backend is running")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
