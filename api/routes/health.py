from fastapi import APIRouter

from schemas.video import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK", message="Video portal backend is running")
