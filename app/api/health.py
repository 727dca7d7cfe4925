"""Health check endpoint."""

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health() -> dict:
    """Return API health status."""
    return {"success": True, "status": "ok", "service": settings.app_name}
