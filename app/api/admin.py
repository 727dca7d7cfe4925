"""Admin dashboard API."""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.deps import require_admin
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.report import ReportStats
from app.services.report_service import get_report_stats

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/reports/stats", response_model=ApiResponse[ReportStats], response_model_exclude_none=True)
async def report_stats(
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Report counts for the admin dashboard."""
    return ApiResponse(data=await get_report_stats(db))
