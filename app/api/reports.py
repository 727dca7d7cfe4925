"""Reports API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.deps import get_current_user, require_admin
from app.db.session import get_db
from app.models.report import Report
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.report import ReportCreate, ReportListResponse, ReportUpdate, VerifyRequest
from app.services.report_service import (
    create_report,
    delete_report,
    get_report,
    list_reports,
    update_report,
    verify_report,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])

# keeps (page - 1) * limit inside a BSON int64 skip
MAX_PAGE = 1_000_000


@router.get("", response_model=ReportListResponse, response_model_exclude_none=True)
async def list_all(
    request: Request,
    select: str | None = Query(default=None, description="Comma separated fields to return"),
    sort: str | None = Query(default=None, description="Comma separated fields, '-' for descending"),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List reports, newest first. Other query params filter: field=value or field[gt|gte|lt|lte|in]=value."""
    reports, total, pagination = await list_reports(
        db,
        current_user,
        request.query_params.multi_items(),
        sort=sort,
        select=select,
        page=page,
        limit=limit,
    )
    return ReportListResponse(data=reports, count=len(reports), total=total, pagination=pagination)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[Report],
    response_model_exclude_none=True,
)
async def create(
    data: ReportCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Submit a report. The owner is always the caller."""
    report = await create_report(db, data, current_user)
    return ApiResponse(message="Report saved successfully", data=report)


@router.get("/{report_id}", response_model=ApiResponse[Report], response_model_exclude_none=True)
async def get_one(
    report_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a report. Only the owner or an admin can view."""
    return ApiResponse(data=await get_report(db, report_id, current_user))


@router.put("/{report_id}", response_model=ApiResponse[Report], response_model_exclude_none=True)
async def update(
    report_id: str,
    data: ReportUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partially update a report. Only the owner or an admin can edit."""
    return ApiResponse(data=await update_report(db, report_id, data, current_user))


@router.delete("/{report_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
async def delete(
    report_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a report. Only the owner or an admin can delete."""
    await delete_report(db, report_id, current_user)
    return ApiResponse(message="Report deleted", data={})


@router.put("/{report_id}/verify", response_model=ApiResponse[Report], response_model_exclude_none=True)
async def verify(
    report_id: str,
    data: VerifyRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Approve or reject a report (admins only)."""
    report = await verify_report(db, report_id, data, admin)
    return ApiResponse(message=f"Report {data.status} successfully", data=report)
