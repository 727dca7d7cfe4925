"""Report service: ownership rules, list queries and the verification workflow."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.exceptions import ForbiddenError, NotFoundError
from app.db.base import next_timestamp, parse_object_id
from app.db.session import REPORTS, USERS
from app.models.report import REPORT_STATUSES, VERDICT_STATUS, Report, ReportOwner
from app.models.user import User
from app.schemas.common import PageRef, Pagination
from app.schemas.report import ReportCreate, ReportStats, ReportUpdate, VerifyRequest
from app.services.report_query import build_filter, parse_projection, parse_sort

logger = logging.getLogger(__name__)


def _report_object_id(report_id: str) -> ObjectId:
    try:
        return parse_object_id(report_id)
    except ValueError as exc:
        raise NotFoundError(f"Report not found with id of {report_id}") from exc


async def _load_report(db: AsyncIOMotorDatabase, report_id: str) -> Report:
    doc = await db[REPORTS].find_one({"_id": _report_object_id(report_id)})
    if doc is None:
        raise NotFoundError(f"Report not found with id of {report_id}")
    return Report.model_validate(doc)


def _ensure_can_access(report: Report, requester: User, action: str) -> None:
    """Owner or admin only."""
    if requester.is_admin or report.is_owned_by(requester.id):
        return
    raise ForbiddenError(f"Not authorized to {action} this report")


async def _attach_owners(db: AsyncIOMotorDatabase, reports: list[Report]) -> list[Report]:
    """Fill ``user`` with the owner's name and email."""
    owner_ids = {r.user_id for r in reports if r.user_id is not None}
    if not owner_ids:
        return reports
    cursor = db[USERS].find({"_id": {"$in": list(owner_ids)}}, {"name": 1, "email": 1})
    owners = {doc["_id"]: ReportOwner.model_validate(doc) for doc in await cursor.to_list(length=len(owner_ids))}
    for report in reports:
        if report.user_id is not None:
            report.user = owners.get(report.user_id)
    return reports


async def list_reports(
    db: AsyncIOMotorDatabase,
    requester: User,
    params: Iterable[tuple[str, str]],
    sort: str | None = None,
    select: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Report], int, Pagination]:
    """List reports matching the query. Non-admins only ever see their own."""
    query = build_filter(params)
    if not requester.is_admin:
        query["userId"] = requester.id
    projection = parse_projection(select)
    sort_spec = parse_sort(sort)

    start = (page - 1) * limit
    total = await db[REPORTS].count_documents(query)
    cursor = db[REPORTS].find(query, projection, sort=sort_spec, skip=start, limit=limit)
    reports = [Report.model_validate(doc) for doc in await cursor.to_list(length=limit)]
    await _attach_owners(db, reports)

    pagination = Pagination()
    if page * limit < total:
        pagination.next = PageRef(page=page + 1, limit=limit)
    if start > 0:
        pagination.prev = PageRef(page=page - 1, limit=limit)
    return reports, total, pagination


async def get_report(db: AsyncIOMotorDatabase, report_id: str, requester: User) -> Report:
    """Get one report the requester owns (or any report, for admins)."""
    report = await _load_report(db, report_id)
    _ensure_can_access(report, requester, "access")
    await _attach_owners(db, [report])
    return report


async def create_report(db: AsyncIOMotorDatabase, data: ReportCreate, requester: User) -> Report:
    """Create a report owned by the requester, in the pending state."""
    now = next_timestamp(None)
    doc = data.model_dump(by_alias=True, exclude_none=True)
    doc.update(
        {
            "status": "pending",
            "verificationStatus": "pending",
            "verificationHistory": [],
            "userId": requester.id,
            "createdAt": now,
            "updatedAt": now,
        }
    )
    result = await db[REPORTS].insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("report_created id=%s user_id=%s type=%s", result.inserted_id, requester.id, doc.get("type"))
    return Report.model_validate(doc)


async def update_report(
    db: AsyncIOMotorDatabase,
    report_id: str,
    data: ReportUpdate,
    requester: User,
) -> Report:
    """Apply a partial update. Only admins may move the status."""
    report = await _load_report(db, report_id)
    _ensure_can_access(report, requester, "update")

    changes = data.changes()
    if "status" in changes and not requester.is_admin:
        raise ForbiddenError("Only admins can change the report status")
    if not changes:
        return report

    changes["updatedAt"] = next_timestamp(report.updated_at)
    doc = await db[REPORTS].find_one_and_update(
        {"_id": report.id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFoundError(f"Report not found with id of {report_id}")
    logger.info("report_updated id=%s by=%s fields=%s", report.id, requester.id, sorted(changes))
    return Report.model_validate(doc)


async def delete_report(db: AsyncIOMotorDatabase, report_id: str, requester: User) -> None:
    """Delete a report the requester owns (or any report, for admins)."""
    report = await _load_report(db, report_id)
    _ensure_can_access(report, requester, "delete")
    await db[REPORTS].delete_one({"_id": report.id})
    logger.info("report_deleted id=%s by=%s", report.id, requester.id)


async def verify_report(
    db: AsyncIOMotorDatabase,
    report_id: str,
    data: VerifyRequest,
    admin: User,
) -> Report:
    """Record an admin verdict and append it to the verification history."""
    report = await _load_report(db, report_id)

    now = next_timestamp(report.updated_at)
    comment = data.admin_comments or ""
    entry = {"status": data.status, "adminId": admin.id, "comment": comment, "timestamp": now}
    doc = await db[REPORTS].find_one_and_update(
        {"_id": report.id},
        {
            "$set": {
                "status": VERDICT_STATUS[data.status],
                "verificationStatus": data.status,
                "verifiedBy": admin.id,
                "verifiedAt": now,
                "adminComments": comment,
                "updatedAt": now,
            },
            "$push": {"verificationHistory": entry},
        },
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFoundError(f"Report not found with id of {report_id}")
    logger.info("report_verified id=%s verdict=%s admin=%s", report.id, data.status, admin.id)
    return Report.model_validate(doc)


async def get_report_stats(db: AsyncIOMotorDatabase) -> ReportStats:
    """Count reports in total and per status."""
    counts = {"total": await db[REPORTS].count_documents({})}
    for status in REPORT_STATUSES:
        counts[status.replace("-", "_")] = await db[REPORTS].count_documents({"status": status})
    return ReportStats(**counts)
