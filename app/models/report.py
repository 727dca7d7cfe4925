"""Report document for citizen hazard/maintenance reports."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, Field, field_validator

from app.db.base import MongoModel, PyObjectId, as_utc

ReportType = Literal["hazard", "maintenance", "other"]
ReportStatus = Literal["pending", "verified", "in-progress", "resolved", "rejected"]
VerificationStatus = Literal["pending", "approved", "rejected"]
# statuses an admin may set directly; verdicts go through verification
WorkflowStatus = Literal["pending", "in-progress", "resolved"]

REPORT_TYPES: tuple[str, ...] = ("hazard", "maintenance", "other")
REPORT_STATUSES: tuple[str, ...] = ("pending", "verified", "in-progress", "resolved", "rejected")

# verdict -> report status
VERDICT_STATUS: dict[str, str] = {"approved": "verified", "rejected": "rejected"}

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class LocationDetails(MongoModel):
    street_name: str | None = None
    landmark: str | None = None
    area: str | None = None
    city: str | None = None
    pincode: str | None = None
    description: str | None = None


class VerificationEntry(MongoModel):
    status: VerificationStatus
    admin_id: PyObjectId
    comment: str = ""
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReportOwner(MongoModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    name: str | None = None
    email: str | None = None


class Report(MongoModel):
    """A stored report. Fields are optional because list queries may project them away."""

    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    title: str | None = None
    description: str | None = None
    location: str | None = None
    street_name: str | None = None
    area: str | None = None
    city: str | None = None
    pincode: str | None = None
    location_details: LocationDetails | None = None
    type: ReportType | None = None
    status: ReportStatus | None = None
    verification_status: VerificationStatus | None = None
    verification_history: list[VerificationEntry] | None = None
    verified_by: PyObjectId | None = None
    verified_at: datetime | None = None
    admin_comments: str | None = None
    image: str | None = None
    user_id: PyObjectId | None = None
    user: ReportOwner | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("verified_at", "created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    def is_owned_by(self, user_id: PyObjectId) -> bool:
        return self.user_id is not None and self.user_id == user_id
