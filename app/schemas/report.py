"""Report schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, ConfigDict, Field, model_validator

from app.db.base import MongoModel
from app.models.report import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    LocationDetails,
    Report,
    ReportType,
    WorkflowStatus,
)
from app.schemas.common import ApiResponse, Pagination


class ReportCreate(MongoModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    location: str = Field(min_length=1)
    street_name: str | None = None
    area: str | None = None
    city: str | None = None
    pincode: str | None = None
    location_details: LocationDetails | None = None
    type: ReportType = "hazard"
    image: str | None = None


class ReportUpdate(MongoModel):
    """Partial update. Ownership and verification fields are not editable here."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    location: str | None = Field(default=None, min_length=1)
    street_name: str | None = None
    area: str | None = None
    city: str | None = None
    pincode: str | None = None
    location_details: LocationDetails | None = None
    type: ReportType | None = None
    image: str | None = None
    status: WorkflowStatus | None = None

    @model_validator(mode="after")
    def required_fields_not_cleared(self) -> "ReportUpdate":
        for name in ("title", "description", "location", "type", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields the client actually sent, keyed by their stored (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class VerifyRequest(MongoModel):
    status: Literal["approved", "rejected"]
    admin_comments: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        validation_alias=AliasChoices("adminComments", "admin_comments", "comment"),
    )


class ReportListResponse(ApiResponse[list[Report]]):
    count: int
    total: int
    pagination: Pagination


class ReportStats(MongoModel):
    total: int = 0
    pending: int = 0
    verified: int = 0
    in_progress: int = 0
    resolved: int = 0
    rejected: int = 0
