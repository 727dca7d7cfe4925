"""MongoDB document models."""

from __future__ import annotations

from app.models.report import LocationDetails, Report, ReportOwner, VerificationEntry
from app.models.user import User

__all__ = [
    "User",
    "LocationDetails",
    "Report",
    "ReportOwner",
    "VerificationEntry",
]
