"""User schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from app.db.base import MongoModel, PyObjectId
from app.models.user import UserRole


class UserOut(MongoModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    email: str
    role: UserRole
    last_login: datetime | None = None
    created_at: datetime | None = None
