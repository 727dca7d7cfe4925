"""User document."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, Field, field_validator

from app.db.base import MongoModel, PyObjectId, as_utc

UserRole = Literal["user", "admin"]
USER_ROLES: tuple[str, ...] = ("user", "admin")


class User(MongoModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    email: str
    password: str = Field(default="", exclude=True)
    role: UserRole = "user"
    last_login: datetime | None = None
    created_at: datetime | None = None

    @field_validator("last_login", "created_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
