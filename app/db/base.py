"""Base types for MongoDB documents."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, PlainSerializer, PlainValidator, WithJsonSchema
from pydantic.alias_generators import to_camel


def parse_object_id(value: Any) -> ObjectId:
    """Coerce a hex string or ObjectId into an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        try:
            return ObjectId(value)
        except InvalidId as exc:
            raise ValueError(f"'{value}' is not a valid id") from exc
    raise ValueError("id must be a 24 character hex string")


PyObjectId = Annotated[
    ObjectId,
    PlainValidator(parse_object_id),
    PlainSerializer(str, return_type=str),
    WithJsonSchema({"type": "string", "example": "665f1c2ab3e4d5f6a7b8c9d0"}),
]


def utcnow() -> datetime:
    """Current time the way MongoDB stores it: naive UTC, millisecond precision."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def as_utc(value: datetime) -> datetime:
    """Mongo hands back naive datetimes that are implicitly UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: datetime | None) -> datetime:
    """Return now, or one millisecond after ``previous`` if the clock has not moved past it."""
    now = utcnow()
    if previous is not None:
        floor = as_naive_utc(previous) + timedelta(milliseconds=1)
        if now < floor:
            return floor
    return now


class MongoModel(BaseModel):
    """Base class for documents: camelCase on the wire and in the store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )
