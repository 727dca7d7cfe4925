"""Translate report list query strings into MongoDB filters, sorts and projections.

Filters follow the ``field=value`` / ``field[op]=value`` convention::

    ?status=pending&createdAt[gte]=2024-01-01&type[in]=hazard,other

A repeated plain key becomes ``$in``. Values are coerced to the stored type
of the field, so ``userId`` compares as an ObjectId and ``createdAt`` as a
datetime.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from app.core.exceptions import ValidationError
from app.db.base import as_naive_utc, parse_object_id

RESERVED_PARAMS = frozenset({"select", "sort", "page", "limit"})
OPERATORS = frozenset({"gt", "gte", "lt", "lte", "in"})

_PARAM_RE = re.compile(r"^(?P<field>[A-Za-z][A-Za-z0-9.]*)(?:\[(?P<op>[A-Za-z]+)\])?$")


def _parse_datetime(value: str) -> datetime:
    # stored dates are naive UTC; compare like with like
    return as_naive_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))


def _parse_str(value: str) -> str:
    return value


_LOCATION_DETAIL_FIELDS = ("streetName", "landmark", "area", "city", "pincode", "description")

# match any entry of the verification log
_HISTORY_FIELDS: dict[str, Callable[[str], Any]] = {
    "verificationHistory.status": _parse_str,
    "verificationHistory.adminId": parse_object_id,
}

FIELD_TYPES: dict[str, Callable[[str], Any]] = {
    "_id": parse_object_id,
    "title": _parse_str,
    "description": _parse_str,
    "location": _parse_str,
    "streetName": _parse_str,
    "area": _parse_str,
    "city": _parse_str,
    "pincode": _parse_str,
    "type": _parse_str,
    "status": _parse_str,
    "verificationStatus": _parse_str,
    "adminComments": _parse_str,
    "image": _parse_str,
    "userId": parse_object_id,
    "verifiedBy": parse_object_id,
    "createdAt": _parse_datetime,
    "updatedAt": _parse_datetime,
    "verifiedAt": _parse_datetime,
    **{f"locationDetails.{name}": _parse_str for name in _LOCATION_DETAIL_FIELDS},
    **_HISTORY_FIELDS,
}

# projections may also name whole subdocuments
SELECTABLE_FIELDS = (frozenset(FIELD_TYPES) - frozenset(_HISTORY_FIELDS)) | {"locationDetails", "verificationHistory"}

DEFAULT_SORT: list[tuple[str, int]] = [("createdAt", -1)]


def _field_name(name: str) -> str:
    # clients see the document id as "id"
    return "_id" if name == "id" else name


def _coerce(field: str, raw: str) -> Any:
    try:
        return FIELD_TYPES[field](raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid value '{raw}' for {field}") from exc


def build_filter(params: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Build a Mongo filter from (key, value) query pairs, skipping reserved keys."""
    query: dict[str, Any] = {}
    equality: dict[str, list[Any]] = {}

    for key, raw in params:
        if key in RESERVED_PARAMS:
            continue
        match = _PARAM_RE.match(key)
        if not match:
            raise ValidationError(f"Invalid filter '{key}'")
        field = _field_name(match.group("field"))
        op = match.group("op")
        if field not in FIELD_TYPES:
            raise ValidationError(f"Unknown filter field '{match.group('field')}'")

        if op is None:
            equality.setdefault(field, []).append(_coerce(field, raw))
            continue
        if op not in OPERATORS:
            raise ValidationError(f"Unsupported operator '{op}' on {match.group('field')}")

        condition = query.setdefault(field, {})
        if not isinstance(condition, dict):
            raise ValidationError(f"Conflicting filters on {match.group('field')}")
        if op == "in":
            values = [_coerce(field, part) for part in raw.split(",") if part.strip()]
            condition["$in"] = values
        else:
            condition[f"${op}"] = _coerce(field, raw)

    for field, values in equality.items():
        if field in query:
            raise ValidationError(f"Conflicting filters on {field}")
        query[field] = values[0] if len(values) == 1 else {"$in": values}

    return query


def parse_sort(sort: str | None) -> list[tuple[str, int]]:
    """Parse ``a,-b`` into a Mongo sort spec. ``_id`` breaks ties."""
    spec: list[tuple[str, int]] = []
    if sort:
        for part in sort.split(","):
            part = part.strip()
            if not part:
                continue
            direction = -1 if part.startswith("-") else 1
            field = _field_name(part.lstrip("-+"))
            if field not in FIELD_TYPES or field in _HISTORY_FIELDS:
                raise ValidationError(f"Cannot sort by '{part.lstrip('-+')}'")
            spec.append((field, direction))
    if not spec:
        spec = list(DEFAULT_SORT)
    if all(field != "_id" for field, _ in spec):
        spec.append(("_id", -1))
    return spec


def parse_projection(select: str | None) -> dict[str, int] | None:
    """Parse ``a,b`` into an inclusion projection. The id is always returned."""
    if not select:
        return None
    projection: dict[str, int] = {}
    for part in select.split(","):
        name = part.strip()
        if not name:
            continue
        field = _field_name(name)
        if field not in SELECTABLE_FIELDS:
            raise ValidationError(f"Cannot select unknown field '{name}'")
        if field != "_id":
            projection[field] = 1
    return projection or {"_id": 1}
