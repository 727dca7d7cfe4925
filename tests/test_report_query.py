"""Query-string translation tests."""

from datetime import datetime

import pytest
from bson import ObjectId

from app.core.exceptions import ValidationError
from app.services.report_query import build_filter, parse_projection, parse_sort


def test_equality_and_operators():
    owner = ObjectId()
    query = build_filter(
        [
            ("status", "pending"),
            ("userId", str(owner)),
            ("createdAt[gte]", "2024-01-01T00:00:00Z"),
            ("createdAt[lt]", "2024-02-01"),
            ("type[in]", "hazard,other"),
            ("page", "2"),
            ("sort", "-title"),
        ]
    )
    assert query == {
        "status": "pending",
        "userId": owner,
        "createdAt": {"$gte": datetime(2024, 1, 1), "$lt": datetime(2024, 2, 1)},
        "type": {"$in": ["hazard", "other"]},
    }


def test_repeated_key_becomes_in():
    assert build_filter([("status", "pending"), ("status", "verified")]) == {
        "status": {"$in": ["pending", "verified"]}
    }


def test_nested_location_fields():
    assert build_filter([("locationDetails.city", "Pune")]) == {"locationDetails.city": "Pune"}


def test_offset_datetimes_normalised_to_utc():
    query = build_filter([("updatedAt[gt]", "2024-01-01T05:30:00+05:30")])
    assert query == {"updatedAt": {"$gt": datetime(2024, 1, 1)}}


@pytest.mark.parametrize(
    "params",
    [
        [("password", "x")],
        [("status[ne]", "pending")],
        [("$where", "1")],
        [("userId", "not-an-id")],
        [("createdAt[gte]", "soon")],
        [("status", "pending"), ("status[in]", "verified")],
    ],
)
def test_invalid_filters(params):
    with pytest.raises(ValidationError):
        build_filter(params)


def test_parse_sort():
    assert parse_sort(None) == [("createdAt", -1), ("_id", -1)]
    assert parse_sort("title,-createdAt") == [("title", 1), ("createdAt", -1), ("_id", -1)]
    assert parse_sort("-id") == [("_id", -1)]
    with pytest.raises(ValidationError):
        parse_sort("password")


def test_parse_projection():
    assert parse_projection(None) is None
    assert parse_projection("title, status") == {"title": 1, "status": 1}
    assert parse_projection("id") == {"_id": 1}
    with pytest.raises(ValidationError):
        parse_projection("title,password")


def test_verification_history_fields_filter_only():
    admin = ObjectId()
    assert build_filter(
        [("verificationHistory.adminId", str(admin)), ("verificationHistory.status", "rejected")]
    ) == {"verificationHistory.adminId": admin, "verificationHistory.status": "rejected"}
    with pytest.raises(ValidationError):
        build_filter([("verificationHistory.adminId", "nope")])
    with pytest.raises(ValidationError):
        parse_sort("verificationHistory.status")
    with pytest.raises(ValidationError):
        parse_projection("verificationHistory.status")
