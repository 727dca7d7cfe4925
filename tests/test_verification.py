"""Admin verification and dashboard tests."""

from datetime import datetime

from bson import ObjectId

from conftest import report_payload


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _admin(register):
    headers, user = register(email="admin@test.com", role="admin", name="Admin")
    return headers, user


def _report(client, headers):
    response = client.post("/api/reports", headers=headers, json=report_payload())
    assert response.status_code == 201
    return response.json()["data"]


def test_verify_approved(client, register, user_headers):
    """Approving sets status=verified, verificationStatus=approved and logs one history entry."""
    admin_headers, admin = _admin(register)
    report = _report(client, user_headers)

    response = client.put(
        f"/api/reports/{report['id']}/verify",
        headers=admin_headers,
        json={"status": "approved", "adminComments": "Confirmed on site"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Report approved successfully"
    verified = body["data"]
    assert verified["status"] == "verified"
    assert verified["verificationStatus"] == "approved"
    assert verified["verifiedBy"] == admin["id"]
    assert verified["adminComments"] == "Confirmed on site"
    assert verified["verifiedAt"] == verified["updatedAt"]
    assert _ts(verified["updatedAt"]) > _ts(report["updatedAt"])
    assert len(verified["verificationHistory"]) == 1
    entry = verified["verificationHistory"][0]
    assert entry["status"] == "approved"
    assert entry["adminId"] == admin["id"]
    assert entry["comment"] == "Confirmed on site"


def test_verify_rejected_appends_history(client, register, user_headers):
    admin_headers, _ = _admin(register)
    report = _report(client, user_headers)
    url = f"/api/reports/{report['id']}/verify"

    client.put(url, headers=admin_headers, json={"status": "approved"})
    response = client.put(url, headers=admin_headers, json={"status": "rejected", "comment": "Duplicate"})
    assert response.status_code == 200
    rejected = response.json()["data"]
    assert rejected["status"] == "rejected"
    assert rejected["verificationStatus"] == "rejected"
    assert [e["status"] for e in rejected["verificationHistory"]] == ["approved", "rejected"]
    assert rejected["adminComments"] == "Duplicate"


def test_owner_sees_verdict(client, register, user_headers):
    admin_headers, _ = _admin(register)
    report = _report(client, user_headers)
    client.put(f"/api/reports/{report['id']}/verify", headers=admin_headers, json={"status": "approved"})

    mine = client.get(f"/api/reports/{report['id']}", headers=user_headers).json()["data"]
    assert mine["status"] == "verified"
    assert mine["adminComments"] == ""


def test_verify_is_admin_only(client, user_headers):
    report = _report(client, user_headers)
    response = client.put(f"/api/reports/{report['id']}/verify", headers=user_headers, json={"status": "approved"})
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


def test_verify_rejects_unknown_verdict(client, register, user_headers):
    admin_headers, _ = _admin(register)
    report = _report(client, user_headers)
    response = client.put(f"/api/reports/{report['id']}/verify", headers=admin_headers, json={"status": "verified"})
    assert response.status_code == 400


def test_verify_missing_report(client, register):
    admin_headers, _ = _admin(register)
    response = client.put(f"/api/reports/{ObjectId()}/verify", headers=admin_headers, json={"status": "approved"})
    assert response.status_code == 404


def test_filter_by_verification_status(client, register, user_headers):
    admin_headers, _ = _admin(register)
    first = _report(client, user_headers)
    _report(client, user_headers)
    client.put(f"/api/reports/{first['id']}/verify", headers=admin_headers, json={"status": "approved"})

    approved = client.get("/api/reports", headers=admin_headers, params={"verificationStatus": "approved"}).json()
    assert [r["id"] for r in approved["data"]] == [first["id"]]

    pending = client.get("/api/reports", headers=user_headers, params={"status": "pending"}).json()
    assert pending["total"] == 1


def test_report_stats(client, register, user_headers):
    admin_headers, _ = _admin(register)
    reports = [_report(client, user_headers) for _ in range(4)]
    client.put(f"/api/reports/{reports[0]['id']}/verify", headers=admin_headers, json={"status": "approved"})
    client.put(f"/api/reports/{reports[1]['id']}/verify", headers=admin_headers, json={"status": "rejected"})
    client.put(f"/api/reports/{reports[2]['id']}", headers=admin_headers, json={"status": "in-progress"})

    response = client.get("/api/admin/reports/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {
        "total": 4,
        "pending": 1,
        "verified": 1,
        "inProgress": 1,
        "resolved": 0,
        "rejected": 1,
    }


def test_report_stats_admin_only(client, user_headers):
    assert client.get("/api/admin/reports/stats", headers=user_headers).status_code == 403


def test_filter_by_reviewing_admin(client, register, user_headers):
    """Admins can list the reports they reviewed through the verification log."""
    admin_headers, admin = _admin(register)
    other_admin_headers, _ = register(email="admin2@test.com", role="admin", name="Second Admin")
    mine = _report(client, user_headers)
    theirs = _report(client, user_headers)
    _report(client, user_headers)
    client.put(f"/api/reports/{mine['id']}/verify", headers=admin_headers, json={"status": "rejected"})
    client.put(f"/api/reports/{theirs['id']}/verify", headers=other_admin_headers, json={"status": "approved"})

    reviewed = client.get(
        "/api/reports", headers=admin_headers, params={"verificationHistory.adminId": admin["id"]}
    ).json()
    assert [r["id"] for r in reviewed["data"]] == [mine["id"]]

    approvals = client.get(
        "/api/reports", headers=admin_headers, params={"verificationHistory.status": "approved"}
    ).json()
    assert [r["id"] for r in approvals["data"]] == [theirs["id"]]
