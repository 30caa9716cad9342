from __future__ import annotations

import io
from datetime import datetime

import pytest

from src.timekeeper.timekeeper import create_app
from src.timekeeper.timekeeper.core.enums import AttendanceAction
from src.timekeeper.timekeeper.core.exceptions import ExternalServiceError


@pytest.fixture
def app(container):
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, identifier: str, password: str):
    key = "email" if "@" in identifier else "username"
    return client.post("/api/auth/login", json={key: identifier, "password": password})


def test_login_me_logout(client, alice):
    resp = login(client, "alice@example.com", "alice123")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["email"] == "alice@example.com"
    assert "password_hash" not in resp.get_json()["user"]

    assert client.get("/api/auth/me").get_json()["user"]["name"] == "Alice"

    client.post("/api/auth/logout")
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Unauthorized"}


def test_bad_login_is_401(client, alice):
    resp = login(client, "alice@example.com", "nope")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_user_endpoints_require_admin(client, alice):
    login(client, "alice@example.com", "alice123")

    assert client.get("/api/users").status_code == 403
    assert client.get("/api/reports/present").status_code == 403
    assert client.post("/api/payroll/rate", json={}).status_code == 403


def test_admin_user_crud(client, admin):
    login(client, "admin", "admin123")

    created = client.post("/api/users", json={"name": "Dana", "email": "dana@example.com", "password": "secret1"})
    assert created.status_code == 201
    user_id = created.get_json()["user"]["id"]

    dup = client.post("/api/users", json={"name": "Dana", "email": "dana@example.com", "password": "secret1"})
    assert dup.status_code == 409

    updated = client.put("/api/users", json={"id": user_id, "name": "Dana K", "email": "dana@example.com"})
    assert updated.get_json()["user"]["name"] == "Dana K"

    assert [u["name"] for u in client.get("/api/users").get_json()["users"]] == ["Dana K"]

    assert client.delete(f"/api/users?id={user_id}").status_code == 200
    assert client.delete(f"/api/users?id={user_id}").status_code == 404
    assert client.delete("/api/users").status_code == 400


def test_register_and_profile_picture(client, admin, face_client):
    resp = client.post(
        "/api/register",
        json={"name": "Eve", "email": "eve@example.com", "password": "secret1", "faceImage": "data:image/png;base64,AA"},
    )
    assert resp.status_code == 201
    user_id = resp.get_json()["user"]["id"]
    assert face_client.registered == ["Eve"]

    login(client, "admin", "admin123")
    upload = client.post(
        "/api/users/profile",
        data={"userId": str(user_id), "file": (io.BytesIO(b"pic"), "eve.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert upload.status_code == 200
    url = upload.get_json()["profileURL"]
    assert url.startswith(f"/user-profile/{user_id}-")
    assert client.get(url).data == b"pic"

    bad = client.post(
        "/api/users/profile",
        data={"userId": str(user_id), "file": (io.BytesIO(b"doc"), "cv.pdf", "application/pdf")},
        content_type="multipart/form-data",
    )
    assert bad.status_code == 400


def test_scan_toggles_and_status(client, alice):
    first = client.post("/api/scan", json={"qrCode": "Alice"})
    second = client.post("/api/scan", json={"qrCode": "Alice", "workplace": "home"})

    assert first.get_json()["message"] == "Successfully clocked in"
    assert second.get_json()["attendance"]["action"] == "clock-out"
    assert client.post("/api/scan", json={"qrCode": "Mallory"}).status_code == 404
    assert client.post("/api/scan", json={}).status_code == 400

    login(client, "alice@example.com", "alice123")
    assert client.get("/api/attendance/status").get_json()["status"] == "clocked-out"
    history = client.get("/api/attendance").get_json()["attendance"]
    assert [h["action"] for h in history] == ["clock-out", "clock-in"]


def test_scan_image_requires_file(client):
    assert client.post("/api/scan/image", data={}, content_type="multipart/form-data").status_code == 400


def test_face_scan_errors(client, face_client, alice):
    assert client.post("/api/face-scan", json={"image": "x"}).status_code == 404

    face_client.error = ExternalServiceError("Face recognition service unavailable")
    assert client.post("/api/face-scan", json={"image": "x"}).status_code == 503

    face_client.error = ExternalServiceError("Face recognition service not configured", status=500)
    assert client.post("/api/face-scan", json={"image": "x"}).status_code == 500

    face_client.error = None
    face_client.name = "Alice"
    assert client.post("/api/face-scan", json={"image": "x"}).get_json()["success"] is True


def test_dashboard_and_personal_qr(client, alice, bob):
    login(client, "alice@example.com", "alice123")

    data = client.get("/api/attendance/dashboard").get_json()
    assert data["currentStatus"]["status"] == "clocked-out"
    assert data["weeks"] == []

    assert client.get(f"/api/users/{alice.user_id}/qr").mimetype == "image/png"
    assert client.get(f"/api/users/{bob.user_id}/qr").status_code == 403


def test_leave_flow(client, admin, alice):
    login(client, "alice@example.com", "alice123")
    created = client.post(
        "/api/leaves",
        json={"type": "sick", "startDate": "2026-02-02", "endDate": "2026-02-03", "reason": "Flu"},
    )
    assert created.status_code == 201
    leave_id = created.get_json()["leave"]["id"]
    assert client.post("/api/leaves", json={"type": "sick", "startDate": "02/02/2026"}).status_code == 400
    assert client.put("/api/leaves", json={"leaveId": leave_id, "status": "approved"}).status_code == 403

    login(client, "admin", "admin123")
    decided = client.put("/api/leaves", json={"leaveId": leave_id, "status": "approved", "adminComments": "ok"})
    assert decided.get_json()["leave"]["status"] == "approved"
    assert [leave["id"] for leave in client.get("/api/leaves?status=approved").get_json()["leaves"]] == [leave_id]


def test_reports_and_rate(client, admin, alice, logs_repo):
    logs_repo.add(alice, AttendanceAction.CLOCK_IN, datetime(2026, 1, 12, 10, 30))
    logs_repo.add(alice, AttendanceAction.CLOCK_OUT, datetime(2026, 1, 12, 17, 0))
    login(client, "admin", "admin123")

    present = client.get("/api/reports/present?date=2026-01-12").get_json()
    assert (present["presentCount"], present["absentCount"]) == (1, 0)
    assert present["users"][0]["formattedTime"] == "6h 30m"

    lates = client.get("/api/reports/lates?startDate=2026-01-12&endDate=2026-01-12").get_json()
    assert lates["lates"][0]["lateMinutes"] == 30

    absences = client.get("/api/reports/absences?startDate=2026-01-12&endDate=2026-01-13").get_json()
    assert [a["date"] for a in absences["absences"]] == ["2026-01-13"]
    assert client.get("/api/reports/absences").status_code == 400

    csv_resp = client.get("/api/reports/timesheet.csv?startDate=2026-01-12&endDate=2026-01-12")
    assert csv_resp.mimetype == "text/csv"
    assert "2026-01-12" in csv_resp.data.decode("utf-8-sig")

    rate = client.post(
        "/api/payroll/rate",
        json={"userId": alice.user_id, "startDate": "2026-01-12", "endDate": "2026-01-12", "hourlyRate": 100},
    ).get_json()
    assert (rate["totalHours"], rate["totalPay"], rate["workingDays"]) == (6.5, "650.00", 1)

    bad = client.post(
        "/api/payroll/rate",
        json={"userId": alice.user_id, "startDate": "2026-01-12", "endDate": "2026-01-12", "hourlyRate": 0},
    )
    assert bad.status_code == 400


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_non_numeric_user_ids_are_400(client, admin, alice):
    login(client, "admin", "admin123")

    responses = [
        client.get("/api/attendance?userId=abc"),
        client.get("/api/attendance/dashboard?userId=abc"),
        client.get("/api/leaves?userId=abc"),
        client.post(
            "/api/payroll/rate",
            json={"userId": "abc", "startDate": "2026-01-12", "endDate": "2026-01-12", "hourlyRate": 10},
        ),
        client.delete("/api/users?id=abc"),
    ]

    assert [r.status_code for r in responses] == [400] * 5
    assert all(r.get_json()["success"] is False for r in responses)
