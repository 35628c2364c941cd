from __future__ import annotations

from datetime import date, datetime

import pytest

from src.shift_attendance.shift_attendance.container import assemble
from src.shift_attendance.shift_attendance.main import create_app
from src.shift_attendance.shift_attendance.presence.service import PresenceService

AUTH = {"Authorization": "Bearer test-token"}


@pytest.fixture
def client(monkeypatch, attendance, employees, shifts, presence):
    monkeypatch.setenv("APP_ENV", "testing")
    container = assemble(
        shifts_repo=shifts,
        employees_repo=employees,
        attendance_repo=attendance,
        presence_service=PresenceService(presence),
    )
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app.test_client()


def test_health_is_public(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "Basic test-token"}])
def test_api_requires_bearer_token(client, headers):
    resp = client.post("/api/attendance/mark", json={"employee_id": 1}, headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_mark_checks_in_then_out(client, attendance):
    body = {"employee_id": 1, "timestamp": "2025-03-03T08:50:00", "date": "2025-03-03", "latitude": 12.9, "longitude": 77.6}
    resp = client.post("/api/attendance/mark", json=body, headers=AUTH)
    assert resp.status_code == 201
    payload = resp.get_json()
    assert payload["status"] == "checked_in"
    assert payload["shift_name"] == "Day"
    assert attendance.get_by_id(payload["attendance_id"]).location_in == "12.9,77.6"

    body["timestamp"] = "2025-03-03T17:45:00"
    resp = client.post("/api/attendance/mark", json=body, headers=AUTH)
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["status"] == "checked_out"
    assert payload["ot_hours"] == 0.75


@pytest.mark.parametrize(
    "body, status",
    [
        ({"timestamp": "2025-03-03T09:00:00"}, 400),
        ({"employee_id": "abc"}, 400),
        ({"employee_id": 99, "timestamp": "2025-03-03T09:00:00"}, 404),
        ({"employee_id": 4, "timestamp": "2025-03-03T09:00:00"}, 400),
    ],
)
def test_mark_errors_map_to_status_codes(client, body, status):
    resp = client.post("/api/attendance/mark", json=body, headers=AUTH)
    assert resp.status_code == status
    assert resp.get_json()["error"]


def test_mark_rejects_non_json_body(client):
    resp = client.post("/api/attendance/mark", data="x", headers=AUTH)
    assert resp.status_code == 400


def test_edit_record(client, attendance):
    rec = attendance.add(
        employee_id=1,
        attendance_date=date(2025, 3, 3),
        in_time=datetime(2025, 3, 3, 9, 0),
        out_time=datetime(2025, 3, 3, 16, 0),
    )
    resp = client.put(f"/api/attendance/{rec.attendance_id}", json={"ot_hours": 1.5, "remark": " fixed "}, headers=AUTH)
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["total_working_hours_decimal"] == 8.5
    assert payload["edit_remark"] == "fixed"
    assert payload["is_edited"] is True

    assert client.put("/api/attendance/999", json={}, headers=AUTH).status_code == 404


def test_report(client, attendance):
    attendance.add(
        employee_id=1,
        attendance_date=date(2025, 3, 3),
        in_time=datetime(2025, 3, 3, 9, 0),
        out_time=datetime(2025, 3, 3, 17, 0),
    )
    resp = client.get("/api/attendance/report?startDate=2025-03-01&endDate=2025-03-31&employeeType=staff", headers=AUTH)
    assert resp.status_code == 200
    payload = resp.get_json()
    assert len(payload["rows"]) == 1
    assert payload["rows"][0]["total_hours"] == 8.0

    assert client.get("/api/attendance/report?startDate=2025-03-01", headers=AUTH).status_code == 400
    assert client.get("/api/attendance/report?startDate=03/01&endDate=2025-03-31", headers=AUTH).status_code == 400


def test_shift_crud(client):
    listed = client.get("/api/shifts?employeeType=staff", headers=AUTH).get_json()["shifts"]
    assert [s["shift_name"] for s in listed] == ["Day"]

    resp = client.post(
        "/api/shifts",
        json={"shift_name": "Late", "employee_type": "staff", "start_time": "14:00", "end_time": "10:00 PM"},
        headers=AUTH,
    )
    assert resp.status_code == 201
    created = resp.get_json()["shift"]
    assert created["end_time"] == "22:00"
    assert created["presence_count"] == 3

    resp = client.put(f"/api/shifts/{created['id']}", json={"grace_before": 10}, headers=AUTH)
    assert resp.status_code == 200
    assert resp.get_json()["shift"]["grace_before"] == 10

    assert client.post("/api/shifts", json={"shift_name": "Bad", "employee_type": "staff", "start_time": "25:00", "end_time": "10:00"}, headers=AUTH).status_code == 400
    assert client.delete(f"/api/shifts/{created['id']}", headers=AUTH).status_code == 200
    assert client.delete(f"/api/shifts/{created['id']}", headers=AUTH).status_code == 404
