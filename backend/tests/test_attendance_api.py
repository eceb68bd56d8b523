from datetime import date, datetime

import pytest

from conftest import auth_header, make_attendance, make_employee

MONDAY = date(2024, 3, 4)


def at(hour, minute=0, day=MONDAY):
    return datetime(day.year, day.month, day.day, hour, minute)


def test_check_in_and_out(client, worker_headers, freeze_clock):
    freeze_clock(at(8, 55))
    checked_in = client.post("/api/attendance/checkin", json={"location": "HQ"}, headers=worker_headers)

    assert checked_in.status_code == 200
    assert checked_in.json()["message"] == "Checked in successfully"
    record = checked_in.json()["data"]["attendance"]
    assert record["check_in"] == "2024-03-04T08:55:00"
    assert record["date"] == "2024-03-04"
    assert record["location"]["check_in_location"] == "HQ"

    freeze_clock(at(17, 30))
    checked_out = client.post("/api/attendance/checkout", headers=worker_headers)

    assert checked_out.status_code == 200
    record = checked_out.json()["data"]["attendance"]
    assert record["working_hours"] == pytest.approx(8 + 35 / 60)
    assert record["overtime_hours"] == pytest.approx(35 / 60)
    assert record["status"] == "present"


def test_double_check_in_rejected(client, worker_headers, freeze_clock):
    freeze_clock(at(9))
    client.post("/api/attendance/checkin", headers=worker_headers)

    response = client.post("/api/attendance/checkin", headers=worker_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Already checked in today"}


def test_check_out_needs_check_in(client, worker_headers, freeze_clock):
    freeze_clock(at(17))

    response = client.post("/api/attendance/checkout", headers=worker_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No check-in record found for today"


def test_double_check_out_rejected(client, worker_headers, freeze_clock):
    freeze_clock(at(9))
    client.post("/api/attendance/checkin", headers=worker_headers)
    freeze_clock(at(17))
    client.post("/api/attendance/checkout", headers=worker_headers)

    response = client.post("/api/attendance/checkout", headers=worker_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Already checked out today"


def test_late_check_in_ends_late(client, worker_headers, freeze_clock):
    freeze_clock(at(9, 15))
    client.post("/api/attendance/checkin", headers=worker_headers)
    freeze_clock(at(17))

    record = client.post("/api/attendance/checkout", headers=worker_headers).json()["data"]["attendance"]

    assert record["working_hours"] == pytest.approx(7.75)
    assert record["status"] == "late"


def test_check_in_without_employee_record(client, admin_headers, freeze_clock):
    freeze_clock(at(9))

    response = client.post("/api/attendance/checkin", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Employee record not found"


def test_today_flags(client, worker_headers, freeze_clock):
    freeze_clock(at(8))
    before = client.get("/api/attendance/today", headers=worker_headers).json()["data"]
    client.post("/api/attendance/checkin", headers=worker_headers)
    during = client.get("/api/attendance/today", headers=worker_headers).json()["data"]

    assert before == {"attendance": None, "can_check_in": True, "can_check_out": False}
    assert during["can_check_in"] is False
    assert during["can_check_out"] is True
    assert during["attendance"]["check_in"] == "2024-03-04T08:00:00"


def test_mark_keeps_manual_status_after_correction(client, hr_headers, staff_member):
    _, employee = staff_member
    marked = client.post(
        "/api/attendance/mark",
        json={"employee_id": employee.id, "date": "2024-03-05", "status": "leave", "notes": "Annual leave"},
        headers=hr_headers,
    )

    assert marked.status_code == 200
    assert marked.json()["message"] == "Attendance marked successfully"
    record = marked.json()["data"]["attendance"]
    assert record["manually_marked"] is True

    corrected = client.put(
        f"/api/attendance/{record['id']}",
        json={"check_in": "2024-03-05T09:00:00", "check_out": "2024-03-05T17:00:00"},
        headers=hr_headers,
    )

    assert corrected.status_code == 200
    updated = corrected.json()["data"]["attendance"]
    assert updated["status"] == "leave"
    assert updated["working_hours"] == pytest.approx(8.0)
    assert updated["notes"] == "Annual leave"


def test_mark_unknown_employee(client, hr_headers):
    response = client.post(
        "/api/attendance/mark",
        json={"employee_id": 999, "date": "2024-03-05", "status": "absent"},
        headers=hr_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Employee not found"


def test_correction_over_a_day_rejected(client, hr_headers, staff_member):
    _, employee = staff_member
    record = make_attendance(employee, MONDAY, at(9), at(17))

    response = client.put(
        f"/api/attendance/{record.id}",
        json={"check_out": "2024-03-05T11:00:00"},
        headers=hr_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Working hours cannot exceed 24")
    unchanged = client.get("/api/attendance", headers=hr_headers).json()["data"]["attendance"][0]
    assert unchanged["check_out"] == "2024-03-04T17:00:00"


def test_clearing_check_out_resets_hours(client, hr_headers, staff_member):
    _, employee = staff_member
    record = make_attendance(employee, MONDAY, at(8), at(18))

    response = client.put(f"/api/attendance/{record.id}", json={"check_out": None}, headers=hr_headers)

    assert response.status_code == 200
    updated = response.json()["data"]["attendance"]
    assert updated["check_out"] is None
    assert updated["working_hours"] == 0
    assert updated["overtime_hours"] == 0
    assert updated["status"] == "present"


def test_breaks_reduce_hours(client, worker_headers, staff_member):
    _, employee = staff_member
    record = make_attendance(employee, MONDAY, at(9), at(17, 30))

    response = client.post(f"/api/attendance/{record.id}/breaks", json={"duration": 30}, headers=worker_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Break recorded successfully"
    updated = response.json()["data"]["attendance"]
    assert len(updated["breaks"]) == 1
    assert updated["working_hours"] == pytest.approx(8.0)
    assert updated["overtime_hours"] == pytest.approx(0.0)


def test_break_needs_duration_or_span(client, worker_headers, staff_member):
    _, employee = staff_member
    record = make_attendance(employee, MONDAY, at(9), at(17))

    response = client.post(f"/api/attendance/{record.id}/breaks", json={}, headers=worker_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_break_on_someone_elses_record(client, worker_headers):
    other = make_employee(first_name="Other")
    record = make_attendance(other, MONDAY, at(9), at(17))

    response = client.post(f"/api/attendance/{record.id}/breaks", json={"duration": 15}, headers=worker_headers)

    assert response.status_code == 403


def test_employee_list_is_scoped_to_self(client, staff_member, hr_headers):
    user, employee = staff_member
    other = make_employee(first_name="Other")
    make_attendance(employee, MONDAY, at(9), at(17))
    make_attendance(other, MONDAY, at(9), at(17))

    own = client.get("/api/attendance", params={"employee_id": other.id}, headers=auth_header(user.id)).json()["data"]
    everyone = client.get("/api/attendance", headers=hr_headers).json()["data"]

    assert [row["employee"]["id"] for row in own["attendance"]] == [employee.id]
    assert everyone["pagination"]["total"] == 2


def test_list_filters_by_date_and_status(client, hr_headers, staff_member):
    _, employee = staff_member
    make_attendance(employee, MONDAY, at(9, 30), at(17, 30))
    make_attendance(employee, date(2024, 3, 5), at(9, 0, date(2024, 3, 5)), at(17, 0, date(2024, 3, 5)))

    late = client.get("/api/attendance", params={"status": "late"}, headers=hr_headers).json()["data"]
    ranged = client.get(
        "/api/attendance", params={"start_date": "2024-03-05", "end_date": "2024-03-31"}, headers=hr_headers
    ).json()["data"]

    assert [row["date"] for row in late["attendance"]] == ["2024-03-04"]
    assert [row["date"] for row in ranged["attendance"]] == ["2024-03-05"]


def test_report(client, hr_headers, staff_member):
    _, employee = staff_member
    make_attendance(employee, MONDAY, at(9, 30), at(17, 30))
    make_attendance(employee, date(2024, 3, 5), None, None, status="absent")
    make_employee(first_name="Seller", department="Sales")

    response = client.get(
        "/api/attendance/report",
        params={"start_date": "2024-03-01", "end_date": "2024-03-31", "department": "Engineering"},
        headers=hr_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["summary"]["total_employees"] == 1
    assert data["summary"]["department"] == "Engineering"
    totals = data["report"][0]["attendance"]
    assert totals["total_days"] == 2
    assert totals["present_days"] == 1
    assert totals["late_days"] == 1
    assert totals["absent_days"] == 1
    assert totals["total_working_hours"] == 8.0


def test_report_requires_dates(client, hr_headers):
    missing = client.get("/api/attendance/report", headers=hr_headers)
    backwards = client.get(
        "/api/attendance/report", params={"start_date": "2024-03-31", "end_date": "2024-03-01"}, headers=hr_headers
    )

    assert missing.status_code == 400
    assert backwards.status_code == 400
