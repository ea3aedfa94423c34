from datetime import date

import pytest

from src.school_records.school_records.container import assemble_container
from src.school_records.school_records.core.enums import AttendanceStatus
from src.school_records.school_records.main import create_app

from tests.fakes import (
    InMemoryAttendance,
    InMemoryCalendar,
    InMemoryEnrollments,
    InMemoryGrades,
    InMemoryQuarters,
    InMemorySchedules,
    InMemorySubjects,
    InMemoryYears,
    enrollment,
    schedule,
)


@pytest.fixture()
def attendance():
    schedules = InMemorySchedules([schedule(1, 1, "Monday"), schedule(2, 2, "Tuesday")])
    enrollments = InMemoryEnrollments([enrollment(1), enrollment(2)])
    return InMemoryAttendance(schedules, enrollments)


@pytest.fixture()
def client(monkeypatch, attendance):
    monkeypatch.setenv("APP_ENV", "testing")
    container = assemble_container(
        years_repo=InMemoryYears(),
        quarters_repo=InMemoryQuarters(),
        subjects_repo=InMemorySubjects(),
        calendar_repo=InMemoryCalendar(),
        schedules_repo=attendance._schedules,
        enrollments_repo=attendance._enrollments,
        attendance_repo=attendance,
        grades_repo=InMemoryGrades(),
    )
    app = create_app(container)
    return app.test_client()


def test_fifth_late_is_recorded_as_absent(client, attendance):
    for day in (date(2025, 8, 4), date(2025, 8, 11), date(2025, 8, 18), date(2025, 8, 25)):
        attendance.add(1, 1, day, AttendanceStatus.LATE)

    resp = client.post(
        "/api/attendance",
        json={"student_id": 1, "schedule_id": 1, "attendance_date": "2025-09-01", "status": "late"},
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["status"] == "absent"
    assert body["data"]["tardiness_conversion"] is True
    assert "ABSENT" in body["warning"]


def test_tardiness_check(client, attendance):
    attendance.add(1, 1, date(2025, 8, 4), AttendanceStatus.LATE)

    resp = client.get("/api/attendance/tardiness-check?student_id=1&schedule_id=1&quarter_id=1")

    data = resp.get_json()["data"]
    assert data["late_count"] == 1
    assert data["should_convert"] is False
    assert data["fallback"] is False


def test_bad_date_is_rejected(client):
    resp = client.post(
        "/api/attendance",
        json={"student_id": 1, "schedule_id": 1, "attendance_date": "01/09/2025", "status": "present"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_missing_body_is_rejected(client):
    resp = client.post("/api/attendance", data="nope", content_type="text/plain")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Request body must be a JSON object"


def test_promotion_report_refused_while_grades_are_missing(client):
    resp = client.get("/api/sections/1/promotion")

    assert resp.status_code == 403
    assert resp.get_json() == {
        "success": False,
        "message": "The selected section is not ready: incomplete grades",
    }


def test_certificate_eligibility(client, attendance):
    attendance.add(1, 1, date(2025, 9, 1), AttendanceStatus.PRESENT)

    resp = client.get("/api/certificates/eligibility?student_id=1&quarter_id=1&type=perfect_attendance")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["can_generate"] is True
    assert data["fallback"] is False


def test_unknown_route_is_json(client):
    resp = client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize("query", ["year=2025&month=0", "year=0&month=9", "year=10000&month=1"])
def test_monthly_view_rejects_out_of_range_period(client, query):
    resp = client.get(f"/api/sections/1/attendance/monthly?{query}")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize("value", ["NaN", "inf"])
def test_non_finite_grade_is_rejected(client, value):
    resp = client.post("/api/grades", json={"student_id": 1, "subject_id": 1, "quarter_id": 1, "grade": value})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Grade must be a number"
