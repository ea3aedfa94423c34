from datetime import date, datetime

import pytest

from src.school_records.school_records.attendance.service import AttendanceService
from src.school_records.school_records.attendance.tardiness import TardinessRuleEvaluator
from src.school_records.school_records.core.enums import AttendanceStatus, EnrollmentStatus
from src.school_records.school_records.core.exceptions import NotFoundError, ValidationError

from tests.fakes import (
    InMemoryAttendance,
    InMemoryCalendar,
    InMemoryEnrollments,
    InMemorySchedules,
    enrollment,
    holiday,
    make_context,
    schedule,
)

NOW = datetime(2025, 9, 5, 8, 15)


def _service(*, calendar=None):
    schedules = InMemorySchedules(
        [
            schedule(1, 10, "Monday"),
            schedule(2, 10, "Tuesday"),
            schedule(3, 10, "Wednesday"),
            schedule(4, 10, "Thursday"),
            schedule(5, 10, "Friday"),
            schedule(6, 20, "Monday"),
            schedule(7, 30, "Monday", section_id=2),
        ]
    )
    enrollments = InMemoryEnrollments(
        [enrollment(1), enrollment(2), enrollment(3, status=EnrollmentStatus.WITHDRAWN), enrollment(4, section_id=2)]
    )
    attendance = InMemoryAttendance(schedules, enrollments)
    svc = AttendanceService(
        attendance,
        schedules,
        enrollments,
        calendar or InMemoryCalendar(),
        tardiness=TardinessRuleEvaluator(attendance, schedules, threshold=4),
    )
    return svc, attendance


def _record(svc, day: date, schedule_id: int, status="late", **kwargs):
    return svc.record_attendance(
        make_context(),
        student_id=kwargs.pop("student_id", 1),
        schedule_id=schedule_id,
        attendance_date=day,
        status=status,
        now=NOW,
        **kwargs,
    )


def test_fifth_late_is_stored_as_absent_with_remark():
    svc, attendance = _service()
    for i in range(4):
        outcome = _record(svc, date(2025, 9, 1 + i), i + 1)
        assert outcome.status == AttendanceStatus.LATE
        assert outcome.tardiness_conversion is False

    outcome = _record(svc, date(2025, 9, 5), 5)

    assert outcome.tardiness_conversion is True
    assert outcome.status == AttendanceStatus.ABSENT
    assert "5th late" in outcome.remarks
    assert outcome.warning

    stored = attendance.get_for_key(student_id=1, schedule_id=5, attendance_date=date(2025, 9, 5))
    assert stored.status == AttendanceStatus.ABSENT
    assert "5th late" in stored.remarks
    assert stored.quarter_id == 1


def test_conversion_keeps_recorded_remarks():
    svc, attendance = _service()
    for i in range(4):
        _record(svc, date(2025, 9, 1 + i), i + 1)

    outcome = _record(svc, date(2025, 9, 5), 5, remarks="Overslept")

    assert outcome.remarks.startswith("Overslept | [Auto-converted]")


def test_present_is_never_converted():
    svc, _ = _service()
    for i in range(4):
        _record(svc, date(2025, 9, 1 + i), i + 1)

    outcome = _record(svc, date(2025, 9, 5), 5, status="present")

    assert outcome.status == AttendanceStatus.PRESENT
    assert outcome.tardiness_conversion is False


def test_record_logs_conversion(caplog):
    svc, _ = _service()
    for i in range(4):
        _record(svc, date(2025, 9, 1 + i), i + 1)

    with caplog.at_level("INFO"):
        _record(svc, date(2025, 9, 5), 5)

    assert "Late converted to absent" in caplog.text


def test_record_rejects_unknown_status():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        _record(svc, date(2025, 9, 1), 1, status="sleeping")


def test_record_requires_enrolment_in_schedule_section():
    svc, _ = _service()

    with pytest.raises(NotFoundError):
        _record(svc, date(2025, 9, 1), 1, student_id=4)
    with pytest.raises(NotFoundError):
        _record(svc, date(2025, 9, 1), 1, student_id=3)
    with pytest.raises(NotFoundError):
        _record(svc, date(2025, 9, 1), 999)


def test_bulk_reports_conversions_and_warning():
    svc, _ = _service()
    for i in range(4):
        _record(svc, date(2025, 9, 1 + i), i + 1)

    outcome = svc.record_bulk(
        make_context(),
        schedule_id=5,
        attendance_date=date(2025, 9, 5),
        entries=[{"student_id": 1, "status": "late"}, {"student_id": 2, "status": "late"}],
        now=NOW,
    )

    assert outcome.conversions == [1]
    assert outcome.warning == "1 student(s) reached 5th late and were marked as ABSENT"
    assert [r.status for r in outcome.records] == [AttendanceStatus.ABSENT, AttendanceStatus.LATE]


def test_bulk_validates_every_entry_before_writing():
    svc, attendance = _service()

    with pytest.raises(ValidationError):
        svc.record_bulk(
            make_context(),
            schedule_id=1,
            attendance_date=date(2025, 9, 1),
            entries=[{"student_id": 1, "status": "present"}, {"student_id": 2, "status": "nope"}],
        )

    assert attendance.records == []


def test_student_summary_defaults_to_year_window():
    svc, _ = _service()
    _record(svc, date(2025, 9, 1), 1, status="present")
    _record(svc, date(2025, 9, 2), 2, status="absent")

    data = svc.student_summary(make_context(), student_id=1)

    assert data["period"] == {"start_date": "2025-08-04", "end_date": "2026-04-30"}
    assert data["summary"]["total"] == 2
    assert data["summary"]["attendance_percentage"] == 50.0
    assert data["monthly_breakdown"][0]["month"] == "2025-09"


def test_student_summary_rejects_inverted_range():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.student_summary(make_context(), student_id=1, start=date(2025, 10, 1), end=date(2025, 9, 1))


def test_section_monthly_summary():
    svc, attendance = _service(calendar=InMemoryCalendar([holiday(date(2025, 10, 13))]))
    monday = date(2025, 10, 6)
    attendance.add(1, 1, monday, AttendanceStatus.PRESENT)
    attendance.add(1, 6, monday, AttendanceStatus.PRESENT)
    attendance.add(2, 1, monday, AttendanceStatus.PRESENT)

    data = svc.section_monthly_summary(make_context(), section_id=1, year=2025, month=10)

    assert data["period"]["month_name"] == "October 2025"
    assert len(data["calendar_days"]) == 31
    by_student = {s["student"]["id"]: s for s in data["students"]}
    assert set(by_student) == {1, 2}

    day_status = {d["date"]: d["status"] for d in by_student[1]["daily_attendance"]}
    assert day_status["2025-10-06"] == "present"
    assert day_status["2025-10-11"] == "no_class"
    assert day_status["2025-10-13"] == "no_class"
    assert {d["date"]: d["status"] for d in by_student[2]["daily_attendance"]}["2025-10-06"] == "half_day"
    assert data["class_statistics"]["total_students"] == 2


def test_section_monthly_summary_rejects_bad_month():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.section_monthly_summary(make_context(), section_id=1, year=2025, month=13)


@pytest.mark.parametrize("year", [0, 10000])
def test_section_monthly_summary_rejects_bad_year(year):
    svc, _ = _service()

    with pytest.raises(ValidationError, match="Year"):
        svc.section_monthly_summary(make_context(), section_id=1, year=year, month=1)


def test_section_quarter_summary_trend_stays_inside_quarter():
    svc, attendance = _service()
    attendance.add(1, 1, date(2025, 10, 6), AttendanceStatus.PRESENT)

    data = svc.section_quarter_summary(make_context(), section_id=1, quarter_id=1)

    months = [m["month"] for m in data["students"][0]["monthly_trend"]]
    assert months == ["2025-08", "2025-09", "2025-10"]
    assert data["quarter"]["end_date"] == "2025-10-17"


def test_section_quarter_summary_unknown_quarter():
    svc, _ = _service()

    with pytest.raises(NotFoundError):
        svc.section_quarter_summary(make_context(), section_id=1, quarter_id=99)


def test_tardiness_stats_totals():
    svc, _ = _service()
    for i in range(5):
        _record(svc, date(2025, 9, 1 + i), i + 1)

    data = svc.tardiness_stats(make_context(), student_id=1)

    assert data["threshold"] == 4
    assert data["total_late"] == 4
    assert data["total_converted"] == 1
