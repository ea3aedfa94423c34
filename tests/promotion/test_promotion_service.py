from datetime import date

import pytest

from src.school_records.school_records.core.enums import AttendanceStatus, PromotionStatus
from src.school_records.school_records.core.exceptions import NotEligibleError, NotFoundError
from src.school_records.school_records.promotion.evaluator import PromotionEvaluator
from src.school_records.school_records.promotion.factory import get_honor_policy
from src.school_records.school_records.promotion.service import PromotionService

from tests.fakes import (
    InMemoryAttendance,
    InMemoryEnrollments,
    InMemoryGrades,
    InMemorySchedules,
    enrollment,
    grade,
    make_context,
    schedule,
)


def _full_year(student_id: int, subject_values: dict[int, float]):
    return [grade(student_id, s, q, v) for s, v in subject_values.items() for q in (1, 2, 3, 4)]


def _service(grades, *, policy="strict"):
    schedules = InMemorySchedules(
        [schedule(1, 1, "Monday"), schedule(2, 2, "Tuesday"), schedule(3, 1, "Thursday"), schedule(4, 3, "Friday", section_id=2)]
    )
    enrollments = InMemoryEnrollments([enrollment(1), enrollment(2), enrollment(3, section_id=2)])
    attendance = InMemoryAttendance(schedules, enrollments)
    for student_id in (1, 2):
        attendance.add(student_id, 1, date(2025, 9, 1), AttendanceStatus.PRESENT)
        attendance.add(student_id, 2, date(2025, 9, 2), AttendanceStatus.PRESENT)
    attendance.add(2, 1, date(2025, 9, 8), AttendanceStatus.ABSENT)
    attendance.add(2, 2, date(2025, 9, 9), AttendanceStatus.ABSENT)

    svc = PromotionService(
        PromotionEvaluator(get_honor_policy(policy)),
        InMemoryGrades(grades),
        attendance,
        schedules,
        enrollments,
    )
    return svc


def test_readiness_reports_partial_completion():
    svc = _service(_full_year(1, {1: 92, 2: 96}) + _full_year(2, {1: 80})[:3])

    readiness = svc.section_readiness(make_context(), section_id=1)

    assert readiness.is_complete is False
    assert readiness.students_with_complete_grades == 1
    assert readiness.total_students == 2
    assert readiness.completion_percentage == 50.0


def test_report_refused_until_section_is_complete():
    svc = _service(_full_year(1, {1: 92, 2: 96}))

    with pytest.raises(NotEligibleError, match="incomplete grades"):
        svc.section_report(make_context(), section_id=1)


def test_report_with_statistics():
    svc = _service(_full_year(1, {1: 92, 2: 96}) + _full_year(2, {1: 80, 2: 78}))

    report = svc.section_report(make_context(), section_id=1)

    assert report["accessible"] is True
    assert report["honor_policy"]["name"] == "strict"
    by_id = {s["student_id"]: s for s in report["students"]}
    assert by_id[1]["promotion_status"] == "Pass"
    assert by_id[1]["honor_classification"] == "With Honors"
    assert by_id[2]["attendance_percentage"] == 50.0
    assert by_id[2]["promotion_status"] == "Fail"
    assert report["overall_statistics"] == {
        "total_students": 2,
        "passing_students": 1,
        "failing_students": 1,
        "with_honors": 1,
        "high_honors": 0,
        "highest_honors": 0,
        "with_discrepancies": 1,
        "incomplete_grades": 0,
        "attendance_issues": 1,
    }


def test_legacy_policy_changes_honor_counts():
    svc = _service(_full_year(1, {1: 92, 2: 96}) + _full_year(2, {1: 80, 2: 78}), policy="legacy")

    report = svc.section_report(make_context(), section_id=1)

    assert report["honor_policy"]["name"] == "legacy"
    assert report["overall_statistics"]["high_honors"] == 1
    assert report["overall_statistics"]["with_honors"] == 0


def test_student_promotion_uses_section_subjects():
    svc = _service(_full_year(1, {1: 92}))

    result = svc.student_promotion(make_context(), student_id=1)

    assert result.promotion_status == PromotionStatus.INCOMPLETE
    assert result.subject_averages == {1: 92.0, 2: None}


def test_student_promotion_requires_enrolment():
    svc = _service([])

    with pytest.raises(NotFoundError):
        svc.student_promotion(make_context(), student_id=99)
