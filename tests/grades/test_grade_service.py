from datetime import datetime

import pytest

from src.school_records.school_records.core.exceptions import NotFoundError, ValidationError
from src.school_records.school_records.grades.service import GradeService

from tests.fakes import (
    InMemoryEnrollments,
    InMemoryGrades,
    InMemorySchedules,
    InMemorySubjects,
    enrollment,
    grade,
    make_context,
    schedule,
)


def _service(grades=()):
    repo = InMemoryGrades(grades)
    svc = GradeService(
        repo,
        InMemorySchedules([schedule(1, 1, "Monday"), schedule(2, 2, "Tuesday"), schedule(3, 1, "Wednesday")]),
        InMemoryEnrollments([enrollment(1), enrollment(2), enrollment(3)]),
        InMemorySubjects(),
    )
    return svc, repo


def test_record_grade_upserts():
    svc, repo = _service()
    ctx = make_context()

    first = svc.record_grade(ctx, student_id=1, subject_id=1, quarter_id=1, grade="88.4", now=datetime(2025, 10, 1))
    svc.record_grade(ctx, student_id=1, subject_id=1, quarter_id=1, grade=91)

    assert first["grade"] == 88.4
    assert len(repo.grades) == 1
    assert repo.grades[0].grade == 91.0


@pytest.mark.parametrize("value", [-1, 100.01, "abc", "nan", "inf", float("nan")])
def test_record_grade_rejects_out_of_range(value):
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.record_grade(make_context(), student_id=1, subject_id=1, quarter_id=1, grade=value)


def test_empty_grade_removes_record():
    svc, repo = _service([grade(1, 1, 1, 80)])

    saved = svc.record_grade(make_context(), student_id=1, subject_id=1, quarter_id=1, grade="")

    assert saved["grade"] is None
    assert repo.grades == []


def test_record_grade_unknown_references():
    svc, _ = _service()
    ctx = make_context()

    with pytest.raises(NotFoundError):
        svc.record_grade(ctx, student_id=1, subject_id=1, quarter_id=99, grade=90)
    with pytest.raises(NotFoundError):
        svc.record_grade(ctx, student_id=77, subject_id=1, quarter_id=1, grade=90)
    with pytest.raises(NotFoundError):
        svc.record_grade(ctx, student_id=1, subject_id=55, quarter_id=1, grade=90)


def test_quarter_statistics():
    svc, _ = _service(
        [
            grade(1, 1, 1, 90),
            grade(1, 2, 1, 80),
            grade(2, 1, 1, 70),
            grade(2, 2, 1, 72),
            grade(3, 1, 1, 95),
        ]
    )

    stats = svc.quarter_statistics(make_context(), section_id=1, quarter_id=1)

    assert stats["total_students"] == 3
    assert stats["students_with_complete_grades"] == 2
    assert stats["passing_students"] == 1
    assert stats["failing_students"] == 1
    assert stats["subject_averages"] == [
        {"subject_id": 1, "subject_name": "Mathematics", "average": 85.0, "student_count": 3},
        {"subject_id": 2, "subject_name": "English", "average": 76.0, "student_count": 2},
    ]


def test_student_report_statuses():
    full = [grade(1, 1, q, 80 + q) for q in (1, 2, 3, 4)] + [grade(1, 2, q, 70) for q in (1, 2, 3, 4)]
    svc, _ = _service(full[:-1])

    report = svc.student_report(make_context(), student_id=1)

    subjects = {s["subject_id"]: s for s in report["subjects"]}
    assert subjects[1]["status"] == "Passing"
    assert subjects[1]["average"] == 82.5
    assert subjects[2]["status"] == "Incomplete"
    assert subjects[2]["quarters"]["4"] is None
    assert report["quarter_averages"]["4"] == 84.0
