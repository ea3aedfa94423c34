from datetime import date

import pytest

from src.school_records.school_records.certificates.gate import CertificateEligibilityGate
from src.school_records.school_records.certificates.service import CertificateService
from src.school_records.school_records.certificates.subject_sources import (
    CurriculumSubjectSource,
    ExpectedSubjectResolver,
    GradedSubjectSource,
)
from src.school_records.school_records.core.enums import AttendanceStatus, EnrollmentStatus
from src.school_records.school_records.core.exceptions import NotEligibleError, NotFoundError, ValidationError

from tests.fakes import (
    InMemoryAttendance,
    InMemoryEnrollments,
    InMemoryGrades,
    InMemorySchedules,
    InMemorySubjects,
    enrollment,
    grade,
    make_context,
    schedule,
)


@pytest.fixture()
def setup():
    schedules = InMemorySchedules([schedule(1, 1, "Monday"), schedule(2, 2, "Tuesday")])
    enrollments = InMemoryEnrollments(
        [enrollment(1), enrollment(2), enrollment(3, status=EnrollmentStatus.WITHDRAWN)]
    )
    attendance = InMemoryAttendance(schedules, enrollments)
    attendance.add(1, 1, date(2025, 9, 1), AttendanceStatus.PRESENT)
    attendance.add(1, 2, date(2025, 9, 2), AttendanceStatus.LATE)
    attendance.add(2, 1, date(2025, 9, 1), AttendanceStatus.ABSENT)
    grades = InMemoryGrades([grade(2, 1, 1, 95), grade(2, 2, 1, 91), grade(1, 1, 1, 80), grade(1, 2, 1, 85)])

    gate = CertificateEligibilityGate(
        attendance,
        grades,
        enrollments,
        ExpectedSubjectResolver(CurriculumSubjectSource(InMemorySubjects()), GradedSubjectSource()),
    )
    return CertificateService(gate, enrollments)


def test_preview_for_eligible_student(setup):
    preview = setup.preview(make_context(), student_id=1, quarter_id=1, certificate_type="perfect_attendance")

    assert preview["certificate_type"] == "perfect_attendance"
    assert preview["student"] == {"id": 1, "name": "Student 1", "grade_level": "Grade 7"}
    assert preview["quarter"] == {"id": 1, "name": "1st Quarter"}
    assert preview["academic_year"] == "2025-2026"
    assert preview["issued_date"] == "October 17, 2025"
    assert preview["data"]["late"] == 1


def test_preview_refuses_ineligible_student(setup):
    with pytest.raises(NotEligibleError, match="absence"):
        setup.preview(make_context(), student_id=2, quarter_id=1, certificate_type="perfect_attendance")


def test_preview_unknown_student(setup):
    with pytest.raises(NotFoundError, match="Student not found"):
        setup.preview(make_context(), student_id=3, quarter_id=1, certificate_type="honor_roll")


def test_unknown_certificate_type(setup):
    with pytest.raises(ValidationError):
        setup.eligibility(make_context(), student_id=1, quarter_id=1, certificate_type="dean_list")


def test_unknown_quarter(setup):
    with pytest.raises(NotFoundError):
        setup.eligibility(make_context(), student_id=1, quarter_id=9, certificate_type="honor_roll")


def test_section_candidates(setup):
    candidates = setup.section_candidates(make_context(), section_id=1, quarter_id=1)

    assert [c["id"] for c in candidates["perfect_attendance"]] == [1]
    assert [c["id"] for c in candidates["honor_roll"]] == [2]
    assert candidates["honor_roll"][0]["honor_type"] == "With Honors"
