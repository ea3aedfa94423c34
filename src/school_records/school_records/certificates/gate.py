from __future__ import annotations

import logging
from typing import Optional

from ..academics.model import Quarter
from ..attendance.repository import AttendanceRepository
from ..core.constants import HONOR_ROLL_MIN_AVERAGE
from ..core.enums import AttendanceStatus, CertificateType, HonorClassification
from ..core.exceptions import EvaluationError
from ..core.result import Evaluation
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..grades.repository import GradeRepository
from ..promotion.honors.base import HonorTierPolicy
from ..promotion.honors.strict_policy import HonorTierStrict
from .model import CertificateCheck
from .subject_sources import ExpectedSubjectResolver

logger = logging.getLogger(__name__)

# Late and excused do not break perfect attendance.
PERFECT_ATTENDANCE_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.EXCUSED, AttendanceStatus.LATE})

CERTIFICATE_HONOR_WORDING = {
    HonorClassification.WITH_HONORS: "With Honors",
    HonorClassification.HIGH_HONORS: "With High Honors",
    HonorClassification.HIGHEST_HONORS: "With Highest Honors",
}

FAILED_REASON = "Eligibility check failed"


class CertificateEligibilityGate:
    def __init__(
        self,
        attendance: AttendanceRepository,
        grades: GradeRepository,
        enrollments: EnrollmentRepository,
        subjects: ExpectedSubjectResolver,
        *,
        honor_policy: Optional[HonorTierPolicy] = None,
    ):
        self._attendance = attendance
        self._grades = grades
        self._enrollments = enrollments
        self._subjects = subjects
        self._honor_policy = honor_policy or HonorTierStrict()

    def check(self, *, student_id: int, quarter: Quarter, certificate_type: CertificateType) -> Evaluation[CertificateCheck]:
        """Decide whether a certificate may be generated; lookup failures deny it."""
        try:
            enrollment = self._enrollments.get_for_student(
                student_id=int(student_id),
                academic_year_id=quarter.academic_year_id,
            )
            if not enrollment or not enrollment.is_enrolled:
                return Evaluation.success(
                    self._denied(student_id, quarter, certificate_type, "Student is not enrolled in this academic year")
                )

            if certificate_type == CertificateType.PERFECT_ATTENDANCE:
                return Evaluation.success(self._perfect_attendance(enrollment, quarter))
            return Evaluation.success(self._honor_roll(enrollment, quarter))
        except Exception as e:
            logger.exception(
                "Certificate eligibility check failed (student_id=%s quarter_id=%s type=%s)",
                student_id,
                quarter.quarter_id,
                getattr(certificate_type, "value", certificate_type),
            )
            return Evaluation.fallback(
                self._denied(student_id, quarter, certificate_type, FAILED_REASON),
                EvaluationError(FAILED_REASON, cause=e),
            )

    @staticmethod
    def _denied(student_id: int, quarter: Quarter, certificate_type: CertificateType, reason: str) -> CertificateCheck:
        return CertificateCheck(
            student_id=int(student_id),
            quarter_id=quarter.quarter_id,
            certificate_type=certificate_type,
            is_complete=False,
            eligible=False,
            reason=reason,
        )

    def _perfect_attendance(self, enrollment: Enrollment, quarter: Quarter) -> CertificateCheck:
        records = self._attendance.list_for_student(
            student_id=enrollment.student_id,
            academic_year_id=quarter.academic_year_id,
            start=quarter.start_date,
            end=quarter.end_date,
        )

        tally = {s.value: 0 for s in AttendanceStatus}
        for r in records:
            tally[r.status.value] += 1
        disqualifying = sum(1 for r in records if r.status not in PERFECT_ATTENDANCE_STATUSES)

        is_complete = bool(records)
        eligible = is_complete and disqualifying == 0
        if not is_complete:
            reason = "No attendance records for this quarter"
        elif not eligible:
            reason = f"Student has {disqualifying} absence(s) in {quarter.name}"
        else:
            reason = f"Perfect attendance for {quarter.name}"

        return CertificateCheck(
            student_id=enrollment.student_id,
            quarter_id=quarter.quarter_id,
            certificate_type=CertificateType.PERFECT_ATTENDANCE,
            is_complete=is_complete,
            eligible=eligible,
            reason=reason,
            data={"quarter": quarter.name, "total_records": len(records), **tally},
        )

    def _honor_roll(self, enrollment: Enrollment, quarter: Quarter) -> CertificateCheck:
        grades = list(
            self._grades.list_for_student(
                student_id=enrollment.student_id,
                academic_year_id=quarter.academic_year_id,
                quarter_id=quarter.quarter_id,
            )
        )
        expected = self._subjects.resolve(enrollment=enrollment, grades=grades)
        graded = sorted({g.subject_id for g in grades})
        missing = [s for s in expected.subject_ids if s not in graded]

        is_complete = bool(grades) and not missing
        average = sum(g.grade for g in grades) / len(grades) if grades else None
        eligible = is_complete and average is not None and average >= HONOR_ROLL_MIN_AVERAGE

        honor_type = None
        if eligible:
            honor_type = CERTIFICATE_HONOR_WORDING.get(self._honor_policy.classify(average))

        if not grades:
            reason = f"No grades recorded for {quarter.name}"
        elif missing:
            reason = f"Grades are incomplete for {quarter.name} ({len(graded)} of {len(expected.subject_ids)} subjects graded)"
        elif not eligible:
            reason = f"Quarter average is below {HONOR_ROLL_MIN_AVERAGE}"
        else:
            reason = f"{honor_type} for {quarter.name}"

        return CertificateCheck(
            student_id=enrollment.student_id,
            quarter_id=quarter.quarter_id,
            certificate_type=CertificateType.HONOR_ROLL,
            is_complete=is_complete,
            eligible=eligible,
            reason=reason,
            data={
                "quarter": quarter.name,
                "grade_average": round(average, 2) if average is not None else None,
                "honor_type": honor_type,
                "expected_subjects": len(expected.subject_ids),
                "graded_subjects": len(graded),
                "subject_source": expected.source,
            },
        )
