from __future__ import annotations

from ..academics.context import AcademicContext
from ..attendance.repository import AttendanceRepository
from ..core.constants import MIN_ATTENDANCE_PERCENTAGE
from ..core.enums import HonorClassification, PromotionStatus
from ..core.exceptions import NotEligibleError, NotFoundError
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..grades.repository import GradeRepository
from ..schedules.model import distinct_subject_ids
from ..schedules.repository import ScheduleRepository
from .evaluator import PromotionEvaluator, check_section_completeness
from .model import PromotionResult, SectionCompleteness

NOT_READY_MESSAGE = "The selected section is not ready: incomplete grades"


class PromotionService:
    def __init__(
        self,
        evaluator: PromotionEvaluator,
        grades: GradeRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        enrollments: EnrollmentRepository,
    ):
        self._evaluator = evaluator
        self._grades = grades
        self._attendance = attendance
        self._schedules = schedules
        self._enrollments = enrollments

    def _subject_ids(self, context: AcademicContext, section_id: int) -> list[int]:
        return distinct_subject_ids(
            self._schedules.list_for_section(section_id=section_id, academic_year_id=context.academic_year_id)
        )

    def _completeness(self, context: AcademicContext, section_id: int):
        students = self._enrollments.list_enrolled(section_id=section_id, academic_year_id=context.academic_year_id)
        subject_ids = self._subject_ids(context, section_id)
        grades = self._grades.list_for_students(
            student_ids=[e.student_id for e in students],
            academic_year_id=context.academic_year_id,
        )
        completeness = check_section_completeness(
            student_ids=[e.student_id for e in students],
            subject_ids=subject_ids,
            quarter_ids=context.quarter_ids,
            grades=grades,
        )
        return students, subject_ids, grades, completeness

    def _evaluate(self, context: AcademicContext, enrollment: Enrollment, subject_ids, grades) -> PromotionResult:
        attendance = self._attendance.list_for_student(
            student_id=enrollment.student_id,
            academic_year_id=context.academic_year_id,
        )
        return self._evaluator.evaluate(
            student_id=enrollment.student_id,
            student_name=enrollment.student_name,
            subject_ids=subject_ids,
            quarter_ids=context.quarter_ids,
            grades=[g for g in grades if g.student_id == enrollment.student_id],
            attendance=attendance,
        )

    def section_readiness(self, context: AcademicContext, *, section_id: int) -> SectionCompleteness:
        return self._completeness(context, int(section_id))[3]

    def section_report(self, context: AcademicContext, *, section_id: int) -> dict:
        students, subject_ids, grades, completeness = self._completeness(context, int(section_id))
        if not completeness.is_complete:
            raise NotEligibleError(NOT_READY_MESSAGE)

        results = [self._evaluate(context, e, subject_ids, grades) for e in students]
        return {
            "section_id": int(section_id),
            "academic_year": context.to_dict(),
            "students": [r.to_dict() for r in results],
            "overall_statistics": overall_statistics(results),
            "accessible": True,
            "honor_policy": self._evaluator.honor_policy.describe(),
        }

    def student_promotion(self, context: AcademicContext, *, student_id: int) -> PromotionResult:
        enrollment = self._enrollments.get_for_student(student_id=int(student_id), academic_year_id=context.academic_year_id)
        if not enrollment or not enrollment.is_enrolled:
            raise NotFoundError("Student is not enrolled in this academic year")

        subject_ids = self._subject_ids(context, enrollment.section_id)
        grades = self._grades.list_for_student(student_id=enrollment.student_id, academic_year_id=context.academic_year_id)
        return self._evaluate(context, enrollment, subject_ids, grades)


def overall_statistics(results: list[PromotionResult]) -> dict:
    stats = {
        "total_students": len(results),
        "passing_students": 0,
        "failing_students": 0,
        "with_honors": 0,
        "high_honors": 0,
        "highest_honors": 0,
        "with_discrepancies": 0,
        "incomplete_grades": 0,
        "attendance_issues": 0,
    }
    honor_keys = {
        HonorClassification.WITH_HONORS: "with_honors",
        HonorClassification.HIGH_HONORS: "high_honors",
        HonorClassification.HIGHEST_HONORS: "highest_honors",
    }

    for r in results:
        if r.promotion_status == PromotionStatus.PASS:
            stats["passing_students"] += 1
        elif r.promotion_status == PromotionStatus.FAIL:
            stats["failing_students"] += 1
        else:
            stats["incomplete_grades"] += 1
        if r.has_discrepancy:
            stats["with_discrepancies"] += 1
        if r.attendance_percentage < MIN_ATTENDANCE_PERCENTAGE:
            stats["attendance_issues"] += 1
        key = honor_keys.get(r.honor_classification)
        if key:
            stats[key] += 1
    return stats
