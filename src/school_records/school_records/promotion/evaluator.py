"""Year-end promotion evaluation over already-fetched grade and attendance rows.

Rules:

- subject average: mean of the available quarter grades, rounded to 2 dp;
  a subject without any grade leaves the student's grades incomplete;
- a subject is failing when its unrounded average is below 75;
- final average: mean of the non-null subject averages (missing subjects are
  left out, not counted as zero);
- attendance percentage: present rows / all rows (late is not present here);
- status: Incomplete when grades are incomplete, otherwise Pass when the final
  average, every subject and the attendance percentage all reach 75, else Fail;
- honors only for complete grades, using the configured `HonorTierPolicy`.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import MIN_ATTENDANCE_PERCENTAGE, PASSING_GRADE
from ..core.enums import ActionTaken, AttendanceStatus, HonorClassification, PromotionStatus
from ..grades.model import GradeRecord
from .honors.base import HonorTierPolicy
from .honors.strict_policy import HonorTierStrict
from .model import PromotionResult, SectionCompleteness

PROFICIENCY_LEVELS = (
    (90, "ADVANCED"),
    (85, "PROFICIENT"),
    (80, "APPROACHING"),
    (75, "DEVELOPING"),
)

DESCRIPTIVE_GRADES = (
    (90, "A"),
    (85, "P"),
    (80, "AP"),
    (75, "D"),
)


def proficiency_level(average: Optional[float]) -> str:
    for minimum, level in PROFICIENCY_LEVELS:
        if (average or 0) >= minimum:
            return level
    return "BEGINNING"


def descriptive_grade(average: Optional[float]) -> str:
    for minimum, code in DESCRIPTIVE_GRADES:
        if (average or 0) >= minimum:
            return code
    return "B" if (average or 0) > 0 else ""


def action_taken(status: PromotionStatus) -> ActionTaken:
    if status == PromotionStatus.PASS:
        return ActionTaken.PROMOTED
    if status == PromotionStatus.INCOMPLETE:
        return ActionTaken.IRREGULAR
    return ActionTaken.RETAINED


def _grade_table(grades: Iterable[GradeRecord], quarter_ids: Sequence[int]) -> dict[int, dict[int, float]]:
    wanted = set(quarter_ids)
    table: dict[int, dict[int, float]] = defaultdict(dict)
    for g in grades:
        if g.quarter_id in wanted:
            table[g.subject_id][g.quarter_id] = g.grade
    return table


class PromotionEvaluator:
    def __init__(self, honor_policy: HonorTierPolicy | None = None):
        self._honor_policy = honor_policy or HonorTierStrict()

    @property
    def honor_policy(self) -> HonorTierPolicy:
        return self._honor_policy

    def evaluate(
        self,
        *,
        student_id: int,
        subject_ids: Sequence[int],
        quarter_ids: Sequence[int],
        grades: Iterable[GradeRecord],
        attendance: Iterable[AttendanceRecord],
        student_name: Optional[str] = None,
    ) -> PromotionResult:
        table = _grade_table(grades, quarter_ids)

        subject_averages: dict[int, Optional[float]] = {}
        grades_complete = bool(subject_ids)
        has_failing_grade = False
        for subject_id in subject_ids:
            values = list(table.get(subject_id, {}).values())
            if not values:
                subject_averages[subject_id] = None
                grades_complete = False
                continue
            average = sum(values) / len(values)
            subject_averages[subject_id] = round(average, 2)
            if average < PASSING_GRADE:
                has_failing_grade = True

        available = [v for v in subject_averages.values() if v is not None]
        final_average = round(sum(available) / len(available), 2) if available else None

        rows = list(attendance)
        total_days = len(rows)
        present_days = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        attendance_percentage = round(present_days / total_days * 100, 2) if total_days else 0.0

        if not grades_complete:
            status = PromotionStatus.INCOMPLETE
        elif (
            final_average is not None
            and final_average >= PASSING_GRADE
            and not has_failing_grade
            and attendance_percentage >= MIN_ATTENDANCE_PERCENTAGE
        ):
            status = PromotionStatus.PASS
        else:
            status = PromotionStatus.FAIL

        honor = self._honor_policy.classify(final_average) if grades_complete else HonorClassification.NONE

        return PromotionResult(
            student_id=int(student_id),
            student_name=student_name,
            subject_averages=subject_averages,
            final_average=final_average,
            attendance_percentage=attendance_percentage,
            promotion_status=status,
            honor_classification=honor,
            grades_complete=grades_complete,
            has_failing_grade=has_failing_grade,
            has_discrepancy=status == PromotionStatus.FAIL,
            total_days=total_days,
            present_days=present_days,
            action_taken=action_taken(status),
            proficiency_level=proficiency_level(final_average),
            descriptive_grade=descriptive_grade(final_average),
        )


def check_section_completeness(
    *,
    student_ids: Sequence[int],
    subject_ids: Sequence[int],
    quarter_ids: Sequence[int],
    grades: Iterable[GradeRecord],
) -> SectionCompleteness:
    """A section is complete when every student has a grade for every subject and quarter."""
    if not student_ids or not subject_ids or not quarter_ids:
        return SectionCompleteness(
            is_complete=False,
            completion_percentage=0.0,
            students_with_complete_grades=0,
            total_students=len(student_ids),
            incomplete_student_ids=list(student_ids),
        )

    required = {(s, q) for s in subject_ids for q in quarter_ids}
    have: dict[int, set[tuple[int, int]]] = defaultdict(set)
    for g in grades:
        have[g.student_id].add((g.subject_id, g.quarter_id))

    incomplete = [sid for sid in student_ids if not required <= have.get(sid, set())]
    complete_count = len(student_ids) - len(incomplete)
    return SectionCompleteness(
        is_complete=not incomplete,
        completion_percentage=round(complete_count / len(student_ids) * 100, 1),
        students_with_complete_grades=complete_count,
        total_students=len(student_ids),
        incomplete_student_ids=incomplete,
    )
