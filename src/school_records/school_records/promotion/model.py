from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ActionTaken, HonorClassification, PromotionStatus


@dataclass(frozen=True)
class PromotionResult:
    """Derived year-end standing of one student; computed per request, never stored."""

    student_id: int
    subject_averages: dict[int, Optional[float]]
    final_average: Optional[float]
    attendance_percentage: float
    promotion_status: PromotionStatus
    honor_classification: HonorClassification
    grades_complete: bool
    has_failing_grade: bool
    has_discrepancy: bool
    total_days: int
    present_days: int
    action_taken: ActionTaken
    proficiency_level: str
    descriptive_grade: str
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "subject_averages": {str(k): v for k, v in self.subject_averages.items()},
            "final_average": self.final_average,
            "attendance_percentage": self.attendance_percentage,
            "promotion_status": self.promotion_status.value,
            "honor_classification": self.honor_classification.value,
            "grades_complete": self.grades_complete,
            "has_failing_grade": self.has_failing_grade,
            "has_discrepancy": self.has_discrepancy,
            "total_days": self.total_days,
            "present_days": self.present_days,
            "action_taken": self.action_taken.value,
            "proficiency_level": self.proficiency_level,
            "descriptive_grade": self.descriptive_grade,
        }


@dataclass(frozen=True)
class SectionCompleteness:
    is_complete: bool
    completion_percentage: float
    students_with_complete_grades: int
    total_students: int
    incomplete_student_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_complete": self.is_complete,
            "completion_percentage": self.completion_percentage,
            "students_with_complete_grades": self.students_with_complete_grades,
            "total_students": self.total_students,
            "incomplete_student_ids": list(self.incomplete_student_ids),
        }
