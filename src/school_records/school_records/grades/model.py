from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class GradeRecord:
    """Quarter grade of one student in one subject."""

    grade_id: Optional[int]
    student_id: int
    subject_id: int
    quarter_id: int
    academic_year_id: int
    grade: float
    recorded_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.grade_id,
            "student_id": self.student_id,
            "subject_id": self.subject_id,
            "quarter_id": self.quarter_id,
            "academic_year_id": self.academic_year_id,
            "grade": self.grade,
            "recorded_by": self.recorded_by,
            "updated_at": self.updated_at.strftime("%Y-%m-%d %H:%M:%S") if self.updated_at else None,
        }
