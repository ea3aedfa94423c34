from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    student_id: int
    academic_year_id: int
    section_id: int
    grade_level: str
    enrollment_status: EnrollmentStatus
    student_name: Optional[str] = None

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment_status == EnrollmentStatus.ENROLLED

    def student_dict(self) -> dict:
        return {"id": self.student_id, "name": self.student_name}
