from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import GradeRecord


class GradeRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        subject_id: int,
        quarter_id: int,
        academic_year_id: int,
        grade: float,
        recorded_by: Optional[int],
        recorded_at: datetime,
    ) -> int:
        raise NotImplementedError

    def delete(self, *, student_id: int, subject_id: int, quarter_id: int, academic_year_id: int) -> bool:
        raise NotImplementedError

    def list_for_student(
        self,
        *,
        student_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
    ) -> Sequence[GradeRecord]:
        raise NotImplementedError

    def list_for_students(
        self,
        *,
        student_ids: Sequence[int],
        academic_year_id: int,
        quarter_id: Optional[int] = None,
    ) -> Sequence[GradeRecord]:
        raise NotImplementedError
