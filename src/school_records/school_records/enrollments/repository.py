from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Enrollment


class EnrollmentRepository(Protocol):
    def get_for_student(self, *, student_id: int, academic_year_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_enrolled(self, *, section_id: int, academic_year_id: int) -> Sequence[Enrollment]:
        """Students with status `enrolled` in the section, ordered by name."""

        raise NotImplementedError
