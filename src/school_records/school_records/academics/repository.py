from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AcademicYear, CalendarEntry, Quarter, Subject


class AcademicYearRepository(Protocol):
    def get_by_id(self, academic_year_id: int) -> Optional[AcademicYear]:
        raise NotImplementedError

    def get_current(self) -> Optional[AcademicYear]:
        """Year flagged is_current, if any."""

        raise NotImplementedError

    def get_most_recent(self) -> Optional[AcademicYear]:
        raise NotImplementedError


class QuarterRepository(Protocol):
    def list_for_year(self, academic_year_id: int) -> Sequence[Quarter]:
        """Quarters ordered by start_date."""

        raise NotImplementedError


class SubjectRepository(Protocol):
    def get_many(self, subject_ids: Sequence[int]) -> Sequence[Subject]:
        raise NotImplementedError

    def list_curriculum(self, grade_level: str) -> Sequence[int]:
        """Subject ids mapped to a grade level; empty when no curriculum is configured."""

        raise NotImplementedError


class CalendarRepository(Protocol):
    def list_non_class_days(self, *, academic_year_id: int, start: date, end: date) -> Sequence[CalendarEntry]:
        raise NotImplementedError
