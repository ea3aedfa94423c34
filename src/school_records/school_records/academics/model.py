from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import CalendarEntryType


@dataclass(frozen=True)
class AcademicYear:
    academic_year_id: int
    name: str
    start_date: date
    end_date: date
    is_current: bool = False


@dataclass(frozen=True)
class Quarter:
    """One of the four grading periods of an academic year."""

    quarter_id: int
    academic_year_id: int
    name: str
    start_date: date
    end_date: date
    quarter_number: Optional[int] = None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Subject:
    subject_id: int
    name: str
    code: Optional[str] = None


@dataclass(frozen=True)
class CalendarEntry:
    academic_year_id: int
    date: date
    type: CalendarEntryType
    title: str
    is_class_day: bool = True
