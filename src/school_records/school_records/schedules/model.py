from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class ClassSchedule:
    """Weekly class slot: one subject taught to one section on one weekday."""

    schedule_id: int
    subject_id: int
    section_id: int
    academic_year_id: int
    day_of_week: str
    teacher_id: Optional[int] = None
    is_active: bool = True


def distinct_subject_ids(schedules: Iterable[ClassSchedule]) -> list[int]:
    """Subjects taught through the given schedules, in first-seen order."""
    seen: dict[int, None] = {}
    for s in schedules:
        if s.is_active:
            seen.setdefault(s.subject_id, None)
    return list(seen)
