from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSchedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[ClassSchedule]:
        raise NotImplementedError

    def list_for_section(self, *, section_id: int, academic_year_id: int) -> Sequence[ClassSchedule]:
        """Active schedules of a section for one academic year."""

        raise NotImplementedError
