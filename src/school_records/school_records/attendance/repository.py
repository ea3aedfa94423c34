from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def count_late(
        self,
        *,
        student_id: int,
        subject_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
        exclude_date: Optional[date] = None,
    ) -> int:
        """Count "late" rows of a student across every schedule of one subject."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: int,
        schedule_id: int,
        academic_year_id: int,
        quarter_id: Optional[int],
        attendance_date: date,
        status: AttendanceStatus,
        remarks: Optional[str],
        recorded_by: Optional[int],
        recorded_at: datetime,
    ) -> int:
        """Update the (student, schedule, date) row or create it.

        Returns attendance_id.
        """

        raise NotImplementedError

    def list_for_student(
        self,
        *,
        student_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
        schedule_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_section(
        self,
        *,
        section_id: int,
        academic_year_id: int,
        start: date,
        end: date,
    ) -> Sequence[AttendanceRecord]:
        """Rows of students enrolled in the section within [start, end]."""

        raise NotImplementedError
