from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, DayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's status for one class session (student, schedule, date)."""

    attendance_id: int
    student_id: int
    schedule_id: int
    academic_year_id: int
    quarter_id: Optional[int]
    attendance_date: date
    status: AttendanceStatus
    remarks: Optional[str] = None
    recorded_by: Optional[int] = None
    recorded_at: Optional[datetime] = None
    subject_id: Optional[int] = None

    @property
    def attended(self) -> bool:
        return self.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student_id": self.student_id,
            "schedule_id": self.schedule_id,
            "subject_id": self.subject_id,
            "quarter_id": self.quarter_id,
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "day_of_week": self.attendance_date.strftime("%A"),
            "status": self.status.value,
            "remarks": self.remarks,
            "recorded_by": self.recorded_by,
            "recorded_at": self.recorded_at.strftime("%Y-%m-%d %H:%M:%S") if self.recorded_at else None,
        }


@dataclass(frozen=True)
class TardinessCheck:
    should_convert: bool
    late_count: int
    message: str

    def to_dict(self) -> dict:
        return {"should_convert": self.should_convert, "late_count": self.late_count, "message": self.message}


@dataclass(frozen=True)
class SubjectTardiness:
    subject_id: int
    late_count: int
    converted_count: int
    remaining_before_conversion: int
    at_risk: bool

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "late_count": self.late_count,
            "converted_count": self.converted_count,
            "remaining_before_conversion": self.remaining_before_conversion,
            "at_risk": self.at_risk,
        }


@dataclass(frozen=True)
class AttendanceCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    total: int = 0
    attended: int = 0
    attendance_percentage: float = 0.0
    percentages: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "excused": self.excused,
            "total": self.total,
            "attended": self.attended,
            "attendance_percentage": self.attendance_percentage,
            "percentages": dict(self.percentages),
        }


@dataclass(frozen=True)
class MonthBucket:
    month: str
    month_name: str
    counts: AttendanceCounts

    def to_dict(self) -> dict:
        data = {"month": self.month, "month_name": self.month_name}
        data.update(self.counts.to_dict())
        data["attendance_rate"] = self.counts.attendance_percentage
        return data


@dataclass(frozen=True)
class CalendarDay:
    date: date
    is_weekend: bool
    is_holiday: bool = False

    @property
    def is_school_day(self) -> bool:
        return not (self.is_weekend or self.is_holiday)

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "day": self.date.day,
            "day_name": self.date.strftime("%a"),
            "is_weekend": self.is_weekend,
            "is_holiday": self.is_holiday,
        }


@dataclass(frozen=True)
class DaySummary:
    present_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    no_class_days: int = 0
    attendance_rate: float = 0.0

    def to_dict(self) -> dict:
        return {
            "present_days": self.present_days,
            "half_days": self.half_days,
            "absent_days": self.absent_days,
            "no_class_days": self.no_class_days,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class DailyStatus:
    day: CalendarDay
    status: DayStatus

    def to_dict(self) -> dict:
        data = self.day.to_dict()
        data["status"] = self.status.value
        return data
