from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status values stored for one student in one class session."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class EnrollmentStatus(str, Enum):
    ENROLLED = "enrolled"
    PENDING = "pending"
    WITHDRAWN = "withdrawn"
    TRANSFERRED = "transferred"


class DayStatus(str, Enum):
    """Whole-day classification used by the section/monthly views."""

    PRESENT = "present"
    HALF_DAY = "half_day"
    ABSENT = "absent"
    NO_CLASS = "no_class"


class PromotionStatus(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"
    INCOMPLETE = "Incomplete"


class HonorClassification(str, Enum):
    NONE = "None"
    WITH_HONORS = "With Honors"
    HIGH_HONORS = "High Honors"
    HIGHEST_HONORS = "Highest Honors"


class ActionTaken(str, Enum):
    PROMOTED = "PROMOTED"
    RETAINED = "RETAINED"
    IRREGULAR = "IRREGULAR"


class CertificateType(str, Enum):
    PERFECT_ATTENDANCE = "perfect_attendance"
    HONOR_ROLL = "honor_roll"


class CalendarEntryType(str, Enum):
    REGULAR = "regular"
    HOLIDAY = "holiday"
    EXAM = "exam"
    NO_CLASS = "no_class"
    SPECIAL_EVENT = "special_event"
