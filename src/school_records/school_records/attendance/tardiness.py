"""Tardiness rule: the late entry after `threshold` prior lates becomes an absence."""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from ..core.constants import LATE_CONVERSION_THRESHOLD
from ..core.enums import AttendanceStatus
from ..core.exceptions import EvaluationError, NotFoundError
from ..core.result import Evaluation
from ..schedules.repository import ScheduleRepository
from .model import SubjectTardiness, TardinessCheck
from .repository import AttendanceRepository
from .strategies.late_strategy import ordinal

logger = logging.getLogger(__name__)

CONVERSION_MARKER = "[Auto-converted]"


def fallback_check(message: str) -> TardinessCheck:
    """Fail-open value: never blocks the attendance entry."""
    return TardinessCheck(should_convert=False, late_count=0, message=message)


class TardinessRuleEvaluator:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        *,
        threshold: int = LATE_CONVERSION_THRESHOLD,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._threshold = int(threshold)

    @property
    def threshold(self) -> int:
        return self._threshold

    def evaluate(
        self,
        *,
        student_id: int,
        schedule_id: int,
        academic_year_id: int,
        quarter_id: Optional[int] = None,
        attendance_date: Optional[date] = None,
    ) -> Evaluation[TardinessCheck]:
        try:
            schedule = self._schedules.get_by_id(int(schedule_id))
            if not schedule:
                raise NotFoundError("Schedule not found")

            late_count = self._attendance.count_late(
                student_id=int(student_id),
                subject_id=schedule.subject_id,
                academic_year_id=int(academic_year_id),
                quarter_id=quarter_id,
                exclude_date=attendance_date,
            )
        except NotFoundError as e:
            logger.warning("Tardiness check skipped: %s (student_id=%s schedule_id=%s)", e, student_id, schedule_id)
            return Evaluation.fallback(fallback_check(str(e)), EvaluationError(str(e), cause=e))
        except Exception as e:
            logger.exception("Tardiness check failed (student_id=%s schedule_id=%s)", student_id, schedule_id)
            return Evaluation.fallback(
                fallback_check(f"Tardiness check failed: {e}"),
                EvaluationError("Tardiness check failed", cause=e),
            )

        should_convert = late_count >= self._threshold
        converting = ordinal(self._threshold + 1)
        if should_convert:
            message = (
                f"Student has {late_count} prior late records for this subject; "
                f"this {converting} late is recorded as ABSENT"
            )
        else:
            message = f"{late_count} prior late record(s) for this subject; the {converting} late is recorded as absent"

        return Evaluation.success(TardinessCheck(should_convert=should_convert, late_count=late_count, message=message))

    def stats(self, *, student_id: int, academic_year_id: int, quarter_id: Optional[int] = None) -> list[SubjectTardiness]:
        records = self._attendance.list_for_student(
            student_id=int(student_id),
            academic_year_id=int(academic_year_id),
            quarter_id=quarter_id,
        )

        lates: dict[int, int] = defaultdict(int)
        converted: dict[int, int] = defaultdict(int)
        for r in records:
            if r.subject_id is None:
                continue
            if r.status == AttendanceStatus.LATE:
                lates[r.subject_id] += 1
            elif r.status == AttendanceStatus.ABSENT and CONVERSION_MARKER in (r.remarks or ""):
                converted[r.subject_id] += 1
            else:
                lates.setdefault(r.subject_id, 0)

        out = []
        for subject_id in sorted(set(lates) | set(converted)):
            late_count = lates.get(subject_id, 0)
            remaining = max(self._threshold - late_count, 0)
            out.append(
                SubjectTardiness(
                    subject_id=subject_id,
                    late_count=late_count,
                    converted_count=converted.get(subject_id, 0),
                    remaining_before_conversion=remaining,
                    at_risk=remaining <= 1,
                )
            )
        return out
