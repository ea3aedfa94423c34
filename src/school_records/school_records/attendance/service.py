from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from ..academics.context import AcademicContext
from ..academics.repository import CalendarRepository
from ..common.datetime_utils import month_bounds, month_key, now_local
from ..common.validators import optional_text, require_enum, require_positive_id
from ..core.enums import AttendanceStatus, DayStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.result import Evaluation
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..schedules.model import ClassSchedule
from ..schedules.repository import ScheduleRepository
from . import aggregator
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CalendarDay, TardinessCheck
from .repository import AttendanceRepository
from .strategies.late_strategy import ordinal
from .tardiness import TardinessRuleEvaluator

logger = logging.getLogger(__name__)

SUMMARY_LEGEND = {
    DayStatus.PRESENT.value: "Present all day (attended all subjects)",
    DayStatus.HALF_DAY.value: "Half day (missed at least one subject)",
    DayStatus.ABSENT.value: "Absent (did not attend any subject)",
    DayStatus.NO_CLASS.value: "No scheduled classes",
}


@dataclass(frozen=True)
class RecordOutcome:
    attendance_id: int
    student_id: int
    schedule_id: int
    attendance_date: date
    status: AttendanceStatus
    remarks: Optional[str]
    tardiness_conversion: bool = False
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student_id": self.student_id,
            "schedule_id": self.schedule_id,
            "attendance_date": self.attendance_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "remarks": self.remarks,
            "tardiness_conversion": self.tardiness_conversion,
        }


@dataclass(frozen=True)
class BulkOutcome:
    records: list[RecordOutcome]
    conversions: list[int]
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "updated_count": len(self.records),
            "tardiness_conversions": list(self.conversions),
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        enrollments: EnrollmentRepository,
        calendar: CalendarRepository,
        *,
        tardiness: TardinessRuleEvaluator,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._enrollments = enrollments
        self._calendar = calendar
        self._tardiness = tardiness
        self._factory = strategy_factory or AttendanceStrategyFactory(threshold=tardiness.threshold)

    def _get_schedule(self, context: AcademicContext, schedule_id: int) -> ClassSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule or schedule.academic_year_id != context.academic_year_id:
            raise NotFoundError("Schedule not found")
        return schedule

    def _require_enrolled(self, context: AcademicContext, *, student_id: int, section_id: int) -> Enrollment:
        enrollment = self._enrollments.get_for_student(student_id=student_id, academic_year_id=context.academic_year_id)
        if not enrollment or not enrollment.is_enrolled or enrollment.section_id != section_id:
            raise NotFoundError("Student not found in this section")
        return enrollment

    def _record(
        self,
        context: AcademicContext,
        *,
        schedule: ClassSchedule,
        student_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: Optional[str],
        recorded_by: Optional[int],
        now: datetime,
    ) -> RecordOutcome:
        quarter = context.quarter_for(attendance_date) or context.current_quarter()
        quarter_id = quarter.quarter_id if quarter else None

        check: Optional[TardinessCheck] = None
        if status == AttendanceStatus.LATE:
            check = self._tardiness.evaluate(
                student_id=student_id,
                schedule_id=schedule.schedule_id,
                academic_year_id=context.academic_year_id,
                quarter_id=quarter_id,
                attendance_date=attendance_date,
            ).value

        strategy = self._factory.for_recording(status=status, check=check)
        decision = strategy.decide(requested=status, remarks=remarks)

        attendance_id = self._attendance.upsert(
            student_id=student_id,
            schedule_id=schedule.schedule_id,
            academic_year_id=context.academic_year_id,
            quarter_id=quarter_id,
            attendance_date=attendance_date,
            status=decision.status,
            remarks=decision.remarks,
            recorded_by=recorded_by,
            recorded_at=now,
        )

        if decision.converted:
            logger.info(
                "Late converted to absent (student_id=%s schedule_id=%s date=%s prior_lates=%s)",
                student_id,
                schedule.schedule_id,
                attendance_date,
                check.late_count if check else None,
            )

        return RecordOutcome(
            attendance_id=attendance_id,
            student_id=student_id,
            schedule_id=schedule.schedule_id,
            attendance_date=attendance_date,
            status=decision.status,
            remarks=decision.remarks,
            tardiness_conversion=decision.converted,
            warning=check.message if decision.converted and check else None,
        )

    def record_attendance(
        self,
        context: AcademicContext,
        *,
        student_id: int,
        schedule_id: int,
        attendance_date: date,
        status: AttendanceStatus | str,
        remarks: Optional[str] = None,
        recorded_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RecordOutcome:
        student_id = require_positive_id(student_id, "Student")
        status = require_enum(AttendanceStatus, getattr(status, "value", status), "Status")
        schedule = self._get_schedule(context, require_positive_id(schedule_id, "Schedule"))
        self._require_enrolled(context, student_id=student_id, section_id=schedule.section_id)

        return self._record(
            context,
            schedule=schedule,
            student_id=student_id,
            attendance_date=attendance_date,
            status=status,
            remarks=optional_text(remarks),
            recorded_by=recorded_by,
            now=now or now_local(),
        )

    def record_bulk(
        self,
        context: AcademicContext,
        *,
        schedule_id: int,
        attendance_date: date,
        entries: Sequence[dict[str, Any]],
        recorded_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> BulkOutcome:
        if not entries:
            raise ValidationError("At least one attendance entry is required")

        schedule = self._get_schedule(context, require_positive_id(schedule_id, "Schedule"))

        # Validate everything before writing anything.
        parsed = []
        for entry in entries:
            student_id = require_positive_id(entry.get("student_id"), "Student")
            status = require_enum(AttendanceStatus, entry.get("status"), "Status")
            self._require_enrolled(context, student_id=student_id, section_id=schedule.section_id)
            parsed.append((student_id, status, optional_text(entry.get("remarks"))))

        now = now or now_local()
        results = [
            self._record(
                context,
                schedule=schedule,
                student_id=student_id,
                attendance_date=attendance_date,
                status=status,
                remarks=remarks,
                recorded_by=recorded_by,
                now=now,
            )
            for student_id, status, remarks in parsed
        ]

        conversions = [r.student_id for r in results if r.tardiness_conversion]
        warning = None
        if conversions:
            warning = (
                f"{len(conversions)} student(s) reached {ordinal(self._tardiness.threshold + 1)} late "
                "and were marked as ABSENT"
            )
        return BulkOutcome(records=results, conversions=conversions, warning=warning)

    def tardiness_check(
        self,
        context: AcademicContext,
        *,
        student_id: int,
        schedule_id: int,
        quarter_id: Optional[int] = None,
        attendance_date: Optional[date] = None,
    ) -> Evaluation[TardinessCheck]:
        if quarter_id is None and attendance_date is not None:
            quarter = context.quarter_for(attendance_date)
            quarter_id = quarter.quarter_id if quarter else None
        return self._tardiness.evaluate(
            student_id=student_id,
            schedule_id=schedule_id,
            academic_year_id=context.academic_year_id,
            quarter_id=quarter_id,
            attendance_date=attendance_date,
        )

    def tardiness_stats(self, context: AcademicContext, *, student_id: int, quarter_id: Optional[int] = None) -> dict:
        if quarter_id is not None:
            context.get_quarter(quarter_id)
        subjects = self._tardiness.stats(
            student_id=student_id,
            academic_year_id=context.academic_year_id,
            quarter_id=quarter_id,
        )
        return {
            "student_id": int(student_id),
            "academic_year": context.to_dict(),
            "quarter_id": quarter_id,
            "threshold": self._tardiness.threshold,
            "subjects": [s.to_dict() for s in subjects],
            "total_late": sum(s.late_count for s in subjects),
            "total_converted": sum(s.converted_count for s in subjects),
        }

    def student_summary(
        self,
        context: AcademicContext,
        *,
        student_id: int,
        schedule_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict:
        start = start or context.academic_year.start_date
        end = end or context.academic_year.end_date
        if start > end:
            raise ValidationError("Start date must not be after end date")

        records = self._attendance.list_for_student(
            student_id=int(student_id),
            academic_year_id=context.academic_year_id,
            schedule_id=schedule_id,
            start=start,
            end=end,
        )
        return {
            "student_id": int(student_id),
            "academic_year": context.to_dict(),
            "period": {"start_date": start.strftime("%Y-%m-%d"), "end_date": end.strftime("%Y-%m-%d")},
            "summary": aggregator.summarize(records).to_dict(),
            "monthly_breakdown": [m.to_dict() for m in aggregator.monthly_breakdown(records)],
            "records": [r.to_dict() for r in records],
        }

    def _section_days(self, context: AcademicContext, *, section_id: int, start: date, end: date):
        schedules = self._schedules.list_for_section(section_id=section_id, academic_year_id=context.academic_year_id)
        students = self._enrollments.list_enrolled(section_id=section_id, academic_year_id=context.academic_year_id)
        holidays = self._calendar.list_non_class_days(academic_year_id=context.academic_year_id, start=start, end=end)
        records = self._attendance.list_for_section(
            section_id=section_id,
            academic_year_id=context.academic_year_id,
            start=start,
            end=end,
        )

        by_student: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in records:
            by_student[r.student_id].append(r)

        calendar = aggregator.build_calendar(start, end, (h.date for h in holidays))
        per_student = [
            (enrollment, aggregator.classify_student_days(calendar, by_student.get(enrollment.student_id, ()), schedules))
            for enrollment in students
        ]
        return calendar, per_student

    @staticmethod
    def _calendar_dicts(calendar: Iterable[CalendarDay]) -> list[dict]:
        return [d.to_dict() for d in calendar]

    def section_monthly_summary(self, context: AcademicContext, *, section_id: int, year: int, month: int) -> dict:
        if not 1 <= int(year) <= 9999:
            raise ValidationError("Year must be between 1 and 9999")
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        start, end = month_bounds(int(year), int(month))

        calendar, per_student = self._section_days(context, section_id=int(section_id), start=start, end=end)

        students = []
        for enrollment, daily in per_student:
            summary = aggregator.summarize_days(daily)
            students.append(
                {
                    "student": enrollment.student_dict(),
                    "daily_attendance": [d.to_dict() for d in daily],
                    "monthly_summary": summary.to_dict(),
                    "attendance_rate": summary.attendance_rate,
                }
            )

        return {
            "section_id": int(section_id),
            "academic_year": context.to_dict(),
            "period": {
                "month": int(month),
                "year": int(year),
                "month_name": start.strftime("%B %Y"),
                "start_date": start.strftime("%Y-%m-%d"),
                "end_date": end.strftime("%Y-%m-%d"),
            },
            "calendar_days": self._calendar_dicts(calendar),
            "students": students,
            "summary_legend": dict(SUMMARY_LEGEND),
            "class_statistics": aggregator.class_statistics([s["attendance_rate"] for s in students]),
        }

    def section_quarter_summary(self, context: AcademicContext, *, section_id: int, quarter_id: int) -> dict:
        quarter = context.get_quarter(quarter_id)
        _, per_student = self._section_days(
            context,
            section_id=int(section_id),
            start=quarter.start_date,
            end=quarter.end_date,
        )

        students = []
        for enrollment, daily in per_student:
            by_month = defaultdict(list)
            for d in daily:
                by_month[month_key(d.day.date)].append(d)

            summary = aggregator.summarize_days(daily)
            students.append(
                {
                    "student": enrollment.student_dict(),
                    "quarter_summary": summary.to_dict(),
                    "attendance_rate": summary.attendance_rate,
                    "monthly_trend": [
                        {"month": key, **aggregator.summarize_days(by_month[key]).to_dict()} for key in sorted(by_month)
                    ],
                }
            )

        return {
            "section_id": int(section_id),
            "academic_year": context.to_dict(),
            "quarter": {
                "id": quarter.quarter_id,
                "name": quarter.name,
                "start_date": quarter.start_date.strftime("%Y-%m-%d"),
                "end_date": quarter.end_date.strftime("%Y-%m-%d"),
            },
            "students": students,
            "class_statistics": aggregator.class_statistics([s["attendance_rate"] for s in students]),
        }
