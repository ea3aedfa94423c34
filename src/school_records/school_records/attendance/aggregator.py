"""Pure attendance aggregation over already-fetched rows.

Two views are computed here:

- record level: counts per status and the share of attended sessions
  (present + late) for a student, optionally bucketed by calendar month;
- day level: each calendar day of a student is classified against the
  section's weekly timetable as present / half_day / absent / no_class and
  the day summary yields an attendance rate where a half day weighs 0.5.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Sequence

from ..common.datetime_utils import is_weekend, iter_days, month_key, weekday_name
from ..core.constants import HALF_DAY_WEIGHT, HIGH_ATTENDANCE_RATE, LOW_ATTENDANCE_RATE
from ..core.enums import AttendanceStatus, DayStatus
from ..schedules.model import ClassSchedule
from .model import AttendanceCounts, AttendanceRecord, CalendarDay, DailyStatus, DaySummary, MonthBucket


def _pct(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceCounts:
    tally = {s: 0 for s in AttendanceStatus}
    for r in records:
        tally[r.status] += 1

    total = sum(tally.values())
    attended = tally[AttendanceStatus.PRESENT] + tally[AttendanceStatus.LATE]
    return AttendanceCounts(
        present=tally[AttendanceStatus.PRESENT],
        absent=tally[AttendanceStatus.ABSENT],
        late=tally[AttendanceStatus.LATE],
        excused=tally[AttendanceStatus.EXCUSED],
        total=total,
        attended=attended,
        attendance_percentage=_pct(attended, total),
        percentages={s.value: _pct(n, total) for s, n in tally.items()},
    )


def monthly_breakdown(records: Iterable[AttendanceRecord]) -> list[MonthBucket]:
    by_month: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        by_month[month_key(r.attendance_date)].append(r)

    out = []
    for key in sorted(by_month):
        month_name = datetime.strptime(f"{key}-01", "%Y-%m-%d").strftime("%B %Y")
        out.append(MonthBucket(month=key, month_name=month_name, counts=summarize(by_month[key])))
    return out


def build_calendar(start: date, end: date, holidays: Iterable[date] = ()) -> list[CalendarDay]:
    holiday_set = set(holidays)
    return [CalendarDay(date=d, is_weekend=is_weekend(d), is_holiday=d in holiday_set) for d in iter_days(start, end)]


def classify_day(
    day: CalendarDay,
    day_records: Iterable[AttendanceRecord],
    schedules: Sequence[ClassSchedule],
) -> DayStatus:
    if not day.is_school_day:
        return DayStatus.NO_CLASS

    weekday = weekday_name(day.date)
    scheduled_ids = {s.schedule_id for s in schedules if s.day_of_week == weekday}
    if not scheduled_ids:
        return DayStatus.NO_CLASS

    attended_ids = {r.schedule_id for r in day_records if r.attended and r.schedule_id in scheduled_ids}
    if not attended_ids:
        return DayStatus.ABSENT
    if len(attended_ids) == len(scheduled_ids):
        return DayStatus.PRESENT
    return DayStatus.HALF_DAY


def attendance_rate(present_days: int, half_days: int, absent_days: int) -> float:
    school_days = present_days + half_days + absent_days
    if school_days <= 0:
        return 0.0
    score = present_days + half_days * HALF_DAY_WEIGHT
    return round(score / school_days * 100, 2)


def classify_student_days(
    calendar: Sequence[CalendarDay],
    records: Iterable[AttendanceRecord],
    schedules: Sequence[ClassSchedule],
) -> list[DailyStatus]:
    by_date: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        by_date[r.attendance_date].append(r)
    return [DailyStatus(day=d, status=classify_day(d, by_date.get(d.date, ()), schedules)) for d in calendar]


def summarize_days(daily: Iterable[DailyStatus]) -> DaySummary:
    tally = {s: 0 for s in DayStatus}
    for d in daily:
        tally[d.status] += 1

    present = tally[DayStatus.PRESENT]
    half = tally[DayStatus.HALF_DAY]
    absent = tally[DayStatus.ABSENT]
    return DaySummary(
        present_days=present,
        half_days=half,
        absent_days=absent,
        no_class_days=tally[DayStatus.NO_CLASS],
        attendance_rate=attendance_rate(present, half, absent),
    )


def class_statistics(rates: Sequence[float]) -> dict:
    if not rates:
        return {
            "total_students": 0,
            "average_attendance_rate": 0,
            "highest_attendance": 0,
            "lowest_attendance": 0,
            "students_above_90": 0,
            "students_below_75": 0,
        }

    return {
        "total_students": len(rates),
        "average_attendance_rate": round(sum(rates) / len(rates), 2),
        "highest_attendance": max(rates),
        "lowest_attendance": min(rates),
        "students_above_90": sum(1 for r in rates if r >= HIGH_ATTENDANCE_RATE),
        "students_below_75": sum(1 for r in rates if r < LOW_ATTENDANCE_RATE),
    }
