from datetime import date

from src.school_records.school_records.attendance.tardiness import TardinessRuleEvaluator
from src.school_records.school_records.core.enums import AttendanceStatus

from tests.fakes import BrokenAttendance, InMemoryAttendance, InMemorySchedules, schedule

WEEK = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


def _setup(prior_lates: int):
    schedules = InMemorySchedules([schedule(i + 1, 10, day) for i, day in enumerate(WEEK)] + [schedule(9, 20, "Friday")])
    attendance = InMemoryAttendance(schedules)
    for i in range(prior_lates):
        attendance.add(1, (i % 5) + 1, date(2025, 9, 1 + i), AttendanceStatus.LATE)
    return TardinessRuleEvaluator(attendance, schedules, threshold=4), attendance


def test_fifth_late_must_convert():
    evaluator, _ = _setup(4)

    result = evaluator.evaluate(
        student_id=1,
        schedule_id=5,
        academic_year_id=1,
        quarter_id=1,
        attendance_date=date(2025, 9, 5),
    )

    assert result.ok
    assert result.value.should_convert is True
    assert result.value.late_count == 4


def test_three_priors_do_not_convert():
    evaluator, _ = _setup(3)

    result = evaluator.evaluate(student_id=1, schedule_id=4, academic_year_id=1, attendance_date=date(2025, 9, 4))

    assert result.value.should_convert is False
    assert result.value.late_count == 3


def test_lates_in_other_subjects_do_not_count():
    evaluator, _ = _setup(4)

    result = evaluator.evaluate(student_id=1, schedule_id=9, academic_year_id=1, attendance_date=date(2025, 9, 5))

    assert result.value.should_convert is False
    assert result.value.late_count == 0


def test_record_on_the_same_date_is_excluded():
    evaluator, _ = _setup(4)

    # Re-submitting the 4th day itself only sees the 3 other lates.
    result = evaluator.evaluate(student_id=1, schedule_id=4, academic_year_id=1, attendance_date=date(2025, 9, 4))

    assert result.value.late_count == 3
    assert result.value.should_convert is False


def test_quarter_scope_filters_prior_lates():
    evaluator, _ = _setup(4)

    result = evaluator.evaluate(student_id=1, schedule_id=5, academic_year_id=1, quarter_id=2)

    assert result.value.late_count == 0


def test_unknown_schedule_fails_open():
    evaluator, _ = _setup(4)

    result = evaluator.evaluate(student_id=1, schedule_id=999, academic_year_id=1)

    assert not result.ok
    assert result.value.should_convert is False
    assert "Schedule not found" in result.value.message


def test_storage_failure_fails_open_and_logs(caplog):
    schedules = InMemorySchedules([schedule(1, 10, "Monday")])
    evaluator = TardinessRuleEvaluator(BrokenAttendance(schedules), schedules)

    with caplog.at_level("ERROR"):
        result = evaluator.evaluate(student_id=7, schedule_id=1, academic_year_id=1)

    assert not result.ok
    assert result.value.should_convert is False
    assert result.value.late_count == 0
    assert "connection lost" in result.value.message
    assert "student_id=7" in caplog.text


def test_stats_report_lates_and_conversions_per_subject():
    evaluator, attendance = _setup(3)
    attendance.add(
        1,
        4,
        date(2025, 9, 11),
        AttendanceStatus.ABSENT,
        remarks="[Auto-converted] 5th late for this subject - marked as absent",
    )

    stats = evaluator.stats(student_id=1, academic_year_id=1)

    assert len(stats) == 1
    assert stats[0].subject_id == 10
    assert stats[0].late_count == 3
    assert stats[0].converted_count == 1
    assert stats[0].remaining_before_conversion == 1
    assert stats[0].at_risk is True
