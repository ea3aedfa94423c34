from src.school_records.school_records.attendance.factory import AttendanceStrategyFactory
from src.school_records.school_records.attendance.model import TardinessCheck
from src.school_records.school_records.attendance.strategies.late_strategy import (
    LateConversionStrategy,
    conversion_remark,
    ordinal,
)
from src.school_records.school_records.attendance.strategies.normal_strategy import NormalStrategy
from src.school_records.school_records.core.enums import AttendanceStatus


def _check(should_convert: bool) -> TardinessCheck:
    return TardinessCheck(should_convert=should_convert, late_count=4 if should_convert else 1, message="")


def test_factory_converts_late_past_threshold():
    factory = AttendanceStrategyFactory(threshold=4)

    strategy = factory.for_recording(status=AttendanceStatus.LATE, check=_check(True))
    decision = strategy.decide(requested=AttendanceStatus.LATE, remarks=None)

    assert isinstance(strategy, LateConversionStrategy)
    assert decision.status == AttendanceStatus.ABSENT
    assert decision.converted is True
    assert "5th late" in decision.remarks


def test_factory_keeps_late_below_threshold():
    strategy = AttendanceStrategyFactory().for_recording(status=AttendanceStatus.LATE, check=_check(False))

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide(requested=AttendanceStatus.LATE, remarks="bus").status == AttendanceStatus.LATE


def test_factory_never_converts_other_statuses():
    strategy = AttendanceStrategyFactory().for_recording(status=AttendanceStatus.PRESENT, check=_check(True))

    assert isinstance(strategy, NormalStrategy)


def test_conversion_remark_is_appended_to_existing_remarks():
    decision = LateConversionStrategy(4).decide(requested=AttendanceStatus.LATE, remarks="Traffic")

    assert decision.remarks == f"Traffic | {conversion_remark(4)}"


def test_ordinal_suffixes():
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 103)] == [
        "1st",
        "2nd",
        "3rd",
        "4th",
        "11th",
        "12th",
        "13th",
        "21st",
        "22nd",
        "103rd",
    ]
