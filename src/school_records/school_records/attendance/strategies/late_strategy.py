from __future__ import annotations

from typing import Optional

from ...core.constants import LATE_CONVERSION_THRESHOLD, REMARK_SEPARATOR, TARDINESS_REMARK
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def conversion_remark(threshold: int = LATE_CONVERSION_THRESHOLD) -> str:
    return TARDINESS_REMARK.format(ordinal=ordinal(threshold + 1))


class LateConversionStrategy(AttendanceStrategy):
    """Late entry past the tardiness threshold: stored as absent with a fixed remark."""

    def __init__(self, threshold: int = LATE_CONVERSION_THRESHOLD):
        self._threshold = int(threshold)

    def decide(self, *, requested: AttendanceStatus, remarks: Optional[str]) -> StatusDecision:
        note = conversion_remark(self._threshold)
        merged = f"{remarks}{REMARK_SEPARATOR}{note}" if remarks else note
        return StatusDecision(status=AttendanceStatus.ABSENT, remarks=merged, converted=True)
