from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import LATE_CONVERSION_THRESHOLD
from ..core.enums import AttendanceStatus
from .model import TardinessCheck
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateConversionStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    threshold: int = LATE_CONVERSION_THRESHOLD

    def for_recording(self, *, status: AttendanceStatus, check: Optional[TardinessCheck]) -> AttendanceStrategy:
        if status == AttendanceStatus.LATE and check is not None and check.should_convert:
            return LateConversionStrategy(self.threshold)
        return NormalStrategy()
