from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Persist the submitted status as is."""

    def decide(self, *, requested: AttendanceStatus, remarks: Optional[str]) -> StatusDecision:
        return StatusDecision(status=requested, remarks=remarks)
