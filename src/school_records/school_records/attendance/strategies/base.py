from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    remarks: Optional[str] = None
    converted: bool = False


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the status that gets persisted."""

    @abstractmethod
    def decide(self, *, requested: AttendanceStatus, remarks: Optional[str]) -> StatusDecision:
        raise NotImplementedError
