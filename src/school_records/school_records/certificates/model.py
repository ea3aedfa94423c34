from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import CertificateType


@dataclass(frozen=True)
class CertificateCheck:
    student_id: int
    quarter_id: Optional[int]
    certificate_type: CertificateType
    is_complete: bool
    eligible: bool
    reason: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def can_generate(self) -> bool:
        return self.is_complete and self.eligible

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "quarter_id": self.quarter_id,
            "certificate_type": self.certificate_type.value,
            "is_complete": self.is_complete,
            "eligible": self.eligible,
            "can_generate": self.can_generate,
            "reason": self.reason,
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class ExpectedSubjects:
    subject_ids: tuple[int, ...]
    source: str
