from __future__ import annotations

from ...core.enums import HonorClassification
from .base import HonorTierPolicy


class HonorTierStrict(HonorTierPolicy):
    """98 / 95 / 90: the thresholds used by certificates and report cards."""

    name = "strict"

    @property
    def tiers(self):
        return (
            (98.0, HonorClassification.HIGHEST_HONORS),
            (95.0, HonorClassification.HIGH_HONORS),
            (90.0, HonorClassification.WITH_HONORS),
        )
