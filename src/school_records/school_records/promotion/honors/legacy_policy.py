from __future__ import annotations

from ...core.enums import HonorClassification
from .base import HonorTierPolicy


class HonorTierLegacy(HonorTierPolicy):
    """95 / 90 / 85: thresholds of the older promotion report."""

    name = "legacy"

    @property
    def tiers(self):
        return (
            (95.0, HonorClassification.HIGHEST_HONORS),
            (90.0, HonorClassification.HIGH_HONORS),
            (85.0, HonorClassification.WITH_HONORS),
        )
