from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...core.enums import HonorClassification


class HonorTierPolicy(ABC):
    """Honor tier thresholds (Strategy Pattern).

    Tiers are inclusive lower bounds checked from the highest down.
    """

    name: str = ""

    @property
    @abstractmethod
    def tiers(self) -> Sequence[tuple[float, HonorClassification]]:
        raise NotImplementedError

    def classify(self, average: Optional[float]) -> HonorClassification:
        if average is None:
            return HonorClassification.NONE
        for minimum, tier in self.tiers:
            if average >= minimum:
                return tier
        return HonorClassification.NONE

    def describe(self) -> dict:
        return {"name": self.name, "tiers": {tier.value: minimum for minimum, tier in self.tiers}}
