from __future__ import annotations

from ..core.exceptions import ValidationError
from .honors.base import HonorTierPolicy
from .honors.legacy_policy import HonorTierLegacy
from .honors.strict_policy import HonorTierStrict

_POLICIES = {
    HonorTierStrict.name: HonorTierStrict,
    HonorTierLegacy.name: HonorTierLegacy,
}


def get_honor_policy(name: str = "strict") -> HonorTierPolicy:
    """Factory Pattern: honor policy by its configured name."""
    key = (name or "strict").strip().lower()
    try:
        return _POLICIES[key]()
    except KeyError:
        raise ValidationError(f"Unknown honor tier policy: {name!r} (expected one of: {', '.join(_POLICIES)})")
