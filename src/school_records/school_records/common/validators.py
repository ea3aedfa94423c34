from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.constants import MAX_GRADE, MIN_GRADE
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return parsed


def optional_positive_id(value: Any, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    return require_positive_id(value, field_name)


def require_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_grade(value: Any) -> float:
    try:
        grade = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Grade must be a number")
    if not math.isfinite(grade):
        raise ValidationError("Grade must be a number")
    if grade < MIN_GRADE or grade > MAX_GRADE:
        raise ValidationError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")
    return round(grade, 2)


def optional_text(value: Any, *, max_length: int = 500) -> Optional[str]:
    text = (value or "").strip() if isinstance(value, str) else None
    if not text:
        return None
    if len(text) > max_length:
        raise ValidationError(f"Text must be at most {max_length} characters")
    return text
