from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .exceptions import EvaluationError

T = TypeVar("T")


@dataclass(frozen=True)
class Evaluation(Generic[T]):
    """Outcome of an evaluator that fails open.

    `value` is always usable: on failure it holds the evaluator's documented
    fallback and `error` says why.
    """

    value: T
    error: Optional[EvaluationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Evaluation[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, error: EvaluationError) -> "Evaluation[T]":
        return cls(value=value, error=error)
