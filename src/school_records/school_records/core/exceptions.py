from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a student, schedule, quarter or academic year does not exist."""


class NotEligibleError(DomainError):
    """Raised when a report or certificate may not be generated for the request."""


class EvaluationError(Exception):
    """Cause carried by a fallback evaluation result instead of being raised."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
