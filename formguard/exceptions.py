"""
Exceptions raised by FormGuard.

Validators never raise for bad input; they return verdicts. These are raised
by ``FormEngine.submit`` when a submission must be refused outright.
"""

from __future__ import annotations

from typing import Any


class FormGuardError(Exception):
    """Base exception for all FormGuard errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class SecurityViolation(FormGuardError):
    """Raised when a raw field matches an injection family.

    The offending payload is never stored on the exception.
    """

    def __init__(self, field: str, family: str, threat: str):
        super().__init__(
            message=f"{threat} in field '{field}'",
            details={"field": field, "family": family},
        )
        self.field = field
        self.family = family


class RateLimitExceeded(FormGuardError):
    """Raised when the submission window is full."""

    def __init__(self, limit: int, window_seconds: float, retry_after: float):
        super().__init__(
            message=(
                f"Too many submissions: {limit} per {window_seconds:g} seconds. "
                f"Retry after {retry_after:.0f} seconds"
            ),
            details={
                "limit": limit,
                "window_seconds": window_seconds,
                "retry_after": retry_after,
            },
        )
        self.retry_after = retry_after


class BotSubmission(FormGuardError):
    """Raised when the honeypot field was filled in."""

    def __init__(self) -> None:
        super().__init__(message="Submission rejected")
