"""Form engine: runs the security screen and field validators over a submission."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from formguard import __version__
from formguard.config import Settings, get_settings
from formguard.exceptions import BotSubmission, RateLimitExceeded, SecurityViolation
from formguard.models import (
    ContactSubmission,
    MessageReport,
    QualityFeedback,
    RejectionKind,
    SecurityVerdict,
    SubmissionReport,
    ValidationVerdict,
)
from formguard.ratelimit import DEFAULT_KEY, RateLimiter
from formguard.security import SecurityHelper
from formguard.validators.base import BaseValidator
from formguard.validators.email import EmailValidator
from formguard.validators.message import MessageAnalyzer
from formguard.validators.name import NameValidator

logger = logging.getLogger(__name__)

FIELDS: tuple[str, ...] = ("name", "email", "message")

REASON_BOT = "Submission rejected"
REASON_RATE_LIMIT = "Too many submissions. Please wait a moment before trying again."
REASON_INVALID = "Please correct the highlighted fields"
REASON_VALIDATOR_ERROR = "Validation could not be completed"


class FormEngine:
    """Validates contact-form submissions end to end."""

    def __init__(
        self,
        settings: Settings | None = None,
        security: SecurityHelper | None = None,
        rate_limiter: RateLimiter | None = None,
        names_database: Iterable[str] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.security = security or SecurityHelper.from_settings(
            self._settings, rate_limiter=rate_limiter,
        )
        config = self._settings.model_dump()
        self._validators: dict[str, BaseValidator] = {
            "name": NameValidator(config=config, names_database=names_database),
            "email": EmailValidator(config=config),
            "message": MessageAnalyzer(config=config),
        }

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def available_validators(self) -> list[str]:
        return list(self._validators.keys())

    def validate_field(self, field: str, value: str) -> ValidationVerdict | MessageReport:
        """Run the semantic validator for *field*; crashes become failed verdicts."""
        try:
            validator = self._validators[field]
        except KeyError:
            raise ValueError(f"Unknown field: {field!r}") from None
        try:
            return validator.validate(value)
        except Exception:
            logger.exception("Validator '%s' raised an exception", field)
            return self._failed_verdict(field)

    def check_field(self, field: str, raw: object) -> SecurityVerdict:
        return self.security.check_input(field, raw)

    def validate_submission(
        self,
        submission: ContactSubmission,
        client_key: str = DEFAULT_KEY,
        request_id: str | None = None,
    ) -> SubmissionReport:
        """Screen and validate a whole submission; never raises for bad input."""
        rid = request_id or uuid.uuid4().hex

        if not self.security.check_honeypot(submission.honeypot):
            return SubmissionReport(
                request_id=rid,
                version=__version__,
                accepted=False,
                kind=RejectionKind.SECURITY,
                reason=REASON_BOT,
            )

        decision = self.security.rate_limiter.acquire(client_key)
        if not decision.allowed:
            return SubmissionReport(
                request_id=rid,
                version=__version__,
                accepted=False,
                kind=RejectionKind.RATE_LIMIT,
                reason=REASON_RATE_LIMIT,
                retry_after=round(decision.retry_after, 1),
            )

        raw = {field: getattr(submission, field) for field in FIELDS}
        security = [self.check_field(field, raw[field]) for field in FIELDS]
        violation = next((v for v in security if not v.valid), None)
        if violation is not None:
            return SubmissionReport(
                request_id=rid,
                version=__version__,
                accepted=False,
                kind=RejectionKind.SECURITY,
                reason=f"Security violation: {violation.threat}",
                security=security,
            )

        sanitized = {field: self.security.sanitize(raw[field]) for field in FIELDS}
        name = self.validate_field("name", sanitized["name"])
        email = self.validate_field("email", sanitized["email"])
        message = self.validate_field("message", sanitized["message"])

        failed = [v for v in (name, email, message) if not v.valid]
        if failed:
            kind = getattr(failed[0], "kind", None) or RejectionKind.PLAUSIBILITY
            return SubmissionReport(
                request_id=rid,
                version=__version__,
                accepted=False,
                kind=kind,
                reason=REASON_INVALID,
                security=security,
                name=name,
                email=email,
                message=message,
            )

        logger.info("Submission accepted request_id=%s", rid)
        return SubmissionReport(
            request_id=rid,
            version=__version__,
            accepted=True,
            security=security,
            name=name,
            email=email,
            message=message,
            sanitized=sanitized,
            csrf_token=self.security.csrf_token,
        )

    def submit(
        self,
        submission: ContactSubmission,
        client_key: str = DEFAULT_KEY,
        request_id: str | None = None,
    ) -> SubmissionReport:
        """Like ``validate_submission`` but raises for bots, floods and attacks."""
        report = self.validate_submission(submission, client_key=client_key, request_id=request_id)
        if report.accepted or report.kind in (None, RejectionKind.FORMAT, RejectionKind.PLAUSIBILITY):
            return report
        if report.kind == RejectionKind.RATE_LIMIT:
            raise RateLimitExceeded(
                limit=self.security.rate_limiter.max_submissions,
                window_seconds=self.security.rate_limiter.window_seconds,
                retry_after=report.retry_after or 0.0,
            )
        violation = next((v for v in report.security if not v.valid), None)
        if violation is None:
            raise BotSubmission()
        raise SecurityViolation(
            field=violation.field,
            family=violation.family.value if violation.family else "unknown",
            threat=violation.threat or "Security violation",
        )

    @staticmethod
    def _failed_verdict(field: str) -> ValidationVerdict | MessageReport:
        if field == "message":
            return MessageReport(
                valid=False,
                issues=[REASON_VALIDATOR_ERROR],
                quality=0,
                feedback=QualityFeedback(acceptable=False, message=REASON_VALIDATOR_ERROR),
            )
        return ValidationVerdict(
            field=field,
            valid=False,
            reason=REASON_VALIDATOR_ERROR,
        )
