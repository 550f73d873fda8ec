"""Security helper: injection screening, honeypot, rate limiting and CSRF token.

Screening runs on the RAW field value, independently of the semantic
validators. Payloads are never logged or echoed back; audit entries carry
the field name, the family and the input length only.
"""

from __future__ import annotations

import hmac
import logging
import secrets
from collections.abc import Mapping

from formguard.config import DEFAULT_FIELD_MAX_LENGTHS, Settings
from formguard.models import SecurityVerdict, ThreatFamily
from formguard.ratelimit import DEFAULT_KEY, RateLimiter
from formguard.sanitize import escape_html, sanitize_input
from formguard.validators.injection import InjectionDetector

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("formguard.audit")

UNKNOWN_FIELD_MAX_LENGTH = 1000
CSRF_TOKEN_LENGTH = 32

THREAT_NON_STRING = "Non-string input detected"
THREAT_TOO_LONG = "Input exceeds maximum length"


class SecurityHelper:
    """Per-session security checks for a contact form."""

    def __init__(
        self,
        field_max_lengths: Mapping[str, int] | None = None,
        rate_limiter: RateLimiter | None = None,
        detector: InjectionDetector | None = None,
    ) -> None:
        self.field_max_lengths = dict(field_max_lengths or DEFAULT_FIELD_MAX_LENGTHS)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.detector = detector or InjectionDetector()
        self._csrf_token: str | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        rate_limiter: RateLimiter | None = None,
    ) -> SecurityHelper:
        limiter = rate_limiter or RateLimiter(
            max_submissions=settings.rate_limit_max_submissions,
            window_seconds=settings.rate_limit_window_seconds,
        )
        return cls(field_max_lengths=settings.field_max_lengths, rate_limiter=limiter)

    def max_length(self, field_name: str) -> int:
        return self.field_max_lengths.get(field_name.lower(), UNKNOWN_FIELD_MAX_LENGTH)

    def check_input(self, field_name: str, raw: object) -> SecurityVerdict:
        """Screen one raw value; the first failing check decides."""
        if not isinstance(raw, str):
            return self._violation(field_name, ThreatFamily.INPUT_TYPE, THREAT_NON_STRING, 0)

        if len(raw) > self.max_length(field_name):
            return self._violation(field_name, ThreatFamily.LENGTH, THREAT_TOO_LONG, len(raw))

        family = self.detector.detect(raw)
        if family is not None:
            return self._violation(field_name, ThreatFamily(family.name), family.threat, len(raw))

        return SecurityVerdict(field=field_name, valid=True)

    def _violation(
        self,
        field_name: str,
        family: ThreatFamily,
        threat: str,
        length: int,
    ) -> SecurityVerdict:
        audit_logger.warning(
            "SECURITY_VIOLATION field=%s family=%s length=%d",
            field_name,
            family.value,
            length,
        )
        return SecurityVerdict(field=field_name, valid=False, threat=threat, family=family)

    @staticmethod
    def check_honeypot(value: str | None) -> bool:
        """True when the hidden field is empty, i.e. a human filled the form."""
        if value is None or not value.strip():
            return True
        audit_logger.warning("HONEYPOT_TRIPPED length=%d", len(value))
        return False

    def check_rate_limit(self, key: str = DEFAULT_KEY) -> bool:
        return self.rate_limiter.check(key)

    @staticmethod
    def sanitize(raw: object) -> str:
        return sanitize_input(raw)

    @staticmethod
    def escape_html(text: str) -> str:
        return escape_html(text)

    @property
    def csrf_token(self) -> str:
        """Session token, generated on first use and reused afterwards.

        This is a placebo: nothing server-side verifies it unless the caller
        uses ``verify_csrf_token``.
        """
        if self._csrf_token is None:
            self._csrf_token = secrets.token_urlsafe(24)[:CSRF_TOKEN_LENGTH]
        return self._csrf_token

    def verify_csrf_token(self, token: str | None) -> bool:
        if not token or self._csrf_token is None:
            return False
        return hmac.compare_digest(token.encode("utf-8"), self._csrf_token.encode("utf-8"))
