"""Email Validator: format, domain and username plausibility checks."""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from formguard import patterns
from formguard.metrics import count_consonants, levenshtein, max_consonant_run, vowel_ratio
from formguard.models import RejectionKind, ValidationVerdict
from formguard.validators.base import BaseValidator

logger = logging.getLogger(__name__)

EMAIL_FORMAT_RE = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_LOCAL_CHARS_RE = re.compile(r"^[a-z0-9._-]+$")
_DOMAIN_CHARS_RE = re.compile(r"^[a-z0-9.-]+$")
_USERNAME_SEPARATORS_RE = re.compile(r"[._-]")

MIN_DOMAIN_NAME_LENGTH = 3
MIN_LOCAL_LENGTH = 4
MIN_EMAIL_LENGTH = 5
MAX_EMAIL_LENGTH = 254
TYPO_MAX_DISTANCE = 3
TYPO_MAX_RATIO = 0.4
USERNAME_MAX_CONSONANT_RUN = 6
USERNAME_MIN_VOWEL_RATIO = 0.20

REASON_FORMAT = "Invalid email format"
REASON_CHARACTERS = "Email contains invalid characters"
REASON_DISPOSABLE = "Disposable email addresses are not allowed"
REASON_DOTS = "Email contains misplaced or consecutive dots"
REASON_TLD = "Unrecognised top-level domain '.{tld}'"
REASON_DOMAIN_SHORT = "Email domain name is too short"
REASON_TYPO = "Did you mean {provider}? That looks like a typo in the domain."
REASON_LOCAL_SHORT = "Username is too short. Use at least 4 characters."
REASON_GIBBERISH = "That username looks like gibberish. Please use a real name."
REASON_KEYBOARD = "That username looks like a keyboard pattern. Please use a real name."
REASON_GENERIC = "That username looks like a test account. Please use a real name or email."
REASON_LENGTH = "Email must be between 5 and 254 characters"


def find_provider_typo(domain_name: str) -> str | None:
    """Return the provider *domain_name* is most likely a typo of, if any.

    An exact match against ANY provider clears the name before distances are
    considered, so ``mail`` is never reported as a typo of ``gmail``.
    """
    providers = patterns.common_providers()
    if domain_name in providers:
        return None
    for provider in providers:
        distance = levenshtein(domain_name, provider)
        allowed = math.ceil(TYPO_MAX_RATIO * max(len(domain_name), len(provider)))
        if 0 < distance <= TYPO_MAX_DISTANCE and distance <= allowed:
            return provider
    return None


def username_issue(local: str) -> str | None:
    """Reason the local part looks fabricated, or None if it looks plausible."""
    username = _USERNAME_SEPARATORS_RE.sub("", local.lower())

    if max_consonant_run(username) >= USERNAME_MAX_CONSONANT_RUN:
        return REASON_GIBBERISH
    for rule in patterns.keyboard_patterns():
        if rule.regex.search(username):
            return REASON_KEYBOARD
    for rule in patterns.generic_username_patterns():
        if rule.regex.search(username):
            return REASON_GENERIC
    if count_consonants(username) > 0 and vowel_ratio(username) < USERNAME_MIN_VOWEL_RATIO:
        return REASON_GIBBERISH
    return None


class EmailValidator(BaseValidator):
    """Validate an email address; the first failing check decides the verdict."""

    name = "email"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)

    def validate(self, text: str) -> ValidationVerdict:
        value = text.strip().lower()

        if not EMAIL_FORMAT_RE.match(value):
            return self._reject(REASON_FORMAT, RejectionKind.FORMAT)

        local, domain = value.split("@", 1)
        # Same character sets as the format regex once lowercased; kept as its
        # own step so a looser format pattern cannot widen what is accepted.
        if not _LOCAL_CHARS_RE.match(local) or not _DOMAIN_CHARS_RE.match(domain):
            return self._reject(REASON_CHARACTERS, RejectionKind.FORMAT)

        if domain in patterns.disposable_domains():
            return self._reject(REASON_DISPOSABLE)

        if ".." in value or value.startswith(".") or value.endswith("."):
            return self._reject(REASON_DOTS, RejectionKind.FORMAT)

        domain_name, tld = domain.rsplit(".", 1)
        if tld not in patterns.legitimate_tlds():
            return self._reject(REASON_TLD.format(tld=tld))

        if len(domain_name) < MIN_DOMAIN_NAME_LENGTH:
            return self._reject(REASON_DOMAIN_SHORT)

        provider = find_provider_typo(domain_name)
        if provider is not None:
            return self._reject(
                REASON_TYPO.format(provider=provider),
                suggestions=[provider],
            )

        if len(local) < MIN_LOCAL_LENGTH:
            return self._reject(REASON_LOCAL_SHORT)

        issue = username_issue(local)
        if issue is not None:
            return self._reject(issue)

        if not MIN_EMAIL_LENGTH <= len(value) <= MAX_EMAIL_LENGTH:
            return self._reject(REASON_LENGTH, RejectionKind.FORMAT)

        return ValidationVerdict(field=self.name, valid=True)

    def _reject(
        self,
        reason: str,
        kind: RejectionKind = RejectionKind.PLAUSIBILITY,
        suggestions: list[str] | None = None,
    ) -> ValidationVerdict:
        logger.debug("Email rejected: %s", reason)
        return ValidationVerdict(
            field=self.name,
            valid=False,
            reason=reason,
            suggestions=suggestions or [],
            kind=kind,
        )
