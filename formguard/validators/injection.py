"""Injection Detector: screens raw field values against the attack-pattern families."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from formguard import patterns
from formguard.models import SecurityVerdict, ThreatFamily
from formguard.patterns import InjectionFamily
from formguard.regex_guard import count_matches, safe_search
from formguard.validators.base import BaseValidator

logger = logging.getLogger(__name__)


def family_matches(family: InjectionFamily, text: str) -> bool:
    """Apply one family's counting rule to *text*."""
    if family.mode == "occurrences":
        total = sum(count_matches(rule.regex, text) for rule in family.rules)
        return total > family.threshold
    if family.mode == "groups":
        repeated = sum(1 for rule in family.rules if count_matches(rule.regex, text) > 1)
        return repeated > family.threshold
    return any(safe_search(rule.regex, text) for rule in family.rules)


class InjectionDetector(BaseValidator):
    """Check text against SQL, XSS, NoSQL, LDAP, command and path-traversal patterns.

    Families are evaluated in order and the first one that matches decides
    the verdict.
    """

    name = "injection"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        families: Sequence[InjectionFamily] | None = None,
    ) -> None:
        super().__init__(config)
        self._families = tuple(families) if families is not None else patterns.injection_families()

    @property
    def families(self) -> list[str]:
        return [f.name for f in self._families]

    def detect(self, text: str) -> InjectionFamily | None:
        for family in self._families:
            if family_matches(family, text):
                return family
        return None

    def validate(self, text: str, field: str = "input") -> SecurityVerdict:
        family = self.detect(text)
        if family is None:
            return SecurityVerdict(field=field, valid=True)
        return SecurityVerdict(
            field=field,
            valid=False,
            threat=family.threat,
            family=ThreatFamily(family.name),
        )
