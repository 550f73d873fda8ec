"""Name Validator: decides whether a string looks like a real human name."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from formguard import patterns
from formguard.metrics import (
    has_common_affix,
    has_repeated_run,
    jaro_winkler,
    max_consonant_run,
    max_vowel_run,
    similarity,
    vowel_ratio,
)
from formguard.models import RejectionKind, ValidationVerdict
from formguard.validators.base import BaseValidator

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MIN_SINGLE_NAME_LENGTH = 4
MAX_RUN = 4
REPEATED_RUN = 3
VOWEL_RATIO_MIN = 0.15
VOWEL_RATIO_MAX = 0.60
FALLBACK_VOWEL_RATIO = 0.25
ACCEPT_CONFIDENCE = 70

NAME_CHARACTERS_RE = re.compile(r"^[a-zA-Z\s'-]+$")

SUGGESTION_MIN_JARO_WINKLER = 0.7
SUGGESTION_CANDIDATES = 5
SUGGESTION_LIMIT = 3

REASON_TOO_SHORT = "Name too short (minimum 3 characters)"
REASON_CHARACTERS = (
    "Please enter your name in English letters (A-Z); "
    "spaces, hyphens and apostrophes are allowed"
)
REASON_NON_NAME = "This is a common word or non-name, not a real human name"
REASON_REPEATED = "Name contains repeated characters (aaa, xxx, etc.)"
REASON_CONSONANTS = 'Too many consonants in a row (like "vfsd")'
REASON_VOWELS = "Too many vowels in a row"
REASON_FEW_VOWELS = "Not enough vowels ({pct}% - names usually have 20-50%)"
REASON_MANY_VOWELS = "Too many vowels ({pct}% - names usually have 20-50%)"
REASON_SINGLE_SHORT = "Single names must be at least 4 characters"
REASON_UNLIKELY = "This doesn't appear to be a real human name"


def name_confidence(text: str) -> int:
    """Heuristic 0-100 score of how name-like *text* is."""
    lower = text.lower()
    score = 50

    if len(lower) < MIN_SINGLE_NAME_LENGTH:
        score -= 20
    elif len(lower) >= 6:
        score += 5

    ratio = vowel_ratio(lower)
    if 0.25 <= ratio <= 0.45:
        score += 15
    elif 0.15 <= ratio <= 0.50:
        score += 5
    else:
        score -= 30

    if max_consonant_run(lower) >= MAX_RUN:
        score -= 40
    if max_vowel_run(lower) >= MAX_RUN:
        score -= 40
    if has_repeated_run(lower, REPEATED_RUN):
        score -= 30

    if has_common_affix(lower, patterns.name_prefixes(), patterns.name_suffixes()):
        score += 20

    if " " in lower:
        score += 10

    return max(0, min(100, score))


def rank_similar_names(
    text: str,
    names: Iterable[str],
    limit: int = SUGGESTION_CANDIDATES,
) -> list[tuple[str, float]]:
    """Closest database names to *text*, best first, as ``(name, score)``.

    Candidates need at least 3 characters and a Jaro-Winkler similarity of
    0.7; they are ranked by ``0.4 * similarity + 0.6 * jaro_winkler`` less
    0.02 per character of length difference.
    """
    lower = text.lower()
    ranked: list[tuple[str, float]] = []
    for candidate in names:
        if len(candidate) < MIN_NAME_LENGTH or candidate == lower:
            continue
        jw = jaro_winkler(lower, candidate)
        if jw < SUGGESTION_MIN_JARO_WINKLER:
            continue
        score = 0.4 * similarity(lower, candidate) + 0.6 * jw
        score -= 0.02 * abs(len(lower) - len(candidate))
        ranked.append((candidate, score))
    ranked.sort(key=lambda pair: (-pair[1], pair[0]))
    return ranked[:limit]


class NameValidator(BaseValidator):
    """Reject strings that are too short, blacklisted, or phonetically implausible.

    A names collection may be injected (``names_database``) or enabled via
    the ``names_database_enabled`` config key, which loads the bundled list.
    With a database, known names are accepted outright and rejected inputs
    get "did you mean" suggestions.
    """

    name = "name"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        names_database: Iterable[str] | None = None,
    ) -> None:
        super().__init__(config)
        if names_database is None and self.config.get("names_database_enabled", False):
            names_database = patterns.known_names()
        self._database: frozenset[str] | None = (
            frozenset(n.lower() for n in names_database) if names_database is not None else None
        )

    def validate(
        self,
        text: str,
        known_names: Iterable[str] | None = None,
    ) -> ValidationVerdict:
        value = text.strip()
        lower = value.lower()

        if len(value) < MIN_NAME_LENGTH:
            return self._reject(REASON_TOO_SHORT, 0, RejectionKind.FORMAT)
        if not NAME_CHARACTERS_RE.match(value):
            return self._reject(REASON_CHARACTERS, 0, RejectionKind.FORMAT)

        database = self._database
        if known_names is not None:
            database = frozenset(n.lower() for n in known_names)

        confidence = name_confidence(value)

        if lower in patterns.non_name_blacklist():
            return self._reject(REASON_NON_NAME, confidence, suggest_from=database, text=lower)

        if database is not None and self._in_database(lower, database):
            return ValidationVerdict(field=self.name, valid=True, confidence=100)

        reason = self._structural_issue(lower)
        if reason is None and has_common_affix(
            lower, patterns.name_prefixes(), patterns.name_suffixes()
        ):
            return ValidationVerdict(field=self.name, valid=True, confidence=confidence)
        if reason is None and len(lower) >= MIN_SINGLE_NAME_LENGTH and (
            vowel_ratio(lower) >= FALLBACK_VOWEL_RATIO
        ):
            return ValidationVerdict(field=self.name, valid=True, confidence=confidence)
        if reason is None and confidence >= ACCEPT_CONFIDENCE:
            return ValidationVerdict(field=self.name, valid=True, confidence=confidence)

        return self._reject(
            reason or REASON_UNLIKELY,
            confidence,
            suggest_from=database,
            text=lower,
        )

    @staticmethod
    def _in_database(lower: str, database: frozenset[str]) -> bool:
        if lower in database:
            return True
        parts = lower.split()
        return len(parts) > 1 and all(part in database for part in parts)

    @staticmethod
    def _structural_issue(lower: str) -> str | None:
        if has_repeated_run(lower, REPEATED_RUN):
            return REASON_REPEATED
        if max_consonant_run(lower) >= MAX_RUN:
            return REASON_CONSONANTS
        if max_vowel_run(lower) >= MAX_RUN:
            return REASON_VOWELS
        ratio = vowel_ratio(lower)
        if ratio < VOWEL_RATIO_MIN:
            return REASON_FEW_VOWELS.format(pct=round(ratio * 100))
        if ratio > VOWEL_RATIO_MAX:
            return REASON_MANY_VOWELS.format(pct=round(ratio * 100))
        if " " not in lower and len(lower) < MIN_SINGLE_NAME_LENGTH:
            return REASON_SINGLE_SHORT
        return None

    def _reject(
        self,
        reason: str,
        confidence: int,
        kind: RejectionKind = RejectionKind.PLAUSIBILITY,
        suggest_from: frozenset[str] | None = None,
        text: str = "",
    ) -> ValidationVerdict:
        suggestions: list[str] = []
        if suggest_from:
            ranked = rank_similar_names(text, suggest_from)
            suggestions = [candidate for candidate, _ in ranked[:SUGGESTION_LIMIT]]
        logger.debug("Name rejected: %s (confidence %d)", reason, confidence)
        return ValidationVerdict(
            field=self.name,
            valid=False,
            confidence=confidence,
            reason=reason,
            suggestions=suggestions,
            kind=kind,
        )
