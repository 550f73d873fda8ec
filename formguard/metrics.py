"""String metrics shared by the name, email and message validators.

All helpers are pure and case-insensitive. Edit distance and the Jaro score are
delegated to ``rapidfuzz``; the character-class counters are plain regexes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from rapidfuzz.distance import Jaro, Levenshtein

VOWELS = "aeiou"
CONSONANTS = "bcdfghjklmnpqrstvwxyz"

_VOWEL_RE = re.compile(f"[{VOWELS}]", re.IGNORECASE)
_CONSONANT_RE = re.compile(f"[{CONSONANTS}]", re.IGNORECASE)
_VOWEL_RUN_RE = re.compile(f"[{VOWELS}]+", re.IGNORECASE)
_CONSONANT_RUN_RE = re.compile(f"[{CONSONANTS}]+", re.IGNORECASE)

JARO_WINKLER_PREFIX_WEIGHT = 0.1
JARO_WINKLER_MAX_PREFIX = 4


def count_vowels(s: str) -> int:
    return len(_VOWEL_RE.findall(s))


def count_consonants(s: str) -> int:
    return len(_CONSONANT_RE.findall(s))


def vowel_ratio(s: str) -> float:
    """Vowels over vowels + consonants; 0.0 when *s* has no latin letters.

    ``y`` counts as a consonant. Digits, spaces and punctuation are ignored.
    """
    vowels = count_vowels(s)
    total = vowels + count_consonants(s)
    if total == 0:
        return 0.0
    return vowels / total


def _longest(pattern: re.Pattern[str], s: str) -> int:
    return max((len(m) for m in pattern.findall(s)), default=0)


def max_consonant_run(s: str) -> int:
    return _longest(_CONSONANT_RUN_RE, s)


def max_vowel_run(s: str) -> int:
    return _longest(_VOWEL_RUN_RE, s)


def has_repeated_run(s: str, n: int = 3) -> bool:
    """True if any single character repeats *n* or more times in a row."""
    if n < 2:
        return bool(s)
    run = 1
    for prev, cur in zip(s, s[1:]):
        run = run + 1 if cur == prev else 1
        if run >= n:
            return True
    return False


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1], prefix weight 0.1 over up to 4 chars.

    Comparison is case-insensitive. Two empty strings are identical (1.0);
    one empty string against a non-empty one scores 0.0. The prefix bonus is
    added whatever the Jaro score, so a shared prefix can lift a weak Jaro
    match over the name-suggestion cutoff.
    """
    a, b = a.lower(), b.lower()
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    jaro = Jaro.similarity(a, b)
    prefix = 0
    for x, y in zip(a[:JARO_WINKLER_MAX_PREFIX], b[:JARO_WINKLER_MAX_PREFIX]):
        if x != y:
            break
        prefix += 1
    return jaro + prefix * JARO_WINKLER_PREFIX_WEIGHT * (1.0 - jaro)


def similarity(a: str, b: str) -> float:
    """``1 - levenshtein / max(len)``, case-insensitive; 1.0 for two empty strings."""
    a, b = a.lower(), b.lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def has_common_affix(
    s: str,
    prefixes: Iterable[str],
    suffixes: Iterable[str],
) -> bool:
    """True if lowercased *s* starts with any prefix or ends with any suffix."""
    lower = s.lower()
    if any(p and lower.startswith(p) for p in prefixes):
        return True
    return any(x and lower.endswith(x) for x in suffixes)
