"""Static pattern and word tables, loaded once from ``formguard/data/*.yaml``.

Sets are exposed as ``frozenset`` for membership tests; rule categories as
ordered tuples of :class:`PatternRule` so callers evaluate them in file order.
Every table is lowercase and every lookup should lowercase its input first.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from importlib import resources
from typing import Any, NamedTuple

import yaml

logger = logging.getLogger(__name__)

_DATA_PACKAGE = "formguard"

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}

INJECTION_MODES = ("any", "occurrences", "groups")


class PatternRule(NamedTuple):
    label: str
    regex: re.Pattern[str]


class InjectionFamily(NamedTuple):
    """One family of injection patterns and how its matches are counted."""

    name: str
    threat: str
    mode: str
    threshold: int
    rules: tuple[PatternRule, ...]


@lru_cache(maxsize=None)
def _load(filename: str) -> dict[str, Any]:
    source = resources.files(_DATA_PACKAGE).joinpath("data").joinpath(filename)
    text = source.read_text(encoding="utf-8")
    raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Pattern file {filename} is not a mapping")
    logger.debug("Loaded pattern file %s (%d keys)", filename, len(raw))
    return raw


def _word_set(filename: str, key: str) -> frozenset[str]:
    return frozenset(str(w).strip().lower() for w in _load(filename).get(key, []))


def _compile_flags(letters: str | None) -> int:
    flags = 0
    for ch in letters or "":
        try:
            flags |= _FLAG_MAP[ch]
        except KeyError:
            raise ValueError(f"Unknown regex flag {ch!r}") from None
    return flags


def _rules(entries: list[dict[str, Any]]) -> tuple[PatternRule, ...]:
    return tuple(
        PatternRule(
            label=entry["label"],
            regex=re.compile(entry["pattern"], _compile_flags(entry.get("flags"))),
        )
        for entry in entries
    )


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def known_first_names() -> frozenset[str]:
    return _word_set("names.yaml", "first_names")


@lru_cache(maxsize=None)
def known_last_names() -> frozenset[str]:
    return _word_set("names.yaml", "last_names")


@lru_cache(maxsize=None)
def known_names() -> frozenset[str]:
    """First and last names combined; the bundled names database."""
    return known_first_names() | known_last_names()


@lru_cache(maxsize=None)
def name_prefixes() -> frozenset[str]:
    """Three-letter openings of common names ("joh", "mic", ...)."""
    seeds = _word_set("names.yaml", "prefix_seeds")
    return frozenset(seed[:3] for seed in seeds if len(seed) >= 3)


@lru_cache(maxsize=None)
def name_suffixes() -> tuple[str, ...]:
    return tuple(str(s).lower() for s in _load("names.yaml").get("suffixes", []))


@lru_cache(maxsize=None)
def non_name_blacklist() -> frozenset[str]:
    return _word_set("blacklist.yaml", "non_names")


# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def disposable_domains() -> frozenset[str]:
    return _word_set("email.yaml", "disposable_domains")


@lru_cache(maxsize=None)
def legitimate_tlds() -> frozenset[str]:
    return _word_set("email.yaml", "legitimate_tlds")


@lru_cache(maxsize=None)
def common_providers() -> tuple[str, ...]:
    return tuple(str(p).lower() for p in _load("email.yaml").get("common_providers", []))


@lru_cache(maxsize=None)
def keyboard_patterns() -> tuple[PatternRule, ...]:
    return _rules(_load("email.yaml").get("keyboard_patterns", []))


@lru_cache(maxsize=None)
def generic_username_patterns() -> tuple[PatternRule, ...]:
    return _rules(_load("email.yaml").get("generic_username_patterns", []))


# ---------------------------------------------------------------------------
# Message
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def spam_keywords() -> tuple[str, ...]:
    return tuple(str(k).lower() for k in _load("message.yaml").get("spam_keywords", []))


@lru_cache(maxsize=None)
def text_speak_pattern() -> re.Pattern[str]:
    fragments = [str(f) for f in _load("message.yaml").get("text_speak", [])]
    return re.compile("|".join(re.escape(f) for f in fragments), re.IGNORECASE)


# ---------------------------------------------------------------------------
# Injection families
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def injection_families() -> tuple[InjectionFamily, ...]:
    families = []
    for entry in _load("injection.yaml").get("families", []):
        mode = entry.get("mode", "any")
        if mode not in INJECTION_MODES:
            raise ValueError(f"Unknown injection mode {mode!r} for family {entry.get('name')!r}")
        families.append(
            InjectionFamily(
                name=entry["name"],
                threat=entry["threat"],
                mode=mode,
                threshold=int(entry.get("threshold", 0)),
                rules=_rules(entry.get("patterns", [])),
            )
        )
    return tuple(families)


def injection_family(name: str) -> InjectionFamily:
    for family in injection_families():
        if family.name == name:
            return family
    raise KeyError(name)
