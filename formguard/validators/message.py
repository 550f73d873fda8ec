"""Message Analyzer: spam, gibberish, repetition and real-content checks.

``validate`` collects every issue found; the message is valid only when there
are none. The quality score, feedback band and reading ease are advisory.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any

import textstat

from formguard import patterns
from formguard.metrics import count_consonants, count_vowels
from formguard.models import MessageReport, QualityFeedback
from formguard.validators.base import BaseValidator

logger = logging.getLogger(__name__)

MIN_MESSAGE_LENGTH = 20
MIN_WORDS = 5
MAX_LINKS = 1
MAX_AT_SIGNS = 2
GIBBERISH_MIN_VOWEL_RATIO = 0.2
GIBBERISH_MAX_VOWEL_RATIO = 0.8
REPEATED_WORD_SHARE = 0.3
REPEATED_PHRASE_MIN_LENGTH = 10

_LINK_RE = re.compile(r"https?://|www\.", re.IGNORECASE)
_REPEATED_LETTER_RE = re.compile(r"([a-z])\1{3,}", re.IGNORECASE)
_CONSONANT_STRING_RE = re.compile(r"[bcdfghjklmnpqrstvwxyz]{7,}", re.IGNORECASE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_SENTENCE_END_RE = re.compile(r"[.!?]$")
_UPPERCASE_RE = re.compile(r"[A-Z]")
_WHITESPACE_RE = re.compile(r"\s")

ISSUE_TOO_SHORT = "Message is too short (minimum 20 characters)"
ISSUE_FEW_WORDS = "Message must contain at least 5 words"
ISSUE_SPAM = "Message appears to be spam"
ISSUE_GIBBERISH = "Message contains nonsensical content"
ISSUE_REPETITIVE = "Message has excessive repetition"
ISSUE_NO_CONTENT = "Message lacks meaningful content"
ISSUE_NO_SENTENCE = "Message must contain at least one complete sentence"


def _words(text: str) -> list[str]:
    return text.split()


def _sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def is_spam(text: str) -> bool:
    lower = text.lower()
    if any(keyword in lower for keyword in patterns.spam_keywords()):
        return True
    if len(_LINK_RE.findall(text)) > MAX_LINKS:
        return True
    return text.count("@") > MAX_AT_SIGNS


def is_gibberish(text: str) -> bool:
    if _REPEATED_LETTER_RE.search(text) or _CONSONANT_STRING_RE.search(text):
        return True
    vowels = count_vowels(text)
    total = vowels + count_consonants(text)
    if total == 0:
        return False
    ratio = vowels / total
    return ratio < GIBBERISH_MIN_VOWEL_RATIO or ratio > GIBBERISH_MAX_VOWEL_RATIO


def is_repetitive(text: str) -> bool:
    words = _words(text.lower())
    if words:
        counts = Counter(w for w in words if len(w) > 2)
        if any(n / len(words) > REPEATED_WORD_SHARE for n in counts.values()):
            return True

    segments = _SENTENCE_SPLIT_RE.split(text.lower())
    if len(segments) > 2:
        phrases = Counter(
            s.strip() for s in segments if len(s.strip()) > REPEATED_PHRASE_MIN_LENGTH
        )
        if any(n > 1 for n in phrases.values()):
            return True
    return False


def has_real_content(text: str) -> bool:
    if len(text) < MIN_MESSAGE_LENGTH:
        return False
    words = _words(text)
    if len(words) < MIN_WORDS:
        return False
    if not _SENTENCE_SPLIT_RE.search(text):
        return False
    if not _UPPERCASE_RE.search(text):
        return False
    avg_word_length = len(_WHITESPACE_RE.sub("", text)) / len(words)
    return avg_word_length >= 2


def _uses_text_speak(text: str) -> bool:
    return bool(patterns.text_speak_pattern().search(text))


def _caps_per_word(text: str, word_count: int) -> float:
    if word_count == 0:
        return 0.0
    return len(_UPPERCASE_RE.findall(text)) / word_count


def quality_score(text: str) -> int:
    """Advisory 0-100 quality score."""
    score = 50
    words = _words(text)

    if len(words) < 5:
        score -= 20
    elif len(words) < 10:
        score -= 10
    elif len(words) > 50:
        score += 10

    sentences = _sentences(text)
    if len(sentences) < 2:
        score -= 10
    elif len(sentences) >= 3:
        score += 10

    if _SENTENCE_END_RE.search(text):
        score += 5
    if "," in text:
        score += 5

    if words:
        unique_ratio = len({w.lower() for w in words}) / len(words)
        if unique_ratio > 0.6:
            score += 10
        if unique_ratio < 0.4:
            score -= 10

    if _uses_text_speak(text):
        score -= 15
    if _caps_per_word(text, len(words)) > 0.5:
        score -= 15

    if is_spam(text):
        score -= 30
    if is_gibberish(text):
        score -= 30
    if is_repetitive(text):
        score -= 25

    return max(0, min(100, score))


def quality_feedback(quality: int) -> QualityFeedback:
    if quality < 30:
        return QualityFeedback(
            acceptable=False,
            message="Message appears to be spam or gibberish",
            suggestion="Please write a genuine, thoughtful message",
        )
    if quality < 50:
        return QualityFeedback(
            acceptable=False,
            message="Message seems low quality or unclear",
            suggestion="Please provide more details about your inquiry",
        )
    if quality < 70:
        return QualityFeedback(
            acceptable=True,
            message="Message could be more detailed",
            suggestion="Consider adding more information",
        )
    return QualityFeedback(acceptable=True, message="Good message quality")


def improvement_suggestions(text: str) -> list[str]:
    suggestions: list[str] = []
    if len(text) < 50:
        suggestions.append("Add more detail to your message")
    if not _SENTENCE_END_RE.search(text):
        suggestions.append("End your message with proper punctuation")
    if len(_sentences(text)) == 1:
        suggestions.append("Consider adding multiple sentences for clarity")
    if _uses_text_speak(text):
        suggestions.append("Use proper spelling instead of text speak")
    if _caps_per_word(text, len(_words(text))) > 0.5:
        suggestions.append("Use proper capitalization (avoid excessive caps)")
    return suggestions


def reading_ease(text: str) -> float | None:
    if not _words(text):
        return None
    return round(textstat.flesch_reading_ease(text), 1)


class MessageAnalyzer(BaseValidator):
    """Judge whether a free-text message is real, meaningful communication."""

    name = "message"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)

    def validate(self, text: str) -> MessageReport:
        issues: list[str] = []

        if len(text) < MIN_MESSAGE_LENGTH:
            issues.append(ISSUE_TOO_SHORT)
        if len(_words(text)) < MIN_WORDS:
            issues.append(ISSUE_FEW_WORDS)
        if is_spam(text):
            issues.append(ISSUE_SPAM)
        if is_gibberish(text):
            issues.append(ISSUE_GIBBERISH)
        if is_repetitive(text):
            issues.append(ISSUE_REPETITIVE)
        if not has_real_content(text):
            issues.append(ISSUE_NO_CONTENT)
        if not _sentences(text):
            issues.append(ISSUE_NO_SENTENCE)

        quality = quality_score(text)
        if issues:
            logger.debug("Message rejected with %d issue(s), quality %d", len(issues), quality)

        return MessageReport(
            valid=not issues,
            issues=issues,
            quality=quality,
            feedback=quality_feedback(quality),
            suggestions=improvement_suggestions(text),
            reading_ease=reading_ease(text),
        )
