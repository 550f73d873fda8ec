"""Tests for the Message Analyzer."""

import pytest

from formguard.validators.message import (
    ISSUE_FEW_WORDS,
    ISSUE_GIBBERISH,
    ISSUE_NO_CONTENT,
    ISSUE_NO_SENTENCE,
    ISSUE_REPETITIVE,
    ISSUE_SPAM,
    ISSUE_TOO_SHORT,
    MessageAnalyzer,
    has_real_content,
    is_gibberish,
    is_repetitive,
    is_spam,
    quality_score,
)

GOOD_MESSAGE = (
    "Hello, I am interested in the design services. "
    "Could you send me a price list? Thanks for the help."
)


@pytest.fixture
def analyzer():
    return MessageAnalyzer()


class TestMessageAnalyzer:
    def test_real_message_passes(self, analyzer):
        result = analyzer.validate(GOOD_MESSAGE)
        assert result.valid is True
        assert result.issues == []
        assert result.quality == 80
        assert result.feedback.acceptable is True
        assert result.feedback.message == "Good message quality"
        assert result.reading_ease is not None

    def test_spam_repetition(self, analyzer):
        result = analyzer.validate("buy now buy now buy now")
        assert result.valid is False
        assert ISSUE_SPAM in result.issues
        assert ISSUE_REPETITIVE in result.issues
        assert ISSUE_NO_CONTENT in result.issues

    def test_short_message(self, analyzer):
        result = analyzer.validate("hi")
        assert result.valid is False
        assert ISSUE_TOO_SHORT in result.issues
        assert ISSUE_FEW_WORDS in result.issues
        assert ISSUE_NO_CONTENT in result.issues
        assert ISSUE_NO_SENTENCE not in result.issues

    def test_empty_message(self, analyzer):
        result = analyzer.validate("")
        assert result.valid is False
        assert ISSUE_NO_SENTENCE in result.issues
        assert result.quality == 20
        assert result.feedback.acceptable is False
        assert result.reading_ease is None

    def test_gibberish(self, analyzer):
        result = analyzer.validate("Hello there. Xkcdfghjklm is my request today, thanks.")
        assert result.valid is False
        assert ISSUE_GIBBERISH in result.issues

    def test_quality_is_bounded(self, analyzer):
        for text in ["", "buy now buy now buy now", GOOD_MESSAGE * 5, "AAAA!!!! BBBB!!!!"]:
            assert 0 <= analyzer.validate(text).quality <= 100

    def test_suggestions(self, analyzer):
        result = analyzer.validate("can u help me plz thanks")
        assert "Use proper spelling instead of text speak" in result.suggestions
        assert "End your message with proper punctuation" in result.suggestions

    def test_caps_suggestion(self, analyzer):
        result = analyzer.validate("HELLO THERE FRIEND. HOW ARE YOU TODAY.")
        assert "Use proper capitalization (avoid excessive caps)" in result.suggestions


class TestSpam:
    def test_keyword(self):
        assert is_spam("Cheap VIAGRA here") is True

    def test_keyword_is_substring_match(self):
        assert is_spam("Please visit our office next week.") is True

    def test_multiple_links(self):
        assert is_spam("See http://a.example and www.b.example for details.") is True

    def test_single_link_allowed(self):
        assert is_spam("Our portfolio is at https://example.com for reference.") is False

    def test_many_at_signs(self):
        assert is_spam("Mail a@x.com, b@x.com or c@x.com.") is True


class TestGibberish:
    def test_repeated_letters(self):
        assert is_gibberish("Helloooo there") is True

    def test_consonant_string(self):
        assert is_gibberish("zxcvbnm") is True

    def test_vowel_ratio(self):
        assert is_gibberish("aaa eee iii ooo") is True

    def test_normal_text(self):
        assert is_gibberish(GOOD_MESSAGE) is False

    def test_no_letters(self):
        assert is_gibberish("12345 67890") is False


class TestRepetitive:
    def test_repeated_word(self):
        assert is_repetitive("spam spam spam eggs") is True

    def test_short_words_ignored(self):
        assert is_repetitive("a a a a b c d e f g") is False

    def test_repeated_phrase(self):
        assert is_repetitive("I need help now. I need help now. I need help now.") is True

    def test_varied_text(self):
        assert is_repetitive(GOOD_MESSAGE) is False


class TestRealContent:
    def test_good(self):
        assert has_real_content(GOOD_MESSAGE) is True

    def test_no_capital(self):
        assert has_real_content("hello there, i would like to ask about pricing.") is False

    def test_no_punctuation(self):
        assert has_real_content("Hello there I would like to ask about pricing") is False

    def test_single_letters(self):
        assert has_real_content("A b c d e f g h i j k.") is False


class TestQuality:
    def test_text_speak_penalty(self):
        plain = "Hello, can you help me with my order? It has not arrived yet. Thanks."
        speak = "Hello, can you plz help me with my order? It has not arrived yet. Thanks."
        assert quality_score(speak) < quality_score(plain)

    def test_spam_penalty(self):
        assert quality_score("Hello, please click here now. It is great. Thanks.") < quality_score(
            "Hello, please call me now. It is great. Thanks."
        )
