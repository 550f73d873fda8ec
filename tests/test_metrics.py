"""Tests for the string metrics."""

import pytest

from formguard.metrics import (
    has_common_affix,
    has_repeated_run,
    jaro_winkler,
    levenshtein,
    max_consonant_run,
    max_vowel_run,
    similarity,
    vowel_ratio,
)


class TestVowelRatio:
    def test_simple_name(self):
        assert vowel_ratio("john") == pytest.approx(0.25)

    def test_no_vowels(self):
        assert vowel_ratio("brr") == 0.0

    def test_y_is_a_consonant(self):
        assert vowel_ratio("xyz") == 0.0

    def test_empty_and_non_letters(self):
        assert vowel_ratio("") == 0.0
        assert vowel_ratio("123 !?") == 0.0

    def test_ignores_other_characters(self):
        assert vowel_ratio("a1!b") == pytest.approx(0.5)

    def test_case_insensitive(self):
        assert vowel_ratio("AEIOU") == 1.0
        assert vowel_ratio("JoHn") == vowel_ratio("john")


class TestRuns:
    def test_consonant_run(self):
        assert max_consonant_run("strength") == 4
        assert max_consonant_run("aeiou") == 0
        assert max_consonant_run("") == 0

    def test_vowel_run(self):
        assert max_vowel_run("queueing") == 5
        assert max_vowel_run("rhythm") == 0

    def test_repeated_run(self):
        assert has_repeated_run("aaa") is True
        assert has_repeated_run("baaab") is True
        assert has_repeated_run("aab") is False
        assert has_repeated_run("") is False

    def test_repeated_run_threshold(self):
        assert has_repeated_run("aaa", 4) is False
        assert has_repeated_run("aaaa", 4) is True


class TestLevenshtein:
    def test_textbook_example(self):
        assert levenshtein("kitten", "sitting") == 3

    def test_identity_and_empty(self):
        assert levenshtein("gmail", "gmail") == 0
        assert levenshtein("", "abc") == 3
        assert levenshtein("abc", "") == 3

    def test_symmetric(self):
        assert levenshtein("gmdail", "gmail") == levenshtein("gmail", "gmdail") == 1


class TestJaroWinkler:
    def test_classic_pair(self):
        assert jaro_winkler("martha", "marhta") == pytest.approx(0.961, abs=1e-3)

    def test_prefix_bonus_applies_below_point_seven(self):
        # Jaro is 2/3 here; the shared "abcd" prefix still adds 4 * 0.1 * (1/3).
        assert jaro_winkler("abcdwxyz", "abcdpqrs") == pytest.approx(0.8)

    def test_prefix_capped_at_four(self):
        assert jaro_winkler("abcdefgh", "abcdefxy") == pytest.approx(
            0.8333 + 4 * 0.1 * (1 - 0.8333), abs=1e-3
        )

    def test_identical(self):
        assert jaro_winkler("john", "john") == 1.0

    def test_case_insensitive(self):
        assert jaro_winkler("MARTHA", "martha") == 1.0

    def test_empty_strings(self):
        assert jaro_winkler("", "") == 1.0
        assert jaro_winkler("abc", "") == 0.0
        assert jaro_winkler("", "abc") == 0.0

    def test_range(self):
        for a, b in [("dwayne", "duane"), ("abc", "xyz"), ("jon", "jonathan")]:
            assert 0.0 <= jaro_winkler(a, b) <= 1.0


class TestSimilarity:
    def test_identical(self):
        assert similarity("gmail", "gmail") == 1.0

    def test_one_edit(self):
        assert similarity("abc", "abd") == pytest.approx(2 / 3)

    def test_empty(self):
        assert similarity("", "") == 1.0


class TestCommonAffix:
    def test_prefix(self):
        assert has_common_affix("Johnny", {"joh"}, ()) is True

    def test_suffix(self):
        assert has_common_affix("Anderson", set(), ("son",)) is True

    def test_neither(self):
        assert has_common_affix("xq", {"joh"}, ("son",)) is False
