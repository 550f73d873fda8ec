"""Tests for the guarded regex helpers."""

import re
import threading

from formguard.regex_guard import count_matches, safe_finditer, safe_search


class TestRegexGuard:
    def test_finditer_returns_list(self):
        matches = safe_finditer(re.compile(r"\d+"), "a1 b22 c333")
        assert [m.group() for m in matches] == ["1", "22", "333"]

    def test_search(self):
        assert safe_search(re.compile(r"b+"), "abbbc").group() == "bbb"
        assert safe_search(re.compile(r"z"), "abc") is None

    def test_count(self):
        assert count_matches(re.compile(r";"), "a; b; c") == 2
        assert count_matches(re.compile(r";"), "") == 0

    def test_runs_off_main_thread(self):
        results = []
        worker = threading.Thread(
            target=lambda: results.append(count_matches(re.compile(r"x"), "xxx")),
        )
        worker.start()
        worker.join()
        assert results == [3]
