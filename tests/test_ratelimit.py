"""Tests for the sliding-window rate limiter."""

import logging

import pytest

from formguard.ratelimit import InMemoryRateLimitStore, RateLimiter


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_submissions=5, window_seconds=60, clock=clock)


class TestRateLimiter:
    def test_allows_up_to_limit(self, limiter, clock):
        for t in range(5):
            clock.now = float(t)
            assert limiter.check() is True
        clock.now = 10.0
        decision = limiter.acquire()
        assert decision.allowed is False
        assert decision.remaining == 0
        assert decision.retry_after == pytest.approx(50.0)

    def test_window_slides(self, limiter, clock):
        for t in range(5):
            clock.now = float(t)
            limiter.check()

        clock.now = 59.9
        assert limiter.check() is False
        clock.now = 60.0
        assert limiter.check() is True
        clock.now = 60.5
        assert limiter.check() is False
        clock.now = 61.0
        assert limiter.check() is True

    def test_rejected_attempts_are_not_recorded(self, clock):
        limiter = RateLimiter(max_submissions=1, window_seconds=10, clock=clock)
        assert limiter.check() is True
        for t in range(1, 10):
            clock.now = float(t)
            assert limiter.check() is False
        clock.now = 10.0
        assert limiter.check() is True

    def test_remaining(self, limiter):
        assert limiter.remaining() == 5
        limiter.check()
        limiter.check()
        assert limiter.remaining() == 3

    def test_remaining_does_not_consume(self, limiter):
        for _ in range(10):
            limiter.remaining()
        assert limiter.check() is True

    def test_keys_are_independent(self, limiter):
        for _ in range(5):
            limiter.check("a")
        assert limiter.check("a") is False
        assert limiter.check("b") is True

    def test_reset_key(self, limiter):
        for _ in range(5):
            limiter.check("a")
        limiter.check("b")
        limiter.reset("a")
        assert limiter.remaining("a") == 5
        assert limiter.remaining("b") == 4

    def test_reset_all(self, limiter):
        limiter.check("a")
        limiter.check("b")
        limiter.reset()
        assert limiter.remaining("a") == 5
        assert limiter.remaining("b") == 5

    def test_rejection_is_audited(self, clock, caplog):
        limiter = RateLimiter(max_submissions=1, window_seconds=60, clock=clock)
        limiter.check("10.1.2.3")
        with caplog.at_level(logging.WARNING, logger="formguard.audit"):
            limiter.check("10.1.2.3")
        assert "RATE_LIMITED" in caplog.text
        assert "key=10.1.2.3" in caplog.text

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_submissions": 0}, {"window_seconds": 0}, {"window_seconds": -1}],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            RateLimiter(**kwargs)

    def test_shared_store(self, clock):
        store = InMemoryRateLimitStore()
        first = RateLimiter(max_submissions=2, store=store, clock=clock)
        second = RateLimiter(max_submissions=2, store=store, clock=clock)
        assert first.check() is True
        assert second.check() is True
        assert first.check() is False


class TestInMemoryStore:
    def test_hit_and_count(self):
        store = InMemoryRateLimitStore()
        assert store.hit("k", now=0.0, window=10.0, limit=2).remaining == 1
        assert store.count("k", now=5.0, window=10.0) == 1
        assert store.count("k", now=10.0, window=10.0) == 0

    def test_count_unknown_key(self):
        assert InMemoryRateLimitStore().count("missing", now=0.0, window=10.0) == 0
