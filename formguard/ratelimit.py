"""Sliding-window submission rate limiting.

A window holds the timestamps of accepted attempts per key. Each check prunes
entries older than the window, rejects if the window is full and otherwise
records the attempt. Rejected attempts are never recorded, so a client that
keeps hammering does not extend its own lockout.

Storage is injected. ``InMemoryRateLimitStore`` is per process and not
durable; a multi-instance deployment needs a shared store.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from typing import NamedTuple

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("formguard.audit")

DEFAULT_MAX_SUBMISSIONS = 5
DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_KEY = "local"


class RateLimitDecision(NamedTuple):
    allowed: bool
    remaining: int
    retry_after: float


class RateLimitStore(ABC):
    """Holds per-key timestamp windows."""

    @abstractmethod
    def hit(self, key: str, now: float, window: float, limit: int) -> RateLimitDecision:
        """Prune, check and (if allowed) record one attempt, atomically."""

    @abstractmethod
    def count(self, key: str, now: float, window: float) -> int:
        """Number of recorded attempts for *key* still inside the window."""

    @abstractmethod
    def reset(self, key: str | None = None) -> None:
        """Forget *key*, or every key when None."""


class InMemoryRateLimitStore(RateLimitStore):
    def __init__(self) -> None:
        self._windows: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()

    @staticmethod
    def _prune(timestamps: list[float], now: float, window: float) -> list[float]:
        return [t for t in timestamps if now - t < window]

    def hit(self, key: str, now: float, window: float, limit: int) -> RateLimitDecision:
        with self._lock:
            recent = self._prune(self._windows[key], now, window)
            if len(recent) >= limit:
                self._windows[key] = recent
                retry_after = max(window - (now - recent[0]), 0.0)
                return RateLimitDecision(False, 0, retry_after)
            recent.append(now)
            self._windows[key] = recent
            return RateLimitDecision(True, limit - len(recent), 0.0)

    def count(self, key: str, now: float, window: float) -> int:
        with self._lock:
            recent = self._prune(self._windows.get(key, []), now, window)
            if key in self._windows:
                self._windows[key] = recent
            return len(recent)

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


class RateLimiter:
    """At most *max_submissions* accepted attempts per key per *window_seconds*."""

    def __init__(
        self,
        max_submissions: int = DEFAULT_MAX_SUBMISSIONS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        store: RateLimitStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_submissions < 1:
            raise ValueError("max_submissions must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_submissions = max_submissions
        self.window_seconds = window_seconds
        self.store = store or InMemoryRateLimitStore()
        self._clock = clock

    def acquire(self, key: str = DEFAULT_KEY) -> RateLimitDecision:
        decision = self.store.hit(key, self._clock(), self.window_seconds, self.max_submissions)
        if not decision.allowed:
            audit_logger.warning(
                "RATE_LIMITED key=%s limit=%d window=%.0fs retry_after=%.1fs",
                key,
                self.max_submissions,
                self.window_seconds,
                decision.retry_after,
            )
        return decision

    def check(self, key: str = DEFAULT_KEY) -> bool:
        """True if the attempt is allowed (and has been recorded)."""
        return self.acquire(key).allowed

    def remaining(self, key: str = DEFAULT_KEY) -> int:
        used = self.store.count(key, self._clock(), self.window_seconds)
        return max(self.max_submissions - used, 0)

    def reset(self, key: str | None = None) -> None:
        self.store.reset(key)
