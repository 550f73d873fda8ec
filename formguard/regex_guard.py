"""Regex execution guard: limits match time to prevent ReDoS on form input."""

from __future__ import annotations

import logging
import re
import signal
import threading
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

_REGEX_TIMEOUT_SECONDS = 2

T = TypeVar("T")


def _is_main_thread() -> bool:
    return threading.current_thread() is threading.main_thread()


def _guarded(
    run: Callable[[], T],
    pattern: re.Pattern[str],
    text: str,
    timeout: int,
    on_timeout: T,
) -> T:
    if not _is_main_thread():
        return run()

    try:
        old_handler = signal.getsignal(signal.SIGALRM)

        def _alarm_handler(signum: int, frame: object) -> None:
            raise TimeoutError

        signal.signal(signal.SIGALRM, _alarm_handler)
        signal.alarm(timeout)
        try:
            result = run()
        finally:
            signal.alarm(0)
            signal.signal(signal.SIGALRM, old_handler)
        return result
    except TimeoutError:
        logger.warning(
            "Regex timed out after %ds on pattern %s (text length %d)",
            timeout,
            pattern.pattern[:80],
            len(text),
        )
        return on_timeout
    except (AttributeError, OSError, ValueError):
        # No SIGALRM on this platform, or signals unavailable here.
        return run()


def safe_finditer(
    pattern: re.Pattern[str],
    text: str,
    *,
    timeout: int = _REGEX_TIMEOUT_SECONDS,
) -> list[re.Match[str]]:
    """Run ``pattern.finditer(text)`` with a wall-clock timeout.

    Returns a (possibly empty) list of matches. A timed-out scan returns an
    empty list and is logged; callers treat it as "no match".

    Where ``signal.alarm`` is unavailable (non-main threads, Windows) the
    call runs unguarded.
    """
    return _guarded(lambda: list(pattern.finditer(text)), pattern, text, timeout, [])


def safe_search(
    pattern: re.Pattern[str],
    text: str,
    *,
    timeout: int = _REGEX_TIMEOUT_SECONDS,
) -> re.Match[str] | None:
    """Guarded ``pattern.search(text)``; ``None`` on timeout."""
    return _guarded(lambda: pattern.search(text), pattern, text, timeout, None)


def count_matches(
    pattern: re.Pattern[str],
    text: str,
    *,
    timeout: int = _REGEX_TIMEOUT_SECONDS,
) -> int:
    return len(safe_finditer(pattern, text, timeout=timeout))
