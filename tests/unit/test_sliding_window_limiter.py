"""SlidingWindowLimiter: per-key window, rejected calls not recorded."""

import pytest

from briefsnap.core.limiter import SlidingWindowLimiter
from briefsnap.domain.exceptions import RateLimitExceededException


class Ticker:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_window_slides() -> None:
    ticker = Ticker()
    limiter = SlidingWindowLimiter(2, 60, clock=ticker)
    limiter.check("u1")
    ticker.now = 30
    limiter.check("u1")
    with pytest.raises(RateLimitExceededException):
        limiter.check("u1")
    ticker.now = 61
    limiter.check("u1")


def test_keys_are_independent() -> None:
    limiter = SlidingWindowLimiter(1, 60, clock=Ticker())
    limiter.check("u1")
    limiter.check("u2")
    with pytest.raises(RateLimitExceededException):
        limiter.check("u1")


def test_reset_clears_windows() -> None:
    limiter = SlidingWindowLimiter(1, 60, clock=Ticker())
    limiter.check("u1")
    limiter.reset()
    limiter.check("u1")


def test_rejection_reports_seconds_until_oldest_call_leaves_window() -> None:
    ticker = Ticker()
    limiter = SlidingWindowLimiter(2, 60, clock=ticker)
    limiter.check("u1")
    ticker.now = 20
    limiter.check("u1")
    ticker.now = 45.5
    with pytest.raises(RateLimitExceededException) as exc_info:
        limiter.check("u1")
    assert exc_info.value.retry_after == 15
    assert exc_info.value.details == {"retry_after": 15}


def test_idle_keys_are_dropped_once_their_window_passes() -> None:
    ticker = Ticker()
    limiter = SlidingWindowLimiter(5, 60, clock=ticker)
    for n in range(100):
        limiter.check(f"user-{n}")
    assert limiter.tracked_keys == 100
    ticker.now = 61
    limiter.check("user-0")
    assert limiter.tracked_keys == 1


def test_rejected_key_stays_tracked() -> None:
    ticker = Ticker()
    limiter = SlidingWindowLimiter(1, 60, clock=ticker)
    limiter.check("u1")
    ticker.now = 10
    with pytest.raises(RateLimitExceededException):
        limiter.check("u1")
    assert limiter.tracked_keys == 1
