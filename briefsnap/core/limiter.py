"""Rate limiting: SlowAPI per-IP limits plus an in-memory per-user window.

The SlowAPI limiter is shared so main (app.state.limiter) and route modules
use the same instance. The per-user window guards comment moderation; it is
per-process and resets on restart.
"""

import math
import time
from collections import defaultdict
from collections.abc import Callable
from threading import Lock

from slowapi import Limiter
from slowapi.util import get_remote_address

from briefsnap.domain.exceptions import RateLimitExceededException

limiter = Limiter(key_func=get_remote_address)

# Single source of truth for rate limit strings and decorators.
WRITE_ENDPOINT_LIMIT = "60/minute"
WEBHOOK_LIMIT = "30/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_webhook = limiter.limit(WEBHOOK_LIMIT)


class SlidingWindowLimiter:
    """Allow at most `limit` calls per key within the last `window_seconds`."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: defaultdict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    def check(self, key: str) -> None:
        """Record one call for key; raise RateLimitExceededException if over the limit.

        A rejected call is not recorded. Keys whose window has emptied are
        dropped, so the table holds only recently active keys.
        """
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            self._prune(cutoff)
            recent = self._hits[key]
            if len(recent) >= self.limit:
                wait = recent[0] + self.window_seconds - now
                raise RateLimitExceededException(retry_after=max(1, math.ceil(wait)))
            recent.append(now)

    def _prune(self, cutoff: float) -> None:
        for key in list(self._hits):
            recent = [t for t in self._hits[key] if t > cutoff]
            if recent:
                self._hits[key] = recent
            else:
                del self._hits[key]

    @property
    def tracked_keys(self) -> int:
        """Number of keys with calls inside the current window, as of the last check."""
        return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
