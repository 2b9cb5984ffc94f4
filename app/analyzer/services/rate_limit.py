"""
Per-client sliding-window rate limiting.

Tracks request timestamps per key (client IP address) and rejects requests
once the configured count is reached inside the rolling window.
"""

import logging
import threading
import time
from collections import defaultdict
from typing import Callable

from ..config import get_settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Trop de requêtes. Attendez 60 secondes."


class RateLimitExceededError(Exception):
    """Raised when a client exceeds its request allowance."""

    def __init__(self, key: str, retry_after: int, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)
        self.key = key
        self.retry_after = retry_after


class SlidingWindowRateLimiter:
    """
    In-memory sliding-window rate limiter.

    A key may be accepted at most ``max_requests`` times in any
    ``window_seconds`` period. Rejected calls are not recorded.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._lock = threading.Lock()
        self._requests: dict[str, list[float]] = defaultdict(list)
        self.max_requests = max_requests
        self.window = window_seconds
        self.enabled = max_requests > 0
        self._clock = clock
        self._next_cleanup = clock() + window_seconds

    def is_allowed(self, key: str) -> bool:
        if not self.enabled:
            return True

        now = self._clock()
        cutoff = now - self.window

        with self._lock:
            # Prune old entries
            self._requests[key] = [t for t in self._requests[key] if t > cutoff]
            if len(self._requests[key]) >= self.max_requests:
                return False
            self._requests[key].append(now)
            return True

    def check(self, key: str) -> None:
        """
        Record a request for ``key`` or raise if the allowance is used up.

        Idle keys are swept at most once per window.

        Raises:
            RateLimitExceededError: If the key is over its limit.
        """
        if self._clock() >= self._next_cleanup:
            self.cleanup()

        if not self.is_allowed(key):
            logger.warning("Rate limit reached for IP: %s", key)
            raise RateLimitExceededError(key, self.retry_after)

    @property
    def retry_after(self) -> int:
        """Seconds a rejected client is told to wait."""
        return self.window

    def cleanup(self) -> None:
        """Remove keys with no request inside the current window."""
        now = self._clock()
        cutoff = now - self.window
        with self._lock:
            stale_keys = [
                k for k, timestamps in self._requests.items()
                if not timestamps or timestamps[-1] <= cutoff
            ]
            for k in stale_keys:
                del self._requests[k]
            self._next_cleanup = now + self.window
        if stale_keys:
            logger.debug("Dropped %d idle rate-limit keys", len(stale_keys))


_rate_limiter: SlidingWindowRateLimiter | None = None


def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Get or create the rate limiter singleton."""
    global _rate_limiter
    if _rate_limiter is None:
        settings = get_settings()
        _rate_limiter = SlidingWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    return _rate_limiter
