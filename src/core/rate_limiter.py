"""
Sliding-window rate limiter for AI provider calls.

Tracks the timestamps of recent requests and refuses new ones once the
configured ceiling is reached inside the trailing window. Pure bookkeeping:
no I/O and no waiting.
"""

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RateLimiter:
    """
    Rolling request log gating calls to the provider.

    One instance lives for the whole process and is shared by every
    consumer of the AI service. It is never persisted.
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_ms: float = 60_000,
        clock: Callable[[], float] = _monotonic_ms,
    ):
        """
        Args:
            max_requests: Ceiling of requests inside one window
            window_ms: Length of the sliding window in milliseconds
            clock: Millisecond clock, injectable for tests
        """
        self.max_requests = max_requests
        self.window_ms = window_ms
        self._clock = clock
        self._request_times: list[float] = []
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_ms
        self._request_times = [t for t in self._request_times if t > cutoff]

    def can_make_request(self) -> bool:
        """Whether another request fits in the current window."""
        with self._lock:
            self._prune(self._clock())
            return len(self._request_times) < self.max_requests

    def record_request(self) -> None:
        """Record that a request is being sent now."""
        with self._lock:
            self._request_times.append(self._clock())

    def try_acquire(self) -> bool:
        """Check and record in one step; False leaves the log untouched."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._request_times) >= self.max_requests:
                return False
            self._request_times.append(now)
            return True

    def get_wait_time_ms(self) -> int:
        """Milliseconds until the oldest request leaves the window (0 if not blocked)."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._request_times) < self.max_requests:
                return 0
            oldest = min(self._request_times)
            return max(0, int(oldest + self.window_ms - now))

    @property
    def recent_request_count(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return len(self._request_times)
