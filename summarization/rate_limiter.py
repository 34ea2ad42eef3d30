"""Per-window request limiter for the summarization API."""

import threading
import time
from typing import Callable

WINDOW_SECONDS = 60.0


class SlidingWindowRateLimiter:
    """Allows at most ``max_requests`` acquisitions per window.

    The count resets once ``window_seconds`` have elapsed since the window
    began. A saturated limiter never blocks; ``try_acquire`` simply returns
    False so callers can take their fallback path.
    """

    def __init__(
        self,
        max_requests: int = 25,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max(0, max_requests)
        self._window_seconds = window_seconds
        self._clock = clock
        self._window_start = clock()
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def try_acquire(self) -> bool:
        """Reserve one request slot in the current window.

        Returns:
            True if the request may proceed, False if the window is full.
        """
        with self._lock:
            now = self._clock()
            if now - self._window_start >= self._window_seconds:
                self._count = 0
                self._window_start = now
            if self._count >= self._max_requests:
                return False
            self._count += 1
            return True
