"""
Per-caller request rate limiter.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable

from app.domain.errors import RateLimited


class SlidingWindowRateLimiter:
    """
    Allows at most ``max_calls`` per caller within any ``window_seconds`` span.
    """

    def __init__(
        self,
        *,
        max_calls: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_calls = max(1, max_calls)
        self._window_seconds = max(0.001, window_seconds)
        self._clock = clock
        self._calls_by_key: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> None:
        """
        Record one call for ``key``.

        Raises:
            RateLimited: the caller already used its budget for the window.
        """

        with self._lock:
            now = self._clock()
            calls = self._calls_by_key.setdefault(key, deque())
            window_start = now - self._window_seconds
            while calls and calls[0] <= window_start:
                calls.popleft()

            if len(calls) >= self._max_calls:
                retry_after = calls[0] + self._window_seconds - now
                raise RateLimited(
                    "Too many requests. Try again later.",
                    retry_after_seconds=max(1, math.ceil(retry_after)),
                )
            calls.append(now)

    def reset(self) -> None:
        with self._lock:
            self._calls_by_key.clear()


class RequestBudgets:
    """
    The two limiters applied to inspection endpoints.
    """

    def __init__(
        self,
        *,
        default_calls: int,
        bulk_calls: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default = SlidingWindowRateLimiter(
            max_calls=default_calls,
            window_seconds=window_seconds,
            clock=clock,
        )
        self.bulk = SlidingWindowRateLimiter(
            max_calls=bulk_calls,
            window_seconds=window_seconds,
            clock=clock,
        )
