"""Sliding-window admission limiter for asyncio.

Notes:
- Per-event-loop only: the lock and the start-time log belong to one loop.
- Limits how many operations *start* per window, not how many are in flight.
- Waiters are released in submission order (asyncio.Lock is FIFO).
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, TypeVar

from paramtree.adapters.rate_limit.base import AbstractRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Admit at most ``requests_per_second`` operations per rolling window.

    Each admission records its start time. A new operation may start only
    when fewer than ``requests_per_second`` start times fall inside the last
    ``window_seconds``; otherwise the caller sleeps until the oldest one
    leaves the window. Callers queue on a single lock, so the admission
    schedule stays consistent when many coroutines submit work at once.
    """

    def __init__(
        self,
        requests_per_second: int,
        *,
        window_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            requests_per_second: Maximum operations started per window.
            window_seconds: Length of the rolling window.
            clock: Monotonic time source in seconds.
            sleep: Coroutine used to wait for capacity.

        Raises:
            ValueError: If requests_per_second or window_seconds are invalid.
        """
        if requests_per_second < 1:
            raise ValueError("requests_per_second must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = requests_per_second
        self._window = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._starts: deque[float] = deque()

    @property
    def requests_per_second(self) -> int:
        return self._limit

    def _prune(self, now: float) -> None:
        while self._starts and now - self._starts[0] >= self._window:
            self._starts.popleft()

    async def _acquire_slot(self) -> None:
        async with self._lock:
            while True:
                now = self._clock()
                self._prune(now)
                if len(self._starts) < self._limit:
                    self._starts.append(now)
                    return
                delay = self._starts[0] + self._window - now
                logger.debug(
                    "rate_limit.waiting",
                    extra={"delay_s": round(delay, 3), "limit": self._limit},
                )
                await self._sleep(delay)

    async def admit(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Wait for capacity, then run ``operation`` and return its result."""
        await self._acquire_slot()
        return await operation()
