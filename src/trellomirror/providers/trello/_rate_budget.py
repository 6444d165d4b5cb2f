"""Client-side sliding-window request budget."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

_LOG = logging.getLogger(__name__)


class RateBudget:
    """Allows at most *limit* requests in any *window* seconds.

    ``acquire()`` consumes one slot. When the budget is spent it sleeps until the oldest
    request leaves the window, ``(oldest + window) - now``, then checks again.
    """

    def __init__(
        self,
        *,
        limit: int = 100,
        window: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self._limit = limit
        self._window = window
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def in_window(self) -> int:
        self._evict(self._clock())
        return len(self._timestamps)

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = self._clock()
                self._evict(now)
                if len(self._timestamps) < self._limit:
                    self._timestamps.append(now)
                    return
                wait = (self._timestamps[0] + self._window) - now
                _LOG.debug("Request budget exhausted, waiting %.3fs", wait)
                await self._sleep(max(0.0, wait))

    def _evict(self, now: float) -> None:
        while self._timestamps and self._timestamps[0] + self._window <= now:
            self._timestamps.popleft()
