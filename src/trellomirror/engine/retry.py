"""Backoff-and-retry wrapper for rate-limited remote calls."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from trellomirror.contracts.config import RetryConfig
from trellomirror.contracts.exceptions import RateLimitedError, RetryExhaustedError

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

_JITTER_SECONDS = 0.5


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    name: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``operation()``, retrying only while it is rate limited.

    Between attempts sleeps ``base_delay * 2**attempt`` plus up to 500 ms of jitter.
    Jitter never exceeds half the backoff, so each sleep is strictly longer than the
    one before for any positive ``base_delay``.
    Any error other than :class:`RateLimitedError` propagates on the first occurrence.

    Raises:
        RetryExhaustedError: The operation was rate limited on every attempt.
    """
    last_error: RateLimitedError | None = None
    for attempt in range(max_attempts):
        try:
            return await operation()
        except RateLimitedError as exc:
            last_error = exc
            if attempt + 1 >= max_attempts:
                break
            backoff = base_delay * (2**attempt)
            delay = backoff + random.uniform(0.0, min(_JITTER_SECONDS, backoff / 2))
            _LOG.warning(
                "Rate limited, retrying %s in %.2fs",
                name,
                delay,
                extra={"operation": name, "attempt": attempt + 1},
            )
            await sleep(delay)

    raise RetryExhaustedError(
        f"{name} still rate limited after {max_attempts} attempt(s)",
        attempts=max_attempts,
    ) from last_error


class RetryPolicy:
    """Configured :func:`with_retry` shared by the engine and scheduler."""

    def __init__(
        self,
        config: RetryConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config or RetryConfig()
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    async def call(self, name: str, operation: Callable[[], Awaitable[T]]) -> T:
        return await with_retry(
            operation,
            max_attempts=self._config.max_attempts,
            base_delay=self._config.base_delay,
            name=name,
            sleep=self._sleep,
        )
