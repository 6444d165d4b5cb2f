"""Per-card mutual exclusion."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

from trellomirror.contracts.exceptions import LockTimeoutError

_LOG = logging.getLogger(__name__)


class ConcurrencyGuard:
    """Serializes work on the same card and drops duplicate in-flight deliveries.

    Two independent mechanisms:

    - a per-card lock (``acquire``/``release``/``hold``) that waiters block on until the
      holder releases or their timeout elapses;
    - a *processing* marker set, used by entry points to drop a delivery outright when
      the same card is already being handled.
    """

    def __init__(self, *, default_timeout: float = 5.0) -> None:
        self._default_timeout = default_timeout
        self._locked: set[str] = set()
        self._processing: set[str] = set()
        self._condition = asyncio.Condition()

    def is_locked(self, card_id: str) -> bool:
        return card_id in self._locked

    def is_processing(self, card_id: str) -> bool:
        return card_id in self._processing

    async def acquire(self, card_id: str, timeout: float | None = None) -> None:
        """Lock *card_id*, waiting for the current holder to release.

        Raises:
            LockTimeoutError: The lock was still held after *timeout* seconds.
        """
        limit = self._default_timeout if timeout is None else timeout
        async with self._condition:
            try:
                await asyncio.wait_for(
                    self._condition.wait_for(lambda: card_id not in self._locked),
                    timeout=limit,
                )
            except TimeoutError as exc:
                _LOG.warning("Lock timeout for card %s after %.1fs", card_id, limit)
                raise LockTimeoutError(card_id, limit) from exc
            self._locked.add(card_id)

    async def release(self, card_id: str) -> None:
        async with self._condition:
            self._locked.discard(card_id)
            self._condition.notify_all()

    @asynccontextmanager
    async def hold(self, card_id: str, timeout: float | None = None) -> AsyncIterator[None]:
        await self.acquire(card_id, timeout)
        try:
            yield
        finally:
            await self.release(card_id)

    def try_mark_processing(self, card_id: str) -> bool:
        if card_id in self._processing:
            return False
        self._processing.add(card_id)
        return True

    def clear_processing(self, card_id: str) -> None:
        self._processing.discard(card_id)

    @contextmanager
    def processing(self, card_id: str) -> Iterator[bool]:
        """Yield ``True`` when the caller owns the marker, ``False`` for a duplicate."""
        owned = self.try_mark_processing(card_id)
        try:
            yield owned
        finally:
            if owned:
                self.clear_processing(card_id)
