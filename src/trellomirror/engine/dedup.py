"""Duplicate webhook delivery filter."""

from __future__ import annotations

import time
from collections.abc import Callable

from cachetools import TTLCache


class WebhookDeduplicator:
    """Remembers action ids for *window* seconds, keeping at most *max_entries*."""

    def __init__(
        self,
        *,
        window: float = 300.0,
        max_entries: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._seen: TTLCache[str, bool] = TTLCache(maxsize=max_entries, ttl=window, timer=timer)

    def seen(self, action_id: str | None) -> bool:
        """Return ``True`` for a repeat delivery; otherwise record *action_id*."""
        if not action_id:
            return False
        if action_id in self._seen:
            return True
        self._seen[action_id] = True
        return False

    def __len__(self) -> int:
        return len(self._seen)
