"""Exception hierarchy for trellomirror.

All trellomirror exceptions inherit from :class:`MirrorError`, so callers can catch
any library error with a single ``except`` clause while still handling specific
failure modes (rate limiting, missing cards, lock contention) on their own.
"""

from __future__ import annotations


class MirrorError(Exception):
    """Base exception for all trellomirror errors."""


class ConfigError(MirrorError):
    """Configuration loading or validation failure."""


class AuthenticationError(MirrorError):
    """Credentials are missing or rejected."""


class RemoteApiError(MirrorError):
    """A remote API call answered with a non-2xx status or failed in transit.

    Attributes:
        status: HTTP status code, or ``None`` for transport-level failures.
        body: Raw response body (empty for transport-level failures).
    """

    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class RateLimitedError(RemoteApiError):
    """The remote API answered 429."""


class NotFoundError(RemoteApiError):
    """The remote API answered 404."""


class RetryExhaustedError(MirrorError):
    """An operation stayed rate limited for every allowed attempt."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class LockTimeoutError(MirrorError):
    """The per-card guard could not be acquired in time."""

    def __init__(self, card_id: str, timeout: float) -> None:
        super().__init__(f"timed out after {timeout:.1f}s waiting for lock on card {card_id}")
        self.card_id = card_id
        self.timeout = timeout


class SyncError(MirrorError):
    """Engine-level synchronization failure."""
