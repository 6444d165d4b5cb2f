"""Public contracts for trellomirror."""

from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import BoardRef, MirrorConfig, RateLimitConfig, RetryConfig, UrgencyTier
from trellomirror.contracts.events import WebhookAction, WebhookPayload
from trellomirror.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    LockTimeoutError,
    MirrorError,
    NotFoundError,
    RateLimitedError,
    RemoteApiError,
    RetryExhaustedError,
    SyncError,
)
from trellomirror.contracts.sync import (
    AGGREGATE,
    CardKey,
    ListKey,
    MirrorAction,
    MirrorOutcome,
    RelocationOutcome,
    RelocationStatus,
    SweepResult,
)

__all__ = [
    "AGGREGATE",
    "AuthenticationError",
    "Board",
    "BoardClient",
    "BoardList",
    "BoardRef",
    "Card",
    "CardKey",
    "ConfigError",
    "CreateCardInput",
    "Label",
    "ListKey",
    "LockTimeoutError",
    "MirrorAction",
    "MirrorConfig",
    "MirrorError",
    "MirrorOutcome",
    "NotFoundError",
    "RateLimitConfig",
    "RateLimitedError",
    "RelocationOutcome",
    "RelocationStatus",
    "RemoteApiError",
    "RetryConfig",
    "RetryExhaustedError",
    "SweepResult",
    "SyncError",
    "UpdateCardInput",
    "UrgencyTier",
    "Webhook",
    "WebhookAction",
    "WebhookPayload",
]
