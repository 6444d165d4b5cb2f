"""Public API surface for trellomirror."""

__version__ = "0.1.0"

from trellomirror.auth import CredentialResolver, Credentials, create_credential_resolver
from trellomirror.config import load_config
from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import BoardRef, MirrorConfig, UrgencyTier
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
from trellomirror.contracts.sync import MirrorAction, MirrorOutcome, RelocationOutcome, RelocationStatus, SweepResult
from trellomirror.engine.progress import SweepProgress
from trellomirror.providers import create_client
from trellomirror.sdk import TrelloMirror

__all__ = [
    "AuthenticationError",
    "Board",
    "BoardClient",
    "BoardList",
    "BoardRef",
    "Card",
    "ConfigError",
    "CreateCardInput",
    "CredentialResolver",
    "Credentials",
    "Label",
    "LockTimeoutError",
    "MirrorAction",
    "MirrorConfig",
    "MirrorError",
    "MirrorOutcome",
    "NotFoundError",
    "RateLimitedError",
    "RelocationOutcome",
    "RelocationStatus",
    "RemoteApiError",
    "RetryExhaustedError",
    "SweepProgress",
    "SweepResult",
    "SyncError",
    "TrelloMirror",
    "UpdateCardInput",
    "UrgencyTier",
    "Webhook",
    "WebhookAction",
    "WebhookPayload",
    "__version__",
    "create_client",
    "create_credential_resolver",
    "load_config",
]
