"""Synchronization engine."""

from trellomirror.engine.dedup import WebhookDeduplicator
from trellomirror.engine.guard import ConcurrencyGuard
from trellomirror.engine.mirror import MirrorEngine
from trellomirror.engine.progress import SweepProgress
from trellomirror.engine.provenance import Provenance, format_mirror_description, parse_provenance
from trellomirror.engine.retry import RetryPolicy, with_retry
from trellomirror.engine.scheduler import DueDateScheduler, days_until, select_tier
from trellomirror.engine.state import SyncState

__all__ = [
    "ConcurrencyGuard",
    "DueDateScheduler",
    "MirrorEngine",
    "Provenance",
    "RetryPolicy",
    "SweepProgress",
    "SyncState",
    "WebhookDeduplicator",
    "days_until",
    "format_mirror_description",
    "parse_provenance",
    "select_tier",
    "with_retry",
]
