"""Sync state keys and result contracts."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field

AGGREGATE = "aggregate"
"""Board scope used in list keys for the aggregate board."""


class ListKey(NamedTuple):
    board: str
    """Source board id, or :data:`AGGREGATE`."""
    list_name: str


class CardKey(NamedTuple):
    board_id: str
    card_id: str


class MirrorAction(str, Enum):
    CREATED = "created"
    ADOPTED = "adopted"
    UPDATED = "updated"
    RECREATED = "recreated"
    DELETED = "deleted"
    PROPAGATED = "propagated"
    SKIPPED = "skipped"


class MirrorOutcome(BaseModel):
    action: MirrorAction
    source_card_id: str
    mirror_card_id: str | None = None
    reason: str | None = None


class RelocationStatus(str, Enum):
    MOVED = "moved"
    ALREADY_PLACED = "already_placed"
    SKIPPED = "skipped"


class RelocationOutcome(BaseModel):
    status: RelocationStatus
    card_id: str
    tier: str | None = None
    reason: str | None = None


class SweepResult(BaseModel):
    boards_processed: int = 0
    cards_examined: int = 0
    cards_moved: int = 0
    failed_boards: list[str] = Field(default_factory=list)
    failed_cards: list[str] = Field(default_factory=list)
    dry_run: bool = False
