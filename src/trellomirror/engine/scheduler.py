"""Due-date driven list placement on source boards."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from trellomirror.contracts.board import UpdateCardInput
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import MirrorConfig, UrgencyTier
from trellomirror.contracts.exceptions import MirrorError
from trellomirror.contracts.sync import RelocationOutcome, RelocationStatus, SweepResult
from trellomirror.engine.guard import ConcurrencyGuard
from trellomirror.engine.progress import SweepProgress
from trellomirror.engine.retry import RetryPolicy
from trellomirror.engine.state import SyncState

_LOG = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def days_until(due: datetime, now: datetime, zone: ZoneInfo) -> int:
    """Whole days from today to the due date, both taken at midnight in *zone*.

    Naive datetimes are read as UTC.
    """
    if due.tzinfo is None:
        due = due.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (due.astimezone(zone).date() - now.astimezone(zone).date()).days


def select_tier(days: int, tiers: Sequence[UrgencyTier]) -> UrgencyTier | None:
    """Pick the urgency tier for a card due in *days* days.

    *tiers* are ordered by ascending ``max_days``. Overdue and due-today cards always
    land in the first tier; otherwise the first tier whose threshold covers *days*
    wins. ``None`` means the card is due too far out to be placed.
    """
    if not tiers:
        return None
    if days <= 0:
        return tiers[0]
    for tier in tiers:
        if days <= tier.max_days:
            return tier
    return None


class DueDateScheduler:
    def __init__(
        self,
        client: BoardClient,
        state: SyncState,
        guard: ConcurrencyGuard,
        retry: RetryPolicy,
        config: MirrorConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._state = state
        self._guard = guard
        self._retry = retry
        self._config = config
        self._clock = clock or _utcnow

    async def relocate_by_due_date(self, card_id: str, board_id: str) -> RelocationOutcome:
        """Move *card_id* to the urgency-tier list its due date calls for.

        The whole check-and-move runs under the card's lock, so a second caller waits
        and then observes the card already in place.
        """
        async with self._guard.hold(card_id, self._config.lock_timeout):
            card = await self._retry.call("get_card", lambda: self._client.get_card(card_id))
            if card.due is None:
                _LOG.debug("Card %s has no due date, leaving it in place", card_id)
                return RelocationOutcome(status=RelocationStatus.SKIPPED, card_id=card_id, reason="no due date")

            days = days_until(card.due, self._clock(), self._config.zone)
            tier = select_tier(days, self._config.urgency_tiers)
            if tier is None:
                _LOG.debug("Card %s is due in %d days, beyond every tier", card_id, days)
                return RelocationOutcome(status=RelocationStatus.SKIPPED, card_id=card_id, reason="no matching tier")

            target_list_id = self._state.get_list_id(board_id, tier.name)
            if target_list_id is None:
                _LOG.error("Target list '%s' not found for board %s", tier.name, board_id)
                return RelocationOutcome(
                    status=RelocationStatus.SKIPPED,
                    card_id=card_id,
                    tier=tier.name,
                    reason="target list not mapped",
                )

            if card.list_id == target_list_id:
                return RelocationOutcome(status=RelocationStatus.ALREADY_PLACED, card_id=card_id, tier=tier.name)

            await self._retry.call(
                "update_card",
                lambda: self._client.update_card(card_id, UpdateCardInput(list_id=target_list_id)),
            )
            _LOG.info("Moved card '%s' (%s) to '%s', due in %d day(s)", card.name, card_id, tier.name, days)
            return RelocationOutcome(status=RelocationStatus.MOVED, card_id=card_id, tier=tier.name)

    async def perform_daily_card_movement(self, progress: SweepProgress | None = None) -> SweepResult:
        """Relocate every card on every source board.

        A failing card or board is logged and recorded; the sweep carries on.
        """
        result = SweepResult()
        _LOG.info("Starting due-date sweep over %d board(s)", len(self._config.source_boards))

        for board in self._config.source_boards:
            try:
                cards = await self._retry.call("get_cards", lambda board_id=board.id: self._client.get_cards(board_id))
            except MirrorError as exc:
                _LOG.error("Error processing board %s: %s", board.name, exc, exc_info=True)
                result.failed_boards.append(board.id)
                if progress is not None:
                    progress.board_error(board.name, exc)
                continue

            _LOG.info("Found %d card(s) on board %s", len(cards), board.name)
            if progress is not None:
                progress.board_start(board.name, len(cards))

            for card in cards:
                result.cards_examined += 1
                try:
                    outcome = await self.relocate_by_due_date(card.id, board.id)
                except MirrorError as exc:
                    _LOG.error("Error relocating card %s on board %s: %s", card.id, board.name, exc)
                    result.failed_cards.append(card.id)
                else:
                    if outcome.status is RelocationStatus.MOVED:
                        result.cards_moved += 1
                if progress is not None:
                    progress.card_done(board.name)

            result.boards_processed += 1
            if progress is not None:
                progress.board_done(board.name)

        _LOG.info(
            "Due-date sweep complete: %d examined, %d moved, %d failed card(s), %d failed board(s)",
            result.cards_examined,
            result.cards_moved,
            len(result.failed_cards),
            len(result.failed_boards),
        )
        return result
