"""Bidirectional card mirroring between source boards and the aggregate board."""

from __future__ import annotations

import asyncio
import logging
import time

from trellomirror.contracts.board import Card, CreateCardInput, UpdateCardInput
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import BoardRef, MirrorConfig
from trellomirror.contracts.events import ActionCard
from trellomirror.contracts.exceptions import LockTimeoutError, MirrorError, NotFoundError, SyncError
from trellomirror.contracts.sync import AGGREGATE, MirrorAction, MirrorOutcome, RelocationStatus
from trellomirror.engine.guard import ConcurrencyGuard
from trellomirror.engine.provenance import Provenance, format_mirror_description, parse_provenance
from trellomirror.engine.retry import RetryPolicy
from trellomirror.engine.scheduler import DueDateScheduler
from trellomirror.engine.state import SyncState

_LOG = logging.getLogger(__name__)


class MirrorEngine:
    """Keeps one mirrored card on the aggregate board per tracked source card.

    The direction source -> aggregate creates, updates and deletes mirrors depending on
    whether the source card sits in a tracked list. The direction aggregate -> source
    only ever moves the already-mirrored source card.
    """

    def __init__(
        self,
        client: BoardClient,
        state: SyncState,
        guard: ConcurrencyGuard,
        retry: RetryPolicy,
        config: MirrorConfig,
        *,
        scheduler: DueDateScheduler | None = None,
    ) -> None:
        self._client = client
        self._state = state
        self._guard = guard
        self._retry = retry
        self._config = config
        self._scheduler = scheduler
        self._label_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Rebuild the list mapping from the remote boards.

        The card mapping is left alone; it fills lazily as events arrive.
        """
        self._state.clear_lists()
        for board in self._config.source_boards:
            lists = await self._retry.call("get_lists", lambda board_id=board.id: self._client.get_lists(board_id))
            for board_list in lists:
                if board_list.closed:
                    continue
                self._state.set_list_id(board.id, board_list.name, board_list.id)
            _LOG.info("Mapped %d list(s) for board %s", len(lists), board.name)

        aggregate_id = self._config.aggregate_board
        aggregate_lists = await self._retry.call("get_lists", lambda: self._client.get_lists(aggregate_id))
        for board_list in aggregate_lists:
            if board_list.closed:
                continue
            self._state.set_list_id(AGGREGATE, board_list.name, board_list.id)
        _LOG.info("Mapped %d list(s) for the aggregate board", len(aggregate_lists))

        for tracked in self._config.tracked_lists:
            if self._state.get_aggregate_list_id(tracked) is None:
                _LOG.warning("Tracked list '%s' does not exist on the aggregate board", tracked)

    # ------------------------------------------------------------------
    # Source -> aggregate
    # ------------------------------------------------------------------

    async def handle_card_move(
        self,
        card: ActionCard | Card,
        source_board: BoardRef,
        target_list_name: str,
    ) -> MirrorOutcome:
        """Create, update or delete the mirror of *card* after it landed in *target_list_name*."""
        started = time.monotonic()
        target_name = target_list_name
        if self._config.inbox_list is not None and target_name == self._config.inbox_list:
            target_name = await self._nudge_from_inbox(card.id, source_board)

        tracked = self._config.is_tracked(target_name)
        try:
            async with self._guard.hold(card.id, self._config.lock_timeout):
                mirror_id = self._state.get_mirror(source_board.id, card.id)
                if mirror_id is None and tracked:
                    outcome = await self._create_mirror(card.id, source_board, target_name)
                elif mirror_id is not None and tracked:
                    outcome = await self._update_mirror(card.id, source_board, target_name, mirror_id)
                elif mirror_id is not None:
                    outcome = await self._delete_mirror(card.id, source_board, mirror_id)
                else:
                    outcome = MirrorOutcome(
                        action=MirrorAction.SKIPPED,
                        source_card_id=card.id,
                        reason=f"list '{target_name}' is not tracked",
                    )
        except LockTimeoutError:
            raise
        except MirrorError as exc:
            _LOG.error(
                "Mirroring card %s from board %s to '%s' failed after %dms: %s",
                card.id,
                source_board.name,
                target_name,
                _elapsed_ms(started),
                exc,
                exc_info=True,
            )
            raise SyncError(f"mirroring card {card.id} to '{target_name}' failed: {exc}") from exc

        _LOG.info(
            "Card %s on board %s -> '%s': %s (%dms)",
            card.id,
            source_board.name,
            target_name,
            outcome.action.value,
            _elapsed_ms(started),
        )
        return outcome

    async def _nudge_from_inbox(self, card_id: str, source_board: BoardRef) -> str:
        inbox = self._config.inbox_list or ""
        if self._scheduler is None:
            return inbox
        try:
            outcome = await self._scheduler.relocate_by_due_date(card_id, source_board.id)
        except MirrorError as exc:
            _LOG.error("Due-date placement from '%s' failed for card %s: %s", inbox, card_id, exc)
            return inbox
        if outcome.status is RelocationStatus.MOVED and outcome.tier is not None:
            return outcome.tier
        return inbox

    async def _create_mirror(self, card_id: str, source_board: BoardRef, target_name: str) -> MirrorOutcome:
        aggregate_list_id = self._state.get_aggregate_list_id(target_name)
        if aggregate_list_id is None:
            return self._unmapped(card_id, target_name)

        source_card = await self._retry.call("get_card", lambda: self._client.get_card(card_id))

        existing = await self.find_existing_mirror(source_card.name, source_board)
        if existing is not None:
            try:
                await self._push_mirror(existing.id, source_card, source_board, aggregate_list_id)
            except NotFoundError:
                _LOG.warning("Mirror %s vanished before it could be adopted for card %s", existing.id, card_id)
            else:
                self._state.set_mirror(source_board.id, card_id, existing.id)
                _LOG.info("Adopted existing mirror %s for card %s", existing.id, card_id)
                return MirrorOutcome(action=MirrorAction.ADOPTED, source_card_id=card_id, mirror_card_id=existing.id)

        origin_label_id = await self.ensure_origin_label(source_board)
        create_input = CreateCardInput(
            name=source_card.name,
            desc=format_mirror_description(source_board.name, source_card.desc),
            due=source_card.due,
            label_ids=_with_label(source_card.label_ids, origin_label_id),
        )
        mirror = await self._retry.call("create_card", lambda: self._client.create_card(aggregate_list_id, create_input))
        self._state.set_mirror(source_board.id, card_id, mirror.id)
        return MirrorOutcome(action=MirrorAction.CREATED, source_card_id=card_id, mirror_card_id=mirror.id)

    async def _update_mirror(
        self,
        card_id: str,
        source_board: BoardRef,
        target_name: str,
        mirror_id: str,
    ) -> MirrorOutcome:
        aggregate_list_id = self._state.get_aggregate_list_id(target_name)
        if aggregate_list_id is None:
            return self._unmapped(card_id, target_name)

        source_card = await self._retry.call("get_card", lambda: self._client.get_card(card_id))
        try:
            await self._push_mirror(mirror_id, source_card, source_board, aggregate_list_id)
        except NotFoundError:
            _LOG.warning("Mirror %s of card %s was deleted out of band, recreating it", mirror_id, card_id)
            self._state.delete_mirror(source_board.id, card_id)
            outcome = await self._create_mirror(card_id, source_board, target_name)
            if outcome.action is MirrorAction.CREATED:
                return outcome.model_copy(update={"action": MirrorAction.RECREATED})
            return outcome

        return MirrorOutcome(action=MirrorAction.UPDATED, source_card_id=card_id, mirror_card_id=mirror_id)

    async def _push_mirror(
        self,
        mirror_id: str,
        source_card: Card,
        source_board: BoardRef,
        aggregate_list_id: str,
    ) -> None:
        origin_label_id = await self.ensure_origin_label(source_board)
        update_input = UpdateCardInput(
            list_id=aggregate_list_id,
            name=source_card.name,
            desc=format_mirror_description(source_board.name, source_card.desc),
            due=source_card.due,
            label_ids=_with_label(source_card.label_ids, origin_label_id),
        )
        await self._retry.call("update_card", lambda: self._client.update_card(mirror_id, update_input))

    async def _delete_mirror(self, card_id: str, source_board: BoardRef, mirror_id: str) -> MirrorOutcome:
        try:
            await self._retry.call("delete_card", lambda: self._client.delete_card(mirror_id))
        except NotFoundError:
            _LOG.info("Mirror %s of card %s was already gone", mirror_id, card_id)
        self._state.delete_mirror(source_board.id, card_id)
        return MirrorOutcome(action=MirrorAction.DELETED, source_card_id=card_id, mirror_card_id=mirror_id)

    async def find_existing_mirror(self, card_name: str, source_board: BoardRef) -> Card | None:
        """Search the aggregate board for an unmapped mirror of a card named *card_name*."""
        aggregate_id = self._config.aggregate_board
        cards = await self._retry.call("get_cards", lambda: self._client.get_cards(aggregate_id))
        mapped = {mirror_id for _, mirror_id in self._state.card_entries()}
        expected = Provenance(source_board_name=source_board.name)
        for candidate in cards:
            if candidate.name != card_name or candidate.id in mapped:
                continue
            if parse_provenance(candidate.desc) == expected:
                return candidate
        return None

    async def ensure_origin_label(self, source_board: BoardRef) -> str:
        """Return the id of the ``Origin:<board>`` label, creating it if needed."""
        aggregate_id = self._config.aggregate_board
        label_name = source_board.origin_label_name
        async with self._label_lock:
            labels = await self._retry.call("get_labels", lambda: self._client.get_labels(aggregate_id))
            for label in labels:
                if label.name == label_name:
                    return label.id

            color = self._config.label_color(source_board)
            created = await self._retry.call(
                "create_label",
                lambda: self._client.create_label(aggregate_id, label_name, color),
            )
            _LOG.info("Created label %s (%s) on the aggregate board", label_name, color)
            return created.id

    # ------------------------------------------------------------------
    # Aggregate -> source
    # ------------------------------------------------------------------

    async def handle_aggregate_card_move(self, card: ActionCard | Card, target_list_name: str) -> MirrorOutcome:
        """Move the source card behind mirror *card* to the list named *target_list_name*.

        Cards without a usable provenance, or without a known source card, are left
        alone and logged. Nothing is created or deleted in this direction.
        """
        description = card.desc
        if not description:
            try:
                full = await self._retry.call("get_card", lambda: self._client.get_card(card.id))
            except MirrorError as exc:
                _LOG.error("Error fetching details of aggregate card %s: %s", card.id, exc)
                return self._ignored(card.id, "card details unavailable")
            description = full.desc

        provenance = parse_provenance(description)
        if provenance is None:
            _LOG.info("No original board info in description of card %s", card.id)
            return self._ignored(card.id, "no provenance marker")

        source_board = self._config.source_board_by_name(provenance.source_board_name)
        if source_board is None:
            _LOG.info("Source board not found for name: %s", provenance.source_board_name)
            return self._ignored(card.id, f"unknown board '{provenance.source_board_name}'")

        source_card_id = self._state.find_source_card(card.id, source_board.id)
        if source_card_id is None:
            _LOG.info("Original card of mirror %s not found in mapping", card.id)
            return self._ignored(card.id, "mirror not mapped")

        source_list_id = self._state.get_list_id(source_board.id, target_list_name)
        if source_list_id is None:
            _LOG.info("No list '%s' on source board %s", target_list_name, source_board.name)
            return self._ignored(card.id, f"list '{target_list_name}' not on source board")

        try:
            async with self._guard.hold(source_card_id, self._config.lock_timeout):
                await self._retry.call(
                    "update_card",
                    lambda: self._client.update_card(source_card_id, UpdateCardInput(list_id=source_list_id)),
                )
        except LockTimeoutError:
            raise
        except MirrorError as exc:
            _LOG.error("Error updating original card %s: %s", source_card_id, exc, exc_info=True)
            raise SyncError(f"moving original card {source_card_id} failed: {exc}") from exc

        _LOG.info("Moved original card %s to '%s' on board %s", source_card_id, target_list_name, source_board.name)
        return MirrorOutcome(action=MirrorAction.PROPAGATED, source_card_id=source_card_id, mirror_card_id=card.id)

    @staticmethod
    def _unmapped(card_id: str, target_name: str) -> MirrorOutcome:
        _LOG.error("No aggregate list found for '%s'", target_name)
        return MirrorOutcome(
            action=MirrorAction.SKIPPED,
            source_card_id=card_id,
            reason=f"aggregate list '{target_name}' not mapped",
        )

    @staticmethod
    def _ignored(mirror_id: str, reason: str) -> MirrorOutcome:
        return MirrorOutcome(action=MirrorAction.SKIPPED, source_card_id="", mirror_card_id=mirror_id, reason=reason)


def _with_label(label_ids: list[str], extra: str) -> list[str]:
    return list(dict.fromkeys([*label_ids, extra]))


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
