"""SDK composition root for trellomirror."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime
from types import TracebackType
from typing import Any

from trellomirror.auth import Credentials, create_credential_resolver
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import MirrorConfig
from trellomirror.contracts.events import CONSUMED_ACTION_TYPES, WebhookAction, WebhookPayload
from trellomirror.contracts.exceptions import MirrorError
from trellomirror.contracts.sync import MirrorOutcome, SweepResult
from trellomirror.engine import (
    ConcurrencyGuard,
    DueDateScheduler,
    MirrorEngine,
    RetryPolicy,
    SweepProgress,
    SyncState,
    WebhookDeduplicator,
)
from trellomirror.providers import DryRunBoardClient, create_client

_LOG = logging.getLogger(__name__)


class TrelloMirror:
    """Wires client, state, guard, engine and scheduler together for one process."""

    def __init__(
        self,
        *,
        client: BoardClient,
        config: MirrorConfig,
        credentials: Credentials | None = None,
        retry: RetryPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self.credentials = credentials
        self.state = SyncState()
        self.guard = ConcurrencyGuard(default_timeout=config.lock_timeout)
        self.retry = retry or RetryPolicy(config.retry)
        self.deduplicator = WebhookDeduplicator(window=config.dedup_window, max_entries=config.dedup_max_entries)
        self.scheduler = DueDateScheduler(client, self.state, self.guard, self.retry, config, clock=clock)
        self.engine = MirrorEngine(client, self.state, self.guard, self.retry, config, scheduler=self.scheduler)
        self._background: set[asyncio.Task[Any]] = set()

    @classmethod
    def create(cls, config: MirrorConfig, credentials: Credentials, *, dry_run: bool = False) -> TrelloMirror:
        client = create_client(config, credentials, dry_run=dry_run)
        return cls(client=client, config=config, credentials=credentials)

    @classmethod
    async def from_config(cls, config: MirrorConfig, *, dry_run: bool = False) -> TrelloMirror:
        credentials = await create_credential_resolver(config).resolve()
        return cls.create(config, credentials, dry_run=dry_run)

    @property
    def config(self) -> MirrorConfig:
        return self._config

    @property
    def client(self) -> BoardClient:
        return self._client

    @property
    def dry_run(self) -> bool:
        return isinstance(self._client, DryRunBoardClient)

    async def __aenter__(self) -> TrelloMirror:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await self.drain()
        finally:
            await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def initialize(self) -> None:
        await self.engine.initialize()

    # ------------------------------------------------------------------
    # Webhook dispatch
    # ------------------------------------------------------------------

    async def handle_payload(self, payload: WebhookPayload) -> MirrorOutcome | None:
        if payload.action is None:
            return None
        return await self.handle_action(payload.action)

    async def handle_action(self, action: WebhookAction) -> MirrorOutcome | None:
        """Route one webhook action to the engine.

        Returns ``None`` when the action is ignored, a duplicate, or dropped because the
        same card is already being processed.
        """
        if action.type not in CONSUMED_ACTION_TYPES:
            _LOG.debug("Ignoring action type %s", action.type)
            return None
        if self.deduplicator.seen(action.id):
            _LOG.info("Dropping duplicate delivery of action %s", action.id)
            return None
        if action.type == "deleteCard":
            _LOG.info("Card deleted: %s", action.data.card.id if action.data.card else "unknown")
            return None

        board = action.data.board
        card = action.data.card
        if board is None or card is None:
            _LOG.info("Action %s carries no board or card", action.id)
            return None

        with self.guard.processing(card.id) as owned:
            if not owned:
                _LOG.info("Card %s is already being processed, dropping action %s", card.id, action.id)
                return None

            if board.id == self._config.aggregate_board:
                if action.data.list_after is None:
                    _LOG.debug("Aggregate action %s is not a list move", action.id)
                    return None
                return await self.engine.handle_aggregate_card_move(card, action.data.list_after.name)

            source_board = self._config.source_board_by_id(board.id)
            if source_board is None:
                _LOG.info("Board %s not found in source boards", board.id)
                return None

            target_name = await self._resolve_target_list_name(action)
            if target_name is None:
                _LOG.info("No target list found in action %s", action.id)
                return None
            return await self.engine.handle_card_move(card, source_board, target_name)

    async def _resolve_target_list_name(self, action: WebhookAction) -> str | None:
        card = action.data.card
        if action.type == "addLabelToCard" and card is not None:
            full = await self.retry.call("get_card", lambda: self._client.get_card(card.id))
            if full.list_id is None:
                return None
            list_id = full.list_id
            board_list = await self.retry.call("get_list", lambda: self._client.get_list(list_id))
            return board_list.name
        target = action.data.target_list
        return target.name if target is not None else None

    async def process_action(self, action: WebhookAction) -> MirrorOutcome | None:
        """Handle *action* within the operation timeout, logging rather than raising."""
        started = time.monotonic()
        card_id = action.data.card.id if action.data.card else None
        try:
            return await asyncio.wait_for(self.handle_action(action), timeout=self._config.operation_timeout)
        except TimeoutError:
            _LOG.error(
                "Timeout processing action %s (%s) for card %s after %.1fs",
                action.id,
                action.type,
                card_id,
                time.monotonic() - started,
            )
        except MirrorError as exc:
            _LOG.error(
                "Webhook processing error for action %s (%s), card %s: %s",
                action.id,
                action.type,
                card_id,
                exc,
                exc_info=True,
            )
        return None

    def submit(self, action: WebhookAction) -> asyncio.Task[MirrorOutcome | None]:
        """Process *action* as detached background work."""
        return self._track(asyncio.create_task(self.process_action(action), name=f"action-{action.id}"))

    # ------------------------------------------------------------------
    # Due-date sweep
    # ------------------------------------------------------------------

    async def perform_daily_card_movement(self, progress: SweepProgress | None = None) -> SweepResult:
        result = await self.scheduler.perform_daily_card_movement(progress)
        return result.model_copy(update={"dry_run": self.dry_run})

    def submit_sweep(self) -> asyncio.Task[SweepResult | None]:
        return self._track(asyncio.create_task(self._guarded_sweep(), name="due-date-sweep"))

    async def run_periodic_sweeps(self, interval: float | None = None) -> None:
        """Run the sweep every *interval* seconds until cancelled."""
        period = interval if interval is not None else self._config.sweep_interval
        while True:
            await asyncio.sleep(period)
            try:
                await self._guarded_sweep()
            except Exception:
                _LOG.exception("Unexpected error in due-date sweep, next sweep in %.0fs", period)

    async def _guarded_sweep(self) -> SweepResult | None:
        try:
            return await self.perform_daily_card_movement()
        except MirrorError as exc:
            _LOG.error("Error in due-date sweep: %s", exc, exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Background task bookkeeping
    # ------------------------------------------------------------------

    @property
    def pending(self) -> int:
        return len(self._background)

    async def drain(self) -> None:
        """Wait for every detached task to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _track(self, task: asyncio.Task[Any]) -> asyncio.Task[Any]:
        self._background.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            _LOG.warning("Background task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            _LOG.error("Background task %s failed", task.get_name(), exc_info=exc)
            return
        _LOG.debug("Background task %s finished: %r", task.get_name(), task.result())
