"""Read-through dry-run client."""

from __future__ import annotations

import logging
from types import TracebackType

from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook
from trellomirror.contracts.client import BoardClient

_LOG = logging.getLogger(__name__)


class DryRunBoardClient(BoardClient):
    """Client that forwards reads to *inner* and records mutations without sending them.

    Mutations return deterministic placeholders so callers can keep going. Every
    suppressed mutation is appended to :attr:`mutations` as ``(operation, target)``.
    """

    def __init__(self, inner: BoardClient) -> None:
        self._inner = inner
        self._counter = 0
        self.mutations: list[tuple[str, str]] = []

    async def __aenter__(self) -> DryRunBoardClient:
        await self._inner.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self._inner.__aexit__(exc_type, exc_val, exc_tb)

    async def get_board(self, board_id: str) -> Board:
        return await self._inner.get_board(board_id)

    async def get_lists(self, board_id: str) -> list[BoardList]:
        return await self._inner.get_lists(board_id)

    async def get_list(self, list_id: str) -> BoardList:
        return await self._inner.get_list(list_id)

    async def get_cards(self, board_id: str) -> list[Card]:
        return await self._inner.get_cards(board_id)

    async def get_list_cards(self, list_id: str) -> list[Card]:
        return await self._inner.get_list_cards(list_id)

    async def get_card(self, card_id: str) -> Card:
        return await self._inner.get_card(card_id)

    async def get_labels(self, board_id: str) -> list[Label]:
        return await self._inner.get_labels(board_id)

    async def create_label(self, board_id: str, name: str, color: str) -> Label:
        self._record("create_label", f"{board_id}:{name}")
        return Label(id=self._next_id(), name=name, color=color)

    async def create_card(self, list_id: str, input: CreateCardInput) -> Card:
        self._record("create_card", f"{list_id}:{input.name}")
        return Card(id=self._next_id(), name=input.name, desc=input.desc, due=input.due, list_id=list_id)

    async def update_card(self, card_id: str, input: UpdateCardInput) -> Card:
        self._record("update_card", card_id)
        return Card(
            id=card_id,
            name=input.name or "",
            desc=input.desc,
            due=input.due,
            list_id=input.list_id,
        )

    async def delete_card(self, card_id: str) -> None:
        self._record("delete_card", card_id)

    async def list_webhooks(self) -> list[Webhook]:
        return await self._inner.list_webhooks()

    async def create_webhook(self, board_id: str, callback_url: str, description: str) -> Webhook:
        self._record("create_webhook", board_id)
        return Webhook(id=self._next_id(), model_id=board_id, callback_url=callback_url, description=description)

    async def delete_webhook(self, webhook_id: str) -> None:
        self._record("delete_webhook", webhook_id)

    def _record(self, operation: str, target: str) -> None:
        _LOG.info("[dry-run] %s %s", operation, target)
        self.mutations.append((operation, target))

    def _next_id(self) -> str:
        self._counter += 1
        return f"dry-run-{self._counter}"
