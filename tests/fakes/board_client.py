"""In-memory board client fake."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.exceptions import NotFoundError


class FakeBoardClient(BoardClient):
    """In-memory boards with deterministic ids, spy tracking and failure injection.

    List ids are ``"<board id>/<list name>"`` unless given explicitly, which keeps
    assertions readable.
    """

    def __init__(self, *, token: str = "fake-token") -> None:
        self.token = token
        self.boards: dict[str, Board] = {}
        self.lists: dict[str, BoardList] = {}
        self.cards: dict[str, Card] = {}
        self.labels: dict[str, list[Label]] = {}
        self.webhooks: dict[str, Webhook] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, list[BaseException]] = {}
        self.entered = 0
        self.exited = 0
        self._next_number = 1

    async def __aenter__(self) -> FakeBoardClient:
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[override]
        self.exited += 1

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add_board(
        self,
        board_id: str,
        name: str = "",
        lists: tuple[str, ...] | list[str] = (),
        *,
        short_link: str | None = None,
    ) -> Board:
        board = Board(id=board_id, name=name or board_id, short_link=short_link)
        self.boards[board_id] = board
        self.labels.setdefault(board_id, [])
        for list_name in lists:
            self.add_list(board_id, list_name)
        return board

    def add_list(self, board_id: str, name: str, *, list_id: str | None = None, closed: bool = False) -> BoardList:
        board_list = BoardList(id=list_id or f"{board_id}/{name}", name=name, board_id=board_id, closed=closed)
        self.lists[board_list.id] = board_list
        return board_list

    def add_card(
        self,
        list_id: str,
        name: str,
        *,
        card_id: str | None = None,
        desc: str = "",
        due: datetime | None = None,
        label_ids: list[str] | None = None,
    ) -> Card:
        board_id = self.lists[list_id].board_id
        card = Card(
            id=card_id or self._new_id("card"),
            name=name,
            desc=desc,
            due=due,
            list_id=list_id,
            board_id=board_id,
            labels=[self._label(label_id) for label_id in label_ids or []],
        )
        self.cards[card.id] = card
        return card

    def add_label(self, board_id: str, name: str, color: str = "blue", *, label_id: str | None = None) -> Label:
        label = Label(id=label_id or self._new_id("label"), name=name, color=color)
        self.labels.setdefault(board_id, []).append(label)
        return label

    def fail(self, operation: str, *errors: BaseException) -> None:
        """Make the next calls of *operation* raise *errors*, one per call."""
        self.failures.setdefault(operation, []).extend(errors)

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def calls_of(self, operation: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    def cards_in(self, list_id: str) -> list[Card]:
        return [card for card in self.cards.values() if card.list_id == list_id]

    # ------------------------------------------------------------------
    # BoardClient
    # ------------------------------------------------------------------

    async def get_board(self, board_id: str) -> Board:
        self._enter("get_board", board_id)
        board = self.boards.get(board_id) or next(
            (b for b in self.boards.values() if b.short_link == board_id),
            None,
        )
        if board is None:
            raise NotFoundError(f"board {board_id} not found", status=404)
        return board

    async def get_lists(self, board_id: str) -> list[BoardList]:
        self._enter("get_lists", board_id)
        return [board_list for board_list in self.lists.values() if board_list.board_id == board_id]

    async def get_list(self, list_id: str) -> BoardList:
        self._enter("get_list", list_id)
        board_list = self.lists.get(list_id)
        if board_list is None:
            raise NotFoundError(f"list {list_id} not found", status=404)
        return board_list

    async def get_cards(self, board_id: str) -> list[Card]:
        self._enter("get_cards", board_id)
        return [card for card in self.cards.values() if card.board_id == board_id]

    async def get_list_cards(self, list_id: str) -> list[Card]:
        self._enter("get_list_cards", list_id)
        return self.cards_in(list_id)

    async def get_card(self, card_id: str) -> Card:
        self._enter("get_card", card_id)
        card = self.cards.get(card_id)
        if card is None:
            raise NotFoundError(f"card {card_id} not found", status=404)
        return card

    async def get_labels(self, board_id: str) -> list[Label]:
        self._enter("get_labels", board_id)
        return list(self.labels.get(board_id, []))

    async def create_label(self, board_id: str, name: str, color: str) -> Label:
        self._enter("create_label", board_id, name, color)
        return self.add_label(board_id, name, color)

    async def create_card(self, list_id: str, input: CreateCardInput) -> Card:
        self._enter("create_card", list_id, input)
        return self.add_card(list_id, input.name, desc=input.desc, due=input.due, label_ids=list(input.label_ids))

    async def update_card(self, card_id: str, input: UpdateCardInput) -> Card:
        self._enter("update_card", card_id, input)
        card = self.cards.get(card_id)
        if card is None:
            raise NotFoundError(f"card {card_id} not found", status=404)
        changes: dict[str, Any] = {}
        for field_name in input.model_fields_set:
            value = getattr(input, field_name)
            if field_name == "list_id":
                changes["list_id"] = value
                changes["board_id"] = self.lists[value].board_id
            elif field_name == "label_ids":
                changes["labels"] = [self._label(label_id) for label_id in value or []]
            else:
                changes[field_name] = value
        updated = card.model_copy(update=changes)
        self.cards[card_id] = updated
        return updated

    async def delete_card(self, card_id: str) -> None:
        self._enter("delete_card", card_id)
        if self.cards.pop(card_id, None) is None:
            raise NotFoundError(f"card {card_id} not found", status=404)

    async def list_webhooks(self) -> list[Webhook]:
        self._enter("list_webhooks")
        return list(self.webhooks.values())

    async def create_webhook(self, board_id: str, callback_url: str, description: str) -> Webhook:
        self._enter("create_webhook", board_id, callback_url, description)
        webhook = Webhook(
            id=self._new_id("webhook"),
            model_id=board_id,
            callback_url=callback_url,
            description=description,
        )
        self.webhooks[webhook.id] = webhook
        return webhook

    async def delete_webhook(self, webhook_id: str) -> None:
        self._enter("delete_webhook", webhook_id)
        if self.webhooks.pop(webhook_id, None) is None:
            raise NotFoundError(f"webhook {webhook_id} not found", status=404)

    # ------------------------------------------------------------------

    def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        pending = self.failures.get(operation)
        if pending:
            raise pending.pop(0)

    def _label(self, label_id: str) -> Label:
        for labels in self.labels.values():
            for label in labels:
                if label.id == label_id:
                    return label
        return Label(id=label_id)

    def _new_id(self, prefix: str) -> str:
        number = self._next_number
        self._next_number += 1
        return f"{prefix}-{number}"
