"""Remote board client contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook


class BoardClient(ABC):
    @abstractmethod
    async def __aenter__(self) -> BoardClient: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def get_board(self, board_id: str) -> Board: ...  # pragma: no cover

    @abstractmethod
    async def get_lists(self, board_id: str) -> list[BoardList]: ...  # pragma: no cover

    @abstractmethod
    async def get_list(self, list_id: str) -> BoardList: ...  # pragma: no cover

    @abstractmethod
    async def get_cards(self, board_id: str) -> list[Card]: ...  # pragma: no cover

    @abstractmethod
    async def get_list_cards(self, list_id: str) -> list[Card]: ...  # pragma: no cover

    @abstractmethod
    async def get_card(self, card_id: str) -> Card: ...  # pragma: no cover

    @abstractmethod
    async def get_labels(self, board_id: str) -> list[Label]: ...  # pragma: no cover

    @abstractmethod
    async def create_label(self, board_id: str, name: str, color: str) -> Label: ...  # pragma: no cover

    @abstractmethod
    async def create_card(self, list_id: str, input: CreateCardInput) -> Card: ...  # pragma: no cover

    @abstractmethod
    async def update_card(self, card_id: str, input: UpdateCardInput) -> Card: ...  # pragma: no cover

    @abstractmethod
    async def delete_card(self, card_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_webhooks(self) -> list[Webhook]: ...  # pragma: no cover

    @abstractmethod
    async def create_webhook(self, board_id: str, callback_url: str, description: str) -> Webhook: ...  # pragma: no cover

    @abstractmethod
    async def delete_webhook(self, webhook_id: str) -> None: ...  # pragma: no cover
