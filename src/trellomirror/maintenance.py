"""One-off board maintenance operations."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from trellomirror.contracts.board import Board
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.exceptions import MirrorError, RemoteApiError
from trellomirror.engine.retry import RetryPolicy

_LOG = logging.getLogger(__name__)


class CleanResult(BaseModel):
    cards_deleted: int = 0
    failed_boards: list[str] = Field(default_factory=list)
    dry_run: bool = False


async def resolve_board_ids(client: BoardClient, short_ids: list[str]) -> dict[str, Board]:
    """Look up full boards for short ids (the code in a board URL).

    Unknown ids are logged and left out of the result.
    """
    boards: dict[str, Board] = {}
    for short_id in short_ids:
        try:
            boards[short_id] = await client.get_board(short_id)
        except RemoteApiError as exc:
            _LOG.error("Error fetching board %s: %s", short_id, exc)
    return boards


async def clear_boards(
    client: BoardClient,
    board_ids: list[str],
    *,
    retry: RetryPolicy | None = None,
) -> CleanResult:
    """Delete every card from every list of *board_ids*."""
    policy = retry or RetryPolicy()
    result = CleanResult()
    for board_id in board_ids:
        try:
            lists = await policy.call("get_lists", lambda board_id=board_id: client.get_lists(board_id))
            for board_list in lists:
                cards = await policy.call(
                    "get_list_cards", lambda list_id=board_list.id: client.get_list_cards(list_id)
                )
                _LOG.info("List '%s' has %d card(s)", board_list.name, len(cards))
                for card in cards:
                    await policy.call("delete_card", lambda card_id=card.id: client.delete_card(card_id))
                    result.cards_deleted += 1
        except MirrorError as exc:
            _LOG.error("Error clearing board %s: %s", board_id, exc)
            result.failed_boards.append(board_id)
    return result
