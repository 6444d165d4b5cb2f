"""In-memory list and card mappings."""

from __future__ import annotations

from collections.abc import Iterator

from trellomirror.contracts.sync import AGGREGATE, CardKey, ListKey


class SyncState:
    """Process-local mapping state owned by one engine instance.

    ``list_ids`` maps ``(board, list name)`` to a remote list id, where *board* is a
    source board id or :data:`AGGREGATE`. ``card_mirrors`` maps
    ``(source board id, source card id)`` to the mirrored card id. Nothing is persisted.
    """

    def __init__(self) -> None:
        self.list_ids: dict[ListKey, str] = {}
        self.card_mirrors: dict[CardKey, str] = {}

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def get_list_id(self, board: str, list_name: str) -> str | None:
        return self.list_ids.get(ListKey(board, list_name))

    def get_aggregate_list_id(self, list_name: str) -> str | None:
        return self.get_list_id(AGGREGATE, list_name)

    def set_list_id(self, board: str, list_name: str, list_id: str) -> None:
        self.list_ids[ListKey(board, list_name)] = list_id

    def delete_list_id(self, board: str, list_name: str) -> None:
        self.list_ids.pop(ListKey(board, list_name), None)

    def list_entries(self) -> Iterator[tuple[ListKey, str]]:
        return iter(list(self.list_ids.items()))

    def clear_lists(self) -> None:
        self.list_ids.clear()

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def get_mirror(self, board_id: str, card_id: str) -> str | None:
        return self.card_mirrors.get(CardKey(board_id, card_id))

    def set_mirror(self, board_id: str, card_id: str, mirror_id: str) -> None:
        self.card_mirrors[CardKey(board_id, card_id)] = mirror_id

    def delete_mirror(self, board_id: str, card_id: str) -> str | None:
        return self.card_mirrors.pop(CardKey(board_id, card_id), None)

    def card_entries(self) -> Iterator[tuple[CardKey, str]]:
        return iter(list(self.card_mirrors.items()))

    def find_source_card(self, mirror_id: str, board_id: str) -> str | None:
        """Return the source card id mirrored by *mirror_id* on *board_id*.

        Linear scan in insertion order; the first match wins.
        """
        for key, value in self.card_mirrors.items():
            if value == mirror_id and key.board_id == board_id:
                return key.card_id
        return None
