"""Progress reporting protocol for the due-date sweep.

The scheduler emits board-level lifecycle events; consumers (e.g. the CLI's Rich
progress bar) implement ``SweepProgress`` to render feedback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SweepProgress(ABC):
    @abstractmethod
    def board_start(self, board_name: str, total: int) -> None:
        """Processing of *board_name* starts with *total* cards."""
        ...  # pragma: no cover

    @abstractmethod
    def card_done(self, board_name: str) -> None:
        """One card on *board_name* has been examined."""
        ...  # pragma: no cover

    @abstractmethod
    def board_done(self, board_name: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def board_error(self, board_name: str, error: BaseException) -> None: ...  # pragma: no cover
