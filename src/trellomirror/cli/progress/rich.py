"""Rich-based sweep progress display."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from trellomirror.engine.progress import SweepProgress


class RichSweepProgress(SweepProgress):
    """Live per-board progress bars for the due-date sweep.

    Use as a context manager so the live display is started and stopped::

        with RichSweepProgress() as progress:
            result = await mirror.perform_daily_card_movement(progress)
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>20}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._task_ids: dict[str, RichTaskID] = {}

    def __enter__(self) -> RichSweepProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def board_start(self, board_name: str, total: int) -> None:
        self._task_ids[board_name] = self._progress.add_task(f"[cyan]{board_name}[/]", total=total)

    def card_done(self, board_name: str) -> None:
        task_id = self._task_ids.get(board_name)
        if task_id is not None:
            self._progress.advance(task_id)

    def board_done(self, board_name: str) -> None:
        task_id = self._task_ids.get(board_name)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        self._progress.update(task_id, completed=task.total)

    def board_error(self, board_name: str, error: BaseException) -> None:
        task_id = self._task_ids.get(board_name)
        if task_id is None:
            task_id = self._progress.add_task(board_name, total=1)
            self._task_ids[board_name] = task_id
        self._progress.update(task_id, description=f"[red]✗[/red] {board_name}")
