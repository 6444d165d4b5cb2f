"""Sweep command formatting and execution."""

from __future__ import annotations

import argparse

from trellomirror.cli.common import format_comma_or_none, mode_label
from trellomirror.cli.progress.rich import RichSweepProgress
from trellomirror.contracts.sync import SweepResult


def format_sweep_summary(result: SweepResult) -> str:
    lines = [
        "",
        f"trellomirror - sweep complete ({mode_label(result.dry_run)})",
        "",
        f"  Boards:    {result.boards_processed} processed",
        f"  Cards:     {result.cards_examined} examined",
        f"  Moved:     {result.cards_moved}",
    ]
    if result.failed_boards:
        lines.append(f"  Failed boards: {format_comma_or_none(result.failed_boards)}")
    if result.failed_cards:
        lines.append(f"  Failed cards:  {format_comma_or_none(result.failed_cards)}")
    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_sweep(args: argparse.Namespace) -> SweepResult:
    import trellomirror.cli as cli

    config = cli.load_config(args.config)
    mirror = await cli.TrelloMirror.from_config(config, dry_run=args.dry_run)
    async with mirror:
        await mirror.initialize()
        if not args.verbose:
            with RichSweepProgress() as progress:
                result = await mirror.perform_daily_card_movement(progress)
        else:
            result = await mirror.perform_daily_card_movement()

    print(cli._format_sweep_summary(result))
    return result


__all__ = ["format_sweep_summary", "run_sweep"]
