"""Clean command formatting and execution."""

from __future__ import annotations

import argparse

from trellomirror.cli.common import format_comma_or_none, mode_label
from trellomirror.maintenance import CleanResult


def format_clean_summary(result: CleanResult) -> str:
    verb = "Would delete" if result.dry_run else "Deleted"
    lines = [
        "",
        f"trellomirror - clean complete ({mode_label(result.dry_run)})",
        "",
        f"  {verb}: {result.cards_deleted} card(s)",
    ]
    if result.failed_boards:
        lines.append(f"  Failed boards: {format_comma_or_none(result.failed_boards)}")
    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_clean(args: argparse.Namespace) -> CleanResult:
    import trellomirror.cli as cli

    config = cli.load_config(args.config)
    mirror = await cli.TrelloMirror.from_config(config, dry_run=args.dry_run)
    async with mirror:
        result = await cli.clear_boards(mirror.client, cli.watched_board_ids(config), retry=mirror.retry)
    result = result.model_copy(update={"dry_run": mirror.dry_run})

    print(cli._format_clean_summary(result))
    return result


__all__ = ["format_clean_summary", "run_clean"]
