"""Board id resolution command."""

from __future__ import annotations

import argparse

from trellomirror.contracts.board import Board


def format_board_ids(boards: dict[str, Board], requested: list[str]) -> str:
    lines = []
    for short_id in requested:
        board = boards.get(short_id)
        if board is None:
            lines.append(f"{short_id}: not found")
        else:
            lines.append(f'{short_id}: {{"id": "{board.id}", "name": "{board.name}"}}')
    return "\n".join(lines)


async def run_resolve_boards(args: argparse.Namespace) -> dict[str, Board]:
    import trellomirror.cli as cli

    config = cli.load_config(args.config)
    mirror = await cli.TrelloMirror.from_config(config)
    async with mirror:
        boards = await cli.resolve_board_ids(mirror.client, args.short_ids)
    print(format_board_ids(boards, args.short_ids))
    return boards


__all__ = ["format_board_ids", "run_resolve_boards"]
