"""Command-line interface for trellomirror."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging

import uvicorn as uvicorn

from trellomirror.auth import create_credential_resolver as create_credential_resolver
from trellomirror.cli.app import main as main
from trellomirror.cli.commands import boards as boards_command
from trellomirror.cli.commands import clean as clean_command
from trellomirror.cli.commands import serve as serve_command
from trellomirror.cli.commands import sweep as sweep_command
from trellomirror.cli.commands import webhooks as webhooks_command
from trellomirror.cli.parser import build_parser as build_parser
from trellomirror.config import load_config as load_config
from trellomirror.maintenance import clear_boards as clear_boards
from trellomirror.maintenance import resolve_board_ids as resolve_board_ids
from trellomirror.sdk import TrelloMirror as TrelloMirror
from trellomirror.server import create_app as create_app
from trellomirror.webhooks import list_webhooks as list_webhooks
from trellomirror.webhooks import reset_webhooks as reset_webhooks
from trellomirror.webhooks import watched_board_ids as watched_board_ids

_format_sweep_summary = sweep_command.format_sweep_summary
_format_clean_summary = clean_command.format_clean_summary

_run_serve = serve_command.run_serve
_run_sweep = sweep_command.run_sweep
_run_webhooks = webhooks_command.run_webhooks
_run_resolve_boards = boards_command.run_resolve_boards
_run_clean = clean_command.run_clean


if __name__ == "__main__":
    raise SystemExit(main())
