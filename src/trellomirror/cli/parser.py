"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

DEFAULT_CONFIG = "./trellomirror.json"


def _package_version() -> str:
    try:
        return version("trellomirror")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Path to trellomirror.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def _add_mode(parser: argparse.ArgumentParser) -> None:
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--dry-run", action="store_true", help="Preview mode")
    mode.add_argument("--apply", action="store_true", help="Apply mode")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trellomirror")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the webhook server")
    _add_common(serve_parser)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=3000, help="Bind port (default: 3000)")
    serve_parser.add_argument(
        "--no-scheduler",
        action="store_true",
        default=False,
        help="Do not run the periodic due-date sweep",
    )

    sweep_parser = subparsers.add_parser("sweep", help="Move cards to the list matching their due date")
    _add_common(sweep_parser)
    _add_mode(sweep_parser)

    webhooks_parser = subparsers.add_parser("webhooks", help="Webhook registration")
    webhooks_subparsers = webhooks_parser.add_subparsers(dest="webhooks_command", required=True)

    webhooks_list = webhooks_subparsers.add_parser("list", help="List webhooks registered for the token")
    _add_common(webhooks_list)

    webhooks_reset = webhooks_subparsers.add_parser("reset", help="Re-register one webhook per configured board")
    _add_common(webhooks_reset)
    webhooks_reset.add_argument("--callback-url", default=None, help="Override the configured callback URL")
    webhooks_reset.add_argument(
        "--all",
        action="store_true",
        default=False,
        help="Delete every webhook of the token, not just the ones pointing at the callback URL",
    )

    resolve_parser = subparsers.add_parser("resolve-boards", help="Print full board ids for short ids")
    _add_common(resolve_parser)
    resolve_parser.add_argument("short_ids", nargs="+", metavar="SHORT_ID", help="Short id from a board URL")

    clean_parser = subparsers.add_parser("clean", help="Delete every card on all configured boards")
    _add_common(clean_parser)
    _add_mode(clean_parser)

    return parser


__all__ = ["DEFAULT_CONFIG", "build_parser"]
