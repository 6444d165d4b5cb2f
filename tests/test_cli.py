from __future__ import annotations

import argparse
from datetime import timedelta
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI

import trellomirror.cli as cli
from tests.fakes.board_client import FakeBoardClient
from tests.fakes.boards import AGGREGATE_BOARD, NOW, PRIVE, WERK
from trellomirror.auth import Credentials
from trellomirror.cli import _format_clean_summary, _format_sweep_summary, build_parser, main
from trellomirror.contracts.config import MirrorConfig
from trellomirror.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    LockTimeoutError,
    RemoteApiError,
    RetryExhaustedError,
    SyncError,
)
from trellomirror.contracts.sync import SweepResult
from trellomirror.engine.retry import RetryPolicy
from trellomirror.maintenance import CleanResult
from trellomirror.providers import DryRunBoardClient
from trellomirror.sdk import TrelloMirror


@pytest.fixture
def wired(
    monkeypatch: pytest.MonkeyPatch,
    client: FakeBoardClient,
    config: MirrorConfig,
    retry: RetryPolicy,
) -> dict[str, Any]:
    """Route the CLI's config loading and SDK construction to in-memory fakes."""
    built: dict[str, Any] = {}

    async def from_config(loaded: MirrorConfig, *, dry_run: bool = False) -> TrelloMirror:
        board_client = DryRunBoardClient(client) if dry_run else client
        built["mirror"] = TrelloMirror(client=board_client, config=loaded, retry=retry, clock=lambda: NOW)
        return built["mirror"]

    monkeypatch.setattr(cli, "load_config", lambda path: config)
    monkeypatch.setattr(cli, "TrelloMirror", SimpleNamespace(from_config=from_config))
    return built


def _args(command: str, **values: Any) -> argparse.Namespace:
    defaults: dict[str, Any] = {"command": command, "config": "./trellomirror.json", "verbose": True}
    defaults.update(values)
    return argparse.Namespace(**defaults)


# ----------------------------------------------------------------------
# Parser
# ----------------------------------------------------------------------


def test_parser_requires_mode_for_sweep() -> None:
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["sweep"])

    assert exc_info.value.code == 2


def test_parser_serve_defaults() -> None:
    args = build_parser().parse_args(["serve"])

    assert args.host == "0.0.0.0"
    assert args.port == 3000
    assert args.no_scheduler is False
    assert args.config == "./trellomirror.json"


def test_parser_webhooks_reset_options() -> None:
    args = build_parser().parse_args(["webhooks", "reset", "--callback-url", "https://cb", "--all", "-v"])

    assert args.webhooks_command == "reset"
    assert args.callback_url == "https://cb"
    assert args.all is True
    assert args.verbose is True


def test_parser_resolve_boards_takes_short_ids() -> None:
    args = build_parser().parse_args(["resolve-boards", "9AMS4GJO", "x6QQfoXY"])

    assert args.short_ids == ["9AMS4GJO", "x6QQfoXY"]


# ----------------------------------------------------------------------
# Exit codes
# ----------------------------------------------------------------------


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ConfigError("bad config"), 3),
        (AuthenticationError("no token"), 4),
        (RemoteApiError("boom", status=500), 4),
        (RetryExhaustedError("slow", attempts=3), 4),
        (SyncError("sync failed"), 5),
        (LockTimeoutError("card-1", 5.0), 5),
        (RuntimeError("unexpected"), 1),
    ],
)
def test_main_maps_errors_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    error: Exception,
    code: int,
) -> None:
    async def failing(args: argparse.Namespace) -> None:
        raise error

    monkeypatch.setattr(cli, "_run_sweep", failing)

    assert main(["sweep", "--apply"]) == code
    assert f"error: {error}" in capsys.readouterr().err


def test_main_dispatches_each_command(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    async def record(args: argparse.Namespace) -> None:
        seen.append(args.command)

    monkeypatch.setattr(cli, "_run_webhooks", record)
    monkeypatch.setattr(cli, "_run_resolve_boards", record)
    monkeypatch.setattr(cli, "_run_clean", record)
    monkeypatch.setattr(cli, "_run_serve", lambda args: seen.append(args.command))
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: None)

    assert main(["webhooks", "list"]) == 0
    assert main(["resolve-boards", "abc"]) == 0
    assert main(["clean", "--dry-run"]) == 0
    assert main(["serve", "--port", "8080"]) == 0
    assert seen == ["webhooks", "resolve-boards", "clean", "serve"]


def test_main_verbose_enables_debug_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []

    async def noop(args: argparse.Namespace) -> None:
        return None

    monkeypatch.setattr(cli, "_run_sweep", noop)
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    assert main(["sweep", "--dry-run", "--verbose"]) == 0
    assert calls[0]["level"] == cli.logging.DEBUG


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_run_sweep_prints_summary(
    wired: dict[str, Any],
    client: FakeBoardClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    card = client.add_card(f"{PRIVE}/Inbox", "Dentist", due=NOW + timedelta(days=2))

    result = await cli._run_sweep(_args("sweep", dry_run=False, apply=True))

    assert result.cards_moved == 1
    assert client.cards[card.id].list_id == f"{PRIVE}/Next 7 days"
    out = capsys.readouterr().out
    assert "sweep complete (apply)" in out
    assert "Moved:     1" in out


@pytest.mark.asyncio
async def test_run_sweep_dry_run_with_progress_bar(
    wired: dict[str, Any],
    client: FakeBoardClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    card = client.add_card(f"{PRIVE}/Inbox", "Dentist", due=NOW)

    result = await cli._run_sweep(_args("sweep", dry_run=True, apply=False, verbose=False))

    assert result.dry_run is True
    assert client.cards[card.id].list_id == f"{PRIVE}/Inbox"
    assert "[dry-run] No changes were made" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_webhooks_list_and_reset(
    wired: dict[str, Any],
    client: FakeBoardClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    await client.create_webhook(PRIVE, "https://old", "stale")

    listed = await cli._run_webhooks(_args("webhooks", webhooks_command="list"))
    reset = await cli._run_webhooks(
        _args("webhooks", webhooks_command="reset", callback_url="https://new", all=True),
    )

    assert len(listed) == 1
    assert len(reset.deleted) == 1
    assert sorted(webhook.model_id for webhook in client.webhooks.values()) == sorted(
        [PRIVE, WERK, AGGREGATE_BOARD]
    )
    out = capsys.readouterr().out
    assert "1 webhook(s):" in out
    assert "Created:   3" in out


@pytest.mark.asyncio
async def test_run_resolve_boards(
    wired: dict[str, Any],
    client: FakeBoardClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    client.add_board("67aca823", "prive-full", short_link="9AMS4GJO")

    boards = await cli._run_resolve_boards(_args("resolve-boards", short_ids=["9AMS4GJO", "missing"]))

    assert list(boards) == ["9AMS4GJO"]
    out = capsys.readouterr().out
    assert '9AMS4GJO: {"id": "67aca823", "name": "prive-full"}' in out
    assert "missing: not found" in out


@pytest.mark.asyncio
async def test_run_clean_dry_run_keeps_cards(
    wired: dict[str, Any],
    client: FakeBoardClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    client.add_card(f"{PRIVE}/Today", "One")
    client.add_card(f"{AGGREGATE_BOARD}/Done", "Two")

    result = await cli._run_clean(_args("clean", dry_run=True, apply=False))

    assert result.dry_run is True
    assert result.cards_deleted == 2
    assert len(client.cards) == 2
    assert "Would delete: 2 card(s)" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_clean_apply_deletes_cards(wired: dict[str, Any], client: FakeBoardClient) -> None:
    client.add_card(f"{PRIVE}/Today", "One")
    client.add_card(f"{WERK}/Backlog", "Two")

    result = await cli._run_clean(_args("clean", dry_run=False, apply=True))

    assert result.dry_run is False
    assert result.cards_deleted == 2
    assert client.cards == {}


def test_run_serve_starts_uvicorn(monkeypatch: pytest.MonkeyPatch, config: MirrorConfig) -> None:
    runs: list[dict[str, Any]] = []

    class _Resolver:
        async def resolve(self) -> Credentials:
            return Credentials(api_key="k", token="t", api_secret="s")

    monkeypatch.setattr(cli, "load_config", lambda path: config)
    monkeypatch.setattr(cli, "create_credential_resolver", lambda loaded: _Resolver())
    monkeypatch.setattr(cli, "uvicorn", SimpleNamespace(run=lambda app, **kwargs: runs.append({"app": app, **kwargs})))

    cli._run_serve(_args("serve", host="127.0.0.1", port=8080, no_scheduler=True, verbose=False))

    assert isinstance(runs[0]["app"], FastAPI)
    assert runs[0]["host"] == "127.0.0.1"
    assert runs[0]["port"] == 8080
    assert runs[0]["log_level"] == "info"


# ----------------------------------------------------------------------
# Formatting
# ----------------------------------------------------------------------


def test_format_sweep_summary_lists_failures() -> None:
    text = _format_sweep_summary(
        SweepResult(boards_processed=1, cards_examined=4, cards_moved=2, failed_boards=["b2"], failed_cards=["c9"])
    )

    assert "sweep complete (apply)" in text
    assert "4 examined" in text
    assert "Failed boards: b2" in text
    assert "Failed cards:  c9" in text
    assert "[dry-run]" not in text


def test_format_clean_summary_apply() -> None:
    text = _format_clean_summary(CleanResult(cards_deleted=3))

    assert "clean complete (apply)" in text
    assert "Deleted: 3 card(s)" in text
