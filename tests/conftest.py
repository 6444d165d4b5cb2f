"""Shared test fixtures for trellomirror tests."""

from __future__ import annotations

import pytest

from tests.fakes.board_client import FakeBoardClient
from tests.fakes.boards import AGGREGATE_BOARD, NOW, PRIVE, TRACKED, WERK
from trellomirror.contracts.config import MirrorConfig, RetryConfig
from trellomirror.engine.retry import RetryPolicy
from trellomirror.sdk import TrelloMirror


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def config() -> MirrorConfig:
    return MirrorConfig(
        source_boards=[
            {"id": PRIVE, "name": "prive"},
            {"id": WERK, "name": "werk", "label": "Work"},
        ],
        aggregate_board=AGGREGATE_BOARD,
        label_colors={"prive": "green"},
    )


@pytest.fixture
def client() -> FakeBoardClient:
    """Two source boards plus the aggregate board, each with every tracked list."""
    client = FakeBoardClient()
    client.add_board(PRIVE, "prive", [*TRACKED, "Backlog"])
    client.add_board(WERK, "werk", [*TRACKED, "Backlog"])
    client.add_board(AGGREGATE_BOARD, "Verzamelbord", TRACKED)
    return client


@pytest.fixture
def retry(config: MirrorConfig) -> RetryPolicy:
    return RetryPolicy(RetryConfig(max_attempts=config.retry.max_attempts, base_delay=0), sleep=_no_sleep)


@pytest.fixture
def mirror(client: FakeBoardClient, config: MirrorConfig, retry: RetryPolicy) -> TrelloMirror:
    return TrelloMirror(client=client, config=config, retry=retry, clock=lambda: NOW)
