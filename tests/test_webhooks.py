from __future__ import annotations

import pytest

from tests.fakes.board_client import FakeBoardClient
from tests.fakes.boards import AGGREGATE_BOARD, PRIVE, WERK
from trellomirror.contracts.config import MirrorConfig
from trellomirror.contracts.exceptions import ConfigError, RemoteApiError
from trellomirror.webhooks import list_webhooks, reset_webhooks, watched_board_ids

CALLBACK = "https://mirror.example.test/webhook/card-moved"


def test_watched_boards_include_aggregate(config: MirrorConfig) -> None:
    assert watched_board_ids(config) == [PRIVE, WERK, AGGREGATE_BOARD]


@pytest.mark.asyncio
async def test_reset_replaces_only_own_webhooks(client: FakeBoardClient, config: MirrorConfig) -> None:
    own = await client.create_webhook(PRIVE, CALLBACK, "old")
    foreign = await client.create_webhook(PRIVE, "https://someone-else", "keep")

    result = await reset_webhooks(client, config, callback_url=CALLBACK)

    assert result.deleted == [own.id]
    assert len(result.created) == 3
    assert foreign.id in client.webhooks
    assert {webhook.model_id for webhook in await list_webhooks(client) if webhook.callback_url == CALLBACK} == {
        PRIVE,
        WERK,
        AGGREGATE_BOARD,
    }


@pytest.mark.asyncio
async def test_reset_all_deletes_every_webhook(client: FakeBoardClient, config: MirrorConfig) -> None:
    await client.create_webhook(PRIVE, "https://someone-else", "gone")

    result = await reset_webhooks(client, config, callback_url=CALLBACK, delete_all=True)

    assert len(result.deleted) == 1
    assert all(webhook.callback_url == CALLBACK for webhook in client.webhooks.values())


@pytest.mark.asyncio
async def test_reset_reports_failed_boards(client: FakeBoardClient, config: MirrorConfig) -> None:
    client.fail("create_webhook", RemoteApiError("invalid model", status=400, body="invalid value for idModel"))

    result = await reset_webhooks(client, config, callback_url=CALLBACK)

    assert result.failed_boards == [PRIVE]
    assert len(result.created) == 2


@pytest.mark.asyncio
async def test_reset_uses_configured_callback(client: FakeBoardClient, config: MirrorConfig) -> None:
    configured = config.model_copy(update={"callback_url": CALLBACK})

    result = await reset_webhooks(client, configured)

    assert all(client.webhooks[webhook_id].callback_url == CALLBACK for webhook_id in result.created)


@pytest.mark.asyncio
async def test_reset_without_callback_is_a_config_error(client: FakeBoardClient, config: MirrorConfig) -> None:
    with pytest.raises(ConfigError, match="callback_url"):
        await reset_webhooks(client, config)
