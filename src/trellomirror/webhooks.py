"""Webhook registration maintenance."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from trellomirror.contracts.board import Webhook
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import MirrorConfig
from trellomirror.contracts.exceptions import ConfigError, RemoteApiError

_LOG = logging.getLogger(__name__)


class WebhookResetResult(BaseModel):
    deleted: list[str] = Field(default_factory=list)
    created: list[str] = Field(default_factory=list)
    failed_boards: list[str] = Field(default_factory=list)


def watched_board_ids(config: MirrorConfig) -> list[str]:
    return [*(board.id for board in config.source_boards), config.aggregate_board]


async def list_webhooks(client: BoardClient) -> list[Webhook]:
    return await client.list_webhooks()


async def reset_webhooks(
    client: BoardClient,
    config: MirrorConfig,
    *,
    callback_url: str | None = None,
    delete_all: bool = False,
) -> WebhookResetResult:
    """Delete this service's webhooks and register one per watched board.

    Only webhooks pointing at *callback_url* are deleted unless *delete_all* is set.
    Boards whose registration fails are reported, not raised.
    """
    url = callback_url or config.callback_url
    if not url:
        raise ConfigError("callback_url is required to register webhooks")

    result = WebhookResetResult()
    existing = await client.list_webhooks()
    _LOG.info("Found %d existing webhook(s)", len(existing))
    for webhook in existing:
        if not delete_all and webhook.callback_url != url:
            continue
        await client.delete_webhook(webhook.id)
        result.deleted.append(webhook.id)

    for board_id in watched_board_ids(config):
        try:
            created = await client.create_webhook(board_id, url, f"Card movement webhook for board {board_id}")
        except RemoteApiError as exc:
            _LOG.error("Error creating webhook for board %s: %s %s", board_id, exc, exc.body)
            result.failed_boards.append(board_id)
            continue
        result.created.append(created.id)

    _LOG.info(
        "Webhook setup complete, created %d of %d",
        len(result.created),
        len(result.created) + len(result.failed_boards),
    )
    return result
