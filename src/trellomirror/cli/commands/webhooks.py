"""Webhook registration commands."""

from __future__ import annotations

import argparse

from trellomirror.cli.common import format_comma_or_none
from trellomirror.contracts.board import Webhook
from trellomirror.webhooks import WebhookResetResult


def format_webhook_list(webhooks: list[Webhook]) -> str:
    if not webhooks:
        return "No webhooks registered"
    lines = [f"{len(webhooks)} webhook(s):"]
    for webhook in webhooks:
        state = "active" if webhook.active else "inactive"
        lines.append(f"  {webhook.id}  {webhook.model_id}  {webhook.callback_url}  ({state})")
    return "\n".join(lines)


def format_reset_summary(result: WebhookResetResult) -> str:
    lines = [
        "",
        "trellomirror - webhooks reset",
        "",
        f"  Deleted:   {len(result.deleted)}",
        f"  Created:   {len(result.created)}",
    ]
    if result.failed_boards:
        lines.append(f"  Failed:    {format_comma_or_none(result.failed_boards)}")
    lines.append("")
    return "\n".join(lines)


async def run_webhooks(args: argparse.Namespace) -> WebhookResetResult | list[Webhook]:
    import trellomirror.cli as cli

    config = cli.load_config(args.config)
    mirror = await cli.TrelloMirror.from_config(config)
    async with mirror:
        if args.webhooks_command == "list":
            webhooks = await cli.list_webhooks(mirror.client)
            print(format_webhook_list(webhooks))
            return webhooks
        result = await cli.reset_webhooks(
            mirror.client,
            config,
            callback_url=args.callback_url,
            delete_all=args.all,
        )
    print(format_reset_summary(result))
    return result


__all__ = ["format_reset_summary", "format_webhook_list", "run_webhooks"]
