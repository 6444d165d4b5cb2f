"""Board client factory."""

from __future__ import annotations

from trellomirror.auth.base import Credentials
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.config import MirrorConfig
from trellomirror.providers.dry_run import DryRunBoardClient
from trellomirror.providers.trello import RateBudget, TrelloClient


def create_client(config: MirrorConfig, credentials: Credentials, *, dry_run: bool = False) -> BoardClient:
    budget = RateBudget(limit=config.rate_limit.limit, window=config.rate_limit.window)
    client: BoardClient = TrelloClient(
        api_key=credentials.api_key,
        token=credentials.token,
        base_url=config.base_url,
        budget=budget,
    )
    if dry_run:
        return DryRunBoardClient(client)
    return client
