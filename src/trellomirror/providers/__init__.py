"""Board client implementations and factory."""

from trellomirror.providers.dry_run import DryRunBoardClient
from trellomirror.providers.factory import create_client
from trellomirror.providers.trello import RateBudget, TrelloClient

__all__ = ["DryRunBoardClient", "RateBudget", "TrelloClient", "create_client"]
