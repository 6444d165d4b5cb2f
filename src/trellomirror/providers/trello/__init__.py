"""Trello REST client."""

from trellomirror.providers.trello._rate_budget import RateBudget
from trellomirror.providers.trello.client import DEFAULT_BASE_URL, TrelloClient

__all__ = ["DEFAULT_BASE_URL", "RateBudget", "TrelloClient"]
