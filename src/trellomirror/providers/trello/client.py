"""Trello REST client."""

from __future__ import annotations

import json as jsonlib
import logging
from datetime import datetime
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from trellomirror.contracts.board import Board, BoardList, Card, CreateCardInput, Label, UpdateCardInput, Webhook
from trellomirror.contracts.client import BoardClient
from trellomirror.contracts.exceptions import NotFoundError, RateLimitedError, RemoteApiError
from trellomirror.providers.trello._rate_budget import RateBudget

_LOG = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.trello.com/1"

ModelT = TypeVar("ModelT", bound=BaseModel)

_UPDATE_FIELDS = {
    "list_id": "idList",
    "name": "name",
    "desc": "desc",
    "due": "due",
    "label_ids": "idLabels",
}


class TrelloClient(BoardClient):
    """Thin async client over the Trello REST API.

    Every call issues exactly one HTTP request, after taking a slot from the
    request budget. Non-2xx answers raise :class:`RemoteApiError`; 429 and 404 raise
    their dedicated subclasses. A 2xx payload the models reject also raises
    :class:`RemoteApiError`. Nothing is retried here.
    """

    def __init__(
        self,
        *,
        api_key: str,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        budget: RateBudget | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._budget = budget or RateBudget()
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TrelloClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                transport=self._transport,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_board(self, board_id: str) -> Board:
        return self._parse(Board, await self._request("GET", f"/boards/{board_id}"))

    async def get_lists(self, board_id: str) -> list[BoardList]:
        payload = await self._request("GET", f"/boards/{board_id}/lists")
        return [self._parse(BoardList, node) for node in self._require_list(payload)]

    async def get_list(self, list_id: str) -> BoardList:
        return self._parse(BoardList, await self._request("GET", f"/lists/{list_id}"))

    async def get_cards(self, board_id: str) -> list[Card]:
        payload = await self._request("GET", f"/boards/{board_id}/cards")
        return [self._parse(Card, node) for node in self._require_list(payload)]

    async def get_list_cards(self, list_id: str) -> list[Card]:
        payload = await self._request("GET", f"/lists/{list_id}/cards")
        return [self._parse(Card, node) for node in self._require_list(payload)]

    async def get_card(self, card_id: str) -> Card:
        return self._parse(Card, await self._request("GET", f"/cards/{card_id}"))

    async def get_labels(self, board_id: str) -> list[Label]:
        payload = await self._request("GET", f"/boards/{board_id}/labels")
        return [self._parse(Label, node) for node in self._require_list(payload)]

    async def create_label(self, board_id: str, name: str, color: str) -> Label:
        payload = await self._request("POST", f"/boards/{board_id}/labels", json={"name": name, "color": color})
        return self._parse(Label, payload)

    async def create_card(self, list_id: str, input: CreateCardInput) -> Card:
        body: dict[str, Any] = {
            "idList": list_id,
            "name": input.name,
            "desc": input.desc,
            "due": _format_due(input.due),
            "idLabels": list(input.label_ids),
        }
        return self._parse(Card, await self._request("POST", "/cards", json=body))

    async def update_card(self, card_id: str, input: UpdateCardInput) -> Card:
        body: dict[str, Any] = {}
        for field_name in input.model_fields_set:
            value = getattr(input, field_name)
            if field_name == "due":
                value = _format_due(value)
            elif field_name == "label_ids" and value is not None:
                value = list(value)
            body[_UPDATE_FIELDS[field_name]] = value
        return self._parse(Card, await self._request("PUT", f"/cards/{card_id}", json=body))

    async def delete_card(self, card_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}")

    async def list_webhooks(self) -> list[Webhook]:
        payload = await self._request("GET", f"/tokens/{self._token}/webhooks")
        return [self._parse(Webhook, node) for node in self._require_list(payload)]

    async def create_webhook(self, board_id: str, callback_url: str, description: str) -> Webhook:
        body = {"description": description, "callbackURL": callback_url, "idModel": board_id}
        return self._parse(Webhook, await self._request("POST", "/webhooks", json=body))

    async def delete_webhook(self, webhook_id: str) -> None:
        await self._request("DELETE", f"/webhooks/{webhook_id}")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> Any:
        if self._client is None:
            raise RemoteApiError("TrelloClient used outside of 'async with'")

        await self._budget.acquire()
        params = {"key": self._api_key, "token": self._token}
        _LOG.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.TransportError as exc:
            raise RemoteApiError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 429:
            raise RateLimitedError(f"{method} {path} rate limited", status=429, body=response.text)
        if response.status_code == 404:
            raise NotFoundError(f"{method} {path} not found", status=404, body=response.text)
        if not response.is_success:
            raise RemoteApiError(
                f"{method} {path} failed with HTTP {response.status_code}",
                status=response.status_code,
                body=response.text,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteApiError(
                f"{method} {path} returned invalid JSON",
                status=response.status_code,
                body=response.text,
            ) from exc

    @staticmethod
    def _parse(model: type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise RemoteApiError(
                f"unexpected {model.__name__} payload: {exc.error_count()} validation error(s)",
                body=jsonlib.dumps(payload, default=str),
            ) from exc

    @staticmethod
    def _require_list(payload: Any) -> list[Any]:
        if not isinstance(payload, list):
            raise RemoteApiError(f"expected a JSON array, got {type(payload).__name__}")
        return payload


def _format_due(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
