"""Board, list, card and label contracts.

Models accept the remote API's JSON field names (``idList``, ``idBoard``, ...) through
aliases and the snake_case names everywhere else.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


class Board(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    short_link: str | None = Field(default=None, alias="shortLink")


class BoardList(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str
    board_id: str | None = Field(default=None, alias="idBoard")
    closed: bool = False


class Label(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    color: str | None = None


class Card(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    desc: str | None = None
    due: datetime | None = None
    list_id: str | None = Field(default=None, alias="idList")
    board_id: str | None = Field(default=None, alias="idBoard")
    labels: list[Label] = Field(default_factory=list)

    @property
    def label_ids(self) -> list[str]:
        return [label.id for label in self.labels]


class Webhook(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    model_id: str = Field(default="", alias="idModel")
    callback_url: str = Field(default="", alias="callbackURL")
    description: str = ""
    active: bool = True


class CreateCardInput(BaseModel):
    name: str
    desc: str = ""
    due: datetime | None = None
    label_ids: list[str] = Field(default_factory=list)


class UpdateCardInput(BaseModel):
    """Partial card update. Only fields that are set are sent to the remote API."""

    list_id: str | None = None
    name: str | None = None
    desc: str | None = None
    due: datetime | None = None
    label_ids: list[str] | None = None
