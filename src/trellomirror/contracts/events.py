"""Inbound webhook action contracts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")

CONSUMED_ACTION_TYPES = frozenset({"createCard", "updateCard", "addLabelToCard", "deleteCard"})


class ActionBoard(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""


class ActionList(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""


class ActionCard(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    desc: str | None = None
    list_id: str | None = Field(default=None, alias="idList")


class ActionData(BaseModel):
    model_config = _MODEL_CONFIG

    board: ActionBoard | None = None
    card: ActionCard | None = None
    list_: ActionList | None = Field(default=None, alias="list")
    list_after: ActionList | None = Field(default=None, alias="listAfter")
    list_before: ActionList | None = Field(default=None, alias="listBefore")

    @property
    def target_list(self) -> ActionList | None:
        return self.list_after or self.list_


class ActionMember(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = ""
    username: str = ""


class WebhookAction(BaseModel):
    model_config = _MODEL_CONFIG

    id: str | None = None
    type: str
    data: ActionData = Field(default_factory=ActionData)
    member_creator: ActionMember | None = Field(default=None, alias="memberCreator")


class WebhookPayload(BaseModel):
    model_config = _MODEL_CONFIG

    action: WebhookAction | None = None
