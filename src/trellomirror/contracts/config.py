"""Configuration contracts."""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, model_validator


class BoardRef(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    label: str | None = None
    """Overrides the board name in the ``Origin:<name>`` label when set."""

    model_config = {"frozen": True}

    @property
    def origin_label_name(self) -> str:
        return f"Origin:{self.label or self.name}"


class UrgencyTier(BaseModel):
    name: str
    max_days: int

    model_config = {"frozen": True}


class RateLimitConfig(BaseModel):
    limit: int = Field(default=100, ge=1)
    window: float = Field(default=10.0, gt=0)

    model_config = {"frozen": True}


class RetryConfig(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0)

    model_config = {"frozen": True}


def _default_tiers() -> list[UrgencyTier]:
    return [
        UrgencyTier(name="Today", max_days=0),
        UrgencyTier(name="Next 7 days", max_days=7),
        UrgencyTier(name="Next 30 days", max_days=30),
    ]


class MirrorConfig(BaseModel):
    source_boards: list[BoardRef] = Field(min_length=1)
    aggregate_board: str = Field(min_length=1)
    tracked_lists: list[str] = Field(
        default_factory=lambda: ["Inbox", "Next 30 days", "Next 7 days", "Today", "Done"],
    )
    inbox_list: str | None = "Inbox"
    label_colors: dict[str, str] = Field(default_factory=dict)
    default_label_color: str = "blue"
    timezone: str = "UTC"
    urgency_tiers: list[UrgencyTier] = Field(default_factory=_default_tiers)

    auth: str = "env"
    api_key: str | None = None
    token: str | None = None
    api_secret: str | None = None
    base_url: str = "https://api.trello.com/1"
    callback_url: str | None = None

    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    lock_timeout: float = Field(default=5.0, gt=0)
    operation_timeout: float = Field(default=15.0, gt=0)
    sweep_interval: float = Field(default=6 * 60 * 60, gt=0)
    dedup_window: float = Field(default=300.0, gt=0)
    dedup_max_entries: int = Field(default=10_000, ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_boards(self) -> MirrorConfig:
        ids = [board.id for board in self.source_boards]
        names = [board.name for board in self.source_boards]
        if len(set(ids)) != len(ids):
            raise ValueError("source_boards ids must be unique")
        if len(set(names)) != len(names):
            raise ValueError("source_boards names must be unique")
        if self.aggregate_board in ids:
            raise ValueError("aggregate_board cannot also be a source board")
        return self

    @model_validator(mode="after")
    def validate_tiers(self) -> MirrorConfig:
        thresholds = [tier.max_days for tier in self.urgency_tiers]
        if thresholds != sorted(thresholds):
            raise ValueError("urgency_tiers must be ordered by ascending max_days")
        untracked = [tier.name for tier in self.urgency_tiers if tier.name not in self.tracked_lists]
        if untracked:
            raise ValueError(f"urgency tier lists must be tracked: {', '.join(untracked)}")
        if self.inbox_list is not None and self.inbox_list not in self.tracked_lists:
            raise ValueError(f"inbox_list '{self.inbox_list}' must be a tracked list")
        return self

    @model_validator(mode="after")
    def validate_auth(self) -> MirrorConfig:
        if self.auth not in {"env", "static"}:
            raise ValueError("auth must be one of: env, static")
        if self.auth == "static" and not ((self.api_key or "").strip() and (self.token or "").strip()):
            raise ValueError("static auth requires non-empty api_key and token")
        if self.auth == "env" and (self.api_key or self.token or self.api_secret):
            raise ValueError("api_key/token/api_secret must be unset when auth is 'env'")
        return self

    @model_validator(mode="after")
    def validate_timezone(self) -> MirrorConfig:
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {self.timezone}") from exc
        return self

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def source_board_by_id(self, board_id: str) -> BoardRef | None:
        return next((board for board in self.source_boards if board.id == board_id), None)

    def source_board_by_name(self, name: str) -> BoardRef | None:
        return next((board for board in self.source_boards if board.name == name), None)

    def is_tracked(self, list_name: str) -> bool:
        return list_name in self.tracked_lists

    def label_color(self, board: BoardRef) -> str:
        return self.label_colors.get(board.name, self.default_label_color)
