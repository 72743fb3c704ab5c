"""Request/response schemas for the timers API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from looptimer.timers.constants import DEFAULT_CATEGORY, TIMER_NAME_MAX_LENGTH
from looptimer.timers.models import AdvancedConfig


class ApiModel(BaseModel):
    """camelCase JSON, snake_case attributes, readable from ORM rows."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


TimerName = Annotated[str, BeforeValidator(_strip), StringConstraints(min_length=1, max_length=TIMER_NAME_MAX_LENGTH)]


class TimerCreate(ApiModel):
    name: TimerName
    data: AdvancedConfig
    category: str = DEFAULT_CATEGORY
    icon: str | None = None
    color: str | None = None
    description: str | None = None


class TimerUpdate(ApiModel):
    name: TimerName | None = None
    data: AdvancedConfig | None = None
    category: str | None = None
    icon: str | None = None
    color: str | None = None
    description: str | None = None


class TimerResponse(ApiModel):
    id: str
    name: str
    data: AdvancedConfig
    category: str
    icon: str | None = None
    color: str | None = None
    description: str | None = None
    total_seconds: int
    created_at: datetime
    updated_at: datetime


class TimerSummary(ApiModel):
    """List entry: everything but the tree itself."""

    id: str
    name: str
    category: str
    icon: str | None = None
    color: str | None = None
    description: str | None = None
    total_seconds: int
    updated_at: datetime


class DuplicateTimerRequest(ApiModel):
    name: TimerName | None = None
