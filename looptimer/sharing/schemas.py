from __future__ import annotations

from datetime import datetime

from pydantic import Field, model_validator

from looptimer.timers.models import AdvancedConfig
from looptimer.timers.schemas import ApiModel, TimerName


class SharedTimerCreate(ApiModel):
    """Share either a saved timer (``timerId``) or an unsaved config."""

    timer_id: str | None = None
    name: TimerName | None = None
    data: AdvancedConfig | None = None
    expires_in_days: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_source(self) -> SharedTimerCreate:
        if self.timer_id is None and (self.name is None or self.data is None):
            raise ValueError("Provide timerId, or both name and data")
        return self


class SharedTimerResponse(ApiModel):
    id: str
    name: str
    data: AdvancedConfig
    expires_at: datetime | None = None
    view_count: int
    created_at: datetime


class CloneSharedTimerRequest(ApiModel):
    name: TimerName | None = None
