"""Request/response schemas for the editor API."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from looptimer.editor.operations import EditorAction
from looptimer.timers.models import AdvancedConfig, IntervalType
from looptimer.timers.schemas import ApiModel


class EditorState(ApiModel):
    config: AdvancedConfig
    next_id: int | None = Field(default=None, ge=1)


class OperationRequest(EditorState):
    action: EditorAction
    item_id: str | None = None
    field: str | None = None
    value: Any = None
    interval_type: IntervalType = IntervalType.WORK


class DropRequest(EditorState):
    active_id: str
    over_id: str | None = None


class EditorResponse(ApiModel):
    config: AdvancedConfig
    next_id: int
    changed: bool
    total_seconds: int


class ParseTimeResponse(ApiModel):
    seconds: int
    formatted: str
