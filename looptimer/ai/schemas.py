from __future__ import annotations

from typing import Any

from looptimer.timers.models import AdvancedConfig
from looptimer.timers.schemas import ApiModel


class GenerateWorkoutRequest(ApiModel):
    prompt: str
    current_config: AdvancedConfig | None = None


class GenerateWorkoutResponse(ApiModel):
    config: dict[str, Any]
    attempt: int
