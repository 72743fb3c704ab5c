from __future__ import annotations

from looptimer.timers.models import AdvancedConfig
from looptimer.timers.schemas import ApiModel


class PreferencesUpdate(ApiModel):
    """Partial update; omitted fields keep their stored value."""

    colors: dict[str, str] | None = None
    default_alarm: str | None = None
    is_sound: bool | None = None
    is_speak_names: bool | None = None


class PreferencesResponse(ApiModel):
    colors: dict[str, str]
    default_alarm: str
    is_sound: bool
    is_speak_names: bool


class ApplyPreferencesRequest(ApiModel):
    data: AdvancedConfig
