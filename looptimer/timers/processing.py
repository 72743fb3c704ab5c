"""Config transformations applied around AI generation and preference resets."""

from __future__ import annotations

from typing import Any

from looptimer.timers.models import AdvancedConfig, ColorSettings, LoopGroup, WorkoutItem


def clear_item_level_colors(items: list[WorkoutItem]) -> list[WorkoutItem]:
    """Drop per-item colour overrides so timer-level colours apply everywhere."""
    cleared: list[WorkoutItem] = []
    for item in items:
        if isinstance(item, LoopGroup):
            cleared.append(item.model_copy(update={"color": None, "items": clear_item_level_colors(item.items)}))
        else:
            cleared.append(item.model_copy(update={"color": None}))
    return cleared


def _strip_item(item: WorkoutItem) -> WorkoutItem:
    if isinstance(item, LoopGroup):
        return item.model_copy(update={"color": None, "items": [_strip_item(child) for child in item.items]})
    return item.model_copy(update={"color": None, "sound": None})


def strip_colors_and_sounds(config: AdvancedConfig) -> AdvancedConfig:
    """Keep only the workout structure: no colours, sounds or timer settings."""
    return AdvancedConfig(items=[_strip_item(item) for item in config.items])


def merge_user_preferences(items: list[WorkoutItem], preferences: dict[str, Any]) -> AdvancedConfig:
    """Attach a user's colours, alarm and voice setting to bare items.

    Args:
        items: Workout items, usually fresh from AI generation
        preferences: Serialized preferences with ``colors``, ``defaultAlarm``
            and ``isSpeakNames`` keys

    Returns:
        Complete config ready to be saved or played
    """
    return AdvancedConfig(
        items=items,
        colors=ColorSettings.model_validate(preferences["colors"]),
        default_alarm=preferences["defaultAlarm"],
        speak_names=preferences["isSpeakNames"],
    )
