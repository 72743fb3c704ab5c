"""Per-user display preferences.

Preferences hold the colour scheme, default alarm and voice settings that are
applied to new timers. A user without a stored row gets the defaults, which
are persisted on first read.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from looptimer.core.errors import InvalidPreferencesError
from looptimer.db.models import UserPreferences
from looptimer.preferences.schemas import PreferencesResponse, PreferencesUpdate
from looptimer.timers.constants import (
    COLOR_KEYS,
    DEFAULT_ALARM,
    DEFAULT_COLORS,
    DEFAULT_IS_SOUND,
    DEFAULT_SPEAK_NAMES,
    VALID_ALARMS,
)
from looptimer.timers.models import AdvancedConfig
from looptimer.timers.processing import clear_item_level_colors, merge_user_preferences
from looptimer.timers.validation import is_valid_hex_color


def default_preferences() -> PreferencesResponse:
    return PreferencesResponse(
        colors=dict(DEFAULT_COLORS),
        default_alarm=DEFAULT_ALARM,
        is_sound=DEFAULT_IS_SOUND,
        is_speak_names=DEFAULT_SPEAK_NAMES,
    )


def _validate(update: PreferencesUpdate) -> None:
    """Reject incomplete colour sets and unknown alarms.

    Raises:
        InvalidPreferencesError: With one detail per problem
    """
    errors: list[str] = []
    if update.colors is not None:
        for key in COLOR_KEYS:
            value = update.colors.get(key)
            if not value:
                errors.append(f"Missing color for {key}")
            elif not is_valid_hex_color(value):
                errors.append(f"Invalid hex color for {key}: {value}")
    if update.default_alarm is not None and update.default_alarm not in VALID_ALARMS:
        errors.append(f"Invalid defaultAlarm: {update.default_alarm}")
    if errors:
        raise InvalidPreferencesError("Invalid preferences", errors)


def _get_or_create(session: Session, user_id: str) -> UserPreferences:
    row = session.get(UserPreferences, user_id)
    if row is None:
        defaults = default_preferences()
        row = UserPreferences(
            user_id=user_id,
            colors=defaults.colors,
            default_alarm=defaults.default_alarm,
            is_sound=defaults.is_sound,
            is_speak_names=defaults.is_speak_names,
        )
        session.add(row)
        session.flush()
        logger.info(f"Created default preferences for user_id={user_id}")
    return row


def get_preferences(session: Session, user_id: str) -> PreferencesResponse:
    return PreferencesResponse.model_validate(_get_or_create(session, user_id))


def update_preferences(session: Session, user_id: str, update: PreferencesUpdate) -> PreferencesResponse:
    """Validate and store the fields present in ``update``.

    Raises:
        InvalidPreferencesError: If colours or alarm are rejected
    """
    _validate(update)
    row = _get_or_create(session, user_id)

    if update.colors is not None:
        row.colors = {key: update.colors[key] for key in COLOR_KEYS}
    if update.default_alarm is not None:
        row.default_alarm = update.default_alarm
    if update.is_sound is not None:
        row.is_sound = update.is_sound
    if update.is_speak_names is not None:
        row.is_speak_names = update.is_speak_names

    session.flush()
    logger.info(f"Updated preferences for user_id={user_id} fields={sorted(update.model_dump(exclude_none=True))}")
    return PreferencesResponse.model_validate(row)


def apply_preferences(config: AdvancedConfig, preferences: PreferencesResponse) -> AdvancedConfig:
    """Reset a config to the user's look: per-item colours dropped, settings replaced."""
    items = clear_item_level_colors(config.items)
    return merge_user_preferences(items, preferences.model_dump(by_alias=True))
