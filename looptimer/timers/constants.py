"""Shared constants for timer definitions.

Limits used by strict validation and AI generation, the sound catalogue,
colour schemes and template categories.
"""

from __future__ import annotations

from enum import StrEnum

# First id handed out by an editing session on an empty timer
DEFAULT_NEXT_ID = 1

# Strict validation limits (imports and AI output)
MIN_DURATION_SECONDS = 1
MAX_DURATION_SECONDS = 3600
MAX_LOOPS_PER_GROUP = 50
MAX_WORKOUT_ITEMS = 100
MAX_NESTING_DEPTH = 10

TIMER_NAME_MAX_LENGTH = 100
COPY_SUFFIX = " (Copy)"
DEFAULT_CATEGORY = "custom"

# Defaults for editor-created items
NEW_INTERVAL_NAME = "NEW EXERCISE"
NEW_INTERVAL_DURATION = 30
NEW_LOOP_REPEATS = 3

# Owner of built-in templates
SYSTEM_USER_ID = "system"


class TemplateCategory(StrEnum):
    """Categories a template can be filed under."""

    TABATA = "tabata"
    HIIT = "hiit"
    BOXING = "boxing"
    STRENGTH = "strength"
    YOGA = "yoga"
    POMODORO = "pomodoro"
    CUSTOM = "custom"


SOUND_OPTIONS: dict[str, str] = {
    "beep-short": "Beep (short)",
    "beep-1x": "Beep ×1",
    "beep-2x": "Beep ×2",
    "beep-3x": "Beep ×3",
    "bell-short": "Bell (short)",
    "bell-1x": "Bell ×1",
    "bell-2x": "Bell ×2",
    "bell-3x": "Bell ×3",
    "gong-short": "Gong (short)",
    "gong-1x": "Gong ×1",
    "gong-2x": "Gong ×2",
    "gong-3x": "Gong ×3",
    "whistle-short": "Whistle (short)",
    "whistle-1x": "Whistle ×1",
    "whistle-2x": "Whistle ×2",
    "whistle-3x": "Whistle ×3",
}

VALID_ALARMS = frozenset({"none", *SOUND_OPTIONS})

COLOR_KEYS = ("prepare", "work", "rest", "loop", "nestedLoop")

COLOR_SCHEMES: dict[str, dict[str, str]] = {
    "default": {
        "prepare": "#f97316",
        "work": "#22c55e",
        "rest": "#3b82f6",
        "loop": "#8b5cf6",
        "nestedLoop": "#f59e0b",
    },
    "ocean": {
        "prepare": "#06b6d4",
        "work": "#22c55e",
        "rest": "#3b82f6",
        "loop": "#8b5cf6",
        "nestedLoop": "#f59e0b",
    },
    "forest": {
        "prepare": "#f97316",
        "work": "#22c55e",
        "rest": "#14b8a6",
        "loop": "#059669",
        "nestedLoop": "#84cc16",
    },
    "sunset": {
        "prepare": "#f97316",
        "work": "#ef4444",
        "rest": "#3b82f6",
        "loop": "#dc2626",
        "nestedLoop": "#fbbf24",
    },
    "purple": {
        "prepare": "#a855f7",
        "work": "#22c55e",
        "rest": "#3b82f6",
        "loop": "#8b5cf6",
        "nestedLoop": "#d946ef",
    },
}

DEFAULT_COLORS = COLOR_SCHEMES["default"]
DEFAULT_ALARM = "beep-2x"
DEFAULT_IS_SOUND = True
DEFAULT_SPEAK_NAMES = True
