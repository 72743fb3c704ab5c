"""Strict validation of raw timer JSON.

Used on imported files and LLM output, where the tolerant model parsing is
not enough: every problem is reported with its JSON path so it can be shown
to a user or fed back into a retry prompt.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any

from looptimer.timers.constants import (
    COLOR_KEYS,
    MAX_DURATION_SECONDS,
    MAX_LOOPS_PER_GROUP,
    MAX_NESTING_DEPTH,
    MAX_WORKOUT_ITEMS,
    MIN_DURATION_SECONDS,
)

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_INTERVAL_TYPES = ("prepare", "work", "rest")
_MISSING = object()


@dataclass
class ValidationIssue:
    path: str
    message: str
    expected: str | None = None
    received: str | None = None


@dataclass
class ConfigValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    details: list[ValidationIssue] = field(default_factory=list)

    def details_as_dicts(self) -> list[dict[str, Any]]:
        return [asdict(issue) for issue in self.details]


def is_valid_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def json_type_name(value: Any) -> str:
    """Name of a value's JSON type, ``undefined`` for a missing key."""
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_whole_number(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer()


class _ConfigValidator:
    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []
        self.seen_ids: set[str] = set()

    def add(self, path: str, message: str, expected: str | None = None, received: str | None = None) -> None:
        self.issues.append(ValidationIssue(path=path, message=message, expected=expected, received=received))

    def check_id(self, obj: dict[str, Any], path: str) -> None:
        item_id = obj.get("id", _MISSING)
        if not isinstance(item_id, str) or not item_id:
            self.add(f"{path}.id", "Missing or invalid id", "non-empty string", json_type_name(item_id))
            return
        if item_id in self.seen_ids:
            self.add(f"{path}.id", f"Duplicate id '{item_id}'", "unique id", item_id)
        self.seen_ids.add(item_id)

    def check_item(self, item: Any, path: str, depth: int) -> None:
        if not isinstance(item, dict):
            self.add(path, "Must be an object", "IntervalStep | LoopGroup", json_type_name(item))
            return

        kind = item.get("kind")
        if kind == "loop" or (kind is None and "loops" in item and "items" in item):
            self.check_loop(item, path, depth)
        elif kind == "interval" or (kind is None and "duration" in item and "type" in item):
            self.check_interval(item, path)
        else:
            self.add(
                path,
                "Invalid WorkoutItem: must have either (loops + items) or (duration + type)",
                "IntervalStep | LoopGroup",
                "unknown structure",
            )

    def check_interval(self, step: dict[str, Any], path: str) -> None:
        self.check_id(step, path)

        name = step.get("name", _MISSING)
        if not isinstance(name, str) or not name:
            self.add(f"{path}.name", "Missing or invalid name", "non-empty string", json_type_name(name))

        duration = step.get("duration", _MISSING)
        expected_duration = f"integer ({MIN_DURATION_SECONDS}-{MAX_DURATION_SECONDS})"
        if not _is_number(duration):
            self.add(
                f"{path}.duration",
                f"Expected number between {MIN_DURATION_SECONDS}-{MAX_DURATION_SECONDS}, "
                f"got {json_type_name(duration)}",
                expected_duration,
                json_type_name(duration),
            )
        elif not MIN_DURATION_SECONDS <= duration <= MAX_DURATION_SECONDS:
            self.add(
                f"{path}.duration",
                f"Duration must be between {MIN_DURATION_SECONDS} and {MAX_DURATION_SECONDS} seconds",
                expected_duration,
                str(duration),
            )
        elif not _is_whole_number(duration):
            self.add(f"{path}.duration", "Duration must be a whole number of seconds", expected_duration, str(duration))

        interval_type = step.get("type", _MISSING)
        if interval_type not in _INTERVAL_TYPES:
            self.add(
                f"{path}.type",
                f"Invalid value '{interval_type if interval_type is not _MISSING else 'undefined'}', "
                "must be 'prepare' | 'work' | 'rest'",
                "'prepare' | 'work' | 'rest'",
                str(interval_type) if interval_type is not _MISSING else "undefined",
            )

        color = step.get("color")
        if color is not None and not is_valid_hex_color(color):
            self.add(f"{path}.color", "Invalid hex color format", "hex color (e.g., #FF0000)", str(color))

        skip = step.get("skipOnLastLoop")
        if skip is not None and not isinstance(skip, bool):
            self.add(f"{path}.skipOnLastLoop", "Must be a boolean", "boolean", json_type_name(skip))

        sound = step.get("sound")
        if sound is not None and not isinstance(sound, str):
            self.add(f"{path}.sound", "Must be a string or undefined", "string | undefined", json_type_name(sound))

    def check_loop(self, loop: dict[str, Any], path: str, depth: int) -> None:
        self.check_id(loop, path)

        if depth >= MAX_NESTING_DEPTH:
            self.add(path, f"Loops nested deeper than {MAX_NESTING_DEPTH} levels", f"depth <= {MAX_NESTING_DEPTH}", str(depth + 1))
            return

        loops = loop.get("loops", _MISSING)
        expected_loops = f"number (1-{MAX_LOOPS_PER_GROUP})"
        if not _is_whole_number(loops):
            self.add(
                f"{path}.loops",
                f"Expected number between 1-{MAX_LOOPS_PER_GROUP}, got {json_type_name(loops)}",
                expected_loops,
                json_type_name(loops),
            )
        elif not 1 <= loops <= MAX_LOOPS_PER_GROUP:
            self.add(f"{path}.loops", f"Loop count must be between 1 and {MAX_LOOPS_PER_GROUP}", expected_loops, str(loops))

        children = loop.get("items", _MISSING)
        if not isinstance(children, list):
            self.add(f"{path}.items", "Must be an array", "WorkoutItem[]", json_type_name(children))
        elif not children:
            self.add(
                f"{path}.items",
                "Loop must contain at least 1 item, got empty array",
                "non-empty array",
                "empty array",
            )
        else:
            for index, child in enumerate(children):
                self.check_item(child, f"{path}.items[{index}]", depth + 1)

        collapsed = loop.get("collapsed")
        if collapsed is not None and not isinstance(collapsed, bool):
            self.add(f"{path}.collapsed", "Must be a boolean", "boolean", json_type_name(collapsed))

        color = loop.get("color")
        if color is not None and not is_valid_hex_color(color):
            self.add(f"{path}.color", "Invalid hex color format", "hex color (e.g., #FF0000)", str(color))

    def check_colors(self, colors: Any, path: str) -> None:
        if not isinstance(colors, dict):
            self.add(path, "Must be an object", "ColorSettings object", json_type_name(colors))
            return
        for key in COLOR_KEYS:
            value = colors.get(key, _MISSING)
            if not isinstance(value, str):
                self.add(f"{path}.{key}", "Missing required field", "hex color string", json_type_name(value))
            elif not is_valid_hex_color(value):
                self.add(f"{path}.{key}", "Invalid hex color format", "hex color (e.g., #FF0000)", value)


def validate_advanced_config(data: Any, require_settings: bool = True) -> ConfigValidationResult:
    """Validate a raw timer document.

    Args:
        data: Parsed JSON
        require_settings: Also require timer-level ``colors``, ``defaultAlarm``
            and ``speakNames`` (complete configs). Imports of bare item lists
            turn this off.

    Returns:
        ConfigValidationResult with ``errors`` as ``"<path>: <message>"``
        strings and the structured issues in ``details``
    """
    if not isinstance(data, dict):
        issue = ValidationIssue(
            path="root",
            message="Must be an object",
            expected="AdvancedConfig object",
            received=json_type_name(data),
        )
        return ConfigValidationResult(valid=False, errors=["Root must be an object"], details=[issue])

    validator = _ConfigValidator()

    items = data.get("items", _MISSING)
    if not isinstance(items, list):
        validator.add("items", "Missing or invalid items array", "WorkoutItem[]", json_type_name(items))
    elif not items:
        validator.add("items", "Items array cannot be empty", "non-empty array", "empty array")
    elif len(items) > MAX_WORKOUT_ITEMS:
        validator.add(
            "items",
            f"Too many items (max {MAX_WORKOUT_ITEMS})",
            f"array with <= {MAX_WORKOUT_ITEMS} items",
            f"array with {len(items)} items",
        )
    else:
        for index, item in enumerate(items):
            validator.check_item(item, f"items[{index}]", 0)

    if require_settings:
        colors = data.get("colors", _MISSING)
        if not colors or colors is _MISSING:
            validator.add("colors", "Missing required field", "ColorSettings object", json_type_name(colors))
        else:
            validator.check_colors(colors, "colors")

        alarm = data.get("defaultAlarm", _MISSING)
        if not isinstance(alarm, str) or not alarm:
            validator.add("defaultAlarm", "Missing or invalid defaultAlarm", "non-empty string", json_type_name(alarm))

        speak_names = data.get("speakNames", _MISSING)
        if not isinstance(speak_names, bool):
            validator.add("speakNames", "Missing or invalid speakNames", "boolean", json_type_name(speak_names))
    elif "colors" in data and data["colors"] is not None:
        validator.check_colors(data["colors"], "colors")

    return ConfigValidationResult(
        valid=not validator.issues,
        errors=[f"{issue.path}: {issue.message}" for issue in validator.issues],
        details=validator.issues,
    )
