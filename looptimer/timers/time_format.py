"""Formatting and parsing of durations in whole seconds."""

from __future__ import annotations

import math
import re
from typing import Any

_NON_DIGITS = re.compile(r"\D")


def format_time(seconds: int) -> str:
    """Render seconds as zero-padded ``MM:SS``; minutes are not capped at 99.

    Examples:
        >>> format_time(65)
        '01:05'
        >>> format_time(6000)
        '100:00'
    """
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_time_with_label(seconds: int) -> str:
    """Human label such as ``1h 5m``, ``2m 30s`` or ``45s``."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    if minutes > 0:
        return f"{minutes}m {secs}s" if secs > 0 else f"{minutes}m"
    return f"{secs}s"


def format_time_compact(seconds: int) -> str:
    """``1h 5m`` above an hour, ``M:SS`` below."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    return f"{minutes}:{secs:02d}"


def format_time_minutes(seconds: int) -> str:
    # Half minutes round up, not to even
    return f"{math.floor(seconds / 60 + 0.5)} min"


def _number(part: str) -> float | None:
    part = part.strip()
    if not part:
        return 0.0
    try:
        value = float(part)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_time_input(value: Any) -> int:
    """Parse user input into seconds. Malformed input yields 0, never an error.

    ``"1:05"`` is minutes and seconds. Otherwise only the digits count: three
    or more digits read the last two as seconds (``"130"`` is 90), one or two
    digits are plain seconds.
    """
    if not isinstance(value, str):
        return 0

    if ":" in value:
        parts = value.split(":")
        minutes, secs = _number(parts[0]), _number(parts[1])
        if minutes is not None and secs is not None:
            return max(0, int(minutes * 60 + secs))

    digits = _NON_DIGITS.sub("", value)
    if len(digits) >= 3:
        return int(digits[:-2]) * 60 + int(digits[-2:])
    return int(digits) if digits else 0
