"""Portable JSON export and import of a single timer."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from looptimer.timers.models import AdvancedConfig

EXPORT_VERSION = "1.0"
FILENAME_MAX_LENGTH = 50

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class ExportedTimer(BaseModel):
    name: str = Field(min_length=1)
    data: AdvancedConfig


class TimerExport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str
    exported_at: datetime
    timer: ExportedTimer


@dataclass
class ImportResult:
    success: bool
    data: TimerExport | None = None
    error: str | None = None


def create_timer_export(name: str, data: AdvancedConfig) -> TimerExport:
    return TimerExport(
        version=EXPORT_VERSION,
        exported_at=datetime.now(UTC),
        timer=ExportedTimer(name=name, data=data),
    )


def _dump(export: TimerExport) -> dict:
    return export.model_dump(mode="json", by_alias=True, exclude_none=True)


def export_timer_as_json(name: str, data: AdvancedConfig) -> str:
    return json.dumps(_dump(create_timer_export(name, data)), indent=2)


def export_timer_as_json_minified(name: str, data: AdvancedConfig) -> str:
    return json.dumps(_dump(create_timer_export(name, data)), separators=(",", ":"))


def export_filename(name: str) -> str:
    """File name for a download: ``"Tabata #1"`` becomes ``tabata__1.json``."""
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', name).lower()[:FILENAME_MAX_LENGTH]}.json"


def validate_timer_import(data: object) -> ImportResult:
    try:
        parsed = TimerExport.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        path = ".".join(str(part) for part in first["loc"])
        return ImportResult(success=False, error=f"Invalid timer format: {first['msg']} at {path}")
    return ImportResult(success=True, data=parsed)


def parse_timer_from_json(text: str) -> ImportResult:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return ImportResult(success=False, error="Invalid JSON format")
    return validate_timer_import(data)
