"""Built-in template library.

Templates are defined in ``library.yaml`` next to this module and upserted
into the database by id, so seeding is safe to repeat.

Fails fast on:
- Missing or unreadable library file
- Invalid YAML
- Malformed template entries
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session

from looptimer.db.models import TimerTemplate
from looptimer.timers.constants import DEFAULT_ALARM, DEFAULT_COLORS, SYSTEM_USER_ID, TemplateCategory
from looptimer.timers.models import AdvancedConfig, IntervalType, config_to_dict

LIBRARY_PATH = Path(__file__).parent / "library.yaml"


class TemplateLibraryError(RuntimeError):
    """Raised when the template library cannot be loaded.

    Attributes:
        code: Error code
        message: Error message
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


@dataclass(frozen=True)
class BuiltinTemplate:
    id: str
    name: str
    description: str
    category: TemplateCategory
    config: AdvancedConfig


class _ItemBuilder:
    """Expands the compact YAML step notation into stored item dicts.

    Ids are ``<type>-<n>`` for steps and ``loop-<n>`` for loops, numbered per
    kind within one template.
    """

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        self.counters: Counter[str] = Counter()

    def _next_id(self, prefix: str) -> str:
        self.counters[prefix] += 1
        return f"{prefix}-{self.counters[prefix]}"

    def build(self, raw: Any) -> dict[str, Any]:
        if isinstance(raw, dict) and "loop" in raw:
            return {
                "kind": "loop",
                "id": self._next_id("loop"),
                "loops": raw["loop"],
                "items": [self.build(child) for child in raw.get("items") or []],
            }
        if isinstance(raw, list) and len(raw) in (3, 4):
            name, interval_type, duration = raw[:3]
            if interval_type not in IntervalType.__members__.values():
                raise TemplateLibraryError(
                    "INVALID_STEP", f"{self.template_id}: unknown interval type {interval_type!r}"
                )
            step = {
                "kind": "interval",
                "id": self._next_id(interval_type),
                "name": name,
                "duration": duration,
                "type": interval_type,
            }
            if len(raw) == 4:
                if raw[3] != "skip":
                    raise TemplateLibraryError("INVALID_STEP", f"{self.template_id}: unknown step flag {raw[3]!r}")
                step["skipOnLastLoop"] = True
            return step
        raise TemplateLibraryError("INVALID_STEP", f"{self.template_id}: cannot read item {raw!r}")


def _parse_entry(entry: Any) -> BuiltinTemplate:
    if not isinstance(entry, dict):
        raise TemplateLibraryError("INVALID_TEMPLATE", "Template entries must be dictionaries")

    missing = [key for key in ("id", "name", "category", "items") if key not in entry]
    if missing:
        raise TemplateLibraryError("MISSING_FIELDS", f"{entry.get('id', '?')}: missing {', '.join(missing)}")

    template_id = str(entry["id"])
    try:
        category = TemplateCategory(entry["category"])
    except ValueError as e:
        raise TemplateLibraryError("INVALID_CATEGORY", f"{template_id}: unknown category {entry['category']!r}") from e

    builder = _ItemBuilder(template_id)
    document = {
        "items": [builder.build(raw) for raw in entry["items"]],
        "colors": DEFAULT_COLORS,
        "defaultAlarm": DEFAULT_ALARM,
        "speakNames": True,
    }
    try:
        config = AdvancedConfig.model_validate(document)
    except ValidationError as e:
        raise TemplateLibraryError("INVALID_ITEMS", f"{template_id}: {e}") from e

    return BuiltinTemplate(
        id=template_id,
        name=str(entry["name"]),
        description=str(entry.get("description") or "").strip(),
        category=category,
        config=config,
    )


def load_builtin_templates(path: Path = LIBRARY_PATH) -> list[BuiltinTemplate]:
    """Read and validate the built-in template library.

    Args:
        path: Library YAML file

    Returns:
        Templates in file order

    Raises:
        TemplateLibraryError: If the file is missing or malformed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateLibraryError("LIBRARY_UNREADABLE", f"Cannot read {path}: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateLibraryError("INVALID_YAML", f"Invalid YAML in {path.name}: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("templates"), list):
        raise TemplateLibraryError("INVALID_LIBRARY", f"{path.name} must contain a 'templates' list")

    templates = [_parse_entry(entry) for entry in document["templates"]]
    duplicates = [tid for tid, count in Counter(t.id for t in templates).items() if count > 1]
    if duplicates:
        raise TemplateLibraryError("DUPLICATE_ID", f"Duplicate template ids: {', '.join(duplicates)}")
    return templates


def seed_templates(session: Session, templates: list[BuiltinTemplate] | None = None) -> int:
    """Insert or refresh the built-in templates.

    Existing rows keep their clone counts.

    Returns:
        Number of templates written
    """
    if templates is None:
        templates = load_builtin_templates()

    for template in templates:
        row = session.get(TimerTemplate, template.id)
        if row is None:
            row = TimerTemplate(id=template.id, user_id=SYSTEM_USER_ID, clone_count=0)
            session.add(row)
        row.user_id = SYSTEM_USER_ID
        row.name = template.name
        row.description = template.description
        row.category = template.category.value
        row.data = config_to_dict(template.config)
        row.is_public = True
    session.flush()

    logger.info(f"Seeded {len(templates)} built-in templates")
    return len(templates)
