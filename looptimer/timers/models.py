"""Timer tree types.

A timer definition is an ordered list of workout items. Each item is either
an interval step (a single timed phase) or a loop group that repeats its
children. Items carry an explicit ``kind`` tag; stored documents written
before the tag existed are discriminated by their fields instead.

JSON uses camelCase names (``skipOnLastLoop``), Python uses snake_case.
All models are frozen: tree edits build new values.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


class IntervalType(StrEnum):
    """Phase type of an interval step."""

    PREPARE = "prepare"
    WORK = "work"
    REST = "rest"


DEFAULT_NAMES = {
    IntervalType.PREPARE: "PREPARE",
    IntervalType.WORK: "WORK",
    IntervalType.REST: "REST",
}


class TreeModel(BaseModel):
    """Base for JSON-facing timer models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class IntervalStep(TreeModel):
    """Leaf node: one timed phase."""

    kind: Literal["interval"] = "interval"
    id: str
    name: str
    duration: int = Field(ge=0, description="Duration in whole seconds")
    type: IntervalType
    color: str | None = None
    skip_on_last_loop: bool = False
    sound: str | None = None


class LoopGroup(TreeModel):
    """Internal node: children repeated ``loops`` times."""

    kind: Literal["loop"] = "loop"
    id: str
    loops: int = Field(ge=1)
    items: list[WorkoutItem] = Field(default_factory=list)
    collapsed: bool = False
    color: str | None = None


def _item_kind(value: Any) -> str:
    """Resolve the union tag for raw JSON or an already-built item."""
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind:
            return kind
        if "loops" in value and "items" in value:
            return "loop"
        return "interval"
    return getattr(value, "kind", "interval")


WorkoutItem = Annotated[
    Union[
        Annotated[IntervalStep, Tag("interval")],
        Annotated[LoopGroup, Tag("loop")],
    ],
    Discriminator(_item_kind),
]

LoopGroup.model_rebuild()


class ColorSettings(TreeModel):
    """Timer-level colours per interval type and loop depth."""

    prepare: str
    work: str
    rest: str
    loop: str
    nested_loop: str


class AdvancedConfig(TreeModel):
    """Root of a timer definition."""

    items: list[WorkoutItem] = Field(default_factory=list)
    colors: ColorSettings | None = None
    default_alarm: str | None = None
    speak_names: bool | None = None


def default_name_for_type(interval_type: IntervalType | str) -> str:
    """Display name used for a freshly created step of the given type."""
    try:
        return DEFAULT_NAMES[IntervalType(interval_type)]
    except ValueError:
        return "INTERVAL"


def config_to_dict(config: AdvancedConfig) -> dict[str, Any]:
    """Serialize a config into its stored JSON document shape."""
    return config.model_dump(mode="json", by_alias=True, exclude_none=True)
