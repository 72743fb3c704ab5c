"""Editor actions applied to a timer config.

The editor is stateless on the server: the client sends its current config
and the next id it would hand out, and gets back the edited config and the
advanced counter.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from looptimer.timers import tree
from looptimer.timers.constants import NEW_INTERVAL_DURATION, NEW_INTERVAL_NAME, NEW_LOOP_REPEATS
from looptimer.timers.ids import IdGenerator
from looptimer.timers.models import AdvancedConfig, IntervalType, LoopGroup, WorkoutItem


class EditorAction(StrEnum):
    ADD_INTERVAL = "add-interval"
    ADD_LOOP = "add-loop"
    ADD_TO_LOOP = "add-to-loop"
    REMOVE = "remove"
    DUPLICATE = "duplicate"
    TOGGLE_COLLAPSE = "toggle-collapse"
    UPDATE_FIELD = "update-field"
    MOVE_UP = "move-up"
    MOVE_DOWN = "move-down"
    MOVE_TO_TOP = "move-to-top"
    MOVE_TO_BOTTOM = "move-to-bottom"


def id_generator(config: AdvancedConfig, next_id: int | None) -> IdGenerator:
    """Continue the client's counter, never below what the tree already uses."""
    seeded = IdGenerator.for_items(config.items)
    if next_id is not None and next_id > seeded.peek():
        seeded.reset(next_id)
    return seeded


def _new_step(generate_id: IdGenerator, interval_type: IntervalType) -> WorkoutItem:
    return tree.new_interval(generate_id(), NEW_INTERVAL_NAME, NEW_INTERVAL_DURATION, interval_type)


def apply_action(
    config: AdvancedConfig,
    action: EditorAction,
    generate_id: IdGenerator,
    item_id: str | None = None,
    field: str | None = None,
    value: Any = None,
    interval_type: IntervalType = IntervalType.WORK,
) -> AdvancedConfig:
    """Run one editor action and return the new config.

    Raises:
        ValueError: If the action needs an id or field that was not given,
            or an update-field value is rejected
    """
    items = config.items

    if action is EditorAction.ADD_INTERVAL:
        items = [*items, _new_step(generate_id, interval_type)]
    elif action is EditorAction.ADD_LOOP:
        items = [*items, LoopGroup(id=generate_id(), loops=NEW_LOOP_REPEATS, items=[])]
    else:
        if not item_id:
            raise ValueError(f"'{action}' requires itemId")
        match action:
            case EditorAction.ADD_TO_LOOP:
                if isinstance(tree.find_item_by_id(items, item_id), LoopGroup):
                    items = tree.add_item_to_loop(items, item_id, _new_step(generate_id, interval_type))
            case EditorAction.REMOVE:
                items = tree.remove_item_by_id(items, item_id)
            case EditorAction.DUPLICATE:
                items = tree.duplicate_item(items, item_id, generate_id)
            case EditorAction.TOGGLE_COLLAPSE:
                items = tree.toggle_loop_collapsed(items, item_id)
            case EditorAction.UPDATE_FIELD:
                if not field:
                    raise ValueError("'update-field' requires field")
                items = tree.update_item_field(items, item_id, field, value)
            case EditorAction.MOVE_UP:
                items = tree.move_item_up(items, item_id)
            case EditorAction.MOVE_DOWN:
                items = tree.move_item_down(items, item_id)
            case EditorAction.MOVE_TO_TOP:
                items = tree.move_to_top(items, item_id)
            case EditorAction.MOVE_TO_BOTTOM:
                items = tree.move_to_bottom(items, item_id)

    return config.model_copy(update={"items": items})
