"""Resolve an editor drop event into a tree move.

The editor reports the dragged item id and the id of whatever it was dropped
on: another item, or one of the droppable zones below.
"""

from __future__ import annotations

from enum import StrEnum

from loguru import logger

from looptimer.timers.models import LoopGroup, WorkoutItem
from looptimer.timers.tree import (
    AtRoot,
    IntoLoop,
    ItemLocation,
    Relative,
    find_item_by_id,
    find_item_location,
    move_item,
    reorder_within_loop,
)

MAIN_CONTAINER_ID = "main-container"
LOOP_DROP_PREFIX = "drop-"
EMPTY_LOOP_PREFIX = "empty-"
DROP_BEFORE_PREFIX = "drop-before-"
DROP_AFTER_PREFIX = "drop-after-"


class DropScenario(StrEnum):
    LOOP_INTERIOR = "loop-interior"
    LOOP_HEADER = "loop-header"
    BEFORE_AFTER = "before-after"
    MAIN_CONTAINER = "main-container"
    ITEM_DIRECT = "item-direct"
    SAME_LOOP_REORDER = "same-loop-reorder"
    LOOP_TO_ROOT = "loop-to-root"
    ROOT_REORDER = "root-reorder"
    UNKNOWN = "unknown"


def _is_before_after_zone(over_id: str) -> bool:
    return over_id.startswith(DROP_BEFORE_PREFIX) or over_id.startswith(DROP_AFTER_PREFIX)


def _loop_zone_target(over_id: str) -> str:
    if over_id.startswith(EMPTY_LOOP_PREFIX):
        return over_id.removeprefix(EMPTY_LOOP_PREFIX)
    return over_id.removeprefix(LOOP_DROP_PREFIX)


def categorize_drop(items: list[WorkoutItem], active_id: str, over_id: str) -> DropScenario:
    """Decide which kind of drop the (active, over) pair describes.

    Zone ids are checked before item ids, so a zone id wins over an item that
    happens to share it.
    """
    if over_id.startswith(EMPTY_LOOP_PREFIX) or (
        over_id.startswith(LOOP_DROP_PREFIX) and not _is_before_after_zone(over_id)
    ):
        return DropScenario.LOOP_INTERIOR

    if isinstance(find_item_by_id(items, over_id), LoopGroup):
        return DropScenario.LOOP_HEADER

    if _is_before_after_zone(over_id):
        return DropScenario.BEFORE_AFTER

    if over_id == MAIN_CONTAINER_ID:
        return DropScenario.MAIN_CONTAINER

    over_location = find_item_location(items, over_id)
    if over_location is None or active_id == over_id:
        return DropScenario.UNKNOWN

    active_location = find_item_location(items, active_id)
    active_loop = active_location.loop_id if active_location else None
    if active_loop and active_loop == over_location.loop_id:
        return DropScenario.SAME_LOOP_REORDER
    if active_loop and over_location.loop_id is None:
        return DropScenario.LOOP_TO_ROOT
    if active_loop is None and over_location.loop_id is None:
        return DropScenario.ROOT_REORDER
    return DropScenario.ITEM_DIRECT


def apply_drop(items: list[WorkoutItem], active_id: str, over_id: str | None) -> list[WorkoutItem]:
    """Return the tree after dropping active_id on over_id.

    A drop outside any zone (over_id None), onto the item itself or into its
    own subtree leaves the tree unchanged.
    """
    if not over_id:
        return items

    scenario = categorize_drop(items, active_id, over_id)
    logger.debug(f"Drop {active_id} -> {over_id}: {scenario}")

    match scenario:
        case DropScenario.LOOP_INTERIOR:
            return move_item(items, active_id, IntoLoop(_loop_zone_target(over_id)))
        case DropScenario.LOOP_HEADER:
            return move_item(items, active_id, IntoLoop(over_id, at_start=True))
        case DropScenario.BEFORE_AFTER:
            if over_id.startswith(DROP_BEFORE_PREFIX):
                return move_item(items, active_id, Relative(over_id.removeprefix(DROP_BEFORE_PREFIX), "before"))
            return move_item(items, active_id, Relative(over_id.removeprefix(DROP_AFTER_PREFIX), "after"))
        case DropScenario.MAIN_CONTAINER:
            return move_item(items, active_id, AtRoot())
        case DropScenario.ITEM_DIRECT:
            return move_item(items, active_id, Relative(over_id, "after"))
        case DropScenario.SAME_LOOP_REORDER:
            location = find_item_location(items, active_id)
            if location is None or location.loop_id is None:
                return items
            return reorder_within_loop(items, location.loop_id, active_id, over_id)
        case DropScenario.LOOP_TO_ROOT | DropScenario.ROOT_REORDER:
            return _move_to_root_index(items, active_id, find_item_location(items, over_id))
        case _:
            return items


def _move_to_root_index(
    items: list[WorkoutItem],
    active_id: str,
    over_location: ItemLocation | None,
) -> list[WorkoutItem]:
    """Take the over item's root slot; the over item shifts by one."""
    if over_location is None:
        return items
    return move_item(items, active_id, AtRoot(index=over_location.index))
