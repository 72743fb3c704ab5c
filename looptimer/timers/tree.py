"""Tree operations over nested workout items.

Every function takes a list of items and returns a new list; inputs are
never mutated. Operations on an id that does not exist return the input
unchanged. Callers that need to tell "moved" from "not found" check with
find_item_by_id first.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger
from pydantic import ValidationError

from looptimer.timers.constants import COPY_SUFFIX
from looptimer.timers.models import IntervalStep, LoopGroup, WorkoutItem

Position = Literal["before", "after"]


@dataclass(frozen=True)
class RemovalResult:
    """Tree after removal plus the node that was taken out (None if absent)."""

    items: list[WorkoutItem]
    removed_item: WorkoutItem | None


@dataclass(frozen=True)
class ItemLocation:
    """Where an item sits: its parent loop (None at root) and index there."""

    item: WorkoutItem
    index: int
    loop_id: str | None = None


@dataclass(frozen=True)
class IntoLoop:
    """Move destination: inside a loop, at the end or at the start."""

    loop_id: str
    at_start: bool = False


@dataclass(frozen=True)
class Relative:
    """Move destination: next to another item, wherever that item lives."""

    target_id: str
    position: Position = "after"


@dataclass(frozen=True)
class AtRoot:
    """Move destination: root level at an index (None appends)."""

    index: int | None = None


Destination = IntoLoop | Relative | AtRoot


def iter_items(items: list[WorkoutItem]) -> Iterator[WorkoutItem]:
    """Pre-order walk, descending into loop children before the next sibling."""
    for item in items:
        yield item
        if isinstance(item, LoopGroup):
            yield from iter_items(item.items)


def collect_ids(items: list[WorkoutItem]) -> list[str]:
    return [item.id for item in iter_items(items)]


def find_item_by_id(items: list[WorkoutItem], item_id: str) -> WorkoutItem | None:
    for item in iter_items(items):
        if item.id == item_id:
            return item
    return None


def contains_item(item: WorkoutItem, item_id: str) -> bool:
    """Whether item_id is the item itself or anywhere in its subtree."""
    if item.id == item_id:
        return True
    if isinstance(item, LoopGroup):
        return find_item_by_id(item.items, item_id) is not None
    return False


def find_item_location(
    items: list[WorkoutItem],
    item_id: str,
    parent_loop_id: str | None = None,
) -> ItemLocation | None:
    for index, item in enumerate(items):
        if item.id == item_id:
            return ItemLocation(item=item, index=index, loop_id=parent_loop_id)
        if isinstance(item, LoopGroup):
            found = find_item_location(item.items, item_id, item.id)
            if found:
                return found
    return None


def _map_loops(
    items: list[WorkoutItem],
    loop_id: str,
    change: Callable[[LoopGroup], LoopGroup],
) -> list[WorkoutItem]:
    """Apply change to the loop with loop_id, rebuilding only the path to it."""
    result: list[WorkoutItem] = []
    for item in items:
        if isinstance(item, LoopGroup):
            if item.id == loop_id:
                item = change(item)
            else:
                item = item.model_copy(update={"items": _map_loops(item.items, loop_id, change)})
        result.append(item)
    return result


def _map_item(
    items: list[WorkoutItem],
    item_id: str,
    change: Callable[[WorkoutItem], WorkoutItem],
) -> list[WorkoutItem]:
    result: list[WorkoutItem] = []
    for item in items:
        if item.id == item_id:
            item = change(item)
        elif isinstance(item, LoopGroup):
            item = item.model_copy(update={"items": _map_item(item.items, item_id, change)})
        result.append(item)
    return result


def remove_item_by_id(items: list[WorkoutItem], item_id: str) -> list[WorkoutItem]:
    """Drop the node (with its whole subtree) wherever it occurs."""
    return find_and_remove_item(items, item_id).items


def find_and_remove_item(items: list[WorkoutItem], item_id: str) -> RemovalResult:
    removed: WorkoutItem | None = None
    kept: list[WorkoutItem] = []
    for item in items:
        if item.id == item_id:
            if removed is None:
                removed = item
            continue
        if isinstance(item, LoopGroup):
            inner = find_and_remove_item(item.items, item_id)
            if inner.removed_item is not None and removed is None:
                removed = inner.removed_item
            item = item.model_copy(update={"items": inner.items})
        kept.append(item)
    return RemovalResult(items=kept, removed_item=removed)


def add_item_to_loop(items: list[WorkoutItem], loop_id: str, new_item: WorkoutItem) -> list[WorkoutItem]:
    """Append new_item to the children of loop_id. Any item type may be added."""
    return _map_loops(items, loop_id, lambda loop: loop.model_copy(update={"items": [*loop.items, new_item]}))


def prepend_to_loop(items: list[WorkoutItem], loop_id: str, new_item: WorkoutItem) -> list[WorkoutItem]:
    return _map_loops(items, loop_id, lambda loop: loop.model_copy(update={"items": [new_item, *loop.items]}))


def insert_into_loop_at_position(
    items: list[WorkoutItem],
    loop_id: str,
    new_item: WorkoutItem,
    position: Position,
    target_id: str,
) -> list[WorkoutItem]:
    """Insert next to target_id inside loop_id; append when target is not a direct child."""

    def insert(loop: LoopGroup) -> LoopGroup:
        children = list(loop.items)
        index = next((i for i, child in enumerate(children) if child.id == target_id), None)
        if index is None:
            children.append(new_item)
        else:
            children.insert(index if position == "before" else index + 1, new_item)
        return loop.model_copy(update={"items": children})

    return _map_loops(items, loop_id, insert)


def insert_relative_to(
    items: list[WorkoutItem],
    target_id: str,
    new_item: WorkoutItem,
    position: Position = "after",
) -> list[WorkoutItem]:
    """Insert before/after target_id in the target's own container."""
    location = find_item_location(items, target_id)
    if location is None:
        return items
    if location.loop_id is not None:
        return insert_into_loop_at_position(items, location.loop_id, new_item, position, target_id)
    result = list(items)
    result.insert(location.index if position == "before" else location.index + 1, new_item)
    return result


def _insert_at(items: list[WorkoutItem], item: WorkoutItem, destination: Destination) -> list[WorkoutItem] | None:
    """Place item at destination, or None when the destination does not exist."""
    if isinstance(destination, AtRoot):
        result = list(items)
        if destination.index is None:
            result.append(item)
        else:
            result.insert(destination.index, item)
        return result
    if isinstance(destination, IntoLoop):
        target = find_item_by_id(items, destination.loop_id)
        if not isinstance(target, LoopGroup):
            return None
        if destination.at_start:
            return prepend_to_loop(items, destination.loop_id, item)
        return add_item_to_loop(items, destination.loop_id, item)
    if find_item_by_id(items, destination.target_id) is None:
        return None
    return insert_relative_to(items, destination.target_id, item, destination.position)


def _anchor_id(destination: Destination) -> str | None:
    if isinstance(destination, IntoLoop):
        return destination.loop_id
    if isinstance(destination, Relative):
        return destination.target_id
    return None


def move_item(items: list[WorkoutItem], item_id: str, destination: Destination) -> list[WorkoutItem]:
    """Move a node (and its subtree) to destination as one step.

    The input comes back unchanged when the item is missing, when the
    destination is inside the moved subtree, or when the destination cannot
    be found after removal.
    """
    moving = find_item_by_id(items, item_id)
    if moving is None:
        return items

    anchor = _anchor_id(destination)
    if anchor is not None and contains_item(moving, anchor):
        logger.debug(f"Ignoring move of {item_id} into its own subtree ({anchor})")
        return items

    removal = find_and_remove_item(items, item_id)
    placed = _insert_at(removal.items, moving, destination)
    if placed is None:
        return items
    return placed


def move_to_top(items: list[WorkoutItem], item_id: str) -> list[WorkoutItem]:
    return move_item(items, item_id, AtRoot(index=0))


def move_to_bottom(items: list[WorkoutItem], item_id: str) -> list[WorkoutItem]:
    return move_item(items, item_id, AtRoot())


def move_item_up(items: list[WorkoutItem], item_id: str) -> list[WorkoutItem]:
    """Swap the item with its previous sibling."""
    return _swap_with_neighbour(items, item_id, -1)


def move_item_down(items: list[WorkoutItem], item_id: str) -> list[WorkoutItem]:
    """Swap the item with its next sibling."""
    return _swap_with_neighbour(items, item_id, 1)


def _swap_with_neighbour(items: list[WorkoutItem], item_id: str, offset: int) -> list[WorkoutItem]:
    index = next((i for i, item in enumerate(items) if item.id == item_id), None)
    if index is not None:
        other = index + offset
        if 0 <= other < len(items):
            result = list(items)
            result[index], result[other] = result[other], result[index]
            return result
        return items

    result = []
    for item in items:
        if isinstance(item, LoopGroup):
            item = item.model_copy(update={"items": _swap_with_neighbour(item.items, item_id, offset)})
        result.append(item)
    return result


def reorder_within_loop(
    items: list[WorkoutItem],
    loop_id: str,
    active_id: str,
    over_id: str,
) -> list[WorkoutItem]:
    """Move active_id to over_id's index inside one loop (array move)."""

    def reorder(loop: LoopGroup) -> LoopGroup:
        ids = [child.id for child in loop.items]
        if active_id not in ids or over_id not in ids:
            return loop
        children = list(loop.items)
        moving = children.pop(ids.index(active_id))
        children.insert(ids.index(over_id), moving)
        return loop.model_copy(update={"items": children})

    return _map_loops(items, loop_id, reorder)


def toggle_loop_collapsed(items: list[WorkoutItem], loop_id: str) -> list[WorkoutItem]:
    return _map_loops(items, loop_id, lambda loop: loop.model_copy(update={"collapsed": not loop.collapsed}))


def _resolve_field(item: WorkoutItem, field: str) -> str:
    for name, info in type(item).model_fields.items():
        if field in (name, info.alias):
            return name
    raise ValueError(f"Unknown field {field!r} for {item.kind} item")


def update_item_field(items: list[WorkoutItem], item_id: str, field: str, value: Any) -> list[WorkoutItem]:
    """Set one field on an item; duration is clamped to at least one second."""

    def update(item: WorkoutItem) -> WorkoutItem:
        name = _resolve_field(item, field)
        if name in ("id", "kind", "items"):
            raise ValueError(f"Field {field!r} cannot be edited directly")
        if name == "duration":
            try:
                value_to_set: Any = max(1, int(value))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for 'duration': {value!r}") from e
        else:
            value_to_set = value
        data = item.model_dump()
        data[name] = value_to_set
        try:
            return type(item).model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {field!r}: {e.errors()[0]['msg']}") from e

    return _map_item(items, item_id, update)


def _clone_with_fresh_ids(item: WorkoutItem, generate_id: Callable[[], str]) -> WorkoutItem:
    if isinstance(item, LoopGroup):
        new_id = generate_id()
        children = [_clone_with_fresh_ids(child, generate_id) for child in item.items]
        return item.model_copy(update={"id": new_id, "items": children})
    return item.model_copy(update={"id": generate_id()})


def duplicate_item(
    items: list[WorkoutItem],
    item_id: str,
    generate_id: Callable[[], str],
) -> list[WorkoutItem]:
    """Insert a copy right after the original; every copied node gets a new id.

    A copied step is renamed with a " (Copy)" suffix; steps inside a copied
    loop keep their names.
    """
    original = find_item_by_id(items, item_id)
    if original is None:
        return items
    copy = _clone_with_fresh_ids(original, generate_id)
    if isinstance(copy, IntervalStep):
        copy = copy.model_copy(update={"name": f"{copy.name}{COPY_SUFFIX}"})
    return insert_relative_to(items, item_id, copy, "after")


def new_interval(item_id: str, name: str, duration: int, interval_type: str = "work") -> IntervalStep:
    return IntervalStep(id=item_id, name=name, duration=duration, type=interval_type)


def new_loop(item_id: str, loops: int, children: list[WorkoutItem] | None = None) -> LoopGroup:
    return LoopGroup(id=item_id, loops=loops, items=children or [])
