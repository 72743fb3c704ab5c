import pytest

from looptimer.timers.drag_drop import MAIN_CONTAINER_ID, DropScenario, apply_drop, categorize_drop
from looptimer.timers.models import LoopGroup
from looptimer.timers.tree import find_item_by_id, new_interval, new_loop


def _tree():
    return [
        new_interval("1", "Prepare", 10, "prepare"),
        new_loop("2", 3, [new_interval("3", "Work", 20), new_interval("4", "Rest", 10, "rest")]),
        new_interval("5", "Cool down", 60, "rest"),
        new_loop("6", 2, []),
    ]


def _root_ids(items):
    return [item.id for item in items]


def _child_ids(items, loop_id):
    loop = find_item_by_id(items, loop_id)
    assert isinstance(loop, LoopGroup)
    return [child.id for child in loop.items]


@pytest.mark.parametrize(
    ("active_id", "over_id", "expected"),
    [
        ("1", "drop-2", DropScenario.LOOP_INTERIOR),
        ("1", "empty-6", DropScenario.LOOP_INTERIOR),
        ("1", "2", DropScenario.LOOP_HEADER),
        ("1", "drop-before-5", DropScenario.BEFORE_AFTER),
        ("3", "drop-after-1", DropScenario.BEFORE_AFTER),
        ("3", MAIN_CONTAINER_ID, DropScenario.MAIN_CONTAINER),
        ("3", "4", DropScenario.SAME_LOOP_REORDER),
        ("3", "5", DropScenario.LOOP_TO_ROOT),
        ("1", "5", DropScenario.ROOT_REORDER),
        ("1", "3", DropScenario.ITEM_DIRECT),
        ("1", "missing", DropScenario.UNKNOWN),
        ("5", "5", DropScenario.UNKNOWN),
    ],
)
def test_categorize_drop(active_id, over_id, expected):
    assert categorize_drop(_tree(), active_id, over_id) == expected


def test_drop_into_loop_zone_appends():
    result = apply_drop(_tree(), "1", "drop-2")

    assert _child_ids(result, "2") == ["3", "4", "1"]
    assert _root_ids(result) == ["2", "5", "6"]


def test_drop_into_empty_loop():
    result = apply_drop(_tree(), "2", "empty-6")

    assert _root_ids(result) == ["1", "5", "6"]
    assert _child_ids(result, "6") == ["2"]
    assert _child_ids(result, "2") == ["3", "4"]


def test_drop_on_loop_header_prepends():
    result = apply_drop(_tree(), "5", "2")

    assert _child_ids(result, "2") == ["5", "3", "4"]


def test_drop_on_before_and_after_zones():
    before = apply_drop(_tree(), "5", "drop-before-3")
    after = apply_drop(_tree(), "1", "drop-after-3")

    assert _child_ids(before, "2") == ["5", "3", "4"]
    assert _child_ids(after, "2") == ["3", "1", "4"]


def test_drop_on_main_container_moves_to_root_end():
    result = apply_drop(_tree(), "3", MAIN_CONTAINER_ID)

    assert _root_ids(result) == ["1", "2", "5", "6", "3"]
    assert _child_ids(result, "2") == ["4"]


def test_same_loop_reorder():
    assert _child_ids(apply_drop(_tree(), "4", "3"), "2") == ["4", "3"]


def test_loop_to_root_takes_over_slot():
    result = apply_drop(_tree(), "3", "5")

    assert _root_ids(result) == ["1", "2", "3", "5", "6"]


def test_root_reorder_matches_array_move():
    assert _root_ids(apply_drop(_tree(), "1", "5")) == ["2", "5", "1", "6"]
    assert _root_ids(apply_drop(_tree(), "5", "1")) == ["5", "1", "2", "6"]


def test_drop_onto_item_inside_other_container_inserts_after():
    result = apply_drop(_tree(), "1", "3")

    assert _child_ids(result, "2") == ["3", "1", "4"]


def test_invalid_drops_leave_tree_unchanged():
    items = _tree()

    assert apply_drop(items, "1", None) is items
    assert apply_drop(items, "2", "drop-2") is items
    assert apply_drop(items, "5", "5") is items
    assert apply_drop(items, "1", "missing") is items
