import pytest

from looptimer.timers.ids import IdGenerator
from looptimer.timers.models import IntervalStep, LoopGroup
from looptimer.timers.tree import (
    AtRoot,
    IntoLoop,
    Relative,
    add_item_to_loop,
    collect_ids,
    duplicate_item,
    find_and_remove_item,
    find_item_by_id,
    find_item_location,
    insert_relative_to,
    move_item,
    move_item_down,
    move_item_up,
    move_to_bottom,
    move_to_top,
    new_interval,
    new_loop,
    remove_item_by_id,
    reorder_within_loop,
    toggle_loop_collapsed,
    update_item_field,
)


def _tree():
    return [
        new_interval("1", "Warm up", 60, "prepare"),
        new_loop(
            "2",
            3,
            [
                new_interval("3", "Work", 20),
                new_interval("4", "Rest", 10, "rest"),
                new_loop("6", 2, [new_interval("7", "Sprint", 5)]),
            ],
        ),
        new_interval("5", "Cool down", 120, "rest"),
    ]


def _loop(items, loop_id) -> LoopGroup:
    loop = find_item_by_id(items, loop_id)
    assert isinstance(loop, LoopGroup)
    return loop


def _child_ids(items, loop_id):
    return [child.id for child in _loop(items, loop_id).items]


def test_find_item_by_id_searches_nested_loops():
    items = _tree()

    found = find_item_by_id(items, "7")

    assert isinstance(found, IntervalStep)
    assert found.name == "Sprint"
    assert find_item_by_id(items, "missing") is None


def test_collect_ids_is_pre_order():
    assert collect_ids(_tree()) == ["1", "2", "3", "4", "6", "7", "5"]


def test_find_item_location_reports_parent_loop():
    items = _tree()

    nested = find_item_location(items, "4")
    root = find_item_location(items, "5")

    assert nested is not None and nested.loop_id == "2" and nested.index == 1
    assert root is not None and root.loop_id is None and root.index == 2


def test_remove_nested_item_leaves_input_untouched():
    items = _tree()

    result = remove_item_by_id(items, "3")

    assert _child_ids(result, "2") == ["4", "6"]
    assert _child_ids(items, "2") == ["3", "4", "6"]


def test_remove_loop_removes_whole_subtree():
    result = remove_item_by_id(_tree(), "2")

    assert collect_ids(result) == ["1", "5"]


def test_remove_missing_id_is_a_no_op():
    items = _tree()

    assert remove_item_by_id(items, "missing") == items


def test_find_and_remove_item_returns_removed_node():
    result = find_and_remove_item(_tree(), "6")

    assert isinstance(result.removed_item, LoopGroup)
    assert result.removed_item.items[0].id == "7"
    assert "7" not in collect_ids(result.items)


def test_add_item_to_nested_loop_appends():
    result = add_item_to_loop(_tree(), "6", new_interval("8", "Jog", 15))

    assert _child_ids(result, "6") == ["7", "8"]


def test_insert_relative_to_uses_target_container():
    result = insert_relative_to(_tree(), "4", new_interval("8", "Jog", 15), "before")

    assert _child_ids(result, "2") == ["3", "8", "4", "6"]


def test_move_item_into_loop():
    result = move_item(_tree(), "1", IntoLoop("6"))

    assert _child_ids(result, "6") == ["7", "1"]
    assert [item.id for item in result] == ["2", "5"]


def test_move_item_to_loop_start():
    result = move_item(_tree(), "5", IntoLoop("2", at_start=True))

    assert _child_ids(result, "2") == ["5", "3", "4", "6"]


def test_move_loop_into_its_own_subtree_is_rejected():
    items = _tree()

    assert move_item(items, "2", IntoLoop("6")) is items
    assert move_item(items, "2", Relative("7", "after")) is items
    assert collect_ids(items) == ["1", "2", "3", "4", "6", "7", "5"]


def test_move_to_missing_destination_keeps_tree():
    items = _tree()

    assert move_item(items, "1", Relative("missing")) is items
    assert move_item(items, "1", IntoLoop("3")) is items
    assert move_item(items, "missing", AtRoot()) is items


def test_move_to_top_and_bottom_lift_nested_items_to_root():
    top = move_to_top(_tree(), "7")
    bottom = move_to_bottom(_tree(), "3")

    assert [item.id for item in top] == ["7", "1", "2", "5"]
    assert _child_ids(top, "6") == []
    assert [item.id for item in bottom] == ["1", "2", "5", "3"]


def test_move_item_up_and_down_swap_siblings():
    assert _child_ids(move_item_up(_tree(), "4"), "2") == ["4", "3", "6"]
    assert [item.id for item in move_item_down(_tree(), "1")] == ["2", "1", "5"]


def test_move_item_up_at_first_position_is_a_no_op():
    items = _tree()

    assert collect_ids(move_item_up(items, "1")) == collect_ids(items)
    assert collect_ids(move_item_down(items, "6")) == collect_ids(items)


def test_reorder_within_loop():
    result = reorder_within_loop(_tree(), "2", "6", "3")

    assert _child_ids(result, "2") == ["6", "3", "4"]


def test_toggle_loop_collapsed():
    once = toggle_loop_collapsed(_tree(), "6")
    twice = toggle_loop_collapsed(once, "6")

    assert _loop(once, "6").collapsed is True
    assert _loop(twice, "6").collapsed is False


def test_update_item_field_clamps_duration():
    result = update_item_field(_tree(), "3", "duration", "0")

    assert find_item_by_id(result, "3").duration == 1
    assert find_item_by_id(update_item_field(result, "3", "duration", 45), "3").duration == 45


def test_update_item_field_accepts_json_names():
    result = update_item_field(_tree(), "4", "skipOnLastLoop", True)

    assert find_item_by_id(result, "4").skip_on_last_loop is True


def test_update_item_field_updates_loop_count():
    result = update_item_field(_tree(), "2", "loops", 5)

    assert _loop(result, "2").loops == 5
    assert _child_ids(result, "2") == ["3", "4", "6"]


@pytest.mark.parametrize(
    ("item_id", "field", "value"),
    [
        ("3", "duration", "abc"),
        ("3", "type", "sprint"),
        ("3", "id", "99"),
        ("3", "nonsense", 1),
        ("2", "loops", 0),
    ],
)
def test_update_item_field_rejects_invalid_values(item_id, field, value):
    with pytest.raises(ValueError):
        update_item_field(_tree(), item_id, field, value)


def test_duplicate_interval_gets_new_id_and_copy_suffix():
    result = duplicate_item(_tree(), "3", IdGenerator(100))

    assert _child_ids(result, "2") == ["3", "100", "4", "6"]
    assert find_item_by_id(result, "100").name == "Work (Copy)"


def test_duplicate_loop_renumbers_whole_subtree():
    result = duplicate_item(_tree(), "6", IdGenerator(100))

    assert _child_ids(result, "2") == ["3", "4", "6", "100"]
    copy = _loop(result, "100")
    assert copy.items[0].id == "101"
    assert copy.items[0].name == "Sprint"
    assert len(set(collect_ids(result))) == len(collect_ids(result))


def test_duplicate_missing_item_is_a_no_op():
    items = _tree()

    assert duplicate_item(items, "missing", IdGenerator(100)) is items
