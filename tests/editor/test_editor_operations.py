import pytest

from looptimer.editor.operations import EditorAction, apply_action, id_generator
from looptimer.timers.constants import NEW_INTERVAL_DURATION, NEW_INTERVAL_NAME, NEW_LOOP_REPEATS
from looptimer.timers.ids import IdGenerator
from looptimer.timers.models import AdvancedConfig, IntervalType, LoopGroup
from looptimer.timers.tree import new_interval, new_loop


def _config() -> AdvancedConfig:
    return AdvancedConfig(
        items=[new_interval("1", "Work", 20), new_loop("7", 2, [new_interval("3", "Rest", 10, "rest")])],
        default_alarm="beep-2x",
    )


def test_id_generator_never_reuses_existing_ids():
    assert id_generator(_config(), None).peek() == 8
    assert id_generator(_config(), 3).peek() == 8
    assert id_generator(_config(), 20).peek() == 20


def test_add_interval_appends_default_step():
    result = apply_action(AdvancedConfig(), EditorAction.ADD_INTERVAL, IdGenerator(1), interval_type=IntervalType.REST)

    step = result.items[0]
    assert step.id == "1"
    assert step.name == NEW_INTERVAL_NAME
    assert step.duration == NEW_INTERVAL_DURATION
    assert step.type is IntervalType.REST


def test_add_loop_appends_empty_loop():
    result = apply_action(_config(), EditorAction.ADD_LOOP, IdGenerator(8))

    loop = result.items[-1]
    assert isinstance(loop, LoopGroup)
    assert loop.id == "8"
    assert loop.loops == NEW_LOOP_REPEATS
    assert loop.items == []


def test_add_to_loop_only_targets_loops():
    generate_id = IdGenerator(8)

    into_loop = apply_action(_config(), EditorAction.ADD_TO_LOOP, generate_id, item_id="7")
    into_step = apply_action(_config(), EditorAction.ADD_TO_LOOP, IdGenerator(8), item_id="1")

    assert [child.id for child in into_loop.items[1].items] == ["3", "8"]
    assert into_step == _config()


def test_actions_keep_timer_settings():
    result = apply_action(_config(), EditorAction.REMOVE, IdGenerator(8), item_id="7")

    assert [item.id for item in result.items] == ["1"]
    assert result.default_alarm == "beep-2x"


def test_update_field_and_toggle_collapse():
    updated = apply_action(_config(), EditorAction.UPDATE_FIELD, IdGenerator(8), item_id="1", field="name", value="Squats")
    toggled = apply_action(_config(), EditorAction.TOGGLE_COLLAPSE, IdGenerator(8), item_id="7")

    assert updated.items[0].name == "Squats"
    assert toggled.items[1].collapsed is True


def test_move_actions():
    generate_id = IdGenerator(8)

    to_top = apply_action(_config(), EditorAction.MOVE_TO_TOP, generate_id, item_id="3")
    down = apply_action(_config(), EditorAction.MOVE_DOWN, generate_id, item_id="1")

    assert [item.id for item in to_top.items] == ["3", "1", "7"]
    assert [item.id for item in down.items] == ["7", "1"]


def test_duplicate_uses_generator():
    generate_id = IdGenerator(8)

    result = apply_action(_config(), EditorAction.DUPLICATE, generate_id, item_id="1")

    assert [item.id for item in result.items] == ["1", "8", "7"]
    assert generate_id.peek() == 9


@pytest.mark.parametrize(
    ("action", "kwargs"),
    [
        (EditorAction.REMOVE, {}),
        (EditorAction.UPDATE_FIELD, {"item_id": "1"}),
        (EditorAction.UPDATE_FIELD, {"item_id": "1", "field": "duration", "value": "soon"}),
    ],
)
def test_invalid_requests_raise_value_error(action, kwargs):
    with pytest.raises(ValueError):
        apply_action(_config(), action, IdGenerator(8), **kwargs)
