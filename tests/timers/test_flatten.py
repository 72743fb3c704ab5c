from looptimer.timers.flatten import build_playback, compute_total_time, count_intervals, flatten_workout_items
from looptimer.timers.models import AdvancedConfig, IntervalStep
from looptimer.timers.tree import new_interval, new_loop


def _skip(item_id: str, name: str, duration: int, interval_type: str = "rest") -> IntervalStep:
    return IntervalStep(id=item_id, name=name, duration=duration, type=interval_type, skip_on_last_loop=True)


def test_flatten_expands_loops_and_skips_on_last_repetition():
    items = [
        new_interval("1", "Prepare", 10, "prepare"),
        new_loop("2", 2, [new_interval("3", "Work", 20), _skip("4", "Rest", 10)]),
    ]

    flat = flatten_workout_items(items)

    assert [step.name for step in flat] == ["Prepare", "Work", "Rest", "Work"]
    assert [step.position for step in flat] == [0, 1, 2, 3]
    assert flat[2].original_index == 1


def test_flatten_records_loop_path():
    items = [new_loop("2", 2, [new_interval("3", "Work", 20)])]

    flat = flatten_workout_items(items)

    assert [step.iteration for step in flat] == [1, 2]
    assert flat[1].loop_path[0].loop_id == "2"
    assert flat[1].loop_path[0].loops == 2


def test_skip_flag_at_root_has_no_effect():
    items = [_skip("1", "Rest", 10), new_interval("2", "Work", 20)]

    flat = flatten_workout_items(items)

    assert [step.id for step in flat] == ["1", "2"]
    assert flat[0].iteration is None


def test_nested_loops_skip_only_in_their_own_last_repetition():
    items = [
        new_loop(
            "outer",
            2,
            [
                new_loop("inner", 2, [new_interval("a", "A", 10), _skip("b", "B", 5)]),
                _skip("c", "C", 30),
            ],
        )
    ]

    flat = flatten_workout_items(items)

    assert [step.id for step in flat] == ["a", "b", "a", "c", "a", "b", "a"]
    assert count_intervals(items) == 7
    assert compute_total_time(items) == 80
    assert sum(step.duration for step in flat) == 80


def test_total_time_matches_flattened_sum():
    items = [
        new_interval("1", "Prepare", 10, "prepare"),
        new_loop("2", 2, [new_interval("3", "Work", 20), _skip("4", "Rest", 10)]),
    ]

    assert compute_total_time(items) == 60
    assert count_intervals(items) == 4


def test_build_playback_summarizes_script():
    config = AdvancedConfig(items=[new_loop("1", 3, [new_interval("2", "Work", 40)])])

    script = build_playback(config)

    assert script.interval_count == 3
    assert script.total_seconds == 120
    assert script.formatted_total == "02:00"


def test_empty_tree_gives_empty_script():
    script = build_playback(AdvancedConfig())

    assert script.intervals == []
    assert script.total_seconds == 0
    assert script.formatted_total == "00:00"


def test_empty_loop_contributes_nothing():
    items = [new_loop("1", 5, []), new_interval("2", "Work", 20)]

    assert [step.id for step in flatten_workout_items(items)] == ["2"]
    assert compute_total_time(items) == 20


def test_single_repetition_loop_still_skips_flagged_step():
    items = [new_loop("1", 1, [new_interval("2", "Work", 10), _skip("3", "Rest", 5)])]

    assert [step.id for step in flatten_workout_items(items)] == ["2"]
    assert compute_total_time(items) == 10


def test_three_repetitions_drop_skipped_step_only_at_the_end():
    items = [new_loop("1", 3, [new_interval("2", "Work", 10), _skip("3", "Rest", 5)])]

    flat = flatten_workout_items(items)

    assert [step.id for step in flat] == ["2", "3", "2", "3", "2"]
    assert sum(step.duration for step in flat) == 40 == compute_total_time(items)
