from looptimer.timers.ids import IdGenerator
from looptimer.timers.tree import new_interval, new_loop


def test_generator_hands_out_sequential_string_ids():
    generate_id = IdGenerator()

    assert [generate_id(), generate_id(), generate_id.next()] == ["1", "2", "3"]
    assert generate_id.peek() == 4


def test_reset_restarts_counter():
    generate_id = IdGenerator(10)
    generate_id()

    generate_id.reset(3)

    assert generate_id() == "3"


def test_for_items_continues_after_largest_numeric_id():
    items = [
        new_interval("3", "Work", 20),
        new_loop("loop-1", 2, [new_interval("10", "Rest", 10, "rest")]),
    ]

    assert IdGenerator.for_items(items).peek() == 11


def test_for_items_without_numeric_ids_starts_at_one():
    items = [new_interval("work-1", "Work", 20)]

    assert IdGenerator.for_items(items).peek() == 1
    assert IdGenerator.for_items([]).peek() == 1
