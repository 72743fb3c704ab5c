"""Flatten a workout tree into its playback script.

Loops are expanded depth first. A step flagged ``skip_on_last_loop`` is left
out of the final repetition of the loop that directly contains it; at root
level there is no enclosing loop and the flag has no effect.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from looptimer.timers.models import AdvancedConfig, IntervalStep, IntervalType, LoopGroup, WorkoutItem
from looptimer.timers.time_format import format_time


class LoopPosition(BaseModel):
    """One enclosing loop of a flattened step and the repetition it belongs to."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    loop_id: str
    iteration: int
    loops: int


class FlattenedInterval(BaseModel):
    """A resolved step in playback order."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    duration: int
    type: IntervalType
    color: str | None = None
    skip_on_last_loop: bool = False
    sound: str | None = None
    position: int
    original_index: int
    loop_path: list[LoopPosition] = Field(default_factory=list)

    @property
    def iteration(self) -> int | None:
        """Repetition of the innermost enclosing loop, None at root."""
        return self.loop_path[-1].iteration if self.loop_path else None


class PlaybackScript(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    intervals: list[FlattenedInterval]
    total_seconds: int
    interval_count: int
    formatted_total: str


def _expand(
    items: list[WorkoutItem],
    path: tuple[LoopPosition, ...],
) -> list[tuple[IntervalStep, int, tuple[LoopPosition, ...]]]:
    on_last_repetition = bool(path) and path[-1].iteration == path[-1].loops
    expanded: list[tuple[IntervalStep, int, tuple[LoopPosition, ...]]] = []
    for index, item in enumerate(items):
        if isinstance(item, LoopGroup):
            for iteration in range(1, item.loops + 1):
                frame = LoopPosition(loop_id=item.id, iteration=iteration, loops=item.loops)
                expanded.extend(_expand(item.items, (*path, frame)))
        elif not (item.skip_on_last_loop and on_last_repetition):
            expanded.append((item, index, path))
    return expanded


def flatten_workout_items(items: list[WorkoutItem]) -> list[FlattenedInterval]:
    """Return every emitted step in playback order.

    Pure and deterministic; the input tree is not touched.
    """
    return [
        FlattenedInterval(
            id=step.id,
            name=step.name,
            duration=step.duration,
            type=step.type,
            color=step.color,
            skip_on_last_loop=step.skip_on_last_loop,
            sound=step.sound,
            position=position,
            original_index=index,
            loop_path=list(path),
        )
        for position, (step, index, path) in enumerate(_expand(items, ()))
    ]


def total_duration(intervals: list[FlattenedInterval]) -> int:
    return sum(interval.duration for interval in intervals)


def compute_total_time(items: list[WorkoutItem]) -> int:
    """Total playback seconds without expanding loops."""
    total = 0
    for item in items:
        if isinstance(item, LoopGroup):
            skipped = sum(
                child.duration
                for child in item.items
                if isinstance(child, IntervalStep) and child.skip_on_last_loop
            )
            total += item.loops * compute_total_time(item.items) - skipped
        else:
            total += item.duration
    return total


def count_intervals(items: list[WorkoutItem]) -> int:
    """Number of entries flatten_workout_items would produce."""
    count = 0
    for item in items:
        if isinstance(item, LoopGroup):
            skipped = sum(1 for child in item.items if isinstance(child, IntervalStep) and child.skip_on_last_loop)
            count += item.loops * count_intervals(item.items) - skipped
        else:
            count += 1
    return count


def build_playback(config: AdvancedConfig) -> PlaybackScript:
    intervals = flatten_workout_items(config.items)
    total = total_duration(intervals)
    return PlaybackScript(
        intervals=intervals,
        total_seconds=total,
        interval_count=len(intervals),
        formatted_total=format_time(total),
    )
