"""Sequential string ids for new tree nodes."""

from __future__ import annotations

from looptimer.timers.constants import DEFAULT_NEXT_ID
from looptimer.timers.models import WorkoutItem
from looptimer.timers.tree import iter_items


class IdGenerator:
    """Counter handing out ``"1"``, ``"2"``, ... as item ids.

    Uniqueness holds only against ids this generator produced. Seed it with
    ``for_items`` when editing an existing tree.
    """

    def __init__(self, start: int = DEFAULT_NEXT_ID):
        self._next = start

    def __call__(self) -> str:
        return self.next()

    def next(self) -> str:
        value = str(self._next)
        self._next += 1
        return value

    def peek(self) -> int:
        return self._next

    def reset(self, start: int = DEFAULT_NEXT_ID) -> None:
        self._next = start

    @classmethod
    def for_items(cls, items: list[WorkoutItem]) -> IdGenerator:
        """Seed past the largest numeric id in the tree; other ids are ignored."""
        numeric = [int(item.id) for item in iter_items(items) if item.id.isdigit()]
        return cls(max(numeric) + 1 if numeric else DEFAULT_NEXT_ID)
