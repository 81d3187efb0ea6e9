# src/dayplanner/today/categorize.py

"""
Split the day view into in-progress / planned / completed buckets.

Every sort criterion is compared only when both sides have a value; a side
with a value sorts before a side without. Sorting is stable, so items that
tie on every criterion keep their merge order.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import asdict, dataclass
from functools import cmp_to_key
from typing import Any

from .fields import to_timestamp
from .models import Status, TodayItem

Criterion = tuple[Callable[[TodayItem], Any], bool]  # (key getter, descending)


def _compare_present(a: Any, b: Any, descending: bool) -> int:
    if a is not None and b is not None:
        if a == b:
            return 0
        before = a > b if descending else a < b
        return -1 if before else 1
    if a is not None:
        return -1
    if b is not None:
        return 1
    return 0


def _ordered(items: Iterable[TodayItem], criteria: Sequence[Criterion]) -> tuple[TodayItem, ...]:
    def compare(x: TodayItem, y: TodayItem) -> int:
        for getter, descending in criteria:
            result = _compare_present(getter(x), getter(y), descending)
            if result:
                return result
        return 0

    return tuple(sorted(items, key=cmp_to_key(compare)))


def _priority(item: TodayItem) -> int | None:
    return None if item.priority is None else int(item.priority)


def _updated(item: TodayItem) -> float | None:
    return item.updated_at


def _deadline(item: TodayItem) -> float | None:
    return to_timestamp(item.deadline)


def _start(item: TodayItem) -> float | None:
    return to_timestamp(item.start_at)


IN_PROGRESS_ORDER: tuple[Criterion, ...] = ((_priority, False), (_updated, True))
PLANNED_ORDER: tuple[Criterion, ...] = ((_priority, False), (_deadline, False), (_start, False), (_updated, False))
COMPLETED_ORDER: tuple[Criterion, ...] = ((_updated, True),)


@dataclass(slots=True, frozen=True)
class TodayCategories:
    in_progress: tuple[TodayItem, ...]
    planned: tuple[TodayItem, ...]
    completed: tuple[TodayItem, ...]
    done_count: int
    progress_value: int

    def as_dict(self) -> dict[str, Any]:
        """JSON-friendly form using the field names UI collaborators expect."""

        def row(item: TodayItem) -> dict[str, Any]:
            data = asdict(item)
            data["source"] = item.source.value
            data["status"] = item.status.name.lower()
            data["priority"] = None if item.priority is None else int(item.priority)
            return data

        return {
            "inProgress": [row(i) for i in self.in_progress],
            "planned": [row(i) for i in self.planned],
            "completed": [row(i) for i in self.completed],
            "doneCount": self.done_count,
            "progressValue": self.progress_value,
        }


def progress_percent(done: int, total: int) -> int:
    """Whole percent, halves rounded up."""
    if total <= 0:
        return 0
    return int(math.floor(done * 100 / total + 0.5))


def categorize(items: Sequence[TodayItem]) -> TodayCategories:
    in_progress = [i for i in items if i.status == Status.IN_PROGRESS]
    planned = [i for i in items if i.status == Status.PLANNED]
    completed = [i for i in items if i.status in (Status.DONE, Status.SKIPPED)]
    done_count = sum(1 for i in items if i.status == Status.DONE)

    return TodayCategories(
        in_progress=_ordered(in_progress, IN_PROGRESS_ORDER),
        planned=_ordered(planned, PLANNED_ORDER),
        completed=_ordered(completed, COMPLETED_ORDER),
        done_count=done_count,
        progress_value=progress_percent(done_count, len(items)),
    )
