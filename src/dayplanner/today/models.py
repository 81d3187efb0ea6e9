# src/dayplanner/today/models.py

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any


class Status(IntEnum):
    """
    Work status as the task service encodes it on the wire.

    Notes:
    - numeric values are the service's codes, NOT the merge preference;
      use `rank` when two representations of one item compete.
    """

    PLANNED = 0
    IN_PROGRESS = 1
    DONE = 2
    SKIPPED = 3

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @classmethod
    def from_raw(cls, raw: Any) -> Status:
        if raw is None or isinstance(raw, bool):
            return cls.PLANNED
        if isinstance(raw, str):
            key = raw.strip().lower().replace("-", "_").replace(" ", "_")
            if key in _STATUS_NAMES:
                return _STATUS_NAMES[key]
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return cls.PLANNED
        if not number.is_integer():
            return cls.PLANNED
        try:
            return cls(int(number))
        except ValueError:
            return cls.PLANNED


_STATUS_RANK: dict[Status, int] = {
    Status.IN_PROGRESS: 3,
    Status.PLANNED: 2,
    Status.DONE: 1,
    Status.SKIPPED: 0,
}

_STATUS_NAMES: dict[str, Status] = {
    "planned": Status.PLANNED,
    "in_progress": Status.IN_PROGRESS,
    "inprogress": Status.IN_PROGRESS,
    "done": Status.DONE,
    "skipped": Status.SKIPPED,
}


class Priority(IntEnum):
    """Three ranked levels; lower value sorts first."""

    MUST = 1
    SHOULD = 2
    WANT = 3

    @classmethod
    def from_raw(cls, raw: Any) -> Priority | None:
        if raw is None or isinstance(raw, bool):
            return None
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return None
        if not number.is_integer():
            return None
        try:
            return cls(int(number))
        except ValueError:
            return None


class Source(StrEnum):
    TASK = "task"
    CHECKLIST = "checklist"


@dataclass(slots=True, frozen=True)
class TodayItem:
    """
    Canonical representation of one logical piece of work.

    `parent_title` is set only for checklist-sourced items.
    `updated_at` is POSIX seconds; `start_at` and `deadline` keep the
    service's original strings.
    """

    id: str
    source: Source
    title: str
    status: Status

    parent_title: str | None = None
    priority: Priority | None = None
    start_at: str | None = None
    planned_minutes: float | None = None
    deadline: str | None = None
    updated_at: float | None = None
    task_id: str | None = None
    checklist_item_id: str | None = None


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
    """A calendar slot from the schedule-entries feed."""

    start_at: str | None
    planned_minutes: float | None = None
    status: Status | None = None
    updated_at: float | None = None

    id: str | None = None
    work_item_id: str | None = None
    task_id: str | None = None
    checklist_item_id: str | None = None

    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def lookup_keys(self) -> Iterator[str]:
        """Every identifier this entry can be looked up by (lower-cased)."""
        for ref in (self.work_item_id, self.task_id, self.checklist_item_id):
            if ref:
                yield ref.lower()
