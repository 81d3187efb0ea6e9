# src/dayplanner/today/engine.py

"""
The whole today pipeline behind one call.

    tasks ──> merge/dedupe ──┐
                             ├─> augment ──> today filter ──> categorize
    schedule ──> lookup ─────┘

Every stage is a pure function over snapshots, so rebuilding the view on each
feed change is always safe. A feed that has not resolved yet is passed as None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .categorize import TodayCategories, categorize
from .filtering import filter_today_items
from .merge import DuplicateObserver, merge_today_items
from .models import ScheduleEntry, Status, TodayItem
from .schedule import ScheduleLookup, augment_with_schedule, build_schedule_lookup


@dataclass(slots=True, frozen=True)
class TodayView:
    """Read-only result handed to UI collaborators."""

    items: tuple[TodayItem, ...]
    categories: TodayCategories
    lookup: ScheduleLookup

    def find_schedule_entry(self, item: TodayItem) -> ScheduleEntry | None:
        """Does this item already hold a calendar slot?"""
        return self.lookup.find(item)


def build_today_view(
        tasks: Any,
        schedule_entries: Any = None,
        *,
        now: datetime | None = None,
        status_filter: Status | None = Status.PLANNED,
        observer: DuplicateObserver | None = None,
) -> TodayView:
    merged = merge_today_items(tasks, observer=observer)
    lookup = build_schedule_lookup(schedule_entries, status_filter=status_filter)
    augmented = augment_with_schedule(merged, lookup)
    todays = filter_today_items(augmented, now=now)
    return TodayView(items=tuple(todays), categories=categorize(todays), lookup=lookup)
