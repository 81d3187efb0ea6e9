# src/dayplanner/today/schedule.py

"""
Schedule lookup: index calendar entries by every identifier they reference,
then use it to enrich TodayItems with start time and planned duration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .fields import read_number, read_status, read_text, read_timestamp, to_timestamp, unwrap_items
from .models import ScheduleEntry, Status, TodayItem

ENTRY_ID_KEYS = ("id", "schedule_id", "scheduleId")
ENTRY_WORK_ITEM_KEYS = ("work_id", "work_item_id", "workItemId", "workId")
ENTRY_TASK_KEYS = ("task_id", "taskId")
ENTRY_CHECKLIST_KEYS = ("checklist_item_id", "checklistItemId")
ENTRY_START_KEYS = ("start_at", "startAt")
ENTRY_MINUTES_KEYS = ("planned_minutes", "plannedMinutes")
ENTRY_STATUS_KEYS = ("status",)
ENTRY_UPDATED_KEYS = ("updated_at", "updatedAt")


def parse_schedule_entry(record: Mapping[str, Any]) -> ScheduleEntry:
    return ScheduleEntry(
        id=read_text(record, ENTRY_ID_KEYS),
        work_item_id=read_text(record, ENTRY_WORK_ITEM_KEYS),
        task_id=read_text(record, ENTRY_TASK_KEYS),
        checklist_item_id=read_text(record, ENTRY_CHECKLIST_KEYS),
        start_at=read_text(record, ENTRY_START_KEYS),
        planned_minutes=read_number(record, ENTRY_MINUTES_KEYS),
        status=read_status(record, ENTRY_STATUS_KEYS),
        updated_at=read_timestamp(record, ENTRY_UPDATED_KEYS),
        raw=record,
    )


def _as_entries(entries: Any) -> list[ScheduleEntry]:
    if isinstance(entries, Mapping):
        entries = unwrap_items(entries)
    if not isinstance(entries, (list, tuple)):
        return []
    out: list[ScheduleEntry] = []
    for e in entries:
        if isinstance(e, ScheduleEntry):
            out.append(e)
        elif isinstance(e, Mapping):
            out.append(parse_schedule_entry(e))
    return out


def incoming_wins(incoming: ScheduleEntry, existing: ScheduleEntry) -> bool:
    """
    Collision policy for one lookup key:
    1. both have updated_at -> strictly newer wins
    2. only one has updated_at -> that one wins
    3. neither -> earlier (or equal) start wins; an unparseable start never beats a parseable one
    """
    if incoming.updated_at is not None and existing.updated_at is not None:
        return incoming.updated_at > existing.updated_at
    if incoming.updated_at is not None:
        return True
    if existing.updated_at is not None:
        return False

    incoming_start = to_timestamp(incoming.start_at)
    existing_start = to_timestamp(existing.start_at)
    if incoming_start is None:
        return False
    if existing_start is None:
        return True
    return incoming_start <= existing_start


@dataclass(slots=True)
class ScheduleLookup:
    """Lower-cased identifier -> winning ScheduleEntry."""

    entries: dict[str, ScheduleEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self.entries

    def get(self, key: str | None) -> ScheduleEntry | None:
        if not key:
            return None
        return self.entries.get(key.lower())

    def find(self, item: TodayItem) -> ScheduleEntry | None:
        """First hit by item id, then owning task id, then checklist id."""
        for key in (item.id, item.task_id, item.checklist_item_id):
            entry = self.get(key)
            if entry is not None:
                return entry
        return None


def build_schedule_lookup(entries: Any, status_filter: Status | None = Status.PLANNED) -> ScheduleLookup:
    """
    Index schedule entries under every identifier they carry.

    Entries whose status is present and differs from `status_filter` are skipped.
    `status_filter=None` keeps every entry.
    """
    lookup = ScheduleLookup()
    for entry in _as_entries(entries):
        if status_filter is not None and entry.status is not None and entry.status != status_filter:
            continue
        for key in entry.lookup_keys():
            existing = lookup.entries.get(key)
            if existing is None or incoming_wins(entry, existing):
                lookup.entries[key] = entry
    return lookup


def find_schedule_entry(item: TodayItem, lookup: ScheduleLookup) -> ScheduleEntry | None:
    return lookup.find(item)


def augment_with_schedule(items: Iterable[TodayItem], lookup: ScheduleLookup) -> list[TodayItem]:
    """New items with start_at/planned_minutes taken from the matching schedule entry."""
    out: list[TodayItem] = []
    for item in items:
        entry = lookup.find(item)
        if entry is None or not entry.start_at:
            out.append(item)
            continue
        minutes = entry.planned_minutes if entry.planned_minutes is not None else item.planned_minutes
        out.append(replace(item, start_at=entry.start_at, planned_minutes=minutes))
    return out
