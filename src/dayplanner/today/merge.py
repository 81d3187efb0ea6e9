# src/dayplanner/today/merge.py

"""
Merge + dedupe pipeline.

Turns the fetched task list (each task carrying checklist fragments and/or
work-item fragments) into a flat list of TodayItems with unique identifiers.

Per task, in order:
1. index checklist fragments by folded title
2. link work-item fragments that lack a checklist reference by exact title
3. route work items: checklist-sourced ones compete per checklist id (local to
   the task); the rest are emitted under `work:<id>`
4. emit the per-checklist winners under `checklist:<id>`
5. emit raw checklist fragments that no work item covered, under `checklist:<id>`
6. tasks with no fragments at all are emitted as atomic tasks under `task:<id>`

A final pass regroups everything by item id (case-insensitive) and keeps the
highest status rank per id; equal rank keeps the first seen.

Duplicates are not errors. Each one is reported to the optional observer as a
DuplicateEvent and the pipeline carries on; an observer that raises is
logged and ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .fields import fold, read_list, read_text, to_timestamp, unwrap_items
from .models import Source, TodayItem
from .normalize import (
    CHECKLIST_ID_KEYS,
    CHECKLIST_KEYS,
    TITLE_KEYS,
    WORK_CHECKLIST_REF_KEYS,
    WORK_ITEM_ID_KEYS,
    WORK_ITEMS_KEYS,
    normalize_checklist,
    normalize_task,
    normalize_work_item,
)

logger = logging.getLogger(__name__)

WORK_PREFIX = "work"
CHECKLIST_PREFIX = "checklist"
TASK_PREFIX = "task"


class DedupeStage(StrEnum):
    WORK = "work"
    CHECKLIST_WORK = "checklist_work"
    CHECKLIST = "checklist"
    TASK = "task"
    FINAL = "final"


@dataclass(slots=True, frozen=True)
class DuplicateEvent:
    """One resolved collision: which representation survived and which was dropped."""

    stage: DedupeStage
    key: str
    kept: TodayItem
    dropped: TodayItem


DuplicateObserver = Callable[[DuplicateEvent], None]


def _ignore(_event: DuplicateEvent) -> None:
    return None


def _guarded(observer: DuplicateObserver) -> DuplicateObserver:
    def _notify(event: DuplicateEvent) -> None:
        try:
            observer(event)
        except Exception:
            logger.exception("duplicate observer failed stage=%s key=%s", event.stage.value, event.key)

    return _notify


def logging_observer(logger: logging.Logger, level: int = logging.DEBUG) -> DuplicateObserver:
    """Observer that reports duplicates to a logger."""

    def _observe(event: DuplicateEvent) -> None:
        logger.log(
            level,
            "duplicate %s key=%s kept=%s(%s) dropped=%s(%s)",
            event.stage.value,
            event.key,
            event.kept.id,
            event.kept.status.name,
            event.dropped.id,
            event.dropped.status.name,
        )

    return _observe


def dedupe_key(prefix: str, ident: str | None) -> str:
    return f"{prefix}:{fold(ident)}"


def prefer_work_item(candidate: TodayItem, current: TodayItem) -> bool:
    """
    True when `candidate` should replace `current` for the same checklist id.

    Order: higher status rank, then earlier start, then newer update.
    """
    if candidate.status.rank != current.status.rank:
        return candidate.status.rank > current.status.rank

    inf = float("inf")
    cand_start = to_timestamp(candidate.start_at)
    curr_start = to_timestamp(current.start_at)
    cand_start = inf if cand_start is None else cand_start
    curr_start = inf if curr_start is None else curr_start
    if cand_start != curr_start:
        return cand_start < curr_start

    return (candidate.updated_at or 0.0) > (current.updated_at or 0.0)


def _checklist_titles(checklist: list[Mapping[str, Any]]) -> dict[str, str]:
    titles: dict[str, str] = {}
    for fragment in checklist:
        checklist_id = read_text(fragment, CHECKLIST_ID_KEYS)
        title = fold(read_text(fragment, TITLE_KEYS))
        if checklist_id and title:
            titles[title] = checklist_id
    return titles


def _link_by_title(fragment: Mapping[str, Any], titles: dict[str, str]) -> Mapping[str, Any]:
    """Return a copy carrying `checklist_item_id` when only the title links it."""
    if read_text(fragment, WORK_CHECKLIST_REF_KEYS):
        return fragment
    title = fold(read_text(fragment, TITLE_KEYS))
    match = titles.get(title) if title else None
    if match is None:
        return fragment
    return {**fragment, "checklist_item_id": match}


class _Accumulator:
    """Ordered result plus the global dedupe-key index."""

    def __init__(self, notify: DuplicateObserver) -> None:
        self.items: list[TodayItem] = []
        self.emitted: dict[str, TodayItem] = {}
        self.notify = notify

    def emit(self, stage: DedupeStage, key: str, item: TodayItem) -> bool:
        kept = self.emitted.get(key)
        if kept is not None:
            self.notify(DuplicateEvent(stage=stage, key=key, kept=kept, dropped=item))
            return False
        self.emitted[key] = item
        self.items.append(item)
        return True


def _merge_task(task: Mapping[str, Any], acc: _Accumulator) -> None:
    checklist = read_list(task, CHECKLIST_KEYS)
    work_items = read_list(task, WORK_ITEMS_KEYS)
    titles = _checklist_titles(checklist)

    scheduled: set[str] = set()
    winners: dict[str, TodayItem] = {}

    for raw in work_items:
        fragment = _link_by_title(raw, titles)
        item = normalize_work_item(task, fragment)
        if item is None:
            continue

        if item.source is Source.CHECKLIST and item.checklist_item_id:
            checklist_id = fold(item.checklist_item_id)
            current = winners.get(checklist_id)
            if current is None:
                winners[checklist_id] = item
            elif prefer_work_item(item, current):
                winners[checklist_id] = item
                acc.notify(
                    DuplicateEvent(DedupeStage.CHECKLIST_WORK, dedupe_key(CHECKLIST_PREFIX, checklist_id), item, current)
                )
            else:
                acc.notify(
                    DuplicateEvent(DedupeStage.CHECKLIST_WORK, dedupe_key(CHECKLIST_PREFIX, checklist_id), current, item)
                )
            scheduled.add(checklist_id)
            continue

        work_id = read_text(raw, WORK_ITEM_ID_KEYS) or item.id
        acc.emit(DedupeStage.WORK, dedupe_key(WORK_PREFIX, work_id), item)

    for checklist_id, item in winners.items():
        acc.emit(DedupeStage.CHECKLIST, dedupe_key(CHECKLIST_PREFIX, checklist_id), item)

    for fragment in checklist:
        checklist_id = fold(read_text(fragment, CHECKLIST_ID_KEYS))
        if not checklist_id or checklist_id in scheduled:
            continue
        item = normalize_checklist(task, fragment)
        if item is None:
            continue
        acc.emit(DedupeStage.CHECKLIST, dedupe_key(CHECKLIST_PREFIX, checklist_id), item)

    if not work_items and not checklist:
        item = normalize_task(task)
        if item is not None:
            acc.emit(DedupeStage.TASK, dedupe_key(TASK_PREFIX, item.task_id or item.id), item)


def _final_pass(items: list[TodayItem], notify: DuplicateObserver) -> list[TodayItem]:
    best: dict[str, TodayItem] = {}
    for item in items:
        key = fold(item.id)
        current = best.get(key)
        if current is None:
            best[key] = item
            continue
        if item.status.rank > current.status.rank:
            best[key] = item
            notify(DuplicateEvent(DedupeStage.FINAL, key, item, current))
        else:
            notify(DuplicateEvent(DedupeStage.FINAL, key, current, item))
    return list(best.values())


def merge_today_items(tasks: Any, *, observer: DuplicateObserver | None = None) -> list[TodayItem]:
    """
    Flatten and dedupe the task list.

    `tasks` may be a list of task records, an {"items": [...]} payload or None.
    The input is never mutated; the returned list is freshly built.
    """
    notify = _ignore if observer is None else _guarded(observer)
    acc = _Accumulator(notify)
    for task in unwrap_items(tasks):
        _merge_task(task, acc)
    return _final_pass(acc.items, notify)
