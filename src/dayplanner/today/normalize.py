# src/dayplanner/today/normalize.py

"""
Record -> TodayItem converters.

Fallback cascades (first present value wins):
- status:   task derived status -> fragment status -> task status
- priority: task priority / effective priority -> fragment priority
- deadline: fragment deadline -> task effective deadline / deadline
- updated:  fragment -> task
"""

from __future__ import annotations

from typing import Any

from .fields import read_number, read_priority, read_status, read_text, read_timestamp
from .models import Priority, Source, Status, TodayItem

UNKNOWN_ID = "(Unknown)"
UNTITLED = "(Untitled)"

TASK_ID_KEYS = ("taskId", "task_id", "id")
FRAGMENT_TASK_ID_KEYS = ("taskId", "task_id", "atomicTaskId", "atomic_task_id")
WORK_ITEM_ID_KEYS = ("workItemId", "work_item_id", "work_id", "workId")
WORK_CHECKLIST_REF_KEYS = ("checklistItemId", "checklist_item_id", "checklistId", "checklist_id")
CHECKLIST_ID_KEYS = ("checklistItemId", "checklist_item_id", "itemId", "item_id", "id")

WORK_ITEMS_KEYS = ("workItems", "work_items")
CHECKLIST_KEYS = ("checklist", "checklistItems", "checklist_items")

TITLE_KEYS = ("title",)
STATUS_KEYS = ("status",)
DERIVED_STATUS_KEYS = ("derived_status", "derivedStatus")
TASK_PRIORITY_KEYS = ("priority", "effectivePriority", "effective_priority")
FRAGMENT_PRIORITY_KEYS = ("priority", "effectivePriority", "effective_priority")
DEADLINE_KEYS = ("deadline",)
TASK_DEADLINE_KEYS = ("effectiveDeadline", "effective_deadline", "deadline")
UPDATED_AT_KEYS = ("updatedAt", "updated_at")
START_AT_KEYS = ("startAt", "start_at")
PLANNED_MINUTES_KEYS = ("plannedMinutes", "planned_minutes")


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def _status(task: Any, fragment: Any | None) -> Status:
    return _first(
        read_status(task, DERIVED_STATUS_KEYS),
        read_status(fragment, STATUS_KEYS) if fragment is not None else None,
        read_status(task, STATUS_KEYS),
        Status.PLANNED,
    )


def _priority(task: Any, fragment: Any | None) -> Priority | None:
    return _first(
        read_priority(task, TASK_PRIORITY_KEYS),
        read_priority(fragment, FRAGMENT_PRIORITY_KEYS) if fragment is not None else None,
    )


def _deadline(task: Any, fragment: Any | None) -> str | None:
    return _first(
        read_text(fragment, DEADLINE_KEYS) if fragment is not None else None,
        read_text(task, TASK_DEADLINE_KEYS),
    )


def _updated_at(task: Any, fragment: Any | None) -> float | None:
    return _first(
        read_timestamp(fragment, UPDATED_AT_KEYS) if fragment is not None else None,
        read_timestamp(task, UPDATED_AT_KEYS),
    )


def normalize_work_item(task: Any, fragment: Any) -> TodayItem | None:
    """
    Work-item fragment -> TodayItem.

    The identifier is the work-item id, else the checklist id, else the task id,
    else UNKNOWN_ID. The item is checklist-sourced iff a checklist reference resolved.
    """
    task_id = read_text(fragment, FRAGMENT_TASK_ID_KEYS) or read_text(task, TASK_ID_KEYS)
    checklist_item_id = read_text(fragment, WORK_CHECKLIST_REF_KEYS)
    work_item_id = read_text(fragment, WORK_ITEM_ID_KEYS)

    is_checklist = checklist_item_id is not None
    return TodayItem(
        id=work_item_id or checklist_item_id or task_id or UNKNOWN_ID,
        source=Source.CHECKLIST if is_checklist else Source.TASK,
        title=read_text(fragment, TITLE_KEYS) or UNTITLED,
        parent_title=(read_text(task, TITLE_KEYS) or UNTITLED) if is_checklist else None,
        status=_status(task, fragment),
        priority=_priority(task, fragment),
        start_at=read_text(fragment, START_AT_KEYS),
        planned_minutes=read_number(fragment, PLANNED_MINUTES_KEYS),
        deadline=_deadline(task, fragment),
        updated_at=_updated_at(task, fragment),
        task_id=task_id,
        checklist_item_id=checklist_item_id,
    )


def normalize_checklist(task: Any, fragment: Any) -> TodayItem | None:
    checklist_item_id = read_text(fragment, CHECKLIST_ID_KEYS)
    if not checklist_item_id:
        return None

    return TodayItem(
        id=checklist_item_id,
        source=Source.CHECKLIST,
        title=read_text(fragment, TITLE_KEYS) or UNTITLED,
        parent_title=read_text(task, TITLE_KEYS) or UNTITLED,
        status=_status(task, fragment),
        priority=_priority(task, fragment),
        start_at=read_text(fragment, START_AT_KEYS),
        planned_minutes=read_number(fragment, PLANNED_MINUTES_KEYS),
        deadline=_deadline(task, fragment),
        updated_at=_updated_at(task, fragment),
        task_id=read_text(task, TASK_ID_KEYS),
        checklist_item_id=checklist_item_id,
    )


def normalize_task(task: Any) -> TodayItem | None:
    """Atomic task (no fragments at all) -> TodayItem."""
    task_id = read_text(task, TASK_ID_KEYS)
    if not task_id:
        return None

    return TodayItem(
        id=task_id,
        source=Source.TASK,
        title=read_text(task, TITLE_KEYS) or UNTITLED,
        parent_title=None,
        status=_status(task, None),
        priority=_priority(task, None),
        start_at=read_text(task, START_AT_KEYS),
        planned_minutes=read_number(task, PLANNED_MINUTES_KEYS),
        deadline=_deadline(task, None),
        updated_at=_updated_at(task, None),
        task_id=task_id,
        checklist_item_id=None,
    )
