# src/dayplanner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the today engine wiring.

The refresher depends on Protocols instead of the concrete HTTP client.
This keeps the transport swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol

from ..today.merge import DuplicateEvent, DuplicateObserver

TaskRecord = dict[str, Any]
# Task-service record: task with embedded "checklist" and "workItems" lists.

ScheduleRecord = dict[str, Any]
# Schedule-entries feed record: start_at, planned_minutes, status, *_id refs.


class TaskFeed(Protocol):
    """Task list for one user (checklist + work items embedded)."""

    def fetch_tasks(self, user_id: str, *, page: int = 1, page_size: int = 100) -> Awaitable[list[TaskRecord]]: ...


class ScheduleFeed(Protocol):
    """
    Calendar entries in a [start, end) window.

    The feed decides how to encode the window on the wire; callers pass ISO-8601 strings.
    """

    def fetch_schedule_entries(
            self,
            *,
            start: str,
            end: str,
            order: str = "asc",
            status: int | None = None,
    ) -> Awaitable[list[ScheduleRecord]]: ...


__all__ = [
    "DuplicateEvent",
    "DuplicateObserver",
    "ScheduleFeed",
    "ScheduleRecord",
    "TaskFeed",
    "TaskRecord",
]
