# src/dayplanner/core/state.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..today.engine import TodayView, build_today_view
from ..today.merge import DuplicateObserver
from ..today.models import Status

logger = logging.getLogger(__name__)

StateListener = Callable[["TodayState"], None]


@dataclass
class TodayState:
    """
    The two input snapshots and the view derived from them.

    Snapshots are replaced wholesale, never patched. `None` means the feed has
    not resolved yet. The view is rebuilt lazily and cached until a snapshot,
    the date, `status_filter` or `observer` changes;
    the cache is only a shortcut, rebuilding always gives the same result.
    """

    tasks: list[dict[str, Any]] | None = None
    schedule_entries: list[dict[str, Any]] | None = None

    status_filter: Status | None = Status.PLANNED
    observer: DuplicateObserver | None = None
    clock: Callable[[], datetime] = datetime.now

    version: int = 0
    _cached: tuple[tuple[Any, ...], TodayView] | None = field(default=None, repr=False)
    _listeners: list[StateListener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_tasks(self, tasks: list[dict[str, Any]] | None) -> None:
        self.tasks = None if tasks is None else list(tasks)
        self._changed("tasks")

    def set_schedule_entries(self, entries: list[dict[str, Any]] | None) -> None:
        self.schedule_entries = None if entries is None else list(entries)
        self._changed("schedule_entries")

    def _changed(self, what: str) -> None:
        self.version += 1
        logger.debug("TodayState %s updated (version=%d)", what, self.version)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("TodayState listener failed")

    @property
    def view(self) -> TodayView:
        # The day boundary moves with the clock, so the cache is keyed on the date as well.
        now = self.clock()
        key = (self.version, now.date(), self.status_filter, self.observer)
        if self._cached is not None and self._cached[0] == key:
            return self._cached[1]

        view = build_today_view(
            self.tasks,
            self.schedule_entries,
            now=now,
            status_filter=self.status_filter,
            observer=self.observer,
        )
        self._cached = (key, view)
        return view
