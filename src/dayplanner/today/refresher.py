# src/dayplanner/today/refresher.py

"""
Feed refresher.

A small polling loop that:
- fetches the task list and the schedule-entries window concurrently,
- replaces the matching TodayState snapshot for each feed that succeeded,
- leaves the previous snapshot in place for a feed that failed.

The two feeds are independent: one failing never blocks the other.
Cancellation belongs to this loop (cancel the coroutine/task); the engine
itself has none.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..api.client import schedule_window
from ..core.ports import ScheduleFeed, TaskFeed
from ..core.state import TodayState

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RefreshResult:
    """What one refresh pass managed to update."""

    tasks_ok: bool
    schedule_ok: bool
    tasks_error: BaseException | None = None
    schedule_error: BaseException | None = None


async def refresh_once(
        task_feed: TaskFeed,
        schedule_feed: ScheduleFeed,
        state: TodayState,
        *,
        user_id: str,
        page_size: int = 100,
        window_days: int = 7,
        clock: Callable[[], datetime] = datetime.now,
) -> RefreshResult:
    start, end = schedule_window(clock(), days=window_days)

    tasks_res, schedule_res = await asyncio.gather(
        task_feed.fetch_tasks(user_id, page=1, page_size=page_size),
        schedule_feed.fetch_schedule_entries(start=start, end=end, order="asc"),
        return_exceptions=True,
    )

    tasks_error: BaseException | None = None
    schedule_error: BaseException | None = None

    if isinstance(tasks_res, BaseException):
        if isinstance(tasks_res, asyncio.CancelledError):
            raise tasks_res
        tasks_error = tasks_res
        logger.warning("task list fetch failed user=%s: %s", user_id, tasks_res)
    else:
        state.set_tasks(tasks_res)

    if isinstance(schedule_res, BaseException):
        if isinstance(schedule_res, asyncio.CancelledError):
            raise schedule_res
        schedule_error = schedule_res
        logger.warning("schedule entries fetch failed [%s, %s): %s", start, end, schedule_res)
    else:
        state.set_schedule_entries(schedule_res)

    return RefreshResult(
        tasks_ok=tasks_error is None,
        schedule_ok=schedule_error is None,
        tasks_error=tasks_error,
        schedule_error=schedule_error,
    )


async def run_today_refresher(
        task_feed: TaskFeed,
        schedule_feed: ScheduleFeed,
        state: TodayState,
        *,
        user_id: str,
        interval_seconds: float = 300.0,
        page_size: int = 100,
        window_days: int = 7,
        on_refresh: Callable[[RefreshResult], None] | None = None,
) -> None:
    """
    Simple polling refresher.

    Every interval_seconds:
    - refresh both feeds (see refresh_once)
    - hand the RefreshResult to on_refresh, if given

    To stop the refresher, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            result = await refresh_once(
                task_feed,
                schedule_feed,
                state,
                user_id=user_id,
                page_size=page_size,
                window_days=window_days,
            )
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("refresh pass failed")
        else:
            if on_refresh is not None:
                try:
                    on_refresh(result)
                except Exception:
                    logger.exception("on_refresh callback failed")

        await asyncio.sleep(sleep_s)
