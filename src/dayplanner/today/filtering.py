# src/dayplanner/today/filtering.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, timedelta

from .fields import parse_datetime
from .models import Status, TodayItem


def _local(dt: datetime) -> datetime:
    """Aware datetime in the local zone; naive input is taken as local time."""
    return dt.astimezone()


def today_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    [start of today, start of tomorrow) in local time, as aware datetimes.

    Both bounds are local midnights, so a DST day is 23 or 25 hours long.
    """
    local_now = _local(now or datetime.now())
    today = local_now.date()
    start = datetime.combine(today, time.min).astimezone()
    end = datetime.combine(today + timedelta(days=1), time.min).astimezone()
    return start, end


def belongs_today(item: TodayItem, start: datetime, end: datetime) -> bool:
    # unscheduled and in-progress items are always surfaced
    if not item.start_at:
        return True
    if item.status == Status.IN_PROGRESS:
        return True

    scheduled = parse_datetime(item.start_at)
    if scheduled is None:
        return True
    try:
        scheduled = _local(scheduled)
    except (OverflowError, OSError, ValueError):
        return True
    return start <= scheduled < end


def filter_today_items(items: Iterable[TodayItem], *, now: datetime | None = None) -> list[TodayItem]:
    start, end = today_window(now)
    return [item for item in items if belongs_today(item, start, end)]
