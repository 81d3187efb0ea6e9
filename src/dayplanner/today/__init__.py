"""
Today-view reconciliation engine.

Components:
- models.py: data structures (Status, Priority, TodayItem, ScheduleEntry)
- fields.py: alias-tolerant field reader with type coercion
- normalize.py: task / checklist / work-item -> TodayItem converters
- merge.py: merge + dedupe pipeline over the fetched task list
- schedule.py: schedule lookup builder, augmenter and finder
- filtering.py: today window and the today filter
- categorize.py: in-progress / planned / completed buckets
- engine.py: the whole pipeline behind one call
- refresher.py: feeds -> TodayState wiring (one-shot and polling)
"""

from .engine import TodayView, build_today_view
from .models import Priority, ScheduleEntry, Source, Status, TodayItem

__all__ = [
    "Priority",
    "ScheduleEntry",
    "Source",
    "Status",
    "TodayItem",
    "TodayView",
    "build_today_view",
]
