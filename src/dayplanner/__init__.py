"""
dayplanner: reconciles task-service data into a single "today" view.

Subpackages:
- today/: the pure reconciliation pipeline (normalize, merge, schedule, filter, categorize)
- api/: async HTTP client for the task list and schedule-entries feeds
- core/: ports (Protocols) and the reactive TodayState
- cli/: console entry point
"""
