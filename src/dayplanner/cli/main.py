# src/dayplanner/cli/main.py

"""
CLI entrypoint.

Initializes logging, loads settings, fetches both feeds and prints today's
view. With --watch it keeps polling and reprints after every refresh.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from ..api.client import PlannerApiClient, friendly_api_error_message
from ..config import get_settings
from ..core.state import TodayState
from ..logging_setup import setup_logging
from ..today.categorize import TodayCategories
from ..today.merge import logging_observer
from ..today.models import TodayItem
from ..today.refresher import RefreshResult, refresh_once, run_today_refresher

logger = logging.getLogger(__name__)


def _format_item(item: TodayItem) -> str:
    parts = [f"  - {item.title}"]
    if item.parent_title:
        parts.append(f"[{item.parent_title}]")
    if item.priority is not None:
        parts.append(f"P{int(item.priority)}")
    if item.start_at:
        minutes = f" {int(item.planned_minutes)}m" if item.planned_minutes is not None else ""
        parts.append(f"@ {item.start_at}{minutes}")
    if item.deadline:
        parts.append(f"due {item.deadline}")
    return " ".join(parts)


def format_categories(categories: TodayCategories) -> str:
    lines: list[str] = []
    for label, bucket in (
        ("In progress", categories.in_progress),
        ("Planned", categories.planned),
        ("Completed", categories.completed),
    ):
        lines.append(f"{label} ({len(bucket)}):")
        lines.extend(_format_item(i) for i in bucket)
        if not bucket:
            lines.append("  (none)")
    lines.append(f"Done: {categories.done_count}  Progress: {categories.progress_value}%")
    return "\n".join(lines)


def _print_view(state: TodayState, *, as_json: bool) -> None:
    categories = state.view.categories
    if as_json:
        print(json.dumps(categories.as_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_categories(categories))
    sys.stdout.flush()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dayplanner", description="Show today's reconciled task list.")
    p.add_argument("--user", help="User id (default: DAYPLAN_USER_ID).")
    p.add_argument("--json", action="store_true", help="Print the categorized view as JSON.")
    p.add_argument("--watch", action="store_true", help="Keep polling both feeds and reprint.")
    p.add_argument("--all-statuses", action="store_true", help="Index schedule entries of every status.")
    return p


async def _run(args: argparse.Namespace, settings) -> int:
    user_id = (args.user or settings.user_id or "").strip()
    if not user_id:
        raise RuntimeError("User id is not set. Pass --user or set DAYPLAN_USER_ID in your .env.")

    state = TodayState(observer=logging_observer(logging.getLogger("dayplanner.today.merge")))
    if args.all_statuses:
        state.status_filter = None

    async with PlannerApiClient.from_settings(settings) as client:
        if not args.watch:
            result = await refresh_once(
                client,
                client,
                state,
                user_id=user_id,
                page_size=settings.page_size,
                window_days=settings.schedule_window_days,
            )
            if not result.tasks_ok and result.tasks_error is not None:
                logger.error("Task list unavailable: %s", friendly_api_error_message(result.tasks_error))
            if not result.schedule_ok and result.schedule_error is not None:
                logger.warning("Schedule unavailable: %s", friendly_api_error_message(result.schedule_error))
            _print_view(state, as_json=args.json)
            return 0 if result.tasks_ok else 1

        def _on_refresh(result: RefreshResult) -> None:
            _print_view(state, as_json=args.json)

        await run_today_refresher(
            client,
            client,
            state,
            user_id=user_id,
            interval_seconds=settings.refresh_interval_seconds,
            page_size=settings.page_size,
            window_days=settings.schedule_window_days,
            on_refresh=_on_refresh,
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/dayplanner"), console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "dayplanner"))

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, bye.")
        return 130
    except RuntimeError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
