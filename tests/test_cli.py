# tests/test_cli.py

from __future__ import annotations

from dayplanner.cli import main as cli
from dayplanner.today.categorize import categorize
from dayplanner.today.models import Priority, Source, Status, TodayItem


def test_format_categories() -> None:
    items = [
        TodayItem(
            id="c1",
            source=Source.CHECKLIST,
            title="Outline",
            parent_title="Essay",
            status=Status.IN_PROGRESS,
            priority=Priority.MUST,
            start_at="2025-01-15T09:00:00",
            planned_minutes=30.0,
        ),
        TodayItem(id="t3", source=Source.TASK, title="Laundry", status=Status.DONE),
    ]
    text = cli.format_categories(categorize(items))
    lines = text.splitlines()

    assert lines[0] == "In progress (1):"
    assert lines[1] == "  - Outline [Essay] P1 @ 2025-01-15T09:00:00 30m"
    assert lines[2] == "Planned (0):"
    assert lines[3] == "  (none)"
    assert lines[4] == "Completed (1):"
    assert lines[5] == "  - Laundry"
    assert lines[-1] == "Done: 1  Progress: 50%"


def test_main_without_user_id_exits_with_config_error(monkeypatch, settings, tmp_path) -> None:
    settings.user_id = None
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: tmp_path / "dayplanner.log")

    assert cli.main([]) == 2
