# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from dayplanner.core.state import TodayState

from .fakes import RecordingObserver


@pytest.fixture()
def now() -> datetime:
    """
    Fixed local "now" (naive == local time).

    Tests build start times as naive local ISO strings so the today window
    does not depend on the machine's timezone.
    """
    return datetime(2025, 1, 15, 12, 0, 0)


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with PlannerApiClient.from_settings and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="dayplanner-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        api_base_url="https://planner.test/api",
        access_token=None,
        dev_user_id="u1",
        user_id="u1",
        http_timeout_seconds=5.0,
        page_size=50,
        schedule_window_days=7,
        refresh_interval_seconds=5.0,
    )


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def state(now: datetime, observer: RecordingObserver) -> TodayState:
    return TodayState(observer=observer, clock=lambda: now)
