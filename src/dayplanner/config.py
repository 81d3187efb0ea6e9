# src/dayplanner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "DAYPLAN"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Task service ----
    api_base_url: str
    access_token: Optional[str]
    dev_user_id: Optional[str]
    user_id: Optional[str]
    http_timeout_seconds: float

    # ---- Feeds ----
    page_size: int
    schedule_window_days: int
    refresh_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "dayplanner") or "dayplanner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/dayplanner"))

        api_base_url = _env(_k("API_BASE_URL"), "").strip()
        access_token = _first_env(_k("ACCESS_TOKEN"), default=None)
        dev_user_id = _first_env(_k("DEV_USER_ID"), default=None)
        # The dev user id doubles as the default subject of the task list.
        user_id = _first_env(_k("USER_ID"), _k("DEV_USER_ID"), default=None)
        http_timeout_seconds = max(1.0, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 15.0))

        page_size = max(1, _env_int(_k("PAGE_SIZE"), 100))
        schedule_window_days = max(1, _env_int(_k("SCHEDULE_WINDOW_DAYS"), 7))
        refresh_interval_seconds = max(5.0, _env_float(_k("REFRESH_INTERVAL_SECONDS"), 300.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            api_base_url=api_base_url,
            access_token=(access_token or "").strip() or None,
            dev_user_id=(dev_user_id or "").strip() or None,
            user_id=(user_id or "").strip() or None,
            http_timeout_seconds=http_timeout_seconds,
            page_size=page_size,
            schedule_window_days=schedule_window_days,
            refresh_interval_seconds=refresh_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
