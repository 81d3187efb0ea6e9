# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "DAYPLAN_APP_NAME": "App display name (default: dayplanner).",
    "DAYPLAN_LOG_LEVEL": "Console logging level (default: INFO).",
    "DAYPLAN_DATA_DIR": "Local data directory; holds dayplanner.log (default: .local/dayplanner).",
    # Task service
    "DAYPLAN_API_BASE_URL": "Task service base URL, e.g. https://planner.example.com/api (required).",
    "DAYPLAN_ACCESS_TOKEN": "Bearer token; takes precedence over DAYPLAN_DEV_USER_ID.",
    "DAYPLAN_DEV_USER_ID": "Dev-mode user id sent as x-user-id when no token is set.",
    "DAYPLAN_USER_ID": "User whose tasks are listed (default: DAYPLAN_DEV_USER_ID).",
    "DAYPLAN_HTTP_TIMEOUT_SECONDS": "Per-request timeout (default: 15).",
    # Feeds
    "DAYPLAN_PAGE_SIZE": "Task list page size (default: 100).",
    "DAYPLAN_SCHEDULE_WINDOW_DAYS": "Schedule-entries window from start of today (default: 7).",
    "DAYPLAN_REFRESH_INTERVAL_SECONDS": "Polling interval for --watch (default: 300, min 5).",
}
