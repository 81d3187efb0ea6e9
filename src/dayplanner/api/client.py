# src/dayplanner/api/client.py

"""
Async client for the two feeds the today view is built from.

- GET /tasks/by-user/{userId}        -> {"items": [TaskRecord, ...]}
- GET /schedule-entries/upcoming     -> [ScheduleEntry, ...] or {"items": [...]}

Auth: bearer token when configured, otherwise the dev `x-user-id` header.
Retries and token refresh are not handled here; a failed call raises
PlannerApiError and the caller decides what to do with the stale snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

import httpx

from ..today.fields import unwrap_items
from ..today.filtering import today_window

logger = logging.getLogger(__name__)


class PlannerApiError(RuntimeError):
    """Any failure talking to the task service (transport or non-2xx)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _is_auth_status(code: int) -> bool:
    return code in (401, 403)


def _is_timeout(exc: Exception) -> bool:
    return isinstance(exc, httpx.TimeoutException)


def friendly_api_error_message(err: Exception) -> str:
    code = getattr(err, "status_code", None)
    if code is not None and _is_auth_status(int(code)):
        return "Task service rejected the credentials. Check DAYPLAN_ACCESS_TOKEN / DAYPLAN_DEV_USER_ID."
    if code == 404:
        return "Task service endpoint not found. Check DAYPLAN_API_BASE_URL."
    msg = str(err).strip() or "Task service error."
    return msg


def schedule_window(now: datetime | None = None, days: int = 7) -> tuple[str, str]:
    """ISO-8601 [from, to) for a rolling window starting at the start of today (local)."""
    start, _ = today_window(now)
    end = start + timedelta(days=max(1, int(days)))
    # re-resolve the local offset at the far end (DST may differ)
    end = end.replace(tzinfo=None).astimezone()
    return start.isoformat(), end.isoformat()


def auth_headers(*, access_token: str | None = None, dev_user_id: str | None = None) -> dict[str, str]:
    if access_token:
        return {"Authorization": f"Bearer {access_token}"}
    if dev_user_id:
        return {"x-user-id": dev_user_id}
    return {}


class PlannerApiClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    Pass `transport=` to plug a fake transport (httpx.MockTransport) in tests.
    """

    def __init__(
            self,
            base_url: str,
            *,
            access_token: str | None = None,
            dev_user_id: str | None = None,
            timeout_seconds: float = 15.0,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise RuntimeError("Task service base URL is not set. Set DAYPLAN_API_BASE_URL in your .env.")

        self._client = httpx.AsyncClient(
            base_url=base_url.strip().rstrip("/"),
            headers=auth_headers(access_token=access_token, dev_user_id=dev_user_id),
            timeout=httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds)),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> PlannerApiClient:
        return cls(
            getattr(settings, "api_base_url", "") or "",
            access_token=getattr(settings, "access_token", None),
            dev_user_id=getattr(settings, "dev_user_id", None),
            timeout_seconds=float(getattr(settings, "http_timeout_seconds", 15.0)),
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PlannerApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: list[tuple[str, str]] | dict[str, Any]) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            kind = "timeout" if _is_timeout(e) else "network error"
            logger.warning("GET %s failed (%s): %s", path, kind, e.__class__.__name__)
            raise PlannerApiError(f"Task service {kind} on GET {path}.") from e

        if response.status_code >= 400:
            logger.warning("GET %s -> HTTP %s", path, response.status_code)
            raise PlannerApiError(
                f"Task service returned HTTP {response.status_code} on GET {path}.",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PlannerApiError(
                f"Task service returned a non-JSON body on GET {path}.",
                status_code=response.status_code,
            ) from e

    async def fetch_tasks(self, user_id: str, *, page: int = 1, page_size: int = 100) -> list[dict[str, Any]]:
        if not user_id:
            raise PlannerApiError("user_id is required to fetch tasks.")
        payload = await self._get_json(
            f"/tasks/by-user/{user_id}",
            {
                "page": page,
                "pageSize": page_size,
                "includeChecklist": "true",
                "includeWorkItems": "true",
            },
        )
        items = [dict(t) for t in unwrap_items(payload)]
        logger.debug("fetched %d tasks for user=%s", len(items), user_id)
        return items

    async def fetch_schedule_entries(
            self,
            *,
            start: str,
            end: str,
            order: str = "asc",
            status: int | None = None,
    ) -> list[dict[str, Any]]:
        params: list[tuple[str, str]] = [("from", start), ("to", end), ("order", order)]
        if status is not None:
            params.append(("status", str(int(status))))
        payload = await self._get_json("/schedule-entries/upcoming", params)
        items = [dict(e) for e in unwrap_items(payload)]
        logger.debug("fetched %d schedule entries in [%s, %s)", len(items), start, end)
        return items
