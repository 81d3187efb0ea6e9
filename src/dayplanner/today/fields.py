# src/dayplanner/today/fields.py

"""
Alias-tolerant field reader.

Records from the task service are loosely shaped: the same logical field can
arrive as camelCase, snake_case or under an older name. Call sites pass the
ordered list of spellings they accept; the first key that is present with a
non-None value wins.

Nothing here raises on bad input. Coercion failures fall back to:
- status   -> Status.PLANNED
- priority -> None
- number   -> None
- timestamp-> None
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from .models import Priority, Status

Record = Mapping[str, Any]


def read_field(record: Any, keys: Sequence[str], default: Any = None) -> Any:
    if not isinstance(record, Mapping):
        return default
    for key in keys:
        if key in record:
            value = record[key]
            if value is not None:
                return value
    return default


def read_text(record: Any, keys: Sequence[str]) -> str | None:
    """Like read_field, but coerces to a stripped string and skips blank values."""
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if value is None or isinstance(value, (bool, Mapping, list, tuple)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def read_number(record: Any, keys: Sequence[str]) -> float | None:
    return to_number(read_field(record, keys))


def read_status(record: Any, keys: Sequence[str]) -> Status | None:
    """None only when no key is present; an unrecognized value reads as PLANNED."""
    raw = read_field(record, keys)
    if raw is None:
        return None
    return Status.from_raw(raw)


def read_priority(record: Any, keys: Sequence[str]) -> Priority | None:
    return Priority.from_raw(read_field(record, keys))


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 string (or pass a datetime through).

    A trailing "Z" is accepted. Naive results mean local time.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_timestamp(value: Any) -> float | None:
    """
    POSIX seconds from a number, datetime or ISO string; None when unparseable.

    Numbers on the wire are epoch milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number / 1000.0 if math.isfinite(number) else None
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return None


def read_timestamp(record: Any, keys: Sequence[str]) -> float | None:
    return to_timestamp(read_field(record, keys))


def read_list(record: Any, keys: Sequence[str]) -> list[Record]:
    """Embedded record lists; non-list values and non-mapping members are dropped."""
    value = read_field(record, keys)
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def unwrap_items(payload: Any) -> list[Record]:
    """
    Accept either a bare list or an {"items": [...]} envelope.

    None (feed not resolved yet) and anything unrecognized give an empty list.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("items")
    if not isinstance(payload, (list, tuple)):
        return []
    return [v for v in payload if isinstance(v, Mapping)]


def fold(value: str | None) -> str:
    """Case-insensitive comparison key for identifiers and titles."""
    return (value or "").strip().lower()
