# tests/test_fields.py

from __future__ import annotations

import math

from dayplanner.today.fields import (
    fold,
    read_field,
    read_list,
    read_number,
    read_priority,
    read_status,
    read_text,
    read_timestamp,
    to_number,
    to_timestamp,
    unwrap_items,
)
from dayplanner.today.models import Priority, Status


def test_read_field_takes_first_present_alias() -> None:
    record = {"task_id": "snake", "taskId": None, "id": "plain"}
    assert read_field(record, ["taskId", "task_id", "id"]) == "snake"
    assert read_field(record, ["missing"], default="x") == "x"


def test_read_field_tolerates_non_mapping_records() -> None:
    assert read_field(None, ["a"]) is None
    assert read_field(["a"], ["a"], default=0) == 0


def test_read_text_skips_blank_values_and_stringifies() -> None:
    record = {"checklistItemId": "   ", "checklist_item_id": 42}
    assert read_text(record, ["checklistItemId", "checklist_item_id"]) == "42"
    assert read_text({"title": "  Outline "}, ["title"]) == "Outline"
    assert read_text({"title": ""}, ["title"]) is None


def test_to_number_coercion() -> None:
    assert to_number(3) == 3.0
    assert to_number("3.5") == 3.5
    assert to_number("abc") is None
    assert to_number(True) is None
    assert to_number(math.nan) is None
    assert to_number(math.inf) is None
    assert read_number({"plannedMinutes": "25"}, ["plannedMinutes", "planned_minutes"]) == 25.0


def test_read_status_defaults_unrecognized_to_planned() -> None:
    assert read_status({}, ["status"]) is None
    assert read_status({"status": "weird"}, ["status"]) is Status.PLANNED
    assert read_status({"status": 9}, ["status"]) is Status.PLANNED
    assert read_status({"status": 1.5}, ["status"]) is Status.PLANNED
    assert read_status({"status": "2"}, ["status"]) is Status.DONE
    assert read_status({"status": 3}, ["status"]) is Status.SKIPPED
    assert read_status({"status": "In-Progress"}, ["status"]) is Status.IN_PROGRESS


def test_read_priority_only_accepts_three_levels() -> None:
    assert read_priority({"priority": 1}, ["priority"]) is Priority.MUST
    assert read_priority({"priority": "2"}, ["priority"]) is Priority.SHOULD
    assert read_priority({"priority": 4}, ["priority"]) is None
    assert read_priority({"priority": 2.5}, ["priority"]) is None
    assert read_priority({"priority": "high"}, ["priority"]) is None
    assert read_priority({}, ["priority"]) is None


def test_timestamps_parse_or_drop_to_none() -> None:
    assert to_timestamp("2025-01-15T09:00:00Z") == 1736931600.0
    assert to_timestamp("2025-01-15T09:00:00+00:00") == 1736931600.0
    assert to_timestamp(1736931600000) == 1736931600.0
    assert to_timestamp(12.5) == 0.0125
    assert to_timestamp("not a date") is None
    assert to_timestamp("") is None
    assert to_timestamp(None) is None
    assert read_timestamp({"updated_at": "garbage", "updatedAt": None}, ["updatedAt", "updated_at"]) is None


def test_read_list_drops_non_mapping_members() -> None:
    task = {"checklist": [{"id": "c1"}, "junk", None, {"id": "c2"}]}
    assert [c["id"] for c in read_list(task, ["checklist"])] == ["c1", "c2"]
    assert read_list({"checklist": "nope"}, ["checklist"]) == []


def test_unwrap_items_accepts_list_or_envelope() -> None:
    assert unwrap_items([{"a": 1}]) == [{"a": 1}]
    assert unwrap_items({"items": [{"a": 1}, 3]}) == [{"a": 1}]
    assert unwrap_items({"items": None}) == []
    assert unwrap_items(None) == []


def test_fold_is_case_and_space_insensitive() -> None:
    assert fold("  OutLine ") == "outline"
    assert fold(None) == ""
