# tests/test_merge.py

from __future__ import annotations

import copy

from dayplanner.today.merge import DedupeStage, dedupe_key, merge_today_items, prefer_work_item
from dayplanner.today.models import Source, Status, TodayItem

from .fakes import RecordingObserver


def _ids(items) -> list[str]:
    return [i.id for i in items]


def test_work_item_linked_by_title_replaces_checklist_fragment() -> None:
    tasks = [
        {
            "id": "t1",
            "title": "Essay",
            "checklist": [{"id": "c1", "title": "Outline"}],
            "workItems": [{"id": "wi-row-1", "title": "Outline", "status": 1}],
        }
    ]
    items = merge_today_items(tasks)

    assert len(items) == 1
    item = items[0]
    assert item.id == "c1"
    assert item.status is Status.IN_PROGRESS
    assert item.parent_title == "Essay"
    assert item.source is Source.CHECKLIST


def test_title_link_is_case_and_space_insensitive() -> None:
    tasks = [
        {
            "id": "t1",
            "title": "Essay",
            "checklist": [{"id": "c1", "title": "  Outline "}],
            "workItems": [{"title": "OUTLINE", "status": 2}],
        }
    ]
    items = merge_today_items(tasks)
    assert _ids(items) == ["c1"]
    assert items[0].status is Status.DONE


def test_atomic_task_is_emitted_under_task_id() -> None:
    items = merge_today_items([{"id": "t7", "title": "Reading", "status": 0}])

    assert len(items) == 1
    assert items[0].id == "t7"
    assert items[0].source is Source.TASK
    assert items[0].status is Status.PLANNED


def test_task_with_fragments_is_not_emitted_as_atomic() -> None:
    tasks = [{"id": "t1", "title": "Essay", "checklist": [{"id": "c1", "title": "Outline"}]}]
    assert _ids(merge_today_items(tasks)) == ["c1"]


def test_unlinked_work_items_and_checklist_fragments_are_both_kept() -> None:
    tasks = [
        {
            "id": "t1",
            "title": "Essay",
            "checklist": [{"id": "c1", "title": "Outline"}, {"id": "c2", "title": "Draft"}],
            "workItems": [{"workItemId": "w1", "title": "Research"}],
        }
    ]
    items = merge_today_items(tasks)
    assert _ids(items) == ["w1", "c1", "c2"]


def test_per_checklist_winner_by_status_rank() -> None:
    tasks = [
        {
            "id": "t1",
            "checklist": [{"id": "c1", "title": "Outline"}],
            "workItems": [
                {"workItemId": "w1", "checklistItemId": "c1", "status": 2},
                {"workItemId": "w2", "checklistItemId": "C1", "status": 1},
                {"workItemId": "w3", "checklistItemId": "c1", "status": 3},
            ],
        }
    ]
    observer = RecordingObserver()
    items = merge_today_items(tasks, observer=observer)

    assert _ids(items) == ["w2"]
    assert observer.stages() == ["checklist_work", "checklist_work"]
    assert all(e.key == "checklist:c1" for e in observer.events)
    assert observer.events[0].kept.id == "w2"
    assert observer.events[0].dropped.id == "w1"


def test_per_checklist_tie_prefers_earlier_start_then_newer_update() -> None:
    tasks = [
        {
            "id": "t1",
            "workItems": [
                {"workItemId": "late", "checklistItemId": "c1", "startAt": "2025-01-15T11:00:00"},
                {"workItemId": "early", "checklistItemId": "c1", "startAt": "2025-01-15T09:00:00"},
                {"workItemId": "nostart", "checklistItemId": "c1"},
            ],
        }
    ]
    assert _ids(merge_today_items(tasks)) == ["early"]

    tasks = [
        {
            "id": "t1",
            "workItems": [
                {"workItemId": "old", "checklistItemId": "c1", "updatedAt": "2025-01-01T00:00:00Z"},
                {"workItemId": "new", "checklistItemId": "c1", "updatedAt": "2025-01-02T00:00:00Z"},
            ],
        }
    ]
    assert _ids(merge_today_items(tasks)) == ["new"]


def test_prefer_work_item_keeps_current_on_full_tie() -> None:
    a = TodayItem(id="a", source=Source.CHECKLIST, title="A", status=Status.PLANNED)
    b = TodayItem(id="b", source=Source.CHECKLIST, title="B", status=Status.PLANNED)
    assert prefer_work_item(b, a) is False


def test_checklist_fragment_shared_across_tasks_is_emitted_once() -> None:
    tasks = [
        {"id": "t1", "title": "A", "checklist": [{"id": "c1", "title": "Shared", "status": 0}]},
        {"id": "t2", "title": "B", "checklist": [{"id": "C1", "title": "Shared", "status": 1}]},
    ]
    observer = RecordingObserver()
    items = merge_today_items(tasks, observer=observer)

    assert len(items) == 1
    assert items[0].parent_title == "A"
    assert observer.stages() == ["checklist"]
    assert observer.events[0].key == dedupe_key("checklist", "c1")


def test_same_raw_id_in_different_namespaces_does_not_collide_until_final_pass() -> None:
    tasks = [
        {"id": "t1", "workItems": [{"workItemId": "x1", "status": 0}]},
        {"id": "t2", "checklist": [{"id": "X1", "status": 1}]},
    ]
    observer = RecordingObserver()
    items = merge_today_items(tasks, observer=observer)

    assert len(items) == 1
    assert items[0].id == "X1"
    assert items[0].status is Status.IN_PROGRESS
    assert observer.stages() == ["final"]
    assert observer.events[0].dropped.id == "x1"


def test_final_pass_keeps_first_seen_on_equal_rank() -> None:
    tasks = [
        {"id": "dup", "title": "first"},
        {"id": "DUP", "title": "second"},
        {"id": "t3", "workItems": [{"workItemId": "dup", "title": "third"}]},
    ]
    items = merge_today_items(tasks)
    assert [i.title for i in items] == ["first"]


def test_duplicate_work_item_across_tasks() -> None:
    tasks = [
        {"id": "t1", "workItems": [{"workItemId": "w1", "title": "one"}]},
        {"id": "t2", "workItems": [{"work_item_id": "W1", "title": "two"}]},
    ]
    observer = RecordingObserver()
    items = merge_today_items(tasks, observer=observer)

    assert [i.title for i in items] == ["one"]
    assert observer.events[0].stage is DedupeStage.WORK


def test_identifiers_are_unique_case_insensitively() -> None:
    tasks = [
        {"id": "a", "checklist": [{"id": "c1"}, {"id": "c2"}], "workItems": [{"workItemId": "c2"}]},
        {"id": "b", "checklist": [{"id": "C2"}], "workItems": [{"workItemId": "A"}]},
        {"id": "A"},
        {"id": "c1"},
    ]
    items = merge_today_items(tasks)
    folded = [i.id.lower() for i in items]
    assert len(folded) == len(set(folded))


def test_input_is_not_mutated() -> None:
    tasks = [
        {
            "id": "t1",
            "title": "Essay",
            "checklist": [{"id": "c1", "title": "Outline"}],
            "workItems": [{"title": "Outline", "status": 1}],
        }
    ]
    before = copy.deepcopy(tasks)
    merge_today_items(tasks)
    assert tasks == before


def test_accepts_envelope_and_missing_feed() -> None:
    assert _ids(merge_today_items({"items": [{"id": "t1"}]})) == ["t1"]
    assert merge_today_items(None) == []
    assert merge_today_items([None, "junk", {"title": "no id"}]) == []


def test_failing_observer_does_not_abort_merge(caplog) -> None:
    def broken(_event) -> None:
        raise RuntimeError("observer broke")

    items = merge_today_items([{"id": "a"}, {"id": "A"}], observer=broken)

    assert _ids(items) == ["a"]
    assert any("duplicate observer failed" in r.getMessage() for r in caplog.records)
