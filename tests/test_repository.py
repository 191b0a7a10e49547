# tests/test_repository.py

from __future__ import annotations

from pathlib import Path

from assignment_hub.assignments.models import Draft, Priority
from assignment_hub.assignments.query import view
from assignment_hub.assignments.repository import TaskRepository
from assignment_hub.storage.kv_store import KeyValueStore

from .conftest import TODAY
from .fakes import FailingKeyValueStore, FakeKeyValueStore

KEY = "studentAssignments"


def _fill(repo: TaskRepository, *titles: str) -> list[int]:
    """Add titles in order; returns ids in collection order (newest first)."""
    for title in titles:
        assert repo.add(Draft(title=title)).ok
    return [t.id for t in repo.tasks]


def test_add_prepends_and_persists(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    repo.add(Draft(title="First"))
    result = repo.add(
        Draft(title="  Second  ", category=" Math ", due_date="2026-04-01", priority=Priority.HIGH)
    )

    assert result.ok and result.task is not None
    task = result.task
    assert task.title == "Second"
    assert task.category == "Math"
    assert task.due_date == "2026-04-01"
    assert task.priority is Priority.HIGH
    assert task.completed is False
    assert task.created_at.endswith("Z")

    assert [t.title for t in repo.tasks] == ["Second", "First"]
    assert [t["title"] for t in fake_store.value(KEY)] == ["Second", "First"]


def test_add_then_neutral_view_shows_new_task_first(repo: TaskRepository) -> None:
    _fill(repo, "a", "b", "c")
    result = repo.add(Draft(title="newest"))
    assert view(repo.tasks)[0].id == result.task.id  # type: ignore[union-attr]


def test_ids_are_unique(repo: TaskRepository) -> None:
    ids = _fill(repo, *[f"t{i}" for i in range(20)])
    assert len(set(ids)) == 20


def test_add_invalid_draft_does_not_mutate(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    result = repo.add(Draft(title=" ", due_date="2026-03-14"))
    assert not result.ok
    assert result.errors.title_error == "Title is required."
    assert result.errors.due_date_error == "Due date cannot be in the past."
    assert len(repo) == 0
    assert fake_store.saves == 0


def test_update_keeps_identity_position_and_completion(repo: TaskRepository) -> None:
    ids = _fill(repo, "a", "b", "c")
    target = ids[1]
    repo.toggle_complete(target)
    before = repo.get(target)
    assert before is not None
    created_at = before.created_at

    result = repo.update(
        target, Draft(title="renamed", category="Bio", due_date="2026-03-15", priority=Priority.LOW)
    )

    assert result.ok
    updated = repo.get(target)
    assert updated is not None
    assert updated.id == target
    assert updated.created_at == created_at
    assert updated.completed is True
    assert (updated.title, updated.category, updated.due_date, updated.priority) == (
        "renamed",
        "Bio",
        "2026-03-15",
        Priority.LOW,
    )
    assert [t.id for t in repo.tasks] == ids


def test_update_unknown_id_is_not_found(repo: TaskRepository) -> None:
    _fill(repo, "a")
    result = repo.update(12345, Draft(title="x"))
    assert not result.ok
    assert result.not_found


def test_update_invalid_draft_reports_errors(repo: TaskRepository) -> None:
    (tid,) = _fill(repo, "a")
    result = repo.update(tid, Draft(title=""))
    assert result.errors.title_error
    assert repo.get(tid).title == "a"  # type: ignore[union-attr]


def test_remove_and_missing_remove(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    ids = _fill(repo, "a", "b")
    assert repo.remove(ids[0]) is True
    assert [t.id for t in repo.tasks] == [ids[1]]

    saves = fake_store.saves
    assert repo.remove(999) is False
    assert fake_store.saves == saves


def test_remove_clears_editing_target(repo: TaskRepository) -> None:
    ids = _fill(repo, "a", "b")
    repo.begin_edit(ids[0])
    repo.remove(ids[1])
    assert repo.editing_id == ids[0]
    repo.remove(ids[0])
    assert repo.editing_id is None


def test_toggle_twice_is_identity(repo: TaskRepository) -> None:
    (tid,) = _fill(repo, "a")
    assert repo.toggle_complete(tid).completed is True  # type: ignore[union-attr]
    assert repo.toggle_complete(tid).completed is False  # type: ignore[union-attr]
    assert repo.toggle_complete(424242) is None


def test_move_up_then_down_restores_order(repo: TaskRepository) -> None:
    ids = _fill(repo, "a", "b", "c", "d")
    middle = ids[1]

    assert repo.move(middle, "up")
    assert [t.id for t in repo.tasks] == [ids[1], ids[0], ids[2], ids[3]]
    assert repo.move(middle, "down")
    assert [t.id for t in repo.tasks] == ids

    assert repo.move(middle, "down")
    assert repo.move(middle, "up")
    assert [t.id for t in repo.tasks] == ids


def test_move_at_boundary_or_missing_is_noop(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    ids = _fill(repo, "a", "b")
    saves = fake_store.saves
    assert repo.move(ids[0], "up") is False
    assert repo.move(ids[-1], "down") is False
    assert repo.move(777, "up") is False
    assert [t.id for t in repo.tasks] == ids
    assert fake_store.saves == saves


def test_move_persists_manual_order(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    ids = _fill(repo, "a", "b")
    repo.move(ids[1], "up")
    assert [t["id"] for t in fake_store.value(KEY)] == [ids[1], ids[0]]


def test_bulk_delete_completed(repo: TaskRepository) -> None:
    ids = _fill(repo, "a", "b", "c")
    repo.toggle_complete(ids[0])
    repo.toggle_complete(ids[2])
    repo.begin_edit(ids[2])

    assert repo.bulk_delete_completed() == 2
    assert [t.id for t in repo.tasks] == [ids[1]]
    assert repo.editing_id is None
    assert repo.bulk_delete_completed() == 0


def test_submit_updates_editing_target_then_adds(repo: TaskRepository) -> None:
    (tid,) = _fill(repo, "original")
    assert repo.begin_edit(tid) is not None
    assert repo.editing_id == tid

    result = repo.submit(Draft(title="edited"))
    assert result.ok
    assert repo.editing_id is None
    assert [t.title for t in repo.tasks] == ["edited"]

    repo.submit(Draft(title="added"))
    assert [t.title for t in repo.tasks] == ["added", "edited"]


def test_submit_invalid_keeps_editing(repo: TaskRepository) -> None:
    (tid,) = _fill(repo, "original")
    repo.begin_edit(tid)
    assert not repo.submit(Draft(title="")).ok
    assert repo.editing_id == tid
    repo.cancel_edit()
    assert repo.editing_id is None


def test_begin_edit_unknown_id(repo: TaskRepository) -> None:
    assert repo.begin_edit(1) is None
    assert repo.editing_id is None


def test_load_skips_bad_records_and_repairs_soft_errors() -> None:
    store = FakeKeyValueStore(
        {
            KEY: [
                {"id": 1, "title": "Good", "category": "Math", "dueDate": "2026-04-01",
                 "priority": "high", "completed": True, "createdAt": "2026-01-01T00:00:00.000Z"},
                {"id": 2, "title": "   "},
                {"title": "no id"},
                "not an object",
                {"id": 1, "title": "Duplicate"},
                {"id": 3, "title": "Odd", "dueDate": "soon", "priority": "urgent"},
                {"id": float("inf"), "title": "Infinite id"},
                {"id": 1.5, "title": "Fractional id"},
                {"id": 4, "title": "Text flag", "completed": "false"},
            ]
        }
    )
    repo = TaskRepository(store, today=lambda: TODAY)

    assert [t.id for t in repo.tasks] == [1, 3, 4]
    odd = repo.get(3)
    assert odd is not None
    assert odd.due_date is None
    assert odd.priority is Priority.MEDIUM
    assert odd.category == ""
    assert odd.completed is False
    assert repo.get(4).completed is False  # type: ignore[union-attr]


def test_load_non_list_slot_starts_empty() -> None:
    repo = TaskRepository(FakeKeyValueStore({KEY: {"oops": True}}))
    assert len(repo) == 0


def test_write_failure_keeps_memory_state() -> None:
    store = FailingKeyValueStore()
    repo = TaskRepository(store, today=lambda: TODAY)
    assert repo.add(Draft(title="kept")).ok
    assert repo.last_save_ok is False
    assert [t.title for t in repo.tasks] == ["kept"]


def test_round_trip_through_sqlite(tmp_path: Path) -> None:
    db = tmp_path / "store.sqlite3"
    repo = TaskRepository(KeyValueStore(db), today=lambda: TODAY)
    repo.add(Draft(title='He said "hi"', category="English", due_date="2026-05-01", priority=Priority.LOW))
    repo.add(Draft(title="Lab report"))
    repo.toggle_complete(repo.tasks[0].id)

    reloaded = TaskRepository(KeyValueStore(db), today=lambda: TODAY)
    assert reloaded.tasks == repo.tasks


def test_add_coerces_priority_text(repo: TaskRepository, fake_store: FakeKeyValueStore) -> None:
    result = repo.add(Draft(title="Essay", priority="HIGH"))  # type: ignore[arg-type]
    assert result.ok
    assert repo.tasks[0].priority is Priority.HIGH
    assert fake_store.value(KEY)[0]["priority"] == "high"


def test_unknown_priority_is_a_field_error_and_changes_nothing(
    repo: TaskRepository, fake_store: FakeKeyValueStore
) -> None:
    result = repo.add(Draft(title="Essay", priority="urgent"))  # type: ignore[arg-type]
    assert not result.ok
    assert result.errors.priority_error == "Priority must be one of: high, medium, low."
    assert len(repo) == 0
    assert fake_store.saves == 0

    (task_id,) = _fill(repo, "Quiz")
    saves = fake_store.saves
    result = repo.update(task_id, Draft(title="Renamed", priority="urgent"))  # type: ignore[arg-type]
    assert not result.ok
    assert repo.tasks[0].title == "Quiz"
    assert repo.tasks[0].priority is Priority.MEDIUM
    assert fake_store.saves == saves
