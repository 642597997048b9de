# tests/test_task_store.py

from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime

import pytest

from todo_panel.tasks.task_models import Priority, Task, TaskValidationError
from todo_panel.tasks.task_store import TaskStore

from .fakes import NOW, FakeTaskRepo, FixedClock


def _seed(store: TaskStore, *titles: str) -> list[Task]:
    return [store.create(Task(title=t)) for t in titles]


def test_create_fills_identity_and_persists_once(store: TaskStore, fake_repo: FakeTaskRepo) -> None:
    created = store.create(
        Task(title="Write report", description="Q4", priority=Priority.HIGH, due_date="2026-10-25", tags=["work"])
    )

    assert created.id
    assert created.created_at == NOW.isoformat()
    assert created.updated_at == created.created_at
    assert created.is_completed is False
    assert store.tasks == (created,)
    assert len(fake_repo.saves) == 1
    assert fake_repo.saves[0] == [created]


def test_create_rejects_blank_title(store: TaskStore, fake_repo: FakeTaskRepo) -> None:
    _seed(store, "A")
    saves_before = len(fake_repo.saves)

    with pytest.raises(TaskValidationError):
        store.create(Task(title="   "))

    assert len(store) == 1
    assert len(fake_repo.saves) == saves_before


def test_create_keeps_insertion_order_and_unique_ids(store: TaskStore) -> None:
    tasks = _seed(store, *(f"task {i}" for i in range(200)))

    assert [t.title for t in store.tasks] == [f"task {i}" for i in range(200)]
    assert len({t.id for t in tasks}) == 200


def test_create_replaces_colliding_caller_id(store: TaskStore) -> None:
    first = store.create(Task(title="A", id="fixed"))
    second = store.create(Task(title="B", id="fixed"))

    assert first.id == "fixed"
    assert second.id != "fixed"


def test_update_is_full_replacement(store: TaskStore, clock: FixedClock, fake_repo: FakeTaskRepo) -> None:
    (task,) = _seed(store, "Old")
    clock.advance(hours=1)

    candidate = replace(task, title="New", description="", tags=["x"], priority=Priority.LOW)
    updated = store.update(candidate)

    assert updated is not None
    assert store.get(task.id) == updated
    assert updated.title == "New"
    assert updated.tags == ["x"]
    assert updated.created_at == task.created_at
    assert updated.updated_at == clock.now.isoformat()
    assert len(fake_repo.saves) == 2


def test_update_unknown_id_is_silent_noop(store: TaskStore, fake_repo: FakeTaskRepo) -> None:
    _seed(store, "A", "B")
    before = store.tasks
    saves_before = len(fake_repo.saves)

    assert store.update(Task(title="Ghost", id="missing", created_at=NOW.isoformat())) is None

    assert store.tasks == before
    assert len(fake_repo.saves) == saves_before


def test_update_rejects_blank_title(store: TaskStore) -> None:
    (task,) = _seed(store, "Keep me")

    with pytest.raises(TaskValidationError):
        store.update(replace(task, title=""))

    assert store.get(task.id) == task


def test_update_requires_created_at_to_be_echoed(store: TaskStore) -> None:
    (task,) = _seed(store, "A")

    with pytest.raises(TaskValidationError):
        store.update(replace(task, created_at=""))


def test_update_never_moves_created_at_past_updated_at(store: TaskStore) -> None:
    (task,) = _seed(store, "A")

    updated = store.update(replace(task, created_at="2099-01-01T00:00:00+00:00"))

    assert updated is not None
    assert updated.created_at == updated.updated_at


def test_delete_missing_id_keeps_collection_but_still_persists(store: TaskStore, fake_repo: FakeTaskRepo) -> None:
    _seed(store, "A", "B", "C")
    before = store.tasks
    saves_before = len(fake_repo.saves)

    assert store.delete("nonexistent-id") is False

    assert store.tasks == before
    assert len(fake_repo.saves) == saves_before + 1


def test_delete_removes_task(store: TaskStore) -> None:
    a, b = _seed(store, "A", "B")

    assert store.delete(a.id) is True
    assert store.tasks == (b,)
    assert store.delete(a.id) is False


def test_toggle_is_its_own_inverse(store: TaskStore, clock: FixedClock) -> None:
    (task,) = _seed(store, "A")

    clock.advance(minutes=1)
    once = store.toggle_completion(task.id)
    clock.advance(minutes=1)
    twice = store.toggle_completion(task.id)

    assert once is not None and once.is_completed is True
    assert twice is not None and twice.is_completed is False
    assert once.updated_at > task.updated_at
    assert twice.updated_at > once.updated_at


def test_toggle_touches_only_completion_and_updated_at(store: TaskStore, clock: FixedClock) -> None:
    task = store.create(Task(title="A", description="d", priority=Priority.HIGH, due_date="2026-10-20", tags=["t"]))
    clock.advance(seconds=5)

    toggled = store.toggle_completion(task.id)

    assert toggled == replace(task, is_completed=True, updated_at=clock.now.isoformat())


def test_toggle_unknown_id_is_noop(store: TaskStore, fake_repo: FakeTaskRepo) -> None:
    _seed(store, "A")
    before = store.tasks
    saves_before = len(fake_repo.saves)

    assert store.toggle_completion("missing") is None
    assert store.tasks == before
    assert len(fake_repo.saves) == saves_before


def test_failed_write_keeps_memory_authoritative(clock: FixedClock) -> None:
    repo = FakeTaskRepo(ok=False)
    store = TaskStore(repo, clock=clock)

    created = store.create(Task(title="Survives"))

    assert store.last_save_ok is False
    assert store.tasks == (created,)

    repo.ok = True
    store.toggle_completion(created.id)
    assert store.last_save_ok is True


def test_load_drops_duplicate_ids_and_fills_timestamps(store: TaskStore) -> None:
    store.load(
        [
            Task(title="A", id="1", created_at="2026-01-01T00:00:00+00:00"),
            Task(title="A again", id="1", created_at="2026-01-02T00:00:00+00:00"),
            Task(title="B", id="2"),
        ]
    )

    assert [t.title for t in store.tasks] == ["A", "B"]
    a, b = store.tasks
    assert a.updated_at == a.created_at
    assert b.created_at == NOW.isoformat()


def test_random_operation_sequences_keep_ids_unique(store: TaskStore, clock: FixedClock) -> None:
    rng = random.Random(7)
    for step in range(300):
        clock.advance(milliseconds=rng.choice([0, 0, 1]))
        ids = [t.id for t in store.tasks]
        op = rng.choice(["create", "create", "update", "delete", "toggle"])
        if op == "create" or not ids:
            store.create(Task(title=f"t{step}"))
        elif op == "update":
            target = store.get(rng.choice(ids))
            assert target is not None
            store.update(replace(target, title=f"u{step}"))
        elif op == "delete":
            store.delete(rng.choice(ids + ["missing"]))
        else:
            store.toggle_completion(rng.choice(ids))

        current = [t.id for t in store.tasks]
        assert len(current) == len(set(current))
        for t in store.tasks:
            assert datetime.fromisoformat(t.created_at) <= datetime.fromisoformat(t.updated_at)
