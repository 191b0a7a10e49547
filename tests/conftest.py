# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from assignment_hub.assignments.repository import TaskRepository
from assignment_hub.core.state import AppState
from assignment_hub.storage.kv_store import KeyValueStore

from .fakes import FakeKeyValueStore

TODAY = date(2026, 3, 15)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="assignment-hub-test",
        log_level="DEBUG",
        console_color=False,
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        export_dir=tmp_path / "exports",
        tasks_key="studentAssignments",
        dark_mode_key="darkMode",
    )


@pytest.fixture()
def fake_store() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def repo(fake_store: FakeKeyValueStore) -> TaskRepository:
    """Repository over an in-memory store with a fixed 'today'."""
    return TaskRepository(fake_store, today=lambda: TODAY)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with a real SQLite KeyValueStore on tmp_path.

    Validation uses the real current date here, so command tests only use
    future due dates.
    """
    store = KeyValueStore(settings.store_db_path)
    return AppState(
        settings=settings,
        store=store,
        repository=TaskRepository(store, key=settings.tasks_key),
    )
