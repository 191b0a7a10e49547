# src/assignment_hub/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the key-value store and task repository into AppState,
- restores and persists the dark-mode display preference.
"""

from __future__ import annotations

import logging

from ..assignments.repository import TaskRepository
from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = KeyValueStore(settings.store_db_path)
    repository = TaskRepository(store, key=settings.tasks_key)

    state = AppState(
        settings=settings,
        store=store,
        repository=repository,
        dark_mode=load_dark_mode(store, settings.dark_mode_key),
    )
    return state


def load_dark_mode(store, key: str) -> bool:
    raw = store.load(key, False)
    if not isinstance(raw, bool):
        logger.warning("Slot %r does not hold a boolean (%r); using light mode.", key, raw)
        return False
    return raw


def set_dark_mode(state: AppState, enabled: bool) -> bool:
    """Update the preference in memory and persist it. Returns whether the write succeeded."""
    state.dark_mode = enabled
    ok = state.store.save(state.settings.dark_mode_key, enabled)
    logger.info("Dark mode %s (saved=%s)", "on" if enabled else "off", ok)
    return ok
