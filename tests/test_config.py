# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from assignment_hub.config import Settings
from assignment_hub.logging_setup import setup_logging


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HUB_DATA_DIR", "HUB_STORE_DB_PATH", "HUB_EXPORT_DIR", "HUB_TASKS_KEY", "HUB_CONSOLE_COLOR"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.tasks_key == "studentAssignments"
    assert s.dark_mode_key == "darkMode"
    assert s.store_db_path == s.data_dir / "store.sqlite3"
    assert s.export_dir == s.data_dir
    assert s.console_color is True


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HUB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HUB_TASKS_KEY", "homework")
    monkeypatch.setenv("HUB_CONSOLE_COLOR", "off")
    monkeypatch.setenv("HUB_EXPORT_DIR", "")

    s = Settings.from_env()
    assert s.data_dir == tmp_path
    assert s.store_db_path == tmp_path / "store.sqlite3"
    assert s.export_dir == tmp_path
    assert s.tasks_key == "homework"
    assert s.console_color is False


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path, console_level=logging.WARNING)
        logging.getLogger("assignment_hub.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_console_filter_quiets_storage_and_third_party() -> None:
    from assignment_hub.logging_setup import _ConsoleNoiseFilter

    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 0, "msg", None, None)

    assert f.filter(rec("assignment_hub.cli.commands", logging.INFO))
    assert not f.filter(rec("assignment_hub.storage.kv_store", logging.DEBUG))
    assert f.filter(rec("assignment_hub.storage.kv_store", logging.WARNING))
    assert not f.filter(rec("urllib3", logging.WARNING))
    assert f.filter(rec("py.warnings", logging.ERROR))
