# src/assignment_hub/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a local default, so the app runs with no configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "HUB"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Console ----
    console_color: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    export_dir: Path

    # ---- Storage slots ----
    tasks_key: str
    dark_mode_key: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "assignment-hub").strip() or "assignment-hub"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_color = _env_bool(_k("CONSOLE_COLOR"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/assignment_hub"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), data_dir)

        tasks_key = _env(_k("TASKS_KEY"), "studentAssignments").strip() or "studentAssignments"
        dark_mode_key = _env(_k("DARK_MODE_KEY"), "darkMode").strip() or "darkMode"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_color=console_color,
            data_dir=data_dir,
            store_db_path=store_db_path,
            export_dir=export_dir,
            tasks_key=tasks_key,
            dark_mode_key=dark_mode_key,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
