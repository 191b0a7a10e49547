# src/assignment_hub/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    SQLite key-value store: one row per named slot, value stored as JSON text.

    Failure policy:
    - load() never raises: absent slot, SQLite errors and undecodable JSON
      all return the caller's fallback (errors are logged).
    - save() never raises: on failure the previous row is left as it was
      and False is returned.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "store.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("KeyValueStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    # ---- public API ----

    def load(self, key: str, fallback: Any = None) -> Any:
        """Return the decoded value stored under `key`, or `fallback`."""
        try:
            raw = self._read_raw(key)
        except sqlite3.Error:
            logger.exception("Failed to read slot %r; using fallback.", key)
            return fallback

        if raw is None:
            logger.debug("Slot %r is empty; using fallback.", key)
            return fallback

        try:
            return json.loads(raw)
        except ValueError:
            logger.exception("Slot %r holds malformed JSON; using fallback.", key)
            return fallback

    def save(self, key: str, value: Any) -> bool:
        """Encode `value` as JSON and upsert it under `key`. Returns success."""
        try:
            payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError):
            logger.exception("Failed to JSON-encode slot %r; keeping previous value.", key)
            return False

        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload, time.time()),
            )
            conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to write slot %r; keeping previous value.", key)
            return False
        finally:
            if conn is not None:
                conn.close()

        logger.debug("Slot %r saved (%d bytes).", key, len(payload))
        return True

    def delete(self, key: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT key FROM kv ORDER BY key ASC")
            return [str(r["key"]) for r in cur.fetchall()]
        finally:
            conn.close()
