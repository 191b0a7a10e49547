# src/assignment_hub/assignments/models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class Priority(StrEnum):
    """
    Task priority.

    The stored value is the lowercase key ("high", "medium", "low");
    `rank` gives the sort weight (higher sorts first).
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Strict parse for user input; raises ValueError on unknown values."""
        value = str(raw or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown priority {raw!r} (expected one of: high, medium, low)"
            ) from None

    @classmethod
    def from_stored(cls, raw: Any) -> Priority:
        """Lenient parse for persisted data; unknown values become MEDIUM."""
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            logger.warning("Unknown stored priority %r; using medium.", raw)
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


def parse_due_date(raw: str | None) -> date | None:
    """Parse an ISO calendar date ("YYYY-MM-DD"); empty means no due date."""
    if raw is None or not raw.strip():
        return None
    return date.fromisoformat(raw.strip())


def now_timestamp() -> str:
    """UTC timestamp text in the stored createdAt format (ms precision, Z suffix)."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Draft:
    """User-entered task fields awaiting validation."""

    title: str
    category: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM


@dataclass(slots=True)
class Task:
    id: int
    title: str
    category: str
    due_date: str | None
    priority: Priority
    completed: bool
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Storage shape of a task (keys as in the `studentAssignments` slot)."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "dueDate": self.due_date or "",
            "priority": self.priority.value,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """
        Decode one stored record.

        Raises ValueError when the record has no usable id or title.
        Softer problems are repaired with a warning:
        - malformed dueDate -> no due date
        - unknown priority  -> medium
        - non-boolean completed -> pending
        """
        if not isinstance(data, dict):
            raise ValueError(f"record is not an object: {data!r}")

        raw_id = data.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float, str)):
            raise ValueError(f"record has no usable id: {raw_id!r}")
        # non-integral floats (1.5, Infinity, NaN) are not ids
        if isinstance(raw_id, float) and not raw_id.is_integer():
            raise ValueError(f"record has no usable id: {raw_id!r}")
        try:
            task_id = int(raw_id)
        except (ValueError, OverflowError):
            raise ValueError(f"record has no usable id: {raw_id!r}") from None

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"record id={task_id} has no title")

        due_raw = data.get("dueDate")
        due_date: str | None = None
        if isinstance(due_raw, str) and due_raw.strip():
            try:
                due_date = parse_due_date(due_raw).isoformat()  # type: ignore[union-attr]
            except ValueError:
                logger.warning("Task id=%s has malformed dueDate %r; clearing it.", task_id, due_raw)

        category = data.get("category")

        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            logger.warning("Task id=%s has non-boolean completed %r; treating as pending.", task_id, completed)
            completed = False

        return cls(
            id=task_id,
            title=title.strip(),
            category=category.strip() if isinstance(category, str) else "",
            due_date=due_date,
            priority=Priority.from_stored(data.get("priority")),
            completed=completed,
            created_at=str(data.get("createdAt") or ""),
        )
