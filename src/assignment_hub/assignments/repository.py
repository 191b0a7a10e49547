# src/assignment_hub/assignments/repository.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from ..core.ports import KeyValueRepo
from .models import Draft, Priority, Task, now_timestamp, parse_due_date
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

DEFAULT_TASKS_KEY = "studentAssignments"


@dataclass(slots=True)
class SaveResult:
    """
    Outcome of add/update.

    - task is set on success
    - errors carries field-level validation messages
    - not_found is True when update targeted an unknown id
    """

    task: Task | None = None
    errors: ValidationResult = field(default_factory=ValidationResult)
    not_found: bool = False

    @property
    def ok(self) -> bool:
        return self.task is not None


class TaskRepository:
    """
    Ordered, in-memory task collection backed by one key-value slot.

    The list order is the user's manual order. Every operation that changes
    the list writes the whole list back to the store before returning.

    Edit state: `editing_id` holds at most one task id (the task currently
    open for editing) or None.
    """

    def __init__(
        self,
        store: KeyValueRepo,
        *,
        key: str = DEFAULT_TASKS_KEY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._key = key
        self._today = today
        self._tasks: list[Task] = []
        self.editing_id: int | None = None
        self.last_save_ok: bool = True
        self._load()

    # ---- load / persist ----

    def _load(self) -> None:
        raw = self._store.load(self._key, [])
        if not isinstance(raw, list):
            logger.warning("Slot %r does not hold a list (%s); starting empty.", self._key, type(raw).__name__)
            raw = []

        seen: set[int] = set()
        for item in raw:
            try:
                task = Task.from_dict(item)
            except ValueError as e:
                logger.warning("Skipping stored task: %s", e)
                continue
            if task.id in seen:
                logger.warning("Skipping stored task with duplicate id=%s", task.id)
                continue
            seen.add(task.id)
            self._tasks.append(task)

        logger.info("Loaded %d task(s) from slot %r", len(self._tasks), self._key)

    def _persist(self) -> None:
        self.last_save_ok = self._store.save(self._key, [t.to_dict() for t in self._tasks])
        if not self.last_save_ok:
            logger.warning("Tasks kept in memory only; durable write failed.")

    # ---- helpers ----

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _new_id(self) -> int:
        taken = {t.id for t in self._tasks}
        candidate = int(time.time() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    @staticmethod
    def _normalized_due(draft: Draft) -> str | None:
        due = parse_due_date(draft.due_date)
        return due.isoformat() if due is not None else None

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- mutations ----

    def add(self, draft: Draft) -> SaveResult:
        errors = validate(draft, self._today())
        if not errors.ok:
            return SaveResult(errors=errors)

        task = Task(
            id=self._new_id(),
            title=draft.title.strip(),
            category=draft.category.strip(),
            due_date=self._normalized_due(draft),
            priority=Priority.parse(draft.priority),
            completed=False,
            created_at=now_timestamp(),
        )
        self._tasks.insert(0, task)
        self._persist()
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority.value, task.due_date)
        return SaveResult(task=task)

    def update(self, task_id: int, draft: Draft) -> SaveResult:
        errors = validate(draft, self._today())
        if not errors.ok:
            return SaveResult(errors=errors)

        task = self.get(task_id)
        if task is None:
            logger.info("Update for unknown task id=%s", task_id)
            return SaveResult(not_found=True)

        task.title = draft.title.strip()
        task.category = draft.category.strip()
        task.due_date = self._normalized_due(draft)
        task.priority = Priority.parse(draft.priority)
        self._persist()
        logger.debug("Task updated id=%s", task_id)
        return SaveResult(task=task)

    def remove(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self._tasks[idx]
        if self.editing_id == task_id:
            self.editing_id = None
        self._persist()
        logger.debug("Task removed id=%s", task_id)
        return True

    def toggle_complete(self, task_id: int) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        self._persist()
        return task

    def move(self, task_id: int, direction: Direction) -> bool:
        """Swap with the neighbour in the full (unfiltered) list. False if nothing moved."""
        idx = self._index_of(task_id)
        if idx is None:
            return False
        if direction == "up":
            new_idx = idx - 1
        elif direction == "down":
            new_idx = idx + 1
        else:
            raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
        if new_idx < 0 or new_idx >= len(self._tasks):
            return False

        self._tasks[idx], self._tasks[new_idx] = self._tasks[new_idx], self._tasks[idx]
        self._persist()
        return True

    def bulk_delete_completed(self) -> int:
        kept = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(kept)
        if not removed:
            return 0
        if self.editing_id is not None and all(t.id != self.editing_id for t in kept):
            self.editing_id = None
        self._tasks = kept
        self._persist()
        logger.info("Deleted %d completed task(s)", removed)
        return removed

    # ---- edit flow ----

    def begin_edit(self, task_id: int) -> Task | None:
        task = self.get(task_id)
        if task is not None:
            self.editing_id = task_id
        return task

    def cancel_edit(self) -> None:
        self.editing_id = None

    def submit(self, draft: Draft) -> SaveResult:
        """Save the draft: update the task being edited, or add a new one."""
        if self.editing_id is None:
            return self.add(draft)

        result = self.update(self.editing_id, draft)
        if result.ok or result.not_found:
            self.editing_id = None
        return result
