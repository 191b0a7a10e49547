# src/assignment_hub/assignments/query.py

"""
Derived views over the task list.

Everything here is pure: functions take a sequence of tasks and return new
lists or values, never mutating the input.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .models import Priority, Task

ALL = "all"
STATUS_FILTERS = (ALL, "pending", "completed")

_PRIORITY_LABELS = {Priority.HIGH: "High", Priority.MEDIUM: "Medium", Priority.LOW: "Low"}


@dataclass(frozen=True, slots=True)
class ViewFilters:
    search_term: str = ""
    category: str = ALL
    status: str = ALL
    priority: str = ALL

    @property
    def is_neutral(self) -> bool:
        return self == ViewFilters()

    def cleared(self) -> ViewFilters:
        return ViewFilters()


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    pending: int
    completed: int


def _sort_key(task: Task) -> tuple[bool, int, bool, str]:
    # ISO dates compare chronologically as strings.
    return (task.completed, -task.priority.rank, task.due_date is None, task.due_date or "")


def sort_tasks(tasks: Sequence[Task]) -> list[Task]:
    """
    Incomplete first, then priority high -> low, then due date ascending
    (dated before undated). sorted() is stable, so ties keep input order.
    """
    return sorted(tasks, key=_sort_key)


def view(
    tasks: Sequence[Task],
    search_term: str = "",
    category_filter: str = ALL,
    status_filter: str = ALL,
    priority_filter: str = ALL,
) -> list[Task]:
    """Filter (search, category, status, priority) and then sort."""
    filtered: list[Task] = list(tasks)

    if search_term:
        needle = search_term.lower()
        filtered = [t for t in filtered if needle in t.title.lower()]

    if category_filter != ALL:
        filtered = [t for t in filtered if t.category == category_filter]

    if status_filter == "completed":
        filtered = [t for t in filtered if t.completed]
    elif status_filter == "pending":
        filtered = [t for t in filtered if not t.completed]

    if priority_filter != ALL:
        filtered = [t for t in filtered if t.priority.value == priority_filter]

    return sort_tasks(filtered)


def apply_filters(tasks: Sequence[Task], filters: ViewFilters) -> list[Task]:
    return view(
        tasks,
        search_term=filters.search_term,
        category_filter=filters.category,
        status_filter=filters.status,
        priority_filter=filters.priority,
    )


def available_categories(tasks: Sequence[Task]) -> list[str]:
    """Distinct non-empty categories across all tasks, sorted, prefixed with "all"."""
    return [ALL, *sorted({t.category for t in tasks if t.category})]


def stats(tasks: Sequence[Task]) -> TaskStats:
    completed = sum(1 for t in tasks if t.completed)
    return TaskStats(total=len(tasks), pending=len(tasks) - completed, completed=completed)


def is_overdue(task: Task, today: date | None = None) -> bool:
    if task.completed or not task.due_date:
        return False
    if today is None:
        today = date.today()
    return date.fromisoformat(task.due_date) < today


def priority_label(priority: Priority) -> str:
    return _PRIORITY_LABELS.get(priority, "N/A")
