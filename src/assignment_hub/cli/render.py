# src/assignment_hub/cli/render.py

"""
Plain-text rendering of the derived view.

Rows are numbered from 1 in view order; commands refer to tasks by that row
number (see commands.resolve_row).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..assignments.models import Priority, Task
from ..assignments.query import TaskStats, ViewFilters, is_overdue, priority_label

RESET = "\033[0m"

# (light, dark) palettes
_PALETTES: dict[bool, dict[str, str]] = {
    False: {
        Priority.HIGH: "\033[31m",
        Priority.MEDIUM: "\033[34m",
        Priority.LOW: "\033[32m",
        "done": "\033[2m",
        "overdue": "\033[1;31m",
        "header": "\033[1;34m",
    },
    True: {
        Priority.HIGH: "\033[91m",
        Priority.MEDIUM: "\033[94m",
        Priority.LOW: "\033[92m",
        "done": "\033[90m",
        "overdue": "\033[1;91m",
        "header": "\033[1;96m",
    },
}


def _paint(text: str, style: str, enabled: bool) -> str:
    return f"{style}{text}{RESET}" if enabled and style else text


def format_due(due_date: str | None) -> str:
    """'2026-11-01' -> 'Nov 1, 2026'."""
    if not due_date:
        return ""
    d = date.fromisoformat(due_date)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def render_row(
    n: int,
    task: Task,
    *,
    editing: bool = False,
    today: date | None = None,
    dark_mode: bool = False,
    color: bool = False,
) -> str:
    palette = _PALETTES[dark_mode]
    box = "[x]" if task.completed else "[ ]"
    title = _paint(task.title, palette["done"], color) if task.completed else task.title

    parts = [f"{n:>3}. {box} {title}"]
    if task.category:
        parts.append(f"({task.category})")
    parts.append(_paint(priority_label(task.priority), palette.get(task.priority, ""), color))
    if task.due_date:
        due = f"Due: {format_due(task.due_date)}"
        if is_overdue(task, today):
            due = _paint(f"{due} (Overdue)", palette["overdue"], color)
        parts.append(due)
    if editing:
        parts.append("<editing>")
    return "  ".join(parts)


def render_view(
    rows: Sequence[Task],
    *,
    stats: TaskStats,
    filters: ViewFilters,
    editing_id: int | None = None,
    today: date | None = None,
    dark_mode: bool = False,
    color: bool = False,
) -> str:
    palette = _PALETTES[dark_mode]
    header = (
        f"Assignments: {stats.total} total, {stats.pending} pending, {stats.completed} completed"
    )
    lines = [_paint(header, palette["header"], color)]
    if not filters.is_neutral:
        lines.append(
            f"Filters: search={filters.search_term!r} category={filters.category} "
            f"status={filters.status} priority={filters.priority}"
        )

    if not rows:
        lines.append("  (no assignments match)" if stats.total else "  (no assignments yet)")
        return "\n".join(lines)

    for n, task in enumerate(rows, start=1):
        lines.append(
            render_row(
                n,
                task,
                editing=task.id == editing_id,
                today=today,
                dark_mode=dark_mode,
                color=color,
            )
        )
    return "\n".join(lines)
