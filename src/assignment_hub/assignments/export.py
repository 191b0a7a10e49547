# src/assignment_hub/assignments/export.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .models import Task

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "assignments.csv"
EXPORT_MIME_TYPE = "text/csv"

CSV_HEADER = ("Title", "Category", "Due Date", "Priority", "Completed", "Created At")


def _quoted(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _row(task: Task) -> str:
    return ",".join(
        [
            _quoted(task.title),
            _quoted(task.category or ""),
            task.due_date or "",
            task.priority.value,
            "Yes" if task.completed else "No",
            task.created_at,
        ]
    )


def export_csv(tasks: Sequence[Task]) -> str | None:
    """
    Render tasks (in collection order) as CSV text.

    Returns None when there is nothing to export.
    Title and category are always quoted; other columns are written raw.
    """
    if not tasks:
        return None
    return "\n".join([",".join(CSV_HEADER), *(_row(t) for t in tasks)])


def write_export(tasks: Sequence[Task], directory: str | Path) -> Path | None:
    """Write `assignments.csv` into `directory`. Returns None (and writes nothing) when empty."""
    content = export_csv(tasks)
    if content is None:
        logger.info("Export skipped: no assignments.")
        return None

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / EXPORT_FILENAME
    path.write_text(content, encoding="utf-8")
    logger.info("Exported %d assignment(s) to %s", len(tasks), path)
    return path
