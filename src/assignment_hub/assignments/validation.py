# src/assignment_hub/assignments/validation.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .models import Draft, Priority, parse_due_date

TITLE_REQUIRED = "Title is required."
DUE_DATE_IN_PAST = "Due date cannot be in the past."
DUE_DATE_INVALID = "Due date must be a valid date (YYYY-MM-DD)."
PRIORITY_INVALID = "Priority must be one of: high, medium, low."


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Field-scoped messages; an empty string means the field is fine."""

    title_error: str = ""
    due_date_error: str = ""
    priority_error: str = ""

    @property
    def ok(self) -> bool:
        return not self.title_error and not self.due_date_error and not self.priority_error

    def messages(self) -> list[str]:
        return [m for m in (self.title_error, self.due_date_error, self.priority_error) if m]


def validate(draft: Draft, today: date | None = None) -> ValidationResult:
    """
    Check a draft before it reaches the repository.

    Every field is always checked so the caller can show every problem at once.
    `today` defaults to the current local date (day granularity).
    """
    if today is None:
        today = date.today()

    title_error = TITLE_REQUIRED if not draft.title.strip() else ""

    due_date_error = ""
    try:
        due = parse_due_date(draft.due_date)
    except ValueError:
        due_date_error = DUE_DATE_INVALID
    else:
        if due is not None and due < today:
            due_date_error = DUE_DATE_IN_PAST

    priority_error = ""
    try:
        Priority.parse(draft.priority)
    except ValueError:
        priority_error = PRIORITY_INVALID

    return ValidationResult(
        title_error=title_error,
        due_date_error=due_date_error,
        priority_error=priority_error,
    )
