# src/assignment_hub/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
import sys
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import cast

from ..assignments.export import EXPORT_MIME_TYPE, write_export
from ..assignments.models import Draft, Priority, Task
from ..assignments.query import (
    ALL,
    STATUS_FILTERS,
    apply_filters,
    available_categories,
    stats,
)
from ..assignments.repository import SaveResult
from ..core.state import AppState
from .bootstrap import set_dark_mode
from .render import render_view

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^(cat|category|due|prio|priority|status)=(.*)$", re.IGNORECASE)
_FIELD_ALIASES = {"cat": "category", "prio": "priority"}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def parse_fields(args: list[str]) -> dict[str, str]:
    """
    Split "Essay draft cat=English Lit due=2026-11-01" into
    {"title": "Essay draft", "category": "English Lit", "due": "2026-11-01"}.

    A field value runs until the next key= token.
    """
    fields: dict[str, list[str]] = {}
    current = "title"
    for token in args:
        m = _FIELD_RE.match(token)
        if m:
            key = m.group(1).lower()
            current = _FIELD_ALIASES.get(key, key)
            fields[current] = [m.group(2)] if m.group(2) else []
            continue
        fields.setdefault(current, []).append(token)
    return {k: " ".join(v) for k, v in fields.items()}


def build_draft(fields: dict[str, str], base: Draft | None = None) -> Draft:
    """Build a Draft from parsed fields; missing fields come from `base`. Raises ValueError on bad priority."""
    draft = base or Draft(title="")
    if "title" in fields:
        draft = replace(draft, title=fields["title"])
    if "category" in fields:
        draft = replace(draft, category=fields["category"])
    if "due" in fields:
        draft = replace(draft, due_date=fields["due"])
    if "priority" in fields:
        draft = replace(draft, priority=Priority.parse(fields["priority"]))
    return draft


def draft_from_task(task: Task) -> Draft:
    return Draft(
        title=task.title,
        category=task.category,
        due_date=task.due_date or "",
        priority=task.priority,
    )


def current_view(state: AppState) -> list[Task]:
    return apply_filters(state.repository.tasks, state.filters)


def resolve_row(state: AppState, args: list[str]) -> Task | None:
    """Map a 1-based row number of the current view to its task."""
    if len(args) != 1 or not args[0].isdigit():
        return None
    rows = current_view(state)
    n = int(args[0])
    if n < 1 or n > len(rows):
        return None
    return rows[n - 1]


def _describe_failure(result: SaveResult) -> str:
    if result.not_found:
        return "That assignment no longer exists."
    return "\n".join(result.errors.messages())


def _save_warning(state: AppState) -> str:
    if state.repository.last_save_ok:
        return ""
    return "\n(warning: could not write to storage; changes are kept in memory only)"


def _today() -> date:
    return date.today()


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.repository.tasks
    return render_view(
        apply_filters(tasks, state.filters),
        stats=stats(tasks),
        filters=state.filters,
        editing_id=state.repository.editing_id,
        today=_today(),
        dark_mode=state.dark_mode,
        color=bool(getattr(state.settings, "console_color", False)) and sys.stdout.isatty(),
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [cat=<category>] [due=YYYY-MM-DD] [prio=high|medium|low]
    """
    try:
        draft = build_draft(parse_fields(args))
    except ValueError as e:
        return str(e)

    result = state.repository.add(draft)
    if not result.ok:
        return _describe_failure(result)
    assert result.task is not None
    return f'Added "{result.task.title}".' + _save_warning(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = resolve_row(state, args)
    if task is None:
        return "Usage: /edit <row>"
    state.repository.begin_edit(task.id)
    d = draft_from_task(task)
    return (
        f'Editing "{task.title}". Current values:\n'
        f"  /save {d.title} cat={d.category} due={d.due_date} prio={d.priority.value}\n"
        "Use /save with the fields to change, or /cancel."
    )


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.repository.editing_id is None:
        return "Nothing is being edited."
    state.repository.cancel_edit()
    return "Edit cancelled."


def cmd_save(state: AppState, args: list[str]) -> str:
    """
    /save [title] [cat=...] [due=...] [prio=...]
    Updates the assignment being edited (unspecified fields keep their values),
    or adds a new one when nothing is being edited.
    """
    repo = state.repository
    base: Draft | None = None
    if repo.editing_id is not None:
        editing = repo.get(repo.editing_id)
        if editing is not None:
            base = draft_from_task(editing)

    try:
        fields = parse_fields(args)
        if base is not None and not fields.get("title", "").strip():
            fields.pop("title", None)
        draft = build_draft(fields, base)
    except ValueError as e:
        return str(e)

    was_editing = repo.editing_id is not None
    result = repo.submit(draft)
    if not result.ok:
        return _describe_failure(result)
    assert result.task is not None
    verb = "Updated" if was_editing else "Added"
    return f'{verb} "{result.task.title}".' + _save_warning(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    task = resolve_row(state, args)
    if task is None:
        return "Usage: /done <row>"
    toggled = state.repository.toggle_complete(task.id)
    if toggled is None:
        return "That assignment no longer exists."
    status = "completed" if toggled.completed else "pending"
    return f'"{toggled.title}" marked {status}.' + _save_warning(state)


def cmd_rm(state: AppState, args: list[str]) -> str:
    task = resolve_row(state, args)
    if task is None:
        return "Usage: /rm <row>"
    state.repository.remove(task.id)
    return f'Deleted "{task.title}".' + _save_warning(state)


def _move(state: AppState, args: list[str], direction: str) -> str:
    task = resolve_row(state, args)
    if task is None:
        return f"Usage: /{direction} <row>"
    if not state.repository.move(task.id, direction):  # type: ignore[arg-type]
        return f'"{task.title}" cannot move {direction}.'
    return f'Moved "{task.title}" {direction}.' + _save_warning(state)


def cmd_up(state: AppState, args: list[str]) -> str:
    return _move(state, args, "up")


def cmd_down(state: AppState, args: list[str]) -> str:
    return _move(state, args, "down")


def cmd_clear_done(state: AppState, args: list[str]) -> str:
    removed = state.repository.bulk_delete_completed()
    if not removed:
        return "No completed assignments to delete."
    return f"Deleted {removed} completed assignment(s)." + _save_warning(state)


def cmd_search(state: AppState, args: list[str]) -> str:
    term = " ".join(args)
    state.filters = replace(state.filters, search_term=term)
    return f"Searching for {term!r}." if term else "Search cleared."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter [category=<name>|all] [status=all|pending|completed] [priority=all|high|medium|low]
    """
    fields = parse_fields(args)
    if fields.get("title"):
        return (
            "Usage: /filter [category=<name>|all] [status=all|pending|completed] "
            "[priority=all|high|medium|low]"
        )

    filters = state.filters
    if "category" in fields:
        filters = replace(filters, category=fields["category"] or ALL)
    if "status" in fields:
        status = (fields["status"] or ALL).lower()
        if status not in STATUS_FILTERS:
            return f"Unknown status {status!r} (expected one of: {', '.join(STATUS_FILTERS)})"
        filters = replace(filters, status=status)
    if "priority" in fields:
        raw = (fields["priority"] or ALL).lower()
        if raw != ALL:
            try:
                raw = Priority.parse(raw).value
            except ValueError as e:
                return str(e)
        filters = replace(filters, priority=raw)

    state.filters = filters
    return (
        f"Filters: category={filters.category} status={filters.status} "
        f"priority={filters.priority}"
    )


def cmd_clear_filters(state: AppState, args: list[str]) -> str:
    state.filters = state.filters.cleared()
    return "Filters cleared."


def cmd_categories(state: AppState, args: list[str]) -> str:
    return "Categories: " + ", ".join(available_categories(state.repository.tasks))


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = stats(state.repository.tasks)
    return f"Total: {s.total}  Pending: {s.pending}  Completed: {s.completed}"


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /export          -> write assignments.csv into the configured export dir
    /export <dir>    -> write it into <dir>
    """
    directory = Path(" ".join(args)).expanduser() if args else Path(state.settings.export_dir)
    tasks = state.repository.tasks
    if not tasks:
        return "No assignments to export!"

    if emit:
        emit(f"Exporting {len(tasks)} assignment(s) as {EXPORT_MIME_TYPE}...")

    try:
        path = write_export(tasks, directory)
    except OSError as e:
        logger.exception("Export to %s failed", directory)
        return f"Export failed: {e}"
    return f"Exported to {path}"


def cmd_dark(state: AppState, args: list[str]) -> str:
    """
    /dark         -> toggle
    /dark on|off  -> set explicitly
    """
    if not args:
        enabled = not state.dark_mode
    else:
        arg = args[0].lower()
        if arg in ("on", "1", "true", "yes"):
            enabled = True
        elif arg in ("off", "0", "false", "no"):
            enabled = False
        else:
            return "Usage: /dark [on|off]"

    ok = set_dark_mode(state, enabled)
    reply = f"Dark mode {'ON' if enabled else 'OFF'}."
    if not ok:
        reply += " (not saved)"
    return reply


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show assignments (filtered and sorted).", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add: /add <title> [cat=<category>] [due=YYYY-MM-DD] [prio=high|medium|low].",
)
registry.register("edit", cmd_edit, help_text="Start editing: /edit <row>.")
registry.register(
    "save", cmd_save, help_text="Save the edit (or add): /save [title] [cat=...] [due=...] [prio=...]."
)
registry.register("cancel", cmd_cancel, help_text="Cancel the current edit.")
registry.register("done", cmd_done, help_text="Toggle completed: /done <row>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete: /rm <row>.", aliases=["delete"])
registry.register("up", cmd_up, help_text="Move up in manual order: /up <row>.")
registry.register("down", cmd_down, help_text="Move down in manual order: /down <row>.")
registry.register("clear-done", cmd_clear_done, help_text="Delete all completed assignments.")
registry.register("search", cmd_search, help_text="Search titles: /search <text> (no text clears).")
registry.register(
    "filter",
    cmd_filter,
    help_text="Filter: /filter category=<name> status=pending|completed priority=high|medium|low.",
)
registry.register("clear-filters", cmd_clear_filters, help_text="Reset search and filters.")
registry.register("categories", cmd_categories, help_text="List known categories.")
registry.register("stats", cmd_stats, help_text="Show total/pending/completed counts.")
registry.register("export", cmd_export, help_text="Export to assignments.csv: /export [dir].")
registry.register("dark", cmd_dark, help_text="Toggle dark mode: /dark [on|off].")
