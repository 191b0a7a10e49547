# src/assignment_hub/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

# Commands after which the list is redrawn automatically.
_REDRAW_AFTER = {
    "add", "save", "done", "toggle", "rm", "delete", "up", "down", "clear-done",
    "search", "filter", "clear-filters", "dark",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _command_name(line: str) -> str:
    parts = line[1:].split(maxsplit=1)
    return parts[0].lower() if parts else ""


def handle_line(state: AppState, line: str, emit: Callable[[str], None]) -> str:
    """
    Run one console line and return the text to show.

    Plain text (no leading slash) is treated as "/add <text>".
    """
    if not line.startswith("/"):
        line = "/add " + line

    try:
        reply = command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    reply = reply or ""
    if _command_name(line) in _REDRAW_AFTER:
        listing = command_registry.handle(state, "/list") or ""
        reply = f"{reply}\n\n{listing}" if reply else listing
    return reply


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.repository))
    _print_ts("[CONSOLE] Type /help for commands, plain text to add an assignment, /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    print(command_registry.handle(state, "/list"))

    while True:
        try:
            user_input = input("\n> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        print(handle_line(state, user_input, emit))

    logger.info("Console connector finished.")
