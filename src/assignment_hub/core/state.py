# src/assignment_hub/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..assignments.query import ViewFilters
from ..assignments.repository import TaskRepository
from .ports import KeyValueRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: KeyValueRepo
    repository: TaskRepository

    dark_mode: bool = False
    filters: ViewFilters = field(default_factory=ViewFilters)
