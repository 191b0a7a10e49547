# src/assignment_hub/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from typing import Any, Protocol


class KeyValueRepo(Protocol):
    """
    Durable key-value substrate: one named slot per key, JSON-compatible values.

    load() returns `fallback` on absence or on any read/decode failure.
    save() returns False on failure and leaves the previous value in place.
    """

    def load(self, key: str, fallback: Any = None) -> Any: ...
    def save(self, key: str, value: Any) -> bool: ...
