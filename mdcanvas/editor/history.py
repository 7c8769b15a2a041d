"""
history.py — Bounded linear undo/redo over full-scene snapshots.

Snapshots are deep copies taken at explicit commit points. A committed
snapshot is never aliased by the live scene, so past entries cannot be
mutated after the fact.
"""

import copy
import logging
from typing import Generic, Optional, TypeVar

from mdcanvas.engine.units import DEFAULT_HISTORY_CAPACITY

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EditHistory(Generic[T]):
    """Linear history with a cursor; new commits discard the redo branch."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY, initial: Optional[T] = None):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._entries: list[T] = []
        self._cursor = -1
        if initial is not None:
            self.commit(initial)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        """Index of the entry matching the live scene."""
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def current(self) -> Optional[T]:
        """Deep copy of the entry at the cursor, if any."""
        if self._cursor < 0:
            return None
        return copy.deepcopy(self._entries[self._cursor])

    def commit(self, snapshot: T) -> None:
        """Push a deep copy of the scene.

        Entries after the cursor are discarded first. Beyond capacity the
        oldest entry is evicted and the cursor stays on the newest one.
        """
        del self._entries[self._cursor + 1:]
        self._entries.append(copy.deepcopy(snapshot))

        if len(self._entries) > self.capacity:
            del self._entries[0]

        self._cursor = len(self._entries) - 1
        logger.debug(f"History commit: {len(self._entries)} entries, cursor={self._cursor}")

    def undo(self) -> Optional[T]:
        """Step back one entry. Returns the restored snapshot, or None at the start."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        logger.debug(f"Undo to cursor={self._cursor}")
        return copy.deepcopy(self._entries[self._cursor])

    def redo(self) -> Optional[T]:
        """Step forward one entry. Returns the restored snapshot, or None at the end."""
        if not self.can_redo:
            return None
        self._cursor += 1
        logger.debug(f"Redo to cursor={self._cursor}")
        return copy.deepcopy(self._entries[self._cursor])

    def clear(self, initial: Optional[T] = None) -> None:
        """Drop all entries, optionally seeding a new baseline."""
        self._entries.clear()
        self._cursor = -1
        if initial is not None:
            self.commit(initial)
