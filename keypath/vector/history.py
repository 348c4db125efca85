"""
Undo/Redo History for the animation store

Each recorded mutation keeps an inverse snapshot (state before) and a forward
snapshot (state after). Undo and redo move entries between two bounded stacks;
recording a new mutation clears the redo stack.
"""

from collections import deque
from typing import Deque, NamedTuple, Optional

from keypath.core import get_logger

from .sdk import AnimationState

log = get_logger("history")

DEFAULT_MAX_DEPTH = 10_000


class HistoryEntry(NamedTuple):
    description: str
    before: AnimationState
    after: AnimationState


class HistoryManager:
    """Bounded undo/redo stacks of state snapshots"""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Args:
            max_depth: Maximum entries kept on each stack; the oldest are dropped first
        """
        self.max_depth = max_depth
        self._undo: Deque[HistoryEntry] = deque(maxlen=max_depth)
        self._redo: Deque[HistoryEntry] = deque(maxlen=max_depth)

    def record(self, before: AnimationState, after: AnimationState, description: str = "") -> None:
        """
        Push a completed mutation.

        The history takes ownership of `before`; callers pass a snapshot they no longer
        touch. `after` is copied since it is usually the live state. When `before`
        equals the previous entry's `after`, that snapshot is shared instead of kept twice.
        Stored snapshots are never mutated; undo and redo hand out copies.
        """
        if self._undo and self._undo[-1].after == before:
            before = self._undo[-1].after
        self._undo.append(HistoryEntry(description, before, after.model_copy(deep=True)))
        self._redo.clear()
        log.debug(f"Recorded: {description} (undo depth {len(self._undo)})")

    def undo(self) -> Optional[AnimationState]:
        """
        Step back one mutation.

        Returns:
            The state before the most recent mutation, or None if nothing to undo
        """
        if not self.can_undo():
            return None
        entry = self._undo.pop()
        self._redo.append(entry)
        log.debug(f"Undo: {entry.description}")
        return entry.before.model_copy(deep=True)

    def redo(self) -> Optional[AnimationState]:
        """
        Re-apply the most recently undone mutation.

        Returns:
            The state after that mutation, or None if nothing to redo
        """
        if not self.can_redo():
            return None
        entry = self._redo.pop()
        self._undo.append(entry)
        log.debug(f"Redo: {entry.description}")
        return entry.after.model_copy(deep=True)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
