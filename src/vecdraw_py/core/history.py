"""Snapshot history for undo/redo functionality."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vecdraw_py.core.scene import Scene


class SnapshotHistory:
    """Manages undo/redo stacks of scene snapshots.

    ``past`` holds the states before each recorded mutation and ``future`` the
    states undone since. Snapshots are immutable, so stacking them shares every
    unchanged element between entries.

    Attributes:
        max_history: Maximum number of past snapshots kept, or None for no limit.
    """

    def __init__(self, max_history: int | None = None) -> None:
        """Initialize snapshot history.

        Args:
            max_history: Maximum number of snapshots to keep in history.
        """
        self.max_history = max_history
        self._past: list[Scene] = []
        self._future: list[Scene] = []

    def push(self, snapshot: Scene) -> None:
        """Record the state before a mutation.

        This clears the redo stack since a new branch of history is created.

        Args:
            snapshot: The scene as it was before the mutation.
        """
        self._past.append(snapshot)
        self._future.clear()
        if self.max_history is not None and len(self._past) > self.max_history:
            self._past.pop(0)

    def undo(self, current: Scene) -> Scene | None:
        """Step back one snapshot.

        Args:
            current: The scene being replaced, kept for redo.

        Returns:
            The snapshot to restore, or None if there is nothing to undo.
        """
        if not self._past:
            return None
        self._future.append(current)
        return self._past.pop()

    def redo(self, current: Scene) -> Scene | None:
        """Step forward one snapshot.

        Args:
            current: The scene being replaced, kept for undo.

        Returns:
            The snapshot to restore, or None if there is nothing to redo.
        """
        if not self._future:
            return None
        self._past.append(current)
        return self._future.pop()

    def can_undo(self) -> bool:
        """Check if there are snapshots to undo."""
        return len(self._past) > 0

    def can_redo(self) -> bool:
        """Check if there are snapshots to redo."""
        return len(self._future) > 0

    def clear(self) -> None:
        """Clear all history."""
        self._past.clear()
        self._future.clear()

    @property
    def undo_count(self) -> int:
        """Number of snapshots that can be undone."""
        return len(self._past)

    @property
    def redo_count(self) -> int:
        """Number of snapshots that can be redone."""
        return len(self._future)
