from __future__ import annotations

from collections import deque

from .viewport import PlaneBounds


DEFAULT_HISTORY_CAPACITY = 100


class UndoManager:
    """Bounded undo/redo history of plane bounds.

    At capacity the oldest entry is evicted. Any new push clears the redo
    stack; callers clear it for mutations that are not recorded.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = capacity
        self._undo: deque[PlaneBounds] = deque(maxlen=capacity)
        self._redo: deque[PlaneBounds] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._undo)

    def push(self, snapshot: PlaneBounds) -> None:
        self._undo.append(snapshot)
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self, current: PlaneBounds | None = None) -> PlaneBounds | None:
        """Pop the most recent entry; ``current`` becomes redoable when given."""
        if not self._undo:
            return None
        previous = self._undo.pop()
        if current is not None:
            self._redo.append(current)
        return previous

    def redo(self, current: PlaneBounds) -> PlaneBounds | None:
        if not self._redo:
            return None
        following = self._redo.pop()
        self._undo.append(current)
        return following

    def clear_redo(self) -> None:
        self._redo.clear()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def entries(self) -> list[PlaneBounds]:
        """Undo entries, oldest first."""
        return list(self._undo)
