"""Snapshot undo/redo stacks."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import TypeAlias

from controllers.store import Item_Store
from models.items import Item

logger = logging.getLogger(__name__)

MAX_DEPTH = 50

Snapshot: TypeAlias = tuple[Item, ...]


class History_Manager:
    """Linear undo/redo over whole-document snapshots.

    Callers decide what counts as one undoable action by calling
    `record_before_mutation` right before they change the store.
    """

    def __init__(
        self,
        store: Item_Store,
        max_depth: int = MAX_DEPTH,
        on_after: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.max_depth = max_depth
        self.on_after = on_after
        self._undo: deque[Snapshot] = deque(maxlen=max_depth)
        self._redo: deque[Snapshot] = deque(maxlen=max_depth)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def snapshot(self) -> Snapshot:
        """Deep copy of every item currently in the store."""
        return self.store.items

    def record_before_mutation(self) -> None:
        """Push the current state; the oldest entry is evicted past `max_depth`."""
        self._undo.append(self.snapshot())
        self._redo.clear()

    def undo(self) -> bool:
        """Restore the last recorded state."""
        if not self._undo:
            return False
        target = self._undo.pop()
        self._redo.append(self.snapshot())
        self._apply(target)
        logger.debug("Undo (remaining=%d)", len(self._undo))
        return True

    def redo(self) -> bool:
        """Re-apply the last undone state."""
        if not self._redo:
            return False
        target = self._redo.pop()
        self._undo.append(self.snapshot())
        self._apply(target)
        logger.debug("Redo (remaining=%d)", len(self._redo))
        return True

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _apply(self, snap: Snapshot) -> None:
        self.store.replace_all(snap)
        if self.on_after:
            self.on_after()
