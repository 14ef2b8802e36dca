"""Block-preserving reordering for drags and keyboard moves."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection

from controllers.selection import Selection_Controller
from controllers.store import Item_Store

logger = logging.getLogger(__name__)


class Reorder_Engine:
    """Moves items as contiguous blocks.

    The moved ids keep their relative document order whatever destination a
    drag reports. `before_mutation` runs only when a move actually changes
    the sequence.
    """

    def __init__(
        self,
        store: Item_Store,
        selection: Selection_Controller,
        before_mutation: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.selection = selection
        self.before_mutation = before_mutation

    def move_block(self, ids: Collection[str], destination: int) -> bool:
        """Lift `ids` out of the list and splice them back at `destination`.

        `destination` indexes the list with the block removed and is clamped to
        [0, N - block size].
        """
        current = self.store.ids()
        wanted = set(ids)
        block = [i for i in current if i in wanted]
        if not block:
            return False
        rest = [i for i in current if i not in wanted]
        dest = max(0, min(destination, len(rest)))
        sequence = rest[:dest] + block + rest[dest:]
        if sequence == current:
            return False
        if self.before_mutation:
            self.before_mutation()
        self.store.resequence(sequence)
        logger.debug("Moved %d item(s) to %d", len(block), dest)
        return True

    def move_single(self, item_id: str, destination: int) -> bool:
        return self.move_block([item_id], destination)

    def drag_end(self, dragged_id: str, destination: int | None) -> bool:
        """Apply a drag result; a dragged member of a multi-selection carries the whole selection."""
        if destination is None or dragged_id not in self.store:
            return False
        if self.selection.is_selected(dragged_id) and len(self.selection) > 1:
            return self.move_block(self.selection.selected, destination)
        return self.move_single(dragged_id, destination)

    def move_up(self) -> bool:
        block = self.selection.in_document_order()
        if not block:
            return False
        first = self.store.index_of(block[0])
        if not first:
            return False
        return self.move_block(block, first - 1)

    def move_down(self) -> bool:
        block = self.selection.in_document_order()
        if not block:
            return False
        last = self.store.index_of(block[-1])
        if last is None or last >= len(self.store) - 1:
            return False
        return self.move_block(block, last - len(block) + 2)
