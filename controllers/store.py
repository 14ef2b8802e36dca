"""Canonical ordered item list."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Collection, Iterable, Sequence

from models.items import Item

logger = logging.getLogger(__name__)


class Store_Error(Exception):
    """Base class for item store invariant violations."""


class Duplicate_Id_Error(Store_Error):
    def __init__(self, ids: Collection[str]) -> None:
        self.ids = sorted(ids)
        super().__init__(f"duplicate item id(s): {', '.join(self.ids)}")


class Order_Error(Store_Error):
    pass


def _duplicates(ids: Iterable[str]) -> set[str]:
    return {i for i, n in Counter(ids).items() if n > 1}


class Item_Store:
    """Owns the items and keeps their `order` dense: always exactly 0..N-1.

    All mutation goes through this class and readers only get detached copies.
    Orders are re-derived from the list position after every change, never
    patched incrementally.
    """

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: list[Item] = []
        self._listeners: list[Callable[[], None]] = []
        self.replace_all(items, notify=False)

    # ---------- read ----------
    @property
    def items(self) -> tuple[Item, ...]:
        """Detached copies in document order; editing them does not touch the store."""
        return tuple(it.model_copy(deep=True) for it in self._items)

    def ids(self) -> list[str]:
        return [it.id for it in self._items]

    def get(self, item_id: str) -> Item | None:
        found = next((it for it in self._items if it.id == item_id), None)
        return found.model_copy(deep=True) if found is not None else None

    def index_of(self, item_id: str) -> int | None:
        for idx, it in enumerate(self._items):
            if it.id == item_id:
                return idx
        return None

    def next_order_hint(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(it.id == item_id for it in self._items)

    def check(self) -> None:
        """Raise if the id or order invariants do not hold."""
        if dups := _duplicates(self.ids()):
            raise Duplicate_Id_Error(dups)
        orders = [it.order for it in self._items]
        if orders != list(range(len(self._items))):
            raise Order_Error(f"orders are not dense and sorted: {orders}")

    def check_new(self, items: Iterable[Item]) -> None:
        """Raise Duplicate_Id_Error if `items` clash with each other or with the store."""
        new_ids = [it.id for it in items]
        if clash := _duplicates(new_ids) | (set(new_ids) & set(self.ids())):
            raise Duplicate_Id_Error(clash)

    # ---------- listeners ----------
    def subscribe(self, fn: Callable[[], None]) -> Callable[[], None]:
        """Call `fn` after every committed mutation. Returns an unsubscribe callable."""
        self._listeners.append(fn)

        def _unsubscribe() -> None:
            if fn in self._listeners:
                self._listeners.remove(fn)

        return _unsubscribe

    def _notify(self) -> None:
        for fn in list(self._listeners):
            fn()

    # ---------- mutation ----------
    def insert(self, items: Sequence[Item], at_index: int) -> list[str]:
        """Insert `items` as a contiguous block starting at `at_index`.

        Existing items at or after `at_index` shift down by the block size.

        Returns;
            The inserted ids, in order.
        """
        if not items:
            return []
        self.check_new(items)
        new_ids = [it.id for it in items]

        at = max(0, min(at_index, len(self._items)))
        self._items[at:at] = [it.model_copy(deep=True) for it in items]
        self._renumber()
        logger.debug("Inserted %d item(s) at %d", len(items), at)
        self._notify()
        return new_ids

    def remove(self, ids: Collection[str]) -> list[Item]:
        """Delete matching items. Unknown ids are ignored.

        Returns;
            The removed items, in their former document order.
        """
        wanted = set(ids)
        removed = [it for it in self._items if it.id in wanted]
        if not removed:
            return []
        self._items = [it for it in self._items if it.id not in wanted]
        self._renumber()
        logger.debug("Removed %d item(s)", len(removed))
        self._notify()
        return removed

    def replace_all(self, items: Iterable[Item], *, notify: bool = True) -> None:
        """Swap in a whole item list, sorted by its `order` values."""
        staged = [it.model_copy(deep=True) for it in items]
        if dups := _duplicates(it.id for it in staged):
            raise Duplicate_Id_Error(dups)
        staged.sort(key=lambda it: it.order)
        self._items = staged
        self._renumber()
        if notify:
            self._notify()

    def resequence(self, ids: Sequence[str]) -> bool:
        """Put the items in exactly the order given by `ids`.

        Returns;
            Whether the order changed.
        """
        current = self.ids()
        if len(ids) != len(current) or set(ids) != set(current) or _duplicates(ids):
            raise Order_Error("resequence requires a permutation of the current ids")
        if list(ids) == current:
            return False
        by_id = {it.id: it for it in self._items}
        self._items = [by_id[i] for i in ids]
        self._renumber()
        self._notify()
        return True

    def update(self, item: Item) -> Item:
        """Replace the stored item that has the same id, keeping its position."""
        idx = self.index_of(item.id)
        if idx is None:
            raise KeyError(item.id)
        self._items[idx] = item.model_copy(update={"order": idx}, deep=True)
        self._notify()
        return self._items[idx].model_copy(deep=True)

    def _renumber(self) -> None:
        for idx, it in enumerate(self._items):
            if it.order != idx:
                it.order = idx
