"""Click, range, toggle, marquee and keyboard selection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from canvas.bounds import Bounds_Provider, Static_Bounds
from canvas.geometry import Point, Rect
from canvas.marquee import Thresholds, items_in_marquee

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    up = "up"
    down = "down"


@dataclass(slots=True)
class Selection_State:
    selected: set[str] = field(default_factory=set)
    anchor: str | None = None
    marquee: Rect | None = None
    is_marquee_active: bool = False


class Selection_Controller:
    """Tracks which items are targeted by the next operation.

    Args;
        document_order: Returns the current item ids in document order.
        bounds: Geometry source for marquee selection.
        thresholds: Marquee inclusion ratios.
    """

    def __init__(
        self,
        document_order: Callable[[], Sequence[str]],
        bounds: Bounds_Provider | None = None,
        thresholds: Thresholds = Thresholds(),
    ) -> None:
        self._order = document_order
        self.bounds: Bounds_Provider = bounds or Static_Bounds()
        self.thresholds = thresholds
        self.state = Selection_State()
        self._marquee_start: Point | None = None

    # ---------- read ----------
    @property
    def selected(self) -> frozenset[str]:
        return frozenset(self.state.selected)

    @property
    def anchor(self) -> str | None:
        return self.state.anchor

    def is_selected(self, item_id: str) -> bool:
        return item_id in self.state.selected

    def in_document_order(self) -> list[str]:
        return [i for i in self._order() if i in self.state.selected]

    def __len__(self) -> int:
        return len(self.state.selected)

    # ---------- pointer ----------
    def click(self, item_id: str) -> None:
        self.state.selected = {item_id}
        self.state.anchor = item_id

    def ctrl_click(self, item_id: str) -> None:
        if item_id in self.state.selected:
            self.state.selected.discard(item_id)
        else:
            self.state.selected.add(item_id)
        self.state.anchor = item_id

    def shift_click(self, item_id: str) -> None:
        """Select the contiguous range between the anchor and `item_id`, replacing the selection.

        Without an anchor this is a click. When the anchor or target is not in
        the document, `item_id` is added to the current selection instead.
        """
        anchor = self.state.anchor
        if anchor is None:
            self.click(item_id)
            return
        ids = list(self._order())
        try:
            a, b = ids.index(anchor), ids.index(item_id)
        except ValueError:
            self.state.selected.add(item_id)
            self.state.anchor = item_id
            return
        lo, hi = min(a, b), max(a, b)
        self.state.selected = set(ids[lo : hi + 1])
        self.state.anchor = item_id

    def select_all(self) -> None:
        ids = list(self._order())
        self.state.selected = set(ids)
        self.state.anchor = ids[-1] if ids else None

    def clear(self) -> None:
        self.state.selected = set()
        self.state.anchor = None

    def retain(self, existing: Collection[str]) -> None:
        """Forget selected ids (and the anchor) that are no longer in the document."""
        keep = set(existing)
        self.state.selected &= keep
        if self.state.anchor is not None and self.state.anchor not in keep:
            self.state.anchor = None

    # ---------- marquee ----------
    def start_marquee(self, point: Point) -> None:
        self._marquee_start = point
        self.state.selected = set()
        self.state.marquee = Rect(point.x, point.y, 0, 0)
        self.state.is_marquee_active = True

    def update_marquee(self, point: Point) -> None:
        if not self.state.is_marquee_active or self._marquee_start is None:
            return
        rect = Rect.from_points(self._marquee_start, point)
        self.state.marquee = rect
        hits = items_in_marquee(rect, self._order(), self.bounds, self.thresholds)
        self.state.selected = set(hits)
        if hits:
            self.state.anchor = hits[-1]

    def end_marquee(self) -> None:
        self._marquee_start = None
        self.state.marquee = None
        self.state.is_marquee_active = False

    # ---------- keyboard ----------
    def arrow_nav(self, direction: Direction, extend: bool = False) -> bool:
        """Move the anchor one step in document order.

        Returns;
            False when there is no anchor or it already sits at the boundary.
        """
        anchor = self.state.anchor
        ids = list(self._order())
        if anchor is None or anchor not in ids:
            return False
        idx = ids.index(anchor)
        step = -1 if direction == Direction.up else 1
        new_idx = idx + step
        if not 0 <= new_idx < len(ids):
            return False
        target = ids[new_idx]
        if extend:
            self.shift_click(target)
        else:
            self.click(target)
        logger.debug("Arrow %s -> %s (extend=%s)", direction, target, extend)
        return True
