from __future__ import annotations

import logging
import tkinter as tk
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from canvas.geometry import Rect

logger = logging.getLogger(__name__)

ITEM_TAG_NS = "item"


def item_tag(item_id: str) -> str:
    """Canvas tag a renderer puts on every canvas element drawn for an item."""
    return f"{ITEM_TAG_NS}:{item_id}"


@runtime_checkable
class Bounds_Provider(Protocol):
    def get_item_bounds(self, item_id: str) -> Rect | None:
        """Container-relative box of a rendered item, or None when it is not rendered."""
        ...


class Static_Bounds:
    """Bounds held in a plain mapping; for headless hosts and tests."""

    def __init__(self, boxes: Mapping[str, Rect] | None = None) -> None:
        self._boxes: dict[str, Rect] = dict(boxes or {})

    def set(self, item_id: str, box: Rect) -> None:
        self._boxes[item_id] = box

    def discard(self, item_id: str) -> None:
        self._boxes.pop(item_id, None)

    def get_item_bounds(self, item_id: str) -> Rect | None:
        return self._boxes.get(item_id)


class Tk_Bounds:
    """Bounds read from a tkinter Canvas whose elements carry `item_tag(id)`."""

    def __init__(self, canvas: tk.Canvas) -> None:
        self.canvas = canvas

    def get_item_bounds(self, item_id: str) -> Rect | None:
        try:
            bb = self.canvas.bbox(item_tag(item_id))
        except tk.TclError as xcp:
            logger.debug("bbox failed for %s: %s", item_id, xcp)
            return None
        if not bb or any(v is None for v in bb):
            return None
        # canvas coordinates -> visible container coordinates
        ox = self.canvas.canvasx(0)
        oy = self.canvas.canvasy(0)
        x1, y1, x2, y2 = bb
        return Rect.from_bbox(x1, y1, x2, y2).offset(-ox, -oy)
