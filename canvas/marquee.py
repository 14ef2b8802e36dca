"""Marquee hit testing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from canvas.bounds import Bounds_Provider
from canvas.geometry import Rect

ITEM_RATIO = 0.10
MARQUEE_RATIO = 0.50


@dataclass(slots=True, frozen=True)
class Thresholds:
    item_ratio: float = ITEM_RATIO
    marquee_ratio: float = MARQUEE_RATIO


def marquee_hits(marquee: Rect, box: Rect, limits: Thresholds = Thresholds()) -> bool:
    """True when `box` counts as selected by `marquee`.

    Either a large enough share of the item is covered, or the item covers a
    large enough share of the marquee. Both comparisons are strict.
    """
    overlap = marquee.intersection_area(box)
    if overlap <= 0:
        return False
    if box.area > 0 and overlap / box.area > limits.item_ratio:
        return True
    return marquee.area > 0 and overlap / marquee.area > limits.marquee_ratio


def items_in_marquee(
    marquee: Rect,
    ids: Iterable[str],
    bounds: Bounds_Provider,
    limits: Thresholds = Thresholds(),
) -> list[str]:
    """Ids (in the given order) of rendered items hit by the marquee."""
    hits: list[str] = []
    for item_id in ids:
        box = bounds.get_item_bounds(item_id)
        if box is None:
            continue
        if marquee_hits(marquee, box, limits):
            hits.append(item_id)
    return hits
