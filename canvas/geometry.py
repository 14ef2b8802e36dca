from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Point:
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class Rect:
    """Axis-aligned rectangle in container coordinates."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, a: Point, b: Point) -> Rect:
        return cls(
            x=min(a.x, b.x),
            y=min(a.y, b.y),
            width=abs(b.x - a.x),
            height=abs(b.y - a.y),
        )

    @classmethod
    def from_bbox(cls, x1: float, y1: float, x2: float, y2: float) -> Rect:
        return cls.from_points(Point(x1, y1), Point(x2, y2))

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def offset(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def intersection_area(self, other: Rect) -> float:
        ox = max(0.0, min(self.right, other.right) - max(self.x, other.x))
        oy = max(0.0, min(self.bottom, other.bottom) - max(self.y, other.y))
        return ox * oy
