"""Geometric value types shared by the resolver, clipper and renderer."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A sample fed to a fitter, or a data-space endpoint candidate."""

    x: float
    y: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class ViewportRect:
    """
    Drawable chart area in pixel coordinates.

    Canvas convention: y grows downward, so ``top < bottom``.
    """

    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, x: float, y: float) -> bool:
        """Check whether a pixel lies inside or on the rectangle."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class Segment:
    """A line segment in pixel space, from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def between(cls, start: Point, end: Point) -> "Segment":
        return cls(start.x, start.y, end.x, end.y)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x1, self.y1, self.x2, self.y2))

    @property
    def dx(self) -> float:
        return self.x2 - self.x1

    @property
    def dy(self) -> float:
        return self.y2 - self.y1

    @property
    def angle(self) -> float:
        """Rotation of the segment in radians, as used for inline labels."""
        return math.atan2(self.dy, self.dx)

    @property
    def midpoint(self) -> Point:
        return Point((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    def is_degenerate(self, tolerance: float = 0.5) -> bool:
        """True when both endpoints are closer than ``tolerance`` pixels on each axis."""
        return abs(self.dx) < tolerance and abs(self.dy) < tolerance

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)
