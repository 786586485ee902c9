"""Abstract base class for incremental curve fitters."""

import math
from abc import ABC, abstractmethod
from typing import Iterable

from trend_overlay.geometry.models import Point


class Fitter(ABC):
    """
    Incremental least-squares accumulator.

    A fitter is fed one point at a time through ``add`` and answers
    questions about the fitted curve at any moment. Fitters are built
    fresh for every render pass and thrown away afterwards.
    """

    kind: str = "base"

    def __init__(self):
        self.count = 0
        self.min_x = math.inf
        self.max_x = -math.inf

    @abstractmethod
    def add(self, x: float, y: float) -> None:
        """
        Accumulate a single point.

        Args:
            x: Point abscissa
            y: Point ordinate
        """
        pass

    @abstractmethod
    def value_at(self, x: float) -> float:
        """Fitted value of the curve at ``x``."""
        pass

    @abstractmethod
    def scale(self) -> float:
        """Signed rate of change, used to decide projection direction."""
        pass

    def add_points(self, points: Iterable[Point]) -> int:
        """
        Accumulate a stream of points.

        Returns:
            Number of points consumed from the stream
        """
        consumed = 0
        for point in points:
            self.add(point.x, point.y)
            consumed += 1
        return consumed

    @property
    def has_fit(self) -> bool:
        """Whether enough points were accepted to define a curve."""
        return self.count >= 2

    def _track_extent(self, x: float) -> None:
        if x < self.min_x:
            self.min_x = x
        if x > self.max_x:
            self.max_x = x
