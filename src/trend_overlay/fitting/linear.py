"""Streaming least-squares line fitting."""

import math
import sys
from dataclasses import dataclass

from trend_overlay.fitting.base import Fitter

# Discriminants within a few ulps of the raw sums are cancellation noise.
_CANCELLATION_ULPS = 4 * sys.float_info.epsilon


@dataclass(frozen=True)
class _LineCoefficients:
    slope: float
    intercept: float


class LinearFitter(Fitter):
    """
    Fit ``y = slope * x + intercept`` from a stream of points.

    Only running sums are kept, so the result depends on the multiset of
    points and not on their order. A degenerate predictor (fewer than two
    points, or every x equal) yields ``nan`` coefficients instead of
    raising; callers treat a non-finite slope as "no trend".
    """

    kind = "linear"

    def __init__(self):
        super().__init__()
        self.sum_x = 0.0
        self.sum_y = 0.0
        self.sum_x2 = 0.0
        self.sum_xy = 0.0
        self._coefficients: _LineCoefficients | None = None

    def add(self, x: float, y: float) -> None:
        self.sum_x += x
        self.sum_y += y
        self.sum_x2 += x * x
        self.sum_xy += x * y
        self._track_extent(x)
        self.count += 1
        self._coefficients = None

    def slope(self) -> float:
        return self._fit().slope

    def intercept(self) -> float:
        return self._fit().intercept

    def value_at(self, x: float) -> float:
        fit = self._fit()
        return fit.slope * x + fit.intercept

    def x_intercept(self) -> float:
        """
        Where the fitted line crosses y = 0.

        Returns:
            ``-intercept / slope``; ``±inf`` for a horizontal line off the
            axis, ``nan`` when the line is the axis itself or undefined
        """
        slope = self.slope()
        intercept = self.intercept()
        if math.isnan(slope) or math.isnan(intercept):
            return math.nan
        if slope == 0:
            if intercept == 0:
                return math.nan
            return math.copysign(math.inf, -intercept)
        return -intercept / slope

    def scale(self) -> float:
        return self.slope()

    def _fit(self) -> _LineCoefficients:
        if self._coefficients is None:
            self._coefficients = self._solve()
        return self._coefficients

    def _solve(self) -> _LineCoefficients:
        n = self.count
        if n == 0:
            return _LineCoefficients(math.nan, math.nan)

        denominator = n * self.sum_x2 - self.sum_x * self.sum_x
        if abs(denominator) <= _CANCELLATION_ULPS * n * self.sum_x2:
            slope = math.nan
        else:
            slope = (n * self.sum_xy - self.sum_x * self.sum_y) / denominator

        intercept = (self.sum_y - slope * self.sum_x) / n
        return _LineCoefficients(slope, intercept)
