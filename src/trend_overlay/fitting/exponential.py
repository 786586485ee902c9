"""Exponential curve fitting through log-linearisation."""

import math
from dataclasses import dataclass
from typing import NamedTuple

from trend_overlay.fitting.base import Fitter

DEGENERATE_DISCRIMINANT = 1e-10
MAX_EXPONENT = 500.0


class LogPoint(NamedTuple):
    """An accepted sample together with its natural log ordinate."""

    x: float
    y: float
    ln_y: float


@dataclass(frozen=True)
class _ExponentialCoefficients:
    growth_rate: float
    coefficient: float
    correlation: float


_FALLBACK = _ExponentialCoefficients(growth_rate=0.0, coefficient=1.0, correlation=0.0)


class ExponentialFitter(Fitter):
    """
    Fit ``y = a * e^(b * x)`` by regressing ``ln(y)`` on ``x``.

    A single non-positive ``y`` (or one whose log is not finite) abandons
    the fit for the whole pass: ``valid_data`` flips to False for good and
    every derived value reports its fallback (``b = 0``, ``a = 1``,
    ``f(x) = 0``, ``R² = 0``), even if valid points follow.
    """

    kind = "exponential"

    def __init__(self):
        super().__init__()
        self.sum_x = 0.0
        self.sum_ln_y = 0.0
        self.sum_x2 = 0.0
        self.sum_x_ln_y = 0.0
        self.valid_data = True
        self.data_points: list[LogPoint] = []
        self._coefficients: _ExponentialCoefficients | None = None

    def add(self, x: float, y: float) -> None:
        if y <= 0:
            self._invalidate()
            return

        try:
            ln_y = math.log(y)
        except (ValueError, OverflowError):
            ln_y = math.nan
        if not math.isfinite(ln_y):
            self._invalidate()
            return

        self.sum_x += x
        self.sum_ln_y += ln_y
        self.sum_x2 += x * x
        self.sum_x_ln_y += x * ln_y
        self._track_extent(x)
        self.data_points.append(LogPoint(x, y, ln_y))
        self.count += 1
        self._coefficients = None

    def growth_rate(self) -> float:
        """The exponent ``b``."""
        return self._fit().growth_rate

    def coefficient(self) -> float:
        """The multiplier ``a``."""
        return self._fit().coefficient

    def correlation(self) -> float:
        """Coefficient of determination of the log-space fit, in [0, 1]."""
        return self._fit().correlation

    def value_at(self, x: float) -> float:
        if not self._usable:
            return 0.0
        fit = self._fit()
        exponent = fit.growth_rate * x
        # Keeps pixel math downstream away from inf/nan.
        if abs(exponent) > MAX_EXPONENT:
            return 0.0
        try:
            result = fit.coefficient * math.exp(exponent)
        except OverflowError:
            return 0.0
        return result if math.isfinite(result) else 0.0

    def scale(self) -> float:
        return self.growth_rate()

    @property
    def _usable(self) -> bool:
        return self.valid_data and self.count >= 2

    def _invalidate(self) -> None:
        self.valid_data = False
        self._coefficients = None

    def _fit(self) -> _ExponentialCoefficients:
        if self._coefficients is None:
            self._coefficients = self._solve() if self._usable else _FALLBACK
        return self._coefficients

    def _solve(self) -> _ExponentialCoefficients:
        n = self.count
        denominator = n * self.sum_x2 - self.sum_x * self.sum_x
        if abs(denominator) < DEGENERATE_DISCRIMINANT:
            growth_rate = 0.0
        else:
            growth_rate = (n * self.sum_x_ln_y - self.sum_x * self.sum_ln_y) / denominator

        ln_a = (self.sum_ln_y - growth_rate * self.sum_x) / n
        coefficient = math.exp(ln_a)

        return _ExponentialCoefficients(
            growth_rate=growth_rate,
            coefficient=coefficient,
            correlation=self._r_squared(ln_a, growth_rate),
        )

    def _r_squared(self, ln_a: float, growth_rate: float) -> float:
        mean_ln_y = self.sum_ln_y / self.count
        ss_total = 0.0
        ss_residual = 0.0
        for point in self.data_points:
            predicted = ln_a + growth_rate * point.x
            ss_total += (point.ln_y - mean_ln_y) ** 2
            ss_residual += (point.ln_y - predicted) ** 2

        if ss_total == 0:
            return 1.0
        return max(0.0, 1 - ss_residual / ss_total)
