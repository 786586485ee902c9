"""Concrete coordinate mappers for linear and time axes."""

import math
from typing import Any

import pandas as pd

from trend_overlay.data.base import CoordinateMapper
from trend_overlay.geometry.models import ViewportRect


def to_epoch_ms(value: Any) -> float | None:
    """
    Parse a date-like value to epoch milliseconds.

    Numbers are taken to be epoch milliseconds already. Strings, dates,
    datetimes and timestamps are parsed by pandas; naive values are read as
    UTC. Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    try:
        timestamp = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(timestamp, pd.Timestamp) or pd.isna(timestamp):
        return None

    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.value / 1_000_000


class LinearScale(CoordinateMapper):
    """
    Affine mapping between a value range and a pixel range.

    Horizontal scales map ``minimum`` to ``pixel_start`` (the left edge);
    vertical scales are usually built with ``pixel_start`` at the bottom so
    that larger values sit higher on the canvas.
    """

    def __init__(
        self,
        minimum: float,
        maximum: float,
        pixel_start: float,
        pixel_end: float,
        horizontal: bool = True,
    ):
        if maximum == minimum:
            raise ValueError("Scale range must not be empty")
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.pixel_start = float(pixel_start)
        self.pixel_end = float(pixel_end)
        self._horizontal = horizontal

    @classmethod
    def for_area(
        cls,
        minimum: float,
        maximum: float,
        area: ViewportRect,
        horizontal: bool = True,
    ) -> "LinearScale":
        """Build a scale spanning the chart area along the given direction."""
        if horizontal:
            return cls(minimum, maximum, area.left, area.right, horizontal=True)
        return cls(minimum, maximum, area.bottom, area.top, horizontal=False)

    @property
    def is_horizontal(self) -> bool:
        return self._horizontal

    @property
    def axis_type(self) -> str:
        return "linear"

    def value_to_pixel(self, value: float) -> float:
        ratio = (value - self.minimum) / (self.maximum - self.minimum)
        return self.pixel_start + ratio * (self.pixel_end - self.pixel_start)

    def pixel_to_value(self, pixel: float) -> float:
        ratio = (pixel - self.pixel_start) / (self.pixel_end - self.pixel_start)
        return self.minimum + ratio * (self.maximum - self.minimum)


class TimeScale(LinearScale):
    """A linear scale over epoch milliseconds whose bounds may be given as dates."""

    def __init__(
        self,
        minimum: Any,
        maximum: Any,
        pixel_start: float,
        pixel_end: float,
        horizontal: bool = True,
    ):
        start = to_epoch_ms(minimum)
        end = to_epoch_ms(maximum)
        if start is None or end is None:
            raise ValueError(f"Cannot parse time scale bounds: {minimum!r}, {maximum!r}")
        super().__init__(start, end, pixel_start, pixel_end, horizontal=horizontal)

    @property
    def axis_type(self) -> str:
        return "time"
