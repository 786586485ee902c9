"""Point extraction from raw chart datasets."""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterator, Sequence

import structlog

from trend_overlay.data.scales import to_epoch_ms
from trend_overlay.fitting.base import Fitter
from trend_overlay.geometry.models import Point

logger = structlog.get_logger()


class DataShape(str, Enum):
    """How the entries of a dataset are laid out."""

    INDEXED = "indexed"
    """Flat scalars; x is the position in the series."""

    LABELLED = "labelled"
    """Flat scalars on a time axis; x is the parsed label at the same position."""

    STRUCTURED = "structured"
    """Records carrying numeric x and y under configurable keys."""

    TIME_KEYED = "time_keyed"
    """Records on a time axis; x is a date under the x key (or ``t``)."""


def as_number(value: Any) -> float | None:
    """
    Coerce a raw value to a finite float.

    Accepts ints, floats and numeric strings. Booleans, None, NaN,
    infinities and anything else come back as None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def sanitize_offset(offset: int, length: int) -> int:
    """Reset offsets whose magnitude reaches past the data to 0."""
    if abs(offset) >= length:
        return 0
    return offset


class PointExtractor:
    """
    Turns one raw dataset into a clean stream of (x, y) points.

    The extractor honours an offset window: a positive offset skips the
    leading ``offset`` entries, a negative one drops the trailing
    ``|offset|`` entries. Structured records with an unusable x or y are
    dropped whole; the index is never substituted for a missing coordinate.
    """

    def __init__(
        self,
        x_key: str = "x",
        y_key: str = "y",
        is_time_axis: bool = False,
        offset: int = 0,
        labels: Sequence[Any] | None = None,
    ):
        """
        Initialize the extractor.

        Args:
            x_key: Record key holding the x value
            y_key: Record key holding the y value
            is_time_axis: Whether the horizontal axis is time-typed
            offset: Signed window offset (see class docstring)
            labels: Axis labels aligned by index, used for time axes with
                flat numeric data
        """
        self.x_key = x_key
        self.y_key = y_key
        self.is_time_axis = is_time_axis
        self.offset = offset
        self.labels = list(labels) if labels is not None else []

    def infer_shape(self, data: Sequence[Any]) -> DataShape:
        """
        Decide the shape of a dataset from its first usable entry.

        The search starts at the offset when it is positive, otherwise at
        the beginning of the data. An all-null dataset is treated as flat.
        """
        offset = sanitize_offset(self.offset, len(data))
        start = offset if offset > 0 else 0

        first = next((entry for entry in data[start:] if entry is not None), None)
        structured = isinstance(first, Mapping)

        if structured:
            return DataShape.TIME_KEYED if self.is_time_axis else DataShape.STRUCTURED
        return DataShape.LABELLED if self.is_time_axis else DataShape.INDEXED

    def extract(self, data: Sequence[Any]) -> Iterator[Point]:
        """
        Yield the points of ``data`` that survive the offset window and validation.

        Args:
            data: Raw dataset entries; None marks a gap

        Yields:
            Point for every usable entry, in index order
        """
        length = len(data)
        offset = sanitize_offset(self.offset, length)
        if offset != self.offset:
            logger.debug("Offset out of range, ignoring", offset=self.offset, length=length)

        shape = self.infer_shape(data)

        for index, entry in enumerate(data):
            if entry is None:
                continue
            if offset > 0 and index < offset:
                continue
            if offset < 0 and index >= length + offset:
                continue

            point = self._to_point(shape, index, entry)
            if point is not None:
                yield point

    def feed(self, fitter: Fitter, data: Sequence[Any]) -> int:
        """
        Add every extracted point to ``fitter``.

        Returns:
            Number of points handed to the fitter
        """
        return fitter.add_points(self.extract(data))

    def _to_point(self, shape: DataShape, index: int, entry: Any) -> Point | None:
        if shape is DataShape.TIME_KEYED:
            return self._time_keyed_point(entry)
        if shape is DataShape.STRUCTURED:
            return self._structured_point(entry)
        if shape is DataShape.LABELLED:
            return self._labelled_point(index, entry)
        return self._indexed_point(index, entry)

    def _time_keyed_point(self, entry: Any) -> Point | None:
        if not isinstance(entry, Mapping):
            return None
        raw_x = entry.get(self.x_key)
        if raw_x is None:
            raw_x = entry.get("t")
        y = as_number(entry.get(self.y_key))
        if raw_x is None or y is None:
            return None
        x = to_epoch_ms(raw_x)
        if x is None:
            return None
        return Point(x, y)

    def _structured_point(self, entry: Any) -> Point | None:
        if not isinstance(entry, Mapping):
            return None
        x = as_number(entry.get(self.x_key))
        y = as_number(entry.get(self.y_key))
        if x is None or y is None:
            return None
        return Point(x, y)

    def _labelled_point(self, index: int, entry: Any) -> Point | None:
        if index >= len(self.labels) or not self.labels[index]:
            return None
        y = as_number(entry)
        if y is None:
            return None
        x = to_epoch_ms(self.labels[index])
        if x is None:
            return None
        return Point(x, y)

    def _indexed_point(self, index: int, entry: Any) -> Point | None:
        y = as_number(entry)
        if y is None:
            return None
        return Point(float(index), y)
