"""Shared test fixtures."""

from typing import Any

import pytest
import structlog

from trend_overlay.config import ParsingConfig, Settings, reset_settings
from trend_overlay.data.base import Chart, CoordinateMapper, Dataset
from trend_overlay.data.scales import LinearScale
from trend_overlay.geometry.models import ViewportRect


class RecordingScale(CoordinateMapper):
    """
    Mapper with a fixed ``pixel = value * 10`` rule that counts its calls.

    The vertical flavour is deliberately not inverted so expected pixels
    can be read straight off the data values.
    """

    def __init__(self, horizontal: bool = True, axis_type: str = "linear", factor: float = 10.0):
        self._horizontal = horizontal
        self._axis_type = axis_type
        self.factor = factor
        self.calls = 0

    @property
    def is_horizontal(self) -> bool:
        return self._horizontal

    @property
    def axis_type(self) -> str:
        return self._axis_type

    def value_to_pixel(self, value: float) -> float:
        self.calls += 1
        return value * self.factor

    def pixel_to_value(self, pixel: float) -> float:
        self.calls += 1
        return pixel / self.factor


@pytest.fixture
def viewport() -> ViewportRect:
    """Chart area used throughout: 700 x 400 px starting at (50, 50)."""
    return ViewportRect(left=50, right=750, top=50, bottom=450)


@pytest.fixture
def x_scale() -> RecordingScale:
    return RecordingScale(horizontal=True)


@pytest.fixture
def y_scale() -> RecordingScale:
    return RecordingScale(horizontal=False)


@pytest.fixture
def settings() -> Settings:
    """Built-in defaults, independent of any settings file on disk."""
    return Settings()


@pytest.fixture
def make_chart(viewport, x_scale, y_scale):
    """Factory for charts with the fixture scales and viewport."""

    def _make(
        *datasets: Dataset,
        labels: list[Any] | None = None,
        parsing: ParsingConfig | None = None,
        scales: dict[str, CoordinateMapper] | None = None,
    ) -> Chart:
        return Chart(
            datasets=list(datasets),
            scales=scales or {"x": x_scale, "y": y_scale},
            chart_area=viewport,
            labels=labels or [],
            parsing=parsing,
        )

    return _make


@pytest.fixture
def real_scales(viewport) -> dict[str, LinearScale]:
    """Proper affine scales: x 0..10 across the area, y 0..100 bottom to top."""
    return {
        "x": LinearScale.for_area(0, 10, viewport, horizontal=True),
        "y": LinearScale.for_area(0, 100, viewport, horizontal=False),
    }


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Undo CLI-level logging setup and cached settings between tests."""
    yield
    structlog.reset_defaults()
    reset_settings()
