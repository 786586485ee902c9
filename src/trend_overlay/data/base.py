"""Host-facing interfaces: coordinate mappers, datasets and charts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from trend_overlay.config import ParsingConfig
from trend_overlay.geometry.models import ViewportRect

TIME_AXIS_TYPES = frozenset({"time", "timeseries"})


class CoordinateMapper(ABC):
    """Abstract base class for an axis that converts between data values and pixels."""

    @abstractmethod
    def value_to_pixel(self, value: float) -> float:
        """
        Convert a data value to a pixel coordinate along this axis.

        Args:
            value: Value in data space

        Returns:
            Pixel coordinate (may lie outside the chart area)
        """
        pass

    @abstractmethod
    def pixel_to_value(self, pixel: float) -> float:
        """
        Convert a pixel coordinate along this axis back to a data value.

        Args:
            pixel: Pixel coordinate

        Returns:
            Value in data space
        """
        pass

    @property
    @abstractmethod
    def is_horizontal(self) -> bool:
        """Whether this axis runs along x."""
        pass

    @property
    @abstractmethod
    def axis_type(self) -> str:
        """Declared axis type, e.g. 'linear', 'category', 'time'."""
        pass

    @property
    def is_time_axis(self) -> bool:
        return self.axis_type in TIME_AXIS_TYPES


@dataclass
class Dataset:
    """
    One series of a chart, as the host hands it over.

    Attributes:
        data: Raw entries: numbers, records, or None for gaps
        label: Series name shown in the legend
        border_color: Series colour, used as the default trendline colour
        border_width: Series line width, used as the default trendline width
        y_axis_id: Id of the vertical scale this series is plotted against
        order: Host draw order; 0 means "draw last"
        hidden: Whether the host currently hides this series
        always_show_trendline: Draw the trendline even when the series is hidden
        trendline_linear: Raw linear trendline options, if any
        trendline_exponential: Raw exponential trendline options, if any
    """

    data: list[Any] = field(default_factory=list)
    label: str | None = None
    border_color: str | None = None
    border_width: float | None = None
    y_axis_id: str = "y"
    order: int = 0
    hidden: bool = False
    always_show_trendline: bool = False
    trendline_linear: dict[str, Any] | None = None
    trendline_exponential: dict[str, Any] | None = None

    @property
    def trendline_config(self) -> dict[str, Any] | None:
        """Raw options of the trendline to fit; exponential wins when both kinds are configured."""
        if self.trendline_exponential is not None:
            return self.trendline_exponential
        return self.trendline_linear

    @property
    def trendline_kind(self) -> str | None:
        if self.trendline_exponential is not None:
            return "exponential"
        if self.trendline_linear is not None:
            return "linear"
        return None

    @property
    def legend_config(self) -> dict[str, Any] | None:
        """Raw options consulted for the legend entry; linear is looked up first."""
        if self.trendline_linear is not None:
            return self.trendline_linear
        return self.trendline_exponential

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Dataset":
        """Build a dataset from host-shaped (camelCase) keys."""
        return cls(
            data=list(raw.get("data") or []),
            label=raw.get("label"),
            border_color=raw.get("borderColor"),
            border_width=raw.get("borderWidth"),
            y_axis_id=raw.get("yAxisID") or "y",
            order=raw.get("order") or 0,
            hidden=bool(raw.get("hidden", False)),
            always_show_trendline=bool(raw.get("alwaysShowTrendline", False)),
            trendline_linear=raw.get("trendlineLinear"),
            trendline_exponential=raw.get("trendlineExponential"),
        )


@dataclass
class Chart:
    """
    A snapshot of the host chart for one render pass.

    Attributes:
        datasets: Series in host order
        scales: Axis id -> coordinate mapper
        chart_area: Drawable rectangle in pixels
        labels: Axis labels aligned by index with flat numeric datasets
        parsing: Chart-wide record key defaults, if the host sets any
    """

    datasets: list[Dataset]
    scales: dict[str, CoordinateMapper]
    chart_area: ViewportRect
    labels: Sequence[Any] = field(default_factory=list)
    parsing: ParsingConfig | None = None

    def is_dataset_visible(self, index: int) -> bool:
        return not self.datasets[index].hidden
