"""Trendline options and their resolution into a single style value."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from trend_overlay.config import ParsingConfig, Settings, get_settings
from trend_overlay.data.base import Dataset
from trend_overlay.geometry.resolver import ProjectionMode


class LineStyle(str, Enum):
    """Stroke patterns a trendline can be drawn with."""

    SOLID = "solid"
    DOTTED = "dotted"
    DASHED = "dashed"
    DASHDOT = "dashdot"


DASH_PATTERNS: dict[LineStyle, tuple[float, ...]] = {
    LineStyle.SOLID: (),
    LineStyle.DOTTED: (2, 2),
    LineStyle.DASHED: (8, 3),
    LineStyle.DASHDOT: (8, 3, 2, 3),
}

DEFAULT_LABEL_TEXT = {
    "linear": "Trendline",
    "exponential": "Exponential Trendline",
}


class _HostOptions(BaseModel):
    """Options as written by chart authors: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class FontOptions(_HostOptions):
    family: str | None = None
    size: int | None = Field(default=None, gt=0)


class LabelOptions(_HostOptions):
    """Inline label drawn along the trendline."""

    display: bool = True
    text: str | None = None
    display_value: bool = Field(default=True, description="Append the fitted parameters to the text")
    offset: float | None = None
    percentage: bool = Field(default=False, description="Show the slope as a percentage")
    color: str | None = None
    font: FontOptions = Field(default_factory=FontOptions)


class LegendOptions(_HostOptions):
    """Extra legend entry for the trendline."""

    display: bool = True
    text: str | None = None
    color: str | None = None
    stroke_style: str | None = None
    fill_style: str | None = None
    line_cap: str | None = None
    line_dash: list[float] | None = None
    line_width: float | None = None
    width: float | None = None


class TrendlineOptions(_HostOptions):
    """Per-dataset trendline configuration."""

    color_min: str | None = None
    color_max: str | None = None
    width: float | None = Field(default=None, gt=0)
    line_style: LineStyle = LineStyle.SOLID
    fill_color: str | None = None
    offset: int = Field(default=0, validation_alias=AliasChoices("offset", "trendoffset", "trendOffset"))
    projection: bool = False
    projectable_negative_slope: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "projectable_negative_slope",
            "projectableNegativeSlope",
            "projectable-negative-slope",
        ),
    )
    x_axis_key: str | None = None
    y_axis_key: str | None = None
    label: LabelOptions | None = None
    legend: LegendOptions | None = None

    @field_validator("line_style", mode="before")
    @classmethod
    def _unknown_style_is_solid(cls, value: Any) -> Any:
        if isinstance(value, LineStyle):
            return value
        if isinstance(value, str) and value in LineStyle._value2member_map_:
            return value
        return LineStyle.SOLID

    @field_validator("fill_color", mode="before")
    @classmethod
    def _false_means_no_fill(cls, value: Any) -> Any:
        if value is False or value == "":
            return None
        return value

    @property
    def projection_mode(self) -> ProjectionMode:
        if self.projection:
            return ProjectionMode.PROJECTED
        if self.projectable_negative_slope:
            return ProjectionMode.DIRECTIONAL
        return ProjectionMode.BOUNDED


@dataclass(frozen=True)
class ResolvedLabel:
    text: str
    display_value: bool
    percentage: bool
    color: str
    font_family: str
    font_size: int
    offset: float

    @property
    def font(self) -> str:
        """CSS-style font shorthand, e.g. ``12px Arial``."""
        return f"{self.font_size}px {self.font_family}"


@dataclass(frozen=True)
class ResolvedTrendline:
    """Everything needed to fit and draw one dataset's trendline, with no fallbacks left."""

    kind: str
    color_min: str
    color_max: str
    width: float
    line_style: LineStyle
    dash: tuple[float, ...]
    fill_color: str | None
    offset: int
    mode: ProjectionMode
    x_axis_key: str
    y_axis_key: str
    label: ResolvedLabel | None


def resolve_trendline(
    dataset: Dataset,
    parsing: ParsingConfig | None = None,
    settings: Settings | None = None,
) -> ResolvedTrendline | None:
    """
    Merge a dataset's trendline options with chart and built-in defaults.

    Precedence for every field: the trendline option itself, then the
    chart's parsing defaults (axis keys) or the dataset's own style
    (colour, width), then the built-in settings.

    Args:
        dataset: Dataset carrying ``trendline_linear`` or ``trendline_exponential``
        parsing: Chart-wide record key defaults, if any
        settings: Built-in defaults (global settings when omitted)

    Returns:
        ResolvedTrendline, or None when the dataset has no trendline

    Raises:
        pydantic.ValidationError: If the options are malformed
    """
    raw = dataset.trendline_config
    if raw is None:
        return None

    settings = settings or get_settings()
    style = settings.style
    options = TrendlineOptions.model_validate(raw)
    kind = dataset.trendline_kind

    default_color = dataset.border_color or style.default_color
    x_axis_key = options.x_axis_key or (parsing.x_axis_key if parsing else None) or settings.parsing.x_axis_key
    y_axis_key = options.y_axis_key or (parsing.y_axis_key if parsing else None) or settings.parsing.y_axis_key

    return ResolvedTrendline(
        kind=kind,
        color_min=options.color_min or default_color,
        color_max=options.color_max or default_color,
        width=options.width or dataset.border_width or style.default_width,
        line_style=options.line_style,
        dash=DASH_PATTERNS[options.line_style],
        fill_color=options.fill_color,
        offset=options.offset,
        mode=options.projection_mode,
        x_axis_key=x_axis_key,
        y_axis_key=y_axis_key,
        label=_resolve_label(options.label, kind, default_color, settings),
    )


def _resolve_label(
    label: LabelOptions | None,
    kind: str,
    default_color: str,
    settings: Settings,
) -> ResolvedLabel | None:
    if label is None or not label.display:
        return None

    style = settings.style
    return ResolvedLabel(
        text=label.text if label.text is not None else DEFAULT_LABEL_TEXT[kind],
        display_value=label.display_value,
        percentage=label.percentage,
        color=label.color or default_color,
        font_family=label.font.family or style.font_family,
        font_size=label.font.size or style.font_size,
        offset=label.offset if label.offset is not None else style.label_offset,
    )
