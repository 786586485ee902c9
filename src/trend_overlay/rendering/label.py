"""Inline trendline label text and placement."""

from dataclasses import dataclass

from trend_overlay.fitting.base import Fitter
from trend_overlay.fitting.exponential import ExponentialFitter
from trend_overlay.geometry.models import Point, Segment
from trend_overlay.rendering.options import ResolvedLabel


@dataclass(frozen=True)
class LabelPlacement:
    """Where a label goes: rotate by ``angle`` about ``origin``, then draw at (dx, dy)."""

    origin: Point
    angle: float
    dx: float
    dy: float


def format_label_text(label: ResolvedLabel, fitter: Fitter) -> str:
    """
    Label text, with the fitted parameters appended when requested.

    Linear fits show the slope (as a percentage if ``label.percentage``),
    exponential fits show ``a`` and ``b``.
    """
    if not label.display_value:
        return label.text

    if isinstance(fitter, ExponentialFitter):
        return f"{label.text} (a={fitter.coefficient():.2f}, b={fitter.growth_rate():.2f})"

    slope = fitter.scale()
    if label.percentage:
        return f"{label.text} (Slope: {slope * 100:.2f}%)"
    return f"{label.text} (Slope: {slope:.2f})"


def place_label(segment: Segment, text_width: float, offset: float) -> LabelPlacement:
    """Center the label on the segment midpoint, aligned with the line."""
    return LabelPlacement(
        origin=segment.midpoint,
        angle=segment.angle,
        dx=-text_width / 2,
        dy=offset,
    )
