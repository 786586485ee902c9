"""Translate resolved trendline segments into drawing-surface calls."""

import math

import structlog

from trend_overlay.geometry.models import Point, Segment
from trend_overlay.rendering.label import place_label
from trend_overlay.rendering.options import ResolvedLabel, ResolvedTrendline
from trend_overlay.rendering.surface import DrawingSurface, StrokeStyle

logger = structlog.get_logger()


class RenderAdapter:
    """
    Issues stroke, fill and label calls for a clipped trendline segment.

    The adapter never raises for bad geometry: non-finite coordinates are
    refused with a warning, and a gradient the surface cannot build is
    replaced by a solid stroke.
    """

    def __init__(self, surface: DrawingSurface):
        self.surface = surface

    def draw(
        self,
        segment: Segment,
        style: ResolvedTrendline,
        fill_bottom: float,
        label_text: str | None = None,
    ) -> None:
        """
        Draw a trendline with its optional fill and label.

        Args:
            segment: Clipped pixel segment
            style: Resolved trendline style
            fill_bottom: Pixel y the fill polygon extends down to
            label_text: Label text, drawn only when the style has a label
        """
        if not self.stroke(segment, style):
            return

        if style.fill_color:
            self.fill_below(segment, fill_bottom, style.fill_color)

        if style.label is not None and label_text is not None:
            self.label(segment, label_text, style.label)

    def stroke(self, segment: Segment, style: ResolvedTrendline) -> bool:
        """
        Stroke the trendline with a colour_min -> colour_max gradient.

        Returns:
            Whether anything was drawn
        """
        if not segment.is_finite:
            logger.warning("Cannot draw trendline: non-finite coordinates", segment=segment.as_tuple())
            return False

        self.surface.stroke_line(
            segment,
            width=style.width,
            dash=style.dash,
            style=self._gradient(segment, style.color_min, style.color_max),
        )
        return True

    def fill_below(self, segment: Segment, bottom: float, color: str) -> None:
        """Fill the area between the trendline and ``bottom``."""
        if not segment.is_finite or not math.isfinite(bottom):
            logger.warning(
                "Cannot fill below trendline: non-finite coordinates",
                segment=segment.as_tuple(),
                bottom=bottom,
            )
            return

        self.surface.fill_polygon(
            [
                Point(segment.x1, segment.y1),
                Point(segment.x2, segment.y2),
                Point(segment.x2, bottom),
                Point(segment.x1, bottom),
            ],
            color,
        )

    def label(self, segment: Segment, text: str, label: ResolvedLabel) -> None:
        """Draw ``text`` centred on the segment and rotated along it."""
        width = self.surface.measure_text(text, label.font)
        placement = place_label(segment, width, label.offset)
        self.surface.fill_text(
            text,
            origin=placement.origin,
            angle=placement.angle,
            dx=placement.dx,
            dy=placement.dy,
            font=label.font,
            color=label.color,
        )

    def _gradient(self, segment: Segment, color_min: str, color_max: str) -> StrokeStyle:
        try:
            return self.surface.create_linear_gradient(
                Point(segment.x1, segment.y1),
                Point(segment.x2, segment.y2),
                [(0.0, color_min), (1.0, color_max)],
            )
        except (ValueError, ArithmeticError) as e:
            logger.warning("Gradient creation failed, using solid color", error=str(e), color=color_min)
            return color_min
