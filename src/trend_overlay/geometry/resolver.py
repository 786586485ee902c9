"""Turn a fitted curve into the pixel segment that should be drawn."""

import math
from dataclasses import dataclass
from enum import Enum

import structlog

from trend_overlay.data.base import CoordinateMapper
from trend_overlay.fitting.base import Fitter
from trend_overlay.fitting.linear import LinearFitter
from trend_overlay.geometry.clipping import clip_segment
from trend_overlay.geometry.models import Point, Segment, ViewportRect

logger = structlog.get_logger()

HORIZONTAL_SLOPE = 1e-6
DUPLICATE_TOLERANCE = 1e-4

Endpoints = tuple[Point, Point]


class ProjectionMode(str, Enum):
    """Where the drawn trendline starts and ends."""

    BOUNDED = "bounded"
    """From the smallest to the largest fitted x."""

    PROJECTED = "projected"
    """Extended to the edges of the visible chart area."""

    DIRECTIONAL = "directional"
    """Bounded, but a falling line runs on to where it crosses y = 0."""


@dataclass(frozen=True)
class DataBounds:
    """The chart area expressed in data space."""

    x_left: float
    x_right: float
    y_top: float
    y_bottom: float
    min_y: float
    max_y: float

    @property
    def min_x(self) -> float:
        return min(self.x_left, self.x_right)

    @property
    def max_x(self) -> float:
        return max(self.x_left, self.x_right)

    def contains(self, point: Point) -> bool:
        return (
            point.is_finite
            and self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
        )


def viewport_bounds(
    x_scale: CoordinateMapper,
    y_scale: CoordinateMapper,
    viewport: ViewportRect,
) -> DataBounds:
    """Map the four chart-area edges back to data values."""
    y_top = y_scale.pixel_to_value(viewport.top)
    y_bottom = y_scale.pixel_to_value(viewport.bottom)
    finite_y = [y for y in (y_top, y_bottom) if math.isfinite(y)]

    return DataBounds(
        x_left=x_scale.pixel_to_value(viewport.left),
        x_right=x_scale.pixel_to_value(viewport.right),
        y_top=y_top,
        y_bottom=y_bottom,
        min_y=min(finite_y) if finite_y else -math.inf,
        max_y=max(finite_y) if finite_y else math.inf,
    )


def bounded_endpoints(fitter: Fitter) -> Endpoints:
    """The fitted curve evaluated at the data's own x extent."""
    return (
        Point(fitter.min_x, fitter.value_at(fitter.min_x)),
        Point(fitter.max_x, fitter.value_at(fitter.max_x)),
    )


def directional_endpoints(fitter: Fitter) -> Endpoints:
    """
    Bounded endpoints, except that a falling line runs on to its x-intercept.

    When the x-intercept is undefined or lies before the first data point,
    the line stops at the last data point instead.
    """
    start, end = bounded_endpoints(fitter)
    if not isinstance(fitter, LinearFitter) or not fitter.scale() < 0:
        return start, end

    x_end = fitter.x_intercept()
    if not math.isfinite(x_end) or x_end < fitter.min_x:
        x_end = fitter.max_x
    return start, Point(x_end, fitter.value_at(x_end))


def edge_candidates(fitter: Fitter, bounds: DataBounds) -> list[Point]:
    """
    Points where the fitted curve meets the chart-area edges.

    Lines are intersected with all four edges (only left and right when
    nearly horizontal); other curves are evaluated at the left and right
    edges only.
    """
    candidates = []

    if isinstance(fitter, LinearFitter):
        slope = fitter.slope()
        intercept = fitter.intercept()
        if abs(slope) > HORIZONTAL_SLOPE:
            for y in (bounds.y_top, bounds.y_bottom):
                candidates.append(Point((y - intercept) / slope, y))
        else:
            candidates.append(Point(bounds.x_left, intercept))
            candidates.append(Point(bounds.x_right, intercept))

    for x in (bounds.x_left, bounds.x_right):
        candidates.append(Point(x, fitter.value_at(x)))

    return candidates


def dedupe_points(points: list[Point], tolerance: float = DUPLICATE_TOLERANCE) -> list[Point]:
    """Drop points within ``tolerance`` of an earlier point on both axes."""
    unique: list[Point] = []
    for point in points:
        if not any(
            abs(seen.x - point.x) < tolerance and abs(seen.y - point.y) < tolerance
            for seen in unique
        ):
            unique.append(point)
    return unique


def projected_endpoints(fitter: Fitter, bounds: DataBounds) -> Endpoints | None:
    """
    Extend the fitted curve to the edges of the visible area.

    Returns:
        The leftmost and rightmost visible edge crossings, or None when the
        curve crosses the visible area in fewer than two distinct points
    """
    visible = [p for p in edge_candidates(fitter, bounds) if bounds.contains(p)]
    visible = dedupe_points(visible)
    if len(visible) < 2:
        return None

    visible.sort(key=lambda p: (p.x, p.y))
    return visible[0], visible[-1]


class SegmentResolver:
    """
    Resolves fitted curves to clipped pixel segments for one chart area.

    The resolver holds the axis mappers and the viewport of a single render
    pass; it keeps no state between calls.
    """

    def __init__(
        self,
        x_scale: CoordinateMapper,
        y_scale: CoordinateMapper,
        viewport: ViewportRect,
        min_segment_px: float = 0.5,
    ):
        """
        Initialize the resolver.

        Args:
            x_scale: Horizontal axis mapper
            y_scale: Vertical axis mapper for the dataset being drawn
            viewport: Chart area in pixels
            min_segment_px: Clipped segments shorter than this on both axes
                are not drawn
        """
        self.x_scale = x_scale
        self.y_scale = y_scale
        self.viewport = viewport
        self.min_segment_px = min_segment_px

    def data_endpoints(
        self,
        fitter: Fitter,
        mode: ProjectionMode = ProjectionMode.BOUNDED,
    ) -> Endpoints | None:
        """
        Data-space endpoints of the trendline for the given mode.

        Returns:
            Start and end points, or None when the fitter has fewer than two
            points or the projected curve misses the chart area
        """
        if not fitter.has_fit:
            return None

        if mode is ProjectionMode.PROJECTED:
            bounds = viewport_bounds(self.x_scale, self.y_scale, self.viewport)
            return projected_endpoints(fitter, bounds)
        if mode is ProjectionMode.DIRECTIONAL:
            return directional_endpoints(fitter)
        return bounded_endpoints(fitter)

    def to_pixels(self, start: Point, end: Point) -> Segment:
        return Segment(
            x1=self.x_scale.value_to_pixel(start.x),
            y1=self.y_scale.value_to_pixel(start.y),
            x2=self.x_scale.value_to_pixel(end.x),
            y2=self.y_scale.value_to_pixel(end.y),
        )

    def resolve(
        self,
        fitter: Fitter,
        mode: ProjectionMode = ProjectionMode.BOUNDED,
    ) -> Segment | None:
        """
        Compute the clipped pixel segment to draw for a fitted curve.

        Returns:
            Segment inside the viewport, or None when there is nothing to
            draw (too few points, degenerate fit, curve outside the area,
            or a clipped length below ``min_segment_px``)
        """
        endpoints = self.data_endpoints(fitter, mode)
        if endpoints is None:
            logger.debug("No trendline endpoints", kind=fitter.kind, count=fitter.count, mode=mode.value)
            return None

        segment = self.to_pixels(*endpoints)
        if not segment.is_finite:
            logger.debug("Trendline has non-finite pixel coordinates", kind=fitter.kind, segment=segment.as_tuple())
            return None

        clipped = clip_segment(segment, self.viewport)
        if clipped is None:
            logger.debug("Trendline lies outside the chart area", kind=fitter.kind)
            return None

        if clipped.is_degenerate(self.min_segment_px):
            logger.debug("Clipped trendline too short to draw", kind=fitter.kind)
            return None

        return clipped
