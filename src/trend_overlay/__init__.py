"""Trend Overlay - linear and exponential trendlines for chart renderers."""

__version__ = "0.3.0"

from trend_overlay.fitting import ExponentialFitter, LinearFitter
from trend_overlay.geometry.models import Point, Segment, ViewportRect
from trend_overlay.geometry.clipping import clip_segment
from trend_overlay.geometry.resolver import ProjectionMode, SegmentResolver
from trend_overlay.data.extractor import PointExtractor

__all__ = [
    "__version__",
    "ExponentialFitter",
    "LinearFitter",
    "Point",
    "Segment",
    "ViewportRect",
    "clip_segment",
    "ProjectionMode",
    "SegmentResolver",
    "PointExtractor",
]
