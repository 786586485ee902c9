"""Pixel-space geometry: value types and segment clipping."""

from trend_overlay.geometry.models import Point, Segment, ViewportRect
from trend_overlay.geometry.clipping import clip_segment

__all__ = [
    "Point",
    "Segment",
    "ViewportRect",
    "clip_segment",
]
