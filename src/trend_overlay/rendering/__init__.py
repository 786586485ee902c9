"""Trendline rendering: options, legend, drawing surface and the overlay itself."""

from trend_overlay.rendering.legend import LegendEntry, augment_legend, build_legend
from trend_overlay.rendering.options import ResolvedTrendline, TrendlineOptions, resolve_trendline
from trend_overlay.rendering.overlay import TrendlineOverlay, TrendlineResult
from trend_overlay.rendering.surface import DrawingSurface, RecordingSurface

__all__ = [
    "LegendEntry",
    "augment_legend",
    "build_legend",
    "ResolvedTrendline",
    "TrendlineOptions",
    "resolve_trendline",
    "TrendlineOverlay",
    "TrendlineResult",
    "DrawingSurface",
    "RecordingSurface",
]
