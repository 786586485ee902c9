"""TrendlineOverlay - draws fitted trendlines for every configured dataset of a chart."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from trend_overlay.config import Settings, get_settings
from trend_overlay.data.base import Chart, CoordinateMapper, Dataset
from trend_overlay.data.extractor import PointExtractor
from trend_overlay.fitting import ExponentialFitter, Fitter, LinearFitter, create_fitter
from trend_overlay.geometry.models import Segment
from trend_overlay.geometry.resolver import SegmentResolver
from trend_overlay.rendering.adapter import RenderAdapter
from trend_overlay.rendering.label import format_label_text
from trend_overlay.rendering.options import ResolvedTrendline, resolve_trendline
from trend_overlay.rendering.surface import DrawingSurface

logger = structlog.get_logger()


@dataclass
class TrendlineResult:
    """What was fitted and drawn for one dataset."""

    dataset_index: int
    kind: str
    count: int
    segment: Segment | None
    scale: float
    intercept: float | None = None
    coefficient: float | None = None
    correlation: float | None = None
    label_text: str | None = None

    @property
    def drawn(self) -> bool:
        return self.segment is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "dataset_index": self.dataset_index,
            "kind": self.kind,
            "count": self.count,
            "drawn": self.drawn,
            "segment": list(self.segment.as_tuple()) if self.segment else None,
            "scale": self.scale,
            "intercept": self.intercept,
            "coefficient": self.coefficient,
            "correlation": self.correlation,
            "label": self.label_text,
        }


def find_scales(scales: Mapping[str, CoordinateMapper]) -> tuple[CoordinateMapper, CoordinateMapper]:
    """
    Pick the first horizontal and the first vertical scale.

    Raises:
        ValueError: If the chart lacks a horizontal or a vertical scale
    """
    x_scale = next((s for s in scales.values() if s.is_horizontal), None)
    y_scale = next((s for s in scales.values() if not s.is_horizontal), None)
    if x_scale is None or y_scale is None:
        raise ValueError("Chart needs both a horizontal and a vertical scale")
    return x_scale, y_scale


def draw_order(datasets: list[Dataset]) -> list[int]:
    """
    Indices of datasets with a trendline, in the order they should be drawn.

    Datasets with ``order == 0`` go last (on top); the others ascend by
    ``order``. Ties keep their host order.
    """
    indices = [i for i, d in enumerate(datasets) if d.trendline_config is not None]
    return sorted(indices, key=lambda i: (datasets[i].order == 0, datasets[i].order))


class TrendlineOverlay:
    """
    Fits and draws trendlines on a chart, one render pass at a time.

    For each dataset with a trendline config this:
    1. Resolves the trendline options against chart and built-in defaults
    2. Extracts clean points from the raw data
    3. Fits a linear or exponential curve
    4. Resolves the clipped pixel segment for the configured projection mode
    5. Strokes the line, then the optional fill and label

    Nothing is kept between calls to ``draw``.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the overlay.

        Args:
            settings: Built-in defaults (global settings when omitted)
        """
        self.settings = settings or get_settings()

    def draw(self, chart: Chart, surface: DrawingSurface) -> list[TrendlineResult]:
        """
        Draw every visible trendline of ``chart`` onto ``surface``.

        Returns:
            One TrendlineResult per dataset that was processed, in draw order
        """
        x_scale, default_y_scale = find_scales(chart.scales)
        adapter = RenderAdapter(surface)
        results = []

        for index in draw_order(chart.datasets):
            dataset = chart.datasets[index]

            if not (dataset.always_show_trendline or chart.is_dataset_visible(index)):
                logger.debug("Skipping hidden dataset", dataset=index)
                continue
            if len(dataset.data) <= 1:
                logger.debug("Skipping dataset with too little data", dataset=index, length=len(dataset.data))
                continue

            y_scale = chart.scales.get(dataset.y_axis_id, default_y_scale)
            results.append(
                self.draw_dataset(chart, index, x_scale, y_scale, adapter)
            )

        return results

    def draw_dataset(
        self,
        chart: Chart,
        index: int,
        x_scale: CoordinateMapper,
        y_scale: CoordinateMapper,
        adapter: RenderAdapter,
    ) -> TrendlineResult:
        """Fit, resolve and draw the trendline of a single dataset."""
        dataset = chart.datasets[index]
        style = resolve_trendline(dataset, chart.parsing, self.settings)

        fitter = self.fit(chart, dataset, style, x_scale)

        resolver = SegmentResolver(
            x_scale,
            y_scale,
            chart.chart_area,
            min_segment_px=self.settings.style.min_segment_px,
        )
        segment = resolver.resolve(fitter, style.mode)

        label_text = None
        if segment is not None:
            if style.label is not None:
                label_text = format_label_text(style.label, fitter)
            adapter.draw(segment, style, chart.chart_area.bottom, label_text)

        logger.debug(
            "Trendline processed",
            dataset=index,
            kind=style.kind,
            count=fitter.count,
            mode=style.mode.value,
            drawn=segment is not None,
        )
        return self._result(index, fitter, segment, label_text)

    def fit(
        self,
        chart: Chart,
        dataset: Dataset,
        style: ResolvedTrendline,
        x_scale: CoordinateMapper,
    ) -> Fitter:
        """Build a fresh fitter and feed it the dataset's points."""
        extractor = PointExtractor(
            x_key=style.x_axis_key,
            y_key=style.y_axis_key,
            is_time_axis=x_scale.is_time_axis,
            offset=style.offset,
            labels=chart.labels,
        )
        fitter = create_fitter(style.kind)
        extractor.feed(fitter, dataset.data)
        return fitter

    def _result(
        self,
        index: int,
        fitter: Fitter,
        segment: Segment | None,
        label_text: str | None,
    ) -> TrendlineResult:
        result = TrendlineResult(
            dataset_index=index,
            kind=fitter.kind,
            count=fitter.count,
            segment=segment,
            scale=fitter.scale(),
            label_text=label_text,
        )
        if isinstance(fitter, LinearFitter):
            result.intercept = fitter.intercept()
        elif isinstance(fitter, ExponentialFitter):
            result.coefficient = fitter.coefficient()
            result.correlation = fitter.correlation()
        return result
