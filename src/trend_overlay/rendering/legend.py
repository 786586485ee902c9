"""Legend entries for trendlines."""

from dataclasses import dataclass, field
from typing import Any, Sequence

from trend_overlay.config import Settings, get_settings
from trend_overlay.data.base import Chart, Dataset
from trend_overlay.rendering.options import LegendOptions


@dataclass(frozen=True)
class LegendEntry:
    """One legend item, in the shape the host legend renders."""

    text: str
    stroke_style: str
    fill_style: str = "transparent"
    line_cap: str = "butt"
    line_dash: tuple[float, ...] = field(default_factory=tuple)
    line_width: float = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to the host's camelCase legend item."""
        return {
            "text": self.text,
            "strokeStyle": self.stroke_style,
            "fillStyle": self.fill_style,
            "lineCap": self.line_cap,
            "lineDash": list(self.line_dash),
            "lineWidth": self.line_width,
        }


def legend_entry_for(dataset: Dataset, settings: Settings | None = None) -> LegendEntry | None:
    """
    Build the legend entry a dataset's trendline asks for.

    Returns:
        LegendEntry, or None when the dataset has no trendline, no legend
        block, or a legend block with ``display: false``
    """
    raw = dataset.legend_config
    if not raw or raw.get("legend") is None:
        return None

    legend = LegendOptions.model_validate(raw["legend"])
    if not legend.display:
        return None

    settings = settings or get_settings()
    if legend.line_width is not None:
        line_width = legend.line_width
    elif legend.width is not None:
        line_width = legend.width
    else:
        line_width = 1

    return LegendEntry(
        text=legend.text or dataset.label or "Trendline",
        stroke_style=(
            legend.stroke_style
            or legend.color
            or dataset.border_color
            or settings.style.default_color
        ),
        fill_style=legend.fill_style or "transparent",
        line_cap=legend.line_cap or "butt",
        line_dash=tuple(legend.line_dash or ()),
        line_width=line_width,
    )


def augment_legend(
    entries: Sequence[LegendEntry],
    dataset: Dataset,
    settings: Settings | None = None,
) -> list[LegendEntry]:
    """
    Return ``entries`` plus the dataset's trendline entry, if it has one.

    The input is never modified; existing entries are kept in order.
    """
    augmented = list(entries)
    entry = legend_entry_for(dataset, settings)
    if entry is not None:
        augmented.append(entry)
    return augmented


def build_legend(
    chart: Chart,
    entries: Sequence[LegendEntry] = (),
    settings: Settings | None = None,
) -> list[LegendEntry]:
    """Append the trendline entries of every dataset in the chart to ``entries``."""
    legend = list(entries)
    for dataset in chart.datasets:
        legend = augment_legend(legend, dataset, settings)
    return legend
