"""Load chart descriptions from YAML or JSON files."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from trend_overlay.config import ParsingConfig
from trend_overlay.data.base import TIME_AXIS_TYPES, Chart, CoordinateMapper, Dataset
from trend_overlay.data.scales import LinearScale, TimeScale
from trend_overlay.geometry.models import ViewportRect

DEFAULT_CHART_AREA = {"left": 50, "right": 750, "top": 50, "bottom": 450}


class ChartFileError(ValueError):
    """A chart file is missing required parts or holds invalid values."""


def load_chart(path: Path | str) -> Chart:
    """
    Read a chart description.

    The file holds a mapping with ``datasets`` (host-shaped dataset dicts),
    ``scales`` (axis id -> ``{type, min, max, axis}``), and optionally
    ``chartArea``, ``labels`` and ``parsing``. JSON files are read as YAML.

    Raises:
        ChartFileError: If the file cannot be parsed or is incomplete
    """
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ChartFileError(f"{path}: not valid YAML/JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ChartFileError(f"{path}: expected a mapping at the top level")
    return chart_from_dict(raw)


def chart_from_dict(raw: dict[str, Any]) -> Chart:
    """Build a Chart from an already-parsed description."""
    area_raw = raw.get("chartArea") or raw.get("chart_area") or DEFAULT_CHART_AREA
    try:
        area = ViewportRect(**{k: float(area_raw[k]) for k in ("left", "right", "top", "bottom")})
    except (KeyError, TypeError, ValueError) as e:
        raise ChartFileError(f"Invalid chart area: {area_raw!r}") from e
    if not (area.left < area.right and area.top < area.bottom):
        raise ChartFileError(f"Chart area must have left < right and top < bottom: {area_raw!r}")

    scales_raw = raw.get("scales")
    if not isinstance(scales_raw, dict) or not scales_raw:
        raise ChartFileError("Chart needs a 'scales' mapping")
    scales = {axis_id: _build_scale(axis_id, options, area) for axis_id, options in scales_raw.items()}

    datasets_raw = raw.get("datasets") or []
    if not isinstance(datasets_raw, list):
        raise ChartFileError("'datasets' must be a list")
    for i, dataset in enumerate(datasets_raw):
        if not isinstance(dataset, dict):
            raise ChartFileError(f"Dataset {i} must be a mapping")
        if dataset.get("data") is not None and not isinstance(dataset["data"], list):
            raise ChartFileError(f"Dataset {i}: 'data' must be a list")

    parsing = None
    if isinstance(raw.get("parsing"), dict):
        try:
            parsing = ParsingConfig.model_validate(raw["parsing"])
        except ValidationError as e:
            raise ChartFileError(f"Invalid parsing options: {e}") from e

    return Chart(
        datasets=[Dataset.from_dict(d) for d in datasets_raw],
        scales=scales,
        chart_area=area,
        labels=list(raw.get("labels") or []),
        parsing=parsing,
    )


def _build_scale(axis_id: str, options: Any, area: ViewportRect) -> CoordinateMapper:
    if not isinstance(options, dict):
        raise ChartFileError(f"Scale {axis_id!r} must be a mapping")
    if "min" not in options or "max" not in options:
        raise ChartFileError(f"Scale {axis_id!r} needs 'min' and 'max'")

    axis = options.get("axis") or axis_id[0]
    horizontal = axis == "x"
    scale_type = options.get("type", "linear")

    try:
        if scale_type in TIME_AXIS_TYPES:
            if horizontal:
                return TimeScale(options["min"], options["max"], area.left, area.right, horizontal=True)
            return TimeScale(options["min"], options["max"], area.bottom, area.top, horizontal=False)
        return LinearScale.for_area(float(options["min"]), float(options["max"]), area, horizontal=horizontal)
    except (TypeError, ValueError) as e:
        raise ChartFileError(f"Invalid scale {axis_id!r}: {e}") from e
