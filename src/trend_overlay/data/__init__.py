"""Host data access: axis mappers, datasets and point extraction."""

from trend_overlay.data.base import Chart, CoordinateMapper, Dataset
from trend_overlay.data.extractor import DataShape, PointExtractor
from trend_overlay.data.scales import LinearScale, TimeScale

__all__ = [
    "Chart",
    "CoordinateMapper",
    "Dataset",
    "DataShape",
    "PointExtractor",
    "LinearScale",
    "TimeScale",
]
