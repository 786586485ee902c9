"""Drawing surface interface and an in-memory recording implementation."""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from trend_overlay.geometry.models import Point, Segment


@dataclass(frozen=True)
class LinearGradient:
    """A two-or-more stop gradient along a pixel vector."""

    x1: float
    y1: float
    x2: float
    y2: float
    stops: tuple[tuple[float, str], ...]


StrokeStyle = str | LinearGradient


class DrawingSurface(ABC):
    """
    Abstract base class for the paint target of the overlay.

    The overlay computes every numeric parameter; a surface only paints.
    """

    @abstractmethod
    def create_linear_gradient(
        self,
        start: Point,
        end: Point,
        stops: Sequence[tuple[float, str]],
    ) -> StrokeStyle:
        """
        Build a gradient running from ``start`` to ``end``.

        Raises:
            ValueError: If the surface cannot build the gradient
        """
        pass

    @abstractmethod
    def stroke_line(
        self,
        segment: Segment,
        *,
        width: float,
        dash: Sequence[float],
        style: StrokeStyle,
    ) -> None:
        """Stroke a straight line."""
        pass

    @abstractmethod
    def fill_polygon(self, points: Sequence[Point], color: str) -> None:
        """Fill a closed polygon."""
        pass

    @abstractmethod
    def fill_text(
        self,
        text: str,
        *,
        origin: Point,
        angle: float,
        dx: float,
        dy: float,
        font: str,
        color: str,
    ) -> None:
        """
        Draw text rotated by ``angle`` radians about ``origin``.

        ``dx``/``dy`` position the text in the rotated frame.
        """
        pass

    @abstractmethod
    def measure_text(self, text: str, font: str) -> float:
        """Rendered width of ``text`` in pixels."""
        pass


@dataclass
class DrawCommand:
    """One recorded call on a RecordingSurface."""

    op: str
    params: dict[str, Any] = field(default_factory=dict)


class RecordingSurface(DrawingSurface):
    """
    Surface that records draw calls instead of painting.

    Used by the CLI to report what would be drawn, and by tests. Text width
    is estimated from the font size.
    """

    CHAR_WIDTH_RATIO = 0.6

    def __init__(self):
        self.commands: list[DrawCommand] = []

    def ops(self, op: str) -> list[DrawCommand]:
        return [c for c in self.commands if c.op == op]

    def create_linear_gradient(self, start, end, stops):
        if not (start.is_finite and end.is_finite):
            raise ValueError("Gradient endpoints must be finite")
        if math.hypot(end.x - start.x, end.y - start.y) == 0:
            raise ValueError("Gradient vector has zero length")
        return LinearGradient(start.x, start.y, end.x, end.y, tuple(stops))

    def stroke_line(self, segment, *, width, dash, style):
        self.commands.append(
            DrawCommand("stroke", {"segment": segment, "width": width, "dash": tuple(dash), "style": style})
        )

    def fill_polygon(self, points, color):
        self.commands.append(DrawCommand("fill", {"points": tuple(points), "color": color}))

    def fill_text(self, text, *, origin, angle, dx, dy, font, color):
        self.commands.append(
            DrawCommand(
                "text",
                {"text": text, "origin": origin, "angle": angle, "dx": dx, "dy": dy, "font": font, "color": color},
            )
        )

    def measure_text(self, text, font):
        return len(text) * _font_size(font) * self.CHAR_WIDTH_RATIO


def _font_size(font: str) -> float:
    """Pixel size from a ``<size>px <family>`` shorthand; 12 when absent."""
    head = font.split(" ", 1)[0]
    if head.endswith("px"):
        try:
            return float(head[:-2])
        except ValueError:
            pass
    return 12.0
