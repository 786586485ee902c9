"""Liang-Barsky clipping of pixel segments against the chart area."""

from trend_overlay.geometry.models import Segment, ViewportRect


def clip_segment(segment: Segment, viewport: ViewportRect) -> Segment | None:
    """
    Clip a segment to an axis-aligned rectangle using Liang-Barsky.

    The segment is parametrised as ``P(t) = P1 + t * (P2 - P1)`` for
    ``t`` in [0, 1]. Each edge narrows the visible parameter interval
    ``[t0, t1]``; an empty interval means the segment misses the rectangle.

    Args:
        segment: Segment in pixel coordinates
        viewport: Clip rectangle; y grows downward (``top < bottom``)

    Returns:
        The visible part of the segment, or None if nothing is visible or
        any input coordinate is not finite
    """
    if not segment.is_finite:
        return None

    x1, y1 = segment.x1, segment.y1
    dx, dy = segment.dx, segment.dy
    t0, t1 = 0.0, 1.0

    # Edges in order: left, right, top, bottom.
    p = (-dx, dx, -dy, dy)
    q = (
        x1 - viewport.left,
        viewport.right - x1,
        y1 - viewport.top,
        viewport.bottom - y1,
    )

    for p_i, q_i in zip(p, q):
        if p_i == 0:
            # Parallel to this edge: either fully outside it or unaffected.
            if q_i < 0:
                return None
            continue

        r = q_i / p_i
        if p_i < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    if t0 > t1:
        return None

    return Segment(
        x1=x1 + t0 * dx,
        y1=y1 + t0 * dy,
        x2=x1 + t1 * dx,
        y2=y1 + t1 * dy,
    )
