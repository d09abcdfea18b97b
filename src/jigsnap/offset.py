"""Grow or shrink a closed polygon by moving each vertex along its normal.

Each vertex moves by ``distance`` along the normalised average of the unit
normals of its two adjacent edges.  This is an approximation of a true
polygon offset: corners move by exactly ``distance`` rather than by the
mitre length, and a large inward offset on a concave outline can fold the
result over itself.  Such results are not repaired here; callers can test
them with :func:`offset_is_simple` and retry with a smaller distance.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .errors import GeometryInputError
from .geometry import Point, is_simple, signed_area


def _edge_normal(p0: Sequence[float], p1: Sequence[float]) -> Tuple[float, float]:
    dx = p1[0] - p0[0]
    dy = p1[1] - p0[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return 0.0, 0.0
    return dy / length, -dx / length


def offset(polygon: Sequence[Sequence[float]], distance: float):
    """Offset ``polygon`` by ``distance`` (positive grows, negative shrinks).

    The vertex count and order are preserved.  ``distance == 0`` returns
    ``polygon`` itself.  Winding does not matter: the edge normals are
    flipped for clockwise loops so that positive distances always grow.
    """
    if distance == 0:
        return polygon
    n = len(polygon)
    if n < 3:
        raise GeometryInputError(f"offset needs at least 3 points, got {n}")

    # (dy, -dx) points outward for a counter-clockwise loop
    sign = 1.0 if signed_area(polygon) >= 0 else -1.0

    result: List[Point] = []
    for i in range(n):
        prev = polygon[i - 1]
        curr = polygon[i]
        nxt = polygon[(i + 1) % n]

        n_in = _edge_normal(prev, curr)
        n_out = _edge_normal(curr, nxt)
        nx = n_in[0] + n_out[0]
        ny = n_in[1] + n_out[1]
        length = math.hypot(nx, ny)
        if length == 0:
            nx, ny = 0.0, 0.0
        else:
            nx, ny = nx / length, ny / length

        result.append(Point(curr[0] + sign * nx * distance,
                            curr[1] + sign * ny * distance))
    return result


def offset_is_simple(polygon: Sequence[Sequence[float]]) -> bool:
    """Return ``True`` if an offset result is still a simple polygon."""
    return is_simple(polygon)


__all__ = ['offset', 'offset_is_simple']
