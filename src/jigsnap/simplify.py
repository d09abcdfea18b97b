"""Ramer-Douglas-Peucker simplification of traced outlines."""

from __future__ import annotations

import math
from typing import List, Sequence

from .errors import GeometryInputError
from .geometry import Point, to_points


def perpendicular_distance(pt: Sequence[float], start: Sequence[float],
                           end: Sequence[float]) -> float:
    """Distance from ``pt`` to the line through ``start`` and ``end``.

    A zero-length segment degrades to the Euclidean distance to ``start``.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if dx == 0 and dy == 0:
        return math.hypot(pt[0] - start[0], pt[1] - start[1])
    cross = abs(dy * pt[0] - dx * pt[1] + end[0] * start[1] - end[1] * start[0])
    return cross / math.hypot(dx, dy)


def rdp(points: Sequence[Sequence[float]], epsilon: float) -> List[Point]:
    """Simplify an open polyline, keeping both endpoints.

    Equivalent to the textbook recursion (split at the farthest point when
    it lies more than ``epsilon`` from the chord, otherwise collapse to the
    chord) but driven by an explicit stack, so long traced contours do not
    hit the interpreter's recursion limit.  Ties pick the first farthest
    point.  The result may have fewer than three points.
    """
    pts = to_points(points)
    n = len(pts)
    if n <= 2:
        return pts

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        max_dist = 0.0
        max_idx = first
        for i in range(first + 1, last):
            d = perpendicular_distance(pts[i], pts[first], pts[last])
            if d > max_dist:
                max_dist = d
                max_idx = i
        if max_dist > epsilon:
            keep[max_idx] = True
            stack.append((max_idx, last))
            stack.append((first, max_idx))
    return [p for p, k in zip(pts, keep) if k]


def simplify(polygon: Sequence[Sequence[float]], epsilon: float) -> List[Point]:
    """Simplify a closed polygon with tolerance ``epsilon``.

    The loop is closed by repeating the first vertex, simplified as a
    polyline, and the repeated vertex dropped again.  Polygons of three or
    fewer points come back unchanged, and so does any polygon whose
    simplification would leave fewer than three points.
    """
    if epsilon < 0:
        raise GeometryInputError(f"epsilon must be non-negative, got {epsilon}")
    pts = to_points(polygon)
    if len(pts) <= 3:
        return pts

    closed = pts + [pts[0]]
    result = rdp(closed, epsilon)[:-1]
    if len(result) < 3:
        return pts
    return result


__all__ = ['perpendicular_distance', 'rdp', 'simplify']
