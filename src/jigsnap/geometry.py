"""2-D geometry primitives shared by the detection and export code.

Polygons are plain sequences of ``(x, y)`` pairs, implicitly closed (no
repeated closing point) and of either winding.  :class:`Point` is a named
tuple, so ``Point(1, 2) == (1, 2)`` and plain tuples can be passed anywhere.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, Tuple

Polygon = Sequence[Sequence[float]]


class Point(NamedTuple):
    """Immutable 2-D point."""

    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


def to_points(polygon: Polygon) -> List[Point]:
    """Return ``polygon`` as a list of float :class:`Point` values."""

    return [Point(float(p[0]), float(p[1])) for p in polygon]


def signed_area(polygon: Polygon) -> float:
    """Shoelace area, positive for counter-clockwise loops in a y-up frame."""

    n = len(polygon)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        x0, y0 = polygon[i][0], polygon[i][1]
        x1, y1 = polygon[(i + 1) % n][0], polygon[(i + 1) % n][1]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def polygon_area(polygon: Polygon) -> float:
    """Unsigned shoelace area; 0 for fewer than three points."""

    return abs(signed_area(polygon))


def point_in_polygon(pt: Sequence[float], polygon: Polygon) -> bool:
    """Even-odd ray casting test.

    An edge is crossed when the point's y lies in the half-open range
    between its endpoints and the point is strictly left of the crossing.
    Points on left/bottom edges therefore test inside and points on
    right/top edges outside; only interior and exterior points have a
    guaranteed answer.
    """

    x, y = pt[0], pt[1]
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def bounding_box(polygon: Polygon) -> BoundingBox:
    """Return the axis-aligned bounding box of a non-empty point sequence."""

    if len(polygon) == 0:
        raise ValueError("bounding_box expects at least one point")
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def bbox_iou(a: Polygon, b: Polygon) -> float:
    """Intersection over union of the two polygons' bounding boxes.

    This is deliberately not the polygon IoU; it is only used to spot the
    same object reported by several detection strategies.  Boxes that merely
    touch do not overlap.  Identical boxes give 1.0 even when they enclose
    no area (a degenerate outline matched against itself).
    """

    box_a = bounding_box(a)
    box_b = bounding_box(b)
    if box_a == box_b:
        return 1.0

    inter_min_x = max(box_a.min_x, box_b.min_x)
    inter_min_y = max(box_a.min_y, box_b.min_y)
    inter_max_x = min(box_a.max_x, box_b.max_x)
    inter_max_y = min(box_a.max_y, box_b.max_y)
    if inter_min_x >= inter_max_x or inter_min_y >= inter_max_y:
        return 0.0

    inter = (inter_max_x - inter_min_x) * (inter_max_y - inter_min_y)
    union = box_a.area + box_b.area - inter
    if union <= 0:
        return 0.0
    return min(1.0, inter / union)


def perimeter(polygon: Polygon, closed: bool = True) -> float:
    """Length of the polyline, including the closing edge when ``closed``."""

    n = len(polygon)
    if n < 2:
        return 0.0
    total = 0.0
    last = n if closed else n - 1
    for i in range(last):
        p0 = polygon[i]
        p1 = polygon[(i + 1) % n]
        total += math.hypot(p1[0] - p0[0], p1[1] - p0[1])
    return total


def centroid(polygon: Polygon) -> Point:
    """Vertex mean of the polygon (not the area centroid)."""

    n = len(polygon)
    if n == 0:
        raise ValueError("centroid expects at least one point")
    return Point(sum(p[0] for p in polygon) / n, sum(p[1] for p in polygon) / n)


def translate(polygon: Polygon, dx: float, dy: float) -> List[Point]:
    return [Point(p[0] + dx, p[1] + dy) for p in polygon]


def segments_intersect(p1: Sequence[float], p2: Sequence[float],
                       q1: Sequence[float], q2: Sequence[float]) -> bool:
    """Return ``True`` if the closed segments ``p1p2`` and ``q1q2`` meet."""

    def orient(a, b, c) -> float:
        return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])

    def on_segment(a, b, c) -> bool:
        return (min(a[0], b[0]) <= c[0] <= max(a[0], b[0])
                and min(a[1], b[1]) <= c[1] <= max(a[1], b[1]))

    d1 = orient(q1, q2, p1)
    d2 = orient(q1, q2, p2)
    d3 = orient(p1, p2, q1)
    d4 = orient(p1, p2, q2)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and \
       ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)):
        return True
    if d1 == 0 and on_segment(q1, q2, p1):
        return True
    if d2 == 0 and on_segment(q1, q2, p2):
        return True
    if d3 == 0 and on_segment(p1, p2, q1):
        return True
    if d4 == 0 and on_segment(p1, p2, q2):
        return True
    return False


def is_simple(polygon: Polygon) -> bool:
    """Return ``True`` if no two non-adjacent edges of the loop intersect."""

    n = len(polygon)
    if n < 3:
        return False
    edges: List[Tuple[Sequence[float], Sequence[float]]] = [
        (polygon[i], polygon[(i + 1) % n]) for i in range(n)
    ]
    for i in range(n):
        for j in range(i + 1, n):
            if j == i + 1 or (i == 0 and j == n - 1):
                continue
            if segments_intersect(edges[i][0], edges[i][1], edges[j][0], edges[j][1]):
                return False
    return True


__all__ = [
    'Point',
    'Polygon',
    'BoundingBox',
    'to_points',
    'signed_area',
    'polygon_area',
    'point_in_polygon',
    'bounding_box',
    'bbox_iou',
    'perimeter',
    'centroid',
    'translate',
    'segments_intersect',
    'is_simple',
]
