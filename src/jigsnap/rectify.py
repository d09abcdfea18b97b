"""Corner bookkeeping for perspective rectification.

Only the coordinate math lives here: ordering the four detected corners of
a reference sheet and pairing them with destination corners.  Solving the
transform and resampling pixels belongs to the image primitives
(:mod:`jigsnap.vision`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import GeometryInputError
from .geometry import Point, to_points

Quad = Tuple[Point, Point, Point, Point]

#: Fraction of the vertical extent below which two corners share a row.
ROW_TOLERANCE_FRACTION = 0.02


def _angular_order(pts: Sequence[Point]) -> Quad:
    cx = sum(p.x for p in pts) / 4.0
    cy = sum(p.y for p in pts) / 4.0
    # image frame (y down): increasing angle runs TL, TR, BR, BL
    ring = sorted(pts, key=lambda p: (math.atan2(p.y - cy, p.x - cx), p.x, p.y))
    start = min(range(4), key=lambda i: (ring[i].x + ring[i].y, ring[i].y))
    ring = ring[start:] + ring[:start]
    return ring[0], ring[1], ring[2], ring[3]


def order_quad_corners(points: Sequence[Sequence[float]],
                       y_tolerance: float | None = None) -> Quad:
    """Return the four corners as ``(top_left, top_right, bottom_right, bottom_left)``.

    Corners are split into a top and a bottom row by y, then each row is
    ordered by x.  When the second and third lowest y values are within
    ``y_tolerance`` of each other the row split is ambiguous (a sheet
    rotated by about 45 degrees) and the corners are instead ordered by
    angle around their centroid, starting from the corner with the smallest
    ``x + y``.  The default tolerance is 2% of the vertical extent.
    """
    if len(points) != 4:
        raise GeometryInputError(f"expected 4 corner points, got {len(points)}")
    pts = to_points(points)

    by_y = sorted(pts, key=lambda p: (p.y, p.x))
    if y_tolerance is None:
        y_tolerance = ROW_TOLERANCE_FRACTION * (by_y[-1].y - by_y[0].y)

    if by_y[2].y - by_y[1].y <= y_tolerance:
        return _angular_order(pts)

    top = sorted(by_y[:2], key=lambda p: (p.x, p.y))
    bottom = sorted(by_y[2:], key=lambda p: (p.x, p.y))
    return top[0], top[1], bottom[1], bottom[0]


def destination_corners(width: float, height: float) -> Quad:
    """Destination rectangle paired corner-for-corner with :func:`order_quad_corners`."""
    if width <= 0 or height <= 0:
        raise GeometryInputError(f"destination size must be positive, got {width}x{height}")
    return (Point(0.0, 0.0), Point(float(width), 0.0),
            Point(float(width), float(height)), Point(0.0, float(height)))


@dataclass(frozen=True)
class ReferenceQuad:
    """Ordered corners of a detected rectangular reference object.

    Attributes:
        corners: ``(TL, TR, BR, BL)`` in image pixels.
        width: Pixel width (mean of the top and bottom edge lengths).
        height: Pixel height (mean of the left and right edge lengths).
    """
    corners: Quad
    width: float
    height: float

    @property
    def long_side(self) -> float:
        return max(self.width, self.height)

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)


def _dist(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def reference_quad_from_corners(points: Sequence[Sequence[float]]) -> ReferenceQuad:
    """Build a :class:`ReferenceQuad` from four unordered corners."""
    tl, tr, br, bl = order_quad_corners(points)
    width = (_dist(tl, tr) + _dist(bl, br)) / 2.0
    height = (_dist(tl, bl) + _dist(tr, br)) / 2.0
    if width <= 0 or height <= 0:
        raise GeometryInputError("reference corners are degenerate",
                                 {'width': width, 'height': height})
    return ReferenceQuad(corners=(tl, tr, br, bl), width=width, height=height)


def rectified_size(quad: ReferenceQuad, max_dim: int = 2048) -> Tuple[int, int]:
    """Output raster size for warping ``quad`` flat, capped at ``max_dim``."""
    scale = min(1.0, max_dim / quad.long_side)
    return max(1, round(quad.width * scale)), max(1, round(quad.height * scale))


__all__ = [
    'Quad',
    'ReferenceQuad',
    'order_quad_corners',
    'destination_corners',
    'reference_quad_from_corners',
    'rectified_size',
]
