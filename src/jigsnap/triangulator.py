"""Ear-clipping triangulation of jig faces.

A jig face is either a single loop (the bottom face, a pocket floor) or an
outer loop with exactly one hole cut out of it (the top face).  Vertices
are handed to ``mapbox-earcut`` as one flat array: the outer ring first,
then the hole, with the hole's start index marking where the outer ring
ends.

Loops that cannot bound a face (fewer than three distinct vertices, or no
enclosed area) raise :class:`~jigsnap.errors.DegenerateGeometryError`
instead of being skipped, and so does a triangulation that does not cover
the face.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate jig faces"
    ) from exc

from .errors import DegenerateGeometryError
from .geometry import signed_area

Point2D = Tuple[float, float]
Triangle2D = Tuple[Point2D, Point2D, Point2D]

#: Consecutive vertices closer than this are merged.
VERTEX_TOLERANCE = 1e-9

#: Loops enclosing no more than this area are degenerate.
AREA_TOLERANCE = 1e-9

# relative mismatch allowed between the face area and the triangles' area
_COVERAGE_TOLERANCE = 1e-6


def _near(p1: Point2D, p2: Point2D) -> bool:
    return abs(p1[0] - p2[0]) <= VERTEX_TOLERANCE and abs(p1[1] - p2[1]) <= VERTEX_TOLERANCE


def clean_loop(points: Sequence[Sequence[float]], *, want_ccw: bool) -> List[Point2D]:
    """Return ``points`` as a face boundary in the requested winding.

    Repeated vertices and an explicit closing vertex are dropped.

    Raises:
        DegenerateGeometryError: if fewer than three distinct vertices
            remain or the loop encloses no area.
    """
    loop: List[Point2D] = []
    for pt in points:
        xy = (float(pt[0]), float(pt[1]))
        if loop and _near(loop[-1], xy):
            continue
        loop.append(xy)
    if len(loop) > 1 and _near(loop[0], loop[-1]):
        loop.pop()

    if len(loop) < 3:
        raise DegenerateGeometryError("loop needs at least 3 distinct points",
                                      {'points': len(loop)})
    area = signed_area(loop)
    if abs(area) <= AREA_TOLERANCE:
        raise DegenerateGeometryError("loop encloses no area", {'area': area})

    if (area > 0) != want_ccw:
        loop.reverse()
    return loop


def triangulate_face(outer: Sequence[Sequence[float]],
                     hole: Optional[Sequence[Sequence[float]]] = None) -> List[Triangle2D]:
    """Triangulate ``outer``, minus ``hole`` when one is given.

    The returned triangles are in whatever winding earcut produced; callers
    lifting them into 3-D orient each one against the face normal.

    Raises:
        DegenerateGeometryError: for a degenerate loop, or when the
            triangles do not cover the face (e.g. a self-intersecting loop).
    """
    vertices = clean_loop(outer, want_ccw=True)
    expected = signed_area(vertices)
    hole_start = len(vertices)
    ring_ends = [hole_start]

    if hole is not None:
        hole_loop = clean_loop(hole, want_ccw=False)
        expected += signed_area(hole_loop)
        vertices.extend(hole_loop)
        ring_ends.append(len(vertices))

    indices = _earcut.triangulate_float64(np.asarray(vertices, dtype=np.float64),
                                          np.asarray(ring_ends, dtype=np.uint32))
    triangles = [(vertices[indices[i]], vertices[indices[i + 1]], vertices[indices[i + 2]])
                 for i in range(0, len(indices), 3)]

    covered = sum(abs(signed_area(tri)) for tri in triangles)
    if not triangles or abs(covered - expected) > _COVERAGE_TOLERANCE * expected:
        raise DegenerateGeometryError(
            "triangulation does not cover the face",
            {'triangles': len(triangles), 'face_area': expected, 'covered_area': covered})
    return triangles


__all__ = ['AREA_TOLERANCE', 'clean_loop', 'triangulate_face']
