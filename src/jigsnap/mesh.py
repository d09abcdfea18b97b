"""Construction of the extruded jig solid as a triangle soup.

The solid is a prism over an outer outline (normally a square) with the
object outline cut into its top face, either all the way through or as a
blind pocket.  Triangles carry explicit outward normals so they can be
written straight to binary STL by :mod:`jigsnap.io.stl`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import DegenerateGeometryError, MeshGenerationError
from .geometry import bounding_box
from .triangulator import clean_loop, triangulate_face

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

UP: Vec3 = (0.0, 0.0, 1.0)
DOWN: Vec3 = (0.0, 0.0, -1.0)

_DEGENERATE_TOL = 1e-12


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    nx = ay * bz - az * by
    ny = az * bx - ax * bz
    nz = ax * by - ay * bx
    length = math.sqrt(nx * nx + ny * ny + nz * nz)
    if length <= _DEGENERATE_TOL:
        return None
    return (nx / length, ny / length, nz / length)


def orient_triangle(v0: Vec3, v1: Vec3, v2: Vec3, preferred_normal: Vec3) -> Tuple[Vec3, Vec3, Vec3]:
    """Ensure triangle winding aligns with ``preferred_normal``."""

    current = triangle_normal(v0, v1, v2)
    if current is None:
        return v0, v1, v2
    dot = current[0] * preferred_normal[0] + current[1] * preferred_normal[1] + current[2] * preferred_normal[2]
    if dot < 0:
        return v0, v2, v1
    return v0, v1, v2


@dataclass
class JigMesh:
    """Triangles of a jig solid, grouped by the face they belong to."""

    bottom: List[Triangle] = field(default_factory=list)
    top: List[Triangle] = field(default_factory=list)
    outer_walls: List[Triangle] = field(default_factory=list)
    hole_walls: List[Triangle] = field(default_factory=list)
    floor: List[Triangle] = field(default_factory=list)

    @property
    def triangles(self) -> List[Triangle]:
        return self.bottom + self.top + self.outer_walls + self.hole_walls + self.floor

    def __len__(self) -> int:
        return (len(self.bottom) + len(self.top) + len(self.outer_walls)
                + len(self.hole_walls) + len(self.floor))


def _flat_face(triangles: Iterable[Sequence[Sequence[float]]], z: float,
               normal: Vec3) -> List[Triangle]:
    face = []
    for p0, p1, p2 in triangles:
        v0, v1, v2 = orient_triangle((p0[0], p0[1], z), (p1[0], p1[1], z),
                                     (p2[0], p2[1], z), normal)
        face.append(Triangle(normal=normal, v0=v0, v1=v1, v2=v2))
    return face


def _quad(v0: Vec3, v1: Vec3, v2: Vec3, v3: Vec3, normal: Vec3) -> List[Triangle]:
    return [Triangle(normal=normal, v0=v0, v1=v1, v2=v2),
            Triangle(normal=normal, v0=v0, v1=v2, v2=v3)]


def _rotated_edge_normal(p0: Sequence[float], p1: Sequence[float], sign: float) -> Vec3:
    dx = p1[0] - p0[0]
    dy = p1[1] - p0[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return (0.0, 0.0, 1.0)
    return (sign * dy / length, -sign * dx / length, 0.0)


def _outer_walls(loop: Sequence[Sequence[float]], height: float) -> List[Triangle]:
    # loop is counter-clockwise, so (dy, -dx) faces away from the solid
    walls: List[Triangle] = []
    n = len(loop)
    for i in range(n):
        p1 = loop[i]
        p2 = loop[(i + 1) % n]
        normal = _rotated_edge_normal(p1, p2, 1.0)
        walls.extend(_quad((p1[0], p1[1], 0.0), (p2[0], p2[1], 0.0),
                           (p2[0], p2[1], height), (p1[0], p1[1], height),
                           normal))
    return walls


def _hole_walls(loop: Sequence[Sequence[float]], z_bottom: float,
                z_top: float) -> List[Triangle]:
    # loop is counter-clockwise, so (-dy, dx) faces into the cavity
    walls: List[Triangle] = []
    n = len(loop)
    for i in range(n):
        p1 = loop[i]
        p2 = loop[(i + 1) % n]
        normal = _rotated_edge_normal(p1, p2, -1.0)
        walls.extend(_quad((p1[0], p1[1], z_bottom), (p1[0], p1[1], z_top),
                           (p2[0], p2[1], z_top), (p2[0], p2[1], z_bottom),
                           normal))
    return walls


def _loop(points: Sequence[Sequence[float]], label: str):
    try:
        return clean_loop(points, want_ccw=True)
    except DegenerateGeometryError as exc:
        raise MeshGenerationError(f"{label} outline is degenerate: {exc}", exc.details) from exc


def _face(outer, hole, label: str):
    try:
        return triangulate_face(outer, hole)
    except DegenerateGeometryError as exc:
        raise MeshGenerationError(f"{label} face: {exc}", exc.details) from exc


def build_jig_mesh(outer: Sequence[Sequence[float]],
                   hole: Sequence[Sequence[float]],
                   height: float,
                   depth: Optional[float] = None) -> JigMesh:
    """Extrude ``outer`` to ``height`` with ``hole`` cut into the top face.

    Args:
        outer: Outline of the jig body in millimetres.
        hole: Object outline in the same frame, strictly inside ``outer``.
        height: Extrusion height.
        depth: Cavity depth from the top face; ``None`` or ``height`` cuts
            through.

    The bottom face always spans the full outer outline.  Hole walls run
    from ``height - depth`` to ``height`` and a pocket additionally gets a
    floor at ``height - depth``.

    Raises:
        MeshGenerationError: for a hole with fewer than three points or no
            area, bad heights, a hole not inside the outline or a face the
            triangles do not cover.
    """
    if height <= 0:
        raise MeshGenerationError(f"extrusion height must be positive, got {height}")
    if depth is None:
        depth = height
    if not 0 < depth <= height:
        raise MeshGenerationError(f"cavity depth must be in (0, {height}], got {depth}")

    outer_loop = _loop(outer, 'outer')
    hole_loop = _loop(hole, 'hole')

    outer_box = bounding_box(outer_loop)
    hole_box = bounding_box(hole_loop)
    if not (outer_box.min_x < hole_box.min_x and hole_box.max_x < outer_box.max_x
            and outer_box.min_y < hole_box.min_y and hole_box.max_y < outer_box.max_y):
        raise MeshGenerationError("hole does not fit inside the outer outline",
                                  {'outer': outer_box, 'hole': hole_box})

    mesh = JigMesh()
    mesh.bottom = _flat_face(_face(outer_loop, None, 'bottom'), 0.0, DOWN)
    mesh.top = _flat_face(_face(outer_loop, hole_loop, 'top'), height, UP)
    mesh.outer_walls = _outer_walls(outer_loop, height)

    z_floor = height - depth
    mesh.hole_walls = _hole_walls(hole_loop, z_floor, height)
    if depth < height:
        mesh.floor = _flat_face(_face(hole_loop, None, 'pocket floor'), z_floor, UP)

    logger.debug("jig mesh: %d bottom, %d top, %d outer wall, %d hole wall, %d floor triangles",
                 len(mesh.bottom), len(mesh.top), len(mesh.outer_walls),
                 len(mesh.hole_walls), len(mesh.floor))
    return mesh


__all__ = [
    'Vec3',
    'Triangle',
    'JigMesh',
    'triangle_normal',
    'orient_triangle',
    'build_jig_mesh',
]
