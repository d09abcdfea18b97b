"""Application-facing export entry points.

Both functions take the final object outline in image pixels (already
simplified and offset as the user chose), the jig parameters and the scale,
and return in-memory results.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .calibration import compute_square_jig_size
from .config import JigConfig
from .errors import GeometryInputError
from .flatpath import FlatPath, build_flat_path
from .geometry import Point, bounding_box, polygon_area
from .io.stl import DEFAULT_HEADER, stl_bytes
from .mesh import JigMesh, build_jig_mesh
from .triangulator import AREA_TOLERANCE

logger = logging.getLogger(__name__)


def _check_inputs(polygon: Sequence[Sequence[float]], pixels_per_unit: float) -> None:
    if len(polygon) < 3:
        raise GeometryInputError(f"outline needs at least 3 points, got {len(polygon)}")
    if polygon_area(polygon) <= AREA_TOLERANCE:
        raise GeometryInputError("outline encloses no area",
                                 {'area': polygon_area(polygon)})
    if pixels_per_unit <= 0:
        raise GeometryInputError(f"pixels_per_unit must be positive, got {pixels_per_unit}")


def export_flat_path(polygon: Sequence[Sequence[float]],
                     jig_config: Optional[JigConfig] = None,
                     pixels_per_unit: float = 1.0) -> FlatPath:
    """Describe the laser-cut jig for ``polygon``.

    Render the result with :func:`jigsnap.io.svg.flat_path_to_svg` or
    :func:`jigsnap.io.dxf.flat_path_to_dxf`.
    """
    if jig_config is None:
        jig_config = JigConfig()
    _check_inputs(polygon, pixels_per_unit)
    flat = build_flat_path(polygon, pixels_per_unit, jig_config.padding_mm)
    logger.info("flat jig %.1f x %.1f mm, %d cutout points",
                flat.width, flat.height, len(flat.cutout))
    return flat


def jig_outline(size: float):
    """Square outline of side ``size`` centred on the origin, counter-clockwise."""
    half = size / 2.0
    return [Point(-half, -half), Point(half, -half), Point(half, half), Point(-half, half)]


def solid_hole(polygon: Sequence[Sequence[float]], pixels_per_unit: float):
    """Convert a pixel outline into the solid's millimetre frame.

    The outline is recentred on its bounding box, the same box the jig
    is sized from, and its y axis flipped so the cavity is the right way
    round when the part is viewed from above.
    """
    center = bounding_box(polygon).center
    return [Point((p[0] - center.x) / pixels_per_unit,
                  -(p[1] - center.y) / pixels_per_unit) for p in polygon]


def build_solid(polygon: Sequence[Sequence[float]],
                jig_config: Optional[JigConfig] = None,
                pixels_per_unit: float = 1.0) -> JigMesh:
    """Build the jig solid for ``polygon`` without serializing it."""
    if jig_config is None:
        jig_config = JigConfig()
    _check_inputs(polygon, pixels_per_unit)

    size = jig_config.jig_size_mm
    if size is None:
        size = compute_square_jig_size(bounding_box(polygon), pixels_per_unit,
                                       jig_config.padding_mm,
                                       jig_config.rounding_increment_mm)

    mesh = build_jig_mesh(jig_outline(size), solid_hole(polygon, pixels_per_unit),
                          jig_config.thickness_mm, jig_config.cavity_depth_mm)
    logger.info("solid jig %.1f mm square, %.1f mm thick, %s, %d triangles",
                size, jig_config.thickness_mm,
                'through-cut' if jig_config.through_cut else
                f'{jig_config.cavity_depth_mm:g} mm pocket',
                len(mesh))
    return mesh


def export_solid(polygon: Sequence[Sequence[float]],
                 jig_config: Optional[JigConfig] = None,
                 pixels_per_unit: float = 1.0,
                 name: str = DEFAULT_HEADER) -> bytes:
    """Return the binary STL of the jig solid for ``polygon``.

    Raises:
        GeometryInputError: for a degenerate outline or scale.
        MeshGenerationError: when the solid cannot be built; no partial
            buffer is returned.
    """
    return stl_bytes(build_solid(polygon, jig_config, pixels_per_unit), name=name)


__all__ = ['export_flat_path', 'export_solid', 'build_solid', 'jig_outline', 'solid_hole']
