"""Geometry of the flat (laser cut) jig drawing.

The drawing is described in millimetres, centred on the origin, with y
pointing down like the source photograph:

* a border rectangle the size of the object plus padding on every side,
* an L-shaped alignment mark in each corner,
* the object cutout, recentred on the centre of its bounding box,
* a fixed length scale bar with its label near the bottom left.

Renderers in :mod:`jigsnap.io.svg` and :mod:`jigsnap.io.dxf` turn this
description into files.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import GeometryInputError
from .geometry import Point, bounding_box

Segment = Tuple[Point, Point]

CROSSHAIR_SIZE_MM = 5.0
CROSSHAIR_INSET_MM = 2.0
SCALE_BAR_LENGTH_MM = 10.0
SCALE_BAR_MARGIN_MM = 5.0


@dataclass(frozen=True)
class FlatPath:
    """Vector description of a flat jig.

    Attributes:
        width: Border width in mm.
        height: Border height in mm.
        border: Border corners, ``(TL, TR, BR, BL)``.
        crosshairs: Four corner marks, each a pair of segments.
        cutout: Closed cutout polygon (no repeated closing point).
        scale_bar: Segment of length ``scale_bar_length``.
        scale_bar_length: Length of the scale bar in mm.
        scale_label: Text printed above the scale bar.
    """
    width: float
    height: float
    border: Tuple[Point, Point, Point, Point]
    crosshairs: Tuple[Tuple[Segment, Segment], ...]
    cutout: Tuple[Point, ...]
    scale_bar: Segment
    scale_bar_length: float = SCALE_BAR_LENGTH_MM
    scale_label: str = '10mm'

    @property
    def origin(self) -> Point:
        """Top-left corner of the border."""
        return self.border[0]


def _crosshairs(left: float, top: float, width: float, height: float):
    s = CROSSHAIR_SIZE_MM
    o = CROSSHAIR_INSET_MM
    right = left + width
    bottom = top + height
    return (
        # top-left
        ((Point(left + o, top + o + s), Point(left + o, top + o)),
         (Point(left + o, top + o), Point(left + o + s, top + o))),
        # top-right
        ((Point(right - o - s, top + o), Point(right - o, top + o)),
         (Point(right - o, top + o), Point(right - o, top + o + s))),
        # bottom-right
        ((Point(right - o, bottom - o - s), Point(right - o, bottom - o)),
         (Point(right - o - s, bottom - o), Point(right - o, bottom - o))),
        # bottom-left
        ((Point(left + o, bottom - o), Point(left + o + s, bottom - o)),
         (Point(left + o, bottom - o - s), Point(left + o, bottom - o))),
    )


def build_flat_path(polygon: Sequence[Sequence[float]], pixels_per_unit: float,
                    padding: float) -> FlatPath:
    """Describe the flat jig for a pixel-space outline.

    Args:
        polygon: Object outline in image pixels.
        pixels_per_unit: Image pixels per millimetre.
        padding: Border padding on each side, in millimetres.
    """
    if len(polygon) < 3:
        raise GeometryInputError(f"cutout needs at least 3 points, got {len(polygon)}")
    if pixels_per_unit <= 0:
        raise GeometryInputError(f"pixels_per_unit must be positive, got {pixels_per_unit}")

    box = bounding_box(polygon)
    width = box.width / pixels_per_unit + 2 * padding
    height = box.height / pixels_per_unit + 2 * padding
    left = -width / 2.0
    top = -height / 2.0

    center = box.center
    cutout = tuple(Point((p[0] - center.x) / pixels_per_unit,
                         (p[1] - center.y) / pixels_per_unit) for p in polygon)

    border = (Point(left, top), Point(left + width, top),
              Point(left + width, top + height), Point(left, top + height))

    bar_y = top + height - SCALE_BAR_MARGIN_MM
    scale_bar = (Point(left + SCALE_BAR_MARGIN_MM, bar_y),
                 Point(left + SCALE_BAR_MARGIN_MM + SCALE_BAR_LENGTH_MM, bar_y))

    return FlatPath(width=width, height=height, border=border,
                    crosshairs=_crosshairs(left, top, width, height),
                    cutout=cutout, scale_bar=scale_bar,
                    scale_bar_length=SCALE_BAR_LENGTH_MM,
                    scale_label=f'{SCALE_BAR_LENGTH_MM:g}mm')


__all__ = ['FlatPath', 'Segment', 'build_flat_path']
