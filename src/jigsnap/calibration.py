"""Pixel-to-millimetre scale and jig sizing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import GeometryInputError
from .rectify import ReferenceQuad

#: Known reference sheets, portrait width x height in millimetres.
PAPER_SIZES: Dict[str, Dict[str, Any]] = {
    'letter': {'width': 215.9, 'height': 279.4, 'label': 'US Letter (8.5" x 11")'},
    'a4': {'width': 210.0, 'height': 297.0, 'label': 'A4 (210 x 297mm)'},
}

# float noise allowance before rounding up to the next increment
_ROUNDING_GUARD = 1e-9


@dataclass(frozen=True)
class ScaleCalibration:
    """Result of a calibration.

    Attributes:
        pixels_per_unit: Image pixels per millimetre.
        method: ``"auto"`` (reference sheet) or ``"manual"`` (two-point
            measurement).
        reference_length: Physical length of the manual measurement.
    """
    pixels_per_unit: float
    method: str = 'auto'
    reference_length: Optional[float] = None

    def __post_init__(self):
        if self.method not in ('auto', 'manual'):
            raise GeometryInputError(f"method must be 'auto' or 'manual', got {self.method!r}")
        if not self.pixels_per_unit > 0:
            raise GeometryInputError(
                f"pixels_per_unit must be positive, got {self.pixels_per_unit}")

    @classmethod
    def from_reference(cls, quad: ReferenceQuad, known_width: float,
                       known_height: float) -> "ScaleCalibration":
        return cls(calibrate_from_reference(quad, known_width, known_height), 'auto')

    @classmethod
    def from_paper(cls, quad: ReferenceQuad, paper_size: str = 'letter') -> "ScaleCalibration":
        width, height = paper_dimensions(paper_size)
        return cls.from_reference(quad, width, height)

    @classmethod
    def from_manual_reference(cls, length_pixels: float,
                              length_units: float) -> "ScaleCalibration":
        return cls(calibrate_from_manual_reference(length_pixels, length_units),
                   'manual', reference_length=length_units)

    def to_units(self, pixels: float) -> float:
        return pixels / self.pixels_per_unit


def paper_dimensions(paper_size: str) -> Tuple[float, float]:
    """Return ``(width, height)`` in millimetres for a named paper size."""
    try:
        paper = PAPER_SIZES[paper_size.lower()]
    except KeyError:
        raise GeometryInputError(
            f"unknown paper size {paper_size!r}; expected one of {sorted(PAPER_SIZES)}"
        ) from None
    return paper['width'], paper['height']


def calibrate_from_reference(quad: ReferenceQuad, known_width: float,
                             known_height: float) -> float:
    """Pixels per unit from a detected reference sheet of known size.

    The long pixel side is matched with the long physical side and the
    short with the short, so sheet orientation does not matter; the two
    ratios are averaged to damp single-axis distortion.
    """
    if known_width <= 0 or known_height <= 0:
        raise GeometryInputError(
            f"known dimensions must be positive, got {known_width}x{known_height}")
    if quad.width <= 0 or quad.height <= 0:
        raise GeometryInputError(
            f"reference quad is degenerate ({quad.width}x{quad.height} px)")

    px_long = max(quad.width, quad.height)
    px_short = min(quad.width, quad.height)
    unit_long = max(known_width, known_height)
    unit_short = min(known_width, known_height)

    return (px_long / unit_long + px_short / unit_short) / 2.0


def calibrate_from_manual_reference(length_pixels: float, length_units: float) -> float:
    """Pixels per unit from a user-measured distance."""
    if length_units <= 0:
        raise GeometryInputError(
            f"reference length must be positive, got {length_units}")
    if length_pixels <= 0:
        raise GeometryInputError(
            f"measured pixel length must be positive, got {length_pixels}")
    return length_pixels / length_units


def _extent(bounds) -> Tuple[float, float]:
    if isinstance(bounds, dict):
        return float(bounds['width']), float(bounds['height'])
    if hasattr(bounds, 'width') and hasattr(bounds, 'height'):
        return float(bounds.width), float(bounds.height)
    width, height = bounds
    return float(width), float(height)


def compute_square_jig_size(bounds, pixels_per_unit: float,
                            padding_each_side: float = 10.0,
                            rounding_increment: float = 10.0) -> float:
    """Side length of the square jig holding an object of pixel size ``bounds``.

    ``bounds`` is anything with a width and height: a
    :class:`~jigsnap.geometry.BoundingBox`, a ``{'width', 'height'}`` mapping
    or a ``(width, height)`` pair.  The larger physical dimension plus
    padding on both sides is rounded *up* to the next multiple of
    ``rounding_increment``; rounding down would clip the object.

    >>> compute_square_jig_size({'width': 105, 'height': 60}, 10, 10, 10)
    40.0
    """
    if pixels_per_unit <= 0:
        raise GeometryInputError(f"pixels_per_unit must be positive, got {pixels_per_unit}")
    if rounding_increment <= 0:
        raise GeometryInputError(
            f"rounding_increment must be positive, got {rounding_increment}")
    if padding_each_side < 0:
        raise GeometryInputError(
            f"padding_each_side must be non-negative, got {padding_each_side}")

    width_px, height_px = _extent(bounds)
    max_dim = max(width_px, height_px) / pixels_per_unit
    padded = max_dim + 2 * padding_each_side
    steps = math.ceil(padded / rounding_increment - _ROUNDING_GUARD)
    return float(steps * rounding_increment)


__all__ = [
    'PAPER_SIZES',
    'ScaleCalibration',
    'paper_dimensions',
    'calibrate_from_reference',
    'calibrate_from_manual_reference',
    'compute_square_jig_size',
]
