"""Configuration for detection, classification and jig export.

Detection strategies differ only in their thresholds, so they are
expressed as parameters here.  Every field has a working default and is
checked on construction.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import GeometryInputError

#: Detection strategies understood by :class:`jigsnap.vision.ContourDetector`.
STRATEGIES = ("canny", "adaptive", "binary")


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise GeometryInputError(message)


@dataclass(frozen=True)
class ClassifierConfig:
    """Thresholds for candidate filtering, deduplication and classification.

    Attributes:
        min_area_fraction: Candidates smaller than this fraction of the
            image area are treated as noise.
        max_area_fraction: Candidates larger than this fraction of the image
            area are treated as whole-image false positives.
        iou_threshold: Bounding box IoU above which two candidates are the
            same physical object seen by different strategies.
        reference_area_fraction: Candidates above this fraction of the image
            area are classified as the reference sheet.
    """
    min_area_fraction: float = 0.0005
    max_area_fraction: float = 0.8
    iou_threshold: float = 0.7
    reference_area_fraction: float = 0.3

    def __post_init__(self):
        _require(0 <= self.min_area_fraction <= self.max_area_fraction <= 1,
                 "area fractions must satisfy 0 <= min <= max <= 1, got "
                 f"{self.min_area_fraction}, {self.max_area_fraction}")
        _require(0 <= self.iou_threshold <= 1,
                 f"iou_threshold must be in [0, 1], got {self.iou_threshold}")
        _require(0 <= self.reference_area_fraction <= 1,
                 "reference_area_fraction must be in [0, 1], got "
                 f"{self.reference_area_fraction}")


@dataclass(frozen=True)
class DetectionConfig:
    """Parameters of the image-processing strategies.

    Attributes:
        blur_kernel: Gaussian kernel size in pixels (odd).
        canny_low: Lower hysteresis threshold for object edges.
        canny_high: Upper hysteresis threshold for object edges.
        adaptive_block_size: Neighbourhood size of the adaptive threshold (odd).
        adaptive_c: Constant subtracted from the adaptive mean.
        approx_fraction: RDP tolerance for traced contours, as a fraction of
            the contour perimeter.
        strategies: Subset of ``("canny", "adaptive", "binary")`` to run, in
            the order their results are handed to the classifier.
        paper_canny_low: Lower Canny threshold for reference sheet detection.
        paper_canny_high: Upper Canny threshold for reference sheet detection.
        quad_approx_fraction: RDP tolerance, as a perimeter fraction, used
            to reduce a sheet outline to four corners.
        paper_min_area_fraction: Smallest plausible sheet, as image fraction.
        paper_max_area_fraction: Largest plausible sheet, as image fraction.
        aspect_tolerance: Allowed difference between the detected and the
            known short/long aspect ratio.
        min_rectangularity: Minimum contour area over bounding rect area.
        max_processing_dim: Images whose longer side exceeds this many pixels
            are scaled down before detection; results are mapped back to
            the original pixel frame.
    """
    blur_kernel: int = 5
    canny_low: float = 30
    canny_high: float = 100
    adaptive_block_size: int = 11
    adaptive_c: float = 2
    approx_fraction: float = 0.005
    strategies: Tuple[str, ...] = STRATEGIES
    paper_canny_low: float = 50
    paper_canny_high: float = 150
    quad_approx_fraction: float = 0.02
    paper_min_area_fraction: float = 0.05
    paper_max_area_fraction: float = 0.95
    aspect_tolerance: float = 0.15
    min_rectangularity: float = 0.7
    max_processing_dim: int = 1024

    def __post_init__(self):
        _require(self.blur_kernel > 0 and self.blur_kernel % 2 == 1,
                 f"blur_kernel must be a positive odd integer, got {self.blur_kernel}")
        _require(self.adaptive_block_size > 1 and self.adaptive_block_size % 2 == 1,
                 "adaptive_block_size must be an odd integer > 1, got "
                 f"{self.adaptive_block_size}")
        _require(0 <= self.canny_low <= self.canny_high,
                 f"bad Canny thresholds {self.canny_low}, {self.canny_high}")
        _require(0 <= self.paper_canny_low <= self.paper_canny_high,
                 f"bad paper Canny thresholds {self.paper_canny_low}, {self.paper_canny_high}")
        _require(self.approx_fraction >= 0 and self.quad_approx_fraction >= 0,
                 "approximation fractions must be non-negative")
        _require(0 <= self.paper_min_area_fraction <= self.paper_max_area_fraction <= 1,
                 "paper area fractions must satisfy 0 <= min <= max <= 1")
        _require(self.aspect_tolerance >= 0,
                 f"aspect_tolerance must be non-negative, got {self.aspect_tolerance}")
        _require(0 <= self.min_rectangularity <= 1,
                 f"min_rectangularity must be in [0, 1], got {self.min_rectangularity}")
        _require(self.max_processing_dim > 0,
                 f"max_processing_dim must be positive, got {self.max_processing_dim}")
        unknown = [s for s in self.strategies if s not in STRATEGIES]
        _require(not unknown, f"unknown detection strategies: {unknown}")


@dataclass(frozen=True)
class JigConfig:
    """Physical parameters of the produced jig, in millimetres.

    Attributes:
        padding_mm: Material left around the object on each side.
        thickness_mm: Sheet thickness (flat) or extrusion height (solid).
        pocket_depth_mm: Cavity depth measured from the top face;
            ``None`` cuts all the way through.
        jig_size_mm: Side of the square solid; ``None`` derives it from the
            contour with :func:`jigsnap.calibration.compute_square_jig_size`.
        rounding_increment_mm: Quantum the derived square size is rounded
            up to.
    """
    padding_mm: float = 10.0
    thickness_mm: float = 5.0
    pocket_depth_mm: Optional[float] = None
    jig_size_mm: Optional[float] = None
    rounding_increment_mm: float = 10.0

    def __post_init__(self):
        _require(self.padding_mm >= 0, f"padding_mm must be non-negative, got {self.padding_mm}")
        _require(self.thickness_mm > 0, f"thickness_mm must be positive, got {self.thickness_mm}")
        if self.pocket_depth_mm is not None:
            _require(0 < self.pocket_depth_mm <= self.thickness_mm,
                     f"pocket_depth_mm must be in (0, {self.thickness_mm}], "
                     f"got {self.pocket_depth_mm}")
        if self.jig_size_mm is not None:
            _require(self.jig_size_mm > 0, f"jig_size_mm must be positive, got {self.jig_size_mm}")
        _require(self.rounding_increment_mm > 0,
                 f"rounding_increment_mm must be positive, got {self.rounding_increment_mm}")

    @property
    def through_cut(self) -> bool:
        return self.pocket_depth_mm is None or self.pocket_depth_mm == self.thickness_mm

    @property
    def cavity_depth_mm(self) -> float:
        """Depth of the cavity; equals the thickness for a through-cut."""
        if self.pocket_depth_mm is None:
            return self.thickness_mm
        return self.pocket_depth_mm


__all__ = [
    'STRATEGIES',
    'ClassifierConfig',
    'DetectionConfig',
    'JigConfig',
]
