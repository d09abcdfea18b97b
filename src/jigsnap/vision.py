"""Detection driver over pluggable image primitives.

The geometry in this package never touches pixels.  Everything that does
(colour conversion, blurring, edge maps, thresholds, contour tracing and
resizing and perspective warps) goes through an :class:`ImagePrimitives` object, so the
driver can be exercised with a fake in tests and with OpenCV in
production (:class:`OpenCVPrimitives`).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Tuple

import cv2
import numpy as np

from .calibration import paper_dimensions
from .config import ClassifierConfig, DetectionConfig
from .contours import ContourCandidate, DetectionMethod, RawContour, detect_candidates
from .errors import GeometryInputError
from .geometry import bounding_box, perimeter, polygon_area, to_points
from .rectify import (
    ReferenceQuad,
    destination_corners,
    rectified_size,
    reference_quad_from_corners,
)
from .simplify import simplify

logger = logging.getLogger(__name__)


class ImagePrimitives(Protocol):
    """Raster operations the detector depends on.

    Images are opaque to the driver except for ``image.shape[:2]`` giving
    ``(height, width)``.  Binary images are non-zero where a feature is.
    """

    def to_grayscale(self, image): ...

    def gaussian_blur(self, gray, kernel_size: int): ...

    def canny_edges(self, gray, low: float, high: float): ...

    def adaptive_threshold(self, gray, block_size: int, c: float): ...

    def otsu_threshold(self, gray): ...

    def trace_contours(self, binary, external_only: bool = False) -> List[Sequence[Sequence[float]]]:
        """Return traced outlines as point sequences in pixel coordinates."""
        ...

    def compute_perspective_transform(self, src: Sequence[Sequence[float]],
                                      dst: Sequence[Sequence[float]]): ...

    def resize(self, image, width: int, height: int): ...

    def warp_perspective(self, image, transform, width: int, height: int): ...


class OpenCVPrimitives:
    """:class:`ImagePrimitives` backed by ``cv2``."""

    def to_grayscale(self, image):
        if image.ndim == 2:
            return image
        if image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    def gaussian_blur(self, gray, kernel_size: int):
        return cv2.GaussianBlur(gray, (kernel_size, kernel_size), 0)

    def canny_edges(self, gray, low: float, high: float):
        return cv2.Canny(gray, low, high)

    def adaptive_threshold(self, gray, block_size: int, c: float):
        return cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
                                     cv2.THRESH_BINARY_INV, block_size, c)

    def otsu_threshold(self, gray):
        _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
        return binary

    def trace_contours(self, binary, external_only: bool = False):
        mode = cv2.RETR_EXTERNAL if external_only else cv2.RETR_LIST
        contours, _ = cv2.findContours(binary, mode, cv2.CHAIN_APPROX_SIMPLE)
        return [c.reshape(-1, 2).tolist() for c in contours]

    def compute_perspective_transform(self, src, dst):
        return cv2.getPerspectiveTransform(np.asarray(src, dtype=np.float32),
                                           np.asarray(dst, dtype=np.float32))

    def resize(self, image, width: int, height: int):
        return cv2.resize(image, (int(width), int(height)), interpolation=cv2.INTER_AREA)

    def warp_perspective(self, image, transform, width: int, height: int):
        return cv2.warpPerspective(image, transform, (int(width), int(height)))


def _processing_image(primitives: ImagePrimitives, image, max_dim: int):
    """Scale ``image`` down so its longer side is at most ``max_dim`` pixels.

    Returns ``(image, sx, sy)`` where multiplying a processed coordinate by
    ``sx``, ``sy`` maps it back into the original image.
    """
    height, width = image.shape[:2]
    if max(height, width) <= max_dim:
        return image, 1.0, 1.0
    scale = max_dim / max(height, width)
    new_width = max(1, int(round(width * scale)))
    new_height = max(1, int(round(height * scale)))
    logger.debug("resizing %d x %d px to %d x %d px for detection",
                 width, height, new_width, new_height)
    small = primitives.resize(image, new_width, new_height)
    return small, width / new_width, height / new_height


def _rescaled(points, sx: float, sy: float):
    if sx == 1.0 and sy == 1.0:
        return to_points(points)
    return to_points([(p[0] * sx, p[1] * sy) for p in points])


class ContourDetector:
    """Run the configured detection strategies and classify what they find.

    Args:
        primitives: Raster backend.
        detection_config: Strategy parameters.
        classifier_config: Filtering and deduplication thresholds.
    """

    def __init__(self, primitives: ImagePrimitives,
                 detection_config: Optional[DetectionConfig] = None,
                 classifier_config: Optional[ClassifierConfig] = None):
        self.primitives = primitives
        self.detection_config = detection_config or DetectionConfig()
        self.classifier_config = classifier_config or ClassifierConfig()

    def _binary(self, strategy: str, blurred):
        cfg = self.detection_config
        if strategy == 'canny':
            return self.primitives.canny_edges(blurred, cfg.canny_low, cfg.canny_high)
        if strategy == 'adaptive':
            return self.primitives.adaptive_threshold(blurred, cfg.adaptive_block_size,
                                                      cfg.adaptive_c)
        return self.primitives.otsu_threshold(blurred)

    def trace(self, image) -> List[RawContour]:
        """Raw contours of every strategy, concatenated in strategy order.

        Large images are traced at reduced resolution; points and areas are
        reported in the pixel frame of ``image``.
        """
        cfg = self.detection_config
        small, sx, sy = _processing_image(self.primitives, image, cfg.max_processing_dim)
        gray = self.primitives.to_grayscale(small)
        blurred = self.primitives.gaussian_blur(gray, cfg.blur_kernel)

        raw: List[RawContour] = []
        for strategy in cfg.strategies:
            method = DetectionMethod(strategy)
            traced = self.primitives.trace_contours(self._binary(strategy, blurred),
                                                    external_only=False)
            found = 0
            for points in traced:
                if len(points) < 3:
                    continue
                pts = _rescaled(points, sx, sy)
                approx = simplify(pts, cfg.approx_fraction * perimeter(pts))
                if len(approx) < 3:
                    continue
                raw.append(RawContour(points=tuple(approx),
                                      area=polygon_area(pts),
                                      method=method))
                found += 1
            logger.debug("%s: %d traced, %d kept", strategy, len(traced), found)
        return raw

    def detect(self, image) -> List[ContourCandidate]:
        """Ranked candidates for ``image``, largest first."""
        height, width = image.shape[:2]
        return detect_candidates(self.trace(image), float(height * width),
                                 self.classifier_config)


def _score_quad(points, image_area: float, target_aspect: float,
                config: DetectionConfig) -> Optional[Tuple[float, ReferenceQuad]]:
    area = polygon_area(points)
    fraction = area / image_area
    if not config.paper_min_area_fraction <= fraction <= config.paper_max_area_fraction:
        return None

    corners = simplify(points, config.quad_approx_fraction * perimeter(points))
    if len(corners) != 4:
        return None
    try:
        quad = reference_quad_from_corners(corners)
    except GeometryInputError:
        return None

    aspect_diff = abs(quad.short_side / quad.long_side - target_aspect)
    if aspect_diff > config.aspect_tolerance:
        return None

    box = bounding_box(points)
    if box.area <= 0:
        return None
    rectangularity = area / box.area
    if rectangularity < config.min_rectangularity:
        return None

    return fraction * rectangularity * (1.0 - aspect_diff), quad


def detect_reference_quad(primitives: ImagePrimitives, image,
                          paper_size: str = 'letter',
                          config: Optional[DetectionConfig] = None) -> Optional[ReferenceQuad]:
    """Find the sheet of paper most likely to be the calibration reference.

    Returns ``None`` when no outline passes the area, corner count, aspect
    and rectangularity checks.  The corners are in the pixel frame of
    ``image`` even when detection ran on a scaled-down copy.
    """
    if config is None:
        config = DetectionConfig()
    known_width, known_height = paper_dimensions(paper_size)
    target_aspect = min(known_width, known_height) / max(known_width, known_height)

    height, width = image.shape[:2]
    image_area = float(height * width)

    small, sx, sy = _processing_image(primitives, image, config.max_processing_dim)
    gray = primitives.to_grayscale(small)
    blurred = primitives.gaussian_blur(gray, config.blur_kernel)
    edges = primitives.canny_edges(blurred, config.paper_canny_low, config.paper_canny_high)

    best: Optional[Tuple[float, ReferenceQuad]] = None
    for points in primitives.trace_contours(edges, external_only=True):
        if len(points) < 4:
            continue
        scored = _score_quad(_rescaled(points, sx, sy), image_area, target_aspect, config)
        if scored is not None and (best is None or scored[0] > best[0]):
            best = scored

    if best is None:
        logger.info("no %s reference sheet found", paper_size)
        return None
    logger.info("reference sheet %.0f x %.0f px (score %.3f)",
                best[1].width, best[1].height, best[0])
    return best[1]


def rectify_image(primitives: ImagePrimitives, image, quad: ReferenceQuad,
                  max_dim: int = 2048):
    """Warp ``image`` so ``quad`` becomes an axis-aligned rectangle.

    Returns:
        ``(warped, (width, height))``; the output is scaled down so its
        longer side is at most ``max_dim`` pixels.
    """
    width, height = rectified_size(quad, max_dim)
    transform = primitives.compute_perspective_transform(
        quad.corners, destination_corners(width, height))
    warped = primitives.warp_perspective(image, transform, width, height)
    logger.debug("rectified to %d x %d px", width, height)
    return warped, (width, height)


__all__ = [
    'ImagePrimitives',
    'OpenCVPrimitives',
    'ContourDetector',
    'detect_reference_quad',
    'rectify_image',
]
