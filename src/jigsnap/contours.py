"""Classification and deduplication of traced contour candidates.

Several detection strategies (Canny edges, adaptive threshold, OTSU binary
threshold) usually report the same physical object more than once.  This
module filters their combined output by area, merges near-duplicates,
labels the reference sheet and ranks what is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import ClassifierConfig
from .geometry import Point, bbox_iou, polygon_area, to_points

logger = logging.getLogger(__name__)


class DetectionMethod(str, Enum):
    """Strategy that produced a contour.  Diagnostic only."""
    CANNY = "canny"
    ADAPTIVE = "adaptive"
    BINARY = "binary"
    MANUAL = "manual"


@dataclass(frozen=True)
class RawContour:
    """A traced polygon before classification.

    Attributes:
        points: Polygon vertices in image pixels.
        area: Raw pixel area of the traced region.
        method: Strategy that found it.
    """
    points: Tuple[Point, ...]
    area: float
    method: DetectionMethod = DetectionMethod.MANUAL

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]],
                    method: DetectionMethod = DetectionMethod.MANUAL,
                    area: Optional[float] = None) -> "RawContour":
        pts = tuple(to_points(points))
        if area is None:
            area = polygon_area(pts)
        return cls(points=pts, area=float(area), method=DetectionMethod(method))


@dataclass(frozen=True)
class ContourCandidate:
    """A classified, deduplicated contour.

    Attributes:
        points: Polygon vertices in image pixels.
        area: Raw pixel area.
        is_reference: True if the contour looks like the calibration sheet.
        detection_method: Strategy whose polygon survived deduplication.
    """
    points: Tuple[Point, ...]
    area: float
    is_reference: bool
    detection_method: DetectionMethod

    @property
    def vertex_count(self) -> int:
        return len(self.points)


def detect_candidates(raw_contours: Iterable[RawContour],
                      image_area: float,
                      config: Optional[ClassifierConfig] = None) -> List[ContourCandidate]:
    """Filter, deduplicate, classify and rank raw contours.

    ``raw_contours`` must be the complete, order-stable output of every
    detection pass; the merge below depends on discovery order.

    Returns:
        Candidates sorted by area, largest first.  An empty input (or one
        where nothing survives the area filter) yields an empty list.
    """
    if config is None:
        config = ClassifierConfig()

    contours = list(raw_contours)
    min_area = config.min_area_fraction * image_area
    max_area = config.max_area_fraction * image_area

    kept = [c for c in contours
            if len(c.points) >= 3 and min_area <= c.area <= max_area]
    logger.debug("area filter kept %d of %d contours", len(kept), len(contours))

    unique: List[RawContour] = []
    for candidate in kept:
        for idx, existing in enumerate(unique):
            if bbox_iou(candidate.points, existing.points) > config.iou_threshold:
                # same object from another strategy; keep the more detailed outline
                if len(candidate.points) > len(existing.points):
                    unique[idx] = candidate
                break
        else:
            unique.append(candidate)
    logger.debug("deduplication left %d contours", len(unique))

    reference_area = config.reference_area_fraction * image_area
    candidates = [
        ContourCandidate(points=c.points,
                         area=c.area,
                         is_reference=c.area > reference_area,
                         detection_method=c.method)
        for c in unique
    ]
    candidates.sort(key=lambda c: c.area, reverse=True)

    logger.info("%d candidates (%d reference)", len(candidates),
                sum(1 for c in candidates if c.is_reference))
    return candidates


def select_candidate(candidates: Sequence[ContourCandidate]) -> Optional[ContourCandidate]:
    """Pick the default target: the largest non-reference candidate.

    Falls back to the largest candidate overall (possibly the sheet itself)
    and returns ``None`` when there is nothing to choose from.
    """
    for candidate in candidates:
        if not candidate.is_reference:
            return candidate
    if candidates:
        return candidates[0]
    return None


__all__ = [
    'DetectionMethod',
    'RawContour',
    'ContourCandidate',
    'detect_candidates',
    'select_candidate',
]
