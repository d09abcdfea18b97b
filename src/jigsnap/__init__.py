# -*- coding: utf-8 -*-
"""Photo-to-jig geometry: contour candidates, polygon clean-up and export.

Typical flow::

    from jigsnap import (ContourDetector, OpenCVPrimitives, select_candidate,
                         simplify, offset, export_solid, JigConfig)

    detector = ContourDetector(OpenCVPrimitives())
    best = select_candidate(detector.detect(image))
    outline = offset(simplify(best.points, 3.0), 5.0)
    stl = export_solid(outline, JigConfig(), pixels_per_unit=10.0)
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jigsnap")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .errors import GeometryInputError, DegenerateGeometryError, MeshGenerationError
from .config import ClassifierConfig, DetectionConfig, JigConfig
from .geometry import (
    Point,
    BoundingBox,
    polygon_area,
    signed_area,
    point_in_polygon,
    bounding_box,
    bbox_iou,
)
from .contours import (
    DetectionMethod,
    RawContour,
    ContourCandidate,
    detect_candidates,
    select_candidate,
)
from .simplify import simplify
from .offset import offset
from .rectify import ReferenceQuad, order_quad_corners, destination_corners
from .calibration import (
    ScaleCalibration,
    PAPER_SIZES,
    calibrate_from_reference,
    calibrate_from_manual_reference,
    compute_square_jig_size,
)
from .flatpath import FlatPath
from .export import export_flat_path, export_solid
from .vision import (
    ImagePrimitives,
    OpenCVPrimitives,
    ContourDetector,
    detect_reference_quad,
    rectify_image,
)

__all__ = [
    "__version__",
    # Errors
    "GeometryInputError",
    "DegenerateGeometryError",
    "MeshGenerationError",
    # Configuration
    "ClassifierConfig",
    "DetectionConfig",
    "JigConfig",
    # Geometry primitives
    "Point",
    "BoundingBox",
    "polygon_area",
    "signed_area",
    "point_in_polygon",
    "bounding_box",
    "bbox_iou",
    # Candidates
    "DetectionMethod",
    "RawContour",
    "ContourCandidate",
    "detect_candidates",
    "select_candidate",
    # Polygon clean-up
    "simplify",
    "offset",
    # Rectification and scale
    "ReferenceQuad",
    "order_quad_corners",
    "destination_corners",
    "ScaleCalibration",
    "PAPER_SIZES",
    "calibrate_from_reference",
    "calibrate_from_manual_reference",
    "compute_square_jig_size",
    # Export
    "FlatPath",
    "export_flat_path",
    "export_solid",
    # Detection driver
    "ImagePrimitives",
    "OpenCVPrimitives",
    "ContourDetector",
    "detect_reference_quad",
    "rectify_image",
]
