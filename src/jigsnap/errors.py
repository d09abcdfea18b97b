"""Exception types raised by jigsnap.

Absence of a result (no candidates, no reference sheet found) is never an
exception; those paths return ``[]`` or ``None``.  Exceptions are reserved
for input the caller has to fix.
"""


class GeometryInputError(ValueError):
    """Raised when an API receives malformed input.

    Examples are polygons with fewer than three points, a zero-length
    reference measurement or out-of-range configuration values.
    """

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class DegenerateGeometryError(ValueError):
    """Raised when well-formed input still produces unusable geometry.

    Usually correctable by the caller, e.g. by retrying with a smaller
    offset distance or a lower simplification tolerance.
    """

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class MeshGenerationError(DegenerateGeometryError):
    """Raised when the jig solid cannot be built; no STL is emitted."""


__all__ = [
    'GeometryInputError',
    'DegenerateGeometryError',
    'MeshGenerationError',
]
