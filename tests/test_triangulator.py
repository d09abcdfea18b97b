import pytest

from jigsnap.errors import DegenerateGeometryError
from jigsnap.geometry import polygon_area, signed_area
from jigsnap.triangulator import clean_loop, triangulate_face

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]
INNER = [(3, 3), (7, 3), (7, 7), (3, 7)]


def _area(triangles):
    return sum(polygon_area(tri) for tri in triangles)


def test_square_without_hole():
    tris = triangulate_face(SQUARE)
    assert len(tris) == 2
    assert _area(tris) == pytest.approx(100.0)


def test_square_with_hole():
    tris = triangulate_face(SQUARE, INNER)
    # n + 2h - 2 triangles for a polygon with holes
    assert len(tris) == 8
    assert _area(tris) == pytest.approx(84.0)


def test_winding_of_either_loop_does_not_matter():
    tris = triangulate_face(list(reversed(SQUARE)), list(reversed(INNER)))
    assert _area(tris) == pytest.approx(84.0)


@pytest.mark.parametrize('loop', [
    [(0, 0), (1, 1)],
    [(0, 0), (1, 0), (1, 0), (0, 0)],
    [(-5, 0), (0, 0), (5, 0)],
])
def test_degenerate_outer_is_rejected(loop):
    with pytest.raises(DegenerateGeometryError):
        triangulate_face(loop)


def test_zero_area_hole_is_rejected():
    with pytest.raises(DegenerateGeometryError) as excinfo:
        triangulate_face(SQUARE, [(2, 5), (5, 5), (8, 5)])
    assert excinfo.value.details['area'] == 0.0


def test_self_intersecting_outline_is_rejected():
    # an hourglass with a little area left over, so only coverage catches it
    hourglass = [(0, 0), (10, 10), (10, 0), (0, 9)]
    with pytest.raises(DegenerateGeometryError):
        triangulate_face(hourglass)


def test_clean_loop_drops_repeats_and_orients():
    loop = clean_loop([(0, 0), (0, 10), (0, 10), (10, 10), (10, 0), (0, 0)], want_ccw=True)
    assert len(loop) == 4
    assert signed_area(loop) > 0
    assert signed_area(clean_loop(loop, want_ccw=False)) < 0
