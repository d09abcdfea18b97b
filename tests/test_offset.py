import math

import pytest

from jigsnap.errors import GeometryInputError
from jigsnap.geometry import polygon_area
from jigsnap.offset import offset, offset_is_simple

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


def test_zero_distance_is_identity():
    assert offset(SQUARE, 0) is SQUARE


def test_positive_offset_grows_either_winding():
    grown = offset(SQUARE, 1.0)
    grown_cw = offset(list(reversed(SQUARE)), 1.0)
    assert polygon_area(grown) > polygon_area(SQUARE)
    assert polygon_area(grown_cw) == pytest.approx(polygon_area(grown))


def test_negative_offset_shrinks():
    shrunk = offset(SQUARE, -1.0)
    assert polygon_area(shrunk) < polygon_area(SQUARE)


def test_corners_move_along_bisector():
    grown = offset(SQUARE, math.sqrt(2))
    assert grown[0] == pytest.approx((-1.0, -1.0))
    assert grown[2] == pytest.approx((11.0, 11.0))


def test_vertex_count_and_order_preserved():
    pts = [(0, 0), (6, 0), (6, 2), (2, 2), (2, 6), (0, 6)]
    out = offset(pts, 0.5)
    assert len(out) == len(pts)
    for src, dst in zip(pts, out):
        assert math.hypot(dst[0] - src[0], dst[1] - src[1]) == pytest.approx(0.5)


def test_duplicate_vertex_does_not_move_more_than_distance():
    pts = [(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)]
    out = offset(pts, 1.0)
    for src, dst in zip(pts, out):
        assert math.hypot(dst[0] - src[0], dst[1] - src[1]) <= 1.0 + 1e-9


def test_too_few_points():
    with pytest.raises(GeometryInputError):
        offset([(0, 0), (1, 1)], 1.0)


def test_large_inward_offset_is_detectable():
    # thin concave comb; shrinking by more than half a tooth folds it over
    comb = [(0, 0), (30, 0), (30, 10), (22, 10), (22, 2), (18, 2), (18, 10),
            (12, 10), (12, 2), (8, 2), (8, 10), (0, 10)]
    assert offset_is_simple(offset(comb, 0.2))
    assert not offset_is_simple(offset(comb, -3.0))
