import math

import pytest

from jigsnap.geometry import (
    BoundingBox,
    Point,
    bbox_iou,
    bounding_box,
    centroid,
    is_simple,
    perimeter,
    point_in_polygon,
    polygon_area,
    segments_intersect,
    signed_area,
    translate,
)


SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]
L_SHAPE = [(0, 0), (6, 0), (6, 2), (2, 2), (2, 6), (0, 6)]


def test_polygon_area_square_and_triangle():
    assert polygon_area(SQUARE) == 100.0
    assert polygon_area([(0, 0), (4, 0), (0, 3)]) == 6.0


def test_polygon_area_degenerate_inputs():
    assert polygon_area([]) == 0.0
    assert polygon_area([(1, 1), (2, 2)]) == 0.0
    assert polygon_area([(0, 0), (1, 1), (2, 2)]) == 0.0


def test_signed_area_follows_winding():
    assert signed_area(SQUARE) == 100.0
    assert signed_area(list(reversed(SQUARE))) == -100.0


def test_area_invariant_under_reversal_and_translation():
    base = polygon_area(L_SHAPE)
    assert base == pytest.approx(20.0)
    assert polygon_area(list(reversed(L_SHAPE))) == pytest.approx(base)
    assert polygon_area(translate(L_SHAPE, 123.5, -77.25)) == pytest.approx(base)


def test_point_in_polygon_interior_and_exterior():
    assert point_in_polygon((5, 5), SQUARE)
    assert not point_in_polygon((15, 5), SQUARE)
    assert not point_in_polygon((-1, -1), SQUARE)


def test_point_in_polygon_concave_notch():
    assert point_in_polygon((1, 5), L_SHAPE)
    assert point_in_polygon((5, 1), L_SHAPE)
    assert not point_in_polygon((4, 4), L_SHAPE)


def test_point_in_polygon_stable_under_start_rotation():
    samples = [(1, 1), (1, 5), (5, 1), (4, 4), (7, 7), (-1, 3), (1.5, 1.5)]
    expected = [point_in_polygon(p, L_SHAPE) for p in samples]
    for shift in range(1, len(L_SHAPE)):
        rotated = L_SHAPE[shift:] + L_SHAPE[:shift]
        assert [point_in_polygon(p, rotated) for p in samples] == expected


def test_point_in_polygon_degenerate_polygon_is_outside():
    assert not point_in_polygon((0, 0), [])
    assert not point_in_polygon((0.5, 0.5), [(0, 0), (1, 1)])


def test_bounding_box_properties():
    box = bounding_box([(3, -2), (7, 4), (5, 1)])
    assert box == BoundingBox(3, -2, 7, 4)
    assert box.width == 4
    assert box.height == 6
    assert box.area == 24
    assert box.center == Point(5.0, 1.0)


def test_bounding_box_requires_points():
    with pytest.raises(ValueError):
        bounding_box([])


class TestBboxIou:

    def test_self_iou_is_one(self):
        assert bbox_iou(SQUARE, SQUARE) == 1.0

    def test_disjoint_and_touching_boxes(self):
        far = translate(SQUARE, 100, 100)
        touching = translate(SQUARE, 10, 0)
        assert bbox_iou(SQUARE, far) == 0.0
        assert bbox_iou(SQUARE, touching) == 0.0

    def test_partial_overlap_is_symmetric(self):
        shifted = translate(SQUARE, 5, 0)
        iou = bbox_iou(SQUARE, shifted)
        assert iou == pytest.approx(50.0 / 150.0)
        assert bbox_iou(shifted, SQUARE) == pytest.approx(iou)

    def test_bounds(self):
        shapes = [SQUARE, L_SHAPE, translate(L_SHAPE, 3, 4), [(2, 2), (3, 2), (3, 3)]]
        for a in shapes:
            for b in shapes:
                assert 0.0 <= bbox_iou(a, b) <= 1.0

    def test_zero_area_boxes(self):
        line = [(0, 0), (5, 0), (10, 0)]
        assert bbox_iou(line, line) == 1.0
        assert bbox_iou(line, [(0, 0), (10, 0)]) == 1.0
        assert bbox_iou(line, [(0, 0), (8, 0)]) == 0.0
        assert bbox_iou(line, SQUARE) == 0.0


def test_perimeter_and_centroid():
    assert perimeter(SQUARE) == 40.0
    assert perimeter(SQUARE, closed=False) == 30.0
    assert centroid(SQUARE) == Point(5.0, 5.0)


def test_segments_intersect():
    assert segments_intersect((0, 0), (2, 2), (0, 2), (2, 0))
    assert not segments_intersect((0, 0), (1, 0), (0, 1), (1, 1))
    # collinear overlap
    assert segments_intersect((0, 0), (2, 0), (1, 0), (3, 0))


def test_is_simple():
    assert is_simple(SQUARE)
    assert is_simple(L_SHAPE)
    bowtie = [(0, 0), (10, 10), (10, 0), (0, 10)]
    assert not is_simple(bowtie)


def test_point_equals_tuple():
    assert Point(1, 2) == (1, 2)
    assert math.isclose(Point(3, 4).x, 3)
