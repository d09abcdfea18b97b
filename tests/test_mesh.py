import math

import pytest

from jigsnap.errors import DegenerateGeometryError, MeshGenerationError
from jigsnap.mesh import (
    DOWN,
    UP,
    JigMesh,
    build_jig_mesh,
    orient_triangle,
    triangle_normal,
)

OUTER = [(-20, -20), (20, -20), (20, 20), (-20, 20)]
HOLE = [(-5, -5), (5, -5), (5, 5), (-5, 5)]


def _dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _signed_volume(triangles):
    total = 0.0
    for tri in triangles:
        a, b, c = tri.v0, tri.v1, tri.v2
        total += (a[0] * (b[1] * c[2] - b[2] * c[1])
                  - a[1] * (b[0] * c[2] - b[2] * c[0])
                  + a[2] * (b[0] * c[1] - b[1] * c[0])) / 6.0
    return total


def test_triangle_normal_and_orientation():
    v0, v1, v2 = (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)
    assert triangle_normal(v0, v1, v2) == (0.0, 0.0, 1.0)
    assert triangle_normal(v0, v1, (2.0, 0.0, 0.0)) is None
    assert orient_triangle(v0, v1, v2, DOWN) == (v0, v2, v1)
    assert orient_triangle(v0, v1, v2, UP) == (v0, v1, v2)


def test_through_cut_face_counts():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0)
    assert isinstance(mesh, JigMesh)
    assert len(mesh.bottom) == 2
    assert len(mesh.top) == 8
    assert len(mesh.outer_walls) == 2 * len(OUTER)
    assert len(mesh.hole_walls) == 2 * len(HOLE)
    assert mesh.floor == []
    assert len(mesh) == len(mesh.triangles) == 26


def test_through_cut_volume():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0)
    assert _signed_volume(mesh.triangles) == pytest.approx((1600 - 100) * 5.0)


def test_pocket_adds_floor():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0, depth=2.0)
    assert len(mesh.floor) == 2
    assert all(tri.v0[2] == pytest.approx(3.0) for tri in mesh.floor)
    hole_z = {v[2] for tri in mesh.hole_walls for v in (tri.v0, tri.v1, tri.v2)}
    assert hole_z == {3.0, 5.0}
    assert _signed_volume(mesh.triangles) == pytest.approx(1600 * 5.0 - 100 * 2.0)


def test_full_depth_pocket_is_through_cut():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0, depth=5.0)
    assert mesh.floor == []


def test_face_normals_point_outward():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0, depth=2.0)
    for tri in mesh.bottom:
        assert tri.normal == DOWN
    for tri in mesh.top + mesh.floor:
        assert tri.normal == UP
    for tri in mesh.triangles:
        geometric = triangle_normal(tri.v0, tri.v1, tri.v2)
        assert geometric is not None
        assert _dot(geometric, tri.normal) > 0.99


def test_hole_walls_face_the_cavity():
    mesh = build_jig_mesh(OUTER, HOLE, 5.0)
    for tri in mesh.hole_walls:
        cx = (tri.v0[0] + tri.v1[0] + tri.v2[0]) / 3.0
        cy = (tri.v0[1] + tri.v1[1] + tri.v2[1]) / 3.0
        # stepping along the normal from a hole wall moves toward the centre
        assert math.hypot(cx + tri.normal[0], cy + tri.normal[1]) < math.hypot(cx, cy)


def test_clockwise_inputs_are_normalised():
    mesh = build_jig_mesh(list(reversed(OUTER)), list(reversed(HOLE)), 5.0)
    assert _signed_volume(mesh.triangles) == pytest.approx(1500 * 5.0)


@pytest.mark.parametrize('height, depth', [(0, None), (-1, None), (5, 0), (5, 6), (5, -1)])
def test_bad_heights(height, depth):
    with pytest.raises(MeshGenerationError):
        build_jig_mesh(OUTER, HOLE, height, depth)


def test_degenerate_hole():
    with pytest.raises(MeshGenerationError):
        build_jig_mesh(OUTER, [(0, 0), (1, 1)], 5.0)
    with pytest.raises(DegenerateGeometryError):
        build_jig_mesh(OUTER, [(0, 0), (1, 0), (1, 0)], 5.0)


def test_hole_must_fit_inside():
    with pytest.raises(MeshGenerationError) as excinfo:
        build_jig_mesh(OUTER, [(-25, -5), (5, -5), (5, 5), (-25, 5)], 5.0)
    assert 'outer' in excinfo.value.details


def test_zero_area_hole_is_rejected():
    with pytest.raises(MeshGenerationError) as excinfo:
        build_jig_mesh(OUTER, [(-5, 0), (0, 0), (5, 0)], 5.0)
    assert excinfo.value.details['area'] == 0.0


def test_degenerate_outer():
    with pytest.raises(MeshGenerationError):
        build_jig_mesh([(-20, 0), (0, 0), (20, 0)], HOLE, 5.0)
