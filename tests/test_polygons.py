import random

import pytest

from tagkit.polygons import (
    convex_hull,
    polygon_closest_boundary_point,
    polygon_contains_point,
    polygon_contains_point_ref,
    polygon_contains_polygon,
    polygon_interior_point,
    polygon_intersects_polygon,
    polygon_make_ccw,
    polygon_overlaps_polygon,
    polygon_rasterize,
)

POLY_A = [(0, 0), (4, 0), (2, 2), (1, 2), (1, 5), (-2, 4)]
POLY_B = [(0.1, 0.1), (0.5, 0.1), (0.1, 0.5)]
POLY_C = [(3, 0), (5, 0), (5, 1)]
POLY_D = [(5, 5), (6, 6), (5, 6)]
POLY_E = [
    (0, 0), (4, 0), (4, 1), (1, 1),
    (1, 2), (3, 2), (3, 3), (1, 3),
    (1, 4), (4, 4), (4, 5), (0, 5),
]
SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4)]


@pytest.mark.parametrize(
    "q, expected",
    [((10, 10), False), ((1, 1), True), ((3, 0.5), True), ((1.2, 2.1), False)],
)
def test_contains_point_cases(q, expected):
    assert polygon_contains_point(POLY_A, q) is expected
    assert polygon_contains_point_ref(POLY_A, q) is expected


def test_fast_and_reference_agree():
    rng = random.Random(0)
    for _ in range(500):
        q = (rng.uniform(-2, 8), rng.uniform(-2, 8))
        assert polygon_contains_point(POLY_E, q) == polygon_contains_point_ref(POLY_E, q)


def test_contains_polygon():
    assert polygon_contains_polygon(POLY_A, POLY_B) is True
    assert polygon_contains_polygon(POLY_A, POLY_C) is False
    assert polygon_contains_polygon(POLY_A, POLY_D) is False


def test_intersects_polygon():
    assert polygon_intersects_polygon(POLY_A, POLY_C) is True
    assert polygon_intersects_polygon(POLY_A, POLY_D) is False
    assert polygon_intersects_polygon(POLY_A, POLY_B) is False


def test_overlaps_polygon():
    assert polygon_overlaps_polygon(POLY_A, POLY_B) is True
    assert polygon_overlaps_polygon(POLY_B, POLY_A) is True
    assert polygon_overlaps_polygon(POLY_A, POLY_C) is True
    assert polygon_overlaps_polygon(POLY_A, POLY_D) is False


def test_convex_hull_of_e_shape():
    assert convex_hull(POLY_E) == [(0, 0), (4, 0), (4, 5), (0, 5)]


def test_convex_hull_contains_all_points():
    rng = random.Random(1)
    points = [(rng.uniform(-2, 8), rng.uniform(-2, 8)) for _ in range(100)]
    hull = convex_hull(points)
    assert set(hull) <= set(points)
    assert polygon_make_ccw(hull) == hull
    for q in points:
        p = polygon_closest_boundary_point(hull, q)
        on_edge = abs(p[0] - q[0]) + abs(p[1] - q[1]) < 1e-5
        assert on_edge or polygon_contains_point(hull, q)


def test_convex_hull_needs_two_points():
    with pytest.raises(ValueError):
        convex_hull([(1, 1)])


def test_make_ccw_keeps_ccw_and_reverses_cw():
    assert polygon_make_ccw(SQUARE) == SQUARE
    cw = SQUARE[::-1]
    assert polygon_make_ccw(cw) == SQUARE
    assert polygon_make_ccw(polygon_make_ccw(cw)) == SQUARE


def test_closest_boundary_point():
    assert polygon_closest_boundary_point(SQUARE, (2, -3)) == pytest.approx((2, 0))
    assert polygon_closest_boundary_point(SQUARE, (6, 2)) == pytest.approx((4, 2))
    corner = polygon_closest_boundary_point(SQUARE, (5, 5))
    assert corner == pytest.approx((4, 4))


def test_interior_point_is_inside():
    p = polygon_interior_point([(0, 0), (3, 0), (0, 3)])
    assert p == pytest.approx((1, 1))
    assert polygon_contains_point(POLY_A, polygon_interior_point(POLY_A))


def test_interior_point_needs_three_vertices():
    with pytest.raises(ValueError):
        polygon_interior_point([(0, 0), (1, 1)])


def test_rasterize():
    assert polygon_rasterize(POLY_E, 0.5) == pytest.approx([0, 4])
    xs = polygon_rasterize(POLY_E, 2.5)
    assert xs == sorted(xs)
    assert len(xs) % 2 == 0
    assert xs[0] == pytest.approx(0)
    assert polygon_rasterize(SQUARE, 10) == []


def test_contains_point_empty_polygon():
    with pytest.raises(ValueError):
        polygon_contains_point([], (0, 0))
    with pytest.raises(ValueError):
        polygon_contains_point_ref([], (0, 0))