import math

import pytest

from tagkit.lines import Line, Segment, distance


def test_distance_is_symmetric_and_zero_on_self():
    a, b = (1.5, -2.0), (4.0, 7.25)
    assert distance(a, b) == pytest.approx(distance(b, a))
    assert distance(a, a) == 0.0


def test_distance_pythagorean():
    assert distance((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)


def test_line_direction_is_unit():
    line = Line.from_points((1.0, 2.0), (4.0, -3.0))
    assert math.hypot(*line.u) == pytest.approx(1.0)
    assert line.p == (1.0, 2.0)


def test_line_from_identical_points_raises():
    with pytest.raises(ValueError):
        Line.from_points((1.0, 1.0), (1.0, 1.0))


def test_line_coordinate_of_origin_is_zero_and_endpoint_is_length():
    p0, p1 = (2.0, 1.0), (5.0, 5.0)
    line = Line.from_points(p0, p1)
    assert line.coordinate(p0) == pytest.approx(0.0)
    assert line.coordinate(p1) == pytest.approx(distance(p0, p1))


def test_line_intersect_axes_at_origin():
    xaxis = Line.from_points((0.0, 0.0), (1.0, 0.0))
    yaxis = Line.from_points((0.0, -1.0), (0.0, 1.0))
    point = xaxis.intersect(yaxis)
    assert point == pytest.approx((0.0, 0.0))


def test_parallel_lines_do_not_intersect():
    a = Line.from_points((0.0, 0.0), (1.0, 1.0))
    b = Line.from_points((0.0, 1.0), (1.0, 2.0))
    assert a.intersect(b) is None


def test_intersection_lies_on_both_lines():
    a = Line.from_points((0.0, 0.0), (3.0, 1.0))
    b = Line.from_points((1.0, 4.0), (2.0, -2.0))
    point = a.intersect(b)
    assert point is not None
    for line in (a, b):
        c = line.coordinate(point)
        assert line.point_at(c) == pytest.approx(point)


def test_closest_point_clamps_to_endpoints():
    seg = Segment.from_points((0.0, 0.0), (2.0, 0.0))
    assert seg.closest_point((-5.0, 3.0)) == pytest.approx((0.0, 0.0))
    assert seg.closest_point((9.0, -1.0)) == pytest.approx((2.0, 0.0))


def test_closest_point_projects_onto_interior():
    seg = Segment.from_points((0.0, 0.0), (2.0, 0.0))
    assert seg.closest_point((1.5, 7.0)) == pytest.approx((1.5, 0.0))


def test_crossing_segments_intersect():
    a = Segment.from_points((-1.0, 0.0), (1.0, 0.0))
    b = Segment.from_points((0.0, -1.0), (0.0, 1.0))
    assert a.intersect_segment(b) == pytest.approx((0.0, 0.0))


def test_disjoint_segments_do_not_intersect():
    a = Segment.from_points((-1.0, 0.0), (1.0, 0.0))
    b = Segment.from_points((3.0, -1.0), (3.0, 1.0))
    assert a.intersect_segment(b) is None
    assert b.intersect_segment(a) is None


def test_segment_intersect_line():
    seg = Segment.from_points((0.0, -1.0), (0.0, 1.0))
    line = Line.from_points((5.0, 0.5), (6.0, 0.5))
    assert seg.intersect_line(line) == pytest.approx((0.0, 0.5))
    far = Line.from_points((5.0, 4.0), (6.0, 4.0))
    assert seg.intersect_line(far) is None