"""Polygon tests and constructions in the plane.

A polygon is a sequence of ``(x, y)`` vertices, implicitly closed: the
last vertex connects back to the first and is not repeated. Where it
matters, polygons are expected in counter-clockwise order.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence

from tagkit.lines import Line, Segment, distance

__all__ = [
    "polygon_make_ccw",
    "polygon_contains_point_ref",
    "polygon_contains_point",
    "convex_hull",
    "polygon_closest_boundary_point",
    "polygon_intersects_polygon",
    "polygon_contains_polygon",
    "polygon_interior_point",
    "polygon_overlaps_polygon",
    "polygon_rasterize",
]

Point = tuple[float, float]
Polygon = Sequence[Sequence[float]]

_TWO_PI = 2.0 * math.pi


def _mod2pi(angle: float) -> float:
    """Wrap an angle into the interval (-pi, pi]."""
    wrapped = angle - _TWO_PI * math.floor(angle / _TWO_PI)
    if wrapped > math.pi:
        wrapped -= _TWO_PI
    return wrapped


def _point(p: Sequence[float]) -> Point:
    return (float(p[0]), float(p[1]))


def _require_vertices(poly: Polygon, n: int = 1) -> None:
    if len(poly) < n:
        raise ValueError(f"polygon needs at least {n} vertices, got {len(poly)}")


def _edges(poly: Polygon) -> Iterator[tuple[Sequence[float], Sequence[float]]]:
    """Consecutive vertex pairs, closing the loop."""
    n = len(poly)
    for i, p0 in enumerate(poly):
        yield p0, poly[(i + 1) % n]


def _segments(poly: Polygon) -> Iterator[Segment]:
    """Edges as segments; zero-length edges are skipped."""
    for p0, p1 in _edges(poly):
        if p0[0] == p1[0] and p0[1] == p1[1]:
            continue
        yield Segment.from_points(p0, p1)


def polygon_make_ccw(poly: Polygon) -> list[Point]:
    """Return the polygon's vertices in counter-clockwise order."""
    points = [_point(p) for p in poly]
    if not points:
        return points

    total_theta = 0.0
    last_theta = 0.0
    sz = len(points)
    for i in range(sz + 1):
        p0 = points[i % sz]
        p1 = points[(i + 1) % sz]
        this_theta = math.atan2(p1[1] - p0[1], p1[0] - p0[0])
        if i > 0:
            total_theta += _mod2pi(this_theta - last_theta)
        last_theta = this_theta

    if total_theta > 0:
        return points
    return points[::-1]


def polygon_contains_point_ref(poly: Polygon, q: Sequence[float]) -> bool:
    """Winding-angle containment test (slow reference version)."""
    _require_vertices(poly)
    acc_theta = 0.0
    last_theta = 0.0
    psz = len(poly)
    for i in range(psz + 1):
        p = poly[i % psz]
        this_theta = math.atan2(q[1] - p[1], q[0] - p[0])
        if i != 0:
            acc_theta += _mod2pi(this_theta - last_theta)
        last_theta = this_theta
    return acc_theta > math.pi


def _quadrant(p: Sequence[float], q: Sequence[float]) -> int:
    if p[0] < q[0]:
        return 2 if p[1] < q[1] else 1
    return 3 if p[1] < q[1] else 0


def polygon_contains_point(poly: Polygon, q: Sequence[float]) -> bool:
    """True if ``q`` lies inside the polygon, by counting quadrant crossings."""
    _require_vertices(poly)
    psz = len(poly)
    quad_acc = 0
    last_quadrant = 0

    for i in range(psz + 1):
        p = poly[i % psz]
        quadrant = _quadrant(p, q)

        if i > 0:
            dquadrant = quadrant - last_quadrant
            if dquadrant in (-3, 1):
                quad_acc += 1
            elif dquadrant in (-1, 3):
                quad_acc -= 1
            elif dquadrant in (-2, 2):
                # Diagonal jump: decide the direction of the half turn from
                # which side of (p - q) the previous vertex lies on.
                p0 = poly[i - 1]
                nx = p[1] - q[1]
                ny = -p[0] + q[0]
                turn = nx * (p0[0] - q[0]) + ny * (p0[1] - q[1])
                quad_acc += -2 if turn < 0 else 2

        last_quadrant = quadrant

    return quad_acc >= 2 or quad_acc <= -2


def convex_hull(points: Sequence[Sequence[float]]) -> list[Point]:
    """Convex hull by gift wrapping: counter-clockwise, without colinear points.

    Only additions, subtractions and multiplications are used, so the result
    is exact for integer coordinates.
    """
    insz = len(points)
    if insz < 2:
        raise ValueError("convex hull needs at least 2 points")

    left = 0
    for i, p in enumerate(points):
        if p[0] < points[left][0]:
            left = i

    hull: list[Point] = [_point(points[left])]
    p_idx = left

    for _ in range(insz + 1):
        p = points[p_idx]
        q_idx: int | None = None
        n0 = n1 = 0.0

        for i, thisq in enumerate(points):
            if i == p_idx:
                continue
            if q_idx is None:
                q_idx = i
                n0 = thisq[1] - p[1]
                n1 = -thisq[0] + p[0]
                continue
            e0 = thisq[0] - p[0]
            e1 = thisq[1] - p[1]
            if e0 * n0 + e1 * n1 > 0:
                q_idx = i
                n0 = thisq[1] - p[1]
                n1 = -thisq[0] + p[0]

        assert q_idx is not None
        if q_idx == left:
            return hull

        colinear = False
        if len(hull) > 1:
            o = hull[-2]
            if n0 * (o[0] - p[0]) + n1 * (o[1] - p[1]) == 0:
                colinear = True

        q = _point(points[q_idx])
        if colinear:
            hull[-1] = q
        else:
            hull.append(q)
        p_idx = q_idx

    raise ValueError("degenerate point set: convex hull did not close")


def polygon_closest_boundary_point(poly: Polygon, q: Sequence[float]) -> Point:
    """The point on the polygon's boundary nearest to ``q``."""
    best: Point | None = None
    min_dist = math.inf
    for seg in _segments(poly):
        candidate = seg.closest_point(q)
        dist = distance(q, candidate)
        if dist < min_dist:
            best = candidate
            min_dist = dist
    if best is None:
        if poly:
            return _point(poly[0])
        raise ValueError("polygon has no vertices")
    return best


def polygon_intersects_polygon(polya: Polygon, polyb: Polygon) -> bool:
    """True if any edge of ``polya`` crosses any edge of ``polyb``.

    Containment without crossing edges is not detected.
    """
    segs_b = list(_segments(polyb))
    return any(
        sega.intersect_segment(segb) is not None
        for sega in _segments(polya)
        for segb in segs_b
    )


def polygon_contains_polygon(polya: Polygon, polyb: Polygon) -> bool:
    """True if ``polya`` completely contains ``polyb``."""
    _require_vertices(polyb)
    if polygon_intersects_polygon(polya, polyb):
        return False
    return polygon_contains_point(polya, polyb[0])


def polygon_interior_point(poly: Polygon) -> Point:
    """The centroid of the first three vertices; inside, though maybe not far."""
    _require_vertices(poly, 3)
    a, b, c = poly[0], poly[1], poly[2]
    return ((a[0] + b[0] + c[0]) / 3, (a[1] + b[1] + c[1]) / 3)


def polygon_overlaps_polygon(polya: Polygon, polyb: Polygon) -> bool:
    """True if some point lies in both polygons."""
    if polygon_intersects_polygon(polya, polyb):
        return True
    if polygon_contains_point(polya, polygon_interior_point(polyb)):
        return True
    return polygon_contains_point(polyb, polygon_interior_point(polya))


def polygon_rasterize(poly: Polygon, y: float) -> list[float]:
    """Sorted x coordinates where the horizontal line at ``y`` crosses the edges."""
    line = Line.from_points((0.0, y), (1.0, y))
    xs = [
        point[0]
        for point in (seg.intersect_line(line) for seg in _segments(poly))
        if point is not None
    ]
    xs.sort()
    return xs