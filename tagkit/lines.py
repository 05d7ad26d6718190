"""Lines and line segments in the plane.

A point is a pair of floats ``(x, y)``. A :class:`Line` is stored as a
point it passes through and a unit direction vector. A :class:`Segment`
is a line whose point is one endpoint, plus the other endpoint.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

__all__ = ["Line", "Segment", "distance"]

Point = tuple[float, float]

_PARALLEL_EPS = 0.00000001


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _between(c: float, a: float, b: float) -> bool:
    """True if ``c`` lies in the closed interval spanned by ``a`` and ``b``."""
    return not ((c < a and c < b) or (c > a and c > b))


@dataclass(frozen=True)
class Line:
    """An infinite line through ``p`` with unit direction ``u``."""

    p: Point
    u: Point

    @classmethod
    def from_points(cls, p0: Sequence[float], p1: Sequence[float]) -> Line:
        """The line through two distinct points, directed from ``p0`` to ``p1``."""
        dx = p1[0] - p0[0]
        dy = p1[1] - p0[1]
        mag = math.hypot(dx, dy)
        if mag == 0:
            raise ValueError("a line needs two distinct points")
        return cls((float(p0[0]), float(p0[1])), (dx / mag, dy / mag))

    def coordinate(self, q: Sequence[float]) -> float:
        """Position of ``q`` (projected onto the line) measured from ``p``."""
        return (q[0] - self.p[0]) * self.u[0] + (q[1] - self.p[1]) * self.u[1]

    def point_at(self, c: float) -> Point:
        """The point on the line at coordinate ``c``."""
        return (self.p[0] + c * self.u[0], self.p[1] + c * self.u[1])

    def intersect(self, other: Line) -> Point | None:
        """Intersection point with ``other``, or ``None`` if the lines are parallel."""
        m00 = self.u[0]
        m01 = -other.u[0]
        m10 = self.u[1]
        m11 = -other.u[1]

        det = m00 * m11 - m01 * m10
        if abs(det) < _PARALLEL_EPS:
            return None

        i00 = m11 / det
        i01 = -m01 / det
        b00 = other.p[0] - self.p[0]
        b10 = other.p[1] - self.p[1]
        return self.point_at(i00 * b00 + i01 * b10)


@dataclass(frozen=True)
class Segment:
    """A line segment from ``line.p`` to ``p1``."""

    line: Line
    p1: Point

    @classmethod
    def from_points(cls, p0: Sequence[float], p1: Sequence[float]) -> Segment:
        """The segment joining two distinct points."""
        return cls(Line.from_points(p0, p1), (float(p1[0]), float(p1[1])))

    @property
    def p0(self) -> Point:
        return self.line.p

    def _contains_coordinate(self, point: Sequence[float]) -> bool:
        a = self.line.coordinate(self.line.p)
        b = self.line.coordinate(self.p1)
        return _between(self.line.coordinate(point), a, b)

    def closest_point(self, q: Sequence[float]) -> Point:
        """The point on the segment nearest to ``q``."""
        a = self.line.coordinate(self.line.p)
        b = self.line.coordinate(self.p1)
        c = self.line.coordinate(q)
        lo, hi = (a, b) if a < b else (b, a)
        return self.line.point_at(min(max(c, lo), hi))

    def intersect_segment(self, other: Segment) -> Point | None:
        """Intersection with another segment, or ``None`` if they do not meet."""
        point = self.line.intersect(other.line)
        if point is None:
            return None
        if not self._contains_coordinate(point):
            return None
        if not other._contains_coordinate(point):
            return None
        return point

    def intersect_line(self, line: Line) -> Point | None:
        """Intersection with an infinite line, or ``None`` if they do not meet."""
        point = self.line.intersect(line)
        if point is None or not self._contains_coordinate(point):
            return None
        return point