"""Vector, quaternion and rotation conversions.

Vectors are plain sequences of floats. Quaternions are ``(w, x, y, z)``.
Angle-axis values are ``(angle, x, y, z)``. A 4x4 matrix is a flat,
row-major list of 16 floats that maps points as ``p' = M p``. Roll, pitch
and yaw are applied in that order: ``rotZ(yaw) * rotY(pitch) * rotX(roll)``.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence

__all__ = [
    "add",
    "subtract",
    "scale",
    "dot",
    "distance",
    "squared_distance",
    "magnitude",
    "squared_magnitude",
    "normalize",
    "cross_product",
    "cross_matrix",
    "quat_rotate",
    "quat_multiply",
    "quat_inverse",
    "quat_to_angleaxis",
    "angleaxis_to_quat",
    "quat_to_mat44",
    "angleaxis_to_mat44",
    "quat_xyz_to_mat44",
    "rpy_to_quat",
    "quat_to_rpy",
    "rpy_to_mat44",
    "xyzrpy_to_mat44",
    "mat_to_quat",
    "quat_slerp",
]

Vector = Sequence[float]

_TWO_PI = 2.0 * math.pi


def _mod2pi(angle: float) -> float:
    """Wrap an angle into the interval (-pi, pi]."""
    wrapped = angle - _TWO_PI * math.floor(angle / _TWO_PI)
    if wrapped > math.pi:
        wrapped -= _TWO_PI
    return wrapped


def _pairs(a: Vector, b: Vector):
    if len(a) != len(b):
        raise ValueError(f"length mismatch: {len(a)} != {len(b)}")
    return zip(a, b)


def _require_len(v: Vector, n: int, what: str) -> None:
    if len(v) != n:
        raise ValueError(f"{what} must have {n} elements, got {len(v)}")


def add(a: Vector, b: Vector) -> list[float]:
    """Element-wise sum."""
    return [x + y for x, y in _pairs(a, b)]


def subtract(a: Vector, b: Vector) -> list[float]:
    """Element-wise difference ``a - b``."""
    return [x - y for x, y in _pairs(a, b)]


def scale(s: float, v: Vector) -> list[float]:
    """Multiply every element of ``v`` by ``s``."""
    return [s * x for x in v]


def dot(a: Vector, b: Vector) -> float:
    """Dot product."""
    return sum(x * y for x, y in _pairs(a, b))


def squared_distance(a: Vector, b: Vector) -> float:
    """Squared Euclidean distance between two points."""
    return sum((x - y) * (x - y) for x, y in _pairs(a, b))


def distance(a: Vector, b: Vector) -> float:
    """Euclidean distance between two points."""
    return math.sqrt(squared_distance(a, b))


def squared_magnitude(v: Vector) -> float:
    """Squared length of a vector."""
    return sum(x * x for x in v)


def magnitude(v: Vector) -> float:
    """Length of a vector."""
    return math.sqrt(squared_magnitude(v))


def normalize(v: Vector) -> list[float]:
    """Return ``v`` scaled to unit length."""
    mag = magnitude(v)
    if mag == 0:
        raise ValueError("cannot normalize a zero-length vector")
    return [x / mag for x in v]


def cross_product(v1: Vector, v2: Vector) -> list[float]:
    """Cross product of two 3-vectors."""
    _require_len(v1, 3, "v1")
    _require_len(v2, 3, "v2")
    return [
        v1[1] * v2[2] - v1[2] * v2[1],
        v1[2] * v2[0] - v1[0] * v2[2],
        v1[0] * v2[1] - v1[1] * v2[0],
    ]


def cross_matrix(v: Vector) -> list[float]:
    """Skew-symmetric 3x3 matrix ``V`` (row-major) with ``V w = v x w``."""
    _require_len(v, 3, "v")
    return [
        0.0, -v[2], v[1],
        v[2], 0.0, -v[0],
        -v[1], v[0], 0.0,
    ]


def quat_rotate(q: Vector, v: Vector) -> list[float]:
    """Rotate the 3-vector ``v`` by the unit quaternion ``q``."""
    _require_len(q, 4, "quaternion")
    _require_len(v, 3, "vector")
    t2 = q[0] * q[1]
    t3 = q[0] * q[2]
    t4 = q[0] * q[3]
    t5 = -q[1] * q[1]
    t6 = q[1] * q[2]
    t7 = q[1] * q[3]
    t8 = -q[2] * q[2]
    t9 = q[2] * q[3]
    t10 = -q[3] * q[3]
    return [
        2 * ((t8 + t10) * v[0] + (t6 - t4) * v[1] + (t3 + t7) * v[2]) + v[0],
        2 * ((t4 + t6) * v[0] + (t5 + t10) * v[1] + (t9 - t2) * v[2]) + v[1],
        2 * ((t7 - t3) * v[0] + (t2 + t9) * v[1] + (t5 + t8) * v[2]) + v[2],
    ]


def quat_multiply(a: Vector, b: Vector) -> list[float]:
    """Hamilton product ``a * b``."""
    _require_len(a, 4, "quaternion")
    _require_len(b, 4, "quaternion")
    return [
        a[0] * b[0] - a[1] * b[1] - a[2] * b[2] - a[3] * b[3],
        a[0] * b[1] + a[1] * b[0] + a[2] * b[3] - a[3] * b[2],
        a[0] * b[2] - a[1] * b[3] + a[2] * b[0] + a[3] * b[1],
        a[0] * b[3] + a[1] * b[2] - a[2] * b[1] + a[3] * b[0],
    ]


def quat_inverse(q: Vector) -> list[float]:
    """Conjugate of ``q`` divided by its magnitude."""
    _require_len(q, 4, "quaternion")
    mag = magnitude(q)
    if mag == 0:
        raise ValueError("cannot invert a zero quaternion")
    return [q[0] / mag, -q[1] / mag, -q[2] / mag, -q[3] / mag]


def quat_to_angleaxis(q: Vector) -> list[float]:
    """Convert a quaternion to ``(angle, x, y, z)`` with angle in (-pi, pi]."""
    _require_len(q, 4, "quaternion")
    qn = normalize(q)
    mag = magnitude(qn[1:])
    angle = _mod2pi(2 * math.atan2(mag, qn[0]))
    if mag != 0:
        return [angle, qn[1] / mag, qn[2] / mag, qn[3] / mag]
    return [angle, 1.0, 0.0, 0.0]


def angleaxis_to_quat(aa: Vector) -> list[float]:
    """Convert ``(angle, x, y, z)`` to a unit quaternion."""
    _require_len(aa, 4, "angle-axis")
    half = aa[0] / 2.0
    s = math.sin(half)
    axis = normalize(aa[1:])
    return [math.cos(half), s * axis[0], s * axis[1], s * axis[2]]


def quat_to_mat44(q: Vector) -> list[float]:
    """Rotation matrix of a quaternion as a 4x4 rigid transform."""
    _require_len(q, 4, "quaternion")
    w, x, y, z = q
    return [
        w * w + x * x - y * y - z * z, 2 * x * y - 2 * w * z, 2 * x * z + 2 * w * y, 0.0,
        2 * x * y + 2 * w * z, w * w - x * x + y * y - z * z, 2 * y * z - 2 * w * x, 0.0,
        2 * x * z - 2 * w * y, 2 * y * z + 2 * w * x, w * w - x * x - y * y + z * z, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]


def angleaxis_to_mat44(aa: Vector) -> list[float]:
    """4x4 rotation matrix for an angle-axis rotation."""
    return quat_to_mat44(angleaxis_to_quat(aa))


def quat_xyz_to_mat44(q: Vector, xyz: Vector | None) -> list[float]:
    """4x4 transform from a rotation and an optional translation."""
    m = quat_to_mat44(q)
    if xyz is not None:
        _require_len(xyz, 3, "translation")
        m[3], m[7], m[11] = xyz[0], xyz[1], xyz[2]
    return m


def rpy_to_quat(rpy: Vector) -> list[float]:
    """Convert roll, pitch, yaw to a quaternion."""
    _require_len(rpy, 3, "rpy")
    roll, pitch, yaw = rpy
    sr, cr = math.sin(roll / 2), math.cos(roll / 2)
    sp, cp = math.sin(pitch / 2), math.cos(pitch / 2)
    sy, cy = math.sin(yaw / 2), math.cos(yaw / 2)
    return [
        cr * cp * cy + sr * sp * sy,
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ]


def quat_to_rpy(q: Vector) -> list[float]:
    """Convert a unit quaternion to roll, pitch, yaw."""
    _require_len(q, 4, "quaternion")
    qr, qx, qy, qz = q
    disc = qr * qy - qx * qz
    eps = sys.float_info.epsilon

    if abs(disc + 0.5) < eps:
        return [0.0, -math.pi / 2, 2 * math.atan2(qx, qr)]
    if abs(disc - 0.5) < eps:
        return [0.0, math.pi / 2, -2 * math.atan2(qx, qr)]

    roll = math.atan2(2 * (qr * qx + qy * qz), 1 - 2 * (qx * qx + qy * qy))
    pitch = math.asin(2 * disc)
    yaw = math.atan2(2 * (qr * qz + qx * qy), 1 - 2 * (qy * qy + qz * qz))
    return [roll, pitch, yaw]


def rpy_to_mat44(rpy: Vector) -> list[float]:
    """4x4 rotation matrix for roll, pitch, yaw."""
    return quat_to_mat44(rpy_to_quat(rpy))


def xyzrpy_to_mat44(xyzrpy: Vector) -> list[float]:
    """4x4 transform from ``(x, y, z, roll, pitch, yaw)``."""
    _require_len(xyzrpy, 6, "xyzrpy")
    m = rpy_to_mat44(xyzrpy[3:])
    m[3], m[7], m[11] = xyzrpy[0], xyzrpy[1], xyzrpy[2]
    return m


def mat_to_quat(m: Vector) -> list[float]:
    """Unit quaternion from the rotation part of a 4x4 matrix."""
    _require_len(m, 16, "matrix")
    trace = m[0] + m[5] + m[10] + 1.0

    if trace > 0.0000001:
        s = math.sqrt(trace) * 2
        q = [0.25 * s, (m[9] - m[6]) / s, (m[2] - m[8]) / s, (m[4] - m[1]) / s]
    elif m[0] > m[5] and m[0] > m[10]:
        s = math.sqrt(1.0 + m[0] - m[5] - m[10]) * 2
        q = [(m[9] - m[6]) / s, 0.25 * s, (m[4] + m[1]) / s, (m[2] + m[8]) / s]
    elif m[5] > m[10]:
        s = math.sqrt(1.0 + m[5] - m[0] - m[10]) * 2
        q = [(m[2] - m[8]) / s, (m[4] + m[1]) / s, 0.25 * s, (m[9] + m[6]) / s]
    else:
        s = math.sqrt(1.0 + m[10] - m[0] - m[5])
        q = [(m[4] - m[1]) / s, (m[2] + m[8]) / s, (m[9] + m[6]) / s, 0.25 * s]

    return normalize(q)


def quat_slerp(q0: Vector, q1: Vector, w: float) -> list[float]:
    """Interpolate between two quaternions; ``w`` = 0 gives ``q0``."""
    _require_len(q0, 4, "quaternion")
    _require_len(q1, 4, "quaternion")
    d = dot(q0, q1)
    target = list(q1)

    if d < 0:
        # Take the short way round; the rotation is unchanged.
        d = -d
        target = [-x for x in target]

    if d > 0.95:
        return [a * (1 - w) + b * w for a, b in zip(q0, target)]

    angle = math.acos(d)
    w0 = math.sin(angle * (1 - w))
    w1 = math.sin(angle * w)
    return normalize([a * w0 + b * w1 for a, b in zip(q0, target)])