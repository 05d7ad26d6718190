"""Planar poses, rigid-body 4x4 transforms and small dense matrix helpers.

A planar pose ``xyt`` is ``(x, y, theta)``. Its covariance is a flat,
row-major 3x3 list of 9 floats. A 4x4 transform is a flat, row-major list
of 16 floats that maps points as ``p' = M p``. The general matrix helpers
(``mat_add``, ``mat_mul`` and friends) take matrices as sequences of rows.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from tagkit.vecmath import cross_product, dot, normalize, quat_xyz_to_mat44, subtract

__all__ = [
    "xyt_to_mat44",
    "xyt_transform_xy",
    "mat44_transform_xyz",
    "mat44_rotate_vector",
    "mat44_to_xyt",
    "mat_to_xyz",
    "quat_xyz_to_xyt",
    "xyt_mul",
    "xyt_inv",
    "xyt_inv_mul",
    "xytcov_mul",
    "xytcov_inv",
    "mat_add",
    "mat_mul",
    "mat_mul_transpose_b",
    "mat_transpose_mul",
    "mat_mul3",
    "mat_vec",
    "mat44_identity",
    "mat44_translate",
    "mat44_scale",
    "mat44_rotate_x",
    "mat44_rotate_y",
    "mat44_rotate_z",
    "mat44_post_translate",
    "mat44_post_scale",
    "mat44_post_rotate_z",
    "mat44_inv",
    "mat44_inv_transform_xyz",
    "mat44_inv_rotate_vector",
    "elu_to_mat44",
    "mat33_chol",
    "mat33_lower_tri_inv",
    "mat33_sym_solve",
]

Vector = Sequence[float]
Matrix = Sequence[Sequence[float]]


def _require_len(v: Vector, n: int, what: str) -> None:
    if len(v) != n:
        raise ValueError(f"{what} must have {n} elements, got {len(v)}")


def _shape(m: Matrix) -> tuple[int, int]:
    rows = len(m)
    cols = len(m[0]) if rows else 0
    if any(len(row) != cols for row in m):
        raise ValueError("matrix rows have unequal lengths")
    return rows, cols


def _rows44(m: Vector) -> list[list[float]]:
    _require_len(m, 16, "matrix")
    return [list(m[4 * i:4 * i + 4]) for i in range(4)]


def _flat(rows: Matrix) -> list[float]:
    return [x for row in rows for x in row]


# ---------------------------------------------------------------- planar poses

def xyt_to_mat44(xyt: Vector) -> list[float]:
    """4x4 transform of a planar pose."""
    _require_len(xyt, 3, "xyt")
    s, c = math.sin(xyt[2]), math.cos(xyt[2])
    return [
        c, -s, 0.0, xyt[0],
        s, c, 0.0, xyt[1],
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]


def xyt_transform_xy(xyt: Vector, xy: Vector) -> list[float]:
    """Map a 2D point through a planar pose."""
    _require_len(xyt, 3, "xyt")
    _require_len(xy, 2, "xy")
    s, c = math.sin(xyt[2]), math.cos(xyt[2])
    return [c * xy[0] - s * xy[1] + xyt[0], s * xy[0] + c * xy[1] + xyt[1]]


def mat44_transform_xyz(m: Vector, xyz: Vector) -> list[float]:
    """Map a 3D point through a 4x4 transform."""
    _require_len(m, 16, "matrix")
    _require_len(xyz, 3, "xyz")
    return [
        m[4 * i] * xyz[0] + m[4 * i + 1] * xyz[1] + m[4 * i + 2] * xyz[2] + m[4 * i + 3]
        for i in range(3)
    ]


def mat44_rotate_vector(m: Vector, v: Vector) -> list[float]:
    """Apply only the upper 3x3 part of a 4x4 transform to ``v``."""
    _require_len(m, 16, "matrix")
    _require_len(v, 3, "vector")
    return [m[4 * i] * v[0] + m[4 * i + 1] * v[1] + m[4 * i + 2] * v[2] for i in range(3)]


def mat44_to_xyt(m: Vector) -> list[float]:
    """Planar pose (x, y, yaw) of a 4x4 transform."""
    _require_len(m, 16, "matrix")
    return [m[3], m[7], math.atan2(m[4], m[0])]


def mat_to_xyz(m: Vector) -> list[float]:
    """Translation part of a 4x4 transform."""
    _require_len(m, 16, "matrix")
    return [m[3], m[7], m[11]]


def quat_xyz_to_xyt(q: Vector, xyz: Vector | None) -> list[float]:
    """Planar pose of a rotation plus translation."""
    return mat44_to_xyt(quat_xyz_to_mat44(q, xyz))


def xyt_mul(xyta: Vector, xytb: Vector) -> list[float]:
    """Compose two planar poses: ``a * b``."""
    _require_len(xyta, 3, "xyta")
    _require_len(xytb, 3, "xytb")
    xa, ya, ta = xyta
    s, c = math.sin(ta), math.cos(ta)
    return [c * xytb[0] - s * xytb[1] + xa, s * xytb[0] + c * xytb[1] + ya, ta + xytb[2]]


def xyt_inv(xyt: Vector) -> list[float]:
    """Inverse of a planar pose."""
    _require_len(xyt, 3, "xyt")
    s, c = math.sin(xyt[2]), math.cos(xyt[2])
    return [-s * xyt[1] - c * xyt[0], -c * xyt[1] + s * xyt[0], -xyt[2]]


def xyt_inv_mul(xyta: Vector, xytb: Vector) -> list[float]:
    """Compose ``inv(a) * b``."""
    _require_len(xyta, 3, "xyta")
    _require_len(xytb, 3, "xytb")
    ca, sa = math.cos(xyta[2]), math.sin(xyta[2])
    dx = xytb[0] - xyta[0]
    dy = xytb[1] - xyta[1]
    return [ca * dx + sa * dy, -sa * dx + ca * dy, xytb[2] - xyta[2]]


def xytcov_mul(
    xyta: Vector, ca: Vector, xytb: Vector, cb: Vector
) -> tuple[list[float], list[float]]:
    """Compose two poses with covariances; returns ``(xyt, covariance)``."""
    _require_len(xyta, 3, "xyta")
    _require_len(xytb, 3, "xytb")
    _require_len(ca, 9, "covariance")
    _require_len(cb, 9, "covariance")
    xa, ya, ta = xyta
    xb, yb = xytb[0], xytb[1]
    sa, cs = math.sin(ta), math.cos(ta)

    p11, p12, p13, p22, p23, p33 = ca[0], ca[1], ca[2], ca[4], ca[5], ca[8]
    q11, q12, q13, q22, q23, q33 = cb[0], cb[1], cb[2], cb[4], cb[5], cb[8]

    ja13 = -sa * xb - cs * yb
    ja23 = cs * xb - sa * yb
    jb11, jb12, jb21, jb22 = cs, -sa, sa, cs

    c0 = (p33 * ja13 * ja13 + 2 * p13 * ja13 + q11 * jb11 * jb11
          + 2 * q12 * jb11 * jb12 + q22 * jb12 * jb12 + p11)
    c1 = (p12 + ja23 * (p13 + ja13 * p33) + ja13 * p23
          + jb21 * (jb11 * q11 + jb12 * q12) + jb22 * (jb11 * q12 + jb12 * q22))
    c2 = p13 + ja13 * p33 + jb11 * q13 + jb12 * q23
    c4 = (p33 * ja23 * ja23 + 2 * p23 * ja23 + q11 * jb21 * jb21
          + 2 * q12 * jb21 * jb22 + q22 * jb22 * jb22 + p22)
    c5 = p23 + ja23 * p33 + jb21 * q13 + jb22 * q23
    c8 = p33 + q33

    xyt = [cs * xb - sa * yb + xa, sa * xb + cs * yb + ya, xyta[2] + xytb[2]]
    return xyt, [c0, c1, c2, c1, c4, c5, c2, c5, c8]


def xytcov_inv(xyt: Vector, cov: Vector) -> tuple[list[float], list[float]]:
    """Invert a pose with covariance; returns ``(xyt, covariance)``."""
    _require_len(xyt, 3, "xyt")
    _require_len(cov, 9, "covariance")
    x, y, theta = xyt
    s, c = math.sin(theta), math.cos(theta)

    j11, j12, j13 = -c, -s, -c * y + s * x
    j21, j22, j23 = s, -c, s * y + c * x

    p11, p12, p13, p22, p23, p33 = cov[0], cov[1], cov[2], cov[4], cov[5], cov[8]

    c0 = (p11 * j11 * j11 + 2 * p12 * j11 * j12 + 2 * p13 * j11 * j13
          + p22 * j12 * j12 + 2 * p23 * j12 * j13 + p33 * j13 * j13)
    c1 = (j21 * (j11 * p11 + j12 * p12 + j13 * p13)
          + j22 * (j11 * p12 + j12 * p22 + j13 * p23)
          + j23 * (j11 * p13 + j12 * p23 + j13 * p33))
    c2 = -j11 * p13 - j12 * p23 - j13 * p33
    c4 = (p11 * j21 * j21 + 2 * p12 * j21 * j22 + 2 * p13 * j21 * j23
          + p22 * j22 * j22 + 2 * p23 * j22 * j23 + p33 * j23 * j23)
    c5 = -j21 * p13 - j22 * p23 - j23 * p33

    inv = [-s * y - c * x, -c * y + s * x, -theta]
    return inv, [c0, c1, c2, c1, c4, c5, c2, c5, p33]


# ------------------------------------------------------------ general matrices

def mat_add(a: Matrix, b: Matrix) -> list[list[float]]:
    """Element-wise sum of two matrices of the same shape."""
    if _shape(a) != _shape(b):
        raise ValueError("matrices must have the same shape")
    return [[x + y for x, y in zip(ra, rb)] for ra, rb in zip(a, b)]


def mat_mul(a: Matrix, b: Matrix) -> list[list[float]]:
    """Matrix product ``a b``."""
    _, acols = _shape(a)
    brows, _ = _shape(b)
    if acols != brows:
        raise ValueError(f"cannot multiply: {acols} columns vs {brows} rows")
    columns = list(zip(*b))
    return [[sum(x * y for x, y in zip(row, col)) for col in columns] for row in a]


def mat_mul_transpose_b(a: Matrix, b: Matrix) -> list[list[float]]:
    """Matrix product ``a b^T``."""
    _, acols = _shape(a)
    _, bcols = _shape(b)
    if acols != bcols:
        raise ValueError(f"cannot multiply: {acols} columns vs {bcols} columns")
    return [[sum(x * y for x, y in zip(ra, rb)) for rb in b] for ra in a]


def mat_transpose_mul(a: Matrix, b: Matrix) -> list[list[float]]:
    """Matrix product ``a^T b``."""
    arows, _ = _shape(a)
    brows, _ = _shape(b)
    if arows != brows:
        raise ValueError(f"cannot multiply: {arows} rows vs {brows} rows")
    return mat_mul([list(col) for col in zip(*a)], b)


def mat_mul3(a: Matrix, b: Matrix, c: Matrix) -> list[list[float]]:
    """Matrix product ``a b c``."""
    return mat_mul(mat_mul(a, b), c)


def mat_vec(a: Matrix, b: Vector) -> list[float]:
    """Matrix-vector product ``a b``."""
    _, acols = _shape(a)
    if acols != len(b):
        raise ValueError(f"cannot multiply: {acols} columns vs vector of {len(b)}")
    return [sum(x * y for x, y in zip(row, b)) for row in a]


# ----------------------------------------------------------- 4x4 rigid bodies

def mat44_identity() -> list[float]:
    """The 4x4 identity."""
    return [1.0 if i % 5 == 0 else 0.0 for i in range(16)]


def mat44_translate(txyz: Vector) -> list[float]:
    """Pure translation."""
    _require_len(txyz, 3, "translation")
    m = mat44_identity()
    for i, t in enumerate(txyz):
        m[4 * i + 3] += t
    return m


def mat44_scale(sxyz: Vector) -> list[float]:
    """Axis-aligned scaling."""
    _require_len(sxyz, 3, "scale")
    m = mat44_identity()
    for i, s in enumerate(sxyz):
        m[5 * i] = s
    return m


def mat44_rotate_x(rad: float) -> list[float]:
    """Rotation about the x axis."""
    m = mat44_identity()
    s, c = math.sin(rad), math.cos(rad)
    m[5], m[6], m[9], m[10] = c, -s, s, c
    return m


def mat44_rotate_y(rad: float) -> list[float]:
    """Rotation about the y axis."""
    m = mat44_identity()
    s, c = math.sin(rad), math.cos(rad)
    m[0], m[2], m[8], m[10] = c, s, -s, c
    return m


def mat44_rotate_z(rad: float) -> list[float]:
    """Rotation about the z axis."""
    m = mat44_identity()
    s, c = math.sin(rad), math.cos(rad)
    m[0], m[1], m[4], m[5] = c, -s, s, c
    return m


def _mul44(a: Vector, b: Vector) -> list[float]:
    return _flat(mat_mul(_rows44(a), _rows44(b)))


def mat44_post_translate(m: Vector, txyz: Vector) -> list[float]:
    """Return ``m * translate(txyz)``."""
    return _mul44(m, mat44_translate(txyz))


def mat44_post_scale(m: Vector, sxyz: Vector) -> list[float]:
    """Return ``m * scale(sxyz)``."""
    return _mul44(m, mat44_scale(sxyz))


def mat44_post_rotate_z(m: Vector, rad: float) -> list[float]:
    """Return ``m * rotate_z(rad)``."""
    return _mul44(m, mat44_rotate_z(rad))


def mat44_inv(m: Vector) -> list[float]:
    """Inverse of a rigid-body (rotation plus translation) transform."""
    _require_len(m, 16, "matrix")
    out = [0.0] * 16
    for i in range(3):
        for j in range(3):
            out[4 * i + j] = m[4 * j + i]
    for i in range(3):
        out[4 * i + 3] = -sum(out[4 * i + j] * m[4 * j + 3] for j in range(3))
    out[15] = 1.0
    return out


def mat44_inv_transform_xyz(m: Vector, xyz: Vector) -> list[float]:
    """Map a point through the inverse of a rigid transform."""
    return mat44_transform_xyz(mat44_inv(m), xyz)


def mat44_inv_rotate_vector(m: Vector, v: Vector) -> list[float]:
    """Rotate a vector by the inverse rotation of a rigid transform."""
    return mat44_rotate_vector(mat44_inv(m), v)


def elu_to_mat44(eye: Vector, lookat: Vector, up: Vector) -> list[float]:
    """Camera pose from eye, look-at point and up direction.

    The camera looks along its -z axis with +y up; the result maps camera
    coordinates into world coordinates.
    """
    _require_len(eye, 3, "eye")
    _require_len(lookat, 3, "lookat")
    _require_len(up, 3, "up")
    f = normalize(subtract(lookat, eye))
    u0 = normalize(up)
    along = dot(f, u0)
    u0 = normalize([a - along * b for a, b in zip(u0, f)])

    s = cross_product(f, u0)
    u = cross_product(s, f)

    r = [
        s[0], s[1], s[2], 0.0,
        u[0], u[1], u[2], 0.0,
        -f[0], -f[1], -f[2], 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]
    t = mat44_translate([-eye[0], -eye[1], -eye[2]])
    return mat44_inv(_mul44(r, t))


# -------------------------------------------------------------- 3x3 symmetric

def mat33_chol(a: Vector) -> list[float]:
    """Lower-triangular Cholesky factor of a symmetric positive-definite 3x3."""
    _require_len(a, 9, "matrix")
    try:
        r0 = math.sqrt(a[0])
        r3 = a[1] / r0
        r6 = a[2] / r0
        r4 = math.sqrt(a[4] - r3 * r3)
        r7 = (a[5] - r3 * r6) / r4
        r8 = math.sqrt(a[8] - r6 * r6 - r7 * r7)
    except (ValueError, ZeroDivisionError) as exc:
        raise ValueError("matrix is not positive definite") from exc
    return [r0, 0.0, 0.0, r3, r4, 0.0, r6, r7, r8]


def mat33_lower_tri_inv(a: Vector) -> list[float]:
    """Inverse of a lower-triangular 3x3 matrix."""
    _require_len(a, 9, "matrix")
    try:
        r0 = 1 / a[0]
        r3 = -a[3] * r0 / a[4]
        r4 = 1 / a[4]
        r6 = (-a[6] * r0 - a[7] * r3) / a[8]
        r7 = -a[7] * r4 / a[8]
        r8 = 1 / a[8]
    except ZeroDivisionError as exc:
        raise ValueError("matrix is singular") from exc
    return [r0, 0.0, 0.0, r3, r4, 0.0, r6, r7, r8]


def mat33_sym_solve(a: Vector, b: Vector) -> list[float]:
    """Solve ``a x = b`` for a symmetric positive-definite 3x3 ``a``."""
    _require_len(b, 3, "vector")
    m = mat33_lower_tri_inv(mat33_chol(a))
    t0 = m[0] * b[0]
    t1 = m[3] * b[0] + m[4] * b[1]
    t2 = m[6] * b[0] + m[7] * b[1] + m[8] * b[2]
    return [
        m[0] * t0 + m[3] * t1 + m[6] * t2,
        m[4] * t1 + m[7] * t2,
        m[8] * t2,
    ]