"""Planar homographies and recovery of camera pose from them.

A homography ``H`` is a 3x3 matrix that maps a point ``x`` on a plane to an
image point ``y = H x`` in homogeneous coordinates. Poses come back as 4x4
rigid transforms whose rotation columns are unit length.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence

import numpy as np

__all__ = [
    "HomographyMethod",
    "homography_compute",
    "homography_to_pose",
    "homography_to_model_view",
    "quat_to_matrix",
]


class HomographyMethod(enum.IntEnum):
    """How the null vector of the normal equations is found."""

    SVD = 0
    INVERSE = 1


def _as_matrix(h, rows: int, cols: int, what: str) -> np.ndarray:
    m = np.asarray(h, dtype=float)
    if m.shape != (rows, cols):
        raise ValueError(f"{what} must be {rows}x{cols}, got shape {m.shape}")
    return m


def homography_compute(
    correspondences: Sequence[Sequence[float]],
    method: HomographyMethod = HomographyMethod.SVD,
) -> np.ndarray:
    """Fit ``H`` with ``y = H x`` from rows ``(x0, x1, y0, y1)``.

    ``SVD`` is slower but more accurate; ``INVERSE`` takes the first column
    of the inverse of the (nearly singular) normal matrix.
    """
    c = np.asarray(correspondences, dtype=float)
    if c.ndim != 2 or c.shape[1] != 4:
        raise ValueError("correspondences must be a sequence of 4-element rows")
    if len(c) == 0:
        raise ValueError("at least one correspondence is needed")

    # Centring both point sets gives a better conditioned system.
    x_cx, x_cy, y_cx, y_cy = c.mean(axis=0)
    wx = c[:, 0] - x_cx
    wy = c[:, 1] - x_cy
    ix = c[:, 2] - y_cx
    iy = c[:, 3] - y_cy
    zero = np.zeros_like(wx)
    one = np.ones_like(wx)

    rows = np.concatenate([
        np.column_stack([zero, zero, zero, -wx, -wy, -one, wx * iy, wy * iy, iy]),
        np.column_stack([wx, wy, one, zero, zero, zero, -wx * ix, -wy * ix, -ix]),
        np.column_stack([-wx * iy, -wy * iy, -iy, wx * ix, wy * ix, ix, zero, zero, zero]),
    ])
    a = rows.T @ rows

    if HomographyMethod(method) is HomographyMethod.INVERSE:
        try:
            ainv = np.linalg.inv(a)
        except np.linalg.LinAlgError as exc:
            raise ValueError("normal matrix cannot be inverted") from exc
        column = ainv[:, 0]
        h = (column / math.sqrt(float(np.sum(column * column)))).reshape(3, 3)
    else:
        u, _, _ = np.linalg.svd(a)
        h = u[:, 8].reshape(3, 3)

    tx = np.identity(3)
    tx[0, 2] = -x_cx
    tx[1, 2] = -x_cy
    ty = np.identity(3)
    ty[0, 2] = y_cx
    ty[1, 2] = y_cy
    return ty @ h @ tx


def _scaled_columns(
    r00: float, r01: float, tx: float,
    r10: float, r11: float, ty: float,
    r20: float, r21: float, tz: float,
) -> np.ndarray:
    """Scale so the rotation columns are unit length and the tag lies at z < 0."""
    length1 = math.sqrt(r00 * r00 + r10 * r10 + r20 * r20)
    length2 = math.sqrt(r01 * r01 + r11 * r11 + r21 * r21)
    product = length1 * length2
    if product == 0:
        raise ValueError("homography is degenerate")
    s = 1.0 / math.sqrt(product)
    if tz > 0:
        s = -s
    return s * np.array([
        [r00, r01, tx],
        [r10, r11, ty],
        [r20, r21, tz],
    ])


def _assemble(cols: np.ndarray, rotation: np.ndarray | None = None) -> np.ndarray:
    r0, r1, t = cols[:, 0], cols[:, 1], cols[:, 2]
    if rotation is None:
        rotation = np.column_stack([r0, r1, np.cross(r0, r1)])
    out = np.identity(4)
    out[:3, :3] = rotation
    out[:3, 3] = t
    return out


def homography_to_pose(h, fx: float, fy: float, cx: float, cy: float) -> np.ndarray:
    """Recover the 4x4 tag pose from ``H`` and pinhole intrinsics.

    The projection is assumed to be ``[[fx, 0, cx], [0, fy, cy], [0, 0, 1]]``
    and the camera looks along -z.
    """
    m = _as_matrix(h, 3, 3, "homography")
    r20, r21, tz = m[2]
    cols = _scaled_columns(
        (m[0, 0] - cx * r20) / fx, (m[0, 1] - cx * r21) / fx, (m[0, 2] - cx * tz) / fx,
        (m[1, 0] - cy * r20) / fy, (m[1, 1] - cy * r21) / fy, (m[1, 2] - cy * tz) / fy,
        r20, r21, tz,
    )
    r0, r1 = cols[:, 0], cols[:, 1]
    approx = np.column_stack([r0, r1, np.cross(r0, r1)])
    # Polar decomposition: the nearest proper rotation.
    u, _, vt = np.linalg.svd(approx)
    return _assemble(cols, u @ vt)


def homography_to_model_view(
    h, f: float, g: float, a: float, b: float, c: float, d: float
) -> np.ndarray:
    """Recover the model-view matrix for a frustum-style projection.

    The projection is ``[[f, 0, a, 0], [0, g, b, 0], [0, 0, c, d], [0, 0, -1, 0]]``;
    ``c`` and ``d`` do not affect the result.
    """
    m = _as_matrix(h, 3, 3, "homography")
    r20, r21, tz = -m[2]
    cols = _scaled_columns(
        (m[0, 0] - a * r20) / f, (m[0, 1] - a * r21) / f, (m[0, 2] - a * tz) / f,
        (m[1, 0] - b * r20) / g, (m[1, 1] - b * r21) / g, (m[1, 2] - b * tz) / g,
        r20, r21, tz,
    )
    return _assemble(cols)


def quat_to_matrix(q: Sequence[float], m: np.ndarray) -> np.ndarray:
    """Write the rotation of quaternion ``(w, x, y, z)`` into the upper 3x3 of ``m``.

    Other elements of ``m`` are left alone; ``m`` is returned.
    """
    if len(q) != 4:
        raise ValueError(f"quaternion must have 4 elements, got {len(q)}")
    if m.ndim != 2 or m.shape[0] < 3 or m.shape[1] < 3:
        raise ValueError("matrix must be at least 3x3")
    w, x, y, z = q
    m[:3, :3] = [
        [w * w + x * x - y * y - z * z, 2 * x * y - 2 * w * z, 2 * x * z + 2 * w * y],
        [2 * x * y + 2 * w * z, w * w - x * x + y * y - z * z, 2 * y * z - 2 * w * x],
        [2 * x * z - 2 * w * y, 2 * y * z + 2 * w * x, w * w - x * x - y * y + z * z],
    ]
    return m