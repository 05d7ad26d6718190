"""Single-channel 8-bit images with row padding, plus simple drawing and filtering."""

from __future__ import annotations

import math
import os
from collections.abc import Sequence
from dataclasses import dataclass

__all__ = ["GrayImage", "Lut", "gaussian_kernel", "DEFAULT_ALIGNMENT"]

# Least common multiple of a 64-byte cache line and a 24-byte RGB vector stride.
DEFAULT_ALIGNMENT = 96


@dataclass(frozen=True)
class Lut:
    """Colour lookup by squared distance: ``values[int(dist2 * scale)]``.

    Distances whose index falls beyond the table are not drawn.
    """

    scale: float
    values: Sequence[int]

    @property
    def nvalues(self) -> int:
        return len(self.values)


def gaussian_kernel(sigma: float, ksz: int) -> list[int]:
    """An odd-length Gaussian kernel scaled to 8-bit weights summing to about 255."""
    if ksz <= 0 or ksz % 2 != 1:
        raise ValueError("kernel size must be a positive odd number")
    if sigma == 0:
        raise ValueError("sigma must be non-zero")
    half = ksz // 2
    values = [math.exp(-0.5 * ((i - half) / sigma) ** 2) for i in range(ksz)]
    total = sum(values)
    return [int(v / total * 255) & 0xFF for v in values]


def _check_kernel(kernel: Sequence[int]) -> list[int]:
    k = list(kernel)
    if len(k) % 2 != 1:
        raise ValueError("kernel size must be odd")
    if any(not 0 <= w <= 255 for w in k):
        raise ValueError("kernel weights must lie in 0..255")
    return k


def _convolve(x: Sequence[int], k: Sequence[int]) -> list[int]:
    """Convolve with an odd kernel; samples near the ends are copied through."""
    ksz = len(k)
    half = ksz // 2
    out = list(x)
    for i in range(len(x) - ksz):
        acc = sum(kj * xv for kj, xv in zip(k, x[i:i + ksz]))
        out[half + i] = (acc >> 8) & 0xFF
    return out


@dataclass
class GrayImage:
    """A grayscale image stored row by row; each row holds ``stride`` bytes."""

    width: int
    height: int
    stride: int
    buf: bytearray

    @classmethod
    def create(cls, width: int, height: int, alignment: int = DEFAULT_ALIGNMENT) -> GrayImage:
        """A black image whose row length is a multiple of ``alignment``."""
        if width < 0 or height < 0:
            raise ValueError("image dimensions must be non-negative")
        if alignment <= 0:
            raise ValueError("alignment must be positive")
        stride = width
        if stride % alignment:
            stride += alignment - stride % alignment
        return cls(width, height, stride, bytearray(height * stride))

    @classmethod
    def from_floats(cls, rows: Sequence[Sequence[float]]) -> GrayImage:
        """Convert rows of intensities in [0, 1] to 8-bit pixels."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        if any(len(row) != width for row in rows):
            raise ValueError("rows have unequal lengths")
        im = cls.create(width, height)
        for y, row in enumerate(rows):
            base = y * im.stride
            im.buf[base:base + width] = bytes(int(255 * v) & 0xFF for v in row)
        return im

    def copy(self) -> GrayImage:
        """An independent copy of this image."""
        return GrayImage(self.width, self.height, self.stride, bytearray(self.buf))

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _index(self, xy: tuple[int, int]) -> int:
        x, y = xy
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.stride + x

    def __getitem__(self, xy: tuple[int, int]) -> int:
        return self.buf[self._index(xy)]

    def __setitem__(self, xy: tuple[int, int], value: int) -> None:
        self.buf[self._index(xy)] = value

    def _row(self, y: int) -> bytearray:
        start = y * self.stride
        return self.buf[start:start + self.width]

    def write_pnm(self, path: str | os.PathLike) -> None:
        """Write the image as a binary PGM (P5) file."""
        with open(path, "wb") as f:
            f.write(f"P5\n{self.width} {self.height}\n255\n".encode("ascii"))
            for y in range(self.height):
                f.write(bytes(self._row(y)))

    def draw_circle(self, x0: float, y0: float, r: float, v: int) -> None:
        """Fill a disc; pixels outside the image are skipped.

        The scan box extends ``r * r`` pixels around the centre.
        """
        r2 = r * r
        value = v & 0xFF
        y = int(y0 - r2)
        while y <= y0 + r2:
            x = int(x0 - r2)
            while x <= x0 + r2:
                d = (x - x0) * (x - x0) + (y - y0) * (y - y0)
                if d <= r2 and self._inside(x, y):
                    self.buf[y * self.stride + x] = value
                x += 1
            y += 1

    def draw_annulus(self, x0: float, y0: float, r0: float, r1: float, v: int) -> None:
        """Fill the ring between radii ``r0`` and ``r1``; pixels outside are skipped."""
        r02 = r0 * r0
        r12 = r1 * r1
        if not r02 < r12:
            raise ValueError("inner radius must be smaller than outer radius")
        value = v & 0xFF
        y = int(y0 - r12)
        while y <= y0 + r12:
            x = int(x0 - r12)
            while x <= x0 + r12:
                d = (x - x0) * (x - x0) + (y - y0) * (y - y0)
                if r02 <= d <= r12 and self._inside(x, y):
                    self.buf[y * self.stride + x] = value
                x += 1
            y += 1

    def draw_line(
        self, x0: float, y0: float, x1: float, y1: float, v: int, width: int = 1
    ) -> None:
        """Draw a line one pixel wide, or two pixels wide when ``width`` > 1."""
        value = v & 0xFF
        dist = math.hypot(x1 - x0, y1 - y0)
        delta = 0.5 / dist if dist else math.inf
        f = 0.0
        while f <= 1:
            x = int(x1 + (x0 - x1) * f)
            y = int(y1 + (y0 - y1) * f)
            if self._inside(x, y):
                self.buf[y * self.stride + x] = value
                if width > 1:
                    for dx, dy in ((1, 0), (0, 1), (1, 1)):
                        if self._inside(x + dx, y + dy):
                            self.buf[(y + dy) * self.stride + x + dx] = value
            f += delta

    def darken(self) -> None:
        """Halve every pixel in place."""
        for y in range(self.height):
            start = y * self.stride
            self.buf[start:start + self.width] = bytes(p // 2 for p in self._row(y))

    def convolve_2d(self, kernel: Sequence[int]) -> None:
        """Apply a separable 8-bit kernel (weights / 256) along rows, then columns."""
        k = _check_kernel(kernel)
        for y in range(self.height):
            start = y * self.stride
            self.buf[start:start + self.width] = bytes(_convolve(self._row(y), k))
        end = self.stride * self.height
        for x in range(self.width):
            col = self.buf[x:end:self.stride]
            self.buf[x:end:self.stride] = bytes(_convolve(col, k))

    def gaussian_blur(self, sigma: float, ksz: int) -> None:
        """Blur in place with a Gaussian of odd size ``ksz``; ``sigma`` 0 does nothing."""
        if sigma == 0:
            return
        self.convolve_2d(gaussian_kernel(sigma, ksz))

    def rotate(self, rad: float, pad: int = 0) -> GrayImage:
        """A new image rotated by ``rad`` (counter-clockwise with y up).

        The output is large enough to hold the whole input; pixels with no
        source are set to ``pad``. The centres of both images coincide.
        """
        iwidth, iheight = self.width, self.height
        rad = -rad  # y points down
        c, s = math.cos(rad), math.sin(rad)
        icx, icy = iwidth / 2.0, iheight / 2.0

        corners = [(0, 0), (iwidth, 0), (iwidth, iheight), (0, iheight)]
        xs, ys = [], []
        for px, py in corners:
            px -= icx
            py -= icy
            xs.append(px * c - py * s)
            ys.append(px * s + py * c)

        owidth = math.ceil(max(xs) - min(xs))
        oheight = math.ceil(max(ys) - min(ys))
        out = GrayImage.create(owidth, oheight)
        fill = pad & 0xFF

        for oy in range(oheight):
            sy = oy - oheight / 2.0 + 0.5
            base = oy * out.stride
            for ox in range(owidth):
                sx = ox - owidth / 2.0 + 0.5
                ix = math.floor(sx * c + sy * s + icx)
                iy = math.floor(-sx * s + sy * c + icy)
                if 0 <= ix < iwidth and 0 <= iy < iheight:
                    out.buf[base + ox] = self.buf[iy * self.stride + ix]
                else:
                    out.buf[base + ox] = fill
        return out

    def decimate(self, factor: float) -> GrayImage:
        """A smaller image; supports 1.5 and integer factors 1, 2, 3, ..."""
        width, height = self.width, self.height
        buf, stride = self.buf, self.stride

        if factor == 1.5:
            swidth, sheight = width // 3 * 2, height // 3 * 2
            out = GrayImage.create(swidth, sheight)
            for sy, y in zip(range(0, sheight, 2), range(0, height, 3)):
                for sx, x in zip(range(0, swidth, 2), range(0, width, 3)):
                    a, b, c = buf[y * stride + x:y * stride + x + 3]
                    d, e, f = buf[(y + 1) * stride + x:(y + 1) * stride + x + 3]
                    g, h, i = buf[(y + 2) * stride + x:(y + 2) * stride + x + 3]
                    top = sy * out.stride + sx
                    bottom = top + out.stride
                    out.buf[top] = (4 * a + 2 * b + 2 * d + e) // 9
                    out.buf[top + 1] = (4 * c + 2 * b + 2 * f + e) // 9
                    out.buf[bottom] = (4 * g + 2 * d + 2 * h + e) // 9
                    out.buf[bottom + 1] = (4 * i + 2 * f + 2 * h + e) // 9
            return out

        step = int(factor)
        if step < 1:
            raise ValueError("decimation factor must be 1.5 or at least 1")
        swidth = 1 + (width - 1) // step if width else 0
        sheight = 1 + (height - 1) // step if height else 0
        out = GrayImage.create(swidth, sheight)
        for sy, y in enumerate(range(0, height, step)):
            row = buf[y * stride:y * stride + width:step]
            out.buf[sy * out.stride:sy * out.stride + len(row)] = row
        return out

    def fill_line_max(self, lut: Lut, xy0: Sequence[float], xy1: Sequence[float]) -> None:
        """Shade pixels near a segment from ``lut``, keeping the brighter value."""
        if lut.scale <= 0:
            raise ValueError("lookup scale must be positive")
        max_dist = math.sqrt((lut.nvalues - 1) / lut.scale)

        theta = math.atan2(xy1[1] - xy0[1], xy1[0] - xy0[0])
        v, u = math.sin(theta), math.cos(theta)

        def clamp(val: float, hi: int) -> int:
            return min(max(int(val), 0), hi)

        ix0 = clamp(min(xy0[0], xy1[0]) - max_dist, self.width - 1)
        ix1 = clamp(max(xy0[0], xy1[0]) + max_dist, self.width - 1)
        iy0 = clamp(min(xy0[1], xy1[1]) - max_dist, self.height - 1)
        iy1 = clamp(max(xy0[1], xy1[1]) + max_dist, self.height - 1)

        end_coord = (xy1[0] - xy0[0]) * u + (xy1[1] - xy0[1]) * v
        lo, hi = min(0.0, end_coord), max(0.0, end_coord)

        for iy in range(iy0, iy1 + 1):
            y = iy + 0.5
            for ix in range(ix0, ix1 + 1):
                x = ix + 0.5
                coord = (x - xy0[0]) * u + (y - xy0[1]) * v
                coord = min(max(coord, lo), hi)
                px = xy0[0] + coord * u
                py = xy0[1] + coord * v
                idx = int(((x - px) ** 2 + (y - py) ** 2) * lut.scale)
                if idx >= lut.nvalues:
                    continue
                pos = iy * self.stride + ix
                value = lut.values[idx] & 0xFF
                if value > self.buf[pos]:
                    self.buf[pos] = value