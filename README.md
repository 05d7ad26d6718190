# tagkit

Building blocks for fiducial tag work: vector and quaternion math, rigid-body
transforms, 2D lines and polygons, homography estimation and pose recovery,
and a small grayscale image type that can be saved as a PGM file.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `tagkit.vecmath`: vector operations (`add`, `subtract`, `dot`,
  `magnitude`, `normalize`, `cross_product`, ...) and conversions between
  quaternions `(w, x, y, z)`, angle-axis `(angle, x, y, z)`, roll/pitch/yaw
  and flat row-major 4x4 matrices (`quat_to_mat44`, `rpy_to_quat`,
  `quat_to_rpy`, `mat_to_quat`, `quat_slerp`, ...).
- `tagkit.rigid`: planar `(x, y, theta)` poses with and without covariance
  (`xyt_mul`, `xyt_inv`, `xyt_inv_mul`, `xytcov_mul`, `xytcov_inv`), 4x4
  rigid transforms (`mat44_identity`, `mat44_rotate_z`, `mat44_inv`,
  `elu_to_mat44`, ...), products of matrices given as lists of rows
  (`mat_mul`, `mat_mul_transpose_b`, `mat_transpose_mul`, `mat_vec`) and a
  3x3 symmetric positive-definite solver (`mat33_sym_solve`).
- `tagkit.lines`: `Line` and `Segment` with intersection and closest-point
  queries; intersections return a point or `None`.
- `tagkit.polygons`: point-in-polygon tests, convex hulls (gift wrapping),
  polygon intersection, containment and overlap, and scanline rasterisation.
  A polygon is a list of `(x, y)` points, implicitly closed.
- `tagkit.image_gray`: `GrayImage`, an 8-bit image with padded rows, with
  pixel access by `im[x, y]`, drawing (`draw_circle`, `draw_annulus`,
  `draw_line`, `fill_line_max` with a `Lut`), `darken`, `convolve_2d`,
  `gaussian_blur`, `rotate`, `decimate` and `write_pnm` (binary P5).
- `tagkit.homography`: `homography_compute` from point correspondences
  (`HomographyMethod.SVD` or `HomographyMethod.INVERSE`), and pose recovery
  with `homography_to_pose` and `homography_to_model_view`. These return
  numpy arrays.

## Example

```python
from tagkit.polygons import convex_hull, polygon_contains_point
from tagkit.homography import homography_compute, HomographyMethod

square = [(0, 0), (4, 0), (4, 4), (0, 4), (2, 2)]
hull = convex_hull(square)
print(polygon_contains_point(hull, (1, 1)))  # True

pairs = [(-1, -1, 10, 10), (1, -1, 30, 10), (1, 1, 30, 30), (-1, 1, 10, 30)]
h = homography_compute(pairs, HomographyMethod.SVD)
```

```python
from tagkit.image_gray import GrayImage

im = GrayImage.create(64, 48, 96)
im.draw_circle(32, 24, 4, 255)
im.gaussian_blur(1.0, 5)
im.write_pnm("out.pgm")
```

## What it does not do

- There is no colour image type; only single-channel 8-bit images.
- Images can be written as PGM files but not read from files of any format.
- There is no tag detector and no command-line program; the package is a
  library of the pieces listed above.