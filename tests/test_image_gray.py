import math

import pytest

from tagkit.image_gray import DEFAULT_ALIGNMENT, GrayImage, Lut, gaussian_kernel


def _filled(width, height, value, alignment=DEFAULT_ALIGNMENT):
    im = GrayImage.create(width, height, alignment)
    for y in range(height):
        for x in range(width):
            im[x, y] = value
    return im


def _pixels(im):
    return [[im[x, y] for x in range(im.width)] for y in range(im.height)]


def test_create_default_alignment_pads_stride():
    im = GrayImage.create(10, 3)
    assert im.stride == 96
    assert len(im.buf) == 3 * 96
    assert all(b == 0 for b in im.buf)


def test_create_exact_and_next_multiple():
    assert GrayImage.create(96, 1).stride == 96
    assert GrayImage.create(97, 1).stride == 192


def test_create_alignment_one_is_tight():
    im = GrayImage.create(7, 2, 1)
    assert im.stride == 7


def test_create_rejects_bad_alignment():
    with pytest.raises(ValueError):
        GrayImage.create(4, 4, 0)


def test_set_get_round_trip_and_bounds():
    im = GrayImage.create(4, 3)
    im[3, 2] = 77
    assert im[3, 2] == 77
    with pytest.raises(IndexError):
        im[4, 0]
    with pytest.raises(IndexError):
        im[0, 3] = 1


def test_copy_is_independent():
    im = _filled(3, 3, 10)
    dup = im.copy()
    dup[1, 1] = 200
    assert im[1, 1] == 10
    assert dup[1, 1] == 200


def test_from_floats_maps_unit_range():
    im = GrayImage.from_floats([[0.0, 1.0], [1.0, 0.0]])
    assert (im.width, im.height) == (2, 2)
    assert _pixels(im) == [[0, 255], [255, 0]]


def test_from_floats_rejects_ragged_rows():
    with pytest.raises(ValueError):
        GrayImage.from_floats([[0.0, 1.0], [0.5]])


def test_write_pnm_header_and_rows(tmp_path):
    im = GrayImage.create(3, 2)
    values = [[1, 2, 3], [4, 5, 6]]
    for y, row in enumerate(values):
        for x, v in enumerate(row):
            im[x, y] = v
    path = tmp_path / "out.pgm"
    im.write_pnm(path)
    data = path.read_bytes()
    header = b"P5\n3 2\n255\n"
    assert data.startswith(header)
    assert data[len(header):] == bytes([1, 2, 3, 4, 5, 6])


def test_darken_halves_pixels():
    im = _filled(2, 2, 200)
    im[0, 0] = 255
    im.darken()
    assert im[1, 1] == 100
    assert im[0, 0] == 127


def test_draw_circle_sets_centre_and_clips():
    im = GrayImage.create(20, 20)
    im.draw_circle(10, 10, 2, 9)
    assert im[10, 10] == 9
    assert im[19, 19] == 0
    im.draw_circle(0, 0, 2, 5)
    assert im[0, 0] == 5


def test_draw_annulus_leaves_centre_untouched():
    im = GrayImage.create(40, 40)
    im.draw_annulus(20, 20, 2, 3, 7)
    assert im[20, 20] == 0
    assert im[20 + 5, 20] == 7


def test_draw_annulus_requires_ordered_radii():
    im = GrayImage.create(10, 10)
    with pytest.raises(ValueError):
        im.draw_annulus(5, 5, 3, 2, 1)


def test_draw_line_horizontal():
    im = GrayImage.create(8, 5)
    im.draw_line(0, 2, 5, 2, 42, 1)
    assert [im[x, 2] for x in range(6)] == [42] * 6
    assert im[6, 2] == 0
    assert all(im[x, 1] == 0 for x in range(8))


def test_draw_line_wide_marks_neighbours():
    im = GrayImage.create(8, 5)
    im.draw_line(0, 2, 5, 2, 42, 3)
    assert im[0, 3] == 42
    assert im[6, 3] == 42


def test_gaussian_kernel_symmetric_and_bounded():
    k = gaussian_kernel(1.0, 5)
    assert len(k) == 5
    assert k == k[::-1]
    assert sum(k) <= 255
    assert k[2] == max(k)


@pytest.mark.parametrize("sigma, ksz", [(1.0, 4), (1.0, 0), (0.0, 3)])
def test_gaussian_kernel_rejects_bad_arguments(sigma, ksz):
    with pytest.raises(ValueError):
        gaussian_kernel(sigma, ksz)


def test_convolve_2d_zero_kernel_keeps_edges():
    im = _filled(6, 6, 50)
    im.convolve_2d([0, 0, 0])
    assert im[0, 0] == 50
    assert im[4, 5] == 50
    assert im[0, 2] == 0
    assert im[2, 0] == 0
    assert im[2, 2] == 0


def test_convolve_2d_rejects_even_or_large_weights():
    im = _filled(4, 4, 1)
    with pytest.raises(ValueError):
        im.convolve_2d([1, 2])
    with pytest.raises(ValueError):
        im.convolve_2d([0, 300, 0])


def test_gaussian_blur_zero_sigma_is_noop():
    im = _filled(5, 5, 80)
    im[2, 2] = 3
    before = bytes(im.buf)
    im.gaussian_blur(0, 4)
    assert bytes(im.buf) == before


def test_gaussian_blur_uniform_never_brightens_and_keeps_corner():
    im = _filled(9, 9, 100)
    im.gaussian_blur(1.0, 3)
    pixels = _pixels(im)
    assert all(p <= 100 for row in pixels for p in row)
    assert im[0, 0] == 100


def test_decimate_integer_factor_samples_grid():
    im = GrayImage.create(5, 5)
    for y in range(5):
        for x in range(5):
            im[x, y] = 10 * y + x
    out = im.decimate(2)
    assert (out.width, out.height) == (3, 3)
    for sy in range(3):
        for sx in range(3):
            assert out[sx, sy] == im[2 * sx, 2 * sy]


def test_decimate_one_and_half_keeps_uniform():
    im = _filled(6, 6, 90)
    out = im.decimate(1.5)
    assert (out.width, out.height) == (4, 4)
    assert all(p == 90 for row in _pixels(out) for p in row)


def test_decimate_rejects_small_factor():
    with pytest.raises(ValueError):
        _filled(4, 4, 1).decimate(0.5)


def test_rotate_zero_is_identity():
    im = GrayImage.create(4, 3)
    for y in range(3):
        for x in range(4):
            im[x, y] = 10 * y + x
    out = im.rotate(0.0, 0)
    assert (out.width, out.height) == (4, 3)
    assert _pixels(out) == _pixels(im)


def test_rotate_quarter_turn_pads_corners():
    im = _filled(10, 10, 200)
    out = im.rotate(math.pi / 4, 7)
    assert out.width > 10 and out.height > 10
    assert out[0, 0] == 7
    assert out[out.width // 2, out.height // 2] == 200


def test_fill_line_max_uses_lut_by_distance():
    im = GrayImage.create(10, 6)
    im[3, 2] = 250
    lut = Lut(1.0, [200, 100])
    im.fill_line_max(lut, (0.5, 2.5), (5.5, 2.5))
    assert im[0, 2] == 200
    assert im[5, 2] == 200
    assert im[3, 2] == 250
    assert im[2, 1] == 100
    assert im[2, 3] == 100
    assert im[6, 2] == 100
    assert im[2, 4] == 0
    assert im[9, 2] == 0