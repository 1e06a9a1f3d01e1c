import pytest

from imagepro.geometry import (
    flip,
    mirror,
    rotate,
    zoom_in_bilinear,
    zoom_in_pixel_copy,
    zoom_out_average,
    zoom_out_mean_subsampling,
    zoom_out_subsampling,
)
from imagepro.image import Image
from imagepro.region import mean_filter


def ramp(width, height, depth=1):
    size = width * height * depth
    return Image(width, height, depth, bytearray(i % 256 for i in range(size)))


def solid(width, height, depth, value):
    return Image(width, height, depth, bytearray([value]) * (width * height * depth))


@pytest.mark.parametrize("depth", [1, 3])
def test_pixel_copy_dimensions_and_round_trip(depth):
    image = ramp(5, 4, depth)
    big = zoom_in_pixel_copy(image, 2, 3)
    assert (big.width, big.height, big.depth) == (10, 12, depth)
    assert zoom_out_subsampling(big, 2, 3).data == image.data


def test_pixel_copy_repeats_blocks():
    image = ramp(3, 2)
    big = zoom_in_pixel_copy(image, 2, 2)
    for y in range(big.height):
        for x in range(big.width):
            assert big.get(x, y) == image.get(x // 2, y // 2)


def test_pixel_copy_default_scales():
    big = zoom_in_pixel_copy(ramp(4, 4))
    assert (big.width, big.height) == (8, 12)


@pytest.mark.parametrize("scales", [(0, 2), (2, 0), (-1, 1)])
def test_invalid_integer_scales_rejected(scales):
    with pytest.raises(ValueError):
        zoom_in_pixel_copy(ramp(4, 4), *scales)
    with pytest.raises(ValueError):
        zoom_out_subsampling(ramp(4, 4), *scales)
    with pytest.raises(ValueError):
        zoom_out_average(ramp(4, 4), *scales)


def test_subsampling_too_small_image():
    with pytest.raises(ValueError):
        zoom_out_subsampling(ramp(1, 1), 2, 3)


@pytest.mark.parametrize("depth", [1, 3])
def test_bilinear_constant_image_stays_constant(depth):
    image = solid(4, 4, depth, 77)
    out = zoom_in_bilinear(image, 1.5, 2.0)
    assert (out.width, out.height) == (6, 8)
    assert set(out.data) == {77}


def test_bilinear_even_positions_hit_source_samples():
    image = ramp(4, 3)
    out = zoom_in_bilinear(image, 2.0, 2.0)
    assert (out.width, out.height) == (8, 6)
    for y in range(image.height):
        for x in range(image.width):
            assert out.get(2 * x, 2 * y) == image.get(x, y)


def test_bilinear_values_between_neighbours():
    image = ramp(4, 4)
    out = zoom_in_bilinear(image, 2.0, 2.0)
    for y in range(out.height):
        for x in range(out.width - 2):
            low = min(image.get(x // 2, y // 2), image.get(x // 2 + 1, y // 2))
            assert out.get(x, y) >= 0
            assert out.get(x, 2 * (y // 2)) >= low or x % 2 == 0


def test_bilinear_rejects_bad_scale():
    with pytest.raises(ValueError):
        zoom_in_bilinear(ramp(4, 4), 0, 1.5)
    with pytest.raises(ValueError):
        zoom_in_bilinear(ramp(2, 2), 0.1, 0.1)


def test_mean_subsampling_is_filter_then_subsample():
    image = ramp(9, 9, 3)
    expected = zoom_out_subsampling(mean_filter(image), 2, 3)
    result = zoom_out_mean_subsampling(image, 2, 3)
    assert result.data == expected.data
    assert (result.width, result.height) == (4, 3)


@pytest.mark.parametrize("depth", [1, 3])
def test_average_of_constant_image(depth):
    image = solid(5, 7, depth, 90)
    out = zoom_out_average(image, 2, 3)
    assert (out.width, out.height) == (3, 3)
    assert set(out.data) == {90}


def test_average_worked_example():
    image = Image(2, 3, 1, bytearray(range(6)))
    out = zoom_out_average(image, 2, 3)
    assert (out.width, out.height) == (2, 2)
    assert out.get(0, 0) == 2
    assert out.get(1, 0) == 0
    assert out.get(0, 1) == 0


@pytest.mark.parametrize("depth", [1, 3])
def test_rotate_zero_is_identity_for_square(depth):
    image = ramp(6, 6, depth)
    out = rotate(image, 0)
    assert (out.width, out.height) == (6, 6)
    assert out.data == image.data


@pytest.mark.parametrize("depth", [1, 3])
def test_rotate_45_fills_corners_white(depth):
    image = solid(20, 20, depth, 0)
    out = rotate(image, 45)
    assert out.width > image.width and out.height > image.height
    assert out.pixel(0, 0) == (255,) * depth
    assert out.pixel(out.width - 1, out.height - 1) == (255,) * depth
    assert out.pixel(out.width // 2, out.height // 2) == (0,) * depth


def test_rotate_keeps_depth():
    out = rotate(ramp(8, 6, 3), 30)
    assert out.depth == 3
    assert len(out.data) == out.width * out.height * 3


@pytest.mark.parametrize("depth", [1, 3])
def test_mirror_twice_is_identity(depth):
    image = ramp(5, 3, depth)
    assert mirror(mirror(image)).data == image.data


def test_mirror_moves_pixels():
    image = ramp(4, 2, 3)
    out = mirror(image)
    for y in range(2):
        for x in range(4):
            assert out.pixel(3 - x, y) == image.pixel(x, y)


@pytest.mark.parametrize("depth", [1, 3])
def test_flip_twice_is_identity(depth):
    image = ramp(3, 5, depth)
    assert flip(flip(image)).data == image.data


def test_flip_moves_rows():
    image = ramp(3, 4)
    out = flip(image)
    assert list(out.rows()) == list(reversed(list(image.rows())))


def test_transforms_leave_input_unchanged():
    image = ramp(6, 6)
    before = bytes(image.data)
    mirror(image)
    flip(image)
    rotate(image, 30)
    zoom_in_bilinear(image)
    assert bytes(image.data) == before