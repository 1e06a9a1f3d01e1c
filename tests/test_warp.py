import pytest

from imagepro.image import Image, ImageMismatchError
from imagepro.pixel import blend_images
from imagepro.warp import (
    DEFAULT_DEST_LINE,
    DEFAULT_SOURCE_LINE,
    ControlLine,
    control_lines_from_drag,
    morph,
    warp,
)


def _gradient(width, height, depth=1):
    data = bytearray((x * 7 + y * 3 + c * 11) % 256
                     for y in range(height) for x in range(width) for c in range(depth))
    return Image(width, height, depth, data)


def test_control_line_length():
    assert ControlLine(0, 0, 3, 4).length() == pytest.approx(5.0)


def test_default_lines_match_source():
    assert DEFAULT_SOURCE_LINE == ControlLine(100, 100, 150, 150)
    assert DEFAULT_DEST_LINE == ControlLine(100, 100, 200, 200)


def test_drag_lines_end_at_drag_points():
    source, dest = control_lines_from_drag((10, 20), (30, 50))
    assert (source.qx, source.qy) == (10, 20)
    assert (dest.qx, dest.qy) == (30, 50)
    assert (source.px, source.py) == (dest.px, dest.py)


def test_drag_anchor_lies_behind_start():
    source, _ = control_lines_from_drag((10, 20), (30, 50))
    assert source.px < 10
    assert source.py < 20


def test_drag_backwards_truncates_toward_zero():
    source, _ = control_lines_from_drag((5, 5), (2, 2))
    assert (source.px, source.py) == (4, 4)


def test_warp_keeps_uniform_image():
    image = Image(20, 20, 1, bytearray([77]) * 400)
    result = warp(image, ControlLine(5, 5, 10, 10), ControlLine(5, 5, 15, 12))
    assert result.data == image.data


def test_warp_preserves_size_and_uses_input_values():
    image = _gradient(16, 12)
    result = warp(image, ControlLine(4, 4, 8, 8), ControlLine(4, 4, 12, 10))
    assert (result.width, result.height, result.depth) == (16, 12, 1)
    assert set(result.data) <= set(image.data)


def test_warp_colour_copies_whole_pixels():
    image = _gradient(10, 10, 3)
    result = warp(image, ControlLine(2, 2, 5, 5), ControlLine(2, 2, 7, 6))
    source_pixels = {image.pixel(x, y) for y in range(10) for x in range(10)}
    for y in range(10):
        for x in range(10):
            assert result.pixel(x, y) in source_pixels


def test_warp_rejects_zero_length_line():
    image = _gradient(8, 8)
    with pytest.raises(ValueError):
        warp(image, ControlLine(3, 3, 3, 3), ControlLine(1, 1, 4, 4))


def test_morph_alpha_zero_and_one():
    first = _gradient(6, 5)
    second = Image(6, 5, 1, bytearray(reversed(first.data)))
    assert morph(first, second, 0.0).data == first.data
    assert morph(first, second, 1.0).data == second.data


def test_morph_half_matches_blend():
    first = _gradient(6, 5, 3)
    second = Image(6, 5, 3, bytearray(reversed(first.data)))
    assert morph(first, second).data == blend_images(first, second).data


def test_morph_mismatch_raises():
    with pytest.raises(ImageMismatchError):
        morph(_gradient(4, 4), _gradient(5, 4))