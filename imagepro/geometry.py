"""Geometric transforms: zooming, rotation, mirroring and flipping."""

from __future__ import annotations

import math
import struct

from .image import Image
from .region import mean_filter

PI = 3.1415926521
DEFAULT_ZOOM_IN = (2, 3)
DEFAULT_BILINEAR = (1.5, 1.3)
DEFAULT_ZOOM_OUT = (2, 3)
DEFAULT_ANGLE = 30
OUTSIDE_VALUE = 255

_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _clamp(value: int) -> int:
    return 0 if value < 0 else 255 if value > 255 else value


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _check_int_scales(scale_x: int, scale_y: int) -> None:
    if int(scale_x) != scale_x or int(scale_y) != scale_y:
        raise ValueError("scale factors must be whole numbers")
    if scale_x < 1 or scale_y < 1:
        raise ValueError("scale factors must be at least 1")


def _pixels(row: bytes, depth: int) -> list[bytes]:
    return [row[i:i + depth] for i in range(0, len(row), depth)]


def zoom_in_pixel_copy(image: Image, scale_x: int = 2, scale_y: int = 3) -> Image:
    """Enlarge by whole factors, repeating each pixel in a block."""
    _check_int_scales(scale_x, scale_y)
    out_rows = []
    for row in image.rows():
        enlarged = b"".join(pixel * scale_x for pixel in _pixels(row, image.depth))
        out_rows.extend([enlarged] * scale_y)
    return Image(
        image.width * scale_x,
        image.height * scale_y,
        image.depth,
        bytearray(b"".join(out_rows)),
    )


def _lerp(weight: float, first: int, second: int) -> float:
    """Single-precision linear interpolation between two samples."""
    keep = _f32(1.0 - weight)
    return _f32(_f32(keep * first) + _f32(weight * second))


def _bilinear_axis(size: int, out_size: int, scale: float) -> list[tuple[int, int, float]]:
    """For each output coordinate: lower source index, upper index, fraction."""
    samples = []
    for pos in range(out_size):
        source = _f32(_f32(float(pos)) / scale)
        lower = int(source)
        fraction = _f32(source - lower)
        samples.append((min(lower, size - 1), min(lower + 1, size - 1), fraction))
    return samples


def zoom_in_bilinear(image: Image, scale_x: float = 1.5, scale_y: float = 1.3) -> Image:
    """Resize with bilinear interpolation, computed in single precision."""
    if scale_x <= 0 or scale_y <= 0:
        raise ValueError("scale factors must be positive")
    sx, sy = _f32(scale_x), _f32(scale_y)
    out_width = int(_f32(_f32(float(image.width)) * sx))
    out_height = int(_f32(_f32(float(image.height)) * sy))
    if out_width < 1 or out_height < 1:
        raise ValueError("the scaled image would have no pixels")

    columns = _bilinear_axis(image.width, out_width, sx)
    lines = _bilinear_axis(image.height, out_height, sy)
    src, depth, stride = image.data, image.depth, image.stride
    out = bytearray()
    for top, bottom, beta in lines:
        top_row, bottom_row = top * stride, bottom * stride
        for left, right, alpha in columns:
            for channel in range(depth):
                lo = left * depth + channel
                hi = right * depth + channel
                upper = int(_lerp(alpha, src[top_row + lo], src[top_row + hi]))
                lower = int(_lerp(alpha, src[bottom_row + lo], src[bottom_row + hi]))
                out.append(_clamp(int(_lerp(beta, upper, lower))))
    return Image(out_width, out_height, depth, out)


def zoom_out_subsampling(image: Image, scale_x: int = 2, scale_y: int = 3) -> Image:
    """Shrink by whole factors, keeping the top-left pixel of each block."""
    _check_int_scales(scale_x, scale_y)
    out_width = image.width // scale_x
    out_height = image.height // scale_y
    if out_width < 1 or out_height < 1:
        raise ValueError("the image is smaller than one block")
    rows = list(image.rows())[::scale_y][:out_height]
    data = b"".join(
        b"".join(_pixels(row, image.depth)[::scale_x][:out_width]) for row in rows
    )
    return Image(out_width, out_height, image.depth, bytearray(data))


def zoom_out_mean_subsampling(image: Image, scale_x: int = 2, scale_y: int = 3) -> Image:
    """Blur with a 3x3 mean filter, then subsample."""
    return zoom_out_subsampling(mean_filter(image), scale_x, scale_y)


def zoom_out_average(image: Image, scale_x: int = 2, scale_y: int = 3) -> Image:
    """Shrink by whole factors, replacing each block by its integer mean.

    The result has one extra column and row; blocks reaching past the edge
    reuse the last column or row. Cells that no block maps to stay 0.
    """
    _check_int_scales(scale_x, scale_y)
    width, height, depth, stride = image.width, image.height, image.depth, image.stride
    out = Image.blank(width // scale_x + 1, height // scale_y + 1, depth)
    src = image.data
    area = scale_x * scale_y
    for top in range(0, height, scale_y):
        row_offsets = [min(top + j, height - 1) * stride for j in range(scale_y)]
        for left in range(0, width, scale_x):
            col_offsets = [min(left + i, width - 1) * depth for i in range(scale_x)]
            for channel in range(depth):
                total = sum(
                    src[r + c + channel] for r in row_offsets for c in col_offsets
                )
                out.set(left // scale_x, top // scale_y, channel, total // area)
    return out


def rotate(image: Image, angle: int = DEFAULT_ANGLE) -> Image:
    """Rotate about the centre by ``angle`` degrees, counter-clockwise if positive.

    The canvas grows to hold the rotated image; uncovered pixels are white.
    """
    radian = _f32(PI / 180 * angle)
    cos_r, sin_r = math.cos(radian), math.sin(radian)
    width, height, depth = image.width, image.height, image.depth
    out_width = int(
        height * abs(math.cos(PI / 2 - radian)) + width * abs(cos_r)
    )
    out_height = int(
        height * abs(cos_r) + width * abs(math.cos(PI / 2 - radian))
    )
    if out_width < 1 or out_height < 1:
        raise ValueError("the rotated image would have no pixels")

    cx, cy = width // 2, height // 2
    last_y = height - 1
    xdiff = _trunc_div(out_width - width, 2)
    ydiff = _trunc_div(out_height - height, 2)

    src, stride = image.data, image.stride
    white = bytes([OUTSIDE_VALUE]) * depth
    out = bytearray()
    for y in range(-ydiff, out_height - ydiff):
        flipped = (last_y - y) - cy
        for x in range(-xdiff, out_width - xdiff):
            x_source = int(flipped * sin_r + (x - cy) * cos_r + cx)
            y_source = int(last_y - (flipped * cos_r - (x - cx) * sin_r + cy))
            if 0 <= x_source < width and 0 <= y_source < height:
                start = y_source * stride + x_source * depth
                out += src[start:start + depth]
            else:
                out += white
    return Image(out_width, out_height, depth, out)


def mirror(image: Image) -> Image:
    """Reverse the order of pixels in every row."""
    data = b"".join(
        b"".join(reversed(_pixels(row, image.depth))) for row in image.rows()
    )
    return Image(image.width, image.height, image.depth, bytearray(data))


def flip(image: Image) -> Image:
    """Reverse the order of the rows."""
    data = b"".join(reversed(list(image.rows())))
    return Image(image.width, image.height, image.depth, bytearray(data))