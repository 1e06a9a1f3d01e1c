"""Neighbourhood filters: 3x3 convolution, edge detection and median filtering."""

from __future__ import annotations

import math
import struct
from typing import Callable, Iterator, Sequence

from .image import Image, ImageMismatchError

Kernel = Sequence[Sequence[float]]

MEAN_KERNEL: Kernel = ((1 / 9.0,) * 3,) * 3
SHARPEN_KERNEL: Kernel = ((0, -1, 0), (-1, 5, -1), (0, -1, 0))
EMBOSS_KERNEL: Kernel = ((-1, 0, 0), (0, 0, 0), (0, 0, 1))
PREWITT_H: Kernel = ((-1, -1, -1), (0, 0, 0), (1, 1, 1))
PREWITT_V: Kernel = ((1, 0, -1), (1, 0, -1), (1, 0, -1))
ROBERTS_H: Kernel = ((-1, 0, 0), (0, 1, 0), (0, 0, 0))
ROBERTS_V: Kernel = ((0, 0, -1), (0, 1, 0), (0, 0, 0))
SOBEL_H: Kernel = ((-1, -2, -1), (0, 0, 0), (1, 2, 1))
SOBEL_V: Kernel = ((1, 0, -1), (2, 0, -2), (1, 0, -1))

EMBOSS_BIAS = 128
EDGE_BIAS = 128

_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _clamp(value: int) -> int:
    return 0 if value < 0 else 255 if value > 255 else value


def _weights(kernel: Kernel) -> list[float]:
    rows = [list(row) for row in kernel]
    if len(rows) != 3 or any(len(row) != 3 for row in rows):
        raise ValueError("kernel must be 3x3")
    return [_f32(float(weight)) for row in rows for weight in row]


def _neighbour_offsets(image: Image) -> list[int]:
    """Data offsets of the 3x3 neighbourhood, top row first, left to right."""
    stride, depth = image.stride, image.depth
    return [dy * stride + dx * depth for dy in (-1, 0, 1) for dx in (-1, 0, 1)]


def _interior(image: Image) -> Iterator[int]:
    """Yield the offset of every pixel that has a full 3x3 neighbourhood."""
    stride, depth = image.stride, image.depth
    for y in range(1, image.height - 1):
        for x in range(1, image.width - 1):
            yield y * stride + x * depth


def _target(image: Image, base: Image | None) -> Image:
    if base is None:
        return image.copy()
    if (base.width, base.height, base.depth) != (image.width, image.height, image.depth):
        raise ImageMismatchError("base image differs in width, height or colour depth")
    return base.copy()


def _filled(image: Image, value: int) -> Image:
    return Image(image.width, image.height, image.depth, bytearray([value]) * len(image.data))


def _rank_filter(image: Image, choose: Callable[[list[int]], int]) -> Image:
    """Replace each interior channel value by a choice from its neighbourhood."""
    out = image.copy()
    src, dst = image.data, out.data
    offsets = _neighbour_offsets(image)
    for pos in _interior(image):
        for channel in range(image.depth):
            p = pos + channel
            dst[p] = choose([src[p + o] for o in offsets])
    return out


def convolve(image: Image, kernel: Kernel, bias: int = 0, base: Image | None = None) -> Image:
    """Apply a 3x3 kernel to every channel of the interior pixels.

    Weights are single-precision and the running sum is truncated to an
    integer after each tap; the bias is added before clamping to 0..255.
    Border pixels are taken from ``base``, or from the input when omitted.
    """
    weights = _weights(kernel)
    out = _target(image, base)
    src, dst = image.data, out.data
    taps = list(zip(_neighbour_offsets(image), weights))
    integral = all(weight.is_integer() for weight in weights)
    int_taps = [(offset, int(weight)) for offset, weight in taps if weight]
    for pos in _interior(image):
        for channel in range(image.depth):
            p = pos + channel
            if integral:
                total = sum(src[p + offset] * weight for offset, weight in int_taps)
            else:
                total = 0
                for offset, weight in taps:
                    total = int(_f32(_f32(total) + _f32(src[p + offset] * weight)))
            dst[p] = _clamp(total + bias)
    return out


def mean_filter(image: Image) -> Image:
    """Blur with a 3x3 box kernel."""
    return convolve(image, MEAN_KERNEL, 0)


def sharpen(image: Image) -> Image:
    """Sharpen with a 3x3 Laplacian-style kernel."""
    return convolve(image, SHARPEN_KERNEL, 0)


def emboss(image: Image) -> Image:
    """Emboss with a diagonal kernel around mid gray."""
    return convolve(image, EMBOSS_KERNEL, EMBOSS_BIAS)


def _gradient_magnitude(image: Image, horizontal: Kernel, vertical: Kernel) -> Image:
    """Combine two biased gradient images into an edge strength image.

    Colour images get the magnitude of the three channel strengths written
    to every channel. Border pixels, which have no gradient, come out as 0.
    """
    neutral = _filled(image, EDGE_BIAS)
    rows = convolve(image, horizontal, EDGE_BIAS, neutral).data
    cols = convolve(image, vertical, EDGE_BIAS, neutral).data

    strengths = [
        _clamp(int(math.sqrt((r - EDGE_BIAS) ** 2 + (c - EDGE_BIAS) ** 2)))
        for r, c in zip(rows, cols)
    ]
    if image.depth == 1:
        return Image(image.width, image.height, 1, bytearray(strengths))
    out = bytearray()
    for r, g, b in zip(strengths[0::3], strengths[1::3], strengths[2::3]):
        value = _clamp(int(math.sqrt(r * r + g * g + b * b)))
        out += bytes((value, value, value))
    return Image(image.width, image.height, 3, out)


def prewitt(image: Image) -> Image:
    """Edge strength from the Prewitt operators."""
    return _gradient_magnitude(image, PREWITT_H, PREWITT_V)


def roberts(image: Image) -> Image:
    """Edge strength from the Roberts cross operators."""
    return _gradient_magnitude(image, ROBERTS_H, ROBERTS_V)


def sobel(image: Image) -> Image:
    """Edge strength from the Sobel operators."""
    return _gradient_magnitude(image, SOBEL_H, SOBEL_V)


def median_filter(image: Image) -> Image:
    """Replace each interior channel value by the median of its 3x3 neighbourhood."""
    return _rank_filter(image, lambda values: sorted(values)[4])