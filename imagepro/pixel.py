"""Point operations on single images and on pairs of images."""

from __future__ import annotations

import struct
from collections import Counter
from dataclasses import replace
from itertools import accumulate
from typing import Callable

from .image import Image, ImageMismatchError


def _clamp(value: int) -> int:
    return 0 if value < 0 else 255 if value > 255 else value


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _point(image: Image, transform: Callable[[int], float]) -> Image:
    table = bytes(_clamp(int(transform(v))) for v in range(256))
    return replace(image, data=image.data.translate(table))


def _require_gray(image: Image, operation: str) -> None:
    if image.depth != 1:
        raise ValueError(f"{operation} works on grayscale images only")


def _require_match(first: Image, second: Image) -> None:
    if (first.width, first.height, first.depth) != (
        second.width,
        second.height,
        second.depth,
    ):
        raise ImageMismatchError("the images differ in width, height or colour depth")


def add_constant(image: Image, amount: int = 40) -> Image:
    """Brighten every channel by a constant, saturating at 255."""
    return _point(image, lambda v: v + amount)


def subtract_constant(image: Image, amount: int = 50) -> Image:
    """Darken every channel by a constant, saturating at 0."""
    return _point(image, lambda v: v - amount)


def multiply(image: Image, factor: float = 1.2) -> Image:
    return _point(image, lambda v: v * factor)


def divide(image: Image, divisor: float = 1.2) -> Image:
    if divisor == 0:
        raise ZeroDivisionError("divisor must not be zero")
    return _point(image, lambda v: v / divisor)


def equalize_histogram(image: Image) -> Image:
    """Spread gray levels according to their cumulative distribution."""
    _require_gray(image, "histogram equalization")
    counts = Counter(image.data)
    total = _f32(len(image.data))
    cumulative = accumulate(counts.get(level, 0) for level in range(256))
    table = bytes(
        _clamp(int(_f32(_f32(_f32(c) / total) * 255.0))) for c in cumulative
    )
    return replace(image, data=image.data.translate(table))


def stretch_contrast(image: Image) -> Image:
    """Map the darkest level to 0 and the brightest to 255 linearly."""
    _require_gray(image, "contrast stretching")
    low, high = min(image.data), max(image.data)
    if low == high:
        raise ValueError("contrast stretching needs at least two gray levels")
    span = high - low
    return _point(image, lambda v: (v - low) * 255 // span if v >= low else 0)


def binarize(image: Image, threshold: int = 140) -> Image:
    """Set pixels above the threshold to 255 and the rest to 0.

    Colour pixels are thresholded on the mean of their channels and
    written back as gray.
    """
    if image.depth == 1:
        return _point(image, lambda v: 255 if v > threshold else 0)
    data = image.data
    out = bytearray()
    for r, g, b in zip(data[0::3], data[1::3], data[2::3]):
        value = 255 if (r + g + b) // 3 > threshold else 0
        out += bytes((value, value, value))
    return replace(image, data=out)


def blend_images(first: Image, second: Image) -> Image:
    """Average two images of the same size channel by channel."""
    _require_match(first, second)
    data = bytearray(
        _clamp(int(0.5 * a + 0.5 * b)) for a, b in zip(first.data, second.data)
    )
    return replace(first, data=data)


def difference_mask(first: Image, second: Image, threshold: int = 40) -> Image:
    """Mark channels whose absolute difference exceeds the threshold."""
    _require_match(first, second)
    data = bytearray(
        255 if abs(a - b) > threshold else 0 for a, b in zip(first.data, second.data)
    )
    return replace(first, data=data)