"""Morphological operations: gray conversion, thresholding, erosion and dilation."""

from __future__ import annotations

from dataclasses import replace

from .image import Image
from .region import _rank_filter

MORPHOLOGY_THRESHOLD = 70
DEFAULT_ITERATIONS = 3


def to_gray(image: Image) -> Image:
    """Replace each colour pixel by the mean of its channels; gray images are copied."""
    if image.depth == 1:
        return image.copy()
    data = image.data
    out = bytearray()
    for r, g, b in zip(data[0::3], data[1::3], data[2::3]):
        gray = (r + g + b) // 3
        out += bytes((gray, gray, gray))
    return replace(image, data=out)


def binarize_for_morphology(image: Image, threshold: int = MORPHOLOGY_THRESHOLD) -> Image:
    """Set pixels at or above the threshold to 255 and the rest to 0.

    Colour pixels are judged on their first (red) channel and all three
    channels receive the result.
    """
    if image.depth == 1:
        table = bytes(255 if v >= threshold else 0 for v in range(256))
        return replace(image, data=image.data.translate(table))
    out = bytearray()
    for red in image.data[0::3]:
        value = 255 if red >= threshold else 0
        out += bytes((value, value, value))
    return replace(image, data=out)


def erode(image: Image) -> Image:
    """Minimum filter over each 3x3 neighbourhood; borders are kept."""
    return _rank_filter(image, min)


def dilate(image: Image) -> Image:
    """Maximum filter over each 3x3 neighbourhood; borders are kept."""
    return _rank_filter(image, max)


def _check_iterations(iterations: int) -> None:
    if iterations < 0:
        raise ValueError("iterations must not be negative")


def opening(image: Image, iterations: int = DEFAULT_ITERATIONS) -> Image:
    """Erode repeatedly, then dilate the same number of times."""
    _check_iterations(iterations)
    result = image.copy()
    for _ in range(iterations):
        result = erode(result)
    for _ in range(iterations):
        result = dilate(result)
    return result


def closing(image: Image, iterations: int = DEFAULT_ITERATIONS) -> Image:
    """Dilate repeatedly, then erode the same number of times."""
    _check_iterations(iterations)
    result = image.copy()
    for _ in range(iterations):
        result = dilate(result)
    for _ in range(iterations):
        result = erode(result)
    return result