"""Field warping driven by control lines, and cross-dissolve morphing."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Sequence

from .geometry import _trunc_div
from .image import Image, ImageMismatchError

# Constants of the field-warping weight formula.
WEIGHT_A = 0.001
WEIGHT_B = 2.0
WEIGHT_P = 0.75
DEFAULT_ALPHA = 0.5


@dataclass(frozen=True)
class ControlLine:
    """A directed line segment from P to Q."""

    px: int
    py: int
    qx: int
    qy: int

    def length(self) -> float:
        dx, dy = self.qx - self.px, self.qy - self.py
        return math.sqrt(dx * dx + dy * dy)


DEFAULT_SOURCE_LINE = ControlLine(100, 100, 150, 150)
DEFAULT_DEST_LINE = ControlLine(100, 100, 200, 200)


def control_lines_from_drag(
    start: Sequence[int], end: Sequence[int]
) -> tuple[ControlLine, ControlLine]:
    """Build the source and destination lines for a mouse drag.

    Both lines share an anchor placed behind the start point, half the drag
    distance away; the source line ends at the start point and the
    destination line at the end point.
    """
    ax, ay = start
    bx, by = end
    anchor_x = ax - _trunc_div(bx - ax, 2) if ax < bx else ax + _trunc_div(bx - ax, 2)
    anchor_y = ay - _trunc_div(by - ay, 2) if ay < by else ay + _trunc_div(by - ay, 2)
    source = ControlLine(anchor_x, anchor_y, ax, ay)
    dest = ControlLine(anchor_x, anchor_y, bx, by)
    return source, dest


def _border_lines(width: int, height: int) -> list[ControlLine]:
    right, bottom = width - 1, height - 1
    return [
        ControlLine(0, 0, right, 0),
        ControlLine(right, 0, right, bottom),
        ControlLine(right, bottom, 0, bottom),
        ControlLine(0, bottom, 0, 0),
    ]


def warp(
    image: Image,
    source_line: ControlLine = DEFAULT_SOURCE_LINE,
    dest_line: ControlLine = DEFAULT_DEST_LINE,
) -> Image:
    """Warp the image so that ``source_line`` moves onto ``dest_line``.

    The four image borders act as extra fixed control lines. Each output
    pixel is fetched from the input position given by the weighted average
    of the per-line displacements, clamped to the image.
    """
    width, height, depth = image.width, image.height, image.depth
    borders = _border_lines(width, height)
    pairs = list(zip([source_line, *borders], [dest_line, *borders]))
    if any(s.length() == 0 or d.length() == 0 for s, d in pairs):
        raise ValueError("control lines must have non-zero length")

    prepared = []
    for src, dst in pairs:
        ddx, ddy = dst.qx - dst.px, dst.qy - dst.py
        dest_length = dst.length()
        prepared.append((
            dst.px, dst.py, dst.qx, dst.qy, ddx, ddy,
            ddx * ddx + ddy * ddy, dest_length,
            math.pow(dest_length, WEIGHT_P),
            src.px, src.py, src.qx - src.px, src.qy - src.py, src.length(),
        ))

    data, stride = image.data, image.stride
    out = bytearray()
    for y in range(height):
        for x in range(width):
            tx = ty = total_weight = 0.0
            for (x1, y1, x2, y2, ddx, ddy, squared, dest_length, scaled,
                 sx1, sy1, sdx, sdy, src_length) in prepared:
                u = ((x - x1) * ddx + (y - y1) * ddy) / squared
                h = ((y - y1) * ddx - (x - x1) * ddy) / dest_length
                if u < 0:
                    dist = math.sqrt((x - x1) ** 2 + (y - y1) ** 2)
                elif u > 1:
                    dist = math.sqrt((x - x2) ** 2 + (y - y2) ** 2)
                else:
                    dist = abs(h)
                xp = sx1 + u * sdx - (h * sdy) / src_length
                yp = sy1 + u * sdy + (h * sdx) / src_length
                weight = math.pow(scaled / (WEIGHT_A + dist), WEIGHT_B)
                tx += (xp - x) * weight
                ty += (yp - y) * weight
                total_weight += weight
            source_x = min(max(int(x + tx / total_weight), 0), width - 1)
            source_y = min(max(int(y + ty / total_weight), 0), height - 1)
            start = source_y * stride + source_x * depth
            out += data[start:start + depth]
    return Image(width, height, depth, out)


def morph(first: Image, second: Image, alpha: float = DEFAULT_ALPHA) -> Image:
    """Cross-dissolve two same-sized images: (1 - alpha) * first + alpha * second."""
    if (first.width, first.height, first.depth) != (
        second.width,
        second.height,
        second.depth,
    ):
        raise ImageMismatchError("the images differ in width, height or colour depth")
    keep = 1.0 - alpha
    data = bytearray(
        min(max(int(keep * a + alpha * b), 0), 255)
        for a, b in zip(first.data, second.data)
    )
    return replace(first, data=data)