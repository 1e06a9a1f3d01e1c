"""Command-line front end: apply one operation to an image file."""

from __future__ import annotations

import argparse
import sys
from typing import Callable

from . import geometry, morphology, pixel, region, warp
from .image import Image, load_image, load_second_image, save_image

Handler = Callable[[Image, argparse.Namespace], Image]


def _plain(func: Callable[[Image], Image]) -> Handler:
    return lambda image, args: func(image)


def _second(image: Image, args: argparse.Namespace) -> Image:
    return load_second_image(args.second, image)


def _warp(image: Image, args: argparse.Namespace) -> Image:
    if args.drag is not None:
        x1, y1, x2, y2 = args.drag
        source, dest = warp.control_lines_from_drag((x1, y1), (x2, y2))
    else:
        source = warp.ControlLine(*args.source)
        dest = warp.ControlLine(*args.dest)
    return warp.warp(image, source, dest)


_SIMPLE: dict[str, tuple[str, Callable[[Image], Image]]] = {
    "histeq": ("equalize the histogram (grayscale only)", pixel.equalize_histogram),
    "stretch": ("stretch the contrast (grayscale only)", pixel.stretch_contrast),
    "mean": ("3x3 mean blur", region.mean_filter),
    "sharpen": ("3x3 sharpening", region.sharpen),
    "emboss": ("3x3 embossing", region.emboss),
    "prewitt": ("Prewitt edge detection", region.prewitt),
    "roberts": ("Roberts edge detection", region.roberts),
    "sobel": ("Sobel edge detection", region.sobel),
    "average": ("3x3 average filtering", region.mean_filter),
    "median": ("3x3 median filtering", region.median_filter),
    "gray": ("convert colour to gray", morphology.to_gray),
    "erode": ("3x3 erosion", morphology.erode),
    "dilate": ("3x3 dilation", morphology.dilate),
    "mirror": ("mirror left to right", geometry.mirror),
    "flip": ("flip top to bottom", geometry.flip),
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="imagepro", description="Apply an image processing operation."
    )
    files = argparse.ArgumentParser(add_help=False)
    files.add_argument("input", help="image to read (.pgm, .ppm, .raw, .bmp)")
    files.add_argument("output", help="image to write")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    def command(name: str, help_text: str, handler: Handler) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text, parents=[files])
        sub.set_defaults(handler=handler)
        return sub

    for name, (help_text, func) in _SIMPLE.items():
        command(name, help_text, _plain(func))

    command("add", "add a constant",
            lambda i, a: pixel.add_constant(i, a.amount)
            ).add_argument("--amount", type=int, default=40)
    command("sub", "subtract a constant",
            lambda i, a: pixel.subtract_constant(i, a.amount)
            ).add_argument("--amount", type=int, default=50)
    command("mul", "multiply by a factor",
            lambda i, a: pixel.multiply(i, a.factor)
            ).add_argument("--factor", type=float, default=1.2)
    command("div", "divide by a divisor",
            lambda i, a: pixel.divide(i, a.divisor)
            ).add_argument("--divisor", type=float, default=1.2)
    command("binarize", "threshold to black and white",
            lambda i, a: pixel.binarize(i, a.threshold)
            ).add_argument("--threshold", type=int, default=140)
    command("morph-binarize", "threshold before morphology",
            lambda i, a: morphology.binarize_for_morphology(i, a.threshold)
            ).add_argument("--threshold", type=int, default=morphology.MORPHOLOGY_THRESHOLD)
    command("opening", "erosions followed by dilations",
            lambda i, a: morphology.opening(i, a.iterations)
            ).add_argument("--iterations", type=int, default=morphology.DEFAULT_ITERATIONS)
    command("closing", "dilations followed by erosions",
            lambda i, a: morphology.closing(i, a.iterations)
            ).add_argument("--iterations", type=int, default=morphology.DEFAULT_ITERATIONS)

    blend = command("blend", "average with a second image",
                    lambda i, a: pixel.blend_images(i, _second(i, a)))
    blend.add_argument("--second", required=True)
    diff = command("diff", "mark differences from a second image",
                   lambda i, a: pixel.difference_mask(i, _second(i, a), a.threshold))
    diff.add_argument("--second", required=True)
    diff.add_argument("--threshold", type=int, default=40)
    morph = command("morph", "cross-dissolve with a second image",
                    lambda i, a: warp.morph(i, _second(i, a), a.alpha))
    morph.add_argument("--second", required=True)
    morph.add_argument("--alpha", type=float, default=warp.DEFAULT_ALPHA)

    int_zooms = {
        "zoom-in": ("enlarge by pixel copying", geometry.zoom_in_pixel_copy),
        "zoom-out": ("shrink by subsampling", geometry.zoom_out_subsampling),
        "zoom-out-mean": ("blur then subsample", geometry.zoom_out_mean_subsampling),
        "zoom-out-avg": ("shrink by block averaging", geometry.zoom_out_average),
    }
    for name, (help_text, func) in int_zooms.items():
        sub = command(name, help_text,
                      lambda i, a, f=func: f(i, a.scale_x, a.scale_y))
        sub.add_argument("--scale-x", type=int, default=2)
        sub.add_argument("--scale-y", type=int, default=3)

    bilinear = command("bilinear", "resize with bilinear interpolation",
                       lambda i, a: geometry.zoom_in_bilinear(i, a.scale_x, a.scale_y))
    bilinear.add_argument("--scale-x", type=float, default=geometry.DEFAULT_BILINEAR[0])
    bilinear.add_argument("--scale-y", type=float, default=geometry.DEFAULT_BILINEAR[1])

    command("rotate", "rotate about the centre",
            lambda i, a: geometry.rotate(i, a.angle)
            ).add_argument("--angle", type=int, default=geometry.DEFAULT_ANGLE,
                           help="degrees, counter-clockwise if positive")

    warp_cmd = command("warp", "warp along control lines", _warp)
    line = warp.DEFAULT_SOURCE_LINE
    warp_cmd.add_argument("--source", type=int, nargs=4, metavar=("PX", "PY", "QX", "QY"),
                          default=[line.px, line.py, line.qx, line.qy])
    line = warp.DEFAULT_DEST_LINE
    warp_cmd.add_argument("--dest", type=int, nargs=4, metavar=("PX", "PY", "QX", "QY"),
                          default=[line.px, line.py, line.qx, line.qy])
    warp_cmd.add_argument("--drag", type=int, nargs=4, metavar=("X1", "Y1", "X2", "Y2"),
                          help="derive both lines from a drag from (X1, Y1) to (X2, Y2)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one operation; return 0 on success and 1 on failure."""
    args = build_parser().parse_args(argv)
    try:
        image = load_image(args.input)
        result = args.handler(image, args)
        save_image(result, args.output)
    except (ValueError, ZeroDivisionError, OSError) as exc:
        print(f"imagepro: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())