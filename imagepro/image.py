"""Image container and readers/writers for PGM/PPM, RAW and BMP files."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator

RAW_SIZE = 256
_FILE_HEADER = struct.Struct("<2sIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_PALETTE_BYTES = 256 * 4


class ImageFormatError(ValueError):
    """Raised when an image file cannot be decoded or encoded."""


class ImageMismatchError(ValueError):
    """Raised when two images differ in width, height or depth."""


@dataclass
class Image:
    """An 8-bit image stored row by row; colour pixels are interleaved RGB."""

    width: int
    height: int
    depth: int
    data: bytearray = field(repr=False)

    def __post_init__(self) -> None:
        if self.depth not in (1, 3):
            raise ValueError(f"depth must be 1 or 3, not {self.depth}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        self.data = bytearray(self.data)
        if len(self.data) != self.width * self.height * self.depth:
            raise ValueError("pixel data does not match the image size")

    @classmethod
    def blank(cls, width: int, height: int, depth: int) -> "Image":
        """Return a black image of the given size."""
        return cls(width, height, depth, bytearray(width * height * depth))

    @property
    def stride(self) -> int:
        return self.width * self.depth

    def copy(self) -> "Image":
        return Image(self.width, self.height, self.depth, bytearray(self.data))

    def _offset(self, x: int, y: int, channel: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside the image")
        if not 0 <= channel < self.depth:
            raise IndexError(f"channel {channel} is outside the image depth")
        return y * self.stride + x * self.depth + channel

    def get(self, x: int, y: int, channel: int = 0) -> int:
        return self.data[self._offset(x, y, channel)]

    def set(self, x: int, y: int, channel: int, value: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError(f"pixel value {value} is outside 0..255")
        self.data[self._offset(x, y, channel)] = value

    def pixel(self, x: int, y: int) -> tuple[int, ...]:
        """Return all channels of one pixel."""
        start = self._offset(x, y, 0)
        return tuple(self.data[start:start + self.depth])

    def rows(self) -> Iterator[bytes]:
        """Yield each row, top to bottom."""
        stride = self.stride
        for start in range(0, len(self.data), stride):
            yield bytes(self.data[start:start + stride])


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunk = stream.read(size)
    if len(chunk) != size:
        raise ImageFormatError("unexpected end of image data")
    return chunk


def _header_line(stream: BinaryIO) -> bytes:
    line = stream.readline()
    if not line:
        raise ImageFormatError("unexpected end of header")
    return line.strip()


def _next_value_line(stream: BinaryIO) -> bytes:
    while True:
        line = _header_line(stream)
        if not line.startswith(b"#"):
            return line


def read_pnm(stream: BinaryIO) -> Image:
    """Read a binary PGM (P5) or PPM (P6) image."""
    magic = _header_line(stream)
    if magic not in (b"P5", b"P6"):
        raise ImageFormatError(f"unsupported PNM type {magic!r}")
    try:
        width, height = (int(v) for v in _next_value_line(stream).split()[:2])
        int(_next_value_line(stream).split()[0])
    except (ValueError, IndexError) as exc:
        raise ImageFormatError("malformed PNM header") from exc
    depth = 1 if magic == b"P5" else 3
    if width <= 0 or height <= 0:
        raise ImageFormatError("PNM image has no pixels")
    data = _read_exact(stream, width * height * depth)
    return Image(width, height, depth, bytearray(data))


def read_raw(data: bytes) -> Image:
    """Interpret raw bytes as a 256x256 grayscale image."""
    if len(data) != RAW_SIZE * RAW_SIZE:
        raise ImageFormatError("only 256x256 raw files are supported")
    return Image(RAW_SIZE, RAW_SIZE, 1, bytearray(data))


def read_bmp(stream: BinaryIO) -> Image:
    """Read an uncompressed 8-bit grayscale or 24-bit colour BMP image."""
    magic, _size, _r1, _r2, offset = _FILE_HEADER.unpack(
        _read_exact(stream, _FILE_HEADER.size)
    )
    if magic != b"BM":
        raise ImageFormatError("missing BM marker")
    info = _INFO_HEADER.unpack(_read_exact(stream, _INFO_HEADER.size))
    width, height, bit_count = info[1], info[2], info[4]
    depth = bit_count // 8
    if depth not in (1, 3):
        raise ImageFormatError(f"unsupported bit count {bit_count}")
    if width <= 0 or height <= 0:
        raise ImageFormatError("unsupported BMP dimensions")

    palette_size = offset - _FILE_HEADER.size - _INFO_HEADER.size
    if palette_size != 0 or depth == 1:
        _read_exact(stream, _PALETTE_BYTES)

    row_bytes = width * depth
    stride = (row_bytes * 8 + 31) // 32 * 4
    rows = []
    for _ in range(height):
        row = bytearray(_read_exact(stream, row_bytes))
        if depth == 3:
            row[0::3], row[2::3] = row[2::3], row[0::3]
        rows.append(row)
        stream.read(stride - row_bytes)
    rows.reverse()
    return Image(width, height, depth, bytearray(b"".join(rows)))


def load_image(path: str | Path) -> Image:
    """Load an image, choosing the format from the file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".ppm", ".pgm"):
        with path.open("rb") as stream:
            return read_pnm(stream)
    if suffix == ".raw":
        return read_raw(path.read_bytes())
    if suffix == ".bmp":
        with path.open("rb") as stream:
            return read_bmp(stream)
    raise ImageFormatError(f"unsupported file type {path.suffix!r}")


def load_second_image(path: str | Path, reference: Image) -> Image:
    """Load an image that must match the reference in size and depth."""
    image = load_image(path)
    if (image.width, image.height, image.depth) != (
        reference.width,
        reference.height,
        reference.depth,
    ):
        raise ImageMismatchError("the images differ in width, height or colour depth")
    return image


def _encode_pnm(image: Image) -> bytes:
    magic = b"P5" if image.depth == 1 else b"P6"
    header = b"%s\n%d %d\n255\n" % (magic, image.width, image.height)
    return header + bytes(image.data)


def _encode_bmp(image: Image) -> bytes:
    row_bytes = image.stride
    stride = (row_bytes * 8 + 31) // 32 * 4
    padding = bytes(stride - row_bytes)
    palette = b"".join(bytes((v, v, v, 0)) for v in range(256)) if image.depth == 1 else b""
    offset = _FILE_HEADER.size + _INFO_HEADER.size + len(palette)
    pixels = bytearray()
    for row in reversed(list(image.rows())):
        row = bytearray(row)
        if image.depth == 3:
            row[0::3], row[2::3] = row[2::3], row[0::3]
        pixels += row + padding
    file_header = _FILE_HEADER.pack(b"BM", offset + len(pixels), 0, 0, offset)
    info_header = _INFO_HEADER.pack(
        _INFO_HEADER.size, image.width, image.height, 1, image.depth * 8,
        0, len(pixels), 2835, 2835, 256 if image.depth == 1 else 0, 0,
    )
    return file_header + info_header + palette + bytes(pixels)


def save_image(image: Image, path: str | Path) -> None:
    """Write an image in the format named by the file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".ppm", ".pgm"):
        payload = _encode_pnm(image)
    elif suffix == ".bmp":
        payload = _encode_bmp(image)
    elif suffix == ".raw":
        if (image.width, image.height, image.depth) != (RAW_SIZE, RAW_SIZE, 1):
            raise ImageFormatError("raw files hold 256x256 grayscale images only")
        payload = bytes(image.data)
    else:
        raise ImageFormatError(f"unsupported file type {path.suffix!r}")
    path.write_bytes(payload)