"""Reading and writing uncompressed 24-bit BMP images as flat row buffers."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field

HEADER_SIZE = 54
BYTES_PER_PIXEL = 3
_WIDTH_OFFSET = 18
_HEIGHT_OFFSET = 22


class BmpError(ValueError):
    """Raised when BMP data is malformed or inconsistent."""


def row_stride(width: int) -> int:
    """Return the number of bytes one row occupies, padded to a multiple of 4."""
    if width < 0:
        raise BmpError(f"image width must not be negative, got {width}")
    return (width * BYTES_PER_PIXEL + 3) & ~3


def _dimensions(header: bytes) -> tuple[int, int]:
    width, = struct.unpack_from("<i", header, _WIDTH_OFFSET)
    height, = struct.unpack_from("<i", header, _HEIGHT_OFFSET)
    if width < 0 or height < 0:
        raise BmpError(f"unsupported image dimensions {width} x {height}")
    return width, height


@dataclass
class BmpImage:
    """A 24-bit BMP image: the original 54-byte header and the padded pixel rows.

    Pixels are stored bottom-up exactly as in the file, three bytes per pixel
    in B, G, R order, each row padded to a multiple of four bytes.
    """

    header: bytes
    data: bytearray = field(repr=False)

    def __post_init__(self) -> None:
        self.header = bytes(self.header)
        if len(self.header) != HEADER_SIZE:
            raise BmpError(
                f"BMP header must be {HEADER_SIZE} bytes, got {len(self.header)}"
            )
        self.width, self.height = _dimensions(self.header)
        self.data = bytearray(self.data)
        if len(self.data) != self.size:
            raise BmpError(
                f"pixel data must be {self.size} bytes for a "
                f"{self.width} x {self.height} image, got {len(self.data)}"
            )

    @property
    def row_bytes(self) -> int:
        """Bytes per stored row, including padding."""
        return row_stride(self.width)

    @property
    def size(self) -> int:
        """Total number of bytes of pixel data."""
        return self.row_bytes * self.height

    @property
    def pixel_count(self) -> int:
        """Number of pixels in the image."""
        return self.width * self.height

    def copy(self) -> BmpImage:
        """Return an independent copy of the image."""
        return BmpImage(self.header, bytearray(self.data))

    def row(self, index: int) -> memoryview:
        """Return a writable view of stored row ``index`` (padding included)."""
        if not 0 <= index < self.height:
            raise IndexError(f"row {index} out of range for height {self.height}")
        start = index * self.row_bytes
        return memoryview(self.data)[start:start + self.row_bytes]

    def to_bytes(self) -> bytes:
        """Serialise the image back into BMP file contents."""
        return self.header + bytes(self.data)


def parse_bmp(data: bytes) -> BmpImage:
    """Build an image from the contents of a BMP file."""
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise BmpError(
            f"BMP data too short for a {HEADER_SIZE}-byte header: {len(data)} bytes"
        )
    header = data[:HEADER_SIZE]
    width, height = _dimensions(header)
    size = row_stride(width) * height
    pixels = data[HEADER_SIZE:HEADER_SIZE + size]
    if len(pixels) < size:
        raise BmpError(
            f"BMP pixel data truncated: expected {size} bytes, got {len(pixels)}"
        )
    return BmpImage(header, bytearray(pixels))


def read_bmp(path: str | os.PathLike[str]) -> BmpImage:
    """Read a BMP file from ``path``."""
    with open(path, "rb") as handle:
        return parse_bmp(handle.read())


def write_bmp(image: BmpImage, path: str | os.PathLike[str]) -> None:
    """Write ``image`` to ``path`` as a BMP file."""
    with open(path, "wb") as handle:
        handle.write(image.to_bytes())