"""In-place vertical and horizontal flips of 24-bit BMP images."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from imflip.bmp import BYTES_PER_PIXEL, BmpImage

FlipFunction = Callable[[BmpImage], None]


class FlipKind(enum.Enum):
    """The kinds of flip, keyed by their one-letter command-line code.

    ``W`` and ``I`` are the row-buffered variants of ``V`` and ``H``.
    """

    VERTICAL = "V"
    HORIZONTAL = "H"
    VERTICAL_ROWS = "W"
    HORIZONTAL_ROWS = "I"

    @classmethod
    def parse(cls, text: str) -> FlipKind:
        """Return the kind named by the first letter of ``text``, case-insensitively."""
        if not text:
            raise ValueError("flip type must not be empty")
        code = text[0].upper()
        try:
            return cls(code)
        except ValueError:
            valid = ", ".join(repr(kind.value) for kind in cls)
            raise ValueError(
                f"flip type {code!r} is invalid; expected one of {valid}"
            ) from None

    @property
    def is_vertical(self) -> bool:
        """Whether this kind swaps whole rows."""
        return self in (FlipKind.VERTICAL, FlipKind.VERTICAL_ROWS)


def _swap_rows(image: BmpImage, rows: Iterable[int]) -> None:
    stride = image.row_bytes
    data = image.data
    last = image.height - 1
    for top in rows:
        bottom = last - top
        a, b = top * stride, bottom * stride
        upper = data[a:a + stride]
        data[a:a + stride] = data[b:b + stride]
        data[b:b + stride] = upper


def _mirror_rows(image: BmpImage, rows: Iterable[int]) -> None:
    stride = image.row_bytes
    span = image.width * BYTES_PER_PIXEL
    data = image.data
    for row in rows:
        start = row * stride
        reversed_bytes = data[start:start + span][::-1]
        mirrored = bytearray(span)
        # Reversing the bytes also reverses each pixel's channels; restore them.
        mirrored[0::3] = reversed_bytes[2::3]
        mirrored[1::3] = reversed_bytes[1::3]
        mirrored[2::3] = reversed_bytes[0::3]
        data[start:start + span] = mirrored


def _partition(count: int, parts: int) -> list[range]:
    base, extra = divmod(count, parts)
    chunks = []
    start = 0
    for part in range(parts):
        length = base + (1 if part < extra else 0)
        chunks.append(range(start, start + length))
        start += length
    return [chunk for chunk in chunks if chunk]


def _run_threaded(
    work: Callable[[BmpImage, Iterable[int]], None],
    image: BmpImage,
    count: int,
    threads: int,
) -> None:
    if threads < 1:
        raise ValueError(f"thread count must be at least 1, got {threads}")
    chunks = _partition(count, threads)
    if len(chunks) <= 1:
        for chunk in chunks:
            work(image, chunk)
        return
    with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
        for future in [pool.submit(work, image, chunk) for chunk in chunks]:
            future.result()


def flip_vertical(image: BmpImage) -> None:
    """Flip ``image`` upside down in place."""
    _swap_rows(image, range(image.height // 2))


def flip_horizontal(image: BmpImage) -> None:
    """Mirror ``image`` left to right in place, leaving row padding untouched."""
    _mirror_rows(image, range(image.height))


def flip_vertical_threaded(image: BmpImage, threads: int) -> None:
    """Flip ``image`` upside down in place, sharing the row swaps among threads."""
    _run_threaded(_swap_rows, image, image.height // 2, threads)


def flip_horizontal_threaded(image: BmpImage, threads: int) -> None:
    """Mirror ``image`` left to right in place, sharing the rows among threads."""
    _run_threaded(_mirror_rows, image, image.height, threads)


def select_flip(kind: FlipKind, threads: int) -> FlipFunction:
    """Choose the flip routine for ``kind`` and a thread count.

    A count of 0 or 1 runs serially: ``V`` and ``H`` use the plain routines,
    ``W`` and ``I`` the row-buffered ones on a single thread. Larger counts
    always use the threaded routines.
    """
    if threads < 0:
        raise ValueError(f"thread count must not be negative, got {threads}")
    if threads <= 1:
        serial: dict[FlipKind, FlipFunction] = {
            FlipKind.VERTICAL: flip_vertical,
            FlipKind.HORIZONTAL: flip_horizontal,
            FlipKind.VERTICAL_ROWS: partial(flip_vertical_threaded, threads=1),
            FlipKind.HORIZONTAL_ROWS: partial(flip_horizontal_threaded, threads=1),
        }
        return serial[kind]
    if kind.is_vertical:
        return partial(flip_vertical_threaded, threads=threads)
    return partial(flip_horizontal_threaded, threads=threads)