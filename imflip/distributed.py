"""Row-partitioned flips that mimic a group of cooperating processes.

The image rows are split among ``procs`` ranks. The first ``procs - 1`` ranks
each own ``height // procs`` consecutive rows and the last rank owns the rest.
Every rank receives its slice, flips it, and the slices are gathered back
into one image. A horizontal flip needs no coordination. A vertical flip swaps
row ``i`` with row ``height - 1 - i``. When one rank owns both rows it swaps
them locally. Otherwise the two owning ranks exchange the rows.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass

from imflip.bmp import BYTES_PER_PIXEL, BmpError, BmpImage, read_bmp, write_bmp
from imflip.flip import FlipKind


@dataclass(frozen=True)
class RowPartition:
    """How ``height`` image rows are distributed over ``procs`` ranks."""

    height: int
    procs: int

    def __post_init__(self) -> None:
        if self.procs < 1:
            raise ValueError(f"process count must be at least 1, got {self.procs}")
        if self.height < 0:
            raise ValueError(f"height must not be negative, got {self.height}")

    @property
    def rows_per_proc(self) -> int:
        """Rows owned by every rank except possibly the last."""
        return self.height // self.procs

    def _check_rank(self, rank: int) -> None:
        if not 0 <= rank < self.procs:
            raise IndexError(f"rank {rank} out of range for {self.procs} processes")

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.height:
            raise IndexError(f"row {row} out of range for height {self.height}")

    def owner(self, row: int) -> int:
        """Return the rank that owns global ``row``."""
        self._check_row(row)
        if self.procs == 1:
            return 0
        last_start = (self.procs - 1) * self.rows_per_proc
        return row // self.rows_per_proc if row < last_start else self.procs - 1

    def local_index(self, rank: int, row: int) -> int:
        """Return the position of global ``row`` inside ``rank``'s slice."""
        self._check_rank(rank)
        if self.owner(row) != rank:
            raise ValueError(f"row {row} is not owned by rank {rank}")
        if self.procs == 1:
            return row
        return row - rank * self.rows_per_proc

    def rows(self, rank: int) -> range:
        """Return the global rows owned by ``rank``."""
        self._check_rank(rank)
        start = rank * self.rows_per_proc
        if rank == self.procs - 1:
            return range(start, self.height)
        return range(start, start + self.rows_per_proc)

    def byte_ranges(self, row_bytes: int) -> list[tuple[int, int]]:
        """Return ``(offset, length)`` of each rank's slice in the image data."""
        if row_bytes < 0:
            raise ValueError(f"row size must not be negative, got {row_bytes}")
        ranges = []
        offset = 0
        for rank in range(self.procs):
            length = len(self.rows(rank)) * row_bytes
            ranges.append((offset, length))
            offset += length
        return ranges


@dataclass
class DistributedResult:
    """The flipped image together with counts and timings of the run."""

    image: BmpImage
    procs: int
    exchanged_rows: int
    local_swaps: int
    elapsed_ms: float
    communication_ms: float

    @property
    def flipping_ms(self) -> float:
        """Time not spent moving data between ranks."""
        return self.elapsed_ms - self.communication_ms


def _mirror_local(buffer: bytearray, rows: int, stride: int, width: int) -> None:
    span = width * BYTES_PER_PIXEL
    for start in range(0, rows * stride, stride):
        reversed_bytes = buffer[start:start + span][::-1]
        mirrored = bytearray(span)
        mirrored[0::3] = reversed_bytes[2::3]
        mirrored[1::3] = reversed_bytes[1::3]
        mirrored[2::3] = reversed_bytes[0::3]
        buffer[start:start + span] = mirrored


def _resolve_kind(kind: FlipKind | str) -> FlipKind:
    if isinstance(kind, str):
        kind = FlipKind.parse(kind)
    if kind not in (FlipKind.VERTICAL, FlipKind.HORIZONTAL):
        raise ValueError(
            f"flip type {kind.value!r} is not supported; expected 'V' or 'H'"
        )
    return kind


def distributed_flip(
    image: BmpImage, kind: FlipKind | str, procs: int = 1
) -> DistributedResult:
    """Flip a copy of ``image`` with its rows shared among ``procs`` ranks."""
    kind = _resolve_kind(kind)
    partition = RowPartition(image.height, procs)
    stride = image.row_bytes
    started = time.perf_counter()
    comm = 0.0

    tick = time.perf_counter()
    ranges = partition.byte_ranges(stride)
    locals_ = [bytearray(image.data[off:off + length]) for off, length in ranges]
    comm += time.perf_counter() - tick

    exchanged = 0
    local_swaps = 0
    if kind is FlipKind.HORIZONTAL:
        for rank, buffer in enumerate(locals_):
            _mirror_local(buffer, len(partition.rows(rank)), stride, image.width)
    else:
        last = image.height - 1
        for top in range(image.height // 2):
            bottom = last - top
            top_owner = partition.owner(top)
            bottom_owner = partition.owner(bottom)
            a = partition.local_index(top_owner, top) * stride
            b = partition.local_index(bottom_owner, bottom) * stride
            top_buf = locals_[top_owner]
            bottom_buf = locals_[bottom_owner]
            if top_owner == bottom_owner:
                upper = top_buf[a:a + stride]
                top_buf[a:a + stride] = top_buf[b:b + stride]
                top_buf[b:b + stride] = upper
                local_swaps += 1
            else:
                tick = time.perf_counter()
                sent_up = bytes(top_buf[a:a + stride])
                sent_down = bytes(bottom_buf[b:b + stride])
                top_buf[a:a + stride] = sent_down
                bottom_buf[b:b + stride] = sent_up
                comm += time.perf_counter() - tick
                exchanged += 1

    tick = time.perf_counter()
    gathered = bytearray().join(locals_)
    comm += time.perf_counter() - tick

    result_image = BmpImage(image.header, gathered)
    elapsed = time.perf_counter() - started
    return DistributedResult(
        image=result_image,
        procs=procs,
        exchanged_rows=exchanged,
        local_swaps=local_swaps,
        elapsed_ms=elapsed * 1000.0,
        communication_ms=comm * 1000.0,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imflip-distributed",
        description="Flip a 24-bit BMP image with its rows split among ranks.",
    )
    parser.add_argument("input", help="input BMP file")
    parser.add_argument("output", help="output BMP file")
    parser.add_argument("flip", help="flip type: V or H")
    parser.add_argument(
        "procs", nargs="?", type=int, default=1, help="number of ranks (default 1)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the distributed flip from the command line; return the exit status."""
    args = _build_parser().parse_args(argv)
    try:
        kind = _resolve_kind(args.flip)
        if args.procs < 1:
            raise ValueError(f"process count must be at least 1, got {args.procs}")
    except ValueError as error:
        print(error, file=sys.stderr)
        return 1

    try:
        image = read_bmp(args.input)
    except (OSError, BmpError) as error:
        print(f"{args.input}: {error}", file=sys.stderr)
        return 1
    print(
        f"Input File name: {args.input:>17}  ({image.width} x {image.height})"
        f"   File Size={image.size}"
    )

    result = distributed_flip(image, kind, args.procs)

    try:
        write_bmp(result.image, args.output)
    except OSError as error:
        print(f"{args.output}: {error}", file=sys.stderr)
        return 1
    print(
        f"Output File name: {args.output:>17}  ({image.width} x {image.height})"
        f"   File Size={image.size}"
    )
    print(f"Program Executed {kind.value} flip and took {result.elapsed_ms:f} ms.")
    print(f"Total Communication overhead: {result.communication_ms:f} ms")
    print(f'Total "flipping" time: {result.flipping_ms:f} ms')
    return 0


if __name__ == "__main__":
    sys.exit(main())