"""Command-line tool that flips a 24-bit BMP image and reports its timing."""

from __future__ import annotations

import argparse
import sys
import time

from imflip.bmp import BmpError, read_bmp, write_bmp
from imflip.flip import FlipKind, select_flip

REPS = 129  # odd, so the repeated flips leave the image flipped exactly once
MAX_THREADS = 128


def flip_type_name(kind: FlipKind | str) -> str:
    """Return the human-readable name of a flip type, or ``"Unknown"``."""
    if isinstance(kind, str):
        try:
            kind = FlipKind.parse(kind)
        except ValueError:
            return "Unknown"
    return "Vertical (V)" if kind.is_vertical else "Horizontal (H)"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imflip",
        description=(
            "Flip a 24-bit BMP image. Use 'V' or 'H' for the regular flips and "
            "'W' or 'I' for the row-buffered ones."
        ),
        epilog="Example: imflip infilename.bmp outname.bmp w 8",
    )
    parser.add_argument("input", help="input BMP file")
    parser.add_argument("output", help="output BMP file")
    parser.add_argument(
        "flip", nargs="?", default="V", help="flip type: V, H, W or I (default V)"
    )
    parser.add_argument(
        "threads",
        nargs="?",
        type=int,
        default=1,
        help=f"0 or 1 for the serial version, up to {MAX_THREADS} for threads",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Flip an image from the command line; return the exit status."""
    args = _build_parser().parse_args(argv)

    try:
        kind = FlipKind.parse(args.flip)
    except ValueError as error:
        print(f"Invalid flip type: {error}", file=sys.stderr)
        return 1

    threads = args.threads
    if not 0 <= threads <= MAX_THREADS:
        print(
            f"Number of threads must be between 0 and {MAX_THREADS}; "
            "0 or 1 means the serial version. Nothing executed.",
            file=sys.stderr,
        )
        return 1

    try:
        image = read_bmp(args.input)
    except (OSError, BmpError) as error:
        print(f"Error reading the input image {args.input}: {error}", file=sys.stderr)
        return 1
    print(f"Input BMP File name: {args.input:>20}  ({image.width} x {image.height})")

    if threads <= 1:
        print("Executing the serial version ...")
    else:
        print(f"Executing the multi-threaded version with {threads} threads ...")
    flip = select_flip(kind, threads)

    started = time.perf_counter()
    for _ in range(REPS):
        flip(image)
    elapsed_ms = (time.perf_counter() - started) * 1000.0 / REPS

    print(f"The number of threads that was launched is {threads}")

    try:
        write_bmp(image, args.output)
    except OSError as error:
        print(f"File creation error {args.output}: {error}", file=sys.stderr)
        return 1
    print(f"Output BMP File name: {args.output:>20}  ({image.width} x {image.height})")

    line = f"Total execution time: {elapsed_ms:9.4f} ms.  "
    if threads > 1:
        line += f"({elapsed_ms / threads:9.4f} ms per thread).  "
    print(line)
    print(f"Flip Type = '{flip_type_name(kind)}'")
    if image.pixel_count:
        print(f"Performance = {1_000_000 * elapsed_ms / image.pixel_count:6.3f} (ns/pixel)")
    return 0


if __name__ == "__main__":
    sys.exit(main())