"""Numerical estimates of pi by integrating 4 / (1 + x^2) over [0, 1]."""

from __future__ import annotations

import argparse
import struct
import sys
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

NUM_STEPS = 1_000_000_000
REPS = 5

PiFunction = Callable[[int, int], float]


def _single(value: float) -> float:
    """Round ``value`` to single precision, the width of the results."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _check(steps: int, threads: int = 1) -> int:
    if steps < 1:
        raise ValueError(f"step count must be at least 1, got {steps}")
    if threads < 0:
        raise ValueError(f"thread count must not be negative, got {threads}")
    return max(threads, 1)


def _thread_ranges(steps: int, threads: int) -> list[range]:
    """Equal chunks per thread; the last one runs through ``steps`` inclusive."""
    chunk = steps // threads
    ranges = [range(tid * chunk, tid * chunk + chunk) for tid in range(threads - 1)]
    ranges.append(range((threads - 1) * chunk, steps + 1))
    return ranges


def _run(ranges: list[range], work: Callable[[int, range], None]) -> None:
    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        for future in [pool.submit(work, tid, rng) for tid, rng in enumerate(ranges)]:
            future.result()


def pi_v1(steps: int = NUM_STEPS) -> float:
    """Serial left-rectangle estimate of pi."""
    _check(steps)
    total = 0.0
    for i in range(steps):
        x = i / steps
        total += 4.0 / (1.0 + x * x)
    return _single(total / steps)


def pi_v2(steps: int = NUM_STEPS, threads: int = 1) -> float:
    """Midpoint estimate with each thread accumulating into a shared array."""
    threads = _check(steps, threads)
    step = 1.0 / steps
    sums = [0.0] * threads

    def work(tid: int, rng: range) -> None:
        for i in rng:
            x = (i + 0.5) * step
            sums[tid] += 4.0 / (1.0 + x * x)

    _run(_thread_ranges(steps, threads), work)
    total = 0.0
    for partial in sums:
        total += partial
    return _single(total / steps)


def pi_v3(steps: int = NUM_STEPS, threads: int = 1) -> float:
    """Midpoint estimate with private sums combined under a lock."""
    threads = _check(steps, threads)
    step = 1.0 / steps
    lock = threading.Lock()
    total = 0.0

    def work(tid: int, rng: range) -> None:
        nonlocal total
        partial = 0.0
        for i in rng:
            x = (i + 0.5) * step
            partial += 4.0 / (1.0 + x * x)
        with lock:
            total += partial

    _run(_thread_ranges(steps, threads), work)
    return _single(total / steps)


def pi_v4(steps: int = NUM_STEPS, threads: int = 1) -> float:
    """Left-rectangle estimate with the loop split evenly and sums reduced."""
    threads = _check(steps, threads)
    step = 1.0 / steps
    base, extra = divmod(steps, threads)
    ranges = []
    start = 0
    for tid in range(threads):
        length = base + (1 if tid < extra else 0)
        ranges.append(range(start, start + length))
        start += length
    sums = [0.0] * threads

    def work(tid: int, rng: range) -> None:
        partial = 0.0
        for i in rng:
            x = i * step
            partial += 4.0 / (1.0 + x * x)
        sums[tid] = partial

    _run(ranges, work)
    total = 0.0
    for partial in sums:
        total += partial
    return _single(total * step)


def _serial(steps: int, threads: int) -> float:
    return pi_v1(steps)


_VERSIONS: dict[int, PiFunction] = {1: _serial, 2: pi_v2, 3: pi_v3, 4: pi_v4}


def pick_pi_function(version: int) -> PiFunction:
    """Return the estimator for ``version`` (1-4), called as ``f(steps, threads)``."""
    try:
        return _VERSIONS[version]
    except KeyError:
        raise ValueError(f"Invalid version number {version}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imflip-pi",
        description="Estimate pi by numerical integration.",
        epilog="Example: imflip-pi 3 8",
    )
    parser.add_argument(
        "version", nargs="?", type=int, default=1, help="estimator version 1-4"
    )
    parser.add_argument(
        "threads", nargs="?", type=int, default=1, help="number of threads"
    )
    parser.add_argument(
        "--steps", type=int, default=NUM_STEPS, help="number of integration steps"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run an estimator from the command line; return the exit status."""
    args = _build_parser().parse_args(argv)
    try:
        func = pick_pi_function(args.version)
        _check(args.steps, args.threads)
    except ValueError as error:
        print(error, file=sys.stderr)
        return 1

    started = time.perf_counter()
    pi = 0.0
    for _ in range(REPS):
        pi = func(args.steps, args.threads)
    elapsed_ms = (time.perf_counter() - started) * 1000.0 / REPS

    print(f"The number of threads that was launched is {args.threads}")
    print(f"Pi value: {pi:f}")
    line = f"Average Total execution time per REP: {elapsed_ms:9.4f} ms.  "
    if args.threads > 1:
        line += f"({elapsed_ms / args.threads:9.4f} ms per thread).  "
    print(line)
    print(f"Pi version {args.version} executed with {args.threads} threads")
    print(f"Performance = {1_000_000 * elapsed_ms / args.steps:6.3f} (ns/step)")
    return 0


if __name__ == "__main__":
    sys.exit(main())