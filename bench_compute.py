"""Time one-shot `compute` over buffers of 0xFF bytes.

Usage:
    python bench_compute.py                      # 1,000 .. 1,000,000 bytes
    python bench_compute.py --sizes 4096 65536   # custom sizes
    python bench_compute.py --repeat 10
"""

from __future__ import annotations

import argparse
import sys
import timeit

from md5_cli import compute


DEFAULT_SIZES = (1_000, 10_000, 100_000, 1_000_000)


def bench(size: int, repeat: int = 5) -> float:
    """Return the best wall time in seconds of `compute` over `size` bytes."""
    data = b"\xff" * size
    return min(timeit.repeat(lambda: compute(data), number=1, repeat=repeat))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark one-shot MD5 computation"
    )
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=list(DEFAULT_SIZES),
        help="Input sizes in bytes (default: 1,000 10,000 100,000 1,000,000)",
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=5,
        help="Timed runs per size; the best is reported (default: 5)",
    )
    args = parser.parse_args(argv)

    if args.repeat < 1:
        print(f"ERROR: --repeat must be at least 1 (got {args.repeat})")
        return 1

    for size in args.sizes:
        if size < 0:
            print(f"ERROR: Sizes must be non-negative (got {size})")
            return 1
        seconds = bench(size, args.repeat)
        rate = size / seconds / 1e6 if seconds > 0 else float("inf")
        print(f"compute {size:>12,} bytes: {seconds * 1e3:10.3f} ms  ({rate:.2f} MB/s)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
