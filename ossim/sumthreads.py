"""Sum 1..n by splitting the range across worker threads."""

from __future__ import annotations

import sys
import time
from concurrent.futures import ThreadPoolExecutor

_U64 = (1 << 64) - 1
_PROG = "sumthreads"


def partial_sum(start: int, end: int) -> int:
    """Sum of ``start..end`` inclusive, wrapped to 64 bits; 0 if empty."""
    if end < start:
        return 0
    return ((start + end) * (end - start + 1) // 2) & _U64


def split_ranges(n: int, num_threads: int) -> list[tuple[int, int]]:
    """Split ``1..n`` into one inclusive range per thread; the last takes the rest."""
    if num_threads <= 0:
        raise ValueError("number of threads must be positive")
    width = n // num_threads
    ranges = []
    start = 1
    for i in range(num_threads):
        end = n if i == num_threads - 1 else start + width - 1
        ranges.append((start, end))
        start += width
    return ranges


def threaded_sum(n: int, num_threads: int) -> int:
    """Sum ``1..n`` using ``num_threads`` worker threads."""
    ranges = split_ranges(n, num_threads)
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        results = pool.map(lambda r: partial_sum(*r), ranges)
        return sum(results) & _U64


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``<num_threads> <n>``."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print(f"Usage: {_PROG} <num_threads> <n>")
        return 1
    try:
        num_threads = int(args[0])
        n = int(args[1])
    except ValueError:
        print(f"Usage: {_PROG} <num_threads> <n>")
        return 1
    if num_threads <= 0 or n < 0:
        print("num_threads must be positive and n must not be negative")
        return 1

    started = time.process_time()
    total = threaded_sum(n, num_threads)
    elapsed = time.process_time() - started

    print(f"Sum (multi-thread) from 1 to {n}: {total}")
    print(f"Execution Time: {elapsed:.6f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())