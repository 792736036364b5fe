"""Parameter tuning and throughput measurement for search benchmarks."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

DEFAULT_TOLERANCE = 0.0001


@dataclass
class Stopwatch:
    """Measures seconds since it was created."""

    clock: Callable[[], float] = time.perf_counter
    start: float = field(init=False)

    def __post_init__(self) -> None:
        self.start = self.clock()

    def elapsed(self) -> float:
        """Seconds since the stopwatch was started."""
        return self.clock() - self.start


def find_smallest_param(
    recall_at: Callable[[int], float],
    low: int,
    high: int,
    expected_recall: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> int:
    """Binary-search ``low`` .. ``high`` for a parameter reaching ``expected_recall``.

    ``recall_at`` must not decrease as the parameter grows.  A parameter
    whose recall lies within ``tolerance`` of the target is returned at
    once; otherwise the smallest parameter above every tried one that fell
    short is returned, which may be ``high + 1``.
    """
    left, right = low, high
    while left <= right:
        mid = left + (right - left) // 2
        recall = recall_at(mid)
        if abs(recall - expected_recall) <= tolerance:
            return mid
        if recall < expected_recall:
            left = mid + 1
        else:
            right = mid - 1
    return left


def split_work(total: int, workers: int) -> list[range]:
    """Split ``total`` items into one contiguous range per worker.

    Every worker but the last ones gets ``ceil(total / workers)`` items;
    workers past the end get an empty range.
    """
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")
    if total < 0:
        raise ValueError(f"total must not be negative, got {total}")
    per_worker = -(-total // workers)
    chunks = []
    for worker in range(workers):
        start = per_worker * worker
        count = max(0, min(per_worker, total - start))
        chunks.append(range(start, start + count))
    return chunks


def run_parallel(handle: Callable[[int], object], total: int, workers: int) -> float:
    """Call ``handle`` for every index below ``total`` on ``workers`` threads.

    Each thread handles one contiguous share of the indices in order.
    Returns the elapsed wall-clock seconds; an exception raised by
    ``handle`` is re-raised once all threads have finished.
    """
    chunks = split_work(total, workers)

    def worker(chunk: range) -> None:
        for index in chunk:
            handle(index)

    watch = Stopwatch()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(worker, chunk) for chunk in chunks]
    elapsed = watch.elapsed()
    for future in futures:
        future.result()
    return elapsed