# MIT License (see LICENSE)
"""
Fork-join helpers for data-parallel insertion and sorting.

Insertion follows a private-buffer pattern:
1. The index range [0, n) is split into contiguous blocked ranges.
2. Each task appends HashItems to its own list; tasks share no mutable state.
3. After every task has finished, merge_local_items concatenates the lists
   into the target bucket on the calling thread. This is the only
   synchronization point.

The order in which buffers are concatenated is irrelevant because every
bucket is sorted by (key, id) before it is joined.
"""
from __future__ import annotations
import heapq
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

from .config import BroadPhaseConfig

T = TypeVar("T")

# body(begin, end, local_items) processes indices [begin, end) into local_items
RangeBody = Callable[[int, int, list], None]


def blocked_ranges(n: int, grain_size: int, workers: int) -> list[tuple[int, int]]:
    """
    Split [0, n) into contiguous ranges.

    Produces up to 4 * workers ranges so that uneven tasks balance out.
    No range is shorter than `grain_size` except the last one.
    """
    if n <= 0:
        return []
    num_chunks = max(1, min(4 * workers, n // grain_size))
    step = -(-n // num_chunks)
    return [(begin, min(begin + step, n)) for begin in range(0, n, step)]


def parallel_for(n: int, body: RangeBody, config: BroadPhaseConfig) -> list[list]:
    """
    Run `body` over [0, n) and return one private buffer per task.

    Small batches and single-worker configurations run inline.
    """
    ranges = blocked_ranges(n, config.grain_size, config.workers)
    storages: list[list] = [[] for _ in ranges]
    if len(ranges) <= 1 or config.workers == 1:
        for (begin, end), local_items in zip(ranges, storages):
            body(begin, end, local_items)
        return storages

    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="broadphase") as pool:
        futures = [
            pool.submit(body, begin, end, local_items)
            for (begin, end), local_items in zip(ranges, storages)
        ]
        # result() re-raises a worker's exception on the calling thread
        for future in futures:
            future.result()
    return storages


def merge_local_items(storages: Iterable[list[T]], items: list[T]) -> None:
    """Serial merge of per-task buffers into `items`."""
    for local_items in storages:
        items.extend(local_items)


def parallel_sort(items: list[T], key: Callable[[T], object], config: BroadPhaseConfig) -> None:
    """
    Sort `items` in place.

    Chunks are sorted concurrently and then k-way merged, which gives the
    same result as a single full sort under the total order `key`.
    """
    ranges = blocked_ranges(len(items), config.grain_size, config.workers)
    if len(ranges) <= 1 or config.workers == 1:
        items.sort(key=key)
        return

    def sort_chunk(begin: int, end: int) -> list[T]:
        return sorted(items[begin:end], key=key)

    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="broadphase-sort") as pool:
        chunks = list(pool.map(lambda r: sort_chunk(*r), ranges))
    items[:] = heapq.merge(*chunks, key=key)
