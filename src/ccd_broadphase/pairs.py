# MIT License (see LICENSE)
"""
Sorted merge-join of hash-grid buckets into candidate pairs.

Items that share a key share a grid cell. After sorting each bucket by
(key, id), all items of a cell are contiguous, so pairs are formed only
inside runs of equal keys and never across different keys:

- get_pairs joins two buckets (e.g. edges x vertices) by walking both sorted
  lists in step and pairing the matching runs.
- get_pairs_same joins a bucket with itself (e.g. edges x edges), pairing
  each item only with later items of its run so that no primitive is paired
  with itself and no pair is formed twice in the same cell.

A same-cell pair is kept when the two primitives share no mesh vertex
(`is_endpoint`), are not in a common group (`is_same_group`), and their
boxes actually overlap. The shared key alone is not enough: two boxes can
both reach into a cell without touching each other.

A pair of primitives spanning several common cells is found once per cell,
so the accumulated pairs are sorted and deduplicated at the end.
"""
from __future__ import annotations
from operator import attrgetter
from typing import Callable

from .aabb import are_overlapping
from .config import BroadPhaseConfig
from .parallel import merge_local_items, parallel_for, parallel_sort
from .types import HashItem

Predicate = Callable[[int, int], bool]
Pair = tuple[int, int]

item_order = attrgetter("key", "id")


def _run_end(items: list[HashItem], begin: int) -> int:
    """Index one past the run of items sharing items[begin].key."""
    key = items[begin].key
    end = begin + 1
    while end < len(items) and items[end].key == key:
        end += 1
    return end


def _is_candidate(
    item0: HashItem, item1: HashItem, is_endpoint: Predicate, is_same_group: Predicate
) -> bool:
    return (
        not is_endpoint(item0.id, item1.id)
        and not is_same_group(item0.id, item1.id)
        and are_overlapping(item0.aabb, item1.aabb)
    )


def unique_pairs(candidates: list[Pair]) -> list[Pair]:
    """Sort pairs and drop exact duplicates."""
    candidates.sort()
    out: list[Pair] = []
    for pair in candidates:
        if not out or out[-1] != pair:
            out.append(pair)
    return out


def get_pairs(
    is_endpoint: Predicate,
    is_same_group: Predicate,
    items0: list[HashItem],
    items1: list[HashItem],
    config: BroadPhaseConfig | None = None,
) -> list[Pair]:
    """
    Candidate pairs (id0, id1) between two buckets.

    Both buckets are sorted in place. The walk advances whichever side has
    the smaller key, one run at a time, and pairs the two runs whenever the
    keys agree.

    Args:
        is_endpoint: (id0, id1) -> True if the primitives share a mesh vertex.
        is_same_group: (id0, id1) -> True if the pair is excluded by group ids.
        items0: Bucket whose ids become the first element of each pair.
        items1: Bucket whose ids become the second element of each pair.
        config: Parallel settings for sorting.

    Returns:
        Sorted list of unique (id0, id1) tuples.
    """
    config = config or BroadPhaseConfig()
    parallel_sort(items0, item_order, config)
    parallel_sort(items1, item_order, config)

    candidates: list[Pair] = []
    i, j = 0, 0
    while i < len(items0) and j < len(items1):
        key0, key1 = items0[i].key, items1[j].key
        if key0 < key1:
            i = _run_end(items0, i)
        elif key1 < key0:
            j = _run_end(items1, j)
        else:
            i_end, j_end = _run_end(items0, i), _run_end(items1, j)
            for item0 in items0[i:i_end]:
                for item1 in items1[j:j_end]:
                    if _is_candidate(item0, item1, is_endpoint, is_same_group):
                        candidates.append((item0.id, item1.id))
            i, j = i_end, j_end

    return unique_pairs(candidates)


def _pairs_in_range(
    items: list[HashItem],
    begin: int,
    end: int,
    is_endpoint: Predicate,
    is_same_group: Predicate,
    out: list[Pair],
) -> None:
    """Same-bucket pairs whose first item lies in [begin, end); the scan may run past end within a run."""
    for i in range(begin, end):
        item0 = items[i]
        for j in range(i + 1, len(items)):
            item1 = items[j]
            if item1.key != item0.key:
                break
            if _is_candidate(item0, item1, is_endpoint, is_same_group):
                out.append((item0.id, item1.id))


def get_pairs_same(
    is_endpoint: Predicate,
    is_same_group: Predicate,
    items: list[HashItem],
    config: BroadPhaseConfig | None = None,
) -> list[Pair]:
    """
    Candidate pairs within a single bucket.

    The bucket is sorted in place. Each item is paired with the items after
    it until the key changes; within a run ids are strictly increasing, so
    every pair comes out as (smaller id, larger id).

    Returns:
        Sorted list of unique (id0, id1) tuples with id0 < id1.
    """
    config = config or BroadPhaseConfig()
    parallel_sort(items, item_order, config)

    candidates: list[Pair] = []
    _pairs_in_range(items, 0, len(items), is_endpoint, is_same_group, candidates)
    return unique_pairs(candidates)


def get_pairs_same_parallel(
    is_endpoint: Predicate,
    is_same_group: Predicate,
    items: list[HashItem],
    config: BroadPhaseConfig | None = None,
) -> list[Pair]:
    """
    Parallel form of get_pairs_same with identical output.

    The sorted bucket is cut into equal-key runs and the runs are handed out
    to workers in blocked ranges. Each worker fills a private list of pairs,
    and the lists are merged before deduplication.
    """
    config = config or BroadPhaseConfig()
    parallel_sort(items, item_order, config)

    runs: list[tuple[int, int]] = []
    begin = 0
    while begin < len(items):
        end = _run_end(items, begin)
        if end - begin > 1:
            runs.append((begin, end))
        begin = end

    def body(run_begin: int, run_end: int, local_pairs: list) -> None:
        for begin, end in runs[run_begin:run_end]:
            _pairs_in_range(items, begin, end, is_endpoint, is_same_group, local_pairs)

    candidates: list[Pair] = []
    merge_local_items(parallel_for(len(runs), body, config), candidates)
    return unique_pairs(candidates)
