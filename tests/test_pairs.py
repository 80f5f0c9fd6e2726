# MIT License (see LICENSE)
import numpy as np

from ccd_broadphase.aabb import AABB
from ccd_broadphase.config import BroadPhaseConfig
from ccd_broadphase.hash_grid import HashGrid
from ccd_broadphase.pairs import (
    get_pairs,
    get_pairs_same,
    get_pairs_same_parallel,
    unique_pairs,
)
from ccd_broadphase.types import HashItem

from reference import falling_sheets


def never(a, b):
    return False


UNIT = AABB((0.0, 0.0), (1.0, 1.0))
NEAR = AABB((0.5, 0.5), (1.5, 1.5))
FAR = AABB((5.0, 5.0), (6.0, 6.0))


def test_hash_items_order_by_key_then_id():
    items = [HashItem(2, 0, UNIT), HashItem(1, 5, UNIT), HashItem(1, 3, FAR)]
    assert [(i.key, i.id) for i in sorted(items)] == [(1, 3), (1, 5), (2, 0)]


def test_unique_pairs_sorts_and_deduplicates():
    assert unique_pairs([(2, 1), (0, 3), (2, 1), (0, 3), (0, 1)]) == [(0, 1), (0, 3), (2, 1)]


def test_two_list_join_pairs_items_in_the_same_cell():
    items0 = [HashItem(3, 0, UNIT), HashItem(7, 1, UNIT)]
    items1 = [HashItem(3, 10, NEAR), HashItem(4, 11, NEAR)]
    assert get_pairs(never, never, items0, items1) == [(0, 10)]


def test_two_list_join_skips_leading_runs_on_either_side():
    """Keys present in only one list never stall the merge."""
    items0 = [HashItem(1, 0, UNIT), HashItem(5, 1, UNIT), HashItem(9, 2, UNIT)]
    items1 = [HashItem(0, 20, NEAR), HashItem(2, 21, NEAR), HashItem(5, 22, NEAR),
              HashItem(9, 23, NEAR)]
    assert get_pairs(never, never, items0, items1) == [(1, 22), (2, 23)]


def test_two_list_join_sorts_its_inputs():
    items0 = [HashItem(5, 1, UNIT), HashItem(1, 0, UNIT)]
    items1 = [HashItem(5, 22, NEAR), HashItem(1, 21, NEAR)]
    assert get_pairs(never, never, items0, items1) == [(0, 21), (1, 22)]
    assert [item.key for item in items0] == [1, 5]


def test_pair_found_in_several_cells_is_reported_once():
    items0 = [HashItem(k, 0, UNIT) for k in range(4)]
    items1 = [HashItem(k, 1, NEAR) for k in range(4)]
    assert get_pairs(never, never, items0, items1) == [(0, 1)]


def test_shared_cell_without_box_overlap_is_not_a_candidate():
    items0 = [HashItem(0, 0, UNIT)]
    items1 = [HashItem(0, 1, FAR)]
    assert get_pairs(never, never, items0, items1) == []


def test_filters_reject_pairs():
    items0 = [HashItem(0, 0, UNIT), HashItem(0, 1, UNIT)]
    items1 = [HashItem(0, 2, NEAR), HashItem(0, 3, NEAR)]

    def is_endpoint(a, b):
        return (a, b) == (0, 2)

    def is_same_group(a, b):
        return (a, b) == (1, 3)

    assert get_pairs(is_endpoint, is_same_group, items0, items1) == [(0, 3), (1, 2)]


def test_same_list_join_orders_ids_and_skips_self_pairs():
    items = [HashItem(0, 4, NEAR), HashItem(0, 1, UNIT), HashItem(0, 2, FAR),
             HashItem(1, 4, NEAR), HashItem(1, 1, UNIT)]
    # 4 and 1 share two cells; 2 shares a cell but not a box
    assert get_pairs_same(never, never, items) == [(1, 4)]


def test_same_list_join_stops_at_key_boundaries():
    items = [HashItem(0, 0, UNIT), HashItem(1, 1, UNIT), HashItem(2, 2, UNIT)]
    assert get_pairs_same(never, never, items) == []


def test_parallel_same_list_join_matches_serial():
    V0, V1, E, _, _ = falling_sheets(seed=11)
    grid = HashGrid()
    grid.resize_to_mesh(V0, V1, E, 0.02)
    grid.add_edges(V0, V1, E, 0.02)
    edges = E.tolist()

    def shares_vertex(a, b):
        return bool(set(edges[a]) & set(edges[b]))

    serial = get_pairs_same(shares_vertex, never, list(grid.edge_items))
    parallel = get_pairs_same_parallel(
        shares_vertex, never, list(grid.edge_items),
        BroadPhaseConfig(num_workers=4, grain_size=2),
    )
    assert serial == parallel
    assert len(serial) > 0
    assert all(a < b for a, b in serial)


def test_join_is_idempotent():
    rng = np.random.default_rng(5)
    items0, items1 = [], []
    for i in range(40):
        lo = rng.uniform(0, 4, 2)
        box = AABB(lo, lo + 0.6)
        items0.append(HashItem(int(rng.integers(0, 6)), i, box))
        items1.append(HashItem(int(rng.integers(0, 6)), i, box))

    first = get_pairs(never, never, items0, items1)
    second = get_pairs(never, never, items0, items1)
    assert first == second
