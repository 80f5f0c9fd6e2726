# MIT License (see LICENSE)
import numpy as np
import pytest

from ccd_broadphase.aabb import (
    AABB,
    are_overlapping,
    edge_extents,
    face_extents,
    swept_aabb,
    vertex_extents,
)
from ccd_broadphase.errors import ContractViolation


def test_derived_center_and_half_extent():
    """center = min + half_extent, half_extent = (max - min) / 2."""
    box = AABB((0.0, -2.0, 1.0), (4.0, 2.0, 1.0))
    assert np.allclose(box.half_extent, [2.0, 2.0, 0.0])
    assert np.allclose(box.center, [2.0, 0.0, 1.0])
    assert box.dim == 3


def test_min_greater_than_max_is_rejected():
    with pytest.raises(ContractViolation):
        AABB((1.0, 0.0), (0.0, 1.0))


def test_corner_dimensions_must_match():
    with pytest.raises(ContractViolation):
        AABB((0.0, 0.0), (1.0, 1.0, 1.0))
    with pytest.raises(ContractViolation):
        AABB((0.0,), (1.0,))


@pytest.mark.parametrize("dim", [2, 3])
def test_overlap_is_symmetric(dim):
    """overlap(a, b) == overlap(b, a) for random boxes."""
    rng = np.random.default_rng(42)
    for _ in range(200):
        lo_a = rng.uniform(-1, 1, dim)
        lo_b = rng.uniform(-1, 1, dim)
        a = AABB(lo_a, lo_a + rng.uniform(0, 0.8, dim))
        b = AABB(lo_b, lo_b + rng.uniform(0, 0.8, dim))
        assert are_overlapping(a, b) == are_overlapping(b, a)


def test_touching_boxes_overlap():
    """Boxes sharing only a face, an edge or a corner count as overlapping."""
    a = AABB((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
    face = AABB((1.0, 0.0, 0.0), (2.0, 1.0, 1.0))
    edge = AABB((1.0, 1.0, 0.0), (2.0, 2.0, 1.0))
    corner = AABB((1.0, 1.0, 1.0), (2.0, 2.0, 2.0))
    assert are_overlapping(a, face)
    assert are_overlapping(a, edge)
    assert are_overlapping(a, corner)


def test_separated_boxes_do_not_overlap():
    a = AABB((0.0, 0.0), (1.0, 1.0))
    # overlapping in x, separated in y
    b = AABB((0.5, 1.01), (2.0, 2.0))
    assert not are_overlapping(a, b)


def test_overlap_requires_equal_dimension():
    with pytest.raises(ContractViolation):
        are_overlapping(AABB((0, 0), (1, 1)), AABB((0, 0, 0), (1, 1, 1)))


def test_union_of_two_and_three_boxes():
    a = AABB((0.0, 0.0), (1.0, 1.0))
    b = AABB((-1.0, 0.5), (0.5, 3.0))
    c = AABB((2.0, -4.0), (2.5, -3.0))

    ab = AABB.union(a, b)
    assert np.allclose(ab.min, [-1.0, 0.0])
    assert np.allclose(ab.max, [1.0, 3.0])

    abc = AABB.union(a, b, c)
    assert np.allclose(abc.min, [-1.0, -4.0])
    assert np.allclose(abc.max, [2.5, 3.0])

    with pytest.raises(ContractViolation):
        AABB.union(a)


def test_swept_extents_cover_both_time_samples():
    lo, hi = vertex_extents((0.0, 1.0, 2.0), (1.0, -1.0, 2.0))
    assert np.allclose(lo, [0.0, -1.0, 2.0])
    assert np.allclose(hi, [1.0, 1.0, 2.0])

    lo, hi = edge_extents((0, 0), (1, 0), (0, 2), (1, 2))
    assert np.allclose(lo, [0.0, 0.0])
    assert np.allclose(hi, [1.0, 2.0])

    lo, hi = face_extents((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, -1), (1, 0, -1), (0, 1, -1))
    assert np.allclose(lo, [0.0, 0.0, -1.0])
    assert np.allclose(hi, [1.0, 1.0, 0.0])


def test_inflation_grows_every_axis():
    box = swept_aabb(np.array([0.0, 0.0]), np.array([1.0, 2.0]), inflation_radius=0.25)
    assert np.allclose(box.min, [-0.25, -0.25])
    assert np.allclose(box.max, [1.25, 2.25])
    assert np.allclose(box.inflated(0.75).max, [2.0, 3.0])
