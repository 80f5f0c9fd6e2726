# MIT License (see LICENSE)
"""
Core record types of the broad phase.

- HashItem: one (cell key, primitive id, box) entry of a grid bucket.
- Candidate types: one per primitive-pair kind, each an ordered pair of
  indices into the caller's vertex/edge/face arrays. They are frozen and
  ordered so candidate lists can be sorted and deduplicated directly.
"""
from __future__ import annotations
from dataclasses import dataclass, field

from .aabb import AABB


@dataclass(frozen=True, order=True)
class HashItem:
    """
    An entry of the hash grid.

    A primitive that spans several cells produces one HashItem per cell, all
    sharing its id; many primitives can share a key. Items order by
    (key, id); the box does not take part in comparisons.

    Attributes:
        key: Hash of the grid cell.
        id: Index of the owning primitive (vertex, edge or face index).
        aabb: Swept, inflated bounding box of the primitive.
    """
    key: int
    id: int
    aabb: AABB = field(compare=False)


@dataclass(frozen=True, order=True)
class EdgeVertexCandidate:
    """Edge and vertex whose swept boxes overlap."""
    edge_index: int
    vertex_index: int


@dataclass(frozen=True, order=True)
class EdgeEdgeCandidate:
    """Two edges whose swept boxes overlap; edge0_index < edge1_index."""
    edge0_index: int
    edge1_index: int


@dataclass(frozen=True, order=True)
class EdgeFaceCandidate:
    """Edge and triangle whose swept boxes overlap."""
    edge_index: int
    face_index: int


@dataclass(frozen=True, order=True)
class FaceVertexCandidate:
    """Triangle and vertex whose swept boxes overlap."""
    face_index: int
    vertex_index: int
