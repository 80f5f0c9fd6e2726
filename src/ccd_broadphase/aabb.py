# MIT License (see LICENSE)
"""
Axis-aligned bounding boxes for time-swept mesh primitives.

A primitive moving linearly between two time samples is bounded by the box
around all of its constituent points at both samples:
- vertex: 2 points (a temporal edge),
- edge:   4 points (a temporal quad),
- face:   6 points (a temporal prism).

Boxes are dimension generic: min/max are float64 arrays with 2 or 3
components, and the overlap test works on either.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .errors import require
from .util import f64


@dataclass(frozen=True, eq=False)
class AABB:
    """
    Axis-aligned bounding box.

    Attributes:
        min: Lower corner, 2 or 3 components.
        max: Upper corner, same dimension as min, componentwise >= min.
        half_extent: (max - min) / 2, derived.
        center: min + half_extent, derived.
    """
    min: np.ndarray
    max: np.ndarray
    half_extent: np.ndarray = field(init=False, repr=False)
    center: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        lo = f64(self.min).reshape(-1)
        hi = f64(self.max).reshape(-1)
        require(
            lo.shape == hi.shape and lo.size in (2, 3),
            f"AABB corners must both have 2 or 3 components, got {lo.size} and {hi.size}",
        )
        require(bool(np.all(lo <= hi)), f"AABB min must not exceed max, got min={lo} max={hi}")
        half = (hi - lo) / 2
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)
        object.__setattr__(self, "half_extent", half)
        object.__setattr__(self, "center", lo + half)

    @property
    def dim(self) -> int:
        return int(self.min.size)

    @classmethod
    def union(cls, *boxes: "AABB") -> "AABB":
        """Smallest box containing two or three boxes."""
        require(len(boxes) in (2, 3), f"AABB.union takes 2 or 3 boxes, got {len(boxes)}")
        lo = np.minimum.reduce([b.min for b in boxes])
        hi = np.maximum.reduce([b.max for b in boxes])
        return cls(lo, hi)

    def inflated(self, radius: float) -> "AABB":
        """Copy of this box grown by `radius` on every side."""
        return AABB(self.min - radius, self.max + radius)


def are_overlapping(a: AABB, b: AABB) -> bool:
    """
    Separating-axis test for two boxes of equal dimension.

    Boxes that only touch along a face, edge or corner overlap:
    |c_a - c_b| <= h_a + h_b must hold on every axis.
    """
    require(a.min.size == b.min.size, f"cannot compare {a.dim}-D and {b.dim}-D boxes")
    return bool(np.all(np.abs(a.center - b.center) <= a.half_extent + b.half_extent))


def point_extents(*points) -> tuple[np.ndarray, np.ndarray]:
    """Componentwise (lower, upper) bounds of a set of points."""
    pts = np.vstack([f64(p).reshape(-1) for p in points])
    return pts.min(axis=0), pts.max(axis=0)


def vertex_extents(vertex_t0, vertex_t1) -> tuple[np.ndarray, np.ndarray]:
    """Bounds of a vertex moving through time (a temporal edge)."""
    return point_extents(vertex_t0, vertex_t1)


def edge_extents(
    edge_vertex0_t0, edge_vertex1_t0, edge_vertex0_t1, edge_vertex1_t1
) -> tuple[np.ndarray, np.ndarray]:
    """Bounds of an edge moving through time (a temporal quad)."""
    return point_extents(edge_vertex0_t0, edge_vertex1_t0, edge_vertex0_t1, edge_vertex1_t1)


def face_extents(
    face_vertex0_t0,
    face_vertex1_t0,
    face_vertex2_t0,
    face_vertex0_t1,
    face_vertex1_t1,
    face_vertex2_t1,
) -> tuple[np.ndarray, np.ndarray]:
    """Bounds of a triangle moving through time."""
    return point_extents(
        face_vertex0_t0, face_vertex1_t0, face_vertex2_t0,
        face_vertex0_t1, face_vertex1_t1, face_vertex2_t1,
    )


def swept_aabb(lower: np.ndarray, upper: np.ndarray, inflation_radius: float = 0.0) -> AABB:
    """AABB of the given extents, inflated outward by `inflation_radius` on every axis."""
    return AABB(lower - inflation_radius, upper + inflation_radius)
