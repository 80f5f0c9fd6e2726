# MIT License (see LICENSE)
"""
ccd_broadphase - Spatial-hash broad phase for continuous mesh collision.

Given vertex positions of a deforming mesh at the start and end of a motion
step, this package finds the primitive pairs whose time-swept bounding boxes
overlap: edge-vertex, edge-edge, edge-face and face-vertex candidates. The
exact collision test on each candidate belongs to a separate narrow phase.

Main entry points:
    - detect_collision_candidates: One-call broad phase for a mesh.
    - HashGrid: Grid construction, insertion and per-type pair queries.
    - AABB / are_overlapping: Bounding boxes and the overlap test.
    - BroadPhaseConfig: Parallel execution settings.

Example:
    from ccd_broadphase import detect_collision_candidates

    candidates = detect_collision_candidates(V0, V1, edges, faces, inflation_radius=1e-3)
    for c in candidates.ee_candidates:
        narrow_phase_edge_edge(c.edge0_index, c.edge1_index)
"""
from .aabb import AABB, are_overlapping
from .broad_phase import Candidates, detect_collision_candidates
from .config import BroadPhaseConfig
from .errors import BroadPhaseError, ContractViolation
from .hash_grid import HashGrid
from .profiler import Profiler
from .sizing import average_displacement_length, average_edge_length
from .types import (
    EdgeEdgeCandidate,
    EdgeFaceCandidate,
    EdgeVertexCandidate,
    FaceVertexCandidate,
    HashItem,
)

__all__ = [
    # Broad phase
    "detect_collision_candidates",
    "Candidates",
    "HashGrid",
    "HashItem",
    # Geometry
    "AABB",
    "are_overlapping",
    "average_edge_length",
    "average_displacement_length",
    # Candidates
    "EdgeVertexCandidate",
    "EdgeEdgeCandidate",
    "EdgeFaceCandidate",
    "FaceVertexCandidate",
    # Configuration and diagnostics
    "BroadPhaseConfig",
    "Profiler",
    # Errors
    "BroadPhaseError",
    "ContractViolation",
]
