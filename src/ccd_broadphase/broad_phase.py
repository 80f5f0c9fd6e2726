# MIT License (see LICENSE)
"""
End-to-end broad phase for one motion step of a deforming mesh.

detect_collision_candidates builds a fresh HashGrid sized from the mesh,
inserts all primitives, and runs every pair query that applies:

- 2-D meshes (no faces): edge-vertex and edge-edge candidates; vertices are
  inserted through their edges so each boundary vertex appears once.
- 3-D surface meshes: additionally edge-face and face-vertex candidates; all
  vertices are inserted.

The result is conservative: every pair whose inflated swept boxes overlap
and that is not excluded by connectivity or group ids is reported. Deciding
whether the pair truly collides is left to the narrow phase.
"""
from __future__ import annotations
from dataclasses import dataclass, field

from .config import BroadPhaseConfig
from .hash_grid import HashGrid
from .profiler import Profiler
from .types import (
    EdgeEdgeCandidate,
    EdgeFaceCandidate,
    EdgeVertexCandidate,
    FaceVertexCandidate,
)
from .util import as_group_ids, as_indices, as_points, require_same_rows


@dataclass
class Candidates:
    """
    Candidate pairs of one broad-phase query, one sorted unique list per pair type.

    Attributes:
        ev_candidates: Edge-vertex pairs.
        ee_candidates: Edge-edge pairs.
        ef_candidates: Edge-face pairs.
        fv_candidates: Face-vertex pairs.
    """
    ev_candidates: list[EdgeVertexCandidate] = field(default_factory=list)
    ee_candidates: list[EdgeEdgeCandidate] = field(default_factory=list)
    ef_candidates: list[EdgeFaceCandidate] = field(default_factory=list)
    fv_candidates: list[FaceVertexCandidate] = field(default_factory=list)

    def __len__(self) -> int:
        return (
            len(self.ev_candidates)
            + len(self.ee_candidates)
            + len(self.ef_candidates)
            + len(self.fv_candidates)
        )

    def clear(self) -> None:
        self.ev_candidates.clear()
        self.ee_candidates.clear()
        self.ef_candidates.clear()
        self.fv_candidates.clear()


def detect_collision_candidates(
    vertices_t0,
    vertices_t1,
    edges,
    faces=None,
    group_ids=None,
    inflation_radius: float = 0.0,
    config: BroadPhaseConfig | None = None,
    profiler: Profiler | None = None,
) -> Candidates:
    """
    Find all candidate primitive pairs for a linear motion from t0 to t1.

    Args:
        vertices_t0: (n, dim) vertex positions at the start of the step.
        vertices_t1: (n, dim) vertex positions at the end of the step.
        edges: (m, 2) vertex indices per edge.
        faces: (k, 3) vertex indices per triangle, or None for 2-D meshes.
        group_ids: Optional per-vertex group ids. Pairs touching a common
                   group are skipped; None or empty disables the check.
        inflation_radius: Margin added to every swept box (>= 0).
        config: Parallel execution settings.
        profiler: Optional Profiler to time each stage.

    Returns:
        Candidates with sorted, duplicate-free lists.
    """
    V0 = as_points(vertices_t0, "vertices_t0")
    V1 = as_points(vertices_t1, "vertices_t1")
    require_same_rows(V0, V1)
    E = as_indices(edges, 2, "edges")
    F = as_indices(faces, 3, "faces")
    groups = as_group_ids(group_ids)

    grid = HashGrid(config=config, profiler=profiler)
    grid.resize_to_mesh(V0, V1, E, inflation_radius)

    if len(F) == 0:
        grid.add_vertices_from_edges(V0, V1, E, inflation_radius)
    else:
        grid.add_vertices(V0, V1, inflation_radius)
    grid.add_edges(V0, V1, E, inflation_radius)
    if len(F) > 0:
        grid.add_faces(V0, V1, F, inflation_radius)

    candidates = Candidates()
    candidates.ev_candidates = grid.get_edge_vertex_pairs(E, groups)
    candidates.ee_candidates = grid.get_edge_edge_pairs(E, groups)
    if len(F) > 0:
        candidates.ef_candidates = grid.get_edge_face_pairs(E, F, groups)
        candidates.fv_candidates = grid.get_face_vertex_pairs(F, groups)
    return candidates
