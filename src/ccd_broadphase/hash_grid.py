# MIT License (see LICENSE)
"""
Uniform spatial hash grid over time-swept mesh primitives.

The grid covers a bounded domain with cubic (square in 2-D) cells. Each
primitive is bounded by the box around its positions at both time samples,
inflated by a safety radius, and registered in every cell that box touches.
Candidate pairs are then read off cells shared by two primitives.

Typical use, once per motion step:

    grid = HashGrid()
    grid.resize_to_mesh(V0, V1, E, inflation_radius)
    grid.add_vertices(V0, V1, inflation_radius)
    grid.add_edges(V0, V1, E, inflation_radius)
    ev = grid.get_edge_vertex_pairs(E, group_ids)
    ee = grid.get_edge_edge_pairs(E, group_ids)

The grid is rebuilt from scratch for every step; resize() discards all items.
A grid is built and queried by a single caller; it is not safe to share one
instance between threads.
"""
from __future__ import annotations
import logging

import numpy as np

from .aabb import AABB, edge_extents, face_extents, swept_aabb, vertex_extents
from .config import BroadPhaseConfig
from .errors import require
from .pairs import get_pairs, get_pairs_same, get_pairs_same_parallel
from .parallel import merge_local_items, parallel_for
from .profiler import Profiler, maybe_section
from .sizing import calculate_mesh_extents, suggest_cell_size
from .types import (
    EdgeEdgeCandidate,
    EdgeFaceCandidate,
    EdgeVertexCandidate,
    FaceVertexCandidate,
    HashItem,
)
from .util import as_group_ids, as_indices, as_points, f64, require_same_rows

logger = logging.getLogger(__name__)


def vertex_to_min_edge(num_vertices: int, edges: np.ndarray) -> np.ndarray:
    """
    Lowest-indexed incident edge of every vertex.

    Vertices that belong to no edge map to len(edges).
    """
    out = np.full(num_vertices, len(edges), dtype=np.int64)
    edge_ids = np.arange(len(edges), dtype=np.int64)
    for col in range(edges.shape[1]):
        np.minimum.at(out, edges[:, col], edge_ids)
    return out


class HashGrid:
    """
    Spatial hash grid with separate buckets for vertices, edges and faces.

    Attributes:
        config: Parallel execution settings for insertion and sorting.
        profiler: Optional Profiler; stages are timed when present.
    """

    def __init__(
        self, config: BroadPhaseConfig | None = None, profiler: Profiler | None = None
    ) -> None:
        self.config = config or BroadPhaseConfig()
        self.profiler = profiler
        self._cell_size = 0.0
        self._grid_size: np.ndarray | None = None
        self._domain_min: np.ndarray | None = None
        self._domain_max: np.ndarray | None = None
        self._vertex_items: list[HashItem] = []
        self._edge_items: list[HashItem] = []
        self._face_items: list[HashItem] = []

    # -------------------------------------------------------------------------
    # Geometry of the grid
    # -------------------------------------------------------------------------

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def grid_size(self) -> np.ndarray:
        """Number of cells along each axis."""
        return self._grid_size.copy()

    @property
    def domain_min(self) -> np.ndarray:
        return self._domain_min.copy()

    @property
    def domain_max(self) -> np.ndarray:
        return self._domain_max.copy()

    @property
    def dim(self) -> int:
        return int(self._grid_size.size)

    @property
    def vertex_items(self) -> list[HashItem]:
        return self._vertex_items

    @property
    def edge_items(self) -> list[HashItem]:
        return self._edge_items

    @property
    def face_items(self) -> list[HashItem]:
        return self._face_items

    def resize(self, domain_min, domain_max, cell_size: float) -> None:
        """
        Clear the grid and cover [domain_min, domain_max] with cells of `cell_size`.

        grid_size = ceil((domain_max - domain_min) / cell_size), at least 1 per axis.
        """
        self.clear()
        lo = f64(domain_min).reshape(-1)
        hi = f64(domain_max).reshape(-1)
        require(
            lo.shape == hi.shape and lo.size in (2, 3),
            f"domain bounds must both have 2 or 3 components, got {lo.size} and {hi.size}",
        )
        require(cell_size > 0, f"cell_size must be positive, got {cell_size}")

        with maybe_section(self.profiler, "resize"):
            self._cell_size = float(cell_size)
            self._domain_min = lo
            self._domain_max = hi
            self._grid_size = np.maximum(np.ceil((hi - lo) / self._cell_size), 1).astype(np.int64)

        logger.debug(
            "hash-grid resized with a size of %dx%dx%d",
            self._grid_size[0],
            self._grid_size[1],
            self._grid_size[2] if self.dim == 3 else 1,
        )

    def resize_to_mesh(
        self, vertices_t0, vertices_t1, edges, inflation_radius: float = 0.0
    ) -> None:
        """
        Size the grid from mesh statistics.

        The domain is the mesh extents over both time samples padded by
        `inflation_radius`; the cell size comes from suggest_cell_size.
        """
        V0 = as_points(vertices_t0, "vertices_t0")
        V1 = as_points(vertices_t1, "vertices_t1")
        E = as_indices(edges, 2, "edges")
        mesh_min, mesh_max = calculate_mesh_extents(V0, V1)
        cell_size = suggest_cell_size(V0, V1, E, inflation_radius)
        self.resize(mesh_min - inflation_radius, mesh_max + inflation_radius, cell_size)

    def clear(self) -> None:
        """Drop all items; the grid geometry is kept."""
        self._vertex_items.clear()
        self._edge_items.clear()
        self._face_items.clear()

    # -------------------------------------------------------------------------
    # Cell indexing
    # -------------------------------------------------------------------------

    def _hash(self, x: int, y: int, z: int = 0) -> int:
        """Key of cell (x, y, z); z is 0 for 2-D grids."""
        gs = self._grid_size
        require(
            0 <= x < gs[0] and 0 <= y < gs[1] and (z == 0 if self.dim == 2 else 0 <= z < gs[2]),
            f"cell ({x}, {y}, {z}) lies outside a grid of size {gs.tolist()}",
        )
        return int((z * gs[1] + y) * gs[0] + x)

    def _cell_index(self, coords: np.ndarray) -> np.ndarray:
        """Grid coordinates of a point, clamped into the grid."""
        index = np.floor((coords - self._domain_min) / self._cell_size).astype(np.int64)
        # Rounding may land one cell outside the grid, but not further
        require(
            bool(np.all(index >= -1) and np.all(index <= self._grid_size)),
            f"point {coords.tolist()} maps to cell {index.tolist()} outside a grid of size "
            f"{self._grid_size.tolist()}",
        )
        return np.clip(index, 0, self._grid_size - 1)

    def _add_element(self, aabb: AABB, index: int, items: list[HashItem]) -> None:
        """Append one HashItem per cell covered by `aabb`."""
        require(self._grid_size is not None, "HashGrid.resize() must be called before inserting")
        require(
            aabb.dim == self.dim,
            f"cannot insert a {aabb.dim}-D box into a {self.dim}-D grid",
        )
        int_min = self._cell_index(aabb.min)
        int_max = self._cell_index(aabb.max)
        min_z, max_z = (int(int_min[2]), int(int_max[2])) if self.dim == 3 else (0, 0)

        for x in range(int(int_min[0]), int(int_max[0]) + 1):
            for y in range(int(int_min[1]), int(int_max[1]) + 1):
                for z in range(min_z, max_z + 1):
                    items.append(HashItem(self._hash(x, y, z), index, aabb))

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def _add_vertex(self, vertex_t0, vertex_t1, index, items, inflation_radius) -> None:
        lower, upper = vertex_extents(vertex_t0, vertex_t1)
        self._add_element(swept_aabb(lower, upper, inflation_radius), int(index), items)

    def _add_edge(
        self, e0_t0, e1_t0, e0_t1, e1_t1, index, items, inflation_radius
    ) -> None:
        lower, upper = edge_extents(e0_t0, e1_t0, e0_t1, e1_t1)
        self._add_element(swept_aabb(lower, upper, inflation_radius), int(index), items)

    def _add_face(
        self, f0_t0, f1_t0, f2_t0, f0_t1, f1_t1, f2_t1, index, items, inflation_radius
    ) -> None:
        lower, upper = face_extents(f0_t0, f1_t0, f2_t0, f0_t1, f1_t1, f2_t1)
        self._add_element(swept_aabb(lower, upper, inflation_radius), int(index), items)

    def add_vertex(self, vertex_t0, vertex_t1, index: int, inflation_radius: float = 0.0) -> None:
        """Add a vertex as the box around its straight-line trajectory."""
        self._add_vertex(vertex_t0, vertex_t1, index, self._vertex_items, inflation_radius)

    def add_edge(
        self,
        edge_vertex0_t0,
        edge_vertex1_t0,
        edge_vertex0_t1,
        edge_vertex1_t1,
        index: int,
        inflation_radius: float = 0.0,
    ) -> None:
        """Add an edge as the box around its time-swept quad."""
        self._add_edge(
            edge_vertex0_t0, edge_vertex1_t0, edge_vertex0_t1, edge_vertex1_t1,
            index, self._edge_items, inflation_radius,
        )

    def add_face(
        self,
        face_vertex0_t0,
        face_vertex1_t0,
        face_vertex2_t0,
        face_vertex0_t1,
        face_vertex1_t1,
        face_vertex2_t1,
        index: int,
        inflation_radius: float = 0.0,
    ) -> None:
        """Add a triangle as the box around its time-swept prism."""
        self._add_face(
            face_vertex0_t0, face_vertex1_t0, face_vertex2_t0,
            face_vertex0_t1, face_vertex1_t1, face_vertex2_t1,
            index, self._face_items, inflation_radius,
        )

    def add_vertices(self, vertices_t0, vertices_t1, inflation_radius: float = 0.0) -> None:
        """Add every vertex of the mesh."""
        V0 = as_points(vertices_t0, "vertices_t0")
        V1 = as_points(vertices_t1, "vertices_t1")
        require_same_rows(V0, V1)

        def body(begin: int, end: int, local_items: list) -> None:
            for i in range(begin, end):
                self._add_vertex(V0[i], V1[i], i, local_items, inflation_radius)

        with maybe_section(self.profiler, "insert_vertices"):
            merge_local_items(parallel_for(len(V0), body, self.config), self._vertex_items)

    def add_vertices_from_edges(
        self, vertices_t0, vertices_t1, edges, inflation_radius: float = 0.0
    ) -> None:
        """
        Add every vertex that is an endpoint of some edge, exactly once.

        Work is split over edges; a vertex is inserted only by the task that
        handles its lowest-indexed incident edge. Vertices on no edge are skipped.
        """
        V0 = as_points(vertices_t0, "vertices_t0")
        V1 = as_points(vertices_t1, "vertices_t1")
        require_same_rows(V0, V1)
        E = as_indices(edges, 2, "edges")
        min_edge = vertex_to_min_edge(len(V0), E)

        def body(begin: int, end: int, local_items: list) -> None:
            for ei in range(begin, end):
                # a set, so a degenerate edge (v, v) inserts v once
                for vi in {int(E[ei, 0]), int(E[ei, 1])}:
                    if min_edge[vi] == ei:
                        self._add_vertex(V0[vi], V1[vi], vi, local_items, inflation_radius)

        with maybe_section(self.profiler, "insert_vertices"):
            merge_local_items(parallel_for(len(E), body, self.config), self._vertex_items)

    def add_edges(self, vertices_t0, vertices_t1, edges, inflation_radius: float = 0.0) -> None:
        """Add every edge of the mesh."""
        V0 = as_points(vertices_t0, "vertices_t0")
        V1 = as_points(vertices_t1, "vertices_t1")
        require_same_rows(V0, V1)
        E = as_indices(edges, 2, "edges")

        def body(begin: int, end: int, local_items: list) -> None:
            for i in range(begin, end):
                a, b = E[i]
                self._add_edge(V0[a], V0[b], V1[a], V1[b], i, local_items, inflation_radius)

        with maybe_section(self.profiler, "insert_edges"):
            merge_local_items(parallel_for(len(E), body, self.config), self._edge_items)

    def add_faces(self, vertices_t0, vertices_t1, faces, inflation_radius: float = 0.0) -> None:
        """Add every triangle of the mesh."""
        V0 = as_points(vertices_t0, "vertices_t0")
        V1 = as_points(vertices_t1, "vertices_t1")
        require_same_rows(V0, V1)
        F = as_indices(faces, 3, "faces")

        def body(begin: int, end: int, local_items: list) -> None:
            for i in range(begin, end):
                a, b, c = F[i]
                self._add_face(
                    V0[a], V0[b], V0[c], V1[a], V1[b], V1[c], i, local_items, inflation_radius
                )

        with maybe_section(self.profiler, "insert_faces"):
            merge_local_items(parallel_for(len(F), body, self.config), self._face_items)

    # -------------------------------------------------------------------------
    # Candidate queries
    # -------------------------------------------------------------------------

    def get_edge_vertex_pairs(self, edges, group_ids=None) -> list[EdgeVertexCandidate]:
        """Edge-vertex pairs sharing a cell, excluding an edge's own endpoints."""
        E = as_indices(edges, 2, "edges").tolist()
        groups = as_group_ids(group_ids).tolist()

        def is_endpoint(ei: int, vi: int) -> bool:
            return vi in E[ei]

        def is_same_group(ei: int, vi: int) -> bool:
            return bool(groups) and groups[vi] in (groups[E[ei][0]], groups[E[ei][1]])

        with maybe_section(self.profiler, "pairs_ev"):
            pairs = get_pairs(
                is_endpoint, is_same_group, self._edge_items, self._vertex_items, self.config
            )
        logger.debug("found %d edge-vertex candidates", len(pairs))
        return [EdgeVertexCandidate(ei, vi) for ei, vi in pairs]

    def get_edge_edge_pairs(self, edges, group_ids=None) -> list[EdgeEdgeCandidate]:
        """Edge-edge pairs sharing a cell, excluding edges with a common vertex."""
        E = as_indices(edges, 2, "edges").tolist()
        groups = as_group_ids(group_ids).tolist()

        def is_endpoint(ei: int, ej: int) -> bool:
            return E[ei][0] in E[ej] or E[ei][1] in E[ej]

        def is_same_group(ei: int, ej: int) -> bool:
            if not groups:
                return False
            gi = (groups[E[ei][0]], groups[E[ei][1]])
            return groups[E[ej][0]] in gi or groups[E[ej][1]] in gi

        join = get_pairs_same_parallel if self.config.parallel_pairs else get_pairs_same
        with maybe_section(self.profiler, "pairs_ee"):
            pairs = join(is_endpoint, is_same_group, self._edge_items, self.config)
        logger.debug("found %d edge-edge candidates", len(pairs))
        return [EdgeEdgeCandidate(ei, ej) for ei, ej in pairs]

    def get_edge_face_pairs(self, edges, faces, group_ids=None) -> list[EdgeFaceCandidate]:
        """Edge-face pairs sharing a cell, excluding edges touching the face."""
        E = as_indices(edges, 2, "edges").tolist()
        F = as_indices(faces, 3, "faces").tolist()
        groups = as_group_ids(group_ids).tolist()

        def is_endpoint(ei: int, fi: int) -> bool:
            return E[ei][0] in F[fi] or E[ei][1] in F[fi]

        def is_same_group(ei: int, fi: int) -> bool:
            if not groups:
                return False
            gf = (groups[F[fi][0]], groups[F[fi][1]], groups[F[fi][2]])
            return groups[E[ei][0]] in gf or groups[E[ei][1]] in gf

        with maybe_section(self.profiler, "pairs_ef"):
            pairs = get_pairs(
                is_endpoint, is_same_group, self._edge_items, self._face_items, self.config
            )
        logger.debug("found %d edge-face candidates", len(pairs))
        return [EdgeFaceCandidate(ei, fi) for ei, fi in pairs]

    def get_face_vertex_pairs(self, faces, group_ids=None) -> list[FaceVertexCandidate]:
        """Face-vertex pairs sharing a cell, excluding a face's own corners."""
        F = as_indices(faces, 3, "faces").tolist()
        groups = as_group_ids(group_ids).tolist()

        def is_endpoint(fi: int, vi: int) -> bool:
            return vi in F[fi]

        def is_same_group(fi: int, vi: int) -> bool:
            return bool(groups) and groups[vi] in (
                groups[F[fi][0]], groups[F[fi][1]], groups[F[fi][2]]
            )

        with maybe_section(self.profiler, "pairs_fv"):
            pairs = get_pairs(
                is_endpoint, is_same_group, self._face_items, self._vertex_items, self.config
            )
        logger.debug("found %d face-vertex candidates", len(pairs))
        return [FaceVertexCandidate(fi, vi) for fi, vi in pairs]
