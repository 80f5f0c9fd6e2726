# MIT License (see LICENSE)
"""
Mesh statistics used to size the hash grid.

The grid cell is chosen near the typical length scale of the motion step:

    cell_size = 2 * max(average edge length, average displacement) + r

With cells of that size a swept primitive covers only a handful of cells and
each cell holds O(1) primitives on average, which keeps the quadratic
per-cell cost of the pair join small. The grid domain is the mesh extents
over both time samples, padded by the inflation radius r.
"""
from __future__ import annotations

import numpy as np

from .errors import require
from .util import require_same_rows


def calculate_mesh_extents(
    vertices_t0: np.ndarray, vertices_t1: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """
    Componentwise bounds of all vertex positions at both time samples.

    Args:
        vertices_t0: (n, dim) positions at the start of the step.
        vertices_t1: (n, dim) positions at the end of the step.

    Returns:
        (lower_bound, upper_bound), each of shape (dim,).
    """
    require_same_rows(vertices_t0, vertices_t1)
    require(vertices_t0.shape[0] > 0, "cannot compute the extents of an empty mesh")
    lower = np.minimum(vertices_t0.min(axis=0), vertices_t1.min(axis=0))
    upper = np.maximum(vertices_t0.max(axis=0), vertices_t1.max(axis=0))
    return lower, upper


def average_edge_length(
    vertices_t0: np.ndarray, vertices_t1: np.ndarray, edges: np.ndarray
) -> float:
    """Mean edge length over all edges at both time samples (0 for no edges)."""
    if len(edges) == 0:
        return 0.0
    len_t0 = np.linalg.norm(vertices_t0[edges[:, 0]] - vertices_t0[edges[:, 1]], axis=1)
    len_t1 = np.linalg.norm(vertices_t1[edges[:, 0]] - vertices_t1[edges[:, 1]], axis=1)
    return float((len_t0.sum() + len_t1.sum()) / (2 * len(edges)))


def average_displacement_length(displacements: np.ndarray) -> float:
    """Mean Euclidean norm of the per-vertex displacement rows."""
    if len(displacements) == 0:
        return 0.0
    return float(np.linalg.norm(displacements, axis=1).sum() / len(displacements))


def suggest_cell_size(
    vertices_t0: np.ndarray,
    vertices_t1: np.ndarray,
    edges: np.ndarray,
    inflation_radius: float = 0.0,
) -> float:
    """Cell size heuristic: 2 * max(edge length, displacement) + inflation radius."""
    edge_len = average_edge_length(vertices_t0, vertices_t1, edges)
    disp_len = average_displacement_length(vertices_t1 - vertices_t0)
    return 2 * max(edge_len, disp_len) + inflation_radius
