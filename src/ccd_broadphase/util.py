# MIT License (see LICENSE)
"""
Array coercion and environment helpers.

Provides the small conversions used throughout the package so that callers
may pass lists, tuples or numpy arrays for positions and connectivity.
Coordinates are float64 arrays with 2 or 3 components; connectivity is an
int64 matrix with one row per primitive.
"""
from __future__ import annotations
import os

import numpy as np

from .errors import require


def f64(x) -> np.ndarray:
    """Convert any array-like to a float64 numpy array."""
    return np.array(x, dtype=np.float64)


def as_points(x, name: str = "vertices") -> np.ndarray:
    """
    Convert a row-per-vertex coordinate array to float64 of shape (n, dim).

    dim must be 2 or 3, so an empty mesh must still be given as (0, dim).
    """
    arr = np.asarray(x, dtype=np.float64)
    require(
        arr.ndim == 2 and arr.shape[1] in (2, 3),
        f"{name} must have shape (n, 2) or (n, 3), got {arr.shape}",
    )
    return arr


def as_indices(x, cols: int, name: str) -> np.ndarray:
    """
    Convert connectivity to an int64 matrix of shape (m, cols).

    None and empty inputs become a (0, cols) matrix.
    """
    if x is None:
        return np.zeros((0, cols), dtype=np.int64)
    arr = np.asarray(x, dtype=np.int64)
    if arr.size == 0:
        return arr.reshape(0, cols)
    require(
        arr.ndim == 2 and arr.shape[1] == cols,
        f"{name} must have shape (m, {cols}), got {arr.shape}",
    )
    return arr


def as_group_ids(x) -> np.ndarray:
    """Convert optional per-vertex group ids to a 1-D int64 array (possibly empty)."""
    if x is None:
        return np.zeros(0, dtype=np.int64)
    return np.asarray(x, dtype=np.int64).reshape(-1)


def require_same_rows(a: np.ndarray, b: np.ndarray) -> None:
    """Vertex positions at both time samples must describe the same vertices."""
    require(
        a.shape == b.shape,
        f"vertices_t0 and vertices_t1 must have matching shapes, got {a.shape} and {b.shape}",
    )


def env_int(name: str, default: int | None) -> int | None:
    """Read an integer environment variable, falling back to `default` when unset or blank."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return int(raw)


def env_flag(name: str) -> bool:
    """Check if a boolean switch is enabled ("1") via environment variable."""
    return os.environ.get(name, "0") == "1"
