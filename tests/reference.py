"""
Reference helpers for the broad-phase tests: small meshes and an all-pairs
brute-force candidate search to compare the hash grid against.
"""
import numpy as np

from ccd_broadphase.aabb import are_overlapping, point_extents, swept_aabb


def edges_from_faces(faces):
    """Unique undirected edges of a triangle list, as sorted (a, b) rows."""
    pairs = np.vstack([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    return np.unique(np.sort(pairs, axis=1), axis=0)


def cloth_sheet(nx, ny, spacing=1.0, z=0.0):
    """Flat triangulated sheet in the plane at height z. Returns (V, E, F)."""
    xs, ys = np.meshgrid(np.arange(nx) * spacing, np.arange(ny) * spacing, indexing="ij")
    V = np.column_stack([xs.ravel(), ys.ravel(), np.full(nx * ny, z)])
    faces = []
    for i in range(nx - 1):
        for j in range(ny - 1):
            v00 = i * ny + j
            v10 = (i + 1) * ny + j
            v01 = i * ny + j + 1
            v11 = (i + 1) * ny + j + 1
            faces.append((v00, v10, v11))
            faces.append((v00, v11, v01))
    F = np.array(faces, dtype=np.int64)
    return V, edges_from_faces(F), F


def falling_sheets(seed=7, n=6):
    """
    Two sheets: one resting at z=0, one dropping through it with jitter.

    Returns (V0, V1, E, F, group_ids) with the two sheets in groups 1 and 2.
    """
    rng = np.random.default_rng(seed)
    Va, Ea, Fa = cloth_sheet(n, n, spacing=1.0, z=0.0)
    Vb, Eb, Fb = cloth_sheet(n, n, spacing=1.0, z=0.6)
    Vb[:, :2] += 0.35
    offset = len(Va)

    V0 = np.vstack([Va, Vb])
    E = np.vstack([Ea, Eb + offset])
    F = np.vstack([Fa, Fb + offset])

    V1 = V0.copy()
    V1[offset:, 2] -= 1.2
    V1 += rng.normal(scale=0.05, size=V1.shape)
    groups = np.concatenate([np.ones(len(Va), dtype=np.int64), np.full(len(Vb), 2)])
    return V0, V1, E, F, groups


def zigzag_polylines(seed=3, n=12):
    """
    Two 2-D polylines, the upper one moving down across the lower one.

    Returns (V0, V1, E).
    """
    rng = np.random.default_rng(seed)
    x = np.arange(n, dtype=np.float64)
    lower = np.column_stack([x, 0.3 * (x % 2)])
    upper = np.column_stack([x + 0.5, 1.0 + 0.3 * (x % 2)])
    V0 = np.vstack([lower, upper])
    V1 = V0.copy()
    V1[n:, 1] -= 1.5
    V1 += rng.normal(scale=0.05, size=V1.shape)
    chain = np.column_stack([np.arange(n - 1), np.arange(1, n)])
    E = np.vstack([chain, chain + n])
    return V0, V1, E


def swept_boxes(V0, V1, rows, inflation_radius=0.0):
    """Swept, inflated box of each primitive given as rows of vertex indices."""
    boxes = []
    for row in np.atleast_2d(rows):
        points = [V0[i] for i in row] + [V1[i] for i in row]
        lower, upper = point_extents(*points)
        boxes.append(swept_aabb(lower, upper, inflation_radius))
    return boxes


def brute_force_pairs(boxes0, boxes1, excluded, same=False):
    """
    All (i, j) with overlapping boxes that `excluded(i, j)` does not reject.

    With same=True boxes0 and boxes1 are one list and only i < j is reported.
    """
    out = []
    for i, a in enumerate(boxes0):
        for j, b in enumerate(boxes1):
            if same and j <= i:
                continue
            if not excluded(i, j) and are_overlapping(a, b):
                out.append((i, j))
    return out


def shares_vertex(row_a, row_b):
    return bool(set(np.atleast_1d(row_a).tolist()) & set(np.atleast_1d(row_b).tolist()))


def shares_group(groups, row_a, row_b):
    if len(groups) == 0:
        return False
    ga = {int(groups[i]) for i in np.atleast_1d(row_a)}
    gb = {int(groups[i]) for i in np.atleast_1d(row_b)}
    return bool(ga & gb)
