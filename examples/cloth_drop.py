# examples/cloth_drop.py
import logging

import numpy as np
from ccd_broadphase import HashGrid, Profiler

logging.basicConfig(level=logging.DEBUG)

# 10 x 10 cloth falling towards a single static triangle
n = 10
xs, ys = np.meshgrid(np.linspace(-1, 1, n), np.linspace(-1, 1, n), indexing="ij")
cloth = np.column_stack([xs.ravel(), ys.ravel(), np.full(n * n, 0.3)])
ground = np.array([[-2.0, -2.0, 0.0], [2.0, -2.0, 0.0], [0.0, 2.0, 0.0]])

V0 = np.vstack([cloth, ground])
V1 = V0.copy()
V1[: n * n, 2] -= 0.5

faces = [(n * n, n * n + 1, n * n + 2)]
for i in range(n - 1):
    for j in range(n - 1):
        v00, v10, v01, v11 = i * n + j, (i + 1) * n + j, i * n + j + 1, (i + 1) * n + j + 1
        faces += [(v00, v10, v11), (v00, v11, v01)]
F = np.array(faces)
E = np.unique(np.sort(np.vstack([F[:, [0, 1]], F[:, [1, 2]], F[:, [2, 0]]]), axis=1), axis=0)

# The cloth and the ground are separate groups; only cross-group pairs matter
group_ids = np.concatenate([np.zeros(n * n, dtype=int), np.ones(3, dtype=int)])

profiler = Profiler()
grid = HashGrid(profiler=profiler)
grid.resize_to_mesh(V0, V1, E, inflation_radius=1e-3)
grid.add_vertices(V0, V1, inflation_radius=1e-3)
grid.add_edges(V0, V1, E, inflation_radius=1e-3)
grid.add_faces(V0, V1, F, inflation_radius=1e-3)

fv = grid.get_face_vertex_pairs(F, group_ids)
ee = grid.get_edge_edge_pairs(E, group_ids)
print("grid size:", grid.grid_size, "cell size:", grid.cell_size)
print("face-vertex candidates:", len(fv))
print("edge-edge candidates:", len(ee))
for name, stats in profiler.stats.summary().items():
    print(f"  {name:16s} {stats['mean_ms']:8.3f} ms")
