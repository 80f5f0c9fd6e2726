# examples/polyline_2d.py
import numpy as np
from ccd_broadphase import detect_collision_candidates

# A flat 2-D strand and a second strand dropping onto it
V0 = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [0.5, 0.4], [1.5, 0.4]])
V1 = V0.copy()
V1[3:, 1] -= 0.6
edges = np.array([[0, 1], [1, 2], [3, 4]])

candidates = detect_collision_candidates(V0, V1, edges, inflation_radius=0.01)

print("edge-vertex:", [(c.edge_index, c.vertex_index) for c in candidates.ev_candidates])
print("edge-edge:  ", [(c.edge0_index, c.edge1_index) for c in candidates.ee_candidates])
