"""
Microbenchmark: broad-phase time vs mesh resolution.
Run:
  python benchmarks/bench_broadphase.py
"""
import time
import numpy as np
from ccd_broadphase import BroadPhaseConfig, Profiler, detect_collision_candidates


def sheet(n: int, z: float):
    """n x n vertex sheet on the unit square at height z. Returns (V, E, F)."""
    xs, ys = np.meshgrid(np.linspace(0, 1, n), np.linspace(0, 1, n), indexing="ij")
    V = np.column_stack([xs.ravel(), ys.ravel(), np.full(n * n, z)])
    faces = []
    for i in range(n - 1):
        for j in range(n - 1):
            v00, v10, v01, v11 = i * n + j, (i + 1) * n + j, i * n + j + 1, (i + 1) * n + j + 1
            faces += [(v00, v10, v11), (v00, v11, v01)]
    F = np.array(faces, dtype=np.int64)
    pairs = np.vstack([F[:, [0, 1]], F[:, [1, 2]], F[:, [2, 0]]])
    E = np.unique(np.sort(pairs, axis=1), axis=0)
    return V, E, F


def run(n: int, workers: int, repeats: int = 3):
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)
    Va, Ea, Fa = sheet(n, 0.0)
    Vb, Eb, Fb = sheet(n, 0.05)
    V0 = np.vstack([Va, Vb])
    E = np.vstack([Ea, Eb + len(Va)])
    F = np.vstack([Fa, Fb + len(Va)])
    V1 = V0 + rng.normal(scale=0.2 / n, size=V0.shape)
    V1[len(Va):, 2] -= 0.1

    prof = Profiler()
    config = BroadPhaseConfig(num_workers=workers)
    t0 = time.perf_counter()
    for _ in range(repeats):
        candidates = detect_collision_candidates(
            V0, V1, E, F, inflation_radius=1e-3, config=config, profiler=prof
        )
    t1 = time.perf_counter()
    return (t1 - t0) / repeats, len(candidates), prof.stats.summary()


if __name__ == "__main__":
    for n in [8, 16, 24, 32]:
        for workers in [1, 4]:
            per_query, count, summary = run(n, workers)
            print(f"N={2 * n * n:5d} verts  workers={workers}  query={1e3 * per_query:9.2f} ms  "
                  f"candidates={count}")
            # print top sections
            for k in ["resize", "insert_vertices", "insert_edges", "insert_faces",
                      "pairs_ev", "pairs_ee", "pairs_ef", "pairs_fv"]:
                if k in summary:
                    print(" ", k, summary[k])
            print()
