# MIT License (see LICENSE)
"""
Lightweight timing of broad-phase stages.

HashGrid and detect_collision_candidates accept an optional Profiler and
record the grid resize, each insertion batch, and each pair query under
their own section names ("resize", "insert_edges", "pairs_ee", ...).

Example:
    profiler = Profiler()
    candidates = detect_collision_candidates(V0, V1, E, F, profiler=profiler)
    for name, stats in profiler.stats.summary().items():
        print(name, stats["mean_ms"])
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """Timing samples (in seconds) grouped by section name."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to a dict with keys:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': maximum time in milliseconds
            - 'total_ms': summed time in milliseconds
        """
        out = {}
        for name, times in self.samples.items():
            total = sum(times)
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * total / len(times),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out


class Profiler:
    """Context-manager based profiler; see module docstring for usage."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the enclosed block and record it under `name`, even if it raises."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)


@contextmanager
def maybe_section(profiler: Profiler | None, name: str) -> Iterator[None]:
    """Time a block when a profiler is attached; otherwise do nothing."""
    if profiler is None:
        yield
        return
    with profiler.section(name):
        yield
