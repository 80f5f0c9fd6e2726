# MIT License (see LICENSE)
"""
Runtime configuration for grid construction and pair queries.

Parallelism is the only tunable: how many workers insert primitives and how
finely the primitive range is split. The swept-box inflation radius is not
configuration; it is passed with each query like the mesh itself.

Environment overrides (read by BroadPhaseConfig.from_env):
    CCD_BROADPHASE_NUM_WORKERS     worker count (default: os.cpu_count())
    CCD_BROADPHASE_GRAIN_SIZE      minimum primitives per task (default: 512)
    CCD_BROADPHASE_PARALLEL_PAIRS  "1" runs the same-type join in parallel
"""
from __future__ import annotations
import os
from dataclasses import dataclass

from .errors import require
from .util import env_flag, env_int


@dataclass
class BroadPhaseConfig:
    """
    Parallel execution settings.

    Attributes:
        num_workers: Number of worker threads. None uses os.cpu_count().
        grain_size: Smallest index range handed to a single task. Batches
                    shorter than this run inline on the calling thread.
        parallel_pairs: Use the run-partitioned parallel join for same-type
                        pairs (edge-edge). Output is identical to the serial join.
    """
    num_workers: int | None = None
    grain_size: int = 512
    parallel_pairs: bool = False

    def __post_init__(self) -> None:
        require(
            self.num_workers is None or self.num_workers >= 1,
            f"num_workers must be >= 1, got {self.num_workers}",
        )
        require(self.grain_size >= 1, f"grain_size must be >= 1, got {self.grain_size}")

    @property
    def workers(self) -> int:
        """Resolved worker count."""
        if self.num_workers is None:
            return os.cpu_count() or 1
        return self.num_workers

    @classmethod
    def from_env(cls) -> "BroadPhaseConfig":
        """Build a configuration from CCD_BROADPHASE_* environment variables."""
        return cls(
            num_workers=env_int("CCD_BROADPHASE_NUM_WORKERS", None),
            grain_size=env_int("CCD_BROADPHASE_GRAIN_SIZE", 512),
            parallel_pairs=env_flag("CCD_BROADPHASE_PARALLEL_PAIRS"),
        )
