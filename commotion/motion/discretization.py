"""
Fixed-step time grid over a motion horizon.

    t(0)------t(1)------t(2)------...------t(N-1)---|------t(N)

The first and last nodes are exactly 0 and T. All gaps equal the step
except the last one, which may be shorter. It exceeds the step only when T
lies within TIME_TOLERANCE above a whole multiple of it, since such T is
not given a near-duplicate node of its own.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import numpy as np

from commotion.constants import TIME_TOLERANCE


@dataclass(frozen=True)
class DiscretizationGrid:
    total_time: float
    dt: float

    def __post_init__(self) -> None:
        if not self.dt > 0.0 or not math.isfinite(self.dt):
            raise ValueError(f"Discretization step must be positive and finite, got {self.dt}")
        if not self.total_time >= 0.0 or not math.isfinite(self.total_time):
            raise ValueError(f"Total time must be non-negative and finite, got {self.total_time}")

    @property
    def n_intervals(self) -> int:
        """Number of gaps between nodes, ceil(T / dt) ignoring up to TIME_TOLERANCE of overshoot."""
        if self.total_time == 0.0:
            return 0
        ratio = self.total_time / self.dt
        return max(1, math.ceil(ratio - TIME_TOLERANCE / self.dt))

    def total_nodes(self) -> int:
        return self.n_intervals + 1

    def global_times(self) -> List[float]:
        """Sample instants 0, dt, 2dt, ... followed by T."""
        times = [k * self.dt for k in range(self.n_intervals)]
        times.append(float(self.total_time))
        return times

    def as_array(self) -> np.ndarray:
        return np.asarray(self.global_times(), dtype=float)

    def last_gap(self) -> float:
        """Length of the final interval (0.0 for a single-node grid)."""
        times = self.global_times()
        return times[-1] - times[-2] if len(times) > 1 else 0.0
