"""
Spline representation of the CoM motion.

Every segment holds one quintic polynomial per axis

    p(τ) = aτ⁵ + bτ⁴ + cτ³ + dτ² + eτ + f,   τ ∈ [0, segment duration]

The optimizer chooses (a, b, c, d). The first segment takes (e, f) from
the initial velocity and position; every later segment takes them from the
end state of its predecessor, so position and velocity are continuous over
the whole motion. Acceleration may jump at segment boundaries.

Coefficient layout: segment-major, then axis, then a, b, c, d.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from commotion.constants import N_AXES, SPLINE_FREE_COEFF_PER_AXIS, SPLINE_POLY_ORDER
from commotion.logging import get_logger

from .base import ComState
from .phase import Phase, PhaseInfo
from .piecewise import PiecewiseComMotion, Segment

log = get_logger(__name__)

# powers and derivative factors of the free terms a, b, c, d
_POWERS = np.arange(SPLINE_POLY_ORDER, SPLINE_POLY_ORDER - SPLINE_FREE_COEFF_PER_AXIS, -1)


def _free_terms(tau: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Basis rows for position, velocity and acceleration of (a, b, c, d)."""
    pos = tau ** _POWERS
    vel = _POWERS * tau ** (_POWERS - 1)
    acc = _POWERS * (_POWERS - 1) * tau ** (_POWERS - 2)
    return pos.astype(float), vel.astype(float), acc.astype(float)


class ComSpline(PiecewiseComMotion):
    """CoM motion made of quintic polynomial segments."""

    def __init__(
        self,
        phases: Sequence[Phase],
        initial_pos: Sequence[float] = (0.0, 0.0),
        initial_vel: Sequence[float] = (0.0, 0.0),
        max_segment_duration: Optional[float] = None,
        discretization_step: Optional[float] = None,
    ):
        super().__init__(
            phases,
            initial_pos=initial_pos,
            initial_vel=initial_vel,
            max_segment_duration=max_segment_duration,
            discretization_step=discretization_step,
        )

    def _segment_coeff_count(self, info: PhaseInfo) -> int:
        return N_AXES * SPLINE_FREE_COEFF_PER_AXIS

    def _free_coeffs(self, segment: Segment, coeffs: np.ndarray) -> np.ndarray:
        return coeffs[segment.coeff_slice].reshape(N_AXES, SPLINE_FREE_COEFF_PER_AXIS)

    def _build_cache(self, coeffs: np.ndarray) -> List[Tuple[np.ndarray, np.ndarray]]:
        # (f, e) of every segment: its start position and velocity
        starts = []
        pos, vel = self.initial_pos.copy(), self.initial_vel.copy()
        for segment in self._segments:
            starts.append((pos, vel))
            abcd = self._free_coeffs(segment, coeffs)
            b_pos, b_vel, _ = _free_terms(segment.duration)
            pos = abcd @ b_pos + vel * segment.duration + pos
            vel = abcd @ b_vel + vel
        return starts

    def _evaluate(
        self, segment: Segment, tau: float, coeffs: np.ndarray, cache,
    ) -> ComState:
        f, e = cache[segment.id]
        abcd = self._free_coeffs(segment, coeffs)
        b_pos, b_vel, b_acc = _free_terms(tau)
        return ComState(
            pos=abcd @ b_pos + e * tau + f,
            vel=abcd @ b_vel + e,
            acc=abcd @ b_acc,
        )

    def get_polynomial(self, segment_id: int) -> np.ndarray:
        """Full (2, 6) coefficient table [a, b, c, d, e, f] of one segment."""
        coeffs, cache = self._state
        segment = self._segments[segment_id]
        f, e = cache[segment_id]
        return np.hstack([self._free_coeffs(segment, coeffs), e[:, None], f[:, None]])
