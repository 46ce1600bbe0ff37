"""
Linear inverted pendulum (LIP) representation of the CoM motion.

With the CoM kept at constant height h, the horizontal dynamics reduce to

    ẍ = ω² (x − u),    ω = sqrt(g / h)

where u is the center of pressure (CoP). Each supported segment (stance or
step) holds one constant CoP (u_x, u_y) chosen by the optimizer and moves
along the closed-form solution

    x(τ) = u + (x₀ − u) cosh(ωτ) + (v₀ / ω) sinh(ωτ)

Flight segments have no CoP and no coefficients; the CoM keeps its
horizontal velocity. Position and velocity are continuous across segments.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from commotion.config import get_settings
from commotion.constants import DEFAULT_COM_HEIGHT, N_AXES
from commotion.logging import get_logger
from commotion.units import GRAVITY

from .base import ComState
from .phase import Phase, PhaseInfo, PhaseType
from .piecewise import PiecewiseComMotion, Segment

log = get_logger(__name__)


class LinearInvertedPendulumMotion(PiecewiseComMotion):
    """CoM motion driven by a piecewise constant center of pressure."""

    def __init__(
        self,
        phases: Sequence[Phase],
        initial_pos: Sequence[float] = (0.0, 0.0),
        initial_vel: Sequence[float] = (0.0, 0.0),
        com_height: Optional[float] = None,
        gravity: float = GRAVITY.value,
        max_segment_duration: Optional[float] = None,
        discretization_step: Optional[float] = None,
    ):
        if com_height is None:
            com_height = get_settings().com_height
        if not com_height > 0.0:
            raise ValueError(f"CoM height must be positive, got {com_height}")
        if not DEFAULT_COM_HEIGHT.is_valid(com_height):
            raise ValueError(
                f"CoM height {com_height} m outside {DEFAULT_COM_HEIGHT.valid_range}",
            )
        if not gravity > 0.0:
            raise ValueError(f"Gravity must be positive, got {gravity}")
        self.com_height = float(com_height)
        self.gravity = float(gravity)
        self.omega = math.sqrt(self.gravity / self.com_height)
        super().__init__(
            phases,
            initial_pos=initial_pos,
            initial_vel=initial_vel,
            max_segment_duration=max_segment_duration,
            discretization_step=discretization_step,
        )

    def _segment_coeff_count(self, info: PhaseInfo) -> int:
        return 0 if info.type is PhaseType.FLIGHT else N_AXES

    def _propagate(
        self, segment: Segment, tau: float, coeffs: np.ndarray, x0: np.ndarray, v0: np.ndarray,
    ) -> ComState:
        if segment.n_coeff == 0:
            return ComState(pos=x0 + v0 * tau, vel=v0, acc=np.zeros(N_AXES))
        u = coeffs[segment.coeff_slice]
        w = self.omega
        ch, sh = math.cosh(w * tau), math.sinh(w * tau)
        pos = u + (x0 - u) * ch + (v0 / w) * sh
        vel = w * (x0 - u) * sh + v0 * ch
        return ComState(pos=pos, vel=vel, acc=w * w * (pos - u))

    def _build_cache(self, coeffs: np.ndarray) -> List[Tuple[np.ndarray, np.ndarray]]:
        starts = []
        pos, vel = self.initial_pos.copy(), self.initial_vel.copy()
        for segment in self._segments:
            starts.append((pos, vel))
            end = self._propagate(segment, segment.duration, coeffs, pos, vel)
            pos, vel = end.pos, end.vel
        return starts

    def _evaluate(
        self, segment: Segment, tau: float, coeffs: np.ndarray, cache,
    ) -> ComState:
        x0, v0 = cache[segment.id]
        return self._propagate(segment, tau, coeffs, x0, v0)

    def get_cop(self, t_global: float) -> Optional[np.ndarray]:
        """Center of pressure active at t, None during flight."""
        segment = self._find_segment(self._check_time(t_global))
        if segment.n_coeff == 0:
            return None
        return self._state[0][segment.coeff_slice].copy()
