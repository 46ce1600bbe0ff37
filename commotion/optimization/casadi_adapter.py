"""
CasADi view of a CoM motion.

A piecewise motion's state is affine in its coefficients, so sampling it
at fixed times is a constant matrix product. This module captures those
matrices once and exposes them as CasADi functions that an NLP builder
can embed in objectives and constraints.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

import casadi as ca
import numpy as np

from commotion.constants import N_AXES
from commotion.logging import get_logger
from commotion.motion.errors import DimensionMismatch
from commotion.motion.piecewise import PiecewiseComMotion

log = get_logger(__name__)

_DERIVATIVES: Dict[str, int] = {"pos": 0, "vel": 1, "acc": 2}


class ComNlpAdapter:
    """
    Linear maps from the coefficient vector to CoM states at sample times.

    The maps are captured at construction; they depend on the motion's
    segmentation only, not on its current coefficients.
    """

    def __init__(self, motion: PiecewiseComMotion, times: Optional[Sequence[float]] = None):
        if not isinstance(motion, PiecewiseComMotion):
            raise TypeError(
                f"ComNlpAdapter needs a motion that is affine in its coefficients, "
                f"got {type(motion).__name__}",
            )
        self.motion = motion
        if times is None:
            times = motion.get_discretized_global_times()
        self.times = np.asarray(times, dtype=float)
        self.n_coeff = motion.get_total_free_coeff()
        self._maps = self._build_maps()
        log.debug(f"Built CoM maps for {len(self.times)} nodes and {self.n_coeff} coefficients")

    @property
    def n_nodes(self) -> int:
        return len(self.times)

    def _build_maps(self) -> Dict[str, Tuple[np.ndarray, np.ndarray]]:
        n_rows = N_AXES * self.n_nodes
        mats = np.zeros((3, n_rows, self.n_coeff))
        offsets = np.zeros((3, n_rows))
        for k, t in enumerate(self.times):
            rows = slice(N_AXES * k, N_AXES * (k + 1))
            jac = self.motion.get_com_jacobian(t)
            offset = self.motion.get_com_offset(t).as_array()
            for d in range(3):
                mats[d, rows, :] = jac[d]
                offsets[d, rows] = offset[d]
        return {name: (mats[d], offsets[d]) for name, d in _DERIVATIVES.items()}

    def linear_map(self, derivative: str = "pos") -> Tuple[np.ndarray, np.ndarray]:
        """(A, b) with stacked node states [x0, y0, x1, y1, ...] = A @ coeffs + b."""
        if derivative not in self._maps:
            raise ValueError(f"derivative must be one of {list(self._maps)}, got {derivative}")
        A, b = self._maps[derivative]
        return A.copy(), b.copy()

    def _function(self, derivative: str) -> ca.Function:
        A, b = self._maps[derivative]
        x = ca.SX.sym("x", self.n_coeff)
        expr = ca.mtimes(ca.DM(A), x) + ca.DM(b)
        out = ca.reshape(expr, N_AXES, self.n_nodes)
        return ca.Function(f"com_{derivative}", [x], [out], ["x"], [derivative])

    def position_function(self) -> ca.Function:
        """casadi.Function x -> (2, n_nodes) CoM positions."""
        return self._function("pos")

    def velocity_function(self) -> ca.Function:
        return self._function("vel")

    def acceleration_function(self) -> ca.Function:
        return self._function("acc")

    def end_at_start_residual(self, x):
        """Residual [p(T) - p(0), v(T)] as an expression of the symbolic coefficients."""
        jac, r_zero = self.motion.end_condition_jacobian()
        return ca.mtimes(ca.DM(jac), x) + ca.DM(r_zero)

    def evaluate(self, coeffs: np.ndarray, derivative: str = "pos") -> np.ndarray:
        """Numeric (2, n_nodes) states for a coefficient vector."""
        coeffs = np.asarray(coeffs, dtype=float)
        if coeffs.shape != (self.n_coeff,):
            raise DimensionMismatch(self.n_coeff, int(coeffs.size))
        A, b = self.linear_map(derivative)
        return (A @ coeffs + b).reshape(self.n_nodes, N_AXES).T

    def evaluate_positions(self, coeffs: np.ndarray) -> np.ndarray:
        return self.evaluate(coeffs, "pos")
