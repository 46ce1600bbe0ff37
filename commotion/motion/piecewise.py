"""
Piecewise CoM motions built from phase-aligned time segments.

Each phase is cut into equal segments no longer than a maximum duration.
Subclasses decide how many coefficients a segment owns and how the state
inside a segment is evaluated. The state must be affine in the
coefficients, which gives exact Jacobians and lets the end-at-start
condition be enforced by a linear least-squares correction.
"""

from __future__ import annotations

import bisect
import math
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from scipy import linalg

from commotion.config import get_settings
from commotion.constants import END_AT_START_TOLERANCE, N_AXES, TIME_TOLERANCE
from commotion.logging import get_logger

from .base import ComMotion, ComState
from .errors import DimensionMismatch, OutOfRangeError, UnderconstrainedError
from .phase import Phase, PhaseInfo, PhaseInfoVec, unique_phases, validate_phase_sequence

log = get_logger(__name__)


@dataclass(frozen=True)
class Segment:
    """A time slice of the motion with its own slice of the coefficients."""

    id: int
    info: PhaseInfo
    t_start: float
    duration: float
    coeff_offset: int
    n_coeff: int

    @property
    def t_end(self) -> float:
        return self.t_start + self.duration

    @property
    def coeff_slice(self) -> slice:
        return slice(self.coeff_offset, self.coeff_offset + self.n_coeff)


class PiecewiseComMotion(ComMotion):
    """
    Base for segment-wise motion representations.

    Coefficients and everything derived from them are published together
    in a single attribute assignment, so readers never observe a half
    updated motion.
    """

    def __init__(
        self,
        phases: Sequence[Phase],
        initial_pos: Sequence[float] = (0.0, 0.0),
        initial_vel: Sequence[float] = (0.0, 0.0),
        max_segment_duration: Optional[float] = None,
        discretization_step: Optional[float] = None,
    ):
        super().__init__(discretization_step)
        if max_segment_duration is None:
            max_segment_duration = get_settings().max_segment_duration
        if not max_segment_duration > 0.0:
            raise ValueError(
                f"Maximum segment duration must be positive, got {max_segment_duration}",
            )
        self.max_segment_duration = float(max_segment_duration)
        self.initial_pos = np.asarray(initial_pos, dtype=float).reshape(N_AXES)
        self.initial_vel = np.asarray(initial_vel, dtype=float).reshape(N_AXES)

        self._segments = self._build_segments(phases)
        self._starts = [seg.t_start for seg in self._segments]
        self._total_time = float(sum(seg.duration for seg in self._segments))
        self._n_coeff = sum(seg.n_coeff for seg in self._segments)

        zeros = np.zeros(self._n_coeff)
        self._state: Tuple[np.ndarray, Any] = (zeros, self._build_cache(zeros))
        log.debug(
            f"{type(self).__name__}: {len(self._segments)} segments, "
            f"T={self._total_time:.3f}s, {self._n_coeff} free coefficients",
        )

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _segment_coeff_count(self, info: PhaseInfo) -> int:
        """Number of free coefficients of a segment in the given phase."""

    @abstractmethod
    def _build_cache(self, coeffs: np.ndarray) -> Any:
        """Derive per-segment data (e.g. start states) from a coefficient vector."""

    @abstractmethod
    def _evaluate(
        self, segment: Segment, tau: float, coeffs: np.ndarray, cache: Any,
    ) -> ComState:
        """State at local time tau inside segment."""

    # ------------------------------------------------------------------
    # Segmentation
    # ------------------------------------------------------------------

    def _build_segments(self, phases: Sequence[Phase]) -> List[Segment]:
        active = [p for p in phases if p.duration > 0.0]
        if not active:
            raise ValueError("A motion needs at least one phase with positive duration")
        validate_phase_sequence(unique_phases(p.info for p in active))

        segments: List[Segment] = []
        t = 0.0
        offset = 0
        for phase in active:
            ratio = phase.duration / self.max_segment_duration
            n_split = max(1, math.ceil(ratio - TIME_TOLERANCE))
            duration = phase.duration / n_split
            n_coeff = self._segment_coeff_count(phase.info)
            for _ in range(n_split):
                segments.append(
                    Segment(len(segments), phase.info, t, duration, offset, n_coeff),
                )
                t += duration
                offset += n_coeff
        return segments

    def get_segments(self) -> List[Segment]:
        return list(self._segments)

    def _check_time(self, t_global: float) -> float:
        t = float(t_global)
        if -TIME_TOLERANCE <= t < 0.0:
            return 0.0
        if self._total_time < t <= self._total_time + TIME_TOLERANCE:
            return self._total_time
        if not 0.0 <= t <= self._total_time:
            log.error(f"Time {t} outside motion horizon [0, {self._total_time}]")
            raise OutOfRangeError(t, self._total_time)
        return t

    def _find_segment(self, t: float) -> Segment:
        # boundaries belong to the later segment, T to the last one
        idx = bisect.bisect_right(self._starts, t) - 1
        return self._segments[min(max(idx, 0), len(self._segments) - 1)]

    # ------------------------------------------------------------------
    # ComMotion contract
    # ------------------------------------------------------------------

    def get_com(self, t_global: float) -> ComState:
        t = self._check_time(t_global)
        coeffs, cache = self._state
        segment = self._find_segment(t)
        return self._evaluate(segment, t - segment.t_start, coeffs, cache)

    def set_coefficients(self, optimized_coeff: np.ndarray) -> None:
        coeffs = np.array(optimized_coeff, dtype=float)
        if coeffs.ndim != 1 or coeffs.size != self._n_coeff:
            log.error(
                f"Rejected coefficient vector of shape {coeffs.shape}, expected ({self._n_coeff},)",
            )
            raise DimensionMismatch(self._n_coeff, int(coeffs.size))
        if not np.all(np.isfinite(coeffs)):
            raise ValueError("Coefficient vector contains NaN or infinite values")
        self._state = (coeffs, self._build_cache(coeffs))

    def get_total_free_coeff(self) -> int:
        return self._n_coeff

    def get_coefficients(self) -> np.ndarray:
        return self._state[0].copy()

    def get_total_time(self) -> float:
        return self._total_time

    def get_current_phase(self, t_global: float) -> PhaseInfo:
        return self._find_segment(self._check_time(t_global)).info

    def get_phases(self) -> PhaseInfoVec:
        return unique_phases(seg.info for seg in self._segments)

    def get_phase_spans(self) -> List[Tuple[PhaseInfo, float, float]]:
        """Each entry of get_phases() with its [t_start, t_end] interval."""
        spans: List[Tuple[PhaseInfo, float, float]] = []
        for seg in self._segments:
            if spans and spans[-1][0] == seg.info:
                spans[-1] = (seg.info, spans[-1][1], seg.t_end)
            else:
                spans.append((seg.info, seg.t_start, seg.t_end))
        if spans:
            info, t_start, _ = spans[-1]
            spans[-1] = (info, t_start, self._total_time)
        return spans

    def set_end_at_start(self) -> None:
        coeffs = self._state[0]
        jac, r_zero = self.end_condition_jacobian()
        n_cond = jac.shape[0]
        # unit-norm columns; pendulum columns span many orders of magnitude
        norms = np.linalg.norm(jac, axis=0)
        norms[norms == 0.0] = 1.0
        scaled = jac / norms
        rank = int(np.linalg.matrix_rank(scaled)) if jac.size else 0
        if rank < n_cond:
            log.error(
                f"End-at-start needs {n_cond} independent conditions, "
                f"{type(self).__name__} provides rank {rank}",
            )
            raise UnderconstrainedError(
                f"{type(self).__name__} with {self._n_coeff} coefficients cannot return "
                f"to its start with zero velocity (constraint rank {rank} < {n_cond})",
            )

        residual = jac @ coeffs + r_zero
        step, *_ = linalg.lstsq(scaled, -residual)
        correction = step / norms
        updated = coeffs + correction
        remaining = float(np.linalg.norm(jac @ updated + r_zero))
        tol = END_AT_START_TOLERANCE * max(1.0, float(np.linalg.norm(residual)))
        if remaining > tol:
            raise UnderconstrainedError(
                f"End-at-start residual {remaining:.3e} exceeds tolerance {tol:.3e}",
            )
        log.info(
            f"End-at-start enforced: residual {np.linalg.norm(residual):.3e} -> {remaining:.3e}, "
            f"correction norm {np.linalg.norm(correction):.3e}",
        )
        self.set_coefficients(updated)

    # ------------------------------------------------------------------
    # Affine structure
    # ------------------------------------------------------------------

    def _state_with(self, coeffs: np.ndarray, t: float, cache: Any = None) -> ComState:
        if cache is None:
            cache = self._build_cache(coeffs)
        segment = self._find_segment(t)
        return self._evaluate(segment, t - segment.t_start, coeffs, cache)

    def evaluate_with(self, coeffs: np.ndarray, t_global: float) -> ComState:
        """State at t for a candidate coefficient vector, without storing it."""
        coeffs = np.asarray(coeffs, dtype=float)
        if coeffs.shape != (self._n_coeff,):
            raise DimensionMismatch(self._n_coeff, int(coeffs.size))
        return self._state_with(coeffs, self._check_time(t_global))

    def get_com_offset(self, t_global: float) -> ComState:
        """State at t when every coefficient is zero."""
        return self._state_with(np.zeros(self._n_coeff), self._check_time(t_global))

    def get_com_jacobian(self, t_global: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Derivatives of position, velocity and acceleration w.r.t. the coefficients.

        Returns:
            (J_pos, J_vel, J_acc), each of shape (2, n_coeff), such that
            state(t) = J @ x + offset(t)
        """
        t = self._check_time(t_global)
        offset = self._state_with(np.zeros(self._n_coeff), t).as_array()
        jac = np.zeros((3, N_AXES, self._n_coeff))
        for i in range(self._n_coeff):
            unit = np.zeros(self._n_coeff)
            unit[i] = 1.0
            jac[:, :, i] = self._state_with(unit, t).as_array() - offset
        return jac[0], jac[1], jac[2]

    def _end_condition(self, coeffs: np.ndarray) -> np.ndarray:
        cache = self._build_cache(coeffs)
        start = self._state_with(coeffs, 0.0, cache)
        end = self._state_with(coeffs, self._total_time, cache)
        return np.concatenate([end.pos - start.pos, end.vel])

    def end_condition_jacobian(self) -> Tuple[np.ndarray, np.ndarray]:
        r_zero = self._end_condition(np.zeros(self._n_coeff))
        jac = np.zeros((r_zero.size, self._n_coeff))
        for i in range(self._n_coeff):
            unit = np.zeros(self._n_coeff)
            unit[i] = 1.0
            jac[:, i] = self._end_condition(unit) - r_zero
        return jac, r_zero
