"""
Center of Mass motion contract.

This module defines the interface every CoM motion representation
implements, whether it is built from splines or from solutions of an
equation of motion. Optimizers and foothold logic only ever talk to a
``ComMotion``; the concrete basis stays hidden behind it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from commotion.config import get_settings
from commotion.logging import get_logger

from .discretization import DiscretizationGrid
from .phase import PhaseInfo, PhaseInfoVec

log = get_logger(__name__)


def _zero2() -> np.ndarray:
    return np.zeros(2)


@dataclass
class ComState:
    """Planar CoM position, velocity and acceleration."""

    pos: np.ndarray = field(default_factory=_zero2)
    vel: np.ndarray = field(default_factory=_zero2)
    acc: np.ndarray = field(default_factory=_zero2)

    def __post_init__(self):
        self.pos = np.array(self.pos, dtype=float).reshape(2)
        self.vel = np.array(self.vel, dtype=float).reshape(2)
        self.acc = np.array(self.acc, dtype=float).reshape(2)

    def is_finite(self) -> bool:
        """Check that no component is NaN or infinite."""
        return bool(
            np.all(np.isfinite(self.pos))
            and np.all(np.isfinite(self.vel))
            and np.all(np.isfinite(self.acc))
        )

    def as_array(self) -> np.ndarray:
        """Stack as a (3, 2) array of rows pos, vel, acc."""
        return np.vstack([self.pos, self.vel, self.acc])


class ComMotion(ABC):
    """
    Abstracts the Center of Mass (CoM) motion of any system.

    Subclasses own their coefficient vector. Callers read and write it by
    value through ``set_coefficients`` / ``get_coefficients``; the object
    never hands out a reference to its internal storage.

    Read-only queries are safe for concurrent readers as long as no
    ``set_coefficients`` or ``set_end_at_start`` runs at the same time.
    """

    def __init__(self, discretization_step: Optional[float] = None):
        if discretization_step is None:
            discretization_step = get_settings().discretization_step_seconds
        if not discretization_step > 0.0:
            raise ValueError(
                f"Discretization step must be positive, got {discretization_step}",
            )
        self.discretization_step = float(discretization_step)

    @abstractmethod
    def get_com(self, t_global: float) -> ComState:
        """
        Get the Center of Mass position, velocity and acceleration.

        Args:
            t_global: time since the start of the motion

        Returns:
            pos/vel/acc in 2D
        """

    @abstractmethod
    def set_coefficients(self, optimized_coeff: np.ndarray) -> None:
        """
        Set all coefficients to fully describe the CoM motion.

        These can be spline coefficients or coefficients of any equation
        that produces x(t).

        Raises:
            DimensionMismatch: if the length differs from get_total_free_coeff()
        """

    @abstractmethod
    def get_total_free_coeff(self) -> int:
        """Number of scalar parameters the optimizer may choose."""

    @abstractmethod
    def get_coefficients(self) -> np.ndarray:
        """Copy of the current coefficient vector."""

    def get_coeffients(self) -> np.ndarray:
        """Alias of get_coefficients kept for callers using the legacy spelling."""
        return self.get_coefficients()

    @abstractmethod
    def get_total_time(self) -> float:
        """Duration of the represented motion in seconds."""

    @abstractmethod
    def get_current_phase(self, t_global: float) -> PhaseInfo:
        """
        Get the continuously increasing phase (stance, step, flight) count.

        This pairs an instant with the correct footholds and support
        polygon. A phase is a motion during which the dynamics are
        continuous.
        """

    @abstractmethod
    def get_phases(self) -> PhaseInfoVec:
        """Phases in temporal order, with no adjacent duplicates."""

    @abstractmethod
    def set_end_at_start(self) -> None:
        """
        Set coefficients so the motion ends at its initial position.

        At the total time T the CoM is back at the start position with
        zero velocity.

        Raises:
            UnderconstrainedError: if the representation lacks the degrees
                of freedom to enforce this
        """

    def get_discretization_grid(self) -> DiscretizationGrid:
        return DiscretizationGrid(self.get_total_time(), self.discretization_step)

    def get_discretized_global_times(self) -> List[float]:
        """
        Fixed-step sample times for consistent discretization.

        The first and last times are 0 and T; the interval before the last
        node may be shorter than the step.
        """
        return self.get_discretization_grid().global_times()

    def get_total_nodes(self) -> int:
        return self.get_discretization_grid().total_nodes()
