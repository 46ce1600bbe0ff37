"""
CoM motion representations.

The ComMotion contract, the phase and discretization machinery it relies
on, and two concrete representations: a quintic spline and a linear
inverted pendulum.
"""

from .base import ComMotion, ComState
from .discretization import DiscretizationGrid
from .errors import ComMotionError, DimensionMismatch, OutOfRangeError, UnderconstrainedError
from .lipm import LinearInvertedPendulumMotion
from .phase import (
    Phase,
    PhaseInfo,
    PhaseInfoVec,
    PhaseType,
    build_walking_phases,
    unique_phases,
    validate_phase_sequence,
)
from .piecewise import PiecewiseComMotion, Segment
from .spline import ComSpline
from .validation import MotionValidator, ValidationResult

__all__ = [
    "ComMotion",
    "ComMotionError",
    "ComSpline",
    "ComState",
    "DimensionMismatch",
    "DiscretizationGrid",
    "LinearInvertedPendulumMotion",
    "MotionValidator",
    "OutOfRangeError",
    "Phase",
    "PhaseInfo",
    "PhaseInfoVec",
    "PhaseType",
    "PiecewiseComMotion",
    "Segment",
    "UnderconstrainedError",
    "ValidationResult",
    "build_walking_phases",
    "unique_phases",
    "validate_phase_sequence",
]
