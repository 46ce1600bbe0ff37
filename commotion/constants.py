"""Constants used across the commotion package.

Physics and tolerance values use the PhysicalConstant dataclass from
commotion.units; pure configuration defaults are raw values.
"""

from __future__ import annotations

from commotion.units import TOLERANCE_GENERAL, TOLERANCE_TIME, PhysicalConstant

# =============================================================================
# Numerical Tolerances
# =============================================================================

TOLERANCE: float = TOLERANCE_GENERAL.value
TIME_TOLERANCE: float = TOLERANCE_TIME.value

# Residual accepted after enforcing the end-at-start condition
END_AT_START_TOLERANCE: float = 1e-6


# =============================================================================
# Motion Defaults
# =============================================================================

DEFAULT_DISCRETIZATION_STEP: float = 0.1  # s, between constraint nodes
DEFAULT_MAX_SEGMENT_DURATION: float = 0.5  # s, longer phases are split

DEFAULT_COM_HEIGHT = PhysicalConstant(
    value=0.58,
    unit="m",
    source="Internal: nominal standing height of a mid-size quadruped",
    valid_range=(0.05, 2.0),
    notes="Height used by the linear inverted pendulum model",
)

# Order of the per-axis polynomial in ComSpline (quintic)
SPLINE_POLY_ORDER: int = 5
# Free coefficients per axis per spline segment (a, b, c, d)
SPLINE_FREE_COEFF_PER_AXIS: int = 4

N_AXES: int = 2
