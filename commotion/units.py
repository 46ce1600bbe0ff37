"""Typed physical constants for CoM motion models.

Every constant carries its SI unit, a source and, where it matters, a
validity range that model parameters of the same quantity are checked
against.

Usage:
    from commotion.units import GRAVITY

    omega = math.sqrt(GRAVITY.value / com_height)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicalConstant:
    """Typed physical constant with engineering metadata.

    Attributes:
        value: Numerical value of the constant
        unit: SI unit string (e.g., "m", "s", "m/s²")
        source: Citation or reference for the value
        valid_range: (min, max) tuple for validity checking
        notes: Additional documentation
    """

    value: float
    unit: str
    source: str
    valid_range: tuple[float, float] | None = None
    notes: str = ""

    def is_valid(self, test_value: float) -> bool:
        """Check if a value falls within the valid range."""
        if self.valid_range is None:
            return True
        return self.valid_range[0] <= test_value <= self.valid_range[1]


# =============================================================================
# Physical Constants
# =============================================================================

GRAVITY = PhysicalConstant(
    value=9.80665,
    unit="m/s²",
    source="CGPM 1901 - Standard gravity definition",
    notes="Standard acceleration due to gravity (exact value)",
)


# =============================================================================
# Numerical Tolerances
# =============================================================================

TOLERANCE_GENERAL = PhysicalConstant(
    value=1e-8,
    unit="dimensionless",
    source="Internal: general-purpose numerical tolerance",
    notes="Used for equality checks on states and coefficients",
)

TOLERANCE_TIME = PhysicalConstant(
    value=1e-9,
    unit="s",
    source="Internal: time snapping tolerance",
    notes="Times this close to the motion horizon are snapped onto it",
)
