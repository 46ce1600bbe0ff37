"""
Invariant checks for CoM motion representations.

The validator exercises a motion only through the ComMotion contract, so
it applies to any representation. Problems are logged and collected
rather than raised.
"""

import copy
from dataclasses import dataclass
from typing import List

import numpy as np

from commotion.constants import TOLERANCE
from commotion.logging import get_logger

from .base import ComMotion
from .errors import ComMotionError
from .phase import PhaseInfo, PhaseType, validate_phase_sequence

log = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of motion validation."""

    valid: bool
    issues: List[str]

    def __str__(self) -> str:
        if self.valid:
            return "CoM motion validation: PASSED"
        return f"CoM motion validation: FAILED - {', '.join(self.issues)}"


class MotionValidator:
    """Validate a CoM motion against the contract invariants."""

    def __init__(self, tolerance: float = TOLERANCE, end_tolerance: float = 1e-6):
        self.tolerance = tolerance
        self.end_tolerance = end_tolerance

    def validate(self, motion: ComMotion) -> ValidationResult:
        """
        Validate the motion.

        Args:
            motion: CoM motion to validate

        Returns:
            ValidationResult with validation status and issues
        """
        issues = []

        if not self._check_phase_sequence(motion):
            issues.append("Phase sequence invalid")

        if not self._check_phase_time_consistency(motion):
            issues.append("Phases inconsistent with time")

        if not self._check_grid(motion):
            issues.append("Discretization grid invalid")

        if not self._check_coefficient_roundtrip(motion):
            issues.append("Coefficient round-trip failed")

        if not self._check_finite_states(motion):
            issues.append("Non-finite CoM states")

        return ValidationResult(valid=len(issues) == 0, issues=issues)

    def check_end_at_start(self, motion: ComMotion) -> bool:
        """Check that the motion ends at its start position with zero velocity."""
        start = motion.get_com(0.0)
        end = motion.get_com(motion.get_total_time())
        pos_err = float(np.max(np.abs(end.pos - start.pos)))
        vel_err = float(np.max(np.abs(end.vel)))
        if pos_err > self.end_tolerance or vel_err > self.end_tolerance:
            log.warning(
                f"Motion does not end at start: position error {pos_err:.3g}, "
                f"final velocity {vel_err:.3g}",
            )
            return False
        return True

    def _check_phase_sequence(self, motion: ComMotion) -> bool:
        phases = motion.get_phases()
        if not phases:
            log.warning("Motion reports no phases")
            return False
        try:
            validate_phase_sequence(phases)
        except ValueError as e:
            log.warning(f"Phase sequence invalid: {e}")
            return False
        first = phases[0]
        if first.type is PhaseType.STANCE and first.id != -1:
            log.warning(f"Motion starts in {first}, expected stance[-1]")
            return False
        return True

    def _check_phase_time_consistency(self, motion: ComMotion) -> bool:
        """Phases seen along the grid must appear in get_phases() order."""
        phases = motion.get_phases()
        try:
            seen: List[PhaseInfo] = [
                motion.get_current_phase(t) for t in motion.get_discretized_global_times()
            ]
        except ComMotionError as e:
            log.warning(f"Phase query failed on grid: {e}")
            return False
        idx = 0
        for info in seen:
            while idx < len(phases) and phases[idx] != info:
                idx += 1
            if idx == len(phases):
                log.warning(f"Phase {info} out of order or missing from get_phases()")
                return False
        return True

    def _check_grid(self, motion: ComMotion) -> bool:
        times = np.asarray(motion.get_discretized_global_times())
        T = motion.get_total_time()
        dt = motion.discretization_step
        if len(times) != motion.get_total_nodes():
            log.warning(f"Grid has {len(times)} nodes, get_total_nodes() says {motion.get_total_nodes()}")
            return False
        if times[0] != 0.0 or abs(times[-1] - T) > self.tolerance:
            log.warning(f"Grid spans [{times[0]}, {times[-1]}], expected [0, {T}]")
            return False
        gaps = np.diff(times)
        if len(gaps) and (np.any(gaps > dt + self.tolerance) or np.any(gaps <= 0.0)):
            log.warning(f"Grid gaps outside (0, {dt}]: {gaps}")
            return False
        if len(gaps) > 1 and not np.allclose(gaps[:-1], dt, atol=self.tolerance):
            log.warning("Interior grid gaps are not uniform")
            return False
        return True

    def _check_coefficient_roundtrip(self, motion: ComMotion) -> bool:
        """Write the current coefficients back into a copy and read them again."""
        coeffs = motion.get_coefficients()
        if coeffs.shape != (motion.get_total_free_coeff(),):
            log.warning(
                f"Coefficient shape {coeffs.shape} does not match "
                f"{motion.get_total_free_coeff()} free coefficients",
            )
            return False
        # validation must leave the motion untouched
        replica = copy.deepcopy(motion)
        replica.set_coefficients(coeffs)
        if not np.array_equal(replica.get_coefficients(), coeffs):
            log.warning("Coefficients changed after set/get round-trip")
            return False
        return True

    def _check_finite_states(self, motion: ComMotion) -> bool:
        for t in motion.get_discretized_global_times():
            if not motion.get_com(t).is_finite():
                log.warning(f"Non-finite CoM state at t={t}")
                return False
        return True
