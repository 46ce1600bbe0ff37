"""
Parameter validation utilities.

This module provides the checks applied to configuration values before
they reach a motion representation.
"""

from typing import Any

from commotion.logging import get_logger

log = get_logger(__name__)


class ParameterValidator:
    """Validator for motion parameters."""

    @staticmethod
    def validate_positive_float(value: Any, name: str) -> bool:
        """Validate that a value is a positive float."""
        try:
            float_val = float(value)
            if not float_val > 0:
                log.error(f"{name} must be positive, got {float_val}")
                return False
            return True
        except (ValueError, TypeError):
            log.error(f"{name} must be a number, got {type(value)}")
            return False

    @staticmethod
    def validate_non_negative_float(value: Any, name: str) -> bool:
        """Validate that a value is a finite float >= 0."""
        try:
            float_val = float(value)
            if not 0.0 <= float_val < float("inf"):
                log.error(f"{name} must be finite and non-negative, got {float_val}")
                return False
            return True
        except (ValueError, TypeError):
            log.error(f"{name} must be a number, got {type(value)}")
            return False

    @staticmethod
    def validate_float_range(
        value: Any, name: str, min_val: float, max_val: float,
    ) -> bool:
        """Validate that a value is within a float range."""
        try:
            float_val = float(value)
            if not (min_val <= float_val <= max_val):
                log.error(
                    f"{name} must be between {min_val} and {max_val}, got {float_val}",
                )
                return False
            return True
        except (ValueError, TypeError):
            log.error(f"{name} must be a number, got {type(value)}")
            return False
