"""
Process-wide settings for CoM motion models.

Values default to the constants in commotion.constants and can be
overridden through environment variables:

    COMMOTION_DISCRETIZATION_STEP    grid step in seconds
    COMMOTION_MAX_SEGMENT_DURATION   longest segment before a phase is split
    COMMOTION_COM_HEIGHT             CoM height for pendulum models
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from commotion.constants import (
    DEFAULT_COM_HEIGHT,
    DEFAULT_DISCRETIZATION_STEP,
    DEFAULT_MAX_SEGMENT_DURATION,
)
from commotion.logging import get_logger

from .parameter_manager import ParameterValidator

log = get_logger(__name__)

_ENV_KEYS: Dict[str, str] = {
    "discretization_step_seconds": "COMMOTION_DISCRETIZATION_STEP",
    "max_segment_duration": "COMMOTION_MAX_SEGMENT_DURATION",
    "com_height": "COMMOTION_COM_HEIGHT",
}


@dataclass(frozen=True)
class MotionSettings:
    """Settings shared by all motion representations."""

    discretization_step_seconds: float = DEFAULT_DISCRETIZATION_STEP
    max_segment_duration: float = DEFAULT_MAX_SEGMENT_DURATION
    com_height: float = DEFAULT_COM_HEIGHT.value

    def __post_init__(self) -> None:
        for name in ("discretization_step_seconds", "max_segment_duration", "com_height"):
            if not ParameterValidator.validate_positive_float(getattr(self, name), name):
                raise ValueError(f"Parameter {name} failed validation")
        if not DEFAULT_COM_HEIGHT.is_valid(self.com_height):
            log.error(
                f"com_height {self.com_height} {DEFAULT_COM_HEIGHT.unit} outside "
                f"{DEFAULT_COM_HEIGHT.valid_range}",
            )
            raise ValueError(f"Parameter com_height out of range: {self.com_height}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "MotionSettings":
        """Build settings from a mapping, ignoring unknown keys."""
        known = {k: float(v) for k, v in values.items() if k in _ENV_KEYS}
        unknown = sorted(set(values) - set(known))
        if unknown:
            log.warning(f"Ignoring unknown motion settings: {unknown}")
        return cls(**known)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MotionSettings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        values = {field: env[key] for field, key in _ENV_KEYS.items() if key in env}
        if values:
            log.debug(f"Motion settings overridden from environment: {values}")
        return cls.from_mapping(values)

    def to_dict(self) -> Dict[str, float]:
        """Convert settings to dictionary format."""
        return asdict(self)


_SETTINGS: Optional[MotionSettings] = None


def get_settings() -> MotionSettings:
    """Return the cached process-wide settings, reading the environment once."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = MotionSettings.from_env()
    return _SETTINGS


def reset_settings(settings: Optional[MotionSettings] = None) -> None:
    """Replace the cached settings (None re-reads the environment on next use)."""
    global _SETTINGS
    _SETTINGS = settings
