"""
Configuration for CoM motion models.

This module provides the settings consumed by motion representations and
the validators used to check them.
"""

from .parameter_manager import ParameterValidator
from .settings import MotionSettings, get_settings, reset_settings

__all__ = [
    "MotionSettings",
    "ParameterValidator",
    "get_settings",
    "reset_settings",
]
