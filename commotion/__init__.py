"""commotion: center-of-mass motion representations for legged trajectory optimization."""
from __future__ import annotations

from commotion.logging import get_logger

__version__ = "0.1.0"

log = get_logger(__name__)
