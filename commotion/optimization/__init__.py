"""
Optimizer-facing helpers.

Bridges CoM motion representations to NLP builders.
"""

from .casadi_adapter import ComNlpAdapter

__all__ = ["ComNlpAdapter"]
