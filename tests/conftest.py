"""
Pytest configuration for the commotion test suite.

Makes the repository root importable when tests run from a checkout and
provides the phase schedules shared by the motion tests.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from commotion.motion.phase import Phase, PhaseInfo, PhaseType, build_walking_phases  # noqa: E402


@pytest.fixture
def walking_phases():
    """Two steps with a short all-legs support between them."""
    return build_walking_phases(
        n_steps=2,
        t_step=0.4,
        t_stance_initial=0.3,
        t_stance_final=0.3,
        t_stance_between=0.1,
    )


@pytest.fixture
def stance_only_phases():
    return [Phase(PhaseInfo(PhaseType.STANCE, -1), 1.0)]


@pytest.fixture
def hop_phases():
    """Stance, a flight phase, then landing into stance."""
    return [
        Phase(PhaseInfo(PhaseType.STANCE, -1), 0.4),
        Phase(PhaseInfo(PhaseType.FLIGHT, -1), 0.2),
        Phase(PhaseInfo(PhaseType.STANCE, -1), 0.4),
    ]
