"""Tests for the linear inverted pendulum CoM representation."""

from __future__ import annotations

import math
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from commotion.motion import (
    LinearInvertedPendulumMotion,
    Phase,
    PhaseInfo,
    PhaseType,
    UnderconstrainedError,
    build_walking_phases,
)
from commotion.units import GRAVITY


@pytest.fixture
def pendulum(walking_phases) -> LinearInvertedPendulumMotion:
    motion = LinearInvertedPendulumMotion(walking_phases, initial_pos=(0.02, -0.01),
                                          initial_vel=(0.1, 0.0), com_height=0.6)
    motion.set_coefficients(np.linspace(-0.05, 0.05, motion.get_total_free_coeff()))
    return motion


def test_natural_frequency() -> None:
    motion = LinearInvertedPendulumMotion([Phase(PhaseInfo(PhaseType.STANCE, -1), 1.0)],
                                          com_height=0.8)
    assert motion.omega == pytest.approx(math.sqrt(GRAVITY.value / 0.8))


def test_two_coefficients_per_supported_segment(pendulum) -> None:
    assert pendulum.get_total_free_coeff() == 2 * len(pendulum.get_segments())


def test_satisfies_pendulum_dynamics(pendulum) -> None:
    w2 = pendulum.omega ** 2
    for t in np.linspace(0.0, pendulum.get_total_time(), 31):
        state = pendulum.get_com(t)
        cop = pendulum.get_cop(t)
        np.testing.assert_allclose(state.acc, w2 * (state.pos - cop), atol=1e-9)


def test_balanced_at_cop() -> None:
    """A CoM resting over its CoP stays there."""
    motion = LinearInvertedPendulumMotion([Phase(PhaseInfo(PhaseType.STANCE, -1), 1.0)],
                                          initial_pos=(0.3, 0.2), max_segment_duration=1.0)
    motion.set_coefficients([0.3, 0.2])
    state = motion.get_com(1.0)
    np.testing.assert_allclose(state.pos, [0.3, 0.2])
    np.testing.assert_allclose(state.vel, [0.0, 0.0])


def test_continuous_across_segments(pendulum) -> None:
    eps = 1e-8
    for seg in pendulum.get_segments()[1:]:
        before = pendulum.get_com(seg.t_start - eps)
        after = pendulum.get_com(seg.t_start)
        np.testing.assert_allclose(before.pos, after.pos, atol=1e-6)
        np.testing.assert_allclose(before.vel, after.vel, atol=1e-6)


def test_flight_segment_is_ballistic(hop_phases) -> None:
    motion = LinearInvertedPendulumMotion(hop_phases, initial_pos=(0.0, 0.0), com_height=0.5)
    # flight carries no center of pressure
    assert motion.get_total_free_coeff() == 4
    motion.set_coefficients([-0.05, 0.0, 0.1, 0.0])
    t0, t1 = 0.4, 0.6
    start = motion.get_com(t0)
    mid = motion.get_com(0.5)
    np.testing.assert_allclose(mid.acc, [0.0, 0.0])
    np.testing.assert_allclose(mid.vel, start.vel)
    np.testing.assert_allclose(mid.pos, start.pos + start.vel * 0.1)
    assert motion.get_cop(0.5) is None
    assert motion.get_current_phase(0.5) == PhaseInfo(PhaseType.FLIGHT, -1)
    np.testing.assert_allclose(motion.get_com(t1 - 1e-9).pos, motion.get_com(t1).pos, atol=1e-8)


def test_hop_phase_list(hop_phases) -> None:
    motion = LinearInvertedPendulumMotion(hop_phases)
    assert motion.get_phases() == [
        PhaseInfo(PhaseType.STANCE, -1),
        PhaseInfo(PhaseType.FLIGHT, -1),
        PhaseInfo(PhaseType.STANCE, -1),
    ]


def test_single_segment_cannot_end_at_start(stance_only_phases) -> None:
    motion = LinearInvertedPendulumMotion(stance_only_phases, initial_vel=(0.2, 0.0),
                                          max_segment_duration=2.0)
    motion.set_coefficients([0.1, 0.1])
    with pytest.raises(UnderconstrainedError):
        motion.set_end_at_start()
    np.testing.assert_array_equal(motion.get_coefficients(), [0.1, 0.1])


def test_pure_flight_cannot_end_at_start() -> None:
    motion = LinearInvertedPendulumMotion([Phase(PhaseInfo(PhaseType.FLIGHT, -1), 0.3)])
    assert motion.get_total_free_coeff() == 0
    with pytest.raises(UnderconstrainedError):
        motion.set_end_at_start()


def test_split_stance_can_end_at_start(stance_only_phases) -> None:
    motion = LinearInvertedPendulumMotion(stance_only_phases, initial_vel=(0.2, -0.1),
                                          max_segment_duration=0.5)
    motion.set_end_at_start()
    end = motion.get_com(motion.get_total_time())
    np.testing.assert_allclose(end.pos, motion.get_com(0.0).pos, atol=1e-6)
    np.testing.assert_allclose(end.vel, [0.0, 0.0], atol=1e-6)


@pytest.mark.parametrize("kwargs", [
    {"com_height": 0.0},
    {"com_height": -1.0},
    {"com_height": 0.01},
    {"com_height": 5.0},
    {"gravity": 0.0},
])
def test_invalid_parameters(stance_only_phases, kwargs) -> None:
    with pytest.raises(ValueError):
        LinearInvertedPendulumMotion(stance_only_phases, **kwargs)


def _end_error(motion) -> float:
    start = motion.get_com(0.0)
    end = motion.get_com(motion.get_total_time())
    return float(np.linalg.norm(np.concatenate([end.pos - start.pos, end.vel])))


@pytest.mark.parametrize("n_steps", [9, 12])
def test_long_walk_can_end_at_start(n_steps) -> None:
    # early CoP columns grow like cosh(omega * T), late ones stay near unity
    phases = build_walking_phases(n_steps, 0.6, 0.5, 0.5, 0.2)
    motion = LinearInvertedPendulumMotion(phases, initial_vel=(0.2, 0.0))
    assert motion.get_total_time() > 8.0 - 1e-9
    before = _end_error(motion)
    motion.set_end_at_start()
    assert _end_error(motion) <= 1e-6 * before
