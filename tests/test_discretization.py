"""Tests for the fixed-step discretization grid."""

from __future__ import annotations

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from commotion.constants import TIME_TOLERANCE
from commotion.motion.discretization import DiscretizationGrid


def test_exactly_divisible_horizon():
    grid = DiscretizationGrid(total_time=1.0, dt=0.2)
    assert grid.global_times() == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8, 1.0])
    assert grid.total_nodes() == 6
    assert grid.last_gap() == pytest.approx(0.2)


def test_shorter_last_interval():
    grid = DiscretizationGrid(total_time=0.55, dt=0.2)
    times = grid.global_times()
    assert times == pytest.approx([0.0, 0.2, 0.4, 0.55])
    assert grid.total_nodes() == 4
    assert grid.last_gap() == pytest.approx(0.15)
    assert grid.last_gap() <= 0.2


def test_zero_horizon_has_single_node():
    grid = DiscretizationGrid(total_time=0.0, dt=0.1)
    assert grid.global_times() == [0.0]
    assert grid.total_nodes() == 1
    assert grid.last_gap() == 0.0


def test_horizon_shorter_than_step():
    grid = DiscretizationGrid(total_time=0.05, dt=0.1)
    assert grid.global_times() == [0.0, 0.05]


def test_endpoints_are_exact():
    grid = DiscretizationGrid(total_time=2.3, dt=0.1)
    times = grid.global_times()
    assert times[0] == 0.0
    assert times[-1] == 2.3
    assert len(times) == 24


def test_no_near_duplicate_final_node():
    # 0.3 / 0.1 is 2.9999999999999996 in floating point
    grid = DiscretizationGrid(total_time=0.3, dt=0.1)
    times = grid.global_times()
    assert len(times) == 4
    assert np.min(np.diff(times)) > 0.05


def test_restartable():
    grid = DiscretizationGrid(total_time=0.7, dt=0.25)
    assert grid.global_times() == grid.global_times()
    np.testing.assert_array_equal(grid.as_array(), np.asarray(grid.global_times()))


@pytest.mark.parametrize("total_time, dt", [(1.0, 0.0), (1.0, -0.1), (-1.0, 0.1), (float("inf"), 0.1)])
def test_invalid_arguments(total_time, dt):
    with pytest.raises(ValueError):
        DiscretizationGrid(total_time=total_time, dt=dt)


def test_overshoot_within_tolerance_stretches_last_gap():
    grid = DiscretizationGrid(total_time=0.3 + 5e-10, dt=0.1)
    assert grid.total_nodes() == 4
    assert 0.1 < grid.last_gap() <= 0.1 + TIME_TOLERANCE


def test_overshoot_beyond_tolerance_adds_node():
    grid = DiscretizationGrid(total_time=0.3 + 1e-6, dt=0.1)
    assert grid.total_nodes() == 5
    assert grid.last_gap() < 0.1
