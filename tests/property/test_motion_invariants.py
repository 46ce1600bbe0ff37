import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.extra.numpy import arrays

from commotion.motion import (
    ComSpline,
    LinearInvertedPendulumMotion,
    PhaseType,
    build_walking_phases,
)

schedules = st.builds(
    build_walking_phases,
    n_steps=st.integers(min_value=0, max_value=4),
    t_step=st.floats(min_value=0.1, max_value=0.6),
    t_stance_initial=st.floats(min_value=0.05, max_value=0.5),
    t_stance_final=st.floats(min_value=0.05, max_value=0.5),
    t_stance_between=st.sampled_from([0.0, 0.1, 0.2]),
)
models = st.sampled_from([ComSpline, LinearInvertedPendulumMotion])


@settings(max_examples=50, deadline=None)
@given(phases=schedules, model=models, data=st.data())
def test_coefficient_roundtrip(phases, model, data):
    motion = model(phases)
    n = motion.get_total_free_coeff()
    x = data.draw(arrays(np.float64, n, elements=st.floats(-10.0, 10.0)))
    motion.set_coefficients(x)
    np.testing.assert_array_equal(motion.get_coefficients(), x)


@settings(max_examples=50, deadline=None)
@given(phases=schedules, model=models)
def test_step_ids_count_up(phases, model):
    motion = model(phases)
    steps = [p.id for p in motion.get_phases() if p.type is PhaseType.STEP]
    assert steps == list(range(len(steps)))
    ids = [p.id for p in motion.get_phases()]
    assert ids == sorted(ids)


@settings(max_examples=50, deadline=None)
@given(phases=schedules, model=models, fraction=st.floats(min_value=0.0, max_value=1.0))
def test_current_phase_matches_span(phases, model, fraction):
    motion = model(phases)
    T = motion.get_total_time()
    t = fraction * T
    spans = motion.get_phase_spans()
    containing = [info for info, t0, t1 in spans if t0 <= t < t1]
    expected = containing[0] if containing else spans[-1][0]
    assert motion.get_current_phase(t) == expected


@settings(max_examples=30, deadline=None)
@given(phases=schedules, data=st.data())
def test_spline_end_at_start(phases, data):
    motion = ComSpline(phases, initial_vel=(0.1, -0.05))
    n = motion.get_total_free_coeff()
    motion.set_coefficients(data.draw(arrays(np.float64, n, elements=st.floats(-1.0, 1.0))))
    motion.set_end_at_start()
    start = motion.get_com(0.0)
    end = motion.get_com(motion.get_total_time())
    np.testing.assert_allclose(end.pos, start.pos, atol=1e-6)
    np.testing.assert_allclose(end.vel, 0.0, atol=1e-6)
