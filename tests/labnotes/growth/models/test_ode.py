import pytest
import numpy as np
import jax.numpy as jnp

from labnotes.growth.models.ode import (
    logistic_rhs,
    lag_adjustment,
    richards_rhs,
    logistic_closed_form,
    solve_growth_ode
)

@pytest.fixture
def times():
    return jnp.linspace(0, 20, 41)

def test_logistic_rhs():
    assert float(logistic_rhs(0.0, 0.5, (1.0, 1.0))) == pytest.approx(0.25)
    assert float(logistic_rhs(0.0, 1.0, (1.0, 1.0))) == pytest.approx(0.0)

def test_lag_adjustment():
    # a(0) = exp(-r*lag)
    assert float(lag_adjustment(0.0, 0.5, 2.0)) == pytest.approx(np.exp(-1.0), rel=1e-5)

    # no lag means no adjustment
    assert float(lag_adjustment(3.0, 0.5, 0.0)) == pytest.approx(1.0)

    # approaches 1 well after the lag
    assert float(lag_adjustment(100.0, 0.5, 2.0)) == pytest.approx(1.0, abs=1e-6)

def test_richards_reduces_to_logistic():
    y = jnp.array([0.1, 0.5, 0.9])
    a = richards_rhs(1.0, y, (0.7, 1.0, 1.0, 0.0))
    b = logistic_rhs(1.0, y, (0.7, 1.0))
    assert np.allclose(a, b)

def test_richards_negative_y_is_clipped():
    assert float(richards_rhs(0.0, -0.1, (0.7, 1.0, 1.0, 0.0))) == 0.0

def test_logistic_closed_form(times):
    curve = logistic_closed_form(times, 0.5, 1.0, 0.05)
    assert float(curve[0]) == pytest.approx(0.05)
    assert float(curve[-1]) == pytest.approx(1.0, abs=1e-3)
    assert np.all(np.diff(np.asarray(curve)) > 0)

def test_solve_logistic_matches_closed_form(times):
    solved = solve_growth_ode(logistic_rhs, 0.05, times, (0.5, 1.0))
    expected = logistic_closed_form(times, 0.5, 1.0, 0.05)

    assert solved.shape == times.shape
    assert np.allclose(solved, expected, atol=1e-4)

def test_solve_per_well(times):
    r = jnp.array([0.3, 0.5, 0.8])
    K = jnp.array([1.0, 1.5, 0.5])
    solved = solve_growth_ode(logistic_rhs, jnp.full(3, 0.05), times, (r, K))

    assert solved.shape == (len(times), 3)
    for i in range(3):
        expected = logistic_closed_form(times, r[i], K[i], 0.05)
        assert np.allclose(solved[:, i], expected, atol=1e-4)

def test_solve_richards_lag_delays_growth(times):
    no_lag = solve_growth_ode(richards_rhs, 0.05, times, (0.5, 1.0, 1.0, 0.0))
    lagged = solve_growth_ode(richards_rhs, 0.05, times, (0.5, 1.0, 1.0, 4.0))

    # same start and plateau, lagged curve is always behind
    assert float(lagged[0]) == pytest.approx(float(no_lag[0]))
    assert np.all(np.asarray(lagged[1:]) < np.asarray(no_lag[1:]))

def test_failed_solve_is_nan(times):
    solved = solve_growth_ode(logistic_rhs, 0.05, times, (0.5, 1.0),
                              rtol=1e-10, atol=1e-12, max_steps=2)
    assert np.all(np.isnan(np.asarray(solved)))
