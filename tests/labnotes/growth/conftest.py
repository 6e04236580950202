import pytest
import numpy as np
import pandas as pd

from labnotes.growth.models.ode import logistic_closed_form

@pytest.fixture
def logistic_plate():
    """
    Noise-free logistic curves (r=0.5, K=1.0, y0=0.05) in three wells
    sampled every hour for 16 hours.
    """

    times = np.arange(0, 17, 1.0)
    curve = np.asarray(logistic_closed_form(times, 0.5, 1.0, 0.05))

    plate = pd.DataFrame({"time":times,
                          "A1":curve,
                          "A2":curve * 1.02,
                          "B1":curve * 0.98})
    return plate

@pytest.fixture
def fake_posteriors():
    """
    Fake draws for a shared logistic model on a 3-time, 2-well plate.
    """

    rng = np.random.default_rng(0)
    num_draws = 200
    return {"growth_r":rng.normal(0.5, 0.05, size=num_draws),
            "growth_K":rng.normal(1.0, 0.05, size=num_draws),
            "growth_y0":rng.normal(0.05, 0.005, size=num_draws),
            "obs_sigma":np.abs(rng.normal(0.02, 0.002, size=num_draws)),
            "obs_pred":np.tile(np.array([[0.05, 0.05],
                                         [0.3, 0.3],
                                         [0.9, 0.9]]), (num_draws, 1, 1))}

@pytest.fixture
def small_plate():
    """A 3-time, 2-well plate matching `fake_posteriors`."""

    return pd.DataFrame({"time":[0.0, 4.0, 8.0],
                         "A1":[0.05, 0.31, 0.88],
                         "A2":[0.06, np.nan, 0.91]})
