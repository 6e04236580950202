import pytest
import pandas as pd

from labnotes.fitness import simulate_activities

@pytest.fixture
def raw_activities():
    """Four activities in the raw export units (m, s, m/s)."""

    return pd.DataFrame({"id":[4, 1, 2, 3],
                         "start_date":["2024-01-08T07:00:00Z",
                                       "2024-01-01T07:00:00Z",
                                       "2024-01-02T18:30:00Z",
                                       "2024-01-03T12:00:00Z"],
                         "type":["Ride", "Ride", "Run", "Walk"],
                         "distance":[20000.0, 10000.0, 5000.0, 3000.0],
                         "moving_time":[3000, 1800, 1500, 2400],
                         "elapsed_time":[3300, 1900, 1600, 2500],
                         "average_speed":[6.0, 5.5, 3.3, 1.25],
                         "commute":["true", "True", "false", "0"]})

@pytest.fixture
def raw_tracks():
    """Two GPS tracks: one starts at the 2024-01-01 ride, one matches nothing."""

    return pd.DataFrame({"start_date":["2024-01-01T07:00:10Z"] * 3 + ["2024-02-01T00:00:00Z"] * 2,
                         "time":["2024-01-01T07:00:10Z",
                                 "2024-01-01T07:10:10Z",
                                 "2024-01-01T07:20:10Z",
                                 "2024-02-01T00:00:00Z",
                                 "2024-02-01T00:05:00Z"],
                         "lat":[47.60, 47.61, 47.62, 40.0, 40.01],
                         "lon":[-122.33, -122.33, -122.33, -100.0, -100.0],
                         "elevation":[10.0, 15.0, 12.0, 100.0, 101.0]})

@pytest.fixture(scope="module")
def simulated():
    return simulate_activities(num_activities=90, seed=1)
