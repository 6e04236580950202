import pytest
import numpy as np
import pandas as pd

from labnotes.growth import compare_well_spread

@pytest.fixture
def shared():
    return {"r":pd.DataFrame({"well":["all"],
                              "mean":[0.5],
                              "std":[0.01],
                              "lower_95":[0.48],
                              "upper_95":[0.52]})}

@pytest.fixture
def hierarchical():
    return {"r":pd.DataFrame({"well":["A1", "A2", "A3"],
                              "mean":[0.40, 0.50, 0.60],
                              "std":[0.02, 0.02, 0.02]})}

def test_compare_well_spread(shared, hierarchical):
    df = compare_well_spread(shared, hierarchical, parameter="r")

    assert len(df) == 1
    row = df.iloc[0]
    assert row["parameter"] == "r"
    assert row["shared_mean"] == 0.5
    assert row["well_mean_min"] == pytest.approx(0.4)
    assert row["well_mean_max"] == pytest.approx(0.6)
    assert row["well_mean_std"] == pytest.approx(0.1)
    assert row["wells_outside_shared"] == 2
    assert row["spread_ratio"] == pytest.approx(10.0)

def test_accepts_dataframes(shared, hierarchical):
    df = compare_well_spread(shared["r"].drop(columns=["lower_95", "upper_95"]),
                             hierarchical["r"])
    assert np.isnan(df["wells_outside_shared"].iloc[0])

def test_bad_shapes(shared, hierarchical):
    with pytest.raises(ValueError, match="single"):
        compare_well_spread(hierarchical, hierarchical)
    with pytest.raises(ValueError, match="one row per well"):
        compare_well_spread(shared, shared)
