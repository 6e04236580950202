import pytest
import pandas as pd

from labnotes.fitness import compare_clusters

def test_perfect_agreement():
    df = pd.DataFrame({"type":["Run", "Run", "Ride", "Ride"],
                       "cluster":pd.array([1, 1, 0, 0], dtype="Int64")})
    out = compare_clusters(df)

    assert out["adjusted_rand_index"] == pytest.approx(1.0)
    assert out["agreement"] == 1.0
    assert out["cluster_labels"] == {0:"Ride", 1:"Run"}
    assert out["crosstab"].loc["Run", 1] == 2

def test_partial_agreement():
    df = pd.DataFrame({"type":["Run", "Run", "Walk", "Ride", "Ride"],
                       "cluster":pd.array([0, 0, 0, 1, pd.NA], dtype="Int64")})
    out = compare_clusters(df)

    # unclustered row is left out
    assert out["crosstab"].to_numpy().sum() == 4
    assert out["cluster_labels"][0] == "Run"
    assert out["agreement"] == pytest.approx(0.75)
    assert out["adjusted_rand_index"] < 1

def test_errors():
    with pytest.raises(ValueError, match="Missing columns"):
        compare_clusters(pd.DataFrame({"type":["Run"]}))

    with pytest.raises(ValueError, match="No clustered"):
        compare_clusters(pd.DataFrame({"type":["Run"],
                                       "cluster":pd.array([pd.NA], dtype="Int64")}))
