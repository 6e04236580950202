import pandas as pd
from labnotes.util.dataframe import add_group_columns

def test_single_column_sorted_index():
    df = pd.DataFrame({"well": ["B1", "A1", "B1", "A2"]})
    out = add_group_columns(df, "well", "well_idx")

    # sorted order: A1 -> 0, A2 -> 1, B1 -> 2 ; row order preserved
    assert list(out["well"]) == ["B1", "A1", "B1", "A2"]
    assert list(out["well_idx"]) == [2, 0, 2, 1]
    assert "well_idx" not in df.columns

def test_multiple_columns():
    df = pd.DataFrame({"a": [1, 1, 0, 0],
                       "b": ["y", "x", "y", "y"]})
    out = add_group_columns(df, ["a", "b"], "ab_idx")
    assert list(out["ab_idx"]) == [2, 1, 0, 0]

def test_existing_column_replaced():
    df = pd.DataFrame({"well": ["A1", "A2"], "well_idx": [10, 10]})
    out = add_group_columns(df, "well", "well_idx")
    assert list(out["well_idx"]) == [0, 1]
