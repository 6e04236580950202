import pytest
import pandas as pd
from labnotes.util import check_columns

def test_all_columns_present():
    df = pd.DataFrame({"col_A": [1], "col_B": [2], "col_C": [3]})

    try:
        check_columns(df, required_columns=["col_A", "col_C"])
        check_columns(df, required_columns=["col_A", "col_B", "col_C"])
    except ValueError:
        pytest.fail("check_columns raised ValueError unexpectedly.")

def test_missing_columns_raises_error():
    df = pd.DataFrame({"col_A": [1], "col_B": [2]})

    with pytest.raises(ValueError, match="Not all required columns seen"):
        check_columns(df, required_columns=["col_A", "col_Z"])

def test_error_message_contents():
    df = pd.DataFrame({"col_A": [1]})

    with pytest.raises(ValueError) as exc_info:
        check_columns(df, required_columns=["col_A", "col_B", "col_C"],
                      df_name="plate")

    msg = str(exc_info.value)
    assert "plate" in msg
    assert "col_B" in msg
    assert "col_C" in msg
    assert "col_A" not in msg.split("Missing columns:")[1]
