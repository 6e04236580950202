from labnotes.util.io import read_dataframe
from labnotes.util.dataframe import check_columns

import numpy as np
import pandas as pd

import warnings

REQUIRED_COLUMNS = ["id",
                    "start_date",
                    "type",
                    "distance",
                    "moving_time",
                    "elapsed_time",
                    "average_speed",
                    "commute"]

_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "0", ""}

def _to_bool(values):
    """
    Coerce a column of booleans, 0/1 or true/false strings to bool.
    """

    if pd.api.types.is_bool_dtype(values):
        return values.astype(bool)

    out = []
    for v in values:
        if isinstance(v, (bool, np.bool_)):
            out.append(bool(v))
        elif pd.isna(v):
            out.append(False)
        elif isinstance(v, (int, float, np.integer, np.floating)) and v in (0, 1):
            out.append(bool(v))
        elif str(v).strip().lower() in _TRUE_STRINGS:
            out.append(True)
        elif str(v).strip().lower() in _FALSE_STRINGS:
            out.append(False)
        else:
            raise ValueError(f"Could not interpret commute value '{v}' as True/False.")

    return pd.Series(out, index=values.index, dtype=bool)


def read_activities(source):
    """
    Read activity records (one row per recorded activity, as exported from a
    fitness-tracking API).

    Expected columns are id, start_date, type, distance (m), moving_time (s),
    elapsed_time (s), average_speed (m/s) and commute. Other columns are
    kept.

    Parameters
    ----------
    source : pandas.DataFrame or str
        table or path to a csv/tsv/json/xlsx file

    Returns
    -------
    pandas.DataFrame
        records sorted by start_date (UTC timestamps) with commute as bool
        and derived columns distance_km, duration_min and speed_kmh

    Raises
    ------
    ValueError
        if columns are missing, numeric columns are not numeric or negative,
        or commute values cannot be read as booleans
    """

    # 1. Read and check columns
    df = read_dataframe(source, parse_dates=["start_date"])
    check_columns(df, REQUIRED_COLUMNS, df_name="activities")

    if not pd.api.types.is_datetime64_any_dtype(df["start_date"]):
        df["start_date"] = pd.to_datetime(df["start_date"], utc=True)
    if pd.isna(df["start_date"]).any():
        raise ValueError("Every activity must have a start_date.")

    # 2. Coerce types
    for c in ["distance", "moving_time", "elapsed_time", "average_speed"]:
        try:
            df[c] = pd.to_numeric(df[c]).astype(float)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Column '{c}' must be numeric: {e}") from e
        if np.any(df[c] < 0):
            raise ValueError(f"Column '{c}' has negative values.")

    df["commute"] = _to_bool(df["commute"])
    df["type"] = df["type"].astype(str)

    if df["start_date"].duplicated().any():
        warnings.warn("Some activities share a start_date; track joins may be ambiguous.")

    # 3. Derived columns in friendlier units
    df["distance_km"] = df["distance"] / 1000.0
    df["duration_min"] = df["moving_time"] / 60.0
    df["speed_kmh"] = df["average_speed"] * 3.6

    df = df.sort_values("start_date").reset_index(drop=True)

    return df
