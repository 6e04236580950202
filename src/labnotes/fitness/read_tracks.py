from labnotes.util.io import read_dataframe
from labnotes.util.dataframe import check_columns

import numpy as np
import pandas as pd

import warnings

def read_tracks(source):
    """
    Read raw GPS tracks stored as one row per recorded point.

    Points need time, lat and lon columns plus either `start_date` (the
    start timestamp of the track the point belongs to) or `track_id`. With
    only `track_id`, each track's start_date is its earliest point time.
    An `elevation` column is kept if present.

    Parameters
    ----------
    source : pandas.DataFrame or str
        table or path to a file

    Returns
    -------
    pandas.DataFrame
        points sorted by start_date and time, with UTC timestamps

    Raises
    ------
    ValueError
        if columns are missing or coordinates are out of range
    """

    df = read_dataframe(source, parse_dates=["start_date", "time"])

    check_columns(df, ["time", "lat", "lon"], df_name="tracks")
    if "start_date" not in df.columns:
        if "track_id" not in df.columns:
            raise ValueError("tracks needs a 'start_date' or 'track_id' column.")
        df["start_date"] = df.groupby("track_id")["time"].transform("min")

    for c in ["start_date", "time"]:
        if not pd.api.types.is_datetime64_any_dtype(df[c]):
            df[c] = pd.to_datetime(df[c], utc=True)

    for c in ["lat", "lon"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")

    bad = pd.isna(df["lat"]) | pd.isna(df["lon"])
    if bad.any():
        warnings.warn(f"Dropping {int(bad.sum())} GPS points with missing coordinates.")
        df = df.loc[~bad]

    if np.any(np.abs(df["lat"]) > 90):
        raise ValueError("Latitudes must be between -90 and 90.")
    if np.any(np.abs(df["lon"]) > 180):
        raise ValueError("Longitudes must be between -180 and 180.")

    df = df.sort_values(["start_date", "time"]).reset_index(drop=True)

    return df
