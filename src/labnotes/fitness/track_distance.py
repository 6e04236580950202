import numpy as np
import pandas as pd

# Mean Earth radius
EARTH_RADIUS_KM = 6371.0088

def haversine(lat1, lon1, lat2, lon2):
    """
    Great-circle distance in km between points given in degrees. Inputs
    broadcast.
    """

    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))

    a = np.sin((lat2 - lat1) / 2)**2 + \
        np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2)**2

    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0, 1)))


def track_distance(lat, lon):
    """
    Length (km) of a path through consecutive GPS points.
    """

    lat = np.asarray(lat, dtype=float)
    lon = np.asarray(lon, dtype=float)
    if len(lat) != len(lon):
        raise ValueError("lat and lon must have the same length")
    if len(lat) < 2:
        return 0.0

    return float(np.sum(haversine(lat[:-1], lon[:-1], lat[1:], lon[1:])))


def summarize_tracks(tracks_df):
    """
    One row per track with its point count, path length, duration and
    (when elevation is recorded) total climb.

    Parameters
    ----------
    tracks_df : pandas.DataFrame
        points as returned by `read_tracks`

    Returns
    -------
    pandas.DataFrame
        columns start_date, num_points, track_distance_km,
        track_duration_min and, if available, elevation_gain
    """

    rows = []
    for start, sub_df in tracks_df.groupby("start_date", sort=True):

        sub_df = sub_df.sort_values("time")
        row = {"start_date":start,
               "num_points":len(sub_df),
               "track_distance_km":track_distance(sub_df["lat"], sub_df["lon"]),
               "track_duration_min":(sub_df["time"].max() - sub_df["time"].min()).total_seconds() / 60.0}

        if "elevation" in sub_df.columns:
            climb = np.diff(sub_df["elevation"].to_numpy(dtype=float))
            row["elevation_gain"] = float(np.nansum(climb[climb > 0]))

        rows.append(row)

    columns = ["start_date", "num_points", "track_distance_km", "track_duration_min"]
    if "elevation" in tracks_df.columns:
        columns.append("elevation_gain")

    return pd.DataFrame(rows, columns=columns)
