from labnotes.util.dataframe import check_columns
from labnotes.fitness.track_distance import summarize_tracks

import numpy as np
import pandas as pd

import warnings

def join_tracks(activities_df, tracks_df, tolerance="60s"):
    """
    Attach GPS track summaries to activity records by matching start
    timestamps.

    Each track is matched to the activity whose start_date is nearest to the
    track's start, provided the two differ by no more than `tolerance`.
    Pairs are assigned closest first, so an activity and a track are each
    used at most once. An activity that loses its nearest track to a closer
    activity can still take its next-nearest track within tolerance.

    Parameters
    ----------
    activities_df : pandas.DataFrame
        records from `read_activities`
    tracks_df : pandas.DataFrame
        points from `read_tracks`
    tolerance : str or pandas.Timedelta, optional
        largest allowed difference between start timestamps

    Returns
    -------
    pandas.DataFrame
        copy of activities_df (same row order) with columns track_start,
        num_points, track_distance_km, track_duration_min (and
        elevation_gain if recorded) and has_track. Activities without a
        track have NaN/NaT in the track columns.
    """

    check_columns(activities_df, ["start_date"], df_name="activities_df")
    check_columns(tracks_df, ["start_date", "time", "lat", "lon"], df_name="tracks_df")

    tolerance = pd.Timedelta(tolerance)

    # 1. Reduce the GPS points to one summary row per track
    summary = summarize_tracks(tracks_df).rename(columns={"start_date":"track_start"})
    summary = summary.reset_index(drop=True)
    track_columns = [c for c in summary.columns if c != "track_start"]

    merged = activities_df.copy().reset_index(drop=True)
    merged["start_date"] = pd.to_datetime(merged["start_date"], utc=True).astype("datetime64[ns, UTC]")
    merged["track_start"] = pd.Series(pd.NaT, index=merged.index, dtype="datetime64[ns, UTC]")
    for c in track_columns:
        merged[c] = np.nan

    if len(summary) > 0 and len(merged) > 0:

        summary["track_start"] = pd.to_datetime(summary["track_start"], utc=True).astype("datetime64[ns, UTC]")

        # 2. Collect every (activity, track) pair within tolerance. Activity
        # starts are sorted so each track's window is a searchsorted slice.
        act_ns = merged["start_date"].to_numpy(dtype="datetime64[ns]").astype(np.int64)
        trk_ns = summary["track_start"].to_numpy(dtype="datetime64[ns]").astype(np.int64)
        tol_ns = tolerance.value

        act_order = np.argsort(act_ns, kind="stable")
        act_sorted = act_ns[act_order]
        lo = np.searchsorted(act_sorted, trk_ns - tol_ns, side="left")
        hi = np.searchsorted(act_sorted, trk_ns + tol_ns, side="right")

        act_idx = np.concatenate([act_order[lo[j]:hi[j]] for j in range(len(trk_ns))])
        trk_idx = np.concatenate([np.full(hi[j] - lo[j], j) for j in range(len(trk_ns))])
        offset = np.abs(act_ns[act_idx] - trk_ns[trk_idx])

        # 3. Greedy assignment, closest pairs first. Each activity and each
        # track is used at most once.
        act_used = np.zeros(len(act_ns), dtype=bool)
        trk_used = np.zeros(len(trk_ns), dtype=bool)
        assign_act = []
        assign_trk = []
        for k in np.argsort(offset, kind="stable"):
            a = act_idx[k]
            t = trk_idx[k]
            if act_used[a] or trk_used[t]:
                continue
            act_used[a] = True
            trk_used[t] = True
            assign_act.append(a)
            assign_trk.append(t)

        # 4. Copy the matched track summaries onto their activities
        if len(assign_act) > 0:
            assign_act = np.asarray(assign_act)
            assign_trk = np.asarray(assign_trk)
            merged.loc[assign_act, "track_start"] = summary["track_start"].array[assign_trk]
            for c in track_columns:
                merged.loc[assign_act, c] = summary[c].to_numpy(dtype=float)[assign_trk]

    merged["has_track"] = ~pd.isna(merged["track_start"])

    # Report what could not be matched
    num_no_track = int((~merged["has_track"]).sum())
    num_unused = len(summary) - int(merged["has_track"].sum())
    if num_no_track > 0:
        warnings.warn(f"{num_no_track} activities have no GPS track within {tolerance}.")
    if num_unused > 0:
        warnings.warn(f"{num_unused} GPS tracks did not match any activity.")

    return merged
