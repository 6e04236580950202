from labnotes.util.validation import check_number
from labnotes.util.cli import generalized_main
from labnotes.fitness.track_distance import EARTH_RADIUS_KM

import numpy as np
import pandas as pd

# type: (median distance km, log-sd distance, mean speed km/h, sd speed km/h)
ACTIVITY_PROFILES = {"Ride":(20.0, 0.4, 24.0, 3.0),
                     "Run":(8.0, 0.3, 11.0, 1.2),
                     "Walk":(4.0, 0.4, 5.0, 0.6)}

def _simulate_track(start, distance_km, duration_s, rng,
                    origin=(47.61, -122.33),
                    point_interval_s=30.0):
    """
    Random-heading walk out from `origin` covering about `distance_km`.
    """

    num_points = max(2, int(duration_s // point_interval_s) + 1)
    step_km = distance_km / (num_points - 1)

    heading = rng.uniform(0, 2 * np.pi)
    headings = heading + np.cumsum(rng.normal(0, 0.2, size=num_points - 1))

    dlat = step_km * np.cos(headings) / EARTH_RADIUS_KM
    lat0 = np.radians(origin[0])
    dlon = step_km * np.sin(headings) / (EARTH_RADIUS_KM * np.cos(lat0))

    lat = origin[0] + np.degrees(np.concatenate([[0], np.cumsum(dlat)]))
    lon = origin[1] + np.degrees(np.concatenate([[0], np.cumsum(dlon)]))
    elevation = 50 + np.cumsum(rng.normal(0, 1.0, size=num_points))

    times = start + pd.to_timedelta(np.linspace(0, duration_s, num_points), unit="s")

    return pd.DataFrame({"start_date":start,
                         "time":times,
                         "lat":lat,
                         "lon":lon,
                         "elevation":elevation})


def simulate_activities(num_activities=120,
                        start="2024-01-01",
                        days=180,
                        type_weights="0.5,0.3,0.2",
                        commute_fraction=0.4,
                        track_fraction=0.9,
                        seed=0,
                        out_root=None):
    """
    Simulate a log of Ride, Run and Walk activities with GPS tracks.

    Distances are log-normal and speeds normal around per-type values in
    ACTIVITY_PROFILES. Only rides can be commutes. A random subset of
    activities (`track_fraction`) gets a GPS track whose start matches the
    activity start.

    Parameters
    ----------
    num_activities : int
        number of activity records
    start : str
        first possible start date
    days : int
        activities are spread uniformly over this many days
    type_weights : str or sequence of float
        relative frequency of Ride, Run and Walk ("0.5,0.3,0.2" on the
        command line)
    commute_fraction : float
        fraction of rides flagged as commutes
    track_fraction : float
        fraction of activities with a GPS track
    seed : int
        random seed
    out_root : str, optional
        if given, write {out_root}_activities.csv and {out_root}_tracks.csv

    Returns
    -------
    activities_df : pandas.DataFrame
        records in the raw export units (m, s, m/s)
    tracks_df : pandas.DataFrame
        GPS points
    """

    num_activities = check_number(num_activities, "num_activities",
                                  cast_type=int, min_allowed=1)
    days = check_number(days, "days", cast_type=int, min_allowed=1)
    commute_fraction = check_number(commute_fraction, "commute_fraction",
                                    min_allowed=0, max_allowed=1)
    track_fraction = check_number(track_fraction, "track_fraction",
                                  min_allowed=0, max_allowed=1)

    if isinstance(type_weights, str):
        type_weights = [float(w) for w in type_weights.split(",")]
    type_weights = np.asarray(type_weights, dtype=float)
    types = list(ACTIVITY_PROFILES)
    if len(type_weights) != len(types) or np.any(type_weights < 0) or np.sum(type_weights) == 0:
        raise ValueError(f"type_weights must be {len(types)} non-negative "
                         f"numbers (for {', '.join(types)}), not all zero.")
    type_weights = type_weights / np.sum(type_weights)

    rng = np.random.default_rng(seed)

    # Whole-second offsets so starts survive a csv round trip exactly
    offsets = np.sort(rng.choice(days * 86400, size=num_activities, replace=False))
    start_dates = pd.Timestamp(start, tz="UTC") + pd.to_timedelta(offsets, unit="s")

    activity_types = rng.choice(types, size=num_activities, p=type_weights)

    rows = []
    tracks = []
    for i in range(num_activities):

        a_type = activity_types[i]
        med_dist, sd_dist, mean_speed, sd_speed = ACTIVITY_PROFILES[a_type]

        distance_km = med_dist * np.exp(rng.normal(0, sd_dist))
        speed_kmh = max(0.5, rng.normal(mean_speed, sd_speed))
        moving_time = round(3600 * distance_km / speed_kmh)
        elapsed_time = moving_time + int(rng.integers(0, 600))
        commute = bool(a_type == "Ride" and rng.uniform() < commute_fraction)

        rows.append({"id":1000 + i,
                     "start_date":start_dates[i],
                     "type":a_type,
                     "distance":distance_km * 1000,
                     "moving_time":moving_time,
                     "elapsed_time":elapsed_time,
                     "average_speed":speed_kmh / 3.6,
                     "commute":commute})

        if rng.uniform() < track_fraction:
            tracks.append(_simulate_track(start_dates[i], distance_km,
                                          elapsed_time, rng))

    activities_df = pd.DataFrame(rows)
    if len(tracks) > 0:
        tracks_df = pd.concat(tracks, ignore_index=True)
    else:
        tracks_df = pd.DataFrame(columns=["start_date", "time", "lat", "lon", "elevation"])

    if out_root is not None:
        activities_df.to_csv(f"{out_root}_activities.csv", index=False)
        tracks_df.to_csv(f"{out_root}_tracks.csv", index=False)
        print(f"Wrote {out_root}_activities.csv and {out_root}_tracks.csv", flush=True)

    return activities_df, tracks_df


def main():
    """CLI entry point for simulating an activity log."""
    generalized_main(simulate_activities,
                     manual_arg_defaults={"out_root":"simulated"})

if __name__ == "__main__":
    main()
