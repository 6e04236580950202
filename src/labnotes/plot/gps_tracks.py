from labnotes.plot.default_styles import DEFAULT_TRACK_LINE_KWARGS
from labnotes.plot.helper import (
    merge_kwargs,
    get_category_colors
)
from labnotes.util.dataframe import check_columns

from matplotlib import pyplot as plt
import numpy as np

def gps_tracks(tracks_df,
               activities_df=None,
               color_by="type",
               line_kwargs=None,
               ax=None):
    """
    Overlay GPS tracks as lon/lat lines.

    Parameters
    ----------
    tracks_df : pandas.DataFrame
        points from `read_tracks`
    activities_df : pandas.DataFrame, optional
        output of `join_tracks`. If given, each track is colored by the
        `color_by` column of the activity it was joined to.
    color_by : str, optional
        activity column used for color
    line_kwargs : dict, optional
        overrides for the line style
    ax : matplotlib.axes.Axes, optional
        axes to draw on. If None, a new figure is created.

    Returns
    -------
    matplotlib.axes.Axes
    """

    check_columns(tracks_df, ["start_date", "time", "lat", "lon"], df_name="tracks_df")

    line_kwargs = merge_kwargs(DEFAULT_TRACK_LINE_KWARGS, line_kwargs)

    if ax is None:
        _, ax = plt.subplots(1, figsize=(6, 6))

    category = {}
    if activities_df is not None:
        check_columns(activities_df, ["track_start", color_by], df_name="activities_df")
        joined = activities_df.loc[activities_df["track_start"].notna()]
        category = dict(zip(joined["track_start"], joined[color_by].astype(str)))

    colors = get_category_colors(category.values())

    seen = set()
    for start, sub_df in tracks_df.groupby("start_date", sort=True):

        sub_df = sub_df.sort_values("time")
        cat = category.get(start)
        kwargs = dict(line_kwargs)
        if cat is not None:
            kwargs["color"] = colors[cat]
            if cat not in seen:
                kwargs["label"] = cat
                seen.add(cat)
        else:
            kwargs.setdefault("color", "gray")

        ax.plot(sub_df["lon"], sub_df["lat"], **kwargs)

    if len(seen) > 0:
        ax.legend(frameon=False)

    # Approximately equal distances along each axis
    if len(tracks_df) > 0:
        mid_lat = np.radians(np.nanmean(tracks_df["lat"]))
        ax.set_aspect(1 / max(np.cos(mid_lat), 1e-3))

    ax.set_xlabel("longitude")
    ax.set_ylabel("latitude")

    return ax
