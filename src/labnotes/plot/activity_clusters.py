from labnotes.plot.default_styles import DEFAULT_CLUSTER_SCATTER_KWARGS
from labnotes.plot.helper import (
    merge_kwargs,
    get_category_colors
)
from labnotes.util.dataframe import check_columns

from matplotlib import pyplot as plt
import numpy as np
import pandas as pd

def activity_clusters(clustered_df,
                      x="distance_km",
                      y="speed_kmh",
                      color_by="cluster",
                      marker_by="type",
                      log_x=False,
                      scatter_kwargs=None,
                      ax=None):
    """
    Scatter plot of two activity features, colored by mixture-model cluster
    and with one marker shape per activity type.

    Parameters
    ----------
    clustered_df : pandas.DataFrame
        output of `cluster_activities`
    x, y : str, optional
        feature columns for the axes
    color_by : str, optional
        column that sets point color
    marker_by : str, optional
        column that sets marker shape. None uses circles for everything.
    log_x : bool, optional
        log-scale the x axis
    scatter_kwargs : dict, optional
        overrides for the scatter style
    ax : matplotlib.axes.Axes, optional
        axes to draw on. If None, a new figure is created.

    Returns
    -------
    matplotlib.axes.Axes
    """

    needed = [x, y, color_by]
    if marker_by is not None:
        needed.append(marker_by)
    check_columns(clustered_df, needed, df_name="clustered_df")

    scatter_kwargs = merge_kwargs(DEFAULT_CLUSTER_SCATTER_KWARGS, scatter_kwargs)

    if ax is None:
        _, ax = plt.subplots(1, figsize=(6, 5))

    df = clustered_df.loc[~pd.isna(clustered_df[color_by])]

    colors = get_category_colors(df[color_by])

    markers = ["o", "s", "^", "D", "v", "P", "X", "*"]
    if marker_by is None:
        marker_map = {None: "o"}
        marker_keys = np.full(len(df), None)
    else:
        marker_cats = sorted(df[marker_by].astype(str).unique())
        marker_map = {m: markers[i % len(markers)] for i, m in enumerate(marker_cats)}
        marker_keys = df[marker_by].astype(str).to_numpy()

    color_keys = df[color_by].to_numpy()
    for m_key, marker in marker_map.items():
        for c_key, color in colors.items():
            mask = (marker_keys == m_key) & (color_keys == c_key)
            if not np.any(mask):
                continue
            ax.scatter(df.loc[mask, x], df.loc[mask, y],
                       color=color, marker=marker, **scatter_kwargs)

    # Separate legend entries for color and shape
    handles = []
    for c_key, color in colors.items():
        handles.append(ax.scatter([], [], color=color, marker="o",
                                  label=f"{color_by} {c_key}"))
    if marker_by is not None:
        for m_key, marker in marker_map.items():
            handles.append(ax.scatter([], [], color="gray", marker=marker,
                                      label=m_key))
    ax.legend(handles=handles, frameon=False, fontsize=9)

    if log_x:
        ax.set_xscale("log")

    ax.set_xlabel(x)
    ax.set_ylabel(y)

    return ax
