from labnotes.plot.default_styles import (
    DEFAULT_FOREST_POINT_KWARGS,
    DEFAULT_FOREST_ERROR_KWARGS,
    DEFAULT_SHARED_SPAN_KWARGS
)
from labnotes.plot.helper import merge_kwargs
from labnotes.util.dataframe import check_columns

from matplotlib import pyplot as plt
import numpy as np

def param_forest(param_df,
                 shared_df=None,
                 lower="lower_95",
                 upper="upper_95",
                 label=None,
                 point_kwargs=None,
                 error_kwargs=None,
                 shared_kwargs=None,
                 ax=None):
    """
    Forest plot of per-well posterior means and intervals for one parameter,
    optionally overlaid on the estimate from a shared-parameter fit.

    Parameters
    ----------
    param_df : pandas.DataFrame
        one row per well with columns well, mean, `lower` and `upper` (as
        in `GrowthCurveModel.extract_parameters(...)[param]`)
    shared_df : pandas.DataFrame, optional
        single-row table for the same parameter from a shared fit. Its mean
        is drawn as a vertical line and its interval as a shaded span.
    lower, upper : str, optional
        interval columns
    label : str, optional
        x-axis label
    point_kwargs, error_kwargs, shared_kwargs : dict, optional
        overrides for the matplotlib styles
    ax : matplotlib.axes.Axes, optional
        axes to draw on. If None, a new figure is created.

    Returns
    -------
    matplotlib.axes.Axes
    """

    check_columns(param_df, ["well", "mean", lower, upper], df_name="param_df")

    point_kwargs = merge_kwargs(DEFAULT_FOREST_POINT_KWARGS, point_kwargs)
    error_kwargs = merge_kwargs(DEFAULT_FOREST_ERROR_KWARGS, error_kwargs)
    shared_kwargs = merge_kwargs(DEFAULT_SHARED_SPAN_KWARGS, shared_kwargs)

    if ax is None:
        _, ax = plt.subplots(1, figsize=(5, max(2, 0.3 * len(param_df) + 1)))

    y = np.arange(len(param_df))[::-1]

    if shared_df is not None:
        check_columns(shared_df, ["mean", lower, upper], df_name="shared_df")
        ax.axvspan(shared_df[lower].iloc[0], shared_df[upper].iloc[0], **shared_kwargs)
        ax.axvline(shared_df["mean"].iloc[0],
                   color=shared_kwargs.get("color", "royalblue"),
                   lw=1.5, ls="--", zorder=2)

    ax.hlines(y, param_df[lower], param_df[upper], **error_kwargs)
    ax.scatter(param_df["mean"], y, **point_kwargs)

    ax.set_yticks(y)
    ax.set_yticklabels(param_df["well"].astype(str))
    if label is not None:
        ax.set_xlabel(label)

    return ax
