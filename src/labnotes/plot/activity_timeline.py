from labnotes.plot.helper import get_category_colors

from matplotlib import pyplot as plt
import numpy as np
import pandas as pd

def activity_timeline(aggregate_df,
                      stacked=True,
                      label=None,
                      ax=None):
    """
    Bar chart of aggregated activity per period, one color per category.

    Parameters
    ----------
    aggregate_df : pandas.DataFrame
        output of `aggregate_activities`: indexed by period, one column per
        category
    stacked : bool, optional
        stack categories. If False, draw one line per category instead.
    label : str, optional
        y-axis label
    ax : matplotlib.axes.Axes, optional
        axes to draw on. If None, a new figure is created.

    Returns
    -------
    matplotlib.axes.Axes
    """

    if ax is None:
        _, ax = plt.subplots(1, figsize=(8, 4))

    if len(aggregate_df) == 0:
        return ax

    colors = get_category_colors(aggregate_df.columns)
    x = pd.DatetimeIndex(aggregate_df.index)
    if x.tz is not None:
        x = x.tz_convert(None)

    # bar widths in days (matplotlib date units)
    if len(x) > 1:
        width = 0.8 * np.min(np.diff(x.values)) / np.timedelta64(1, "D")
    else:
        width = 0.8
    x = x.to_pydatetime()

    bottom = np.zeros(len(aggregate_df))
    for c in aggregate_df.columns:
        values = aggregate_df[c].fillna(0).to_numpy(dtype=float)
        if stacked:
            ax.bar(x, values, width=width, bottom=bottom,
                   color=colors[c], label=str(c), align="edge")
            bottom = bottom + values
        else:
            ax.plot(x, aggregate_df[c].to_numpy(dtype=float),
                    color=colors[c], lw=2, label=str(c))

    ax.legend(frameon=False)
    if label is not None:
        ax.set_ylabel(label)
    ax.figure.autofmt_xdate()

    return ax
