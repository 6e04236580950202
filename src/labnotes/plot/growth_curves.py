from labnotes.plot.default_styles import (
    DEFAULT_OBS_SCATTER_KWARGS,
    DEFAULT_FIT_LINE_KWARGS,
    DEFAULT_CREDIBLE_BAND_KWARGS,
    DEFAULT_PREDICTIVE_BAND_KWARGS
)
from labnotes.plot.helper import merge_kwargs
from labnotes.util.dataframe import check_columns

from matplotlib import pyplot as plt
import numpy as np

def growth_curves(pred_df,
                  curve_df=None,
                  wells=None,
                  lower="lower_95",
                  upper="upper_95",
                  num_columns=4,
                  panel_size=3,
                  obs_kwargs=None,
                  line_kwargs=None,
                  band_kwargs=None,
                  predictive_kwargs=None):
    """
    Plot observed OD with the posterior mean curve, its credible band and the
    posterior predictive interval, one panel per well.

    Parameters
    ----------
    pred_df : pandas.DataFrame
        output of `GrowthCurveModel.extract_growth_predictions` (columns
        time, well, od, pred_mean, pred_{lower}, pred_{upper} and optionally
        predictive_{lower}, predictive_{upper})
    curve_df : pandas.DataFrame, optional
        smooth curves from `RunMCMC.predict_curves`. If given, the mean line
        and credible band come from here instead of pred_df.
    wells : list, optional
        wells to plot. Defaults to every well in pred_df.
    lower, upper : str, optional
        quantile names for the bands
    num_columns : int, optional
        panels per row
    panel_size : float, optional
        width/height of each panel in inches
    obs_kwargs, line_kwargs, band_kwargs, predictive_kwargs : dict, optional
        overrides for the matplotlib styles

    Returns
    -------
    fig : matplotlib.figure.Figure
    axes : np.ndarray
        flat array of axes, one per well
    """

    check_columns(pred_df, ["time", "well", "od", "pred_mean"], df_name="pred_df")

    obs_kwargs = merge_kwargs(DEFAULT_OBS_SCATTER_KWARGS, obs_kwargs)
    line_kwargs = merge_kwargs(DEFAULT_FIT_LINE_KWARGS, line_kwargs)
    band_kwargs = merge_kwargs(DEFAULT_CREDIBLE_BAND_KWARGS, band_kwargs)
    predictive_kwargs = merge_kwargs(DEFAULT_PREDICTIVE_BAND_KWARGS, predictive_kwargs)

    if wells is None:
        wells = list(dict.fromkeys(pred_df["well"]))
    if len(wells) == 0:
        raise ValueError("No wells to plot.")

    num_columns = min(num_columns, len(wells))
    num_rows = int(np.ceil(len(wells) / num_columns))
    fig, axes = plt.subplots(num_rows, num_columns,
                             figsize=(panel_size * num_columns, panel_size * num_rows),
                             sharex=True, sharey=True,
                             squeeze=False)
    axes = axes.ravel()

    for ax, well in zip(axes, wells):

        obs = pred_df[pred_df["well"] == well].sort_values("time")
        line = obs if curve_df is None else curve_df[curve_df["well"] == well].sort_values("time")

        if f"predictive_{lower}" in obs.columns and f"predictive_{upper}" in obs.columns:
            ax.fill_between(obs["time"],
                            obs[f"predictive_{lower}"],
                            obs[f"predictive_{upper}"],
                            **predictive_kwargs)

        if f"pred_{lower}" in line.columns and f"pred_{upper}" in line.columns:
            ax.fill_between(line["time"],
                            line[f"pred_{lower}"],
                            line[f"pred_{upper}"],
                            **band_kwargs)

        ax.plot(line["time"], line["pred_mean"], **line_kwargs)
        ax.scatter(obs["time"], obs["od"], **obs_kwargs)
        ax.set_title(str(well))

    # Hide unused panels
    for ax in axes[len(wells):]:
        ax.set_visible(False)

    for ax in axes[::num_columns]:
        ax.set_ylabel("OD")
    for ax in axes[(num_rows - 1) * num_columns:]:
        ax.set_xlabel("time")

    fig.tight_layout()

    return fig, axes[:len(wells)]
