import numpy as np
import pandas as pd

def compare_well_spread(shared_params, hierarchical_params, parameter="r"):
    """
    Compare how much a growth parameter varies between wells in a
    hierarchical fit against the single estimate of a shared-parameter fit.

    This is an empirical comparison, reported for the reader. Nothing about
    the outcome is guaranteed.

    Parameters
    ----------
    shared_params : dict or pd.DataFrame
        output of `GrowthCurveModel.extract_parameters` for a shared model (or
        the DataFrame for `parameter`)
    hierarchical_params : dict or pd.DataFrame
        the same for a hierarchical model
    parameter : str, optional
        parameter to compare

    Returns
    -------
    pd.DataFrame
        single row with shared_mean, shared_std, well_mean_min,
        well_mean_max, well_mean_std, wells_outside_shared (number of wells
        whose posterior mean falls outside the shared 95% interval, when the
        interval columns are present) and spread_ratio (well_mean_std /
        shared_std)
    """

    if isinstance(shared_params, dict):
        shared_params = shared_params[parameter]
    if isinstance(hierarchical_params, dict):
        hierarchical_params = hierarchical_params[parameter]

    if len(shared_params) != 1:
        raise ValueError("shared_params must hold a single (shared) estimate.")
    if len(hierarchical_params) < 2:
        raise ValueError("hierarchical_params must hold one row per well.")

    shared_mean = float(shared_params["mean"].iloc[0])
    shared_std = float(shared_params["std"].iloc[0])

    # Spread of the per-well posterior means
    well_means = hierarchical_params["mean"].to_numpy(dtype=float)
    well_mean_std = float(np.std(well_means, ddof=1))

    # Count wells outside the shared credible interval
    if {"lower_95", "upper_95"}.issubset(shared_params.columns):
        lo = float(shared_params["lower_95"].iloc[0])
        hi = float(shared_params["upper_95"].iloc[0])
        outside = int(np.sum((well_means < lo) | (well_means > hi)))
    else:
        outside = np.nan

    if shared_std > 0:
        ratio = well_mean_std / shared_std
    else:
        ratio = np.inf

    return pd.DataFrame({"parameter":[parameter],
                         "shared_mean":[shared_mean],
                         "shared_std":[shared_std],
                         "well_mean_min":[float(np.min(well_means))],
                         "well_mean_max":[float(np.max(well_means))],
                         "well_mean_std":[well_mean_std],
                         "wells_outside_shared":[outside],
                         "spread_ratio":[ratio]})
