from labnotes.util.validation import check_number
from labnotes.util.cli import generalized_main
from labnotes.growth.models.ode import (
    richards_rhs,
    solve_growth_ode
)

import numpy as np
import pandas as pd

import string

def _well_names(num_wells, num_columns=12):
    """
    Plate-style names: A1 ... A12, B1 ...
    """

    names = []
    for i in range(num_wells):
        row = string.ascii_uppercase[(i // num_columns) % 26]
        names.append(f"{row}{i % num_columns + 1}")
    return names


def simulate_plate(num_wells=12,
                   t_max=24.0,
                   dt=0.5,
                   r=0.6,
                   K=1.0,
                   nu=1.0,
                   lag=2.0,
                   y0=0.05,
                   well_cv=0.1,
                   noise_sd=0.01,
                   seed=0,
                   out_root=None):
    """
    Simulate a plate of lag-corrected Richards growth curves.

    Each well gets its own r, K, nu and lag drawn log-normally around the
    population values with log-scale standard deviation `well_cv`. All
    wells start at y0 and are sampled on the same time grid. Gaussian
    measurement noise with standard deviation `noise_sd` is added.

    Parameters
    ----------
    num_wells : int
        number of wells
    t_max : float
        last time point (hours)
    dt : float
        sampling interval (hours)
    r, K, nu, lag, y0 : float
        population values of the growth parameters
    well_cv : float
        between-well spread of r, K, nu and lag (log scale). 0 gives
        identical wells.
    noise_sd : float
        measurement noise
    seed : int
        random seed
    out_root : str, optional
        if given, write {out_root}_plate.csv and {out_root}_params.csv

    Returns
    -------
    plate_df : pd.DataFrame
        wide plate with a time column and one column per well
    param_df : pd.DataFrame
        true per-well parameters
    """

    num_wells = check_number(num_wells, "num_wells", cast_type=int, min_allowed=1)
    t_max = check_number(t_max, "t_max", min_allowed=0, inclusive_min=False)
    dt = check_number(dt, "dt", min_allowed=0, inclusive_min=False)
    well_cv = check_number(well_cv, "well_cv", min_allowed=0)
    noise_sd = check_number(noise_sd, "noise_sd", min_allowed=0)
    for name, value in [("r", r), ("K", K), ("nu", nu), ("lag", lag), ("y0", y0)]:
        check_number(value, name, min_allowed=0, inclusive_min=False)

    rng = np.random.default_rng(seed)
    wells = _well_names(num_wells)

    times = np.arange(0, t_max + dt / 2, dt)

    # Per-well parameters scattered around the population values
    per_well = {}
    for name, value in [("r", r), ("K", K), ("nu", nu), ("lag", lag)]:
        per_well[name] = value * np.exp(rng.normal(0, well_cv, size=num_wells))

    # Integrate the true curves and add measurement noise
    curves = solve_growth_ode(richards_rhs,
                              np.full(num_wells, y0),
                              times,
                              (per_well["r"], per_well["K"],
                               per_well["nu"], per_well["lag"]))
    curves = np.asarray(curves, dtype=float)
    od = curves + rng.normal(0, noise_sd, size=curves.shape)

    plate_df = pd.DataFrame(od, columns=wells)
    plate_df.insert(0, "time", times)

    param_df = pd.DataFrame({"well":wells, **per_well})
    param_df["y0"] = y0

    if out_root is not None:
        plate_df.to_csv(f"{out_root}_plate.csv", index=False)
        param_df.to_csv(f"{out_root}_params.csv", index=False)
        print(f"Wrote {out_root}_plate.csv and {out_root}_params.csv", flush=True)

    return plate_df, param_df


def main():
    """CLI entry point for simulating a plate."""
    generalized_main(simulate_plate,
                     manual_arg_defaults={"out_root":"simulated"})

if __name__ == "__main__":
    main()
