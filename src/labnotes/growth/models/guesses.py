import numpy as np
from scipy.optimize import least_squares

import warnings

from labnotes.growth.models.ode import logistic_closed_form

def _mean_curve(times, od):
    """
    Collapse (num_time,) or (num_time, num_well) OD to a single curve,
    dropping time points with no finite observation.
    """

    times = np.asarray(times, dtype=float)
    od = np.asarray(od, dtype=float)
    if od.ndim == 2:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", category=RuntimeWarning)
            od = np.nanmean(od, axis=1)

    good = np.isfinite(od) & np.isfinite(times)

    return times[good], od[good]


def guess_growth_params(times, od, min_od=1e-4):
    """
    Estimate logistic growth parameters (r, K, y0) and a lag time from a
    growth curve. Used to start the sampler near the bulk of the posterior.

    r, K and y0 come from a least-squares fit of the closed-form logistic
    (on log parameters, so they stay positive). The lag is the classic
    tangent-intercept estimate: the time at which the tangent to ln(OD) at
    the point of fastest growth crosses ln(y0).

    Parameters
    ----------
    times : array_like
        1D time grid
    od : array_like
        OD measurements, shape (num_time,) or (num_time, num_well). NaN
        values are ignored.
    min_od : float, optional
        floor applied to OD before taking logs

    Returns
    -------
    dict
        keys "r", "K", "y0" and "lag" (all positive floats)

    Raises
    ------
    ValueError
        if fewer than three time points have finite observations
    """

    t, y = _mean_curve(times, od)
    if len(t) < 3:
        raise ValueError("At least three finite observations are needed to guess parameters.")

    y = np.clip(y, min_od, None)
    ln_y = np.log(y)

    # Starting point from simple summaries of the curve
    y0_start = y[0]
    K_start = max(np.max(y) * 1.05, y0_start * 1.5)
    slopes = np.diff(ln_y) / np.diff(t)
    r_start = max(np.max(slopes), 0.05)

    def _residuals(log_params):
        r, K, y0 = np.exp(log_params)
        pred = np.asarray(logistic_closed_form(t, r, K, y0))
        return pred - y

    x0 = np.log([r_start, K_start, y0_start])
    fit = least_squares(_residuals, x0=x0, method="trf")

    if fit.success and np.all(np.isfinite(fit.x)):
        r, K, y0 = np.exp(fit.x)
    else:
        warnings.warn("Least-squares logistic fit failed; using crude starting values.")
        r, K, y0 = r_start, K_start, y0_start

    # Tangent-intercept lag from the steepest ln(OD) segment
    i = int(np.argmax(slopes))
    t_mid = 0.5 * (t[i] + t[i + 1])
    ln_mid = 0.5 * (ln_y[i] + ln_y[i + 1])
    lag = t_mid - (ln_mid - np.log(y0)) / max(slopes[i], 1e-6) - t[0]
    lag = float(np.clip(lag, 0.05, t[-1] - t[0]))

    return {"r": float(r),
            "K": float(K),
            "y0": float(y0),
            "lag": lag}
