import numpy as np
import pandas as pd
from numpyro.diagnostics import (
    effective_sample_size,
    split_gelman_rubin
)

def summarize_samples(samples, prob=0.9):
    """
    Build a posterior summary table from draws grouped by chain.

    Parameters
    ----------
    samples : dict
        dictionary keying site name to an array of shape
        (num_chains, num_draws, ...), as returned by
        `mcmc.get_samples(group_by_chain=True)`
    prob : float, optional
        mass of the central credible interval

    Returns
    -------
    pd.DataFrame
        one row per scalar element of every site with columns site, index,
        mean, std, median, lower, upper, n_eff and r_hat. `index` is the
        element's position within the site ("" for scalar sites). r_hat is
        NaN when there are fewer than four draws per chain.
    """

    if not 0 < prob < 1:
        raise ValueError("prob must be between 0 and 1")

    lower_q = (1 - prob) / 2
    upper_q = 1 - lower_q

    rows = []
    for site in sorted(samples):

        values = np.asarray(samples[site], dtype=float)
        if values.ndim < 2:
            raise ValueError(
                f"site '{site}' must have shape (num_chains, num_draws, ...)"
            )

        # Flatten element dimensions so each column is one scalar quantity
        num_chains, num_draws = values.shape[:2]
        element_shape = values.shape[2:]
        flat = values.reshape(num_chains, num_draws, -1)

        pooled = flat.reshape(num_chains * num_draws, -1)
        mean = np.mean(pooled, axis=0)
        std = np.std(pooled, axis=0)
        median = np.median(pooled, axis=0)
        lower = np.quantile(pooled, lower_q, axis=0)
        upper = np.quantile(pooled, upper_q, axis=0)

        # Diagnostics need enough draws per chain
        if num_draws >= 2:
            n_eff = np.asarray(effective_sample_size(flat))
        else:
            n_eff = np.full(flat.shape[-1], np.nan)

        if num_draws >= 4:
            r_hat = np.asarray(split_gelman_rubin(flat))
        else:
            r_hat = np.full(flat.shape[-1], np.nan)

        for i in range(flat.shape[-1]):
            if len(element_shape) == 0:
                index = ""
            else:
                index = ",".join(str(j) for j in np.unravel_index(i, element_shape))

            rows.append({"site":site,
                         "index":index,
                         "mean":mean[i],
                         "std":std[i],
                         "median":median[i],
                         "lower":lower[i],
                         "upper":upper[i],
                         "n_eff":n_eff[i],
                         "r_hat":r_hat[i]})

    columns = ["site", "index", "mean", "std", "median",
               "lower", "upper", "n_eff", "r_hat"]

    return pd.DataFrame(rows, columns=columns)
