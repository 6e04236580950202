import corner
import numpy as np

def corner_plot(posteriors,
                sites,
                max_allowed_param=10,
                truths=None):
    """
    Corner plot of joint posterior draws for a handful of scalar sites.

    Parameters
    ----------
    posteriors : dict
        draws keyed by site name (draws on the first axis)
    sites : list of str
        scalar sites to plot (for example ["growth_r", "growth_K"])
    max_allowed_param : int, optional
        refuse to plot more sites than this
    truths : dict, optional
        known values keyed by site, drawn as reference lines

    Returns
    -------
    fig : matplotlib.Figure
        figure holding the corner plot
    """

    if len(sites) > max_allowed_param:
        err = "too many sites to make a corner plot. stopping to avoid a memory leak\n"
        raise RuntimeError(err)

    columns = []
    for s in sites:
        if s not in posteriors:
            raise ValueError(f"site '{s}' not found in posteriors")
        draws = np.asarray(posteriors[s])
        if draws.ndim != 1:
            raise ValueError(f"site '{s}' is not scalar (shape {draws.shape[1:]})")
        columns.append(draws)

    samples = np.stack(columns, axis=1)

    truth_values = None
    if truths is not None:
        truth_values = [truths.get(s, None) for s in sites]

    fig = corner.corner(samples,
                        truths=truth_values,
                        labels=list(sites))

    return fig
