"""
Bayesian ODE models of bacterial growth curves.

Read a plate of OD measurements (one column per well, one shared time grid),
fit a logistic, lag-corrected Richards, or hierarchical per-well Richards
model with the numpyro NUTS sampler, and summarize the posterior.
"""

from . import models

from .read_plate import (
    read_plate
)

from .tidy_plate import (
    tidy_plate
)

from .simulate_plate import (
    simulate_plate
)

from .models.guesses import (
    guess_growth_params
)

from .summarize_samples import (
    summarize_samples
)

from .model_class import (
    GrowthCurveModel
)

from .run_mcmc import (
    RunMCMC
)

from .compare_well_spread import (
    compare_well_spread
)

from .fit_growth_curves import (
    fit_growth_curves
)

from .summarize_growth_posteriors import (
    summarize_growth_posteriors
)
