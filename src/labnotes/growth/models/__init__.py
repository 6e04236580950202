"""
Declarative Bayesian models of bacterial growth on a plate.

Three growth components predict optical density (OD) over time for every
well on a plate:

+ logistic : dy/dt = r*y*(1 - y/K) with one r, K and y0 shared by all wells.
+ richards : dy/dt = a(t)*r*y*(1 - (y/K)^nu), where a(t) is a Baranyi lag
  adjustment parameterized by a lag time. One set of (r, K, nu, lag, y0)
  shared by all wells.
+ richards_hierarchical : the same curve with r, K, nu and lag drawn per well
  from population-level log-normal distributions whose locations and scales
  are themselves sampled.

Observed OD is Normal around the predicted curve with a single noise scale.
The ODEs are integrated with diffrax and posteriors are sampled with the
numpyro NUTS sampler.
"""

from . import ode
from . import data_class
from . import guesses

from .ode import (
    logistic_rhs,
    richards_rhs,
    lag_adjustment,
    logistic_closed_form,
    solve_growth_ode
)

from .guesses import (
    guess_growth_params
)

from .registry import (
    model_registry
)

from .model import (
    jax_model
)
