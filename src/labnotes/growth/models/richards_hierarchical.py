import jax.numpy as jnp
import numpy as np
import numpyro as pyro
import numpyro.distributions as dist
from flax.struct import dataclass

from labnotes.growth.models.data_class import PlateData
from labnotes.growth.models.ode import (
    richards_rhs,
    solve_growth_ode
)
from labnotes.growth.models.logistic import _masked_od
from labnotes.growth.models.guesses import guess_growth_params

# Parameters that get one value per well
PER_WELL = ("r", "K", "nu", "lag")

PARAMETERS = PER_WELL + ("y0",)

@dataclass(frozen=True)
class ModelPriors:
    """
    JAX Pytree holding the population-level hyperpriors. Each per-well
    parameter p has log(p) ~ Normal(p_hyper_loc, p_hyper_scale) with
    p_hyper_loc ~ Normal(p_hyper_loc_loc, p_hyper_loc_scale) and
    p_hyper_scale ~ HalfNormal(p_hyper_scale).
    """

    r_hyper_loc_loc: float
    r_hyper_loc_scale: float
    r_hyper_scale: float

    K_hyper_loc_loc: float
    K_hyper_loc_scale: float
    K_hyper_scale: float

    nu_hyper_loc_loc: float
    nu_hyper_loc_scale: float
    nu_hyper_scale: float

    lag_hyper_loc_loc: float
    lag_hyper_loc_scale: float
    lag_hyper_scale: float

    y0_loc: float
    y0_scale: float


def _sample_per_well(name, param, data, priors):
    """
    Non-centered draw of one log-normal parameter per well.
    """

    hyper_loc = pyro.sample(
        f"{name}_{param}_hyper_loc",
        dist.Normal(getattr(priors, f"{param}_hyper_loc_loc"),
                    getattr(priors, f"{param}_hyper_loc_scale"))
    )
    hyper_scale = pyro.sample(
        f"{name}_{param}_hyper_scale",
        dist.HalfNormal(getattr(priors, f"{param}_hyper_scale"))
    )

    with pyro.plate(f"{name}_{param}_well_parameters", data.num_well):
        offset = pyro.sample(f"{name}_{param}_offset", dist.Normal(0, 1))

    per_well = jnp.exp(hyper_loc + offset * hyper_scale)
    pyro.deterministic(f"{name}_{param}", per_well)

    return per_well


def define_model(name: str,
                 data: PlateData,
                 priors: ModelPriors) -> jnp.ndarray:
    """
    Lag-corrected Richards growth with its own r, K, nu and lag in every well.
    Per-well values are drawn from population-level log-normal distributions
    whose location and spread are themselves sampled, so wells share
    information while being allowed to differ. y0 is shared by all wells.

    Priors
    ------
    priors.{r,K,nu,lag}_hyper_loc_loc
    priors.{r,K,nu,lag}_hyper_loc_scale
    priors.{r,K,nu,lag}_hyper_scale
    priors.y0_loc
    priors.y0_scale

    Data
    ----
    data.times
    data.num_time
    data.num_well

    Returns
    -------
    jnp.ndarray
        predicted OD, shape (num_time, num_well)
    """

    r = _sample_per_well(name, "r", data, priors)
    K = _sample_per_well(name, "K", data, priors)
    nu = _sample_per_well(name, "nu", data, priors)
    lag = _sample_per_well(name, "lag", data, priors)

    y0 = pyro.sample(f"{name}_y0", dist.LogNormal(priors.y0_loc, priors.y0_scale))
    y0 = jnp.full(data.num_well, y0)

    # One vector-valued solve integrates every well at once
    return solve_growth_ode(richards_rhs, y0, data.times, (r, K, nu, lag))


def get_hyperparameters():
    """
    Get default values for the model hyperparameters.
    """

    parameters = {}
    parameters["r_hyper_loc_loc"] = -0.7
    parameters["r_hyper_loc_scale"] = 0.5
    parameters["r_hyper_scale"] = 0.25

    parameters["K_hyper_loc_loc"] = 0.0
    parameters["K_hyper_loc_scale"] = 0.5
    parameters["K_hyper_scale"] = 0.25

    parameters["nu_hyper_loc_loc"] = 0.0
    parameters["nu_hyper_loc_scale"] = 0.5
    parameters["nu_hyper_scale"] = 0.25

    parameters["lag_hyper_loc_loc"] = 0.7
    parameters["lag_hyper_loc_scale"] = 0.75
    parameters["lag_hyper_scale"] = 0.25

    parameters["y0_loc"] = -3.0
    parameters["y0_scale"] = 1.0

    return parameters


def get_guesses(name, data):
    """
    Start every well at the pooled least-squares estimate with a small
    between-well spread.
    """

    g = guess_growth_params(data.times, _masked_od(data))
    g["nu"] = 1.0

    guesses = {}
    for param in PER_WELL:
        guesses[f"{name}_{param}_hyper_loc"] = float(np.log(g[param]))
        guesses[f"{name}_{param}_hyper_scale"] = 0.1
        guesses[f"{name}_{param}_offset"] = jnp.zeros(data.num_well)
    guesses[f"{name}_y0"] = g["y0"]

    return guesses


def get_priors():
    return ModelPriors(**get_hyperparameters())
