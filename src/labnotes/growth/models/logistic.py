import jax.numpy as jnp
import numpyro as pyro
import numpyro.distributions as dist
from flax.struct import dataclass

from labnotes.growth.models.data_class import PlateData
from labnotes.growth.models.ode import (
    logistic_rhs,
    solve_growth_ode
)
from labnotes.growth.models.guesses import guess_growth_params

PARAMETERS = ("r", "K", "y0")

@dataclass(frozen=True)
class ModelPriors:
    """
    JAX Pytree holding the log-normal prior locations and scales.
    """

    r_loc: float
    r_scale: float
    K_loc: float
    K_scale: float
    y0_loc: float
    y0_scale: float


def define_model(name: str,
                 data: PlateData,
                 priors: ModelPriors) -> jnp.ndarray:
    """
    Logistic growth with one growth rate r, carrying capacity K and starting
    density y0 shared by every well.

    Priors
    ------
    r ~ LogNormal(priors.r_loc, priors.r_scale)
    K ~ LogNormal(priors.K_loc, priors.K_scale)
    y0 ~ LogNormal(priors.y0_loc, priors.y0_scale)

    Returns
    -------
    jnp.ndarray
        predicted OD, shape (num_time, num_well)
    """

    # One set of parameters shared by every well
    r = pyro.sample(f"{name}_r", dist.LogNormal(priors.r_loc, priors.r_scale))
    K = pyro.sample(f"{name}_K", dist.LogNormal(priors.K_loc, priors.K_scale))
    y0 = pyro.sample(f"{name}_y0", dist.LogNormal(priors.y0_loc, priors.y0_scale))

    curve = solve_growth_ode(logistic_rhs, y0, data.times, (r, K))

    # Same curve in every well
    return jnp.broadcast_to(curve[:, None], (data.num_time, data.num_well))


def get_hyperparameters():
    """
    Get default values for the model hyperparameters. Times are expected in
    hours and densities in OD units.
    """

    parameters = {}
    parameters["r_loc"] = -0.7      # r ~ 0.5 / h
    parameters["r_scale"] = 0.5
    parameters["K_loc"] = 0.0       # K ~ 1 OD
    parameters["K_scale"] = 0.5
    parameters["y0_loc"] = -3.0     # y0 ~ 0.05 OD
    parameters["y0_scale"] = 1.0

    return parameters


def get_guesses(name, data):
    """
    Starting values from a quick least-squares fit to the mean curve.
    """

    g = guess_growth_params(data.times, _masked_od(data))

    guesses = {}
    guesses[f"{name}_r"] = g["r"]
    guesses[f"{name}_K"] = g["K"]
    guesses[f"{name}_y0"] = g["y0"]

    return guesses


def get_priors():
    return ModelPriors(**get_hyperparameters())


def _masked_od(data):
    return jnp.where(data.good_mask, data.od, jnp.nan)
