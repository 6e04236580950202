import jax.numpy as jnp
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

PARAMETERS = ("r", "K", "nu", "lag", "y0")

@dataclass(frozen=True)
class ModelPriors:
    """
    JAX Pytree holding the log-normal prior locations and scales.
    """

    r_loc: float
    r_scale: float
    K_loc: float
    K_scale: float
    nu_loc: float
    nu_scale: float
    lag_loc: float
    lag_scale: float
    y0_loc: float
    y0_scale: float


def define_model(name: str,
                 data: PlateData,
                 priors: ModelPriors) -> jnp.ndarray:
    """
    Lag-corrected Richards growth with a single set of parameters (r, K, nu,
    lag, y0) shared by every well. Adds a shape parameter nu (asymmetry of
    the sigmoid) and a lag time to the logistic model.

    Priors
    ------
    each parameter p ~ LogNormal(priors.p_loc, priors.p_scale)

    Returns
    -------
    jnp.ndarray
        predicted OD, shape (num_time, num_well)
    """

    # One set of parameters shared by every well
    r = pyro.sample(f"{name}_r", dist.LogNormal(priors.r_loc, priors.r_scale))
    K = pyro.sample(f"{name}_K", dist.LogNormal(priors.K_loc, priors.K_scale))
    nu = pyro.sample(f"{name}_nu", dist.LogNormal(priors.nu_loc, priors.nu_scale))
    lag = pyro.sample(f"{name}_lag", dist.LogNormal(priors.lag_loc, priors.lag_scale))
    y0 = pyro.sample(f"{name}_y0", dist.LogNormal(priors.y0_loc, priors.y0_scale))

    curve = solve_growth_ode(richards_rhs, y0, data.times, (r, K, nu, lag))

    # Same curve in every well
    return jnp.broadcast_to(curve[:, None], (data.num_time, data.num_well))


def get_hyperparameters():
    """
    Get default values for the model hyperparameters.
    """

    parameters = {}
    parameters["r_loc"] = -0.7
    parameters["r_scale"] = 0.5
    parameters["K_loc"] = 0.0
    parameters["K_scale"] = 0.5
    parameters["nu_loc"] = 0.0      # nu ~ 1 (logistic shape)
    parameters["nu_scale"] = 0.5
    parameters["lag_loc"] = 0.7     # lag ~ 2 h
    parameters["lag_scale"] = 0.75
    parameters["y0_loc"] = -3.0
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
    guesses[f"{name}_nu"] = 1.0
    guesses[f"{name}_lag"] = g["lag"]
    guesses[f"{name}_y0"] = g["y0"]

    return guesses


def get_priors():
    return ModelPriors(**get_hyperparameters())
