import jax.numpy as jnp
import numpyro as pyro
import numpyro.distributions as dist
from flax.struct import dataclass

from labnotes.growth.models.data_class import PlateData

@dataclass(frozen=True)
class ModelPriors:
    """
    JAX Pytree holding the observation-noise hyperparameter.
    """

    sigma_scale: float


def observe(name: str,
            data: PlateData,
            priors: ModelPriors,
            od_pred: jnp.ndarray):
    """
    Gaussian observation noise around the predicted growth curves.

    od ~ Normal(od_pred, sigma), sigma ~ HalfNormal(priors.sigma_scale). The
    likelihood runs over a (time, well) plate and masks missing observations
    (data.good_mask). The predicted curves are registered as the
    deterministic site `{name}_pred`.

    Parameters
    ----------
    name : str
        The prefix for all Numpyro sample/plate sites.
    data : PlateData
        uses data.od, data.good_mask, data.num_time and data.num_well
    priors : ModelPriors
        noise hyperparameters
    od_pred : jnp.ndarray
        predicted OD with shape (num_time, num_well)
    """

    sigma = pyro.sample(f"{name}_sigma", dist.HalfNormal(priors.sigma_scale))

    # Keep the curve so it can be read back out of the draws
    pyro.deterministic(f"{name}_pred", od_pred)

    # Missing observations drop out of the likelihood
    with pyro.plate(f"{name}_time", size=data.num_time, dim=-2):
        with pyro.plate(f"{name}_well", size=data.num_well, dim=-1):
            with pyro.handlers.mask(mask=data.good_mask):
                pyro.sample(f"{name}_od",
                            dist.Normal(loc=od_pred, scale=sigma),
                            obs=data.od)


def get_hyperparameters():

    parameters = {}
    parameters["sigma_scale"] = 0.05

    return parameters


def get_guesses(name, data):

    guesses = {}
    guesses[f"{name}_sigma"] = 0.02

    return guesses


def get_priors():
    return ModelPriors(**get_hyperparameters())
