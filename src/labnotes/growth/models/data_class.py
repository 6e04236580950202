import jax.numpy as jnp
from flax.struct import (
    dataclass,
    field
)
from typing import Any


@dataclass(frozen=True)
class PlateData:
    """
    Plate measurements as a JAX Pytree. Every well shares the time grid.
    """

    # 1D time grid
    times: jnp.ndarray

    # (num_time, num_well) tensors. Missing OD values are stored as 0 and
    # excluded with good_mask.
    od: jnp.ndarray
    good_mask: jnp.ndarray

    num_time: int = field(pytree_node=False)
    num_well: int = field(pytree_node=False)


@dataclass(frozen=True)
class PriorsClass:
    """
    Hyperparameters for the growth-curve component and the noise model.
    """

    growth: Any
    observe: Any
