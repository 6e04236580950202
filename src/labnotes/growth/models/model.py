from .data_class import (
    PlateData,
    PriorsClass,
)

def jax_model(data: PlateData,
              priors: PriorsClass,
              **control):
    """
    Joint model for a plate of growth curves: a growth component predicts OD
    for every (time, well) and the observer adds Gaussian noise.

    Parameters
    ----------
    data : PlateData
        Plate measurements.
    priors : PriorsClass
        Hyperparameters for the growth component (`priors.growth`) and the
        noise model (`priors.observe`).
    control : dict
        keyword arguments selecting the model pieces. Expects:
        - growth : component module (see registry)
        - observe : observer module
    """

    growth_model = control["growth"]
    observer = control["observe"]

    od_pred = growth_model.define_model("growth", data, priors.growth)

    observer.observe("obs", data, priors.observe, od_pred)
