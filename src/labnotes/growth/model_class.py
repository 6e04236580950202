from labnotes.__version__ import __version__

from labnotes.util.io import read_yaml
from labnotes.growth.read_plate import read_plate
from labnotes.growth.tidy_plate import tidy_plate

from labnotes.growth.models.model import jax_model
from labnotes.growth.models.registry import model_registry
from labnotes.growth.models.data_class import (
    PlateData,
    PriorsClass,
)

import jax
from jax import numpy as jnp
import numpy as np
import pandas as pd
import yaml

from functools import partial
import os
import warnings

# Declare float datatype
FLOAT_DTYPE = jnp.float64 if jax.config.read("jax_enable_x64") else jnp.float32

DEFAULT_Q_TO_GET = {"lower_95":0.025,
                    "lower_quartile":0.25,
                    "median":0.5,
                    "upper_quartile":0.75,
                    "upper_95":0.975}


def _load_posteriors(posteriors):
    """
    Accept a dict of draws, an open .npz file, or a path to a .npz file.
    """

    if isinstance(posteriors, (dict, np.lib.npyio.NpzFile)):
        return posteriors
    return np.load(posteriors)


def _summarize_draws(draws, q_to_get):
    """
    Mean, std and named quantiles over the first (draw) axis. Returns a
    dict of arrays with the trailing shape of `draws`.
    """

    draws = np.asarray(draws)
    out = {"mean":np.mean(draws, axis=0),
           "std":np.std(draws, axis=0)}
    for q_name, q_val in q_to_get.items():
        out[q_name] = np.quantile(draws, q_val, axis=0)

    return out


class GrowthCurveModel:
    """
    Wrangle a plate of growth curves into the objects needed to sample a
    growth model with numpyro.

    Parameters
    ----------
    plate_df : pd.DataFrame or str
        Wide plate table (or path to one): a time column and one OD column per
        well.
    model : str, optional
        Growth component: "logistic", "richards" or "richards_hierarchical".
    priors : dict or str, optional
        Hyperparameter overrides, either a dict or a path to a YAML file.
        Keys must be hyperparameters of the chosen growth component or of
        the observation noise model.
    time_column : str, optional
        Name of the time column in the plate table.

    Attributes
    ----------
    data : PlateData
        JAX Pytree holding the OD tensor, mask and time grid.
    priors : PriorsClass
        JAX Pytree holding all hyperparameters.
    init_params : dict
        Starting values for the sampler, keyed by sample-site name.
    jax_model : function
        The numpyro model, called as jax_model(data=..., priors=...).
    wells : list
        Well names in tensor order.
    times : np.ndarray
        Shared time grid.
    settings : dict
        The model choice and hyperparameter overrides used.
    """

    def __init__(self,
                 plate_df,
                 model="logistic",
                 priors=None,
                 time_column="time"):

        self._plate_source = plate_df
        self._model = model
        self._time_column = time_column

        # Priors can come from a yaml file or a dictionary
        if isinstance(priors, str):
            self._prior_overrides = read_yaml(priors)
        elif priors is None:
            self._prior_overrides = {}
        else:
            self._prior_overrides = dict(priors)

        self._initialize_data()
        self._initialize_classes()

    def _initialize_data(self):
        """
        Read the plate and build the PlateData Pytree.
        """

        plate = read_plate(self._plate_source, time_column=self._time_column)
        if len(plate.index) < 2:
            raise ValueError("A growth curve needs at least two time points.")

        # Fix the well order used for the (time, well) tensors
        tidy_df = tidy_plate(plate)
        wells = (tidy_df
                 .drop_duplicates("well")
                 .sort_values("well_idx")["well"]
                 .tolist())

        # Missing observations are zeroed and masked out of the likelihood
        od = plate[wells].to_numpy(dtype=float)
        good_mask = np.isfinite(od)

        empty = [w for w, m in zip(wells, np.any(good_mask, axis=0)) if not m]
        if len(empty) > 0:
            warnings.warn(f"Wells with no observations (they only follow the prior): {empty}")

        self._plate = plate
        self._tidy_df = tidy_df
        self._wells = wells
        self._times = plate.index.to_numpy(dtype=float)

        self._data = PlateData(times=jnp.asarray(self._times, dtype=FLOAT_DTYPE),
                               od=jnp.asarray(np.where(good_mask, od, 0.0), dtype=FLOAT_DTYPE),
                               good_mask=jnp.asarray(good_mask),
                               num_time=len(self._times),
                               num_well=len(wells))

    def _initialize_classes(self):
        """
        Look up model components, build priors, guesses and the model
        function.
        """

        if self._model not in model_registry["growth"]:
            raise ValueError(
                f"model '{self._model}' not recognized. Should be one of: "
                f"{list(model_registry['growth'].keys())}"
            )

        growth_component = model_registry["growth"][self._model]
        observer = model_registry["observe"]

        # Merge user overrides into the default hyperparameters
        growth_hyper = growth_component.get_hyperparameters()
        observe_hyper = observer.get_hyperparameters()

        unknown = []
        for k, v in self._prior_overrides.items():
            if k in growth_hyper:
                growth_hyper[k] = float(v)
            elif k in observe_hyper:
                observe_hyper[k] = float(v)
            else:
                unknown.append(k)
        if len(unknown) > 0:
            allowed = list(growth_hyper.keys()) + list(observe_hyper.keys())
            raise ValueError(
                f"Unrecognized prior(s) {unknown} for model '{self._model}'. "
                f"Allowed priors are: {allowed}"
            )

        self._hyperparameters = {**growth_hyper, **observe_hyper}
        self._priors = PriorsClass(growth=growth_component.ModelPriors(**growth_hyper),
                                   observe=observer.ModelPriors(**observe_hyper))

        # Starting values for the sampler
        init_params = {}
        init_params.update(growth_component.get_guesses("growth", self._data))
        init_params.update(observer.get_guesses("obs", self._data))
        self._init_params = init_params

        self._growth_component = growth_component
        self._jax_model = partial(jax_model,
                                  growth=growth_component,
                                  observe=observer)

    def extract_parameters(self,
                           posteriors,
                           q_to_get=None):
        """
        Summarize posterior draws of the growth parameters.

        Parameters
        ----------
        posteriors : dict or str
            dictionary keying sample sites to arrays of draws (draws on the
            first axis) or a path to a .npz file holding them
        q_to_get : dict, optional
            dictionary mapping output column names to quantiles. Defaults to
            the 95% interval, quartiles and median.

        Returns
        -------
        dict
            dictionary keying parameter name (r, K, ...) to a DataFrame with
            columns well, mean, std and the quantile columns. Shared
            parameters have a single row with well "all"; per-well
            parameters have one row per well. The noise scale is under
            "sigma"; population-level parameters of hierarchical models are
            under "hyper" with an extra `parameter` column.
        """

        param_posteriors = _load_posteriors(posteriors)
        if q_to_get is None:
            q_to_get = DEFAULT_Q_TO_GET
        if not isinstance(q_to_get, dict):
            raise ValueError(
                "q_to_get should be a dictionary keying column names to quantiles"
            )

        def _to_df(draws):
            summary = _summarize_draws(draws, q_to_get)
            if np.ndim(summary["mean"]) == 0:
                df = pd.DataFrame({k: [float(v)] for k, v in summary.items()})
                df.insert(0, "well", "all")
            else:
                df = pd.DataFrame(summary)
                df.insert(0, "well", self._wells)
            return df

        # Per-curve growth parameters, then noise
        out_dfs = {}
        for param in self._growth_component.PARAMETERS:
            site = f"growth_{param}"
            if site not in param_posteriors:
                raise ValueError(f"'{site}' not found in posterior samples.")
            out_dfs[param] = _to_df(param_posteriors[site])

        out_dfs["sigma"] = _to_df(param_posteriors["obs_sigma"])

        # Population-level parameters (hierarchical models only)
        hyper_dfs = []
        for site in param_posteriors:
            if site.startswith("growth_") and ("_hyper_loc" in site or "_hyper_scale" in site):
                df = _to_df(param_posteriors[site])
                df.insert(0, "parameter", site[len("growth_"):])
                hyper_dfs.append(df)
        if len(hyper_dfs) > 0:
            out_dfs["hyper"] = (pd.concat(hyper_dfs, ignore_index=True)
                                .sort_values("parameter")
                                .reset_index(drop=True))

        return out_dfs

    def extract_growth_predictions(self,
                                   posteriors,
                                   q_to_get=None,
                                   seed=0):
        """
        Posterior curves and posterior predictive intervals for every
        (time, well) on the plate.

        The mean curve comes from the `obs_pred` deterministic site. New
        observations are simulated by adding Normal(0, sigma) noise to each
        draw of the curve, using the matching draw of sigma.

        Parameters
        ----------
        posteriors : dict or str
            draws keyed by site name, or path to a .npz file
        q_to_get : dict, optional
            dictionary mapping column suffixes to quantiles
        seed : int, optional
            seed for simulating predictive noise

        Returns
        -------
        pd.DataFrame
            the tidy plate (time, well, od, time_idx, well_idx) plus
            `pred_mean`, `pred_{q}` (credible band of the mean curve) and
            `predictive_{q}` (posterior predictive interval) columns
        """

        param_posteriors = _load_posteriors(posteriors)
        if "obs_pred" not in param_posteriors:
            raise ValueError(
                "'obs_pred' not found in posterior samples. Make sure the "
                "deterministic sites were kept when sampling."
            )

        if q_to_get is None:
            q_to_get = DEFAULT_Q_TO_GET
        if not isinstance(q_to_get, dict):
            raise ValueError(
                "q_to_get should be a dictionary keying column names to quantiles"
            )

        pred = np.asarray(param_posteriors["obs_pred"])
        sigma = np.asarray(param_posteriors["obs_sigma"]).reshape(-1, 1, 1)

        # Simulate new observations from each draw
        rng = np.random.default_rng(seed)
        predictive = pred + sigma * rng.standard_normal(pred.shape)

        # Pull out the draws for each row of the tidy plate
        out_df = self._tidy_df.copy()
        time_idx = out_df["time_idx"].values
        well_idx = out_df["well_idx"].values

        row_pred = pred[:, time_idx, well_idx]
        row_predictive = predictive[:, time_idx, well_idx]

        out_df["pred_mean"] = np.mean(row_pred, axis=0)
        for q_name, q_val in q_to_get.items():
            out_df[f"pred_{q_name}"] = np.quantile(row_pred, q_val, axis=0)
            out_df[f"predictive_{q_name}"] = np.quantile(row_predictive, q_val, axis=0)

        return out_df

    @property
    def data(self):
        """The PlateData Pytree."""
        return self._data

    @property
    def priors(self):
        """The PriorsClass Pytree holding all hyperparameters."""
        return self._priors

    @property
    def hyperparameters(self):
        """Flat dictionary of all hyperparameter values in use."""
        return dict(self._hyperparameters)

    @property
    def init_params(self):
        """Starting values for the sampler."""
        return self._init_params

    @property
    def jax_model(self):
        """The top-level numpyro model."""
        return self._jax_model

    @property
    def wells(self):
        return list(self._wells)

    @property
    def times(self):
        return self._times.copy()

    @property
    def plate_df(self):
        """Tidy (long) copy of the plate."""
        return self._tidy_df.copy()

    @property
    def settings(self):
        """The model choice and prior overrides."""

        return {
            "model":self._model,
            "time_column":self._time_column,
            "priors":dict(self._prior_overrides),
        }

    @staticmethod
    def load_config(config_file):
        """
        Load a run configuration written by `write_config`.

        Parameters
        ----------
        config_file : str
            Path to the YAML configuration file.

        Returns
        -------
        plate_file : str
            Path to the plate table.
        settings : dict
            Dictionary of model settings.
        """

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        with open(config_file, "r") as f:
            config = yaml.safe_load(f)

        required_fields = ["plate_file", "settings", "labnotes_version"]
        for field in required_fields:
            if field not in config:
                raise ValueError(f"Missing required field: {field}")

        if config["labnotes_version"] != __version__:
            warnings.warn(f"Configuration file version {config['labnotes_version']} does not match current labnotes version {__version__}")

        return config["plate_file"], config["settings"]

    def write_config(self,
                     plate_file,
                     out_root):
        """
        Write the model configuration to {out_root}_config.yaml.

        Parameters
        ----------
        plate_file : str
            Path to the plate table the model was built from.
        out_root : str
            Root filename for the configuration file.

        Returns
        -------
        str
            path to the written file
        """

        config = {
            "labnotes_version": __version__,
            "plate_file": plate_file,
            "settings": self.settings
        }

        config_file = f"{out_root}_config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False)

        return config_file
