import jax
from jax import random
from jax import numpy as jnp

from numpyro.handlers import seed, trace
from numpyro.infer import (
    MCMC,
    NUTS,
    SVI,
    Trace_ELBO,
    Predictive,
    init_to_value,
    init_to_median,
    init_to_sample
)
from numpyro.infer.autoguide import AutoDelta
from numpyro.optim import ClippedAdam

import numpy as np
import pandas as pd
import dill

import os
import warnings

from labnotes.util.validation import check_number
from labnotes.growth.models.data_class import PlateData
from labnotes.growth.summarize_samples import summarize_samples

INIT_STRATEGIES = ["guess", "map", "median", "prior"]


class RunMCMC:
    """
    Configure and run the NUTS sampler on a growth-curve model.

    The sampler settings (chains, warmup, draws, target acceptance, tree
    depth) are fixed by the caller. Diagnostics are reported as warnings;
    nothing is retried or tuned automatically.
    """

    def __init__(self, model, seed):
        """
        Parameters
        ----------
        model : object
            A model object that exposes `data`, `priors`, `jax_model` and
            `init_params` (see GrowthCurveModel).
        seed : int
            Random seed for JAX PRNG key generation.
        """

        required_attr = ["data",
                         "priors",
                         "jax_model",
                         "init_params"]
        for attr in required_attr:
            if not hasattr(model, attr):
                raise ValueError(f"`model` must have attribute {attr}")

        self.model = model
        self._seed = check_number(seed, "seed", cast_type=int, min_allowed=0)
        self._main_key = random.PRNGKey(self._seed)

    def setup_mcmc(self,
                   num_warmup=1000,
                   num_samples=1000,
                   num_chains=4,
                   target_accept_prob=0.8,
                   max_tree_depth=10,
                   dense_mass=False,
                   chain_method="sequential",
                   init_strategy="guess",
                   init_param_jitter=0.0,
                   progress_bar=True):
        """
        Build a NUTS kernel and MCMC driver.

        Parameters
        ----------
        num_warmup : int, optional
            adaptation (warmup) iterations per chain
        num_samples : int, optional
            post-warmup draws per chain
        num_chains : int, optional
            number of independent chains
        target_accept_prob : float, optional
            step-size adaptation target. Raising it (e.g. 0.95) takes smaller
            steps and usually removes divergences at the cost of speed.
        max_tree_depth : int, optional
            maximum NUTS tree depth
        dense_mass : bool, optional
            adapt a dense rather than diagonal mass matrix
        chain_method : str, optional
            "sequential", "parallel" or "vectorized"
        init_strategy : str, optional
            - 'guess' (default): start at the model's least-squares guesses
            - 'map': start at a MAP estimate from a short SVI run
            - 'median': start at the prior median
            - 'prior': start at a prior draw
        init_param_jitter : float, optional
            multiplicative log-normal jitter applied to 'guess' or 'map'
            starting values. 0 turns it off.
        progress_bar : bool, optional
            show the numpyro progress bar

        Returns
        -------
        numpyro.infer.MCMC
        """

        # Validate sampler settings
        num_warmup = check_number(num_warmup, "num_warmup", cast_type=int, min_allowed=1)
        num_samples = check_number(num_samples, "num_samples", cast_type=int, min_allowed=1)
        num_chains = check_number(num_chains, "num_chains", cast_type=int, min_allowed=1)
        target_accept_prob = check_number(target_accept_prob, "target_accept_prob",
                                          min_allowed=0, max_allowed=1,
                                          inclusive_min=False, inclusive_max=False)
        max_tree_depth = check_number(max_tree_depth, "max_tree_depth",
                                      cast_type=int, min_allowed=1)
        init_param_jitter = check_number(init_param_jitter, "init_param_jitter",
                                         min_allowed=0)

        # Decide where the chains start
        if init_strategy == "guess":
            init_values = dict(self.model.init_params)
        elif init_strategy == "map":
            init_values, _ = self.find_map()
        elif init_strategy in ["median", "prior"]:
            init_values = None
        else:
            raise ValueError(
                f"init_strategy '{init_strategy}' not recognized. Should be "
                f"one of {INIT_STRATEGIES}"
            )

        if init_values is not None:
            init_values = self._jitter_init_parameters(init_values, init_param_jitter)
            init_fn = init_to_value(values=init_values)
        elif init_strategy == "median":
            init_fn = init_to_median()
        else:
            init_fn = init_to_sample()

        # Build the sampler
        kernel = NUTS(self.model.jax_model,
                      target_accept_prob=target_accept_prob,
                      max_tree_depth=max_tree_depth,
                      dense_mass=dense_mass,
                      init_strategy=init_fn)

        mcmc = MCMC(kernel,
                    num_warmup=num_warmup,
                    num_samples=num_samples,
                    num_chains=num_chains,
                    chain_method=chain_method,
                    progress_bar=progress_bar)

        return mcmc

    def find_map(self,
                 num_steps=2000,
                 adam_step_size=1e-2,
                 adam_clip_norm=1.0):
        """
        Find a maximum a posteriori estimate with SVI and an AutoDelta guide,
        starting from the model's guesses.

        Parameters
        ----------
        num_steps : int, optional
            number of optimization steps
        adam_step_size : float, optional
            step size for ClippedAdam
        adam_clip_norm : float, optional
            gradient clipping norm for ClippedAdam

        Returns
        -------
        params : dict
            MAP values keyed by sample-site name (constrained space)
        losses : np.ndarray
            loss trace

        Raises
        ------
        RuntimeError
            If the optimization produces NaN parameters.
        """

        # AutoDelta puts a point mass on every latent site, so optimizing the
        # ELBO finds the posterior mode.
        guide = AutoDelta(self.model.jax_model,
                          init_loc_fn=init_to_value(values=self.model.init_params))
        optimizer = ClippedAdam(step_size=adam_step_size,
                                clip_norm=adam_clip_norm)
        svi = SVI(self.model.jax_model,
                  guide,
                  optimizer,
                  loss=Trace_ELBO())

        result = svi.run(self.get_key(),
                         num_steps,
                         data=self.model.data,
                         priors=self.model.priors,
                         progress_bar=False)

        # Pull out constrained values and make sure nothing blew up
        params = guide.median(result.params)
        params = {k: np.asarray(v) for k, v in params.items()}
        for k in params:
            if np.any(np.isnan(params[k])):
                raise RuntimeError(
                    f"MAP optimization exploded (parameter '{k}' is NaN)."
                )

        losses = np.asarray(result.losses)
        print(f"MAP search: {num_steps} steps, final loss {losses[-1]:10.5e}", flush=True)

        return params, losses

    def run(self,
            mcmc,
            out_root=None,
            checkpoint_file=None):
        """
        Run the sampler.

        Parameters
        ----------
        mcmc : numpyro.infer.MCMC
            driver from `setup_mcmc`
        out_root : str, optional
            if given, write the final sampler state to
            {out_root}_checkpoint.pkl so sampling can be continued
        checkpoint_file : str, optional
            continue from a checkpoint written by a previous run. Warmup is
            skipped and the adapted step size and mass matrix are reused.

        Returns
        -------
        numpyro.infer.MCMC
            the driver holding the draws
        """

        run_key = self.get_key()

        # Resume from a saved state. Warmup is skipped.
        if checkpoint_file is not None:
            if not os.path.isfile(checkpoint_file):
                raise ValueError(f"checkpoint_file '{checkpoint_file}' is not valid")
            state = self._restore_checkpoint(checkpoint_file)
            mcmc.post_warmup_state = state
            run_key = state.rng_key

        mcmc.run(run_key,
                 data=self.model.data,
                 priors=self.model.priors,
                 extra_fields=("diverging",))

        # Save the last state so sampling can be continued
        if out_root is not None:
            self._write_checkpoint(mcmc.last_state, out_root)

        return mcmc

    def get_diagnostics(self,
                        mcmc,
                        r_hat_threshold=1.01,
                        min_n_eff=100):
        """
        Summarize sampler health and warn about problems.

        Parameters
        ----------
        mcmc : numpyro.infer.MCMC
            driver after `run`
        r_hat_threshold : float, optional
            warn if any latent site has split r_hat above this
        min_n_eff : float, optional
            warn if any latent site has fewer effective draws than this

        Returns
        -------
        dict
            num_divergent, divergent_fraction, max_r_hat, min_n_eff, num_draws
        """

        # Divergent transitions after warmup
        extra = mcmc.get_extra_fields(group_by_chain=True)
        diverging = np.asarray(extra["diverging"])
        num_divergent = int(np.sum(diverging))
        num_draws = int(diverging.size)

        # Mixing and effective sample size for unobserved sites only
        samples = mcmc.get_samples(group_by_chain=True)
        latent = {k: v for k, v in samples.items()
                  if k in self._get_latent_site_names()}
        summary_df = summarize_samples(latent)

        max_r_hat = float(np.nanmax(summary_df["r_hat"])) if np.any(np.isfinite(summary_df["r_hat"])) else np.nan
        min_found_n_eff = float(np.nanmin(summary_df["n_eff"])) if np.any(np.isfinite(summary_df["n_eff"])) else np.nan

        print(f"Draws: {num_draws}, Divergences: {num_divergent}, "
              f"Max r_hat: {max_r_hat:.4f}, Min n_eff: {min_found_n_eff:.1f}",
              flush=True)

        # Report, never retry
        if num_divergent > 0:
            warnings.warn(
                f"{num_divergent} divergent transitions after warmup. Posterior "
                "estimates may be biased; interpret with caution or increase "
                "target_accept_prob."
            )

        if np.isfinite(max_r_hat) and max_r_hat > r_hat_threshold:
            bad = summary_df.loc[summary_df["r_hat"] > r_hat_threshold, "site"]
            warnings.warn(
                f"Chains have not mixed: r_hat up to {max_r_hat:.3f} "
                f"(threshold {r_hat_threshold}) for sites {sorted(set(bad))}."
            )

        if np.isfinite(min_found_n_eff) and min_found_n_eff < min_n_eff:
            warnings.warn(
                f"Low effective sample size ({min_found_n_eff:.1f} < {min_n_eff})."
            )

        return {"num_divergent":num_divergent,
                "divergent_fraction":num_divergent / max(num_draws, 1),
                "max_r_hat":max_r_hat,
                "min_n_eff":min_found_n_eff,
                "num_draws":num_draws}

    def write_posteriors(self, mcmc, out_root):
        """
        Atomically write all draws (chains flattened) to
        {out_root}_posterior.npz.

        Returns
        -------
        str
            path to the written file
        """

        samples = jax.device_get(mcmc.get_samples())

        tmp_out_file = f"{out_root}_posterior.tmp.npz"
        out_file = f"{out_root}_posterior.npz"

        np.savez(tmp_out_file, **{k: np.asarray(v) for k, v in samples.items()})
        os.replace(tmp_out_file,
                   out_file)

        return out_file

    def predict_curves(self,
                       posteriors,
                       times,
                       q_to_get=None):
        """
        Evaluate posterior growth curves on a new time grid (for example, a
        fine grid for smooth plots).

        Parameters
        ----------
        posteriors : dict or str
            draws keyed by site name, or path to a .npz file
        times : array_like
            increasing time grid; should start at the plate's first time so
            the curves share its initial condition
        q_to_get : dict, optional
            dictionary mapping column suffixes to quantiles

        Returns
        -------
        pd.DataFrame
            one row per (time, well) with columns time, well, pred_mean and
            pred_{q}
        """

        if q_to_get is None:
            q_to_get = {"lower_95":0.025, "median":0.5, "upper_95":0.975}

        if isinstance(posteriors, str):
            posteriors = np.load(posteriors)
        # Only the latent sites are fed back; the curve is recomputed
        latent_names = self._get_latent_site_names()
        latent = {k: jnp.asarray(posteriors[k]) for k in posteriors
                  if k in latent_names}

        # Empty plate on the new time grid. Everything is masked, so only
        # the deterministic curve matters.
        times = np.asarray(times, dtype=float)
        num_well = self.model.data.num_well
        new_data = PlateData(times=jnp.asarray(times, dtype=self.model.data.times.dtype),
                             od=jnp.zeros((len(times), num_well), dtype=self.model.data.od.dtype),
                             good_mask=jnp.zeros((len(times), num_well), dtype=bool),
                             num_time=len(times),
                             num_well=num_well)

        predictor = Predictive(self.model.jax_model,
                               posterior_samples=latent,
                               return_sites=["obs_pred"])
        pred = np.asarray(predictor(self.get_key(),
                                    data=new_data,
                                    priors=self.model.priors)["obs_pred"])

        wells = list(getattr(self.model, "wells", range(num_well)))
        out = {"time":np.repeat(times, num_well),
               "well":np.tile(np.asarray(wells, dtype=object), len(times)),
               "pred_mean":np.mean(pred, axis=0).ravel()}
        for q_name, q_val in q_to_get.items():
            out[f"pred_{q_name}"] = np.quantile(pred, q_val, axis=0).ravel()

        return pd.DataFrame(out)

    def get_key(self):
        """
        Get a new JAX PRNG key, splitting the main key.
        """

        new_key, self._main_key = jax.random.split(self._main_key)
        return new_key

    def _get_latent_site_names(self):
        """
        Names of the unobserved sample sites in the model.
        """

        seeded_model = seed(self.model.jax_model, rng_seed=0)
        model_trace = trace(seeded_model).get_trace(data=self.model.data,
                                                    priors=self.model.priors)

        return [name for name, site in model_trace.items()
                if site["type"] == "sample" and not site["is_observed"]]

    def _jitter_init_parameters(self, init_params, init_param_jitter):
        """
        Multiply each starting value by exp(N(0,1)*init_param_jitter). Signs
        (and zeros) are preserved.
        """

        if init_param_jitter == 0:
            return init_params

        jittered = {}
        for p in init_params:
            value = jnp.asarray(init_params[p])
            noise = random.normal(self.get_key(), shape=value.shape)
            jittered[p] = value * jnp.exp(noise * init_param_jitter)

        return jittered

    def _write_checkpoint(self, mcmc_state, out_root):
        """
        Atomically save the last sampler state and PRNG key to a dill pickle.
        """

        out_dict = {"main_key":jax.device_get(self._main_key),
                    "mcmc_state":jax.device_get(mcmc_state)}

        tmp_checkpoint_file = f"{out_root}_checkpoint.tmp.pkl"
        checkpoint_file = f"{out_root}_checkpoint.pkl"

        with open(tmp_checkpoint_file, 'wb') as f:
            dill.dump(out_dict, f)
        os.replace(tmp_checkpoint_file,
                   checkpoint_file)

    def _restore_checkpoint(self, checkpoint_file):
        """
        Load a sampler state and PRNG key from a checkpoint file.
        """

        with open(checkpoint_file, "rb") as f:
            checkpoint_data = dill.load(f)

        if "mcmc_state" not in checkpoint_data:
            raise ValueError(
                f"checkpoint_file {checkpoint_file} does not appear to have a saved sampler state"
            )

        self._main_key = jnp.asarray(checkpoint_data["main_key"])

        return checkpoint_data["mcmc_state"]
