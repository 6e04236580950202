from labnotes.util.cli import generalized_main
from labnotes.growth.model_class import GrowthCurveModel
from labnotes.growth.run_mcmc import RunMCMC
from labnotes.growth.summarize_samples import summarize_samples
from labnotes.plot.growth_curves import growth_curves
from labnotes.plot.corner import corner_plot

from matplotlib import pyplot as plt
import numpy as np

import os

def fit_growth_curves(plate_file,
                      model="logistic",
                      out_root="growth",
                      priors_file=None,
                      num_warmup=1000,
                      num_samples=1000,
                      num_chains=4,
                      target_accept_prob=0.8,
                      max_tree_depth=10,
                      chain_method="sequential",
                      init_strategy="guess",
                      checkpoint_file=None,
                      seed=0,
                      make_plots=True):
    """
    Fit a Bayesian ODE growth model to a plate of growth curves with NUTS.

    Writes:
      {out_root}_config.yaml     model settings (for summarize_growth_posteriors)
      {out_root}_posterior.npz   all posterior draws
      {out_root}_checkpoint.pkl  last sampler state (to continue sampling)
      {out_root}_summary.csv     mean/std/interval/n_eff/r_hat for every site
      {out_root}_{param}.csv     per-parameter posterior summaries
      {out_root}_growth_pred.csv posterior curves and predictive intervals
      {out_root}_curves.pdf      growth curve plot (if make_plots)
      {out_root}_corner.pdf      joint posterior of the scalar sites (if make_plots)

    Parameters
    ----------
    plate_file : str
        wide plate table: a time column and one OD column per well
    model : str
        "logistic", "richards" or "richards_hierarchical"
    out_root : str
        root name for output files
    priors_file : str, optional
        YAML file with hyperparameter overrides
    num_warmup, num_samples, num_chains : int
        sampler size settings (per chain)
    target_accept_prob : float
        NUTS step-size adaptation target
    max_tree_depth : int
        NUTS maximum tree depth
    chain_method : str
        "sequential", "parallel" or "vectorized"
    init_strategy : str
        "guess", "map", "median" or "prior"
    checkpoint_file : str, optional
        continue sampling from this checkpoint (skips warmup)
    seed : int
        random seed
    make_plots : bool
        draw the growth curve figure

    Returns
    -------
    dict
        keys "model", "mcmc", "diagnostics", "params", "growth_pred" and
        "summary"
    """

    # Build model and save its configuration so draws can be summarized later
    gm = GrowthCurveModel(plate_file,
                          model=model,
                          priors=priors_file)

    print(f"Fitting '{model}' model to {len(gm.wells)} wells x "
          f"{len(gm.times)} time points.", flush=True)

    gm.write_config(os.path.abspath(plate_file), out_root)

    # Sample
    ri = RunMCMC(gm, seed=seed)
    mcmc = ri.setup_mcmc(num_warmup=num_warmup,
                         num_samples=num_samples,
                         num_chains=num_chains,
                         target_accept_prob=target_accept_prob,
                         max_tree_depth=max_tree_depth,
                         chain_method=chain_method,
                         init_strategy=init_strategy)
    mcmc = ri.run(mcmc,
                  out_root=out_root,
                  checkpoint_file=checkpoint_file)

    # Check sampler health (warnings only)
    diagnostics = ri.get_diagnostics(mcmc)

    posterior_file = ri.write_posteriors(mcmc, out_root)
    print(f"Wrote posterior draws to {posterior_file}", flush=True)

    # Summary tables
    samples = {k: np.asarray(v) for k, v in mcmc.get_samples().items()}
    grouped = mcmc.get_samples(group_by_chain=True)
    summary_df = summarize_samples({k: v for k, v in grouped.items()
                                    if k != "obs_pred"})
    summary_df.to_csv(f"{out_root}_summary.csv", index=False)

    params = gm.extract_parameters(samples)
    for p_name, p_df in params.items():
        p_df.to_csv(f"{out_root}_{p_name}.csv", index=False)
        print(f"\n{p_name}\n{p_df.to_string(index=False)}", flush=True)

    growth_pred = gm.extract_growth_predictions(samples, seed=seed)
    growth_pred.to_csv(f"{out_root}_growth_pred.csv", index=False)

    if make_plots:
        # Smooth curves on a fine grid over the observed points
        t = gm.times
        fine_times = np.linspace(t[0], t[-1], 200)
        curve_df = ri.predict_curves(samples, fine_times)
        fig, _ = growth_curves(growth_pred, curve_df=curve_df)
        fig.savefig(f"{out_root}_curves.pdf")
        plt.close(fig)

        # Corner plot only makes sense for a handful of scalar sites
        scalar_sites = [k for k in sorted(samples) if samples[k].ndim == 1]
        if 1 < len(scalar_sites) <= 10:
            fig = corner_plot(samples, scalar_sites)
            fig.savefig(f"{out_root}_corner.pdf")
            plt.close(fig)

    return {"model":gm,
            "mcmc":mcmc,
            "diagnostics":diagnostics,
            "params":params,
            "growth_pred":growth_pred,
            "summary":summary_df}


def main():
    """CLI entry point for fitting growth curves."""
    generalized_main(fit_growth_curves,
                     manual_arg_types={"priors_file":str,
                                       "checkpoint_file":str})

if __name__ == "__main__":
    main()
