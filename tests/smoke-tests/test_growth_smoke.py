import pytest
import os
import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from labnotes.growth.model_class import GrowthCurveModel
from labnotes.growth.run_mcmc import RunMCMC
from labnotes.growth.models.registry import model_registry
from labnotes.growth import (
    fit_growth_curves,
    summarize_growth_posteriors,
    compare_well_spread
)

@pytest.mark.slow
@pytest.mark.parametrize("model", list(model_registry["growth"]))
def test_mcmc_smoke(growth_smoke_csv, model, tmpdir):
    """
    Very short NUTS run for every growth model: check that sampling, the
    checkpoint and parameter extraction all work end to end.
    """

    out_root = os.path.join(str(tmpdir), f"smoke_{model}")

    gm = GrowthCurveModel(growth_smoke_csv, model=model)
    ri = RunMCMC(gm, seed=42)
    mcmc = ri.setup_mcmc(num_warmup=20,
                         num_samples=20,
                         num_chains=1,
                         progress_bar=False)
    mcmc = ri.run(mcmc, out_root=out_root)

    assert os.path.isfile(f"{out_root}_checkpoint.pkl")

    samples = {k: np.asarray(v) for k, v in mcmc.get_samples().items()}
    assert samples["obs_pred"].shape == (20, gm.data.num_time, gm.data.num_well)

    params = gm.extract_parameters(samples)
    for p in model_registry["growth"][model].PARAMETERS:
        assert np.all(params[p]["mean"] > 0)

    diagnostics = ri.get_diagnostics(mcmc)
    assert diagnostics["num_draws"] == 20

    # continue sampling from the checkpoint (no warmup)
    mcmc = ri.setup_mcmc(num_warmup=20,
                         num_samples=10,
                         num_chains=1,
                         progress_bar=False)
    mcmc = ri.run(mcmc, checkpoint_file=f"{out_root}_checkpoint.pkl")
    assert mcmc.get_samples()["obs_sigma"].shape == (10,)

@pytest.mark.slow
def test_map_init_smoke(growth_smoke_csv):
    gm = GrowthCurveModel(growth_smoke_csv, model="richards")
    ri = RunMCMC(gm, seed=0)
    mcmc = ri.setup_mcmc(num_warmup=10,
                         num_samples=10,
                         num_chains=1,
                         init_strategy="map",
                         init_param_jitter=0.05,
                         progress_bar=False)
    mcmc = ri.run(mcmc)
    assert np.all(np.isfinite(np.asarray(mcmc.get_samples()["growth_r"])))

@pytest.mark.slow
def test_fit_and_summarize_smoke(growth_smoke_csv, tmpdir):
    """
    Fit the shared and hierarchical models, summarize the saved posterior
    and compare the spread of per-well growth rates.
    """

    shared_root = os.path.join(str(tmpdir), "shared")
    shared = fit_growth_curves(growth_smoke_csv,
                               model="richards",
                               out_root=shared_root,
                               num_warmup=50,
                               num_samples=50,
                               num_chains=1)

    hier_root = os.path.join(str(tmpdir), "hier")
    hier = fit_growth_curves(growth_smoke_csv,
                             model="richards_hierarchical",
                             out_root=hier_root,
                             num_warmup=50,
                             num_samples=50,
                             num_chains=1)
    plt.close("all")

    assert os.path.isfile(f"{hier_root}_curves.pdf")
    assert len(hier["params"]["r"]) == 4
    assert "hyper" in hier["params"]

    spread = compare_well_spread(shared["params"], hier["params"], parameter="r")
    assert np.isfinite(spread["well_mean_std"].iloc[0])

    out_root = os.path.join(str(tmpdir), "resummarized")
    out = summarize_growth_posteriors(f"{hier_root}_posterior.npz",
                                      f"{hier_root}_config.yaml",
                                      out_root=out_root)
    pd.testing.assert_frame_equal(out["r"], hier["params"]["r"])
