import pytest
import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from labnotes.growth.fit_growth_curves import fit_growth_curves, main

@pytest.fixture
def plate_file(small_plate, tmpdir):
    path = str(tmpdir.join("plate.csv"))
    small_plate.to_csv(path, index=False)
    return path

@pytest.fixture
def mock_run_mcmc(mocker, fake_posteriors):
    mock_ri_class = mocker.patch("labnotes.growth.fit_growth_curves.RunMCMC")
    ri = mock_ri_class.return_value

    grouped = {k: np.stack([v[:100], v[100:]]) for k, v in fake_posteriors.items()}

    def get_samples(group_by_chain=False):
        if group_by_chain:
            return grouped
        return fake_posteriors

    mcmc = mocker.Mock()
    mcmc.get_samples.side_effect = get_samples

    ri.setup_mcmc.return_value = mcmc
    ri.run.return_value = mcmc
    ri.get_diagnostics.return_value = {"num_divergent":0}
    ri.write_posteriors.side_effect = lambda m, out_root: f"{out_root}_posterior.npz"
    ri.predict_curves.return_value = pd.DataFrame({"time":[0.0, 8.0, 0.0, 8.0],
                                                   "well":["A1", "A1", "A2", "A2"],
                                                   "pred_mean":[0.05, 0.9, 0.05, 0.9],
                                                   "pred_lower_95":[0.04, 0.8, 0.04, 0.8],
                                                   "pred_upper_95":[0.06, 1.0, 0.06, 1.0]})

    return mock_ri_class, ri

def test_fit_growth_curves(plate_file, mock_run_mcmc, tmpdir):
    mock_ri_class, ri = mock_run_mcmc
    out_root = str(tmpdir.join("fit"))

    out = fit_growth_curves(plate_file,
                            out_root=out_root,
                            num_warmup=10,
                            num_samples=10,
                            num_chains=2,
                            seed=3)

    assert mock_ri_class.call_args.kwargs["seed"] == 3
    setup_kwargs = ri.setup_mcmc.call_args.kwargs
    assert setup_kwargs["num_warmup"] == 10
    assert setup_kwargs["num_chains"] == 2
    assert setup_kwargs["init_strategy"] == "guess"
    assert ri.run.call_args.kwargs["checkpoint_file"] is None

    for suffix in ["config.yaml", "summary.csv", "r.csv", "K.csv", "y0.csv",
                   "sigma.csv", "growth_pred.csv", "curves.pdf", "corner.pdf"]:
        assert tmpdir.join(f"fit_{suffix}").check(), suffix

    summary = pd.read_csv(f"{out_root}_summary.csv")
    assert "obs_pred" not in set(summary["site"])
    assert set(out["params"]) == {"r", "K", "y0", "sigma"}
    assert len(out["growth_pred"]) == 6

    plt.close("all")

def test_fit_growth_curves_no_plots(plate_file, mock_run_mcmc, tmpdir):
    _, ri = mock_run_mcmc
    out_root = str(tmpdir.join("fit"))

    fit_growth_curves(plate_file, out_root=out_root, make_plots=False)

    ri.predict_curves.assert_not_called()
    assert not tmpdir.join("fit_curves.pdf").check()

def test_fit_growth_curves_bad_model(plate_file, mock_run_mcmc, tmpdir):
    with pytest.raises(ValueError, match="not recognized"):
        fit_growth_curves(plate_file, model="gompertz",
                          out_root=str(tmpdir.join("fit")))

def test_cli(plate_file, mock_run_mcmc, tmpdir, mocker):
    _, ri = mock_run_mcmc
    out_root = str(tmpdir.join("cli"))
    mocker.patch("sys.argv", ["labnotes-fit-growth", plate_file,
                              "--out_root", out_root,
                              "--num_samples", "50",
                              "--init_strategy", "map",
                              "--make_plots"])
    main()

    assert ri.setup_mcmc.call_args.kwargs["num_samples"] == 50
    assert ri.setup_mcmc.call_args.kwargs["init_strategy"] == "map"
    assert not tmpdir.join("cli_curves.pdf").check()
