import pytest
import numpy as np
import jax.numpy as jnp
import os
import dill
from numpyro.infer import MCMC, NUTS

from labnotes.growth.model_class import GrowthCurveModel
from labnotes.growth.run_mcmc import RunMCMC

class MockModel:
    def __init__(self):
        self.data = None
        self.priors = None
        self.jax_model = lambda **kwargs: None
        self.init_params = {"a":1.0, "b":jnp.array([-2.0, 0.0])}

@pytest.fixture
def growth_model(small_plate):
    return GrowthCurveModel(small_plate)

def _fake_grouped_samples(num_chains=2, num_draws=500, seed=0):
    rng = np.random.default_rng(seed)
    size = (num_chains, num_draws)
    return {"growth_r":rng.normal(0.5, 0.01, size=size),
            "growth_K":rng.normal(1.0, 0.01, size=size),
            "growth_y0":rng.normal(0.05, 0.001, size=size),
            "obs_sigma":np.abs(rng.normal(0.02, 0.001, size=size)),
            "obs_pred":np.ones(size + (3, 2))}

def test_init():
    model = MockModel()
    ri = RunMCMC(model, seed=42)
    assert ri.model is model
    assert ri._seed == 42

    with pytest.raises(ValueError):
        RunMCMC(model, seed=-1)

    del model.data
    with pytest.raises(ValueError, match="`model` must have attribute data"):
        RunMCMC(model, seed=42)

def test_get_key():
    ri = RunMCMC(MockModel(), seed=0)
    k1 = ri.get_key()
    k2 = ri.get_key()
    assert not np.array_equal(np.asarray(k1), np.asarray(k2))

def test_setup_mcmc(growth_model):
    ri = RunMCMC(growth_model, seed=0)
    mcmc = ri.setup_mcmc(num_warmup=10,
                         num_samples=20,
                         num_chains=1,
                         target_accept_prob=0.9,
                         max_tree_depth=5,
                         progress_bar=False)

    assert isinstance(mcmc, MCMC)
    assert isinstance(mcmc.sampler, NUTS)
    assert mcmc.num_warmup == 10
    assert mcmc.num_samples == 20
    assert mcmc.num_chains == 1

    for strategy in ["median", "prior"]:
        assert isinstance(ri.setup_mcmc(init_strategy=strategy,
                                        progress_bar=False), MCMC)

def test_setup_mcmc_bad_settings(growth_model):
    ri = RunMCMC(growth_model, seed=0)

    with pytest.raises(ValueError, match="init_strategy"):
        ri.setup_mcmc(init_strategy="random")
    with pytest.raises(ValueError):
        ri.setup_mcmc(target_accept_prob=1.0)
    with pytest.raises(ValueError):
        ri.setup_mcmc(num_samples=0)

def test_jitter_init_parameters():
    model = MockModel()
    ri = RunMCMC(model, seed=0)

    assert ri._jitter_init_parameters(model.init_params, 0) is model.init_params

    jittered = ri._jitter_init_parameters(model.init_params, 0.1)
    assert float(jittered["a"]) != 1.0
    assert float(jittered["a"]) > 0
    assert float(jittered["b"][0]) < 0
    assert float(jittered["b"][1]) == 0.0

def test_checkpoint_round_trip(tmpdir):
    ri = RunMCMC(MockModel(), seed=0)
    out_root = str(tmpdir.join("fit"))

    ri._write_checkpoint({"z":np.arange(3)}, out_root)
    assert tmpdir.join("fit_checkpoint.pkl").check()
    assert not tmpdir.join("fit_checkpoint.tmp.pkl").check()

    saved_key = np.asarray(ri._main_key)
    ri.get_key()
    state = ri._restore_checkpoint(f"{out_root}_checkpoint.pkl")
    assert np.array_equal(state["z"], np.arange(3))
    assert np.array_equal(np.asarray(ri._main_key), saved_key)

def test_restore_bad_checkpoint(tmpdir):
    path = str(tmpdir.join("bad.pkl"))
    with open(path, "wb") as f:
        dill.dump({"main_key":np.zeros(2)}, f)

    ri = RunMCMC(MockModel(), seed=0)
    with pytest.raises(ValueError, match="saved sampler state"):
        ri._restore_checkpoint(path)

def test_run_bad_checkpoint_file(growth_model, mocker):
    ri = RunMCMC(growth_model, seed=0)
    with pytest.raises(ValueError, match="not valid"):
        ri.run(mocker.Mock(), checkpoint_file="not_a_file.pkl")

def test_get_latent_site_names(growth_model):
    ri = RunMCMC(growth_model, seed=0)
    assert set(ri._get_latent_site_names()) == {"growth_r", "growth_K",
                                                "growth_y0", "obs_sigma"}

def test_get_diagnostics(growth_model, mocker):
    ri = RunMCMC(growth_model, seed=0)

    mcmc = mocker.Mock()
    mcmc.get_samples.return_value = _fake_grouped_samples()
    diverging = np.zeros((2, 500), dtype=bool)
    mcmc.get_extra_fields.return_value = {"diverging":diverging}

    diagnostics = ri.get_diagnostics(mcmc, min_n_eff=10)
    assert diagnostics["num_divergent"] == 0
    assert diagnostics["num_draws"] == 1000
    assert diagnostics["max_r_hat"] < 1.05
    assert diagnostics["min_n_eff"] > 10

    diverging[0, :5] = True
    with pytest.warns(UserWarning, match="5 divergent transitions"):
        diagnostics = ri.get_diagnostics(mcmc, min_n_eff=10)
    assert diagnostics["divergent_fraction"] == pytest.approx(0.005)

def test_get_diagnostics_unmixed(growth_model, mocker):
    ri = RunMCMC(growth_model, seed=0)

    samples = _fake_grouped_samples()
    samples["growth_r"][1] += 1.0

    mcmc = mocker.Mock()
    mcmc.get_samples.return_value = samples
    mcmc.get_extra_fields.return_value = {"diverging":np.zeros((2, 500), dtype=bool)}

    with pytest.warns(UserWarning, match="growth_r"):
        ri.get_diagnostics(mcmc, min_n_eff=1)

def test_write_posteriors(growth_model, mocker, tmpdir):
    ri = RunMCMC(growth_model, seed=0)
    mcmc = mocker.Mock()
    mcmc.get_samples.return_value = {"growth_r":jnp.ones(4)}

    out_file = ri.write_posteriors(mcmc, str(tmpdir.join("fit")))
    assert out_file == str(tmpdir.join("fit_posterior.npz"))
    with np.load(out_file) as data:
        assert np.array_equal(data["growth_r"], np.ones(4))

    # temporary file replaced, not left behind
    assert not os.path.exists(str(tmpdir.join("fit_posterior.tmp.npz")))

def test_write_posteriors_overwrites(growth_model, mocker, tmpdir):
    ri = RunMCMC(growth_model, seed=0)
    mcmc = mocker.Mock()
    out_root = str(tmpdir.join("fit"))

    mcmc.get_samples.return_value = {"growth_r":jnp.ones(4)}
    ri.write_posteriors(mcmc, out_root)

    replace = mocker.spy(os, "replace")
    mcmc.get_samples.return_value = {"growth_r":jnp.zeros(3)}
    out_file = ri.write_posteriors(mcmc, out_root)

    replace.assert_called_once_with(f"{out_root}_posterior.tmp.npz", out_file)
    with np.load(out_file) as data:
        assert np.array_equal(data["growth_r"], np.zeros(3))

def test_predict_curves(growth_model):
    ri = RunMCMC(growth_model, seed=0)
    posteriors = {k: v[0, :20] for k, v in _fake_grouped_samples().items()}

    times = np.linspace(0, 8, 9)
    df = ri.predict_curves(posteriors, times)

    assert len(df) == 18
    assert list(df.columns) == ["time", "well", "pred_mean",
                                "pred_lower_95", "pred_median", "pred_upper_95"]
    assert list(df["well"].iloc[:2]) == ["A1", "A2"]

    # both wells share the logistic curve
    first = df[df["time"] == 0.0]
    assert np.allclose(first["pred_mean"], np.mean(posteriors["growth_y0"]), rtol=1e-4)
    assert np.all(np.diff(df[df["well"] == "A1"]["pred_mean"]) > 0)

def test_find_map(growth_model):
    ri = RunMCMC(growth_model, seed=0)
    params, losses = ri.find_map(num_steps=20)

    assert set(params) == {"growth_r", "growth_K", "growth_y0", "obs_sigma"}
    assert len(losses) == 20
    assert np.all(np.isfinite(losses))
