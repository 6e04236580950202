from labnotes.growth.model_class import GrowthCurveModel
from labnotes.util.cli import generalized_main

import numpy as np
import os

def summarize_growth_posteriors(posterior_file,
                                config_file,
                                out_root="growth"):
    """
    Summarize posterior draws from a growth-curve fit.

    Rebuilds the model from the configuration written at fit time, then
    writes per-parameter summaries ({out_root}_{param}.csv) and posterior
    curves/predictive intervals ({out_root}_growth_pred.csv).

    Parameters
    ----------
    posterior_file : str
        Path to the .npz file containing posterior draws.
    config_file : str
        Path to the YAML configuration file.
    out_root : str, optional
        Root filename for output CSV files (default "growth").

    Returns
    -------
    dict
        parameter tables plus "growth_pred"
    """

    plate_file, settings = GrowthCurveModel.load_config(config_file)

    gm = GrowthCurveModel(plate_file,
                          model=settings["model"],
                          priors=settings.get("priors", None),
                          time_column=settings.get("time_column", "time"))

    if not os.path.exists(posterior_file):
        raise FileNotFoundError(f"Posterior file not found: {posterior_file}")

    with np.load(posterior_file) as posteriors:

        print(f"Extracting parameters to {out_root}_*.csv...", flush=True)
        out = gm.extract_parameters(posteriors)
        for p_name, p_df in out.items():
            p_df.to_csv(f"{out_root}_{p_name}.csv", index=False)

        print(f"Extracting growth predictions to {out_root}_growth_pred.csv...", flush=True)
        growth_pred_df = gm.extract_growth_predictions(posteriors)
        growth_pred_df.to_csv(f"{out_root}_growth_pred.csv", index=False)
        out["growth_pred"] = growth_pred_df

    print("Summarization complete.", flush=True)

    return out

def main():
    """CLI entry point for summarizing posteriors."""
    generalized_main(summarize_growth_posteriors)

if __name__ == "__main__":
    main()
