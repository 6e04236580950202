from labnotes.util.dataframe import check_columns
from labnotes.util.validation import check_number

import numpy as np
import pandas as pd
from sklearn.mixture import GaussianMixture
from sklearn.preprocessing import StandardScaler

DEFAULT_FEATURES = ["distance_km", "speed_kmh"]

def cluster_activities(activities_df,
                       features=None,
                       n_components=None,
                       max_components=6,
                       covariance_type="full",
                       log_features=False,
                       n_init=5,
                       seed=0):
    """
    Cluster activities with a Gaussian mixture model.

    Features are standardized before fitting. When `n_components` is not
    given, mixtures with 1..max_components components are fit and the one
    with the lowest BIC is kept. Cluster numbers are reordered by the mean
    of the first feature (cluster 0 has the smallest), so results do not
    depend on the order in which EM happened to find the components.

    Parameters
    ----------
    activities_df : pandas.DataFrame
        activity records
    features : list of str, optional
        columns to cluster on. Defaults to distance_km and speed_kmh.
    n_components : int, optional
        number of mixture components. If None, choose by BIC.
    max_components : int, optional
        largest number of components tried when choosing by BIC
    covariance_type : str, optional
        GaussianMixture covariance type ("full", "tied", "diag", "spherical")
    log_features : bool, optional
        cluster on log(1 + feature), which tames long right tails
    n_init : int, optional
        EM restarts per fit
    seed : int, optional
        random seed

    Returns
    -------
    out_df : pandas.DataFrame
        copy of activities_df with `cluster` (nullable int; missing where a
        feature was not finite) and `cluster_prob` (membership probability of
        the assigned cluster)
    gmm : sklearn.mixture.GaussianMixture
        the fitted mixture (on standardized features)
    bic_df : pandas.DataFrame
        n_components and bic for every mixture size tried
    """

    if features is None:
        features = DEFAULT_FEATURES
    features = list(features)
    check_columns(activities_df, features, df_name="activities_df")

    max_components = check_number(max_components, "max_components",
                                  cast_type=int, min_allowed=1)
    n_components = check_number(n_components, "n_components",
                                cast_type=int, min_allowed=1, allow_none=True)

    X = activities_df[features].to_numpy(dtype=float)
    if log_features:
        if np.any(X[np.isfinite(X)] <= -1):
            raise ValueError("log_features requires all features > -1")
        X = np.log1p(X)

    # Drop rows with missing features, then standardize so no feature
    # dominates the covariance
    good = np.all(np.isfinite(X), axis=1)
    X_good = X[good]
    if len(X_good) < 2:
        raise ValueError("Need at least two activities with finite features to cluster.")

    X_scaled = StandardScaler().fit_transform(X_good)

    if n_components is None:
        sizes = range(1, min(max_components, len(X_good)) + 1)
    else:
        if n_components > len(X_good):
            raise ValueError(
                f"n_components ({n_components}) cannot exceed the number of "
                f"activities with finite features ({len(X_good)})."
            )
        sizes = [n_components]

    # Fit every candidate size and keep the lowest BIC
    fits = []
    for k in sizes:
        gmm = GaussianMixture(n_components=k,
                              covariance_type=covariance_type,
                              n_init=n_init,
                              random_state=seed)
        gmm.fit(X_scaled)
        fits.append((k, gmm.bic(X_scaled), gmm))

    bic_df = pd.DataFrame({"n_components":[f[0] for f in fits],
                           "bic":[f[1] for f in fits]})
    _, _, gmm = min(fits, key=lambda f: f[1])

    raw_labels = gmm.predict(X_scaled)
    probs = gmm.predict_proba(X_scaled)

    # Reorder clusters by the mean of the first feature
    order = np.argsort(gmm.means_[:, 0])
    relabel = np.empty_like(order)
    relabel[order] = np.arange(len(order))

    out_df = activities_df.copy()
    cluster = pd.Series(pd.NA, index=out_df.index, dtype="Int64")
    cluster[good] = relabel[raw_labels]
    out_df["cluster"] = cluster

    cluster_prob = np.full(len(out_df), np.nan)
    cluster_prob[good] = probs[np.arange(len(raw_labels)), raw_labels]
    out_df["cluster_prob"] = cluster_prob

    return out_df, gmm, bic_df
