from labnotes.util.dataframe import check_columns

import numpy as np
import pandas as pd
from sklearn.metrics import adjusted_rand_score

def compare_clusters(clustered_df,
                     label_column="type",
                     cluster_column="cluster"):
    """
    Compare mixture-model clusters with known activity labels.

    Parameters
    ----------
    clustered_df : pandas.DataFrame
        output of `cluster_activities`
    label_column : str, optional
        column holding the ground-truth label (activity type)
    cluster_column : str, optional
        column holding cluster assignments

    Returns
    -------
    dict
        - crosstab : label x cluster counts
        - adjusted_rand_index : agreement between partitions (1 is perfect,
          about 0 is chance)
        - cluster_labels : majority label of each cluster
        - agreement : fraction of activities whose label equals the majority
          label of their cluster
    """

    check_columns(clustered_df, [label_column, cluster_column], df_name="clustered_df")

    df = clustered_df.loc[~pd.isna(clustered_df[cluster_column])]
    if len(df) == 0:
        raise ValueError("No clustered activities to compare.")

    labels = df[label_column].astype(str).to_numpy()
    clusters = df[cluster_column].astype(int).to_numpy()

    crosstab = pd.crosstab(pd.Series(labels, name=label_column),
                           pd.Series(clusters, name=cluster_column))

    cluster_labels = crosstab.idxmax(axis=0).to_dict()
    majority = np.array([cluster_labels[c] for c in clusters])
    agreement = float(np.mean(majority == labels))

    return {"crosstab":crosstab,
            "adjusted_rand_index":float(adjusted_rand_score(labels, clusters)),
            "cluster_labels":cluster_labels,
            "agreement":agreement}
