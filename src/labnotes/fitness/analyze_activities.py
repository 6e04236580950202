from labnotes.util.cli import generalized_main
from labnotes.fitness.read_activities import read_activities
from labnotes.fitness.read_tracks import read_tracks
from labnotes.fitness.join_tracks import join_tracks
from labnotes.fitness.cluster_activities import cluster_activities
from labnotes.fitness.compare_clusters import compare_clusters
from labnotes.fitness.aggregate_activities import (
    aggregate_activities,
    commute_share
)
from labnotes.plot.activity_clusters import activity_clusters
from labnotes.plot.activity_timeline import activity_timeline
from labnotes.plot.gps_tracks import gps_tracks

from matplotlib import pyplot as plt

def analyze_activities(activity_file,
                       track_file=None,
                       out_root="activities",
                       features="distance_km,speed_kmh",
                       n_components=None,
                       max_components=6,
                       log_features=False,
                       freq="W",
                       tolerance="60s",
                       seed=0,
                       make_plots=True):
    """
    Exploratory analysis of a fitness-activity log.

    Reads the activity records (and GPS tracks, if given), clusters the
    activities with a Gaussian mixture model, compares the clusters to the
    recorded activity types and aggregates distance over time.

    Writes:
      {out_root}_clustered.csv      records with cluster assignments
      {out_root}_bic.csv            BIC for each number of components tried
      {out_root}_crosstab.csv       activity type x cluster counts
      {out_root}_distance.csv       distance (km) per period and type
      {out_root}_commute_share.csv  fraction of distance commuting per period
      {out_root}_clusters.pdf, {out_root}_timeline.pdf and (with tracks)
      {out_root}_tracks.pdf         figures (if make_plots)

    Parameters
    ----------
    activity_file : str
        activity records (csv/tsv/json/xlsx)
    track_file : str, optional
        GPS points, one row per point
    out_root : str
        root name for output files
    features : str or list of str
        features to cluster on (comma-separated on the command line)
    n_components : int, optional
        number of clusters. If not given, chosen by BIC.
    max_components : int
        largest number of clusters tried when choosing by BIC
    log_features : bool
        cluster on log(1 + feature)
    freq : str
        aggregation period (pandas offset alias)
    tolerance : str
        largest start-time difference allowed when joining tracks
    seed : int
        random seed
    make_plots : bool
        draw figures

    Returns
    -------
    dict
        keys "activities", "tracks", "bic", "comparison", "distance" and
        "commute_share"
    """

    if isinstance(features, str):
        features = [f.strip() for f in features.split(",") if f.strip() != ""]

    # 1. Read activities and, if given, attach GPS tracks
    activities_df = read_activities(activity_file)
    print(f"Read {len(activities_df)} activities "
          f"({activities_df['start_date'].min()} to {activities_df['start_date'].max()}).",
          flush=True)

    tracks_df = None
    if track_file is not None:
        tracks_df = read_tracks(track_file)
        activities_df = join_tracks(activities_df, tracks_df, tolerance=tolerance)
        print(f"Joined GPS tracks to {int(activities_df['has_track'].sum())} activities.",
              flush=True)

    # 2. Cluster and compare clusters to the recorded activity type
    activities_df, gmm, bic_df = cluster_activities(activities_df,
                                                    features=features,
                                                    n_components=n_components,
                                                    max_components=max_components,
                                                    log_features=log_features,
                                                    seed=seed)
    print(f"\nGaussian mixture with {gmm.n_components} components.", flush=True)
    print(bic_df.to_string(index=False), flush=True)

    comparison = compare_clusters(activities_df)
    print(f"\n{comparison['crosstab'].to_string()}", flush=True)
    print(f"adjusted Rand index: {comparison['adjusted_rand_index']:.3f}", flush=True)
    print(f"majority-label agreement: {comparison['agreement']:.3f}", flush=True)

    # 3. Distance per period and commuting share
    distance_df = aggregate_activities(activities_df, freq=freq,
                                       value="distance_km", by="type")
    share = commute_share(activities_df, freq=freq)

    # 4. Write tables
    activities_df.to_csv(f"{out_root}_clustered.csv", index=False)
    bic_df.to_csv(f"{out_root}_bic.csv", index=False)
    comparison["crosstab"].to_csv(f"{out_root}_crosstab.csv")
    distance_df.to_csv(f"{out_root}_distance.csv")
    share.to_csv(f"{out_root}_commute_share.csv")

    if make_plots:

        ax = activity_clusters(activities_df, x=features[0],
                               y=features[1] if len(features) > 1 else features[0])
        ax.figure.savefig(f"{out_root}_clusters.pdf")
        plt.close(ax.figure)

        ax = activity_timeline(distance_df, label="distance (km)")
        ax.figure.savefig(f"{out_root}_timeline.pdf")
        plt.close(ax.figure)

        if tracks_df is not None:
            ax = gps_tracks(tracks_df, activities_df)
            ax.figure.savefig(f"{out_root}_tracks.pdf")
            plt.close(ax.figure)

    return {"activities":activities_df,
            "tracks":tracks_df,
            "bic":bic_df,
            "comparison":comparison,
            "distance":distance_df,
            "commute_share":share}


def main():
    """CLI entry point for the activity analysis."""
    generalized_main(analyze_activities,
                     manual_arg_types={"n_components":int,
                                       "track_file":str})

if __name__ == "__main__":
    main()
