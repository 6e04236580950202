"""
Exploratory analysis of fitness-activity logs: read activity records and
GPS tracks, join them by start time, cluster activities with a Gaussian
mixture model and aggregate them over time.
"""

from .read_activities import (
    read_activities
)

from .read_tracks import (
    read_tracks
)

from .track_distance import (
    haversine,
    track_distance,
    summarize_tracks
)

from .join_tracks import (
    join_tracks
)

from .cluster_activities import (
    cluster_activities
)

from .compare_clusters import (
    compare_clusters
)

from .aggregate_activities import (
    aggregate_activities,
    commute_share
)

from .simulate_activities import (
    simulate_activities
)

from .analyze_activities import (
    analyze_activities
)
