"""
Plots for growth-curve fits and activity analyses.
"""

from . import default_styles

from .growth_curves import (
    growth_curves
)

from .param_forest import (
    param_forest
)

from .corner import (
    corner_plot
)

from .activity_clusters import (
    activity_clusters
)

from .activity_timeline import (
    activity_timeline
)

from .gps_tracks import (
    gps_tracks
)
