from matplotlib import pyplot as plt

SMALL_SIZE = 12
MEDIUM_SIZE = 14
BIGGER_SIZE = 16

plt.rc('font', size=SMALL_SIZE)          # controls default text sizes
plt.rc('axes', titlesize=SMALL_SIZE)     # fontsize of the axes title
plt.rc('axes', labelsize=MEDIUM_SIZE)    # fontsize of the x and y labels
plt.rc('xtick', labelsize=SMALL_SIZE)    # fontsize of the tick labels
plt.rc('ytick', labelsize=SMALL_SIZE)    # fontsize of the tick labels
plt.rc('legend', fontsize=SMALL_SIZE)    # legend fontsize
plt.rc('figure', titlesize=BIGGER_SIZE)  # fontsize of the figure title


# Growth curves

DEFAULT_OBS_SCATTER_KWARGS = {
    "s":12,
    "edgecolor":"black",
    "facecolor":"none",
    "lw":0.75,
    "zorder":10
}

DEFAULT_FIT_LINE_KWARGS = {
    "lw":2,
    "color":"firebrick",
    "zorder":5
}

DEFAULT_CREDIBLE_BAND_KWARGS = {
    "color":"firebrick",
    "alpha":0.35,
    "lw":0,
    "zorder":4
}

DEFAULT_PREDICTIVE_BAND_KWARGS = {
    "color":"firebrick",
    "alpha":0.15,
    "lw":0,
    "zorder":3
}

# Parameter forest plot

DEFAULT_FOREST_POINT_KWARGS = {
    "s":30,
    "color":"black",
    "zorder":10
}

DEFAULT_FOREST_ERROR_KWARGS = {
    "color":"black",
    "lw":1.5,
    "zorder":5
}

DEFAULT_SHARED_SPAN_KWARGS = {
    "color":"royalblue",
    "alpha":0.2,
    "lw":0,
    "zorder":1
}

# Activity plots

DEFAULT_CLUSTER_SCATTER_KWARGS = {
    "s":20,
    "alpha":0.7,
    "edgecolor":"none"
}

DEFAULT_TRACK_LINE_KWARGS = {
    "lw":1,
    "alpha":0.5
}

DEFAULT_CATEGORY_COLORS = ["#1f77b4", "#ff7f0e", "#2ca02c", "#d62728",
                           "#9467bd", "#8c564b", "#e377c2", "#7f7f7f",
                           "#bcbd22", "#17becf"]
