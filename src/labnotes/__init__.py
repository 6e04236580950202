"""
labnotes package initialization.

Narrative data analyses: Bayesian ODE fits of bacterial growth curves and
exploratory analysis of fitness-activity logs.
"""

from .__version__ import __version__

from . import util
from . import growth
from . import fitness
from . import plot
