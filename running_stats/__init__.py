"""
running-stats - Mergeable Single-Pass Statistics

running-stats is a Python library for computing summary statistics over a
stream of numbers in one pass with bounded memory. Accumulators built
independently (for example by parallel workers) can be merged without
revisiting the raw data.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from running_stats.algorithms.beta import Beta
from running_stats.algorithms.countmap import CountMap
from running_stats.algorithms.empirical_cdf import EmpiricalCdf
from running_stats.algorithms.extrema import Extrema
from running_stats.algorithms.histogram import Histogram, HistogramBin
from running_stats.algorithms.moments import Mean, Moments, Sum, Variance
from running_stats.algorithms.normal import Normal
from running_stats.collection import (
    STATISTIC_TYPES,
    Statistic,
    combine,
    load_statistic,
    merge_all,
)
from running_stats.core.base import RunningStatistic
from running_stats.core.errors import (
    EmptyDistributionError,
    IncompatibleMergeError,
    InvalidArgumentError,
    RunningStatsError,
)

__all__ = [
    # Core base class
    "RunningStatistic",
    # Errors
    "RunningStatsError",
    "InvalidArgumentError",
    "IncompatibleMergeError",
    "EmptyDistributionError",
    # Statistics
    "Sum",
    "Mean",
    "Variance",
    "Moments",
    "Extrema",
    "EmpiricalCdf",
    "Histogram",
    "HistogramBin",
    "CountMap",
    "Beta",
    "Normal",
    # Collections
    "Statistic",
    "STATISTIC_TYPES",
    "load_statistic",
    "combine",
    "merge_all",
]
