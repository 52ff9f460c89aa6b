"""
Statistic implementations for running-stats.
"""

from running_stats.algorithms.beta import Beta
from running_stats.algorithms.countmap import CountMap
from running_stats.algorithms.empirical_cdf import EmpiricalCdf
from running_stats.algorithms.extrema import Extrema
from running_stats.algorithms.histogram import Histogram, HistogramBin
from running_stats.algorithms.moments import Mean, Moments, Sum, Variance
from running_stats.algorithms.normal import Normal

__all__ = [
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
]
