"""
Core functionality for running-stats.
"""

from running_stats.core.base import RunningStatistic
from running_stats.core.errors import (
    EmptyDistributionError,
    IncompatibleMergeError,
    InvalidArgumentError,
    RunningStatsError,
)

__all__ = [
    # Base class
    "RunningStatistic",
    # Errors
    "RunningStatsError",
    "InvalidArgumentError",
    "IncompatibleMergeError",
    "EmptyDistributionError",
]
