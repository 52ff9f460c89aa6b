"""
Working with collections of running statistics.

The library has a closed set of statistic kinds, listed in STATISTIC_TYPES.
This module rebuilds any of them from a serialized snapshot and reduces
many partial accumulators into one, as done when each worker of a parallel
job owns a private accumulator.
"""

import logging
from typing import Any, Dict, Sequence, Type, TypeVar, Union

from running_stats.algorithms.beta import Beta
from running_stats.algorithms.countmap import CountMap
from running_stats.algorithms.empirical_cdf import EmpiricalCdf
from running_stats.algorithms.extrema import Extrema
from running_stats.algorithms.histogram import Histogram
from running_stats.algorithms.moments import Mean, Moments, Sum, Variance
from running_stats.algorithms.normal import Normal
from running_stats.core.base import RunningStatistic
from running_stats.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

Statistic = Union[
    Beta,
    CountMap,
    EmpiricalCdf,
    Extrema,
    Histogram,
    Mean,
    Moments,
    Normal,
    Sum,
    Variance,
]

STATISTIC_TYPES: Dict[str, Type[RunningStatistic]] = {
    cls.__name__: cls
    for cls in (
        Beta,
        CountMap,
        EmpiricalCdf,
        Extrema,
        Histogram,
        Mean,
        Moments,
        Normal,
        Sum,
        Variance,
    )
}

S = TypeVar("S", bound=RunningStatistic)


def load_statistic(data: Dict[str, Any]) -> Statistic:
    """
    Rebuild a statistic of any known kind from its to_dict snapshot.

    Args:
        data: A dictionary produced by to_dict.

    Returns:
        The restored statistic.

    Raises:
        ValueError: If the type tag is missing or unknown.
    """
    type_name = data.get("type")
    if type_name not in STATISTIC_TYPES:
        raise ValueError(f"Unknown statistic type: {type_name!r}")
    return STATISTIC_TYPES[type_name].from_dict(data)


def combine(a: S, b: S) -> S:
    """Merge two statistics into a new one without modifying either."""
    return a.combine(b)


def merge_all(stats: Sequence[S]) -> S:
    """
    Reduce partial statistics of the same kind into a new one.

    Statistics are combined pairwise in a balanced tree. None of the inputs
    is modified.

    Args:
        stats: A non-empty sequence of statistics of the same type.

    Returns:
        A new statistic holding the observations of all inputs.

    Raises:
        InvalidArgumentError: If stats is empty.
        IncompatibleMergeError: If the statistics cannot be merged.
    """
    level = list(stats)
    if not level:
        raise InvalidArgumentError("merge_all needs at least one statistic")
    if len(level) == 1:
        return level[0].clone()

    logger.debug("Reducing %d %s statistics", len(level), type(level[0]).__name__)
    while len(level) > 1:
        reduced = [level[i].combine(level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            reduced.append(level[-1])
        level = reduced
    return level[0]
