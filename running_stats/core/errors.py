"""
Exception types raised by running-stats accumulators.

Configuration problems surface as exceptions immediately. Missing data for
the mean/variance family is reported as NaN instead, since an empty
accumulator is an ordinary state.
"""


class RunningStatsError(Exception):
    """Base class for all errors raised by this library."""


class InvalidArgumentError(RunningStatsError, ValueError):
    """
    Raised for arguments no accumulator can accept.

    Examples are negative repeat counts, non-increasing histogram edges,
    a non-positive bin capacity, or a probability outside [0, 1].
    """


class IncompatibleMergeError(RunningStatsError, TypeError, ValueError):
    """
    Raised when two accumulators cannot be merged.

    This covers accumulators of different concrete kinds as well as
    accumulators of the same kind whose configuration differs in a way
    that makes their state incomparable (e.g. different histogram edges).
    """


class EmptyDistributionError(RunningStatsError, ValueError):
    """Raised when a quantile is requested from an accumulator with no data."""
