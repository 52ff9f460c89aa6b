"""
Success/failure counter for running-stats.

Beta tallies boolean outcomes. Its reported values are those of a Beta
distribution with shape parameters equal to the number of successes and
failures. The distribution functions are evaluated with scipy.stats.
"""

import math
from typing import Any, Dict

from scipy.stats import beta as beta_dist

from running_stats.core.base import RunningStatistic
from running_stats.core.errors import EmptyDistributionError, InvalidArgumentError
from running_stats.core.utils import require_non_negative, require_not_nan


class Beta(RunningStatistic[bool]):
    """
    Counts successes and failures of a stream of boolean outcomes.

    Values that are undefined for the current tallies (for example the
    variance when one tally is zero) are reported as NaN.
    """

    def __init__(self, successes: int = 0, failures: int = 0):
        """
        Initialize the counter, optionally with prior tallies.

        Raises:
            InvalidArgumentError: If either tally is negative.
        """
        super().__init__()
        self._successes = 0
        self._failures = 0
        self.fit_counts(successes, failures)

    def fit(self, value: bool, count: int = 1) -> None:
        """
        Record an outcome.

        Args:
            value: True for a success, False for a failure.
            count: How many times the outcome occurred.

        Raises:
            InvalidArgumentError: If count is negative.
        """
        require_non_negative(count)
        if value:
            self._successes += count
        else:
            self._failures += count
        self._nobs += count

    def fit_counts(self, successes: int = 0, failures: int = 0) -> None:
        """
        Record several successes and failures at once.

        Raises:
            InvalidArgumentError: If either count is negative.
        """
        require_non_negative(successes, "successes")
        require_non_negative(failures, "failures")
        self._successes += successes
        self._failures += failures
        self._nobs += successes + failures

    def merge(self, other: "Beta") -> None:
        """
        Add the tallies of another counter to this one.

        Args:
            other: Another Beta counter.

        Raises:
            IncompatibleMergeError: If other is not a Beta.
        """
        self._check_same_type(other)
        self._successes += other._successes
        self._failures += other._failures
        self._nobs += other._nobs

    def reset(self) -> None:
        """Clear both tallies."""
        super().reset()
        self._successes = 0
        self._failures = 0

    @property
    def successes(self) -> int:
        """The number of successes recorded."""
        return self._successes

    @property
    def failures(self) -> int:
        """The number of failures recorded."""
        return self._failures

    @property
    def mean(self) -> float:
        """The success rate, or NaN if empty."""
        if self._nobs == 0:
            return float("nan")
        return self._successes / self._nobs

    @property
    def variance(self) -> float:
        """Variance of the Beta(successes, failures) distribution, NaN unless both tallies are positive."""
        a, b = self._successes, self._failures
        if a == 0 or b == 0:
            return float("nan")
        n = self._nobs
        return a * b / (n * n * (n + 1))

    @property
    def median(self) -> float:
        """The exact median quantile(0.5), or NaN if empty."""
        if self._nobs == 0:
            return float("nan")
        return self.quantile(0.5)

    @property
    def mode(self) -> float:
        """The mode (a - 1) / (a + b - 2), NaN unless both tallies exceed 1."""
        a, b = self._successes, self._failures
        if a > 1 and b > 1:
            return (a - 1) / (self._nobs - 2)
        return float("nan")

    def pdf(self, x: float) -> float:
        """
        The density of the Beta distribution at x.

        A zero tally puts all mass at an end of [0, 1], where the density
        is infinite.

        Raises:
            InvalidArgumentError: If x is NaN.
        """
        x = require_not_nan(x)
        a, b = self._successes, self._failures
        if x < 0.0 or x > 1.0:
            return 0.0
        if a == 0 and b == 0:
            return math.inf if x in (0.0, 1.0) else 0.0
        if a == 0:
            return math.inf if x == 0.0 else 0.0
        if b == 0:
            return math.inf if x == 1.0 else 0.0
        return float(beta_dist.pdf(x, a, b))

    def cdf(self, x: float) -> float:
        """
        The probability that a Beta-distributed value is at most x.

        Raises:
            InvalidArgumentError: If x is NaN.
            EmptyDistributionError: If nothing has been fit.
        """
        x = require_not_nan(x)
        if self._nobs == 0:
            raise EmptyDistributionError("The CDF of an empty Beta is undefined")
        if x < 0.0:
            return 0.0
        if x >= 1.0:
            return 1.0
        if self._successes == 0:
            return 1.0
        if self._failures == 0:
            return 0.0
        return float(beta_dist.cdf(x, self._successes, self._failures))

    def quantile(self, p: float) -> float:
        """
        The inverse of cdf.

        Args:
            p: Target probability between 0.0 and 1.0.

        Raises:
            InvalidArgumentError: If p is not between 0.0 and 1.0.
            EmptyDistributionError: If nothing has been fit.
        """
        if not (0.0 <= p <= 1.0):
            raise InvalidArgumentError(f"p must be between 0.0 and 1.0, got {p}")
        if self._nobs == 0:
            raise EmptyDistributionError("Cannot compute a quantile of an empty Beta")
        if self._successes == 0:
            return 0.0
        if self._failures == 0:
            return 0.0 if p == 0.0 else 1.0
        return float(beta_dist.ppf(p, self._successes, self._failures))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the counter to a dictionary of its two tallies."""
        data = self._base_dict()
        data.update({"successes": self._successes, "failures": self._failures})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Beta":
        """
        Create a counter from a dictionary representation.

        Raises:
            ValueError: If keys are missing or the tallies do not sum to nobs.
        """
        cls._check_dict(data, ["successes", "failures"])
        instance = cls(data["successes"], data["failures"])
        if instance._nobs != data["nobs"]:
            raise ValueError("Invalid serialized data: successes and failures do not sum to nobs")
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update(
            {
                "successes": self._successes,
                "failures": self._failures,
                "mean": self.mean,
            }
        )
        return stats
