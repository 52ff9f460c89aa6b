"""
Moment accumulators for running-stats.

This module provides single-pass, mergeable accumulators for the sum, mean,
variance and the first four central moments of a stream of numbers.

Variance and higher moments are tracked as sums of powers of deviations
from the running mean (M2, M3, M4) and combined with the pairwise update
formulas of Chan et al. and Pébay. A single observation is treated as a
group of size one, so fitting and merging go through the same formula and
agree exactly.

References:
    - Chan, T. F., Golub, G. H., & LeVeque, R. J. (1979).
      Updating formulae and a pairwise algorithm for computing sample variances.
    - Pébay, P. (2008). Formulas for robust, one-pass parallel computation of
      covariances and arbitrary-order statistical moments. Sandia Report SAND2008-6212.
"""

import math
from typing import Any, Dict, Iterable, List, Tuple

from running_stats.core.base import RunningStatistic
from running_stats.core.utils import require_finite, require_non_negative, smooth


def _combine_variance(
    n_a: int, mean_a: float, m2_a: float, n_b: int, mean_b: float, m2_b: float
) -> Tuple[int, float, float]:
    """
    Combine the (count, mean, M2) of two disjoint groups.

    Returns:
        The (count, mean, M2) of the union of both groups.
    """
    if n_b == 0:
        return n_a, mean_a, m2_a
    if n_a == 0:
        return n_b, mean_b, m2_b

    n = n_a + n_b
    delta = mean_b - mean_a
    mean = mean_a + delta * n_b / n
    m2 = m2_a + m2_b + delta * delta * n_a * n_b / n
    return n, mean, m2


def _combine_moments(
    a: Tuple[int, float, float, float, float], b: Tuple[int, float, float, float, float]
) -> Tuple[int, float, float, float, float]:
    """
    Combine the (count, mean, M2, M3, M4) of two disjoint groups.

    Uses Pébay's pairwise formulas so that the result does not depend on
    the order in which groups are combined beyond floating-point rounding.
    """
    n_a, mean_a, m2_a, m3_a, m4_a = a
    n_b, mean_b, m2_b, m3_b, m4_b = b
    if n_b == 0:
        return a
    if n_a == 0:
        return b

    n = n_a + n_b
    delta = mean_b - mean_a
    delta_n = delta / n
    delta_n2 = delta_n * delta_n
    term1 = delta * delta_n * n_a * n_b

    mean = mean_a + delta * n_b / n
    m2 = m2_a + m2_b + term1
    m3 = (
        m3_a
        + m3_b
        + term1 * delta_n * (n_a - n_b)
        + 3.0 * delta_n * (n_a * m2_b - n_b * m2_a)
    )
    m4 = (
        m4_a
        + m4_b
        + term1 * delta_n2 * (n_a * n_a - n_a * n_b + n_b * n_b)
        + 6.0 * delta_n2 * (n_a * n_a * m2_b + n_b * n_b * m2_a)
        + 4.0 * delta_n * (n_a * m3_b - n_b * m3_a)
    )
    return n, mean, m2, m3, m4


def _finite_list(values: Iterable[float]) -> List[float]:
    return [require_finite(v) for v in values]


class Sum(RunningStatistic[float]):
    """
    Running sum of a stream of numbers.

    The state is trivially additive: merging adds both sums and both counts.
    """

    def __init__(self) -> None:
        super().__init__()
        self._sum = 0.0

    def fit(self, value: float, count: int = 1) -> None:
        """
        Add a value to the sum.

        Args:
            value: A finite number.
            count: How many times to add it.

        Raises:
            InvalidArgumentError: If value is not finite or count is negative.
        """
        value = require_finite(value)
        require_non_negative(count)
        if count == 0:
            return
        self._nobs += count
        self._sum += value * count

    def merge(self, other: "Sum") -> None:
        """
        Add another sum to this one.

        Raises:
            IncompatibleMergeError: If other is not a Sum.
        """
        self._check_same_type(other)
        self._nobs += other._nobs
        self._sum += other._sum

    def reset(self) -> None:
        """Clear the sum."""
        super().reset()
        self._sum = 0.0

    @property
    def value(self) -> float:
        """The sum, or NaN if nothing has been fit."""
        return self._sum if self._nobs > 0 else float("nan")

    def mean(self) -> float:
        """The sum divided by the number of observations, or NaN if empty."""
        return self._sum / self._nobs if self._nobs > 0 else float("nan")

    def __float__(self) -> float:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the count and the sum."""
        data = self._base_dict()
        data["sum"] = self._sum
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sum":
        """
        Create a Sum from a dictionary representation.

        Raises:
            ValueError: If required keys are missing.
        """
        cls._check_dict(data, ["sum"])
        instance = cls()
        instance._nobs = data["nobs"]
        instance._sum = data["sum"]
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["sum"] = self.value
        return stats


class Mean(RunningStatistic[float]):
    """
    Running arithmetic mean of a stream of finite numbers.

    The mean is updated incrementally as mean += (y - mean) * count / n,
    which avoids keeping a large running sum.
    """

    def __init__(self) -> None:
        super().__init__()
        self._mean = 0.0

    def fit(self, value: float, count: int = 1) -> None:
        """
        Add a value to the mean.

        Args:
            value: A finite number.
            count: How many times the value occurred.

        Raises:
            InvalidArgumentError: If value is not finite or count is negative.
        """
        value = require_finite(value)
        require_non_negative(count)
        if count == 0:
            return
        self._nobs += count
        self._mean = smooth(self._mean, value, count / self._nobs)

    def fit_many(self, values: Iterable[float]) -> None:
        """
        Add a batch of values using the batch mean.

        Args:
            values: Finite numbers.
        """
        ys = _finite_list(values)
        if not ys:
            return
        self._nobs += len(ys)
        self._mean = smooth(self._mean, math.fsum(ys) / len(ys), len(ys) / self._nobs)

    def merge(self, other: "Mean") -> None:
        """
        Combine another mean into this one, weighted by observation counts.

        Raises:
            IncompatibleMergeError: If other is not a Mean.
        """
        self._check_same_type(other)
        if other._nobs == 0:
            return
        if self._nobs == 0:
            self._nobs = other._nobs
            self._mean = other._mean
            return
        self._nobs += other._nobs
        self._mean = smooth(self._mean, other._mean, other._nobs / self._nobs)

    def reset(self) -> None:
        """Clear the mean."""
        super().reset()
        self._mean = 0.0

    @property
    def value(self) -> float:
        """The mean, or NaN if nothing has been fit."""
        return self._mean if self._nobs > 0 else float("nan")

    def __float__(self) -> float:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the count and the mean."""
        data = self._base_dict()
        data["mean"] = self._mean
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Mean":
        """
        Create a Mean from a dictionary representation.

        Raises:
            ValueError: If required keys are missing.
        """
        cls._check_dict(data, ["mean"])
        instance = cls()
        instance._nobs = data["nobs"]
        instance._mean = data["mean"]
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["mean"] = self.value
        return stats


class Variance(RunningStatistic[float]):
    """
    Running sample variance of a stream of finite numbers.

    Tracks the count, the mean and M2, the sum of squared deviations from
    the mean. Sequential fits, batch fits and merges all use the same
    parallel combination formula.

    The reported variance uses the Bessel correction M2 / (n - 1). It is
    NaN before any observation and 0.0 after exactly one.
    """

    def __init__(self) -> None:
        super().__init__()
        self._mean = 0.0
        self._m2 = 0.0

    def fit(self, value: float, count: int = 1) -> None:
        """
        Add a value, treated as a group of `count` identical observations.

        Raises:
            InvalidArgumentError: If value is not finite or count is negative.
        """
        value = require_finite(value)
        require_non_negative(count)
        if count == 0:
            return
        self._nobs, self._mean, self._m2 = _combine_variance(
            self._nobs, self._mean, self._m2, count, value, 0.0
        )

    def fit_many(self, values: Iterable[float]) -> None:
        """
        Add a batch of values.

        The batch's own mean and M2 are computed with a two-pass sum and
        then combined with the current state.
        """
        ys = _finite_list(values)
        if not ys:
            return
        mean_b = math.fsum(ys) / len(ys)
        m2_b = math.fsum((y - mean_b) ** 2 for y in ys)
        self._nobs, self._mean, self._m2 = _combine_variance(
            self._nobs, self._mean, self._m2, len(ys), mean_b, m2_b
        )

    def merge(self, other: "Variance") -> None:
        """
        Combine another variance accumulator into this one.

        Args:
            other: A Variance fit on a disjoint part of the stream.

        Raises:
            IncompatibleMergeError: If other is not a Variance.
        """
        self._check_same_type(other)
        self._nobs, self._mean, self._m2 = _combine_variance(
            self._nobs, self._mean, self._m2, other._nobs, other._mean, other._m2
        )

    def reset(self) -> None:
        """Clear the mean and M2."""
        super().reset()
        self._mean = 0.0
        self._m2 = 0.0

    @property
    def mean(self) -> float:
        """The mean, or NaN if nothing has been fit."""
        return self._mean if self._nobs > 0 else float("nan")

    @property
    def value(self) -> float:
        """The sample variance (NaN if empty, 0.0 for a single observation)."""
        if self._nobs == 0:
            return float("nan")
        if self._nobs == 1:
            return 0.0
        return self._m2 / (self._nobs - 1)

    @property
    def std(self) -> float:
        """The sample standard deviation."""
        return math.sqrt(self.value)

    def __float__(self) -> float:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the count, mean and M2."""
        data = self._base_dict()
        data.update({"mean": self._mean, "m2": self._m2})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variance":
        """
        Create a Variance from a dictionary representation.

        Raises:
            ValueError: If required keys are missing.
        """
        cls._check_dict(data, ["mean", "m2"])
        instance = cls()
        instance._nobs = data["nobs"]
        instance._mean = data["mean"]
        instance._m2 = data["m2"]
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({"mean": self.mean, "variance": self.value})
        return stats


class Moments(RunningStatistic[float]):
    """
    Running mean, variance, skewness and kurtosis of a stream of finite numbers.

    Tracks the central moment sums M2, M3 and M4 and combines them with
    Pébay's generalized pairwise formulas.
    """

    def __init__(self) -> None:
        super().__init__()
        self._mean = 0.0
        self._m2 = 0.0
        self._m3 = 0.0
        self._m4 = 0.0

    def _state(self) -> Tuple[int, float, float, float, float]:
        return self._nobs, self._mean, self._m2, self._m3, self._m4

    def _set_state(self, state: Tuple[int, float, float, float, float]) -> None:
        self._nobs, self._mean, self._m2, self._m3, self._m4 = state

    def fit(self, value: float, count: int = 1) -> None:
        """
        Add a value, treated as a group of `count` identical observations.

        Raises:
            InvalidArgumentError: If value is not finite or count is negative.
        """
        value = require_finite(value)
        require_non_negative(count)
        if count == 0:
            return
        self._set_state(_combine_moments(self._state(), (count, value, 0.0, 0.0, 0.0)))

    def fit_many(self, values: Iterable[float]) -> None:
        """Add a batch of values via the batch's own central moments."""
        ys = _finite_list(values)
        if not ys:
            return
        mean_b = math.fsum(ys) / len(ys)
        deviations = [y - mean_b for y in ys]
        batch = (
            len(ys),
            mean_b,
            math.fsum(d * d for d in deviations),
            math.fsum(d * d * d for d in deviations),
            math.fsum(d * d * d * d for d in deviations),
        )
        self._set_state(_combine_moments(self._state(), batch))

    def merge(self, other: "Moments") -> None:
        """
        Combine another Moments accumulator into this one.

        Args:
            other: A Moments fit on a disjoint part of the stream.

        Raises:
            IncompatibleMergeError: If other is not a Moments.
        """
        self._check_same_type(other)
        self._set_state(_combine_moments(self._state(), other._state()))

    def reset(self) -> None:
        """Clear the mean and all central moment sums."""
        super().reset()
        self._mean = 0.0
        self._m2 = 0.0
        self._m3 = 0.0
        self._m4 = 0.0

    @property
    def mean(self) -> float:
        """The first moment, or NaN if empty."""
        return self._mean if self._nobs > 0 else float("nan")

    @property
    def variance(self) -> float:
        """The bias-corrected variance (NaN if empty, 0.0 for one observation)."""
        if self._nobs == 0:
            return float("nan")
        if self._nobs == 1:
            return 0.0
        return self._m2 / (self._nobs - 1)

    @property
    def skewness(self) -> float:
        """
        The sample skewness g1 = sqrt(n) * M3 / M2^1.5.

        NaN if empty or if all observations are equal.
        """
        if self._nobs == 0 or self._m2 == 0.0:
            return float("nan")
        return math.sqrt(self._nobs) * self._m3 / self._m2**1.5

    @property
    def kurtosis(self) -> float:
        """
        The non-excess kurtosis n * M4 / M2^2 (3.0 for a normal distribution).

        NaN if empty or if all observations are equal.
        """
        if self._nobs == 0 or self._m2 == 0.0:
            return float("nan")
        return self._nobs * self._m4 / (self._m2 * self._m2)

    @property
    def excess_kurtosis(self) -> float:
        """The kurtosis relative to a normal distribution."""
        return self.kurtosis - 3.0

    @property
    def is_leptokurtic(self) -> bool:
        """True if the tails are heavier than those of a normal distribution."""
        return self.excess_kurtosis > 0

    @property
    def is_platykurtic(self) -> bool:
        """True if the tails are lighter than those of a normal distribution."""
        return self.excess_kurtosis < 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the count, mean and central moment sums M2 to M4."""
        data = self._base_dict()
        data.update({"mean": self._mean, "m2": self._m2, "m3": self._m3, "m4": self._m4})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Moments":
        """
        Create a Moments from a dictionary representation.

        Raises:
            ValueError: If required keys are missing.
        """
        cls._check_dict(data, ["mean", "m2", "m3", "m4"])
        instance = cls()
        instance._set_state((data["nobs"], data["mean"], data["m2"], data["m3"], data["m4"]))
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update(
            {
                "mean": self.mean,
                "variance": self.variance,
                "skewness": self.skewness,
                "kurtosis": self.kurtosis,
            }
        )
        return stats
