"""
Exact frequency counter for running-stats.

CountMap keeps an exact count for every distinct observation. Merging adds
counts key by key over the union of both key sets. Iteration and reporting
are in ascending key order, so keys must be mutually comparable.
"""

import math
from typing import Any, Dict, Hashable, Iterator, List, Tuple, TypeVar

from running_stats.core.base import RunningStatistic
from running_stats.core.errors import EmptyDistributionError
from running_stats.core.utils import bessel_correction, require_non_negative

K = TypeVar("K", bound=Hashable)


class CountMap(RunningStatistic[K]):
    """
    Exact count of each distinct observation in a stream.

    Unseen keys have a count of 0. Keys with a count of zero are never stored.
    """

    def __init__(self) -> None:
        super().__init__()
        self._counts: Dict[K, int] = {}

    def fit(self, value: K, count: int = 1) -> None:
        """
        Count an observation.

        Args:
            value: A hashable, comparable key.
            count: How many times the key occurred.

        Raises:
            InvalidArgumentError: If count is negative.
        """
        require_non_negative(count)
        if count == 0:
            return
        self._nobs += count
        self._counts[value] = self._counts.get(value, 0) + count

    def merge(self, other: "CountMap[K]") -> None:
        """
        Add the counts of another CountMap to this one, key by key.

        Args:
            other: Another CountMap.

        Raises:
            IncompatibleMergeError: If other is not a CountMap.
        """
        self._check_same_type(other)
        for key, count in list(other._counts.items()):
            self._counts[key] = self._counts.get(key, 0) + count
        self._nobs += other._nobs

    def reset(self) -> None:
        """Forget all keys."""
        super().reset()
        self._counts = {}

    def __getitem__(self, key: K) -> int:
        """The count of key, 0 if it was never seen."""
        return self._counts.get(key, 0)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._counts)

    def keys(self) -> List[K]:
        """Distinct keys in ascending order."""
        return sorted(self._counts)

    def values(self) -> List[int]:
        """Counts in ascending key order."""
        return [self._counts[k] for k in self.keys()]

    def items(self) -> List[Tuple[K, int]]:
        """(key, count) pairs in ascending key order."""
        return [(k, self._counts[k]) for k in self.keys()]

    @property
    def num_unique(self) -> int:
        """The number of distinct keys seen."""
        return len(self._counts)

    def proportions(self) -> Dict[K, float]:
        """The share of observations for each key, in ascending key order."""
        if self._nobs == 0:
            return {}
        return {k: c / self._nobs for k, c in self.items()}

    def _require_data(self) -> None:
        if self._nobs == 0:
            raise EmptyDistributionError("CountMap is empty")

    def mode(self) -> K:
        """
        The most frequent key. Ties go to the smallest key.

        Raises:
            EmptyDistributionError: If nothing has been fit.
        """
        self._require_data()
        best_key, best_count = None, -1
        for key, count in self.items():
            if count > best_count:
                best_key, best_count = key, count
        return best_key

    def min_key(self) -> K:
        """
        The smallest key seen.

        Raises:
            EmptyDistributionError: If nothing has been fit.
        """
        self._require_data()
        return min(self._counts)

    def max_key(self) -> K:
        """
        The largest key seen.

        Raises:
            EmptyDistributionError: If nothing has been fit.
        """
        self._require_data()
        return max(self._counts)

    def sum(self) -> float:
        """The sum of numeric keys weighted by their counts, or NaN if empty."""
        if self._nobs == 0:
            return float("nan")
        return float(sum(k * c for k, c in self.items()))

    def mean(self) -> float:
        """The mean of numeric keys weighted by their counts, or NaN if empty."""
        if self._nobs == 0:
            return float("nan")
        return math.fsum(k * c for k, c in self.items()) / self._nobs

    def variance(self) -> float:
        """The bias-corrected variance of numeric keys (NaN if empty, 0.0 for one observation)."""
        if self._nobs == 0:
            return float("nan")
        if self._nobs == 1:
            return 0.0
        mean = self.mean()
        biased = math.fsum(c * (k - mean) ** 2 for k, c in self.items()) / self._nobs
        return biased * bessel_correction(self._nobs)

    def std(self) -> float:
        """The sample standard deviation of numeric keys."""
        return math.sqrt(self.variance())

    def _standardized_moment(self, order: int) -> float:
        """Mean of ((k - mean) / std) ** order, using the bias-corrected std."""
        if self._nobs == 0:
            return float("nan")
        mean = self.mean()
        std = self.std()
        if std == 0.0:
            return float("nan")
        return math.fsum(c * ((k - mean) / std) ** order for k, c in self.items()) / self._nobs

    def skewness(self) -> float:
        """The skewness of numeric keys, or NaN if empty or all keys are equal."""
        return self._standardized_moment(3)

    def kurtosis(self) -> float:
        """The non-excess kurtosis of numeric keys, or NaN if empty or all keys are equal."""
        return self._standardized_moment(4)

    def excess_kurtosis(self) -> float:
        """The kurtosis minus 3, the kurtosis of a normal distribution."""
        return self.kurtosis() - 3.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the counts as a list of [key, count] pairs in key order."""
        data = self._base_dict()
        data["counts"] = [[k, c] for k, c in self.items()]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CountMap":
        """
        Create a CountMap from a dictionary representation.

        List keys are restored as tuples.

        Raises:
            ValueError: If keys are missing or the counts do not sum to nobs.
        """
        cls._check_dict(data, ["counts"])
        instance = cls()
        for key, count in data["counts"]:
            # JSON turns tuple keys into lists
            if isinstance(key, list):
                key = tuple(key)
            instance.fit(key, count)
        if instance._nobs != data["nobs"]:
            raise ValueError("Invalid serialized data: counts do not sum to nobs")
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["num_unique"] = len(self._counts)
        return stats
