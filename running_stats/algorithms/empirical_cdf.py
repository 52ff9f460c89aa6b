"""
Adaptive histogram for approximate quantiles in running-stats.

This module provides EmpiricalCdf, a bounded-memory, mergeable summary of
the distribution of a stream. It keeps at most `num_bins` weighted bins
(centroid, weight), strictly ordered by centroid. When an insertion pushes
the bin count over capacity, the two adjacent bins with the smallest
centroid gap are collapsed into one bin at their weighted average, until
the capacity is respected again.

Unlike a fixed-edge histogram it needs no prior knowledge of the data
range. Compression is deterministic (the leftmost pair wins ties), so the
same input order and capacity always produce the same bins.

References:
    - Ben-Haim, Y., & Tom-Tov, E. (2010).
      A streaming parallel decision tree algorithm.
      Journal of Machine Learning Research, 11, 849-872.
"""

import bisect
import heapq
import logging
from typing import Any, Dict, List, Tuple

from running_stats.algorithms.extrema import Extrema
from running_stats.core.base import RunningStatistic
from running_stats.core.errors import (
    EmptyDistributionError,
    IncompatibleMergeError,
    InvalidArgumentError,
)
from running_stats.core.utils import (
    require_finite,
    require_non_negative,
    require_not_nan,
    smooth,
)

logger = logging.getLogger(__name__)


class _Bin:
    """Internal representation of a bin: a centroid and an integer weight."""

    __slots__ = ["centroid", "weight"]

    def __init__(self, centroid: float, weight: int = 1):
        """Initialize a bin with a centroid and a positive weight."""
        if weight < 1:
            raise InvalidArgumentError(f"Bin weight must be at least 1, got {weight}")
        self.centroid = float(centroid)
        self.weight = int(weight)

    def __lt__(self, other: "_Bin") -> bool:
        """Allow bins to be ordered by centroid."""
        return self.centroid < other.centroid

    def __repr__(self) -> str:
        return f"Bin(centroid={self.centroid:.4g}, weight={self.weight})"

    def to_dict(self) -> Dict[str, Any]:
        return {"centroid": self.centroid, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "_Bin":
        if "centroid" not in data or "weight" not in data:
            raise ValueError("Bin dictionary missing 'centroid' or 'weight'")
        return cls(centroid=data["centroid"], weight=data["weight"])


class EmpiricalCdf(RunningStatistic[float]):
    """
    Approximate distribution of a stream using at most `num_bins` bins.

    Supports insertion, merging of two summaries and quantile/CDF queries.
    The exact minimum and maximum are tracked separately.

    Quantiles treat the bins as a piecewise linear cumulative-weight curve:
    the cumulative weight at bin i is the total weight of bins 0..i, and
    the value for a target weight p * nobs is interpolated between the two
    centroids whose cumulative weights straddle it.

    Inserting a value shifts the bin list, which is linear in num_bins.
    Collapsing m excess bins out of k costs O(k + m log k).
    """

    DEFAULT_NUM_BINS: int = 100
    CAPACITY_POLICIES: Tuple[str, ...] = ("min", "max", "strict")

    def __init__(self, num_bins: int = DEFAULT_NUM_BINS, capacity_policy: str = "min"):
        """
        Initialize an empty EmpiricalCdf.

        Args:
            num_bins: Maximum number of bins kept. Must be a positive integer.
            capacity_policy: How to pick the capacity when merging with a
                summary configured with a different `num_bins`:
                "min" keeps the smaller (stricter) capacity, "max" the
                larger one, and "strict" refuses to merge.

        Raises:
            InvalidArgumentError: If num_bins is not a positive integer or the
                capacity policy is unknown.
        """
        super().__init__()
        if isinstance(num_bins, bool) or not isinstance(num_bins, int) or num_bins < 1:
            raise InvalidArgumentError(f"num_bins must be a positive integer, got {num_bins!r}")
        if capacity_policy not in self.CAPACITY_POLICIES:
            raise InvalidArgumentError(
                f"capacity_policy must be one of {self.CAPACITY_POLICIES}, got {capacity_policy!r}"
            )

        self._num_bins = num_bins
        self._capacity_policy = capacity_policy
        self._bins: List[_Bin] = []
        self._extrema = Extrema()

    def fit(self, value: float, count: int = 1) -> None:
        """
        Add a value to the summary.

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
        self._extrema.fit(value, count)
        self._insert(value, count)
        self._compress(self._num_bins)

    def _insert(self, value: float, weight: int) -> None:
        """Add weight at value, reusing the bin whose centroid equals value."""
        new_bin = _Bin(value)
        i = bisect.bisect_left(self._bins, new_bin)
        if i < len(self._bins) and self._bins[i].centroid == value:
            self._bins[i].weight += weight
        else:
            new_bin.weight = weight
            self._bins.insert(i, new_bin)

    def _compress(self, capacity: int) -> None:
        """
        Collapse nearest neighbours until at most `capacity` bins remain.

        Each step merges the adjacent pair with the smallest centroid gap,
        taking the leftmost pair on ties. The merged centroid is the
        weighted average of the pair, so the ordering is preserved.

        Gaps live in a heap keyed by (gap, left index). Entries go stale
        when either bin changes and are skipped when popped.
        """
        excess = len(self._bins) - capacity
        if excess <= 0:
            return

        centroids = [b.centroid for b in self._bins]
        weights = [b.weight for b in self._bins]
        size = len(centroids)
        prev = list(range(-1, size - 1))
        nxt = list(range(1, size + 1))
        versions = [0] * size

        heap = [(centroids[i + 1] - centroids[i], i, i + 1, 0, 0) for i in range(size - 1)]
        heapq.heapify(heap)

        while excess > 0:
            _, i, j, version_i, version_j = heapq.heappop(heap)
            if versions[i] != version_i or versions[j] != version_j:
                continue

            weight = weights[i] + weights[j]
            centroids[i] = smooth(centroids[i], centroids[j], weights[j] / weight)
            weights[i] = weight
            weights[j] = 0
            versions[i] += 1
            versions[j] += 1

            nxt[i] = nxt[j]
            if nxt[i] < size:
                prev[nxt[i]] = i
                k = nxt[i]
                heapq.heappush(heap, (centroids[k] - centroids[i], i, k, versions[i], versions[k]))
            if prev[i] >= 0:
                h = prev[i]
                heapq.heappush(heap, (centroids[i] - centroids[h], h, i, versions[h], versions[i]))
            excess -= 1

        self._bins = [_Bin(c, w) for c, w in zip(centroids, weights) if w > 0]

    def _merged_capacity(self, other: "EmpiricalCdf") -> int:
        """
        Pick the capacity of a merge result.

        Raises:
            IncompatibleMergeError: If the capacities differ and either
                summary uses the "strict" policy.
        """
        if self._num_bins == other._num_bins:
            return self._num_bins
        if "strict" in (self._capacity_policy, other._capacity_policy):
            raise IncompatibleMergeError(
                f"Cannot merge EmpiricalCdf summaries with different capacities: "
                f"{self._num_bins} != {other._num_bins}"
            )
        if self._capacity_policy == "max":
            return max(self._num_bins, other._num_bins)
        return min(self._num_bins, other._num_bins)

    def merge(self, other: "EmpiricalCdf") -> None:
        """
        Merge another summary into this one.

        Both bin sequences are merged in centroid order (equal centroids add
        their weights) and then compressed to the merged capacity. If the
        capacities differ, this summary's `capacity_policy` decides the new
        capacity, which this summary keeps afterwards. A "strict" policy on
        either side refuses the merge.

        Raises:
            IncompatibleMergeError: If other is not an EmpiricalCdf, or the
                capacities differ and either side uses the "strict" policy.
        """
        self._check_same_type(other)
        capacity = self._merged_capacity(other)
        if capacity != self._num_bins:
            logger.debug(
                "EmpiricalCdf capacity changes from %d to %d on merge (policy=%s)",
                self._num_bins,
                capacity,
                self._capacity_policy,
            )

        other_nobs = other._nobs
        other_bins = [_Bin(b.centroid, b.weight) for b in other._bins]

        combined: List[_Bin] = []
        for b in heapq.merge(self._bins, other_bins):
            if combined and combined[-1].centroid == b.centroid:
                combined[-1].weight += b.weight
            else:
                combined.append(b)

        logger.debug(
            "Merged %d + %d bins into %d, compressing to %d",
            len(self._bins),
            len(other_bins),
            len(combined),
            capacity,
        )

        self._bins = combined
        self._num_bins = capacity
        self._nobs += other_nobs
        self._extrema.merge(other._extrema)
        self._compress(capacity)

    def reset(self) -> None:
        super().reset()
        self._bins = []
        self._extrema.reset()

    def quantile(self, p: float) -> float:
        """
        Estimate the value below which a proportion p of the data falls.

        Args:
            p: Target probability between 0.0 and 1.0. 0.0 returns the
                smallest centroid and 1.0 the largest.

        Returns:
            The interpolated quantile.

        Raises:
            InvalidArgumentError: If p is not between 0.0 and 1.0.
            EmptyDistributionError: If nothing has been fit.
        """
        if not (0.0 <= p <= 1.0):
            raise InvalidArgumentError(f"p must be between 0.0 and 1.0, got {p}")
        if self._nobs == 0:
            raise EmptyDistributionError("Cannot compute a quantile of an empty EmpiricalCdf")

        target = p * self._nobs
        cumulative = 0
        for i, b in enumerate(self._bins):
            previous = cumulative
            cumulative += b.weight
            if cumulative >= target:
                if i == 0:
                    return b.centroid
                # previous < target <= cumulative
                fraction = (target - previous) / b.weight
                return smooth(self._bins[i - 1].centroid, b.centroid, fraction)

        return self._bins[-1].centroid

    def cdf(self, x: float) -> float:
        """
        Estimate the probability that an observation is less than or equal to x.

        This inverts the same piecewise linear curve used by quantile: 0.0
        below the first centroid, 1.0 at or above the last one.

        Raises:
            InvalidArgumentError: If x is NaN.
            EmptyDistributionError: If nothing has been fit.
        """
        x = require_not_nan(x)
        if self._nobs == 0:
            raise EmptyDistributionError("Cannot evaluate the CDF of an empty EmpiricalCdf")

        if x < self._bins[0].centroid:
            return 0.0
        if x >= self._bins[-1].centroid:
            return 1.0

        i = bisect.bisect_right(self._bins, _Bin(x))
        lower = self._bins[i - 1]
        upper = self._bins[i]
        previous = sum(b.weight for b in self._bins[:i])
        fraction = (x - lower.centroid) / (upper.centroid - lower.centroid)
        return (previous + fraction * upper.weight) / self._nobs

    @property
    def median(self) -> float:
        """The estimated median."""
        return self.quantile(0.5)

    @property
    def min(self) -> float:
        """The exact minimum observed, or NaN if empty."""
        return self._extrema.min if self._nobs > 0 else float("nan")

    @property
    def max(self) -> float:
        """The exact maximum observed, or NaN if empty."""
        return self._extrema.max if self._nobs > 0 else float("nan")

    @property
    def num_bins(self) -> int:
        """The configured capacity."""
        return self._num_bins

    @property
    def capacity_policy(self) -> str:
        return self._capacity_policy

    @property
    def bins(self) -> List[Tuple[float, int]]:
        """The current bins as (centroid, weight) tuples in centroid order."""
        return [(b.centroid, b.weight) for b in self._bins]

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update(
            {
                "num_bins": self._num_bins,
                "capacity_policy": self._capacity_policy,
                "bins": [b.to_dict() for b in self._bins],
                "extrema": self._extrema.to_dict(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmpiricalCdf":
        """
        Create an EmpiricalCdf from a dictionary representation.

        Raises:
            ValueError: If the dictionary is missing keys or the bin weights
                do not add up to nobs.
        """
        cls._check_dict(data, ["num_bins", "bins", "extrema"])

        instance = cls(
            num_bins=data["num_bins"],
            capacity_policy=data.get("capacity_policy", "min"),
        )
        try:
            bins = sorted(_Bin.from_dict(b) for b in data["bins"])
        except (ValueError, KeyError) as e:
            raise ValueError(f"Error deserializing bins: {e}") from e

        if sum(b.weight for b in bins) != data["nobs"]:
            raise ValueError("Invalid serialized data: bin weights do not sum to nobs")
        if len(bins) > instance._num_bins:
            raise ValueError("Invalid serialized data: more bins than num_bins")

        instance._bins = bins
        instance._nobs = data["nobs"]
        instance._extrema = Extrema.from_dict(data["extrema"])
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update(
            {
                "num_bins": self._num_bins,
                "bins_used": len(self._bins),
                "min": self.min,
                "max": self.max,
            }
        )
        if self._nobs > 0:
            stats["median"] = self.median
        return stats
