"""
Normal distribution fitted to a stream, for running-stats.
"""

import math
from statistics import NormalDist
from typing import Any, Dict, Iterable, Optional

from running_stats.algorithms.moments import Variance
from running_stats.core.base import RunningStatistic
from running_stats.core.errors import InvalidArgumentError


class Normal(RunningStatistic[float]):
    """
    Fits a normal distribution by tracking the sample mean and variance.

    The density, distribution and quantile functions are NaN until at
    least two distinct values have been fit.
    """

    def __init__(self) -> None:
        super().__init__()
        self._variance = Variance()

    def fit(self, value: float, count: int = 1) -> None:
        self._variance.fit(value, count)
        self._nobs = self._variance.nobs

    def fit_many(self, values: Iterable[float]) -> None:
        self._variance.fit_many(values)
        self._nobs = self._variance.nobs

    def merge(self, other: "Normal") -> None:
        self._check_same_type(other)
        self._variance.merge(other._variance)
        self._nobs = self._variance.nobs

    def reset(self) -> None:
        super().reset()
        self._variance.reset()

    @property
    def mean(self) -> float:
        return self._variance.mean

    @property
    def variance(self) -> float:
        """The bias-corrected variance."""
        return self._variance.value

    @property
    def std(self) -> float:
        return self._variance.std

    def _distribution(self) -> Optional[NormalDist]:
        if self._nobs < 2 or self.std == 0.0:
            return None
        return NormalDist(self.mean, self.std)

    def pdf(self, x: float) -> float:
        dist = self._distribution()
        return dist.pdf(x) if dist is not None else float("nan")

    def cdf(self, x: float) -> float:
        dist = self._distribution()
        return dist.cdf(x) if dist is not None else float("nan")

    def quantile(self, p: float) -> float:
        """
        The value below which a proportion p of the fitted distribution falls.

        Raises:
            InvalidArgumentError: If p is not between 0.0 and 1.0.
        """
        if not (0.0 <= p <= 1.0):
            raise InvalidArgumentError(f"p must be between 0.0 and 1.0, got {p}")
        dist = self._distribution()
        if dist is None:
            return float("nan")
        if p == 0.0:
            return -math.inf
        if p == 1.0:
            return math.inf
        return dist.inv_cdf(p)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data["variance"] = self._variance.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Normal":
        cls._check_dict(data, ["variance"])
        instance = cls()
        instance._variance = Variance.from_dict(data["variance"])
        instance._nobs = instance._variance.nobs
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({"mean": self.mean, "variance": self.variance})
        return stats
