"""
Running minimum and maximum for running-stats.
"""

from typing import Any, Dict

from running_stats.core.base import RunningStatistic
from running_stats.core.utils import require_non_negative, require_not_nan


class Extrema(RunningStatistic[float]):
    """
    Tracks the minimum and maximum of a stream and how often each occurred.

    Before any observation the minimum is +inf and the maximum is -inf.
    """

    def __init__(self) -> None:
        super().__init__()
        self._min = float("inf")
        self._max = float("-inf")
        self._min_count = 0
        self._max_count = 0

    def fit(self, value: float, count: int = 1) -> None:
        """
        Record a value.

        Raises:
            InvalidArgumentError: If value is NaN or count is negative.
        """
        value = require_not_nan(value)
        require_non_negative(count)
        if count == 0:
            return

        self._nobs += count

        if value < self._min:
            self._min = value
            self._min_count = 0
        if value > self._max:
            self._max = value
            self._max_count = 0

        if value == self._min:
            self._min_count += count
        if value == self._max:
            self._max_count += count

    def merge(self, other: "Extrema") -> None:
        """
        Combine the extremes of another Extrema into this one.

        Occurrence counts add up when both sides share an extreme.

        Raises:
            IncompatibleMergeError: If other is not an Extrema.
        """
        self._check_same_type(other)
        if other._nobs == 0:
            return

        if other._min == self._min:
            self._min_count += other._min_count
        elif other._min < self._min:
            self._min = other._min
            self._min_count = other._min_count

        if other._max == self._max:
            self._max_count += other._max_count
        elif other._max > self._max:
            self._max = other._max
            self._max_count = other._max_count

        self._nobs += other._nobs

    def reset(self) -> None:
        """Return to the +inf / -inf starting point."""
        super().reset()
        self._min = float("inf")
        self._max = float("-inf")
        self._min_count = 0
        self._max_count = 0

    @property
    def min(self) -> float:
        """The smallest value seen, +inf if empty."""
        return self._min

    @property
    def max(self) -> float:
        """The largest value seen, -inf if empty."""
        return self._max

    @property
    def min_count(self) -> int:
        """How many observations were equal to the minimum."""
        return self._min_count

    @property
    def max_count(self) -> int:
        """How many observations were equal to the maximum."""
        return self._max_count

    @property
    def range(self) -> float:
        """max - min, or NaN if empty."""
        if self._nobs == 0:
            return float("nan")
        return self._max - self._min

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the extremes and their counts."""
        data = self._base_dict()
        data.update(
            {
                "min": self._min,
                "max": self._max,
                "min_count": self._min_count,
                "max_count": self._max_count,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Extrema":
        """
        Create an Extrema from a dictionary representation.

        Raises:
            ValueError: If required keys are missing.
        """
        cls._check_dict(data, ["min", "max", "min_count", "max_count"])
        instance = cls()
        instance._nobs = data["nobs"]
        instance._min = data["min"]
        instance._max = data["max"]
        instance._min_count = data["min_count"]
        instance._max_count = data["max_count"]
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({"min": self._min, "max": self._max})
        return stats
