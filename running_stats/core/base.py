"""
Base class and interface for running-stats accumulators.

This module defines the abstract base class every accumulator implements so
that fitting observations one at a time, fitting them in batches, and
merging independently built accumulators are interchangeable. It also holds
the shared serialization helpers.
"""

import abc
import copy
import json
from typing import (
    Any,
    Dict,
    Generic,
    Iterable,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from running_stats.core.errors import IncompatibleMergeError

T = TypeVar("T")  # Type for the observations being fit
S = TypeVar("S", bound="RunningStatistic")


class RunningStatistic(Generic[T], abc.ABC):
    """
    Abstract base class for all running statistics.

    A running statistic absorbs observations one at a time (or in batches)
    and keeps only the sufficient statistics needed to report its value.
    Two statistics of the same kind built from disjoint streams can be
    merged, and the result is the same (up to floating-point rounding) as
    fitting both streams into a single accumulator. Merging is associative,
    so partial results may be combined in any reduction tree.

    Instances have a single owner: fit, merge and reset must not be called
    concurrently on the same object. Read-only queries on an instance that
    is not being mutated are safe.
    """

    def __init__(self) -> None:
        """Initialize an empty statistic."""
        self._nobs = 0

    @property
    def nobs(self) -> int:
        """Get the number of observations absorbed since creation or last reset."""
        return self._nobs

    @abc.abstractmethod
    def fit(self, value: T, count: int = 1) -> None:
        """
        Absorb one observation.

        Args:
            value: The observation.
            count: How many times the observation occurred. Zero is a no-op.

        Raises:
            InvalidArgumentError: If count is negative.
        """
        pass

    def fit_many(self, values: Iterable[T]) -> None:
        """
        Absorb an ordered sequence of observations.

        This is equivalent to calling fit on each element in order.
        Derived classes may override it with a batch update.

        Args:
            values: The observations.
        """
        for value in values:
            self.fit(value)

    def fit_pairs(self, pairs: Iterable[Tuple[T, int]]) -> None:
        """
        Absorb a sequence of (value, count) pairs.

        Args:
            pairs: Iterable of observations with their repeat counts.
        """
        for value, count in pairs:
            self.fit(value, count)

    @abc.abstractmethod
    def merge(self, other: "RunningStatistic[T]") -> None:
        """
        Merge another statistic of the same kind into this one.

        The other statistic is not modified.

        Args:
            other: Another statistic of the same type.

        Raises:
            IncompatibleMergeError: If other is of a different type or has
                an incompatible configuration.
        """
        pass

    def combine(self: S, other: S) -> S:
        """
        Merge two statistics into a new one, leaving both operands unchanged.

        Args:
            other: Another statistic of the same type.

        Returns:
            A new statistic holding the observations of both.
        """
        result = self.clone()
        result.merge(other)
        return result

    def _check_same_type(self, other: "RunningStatistic[T]") -> None:
        """
        Helper method to check if another statistic is of the same type.

        Raises:
            IncompatibleMergeError: If other is not of the same type.
        """
        if type(other) is not type(self):
            raise IncompatibleMergeError(
                f"Cannot merge {self.__class__.__name__} with {other.__class__.__name__}"
            )

    @abc.abstractmethod
    def reset(self) -> None:
        """
        Reset the statistic to its initial empty state.

        Derived classes must clear their own sufficient statistics and call
        super().reset() so the observation count is cleared as well.
        """
        self._nobs = 0

    def clone(self: S) -> S:
        """Create a deep copy sharing no mutable state with this statistic."""
        return copy.deepcopy(self)

    def clone_empty(self: S) -> S:
        """Create an empty statistic with the same configuration."""
        empty = self.clone()
        empty.reset()
        return empty

    @abc.abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the statistic to a dictionary for serialization.

        Returns:
            A dictionary of the raw sufficient statistics.
        """
        pass

    def _base_dict(self) -> Dict[str, Any]:
        """Create a dictionary with the attributes common to all statistics."""
        return {
            "type": self.__class__.__name__,
            "nobs": self._nobs,
        }

    @classmethod
    def _check_dict(cls, data: Dict[str, Any], required_keys: Iterable[str]) -> None:
        """
        Validate a dictionary produced by to_dict before restoring from it.

        Raises:
            ValueError: If the type tag does not match or keys are missing.
        """
        if "type" not in data:
            raise ValueError(f"Invalid dictionary format for {cls.__name__}. Missing 'type'")

        if data["type"] != cls.__name__:
            raise ValueError(
                f"Dictionary represents class '{data['type']}' but expected '{cls.__name__}'"
            )

        missing_keys = ({"nobs"} | set(required_keys)) - data.keys()
        if missing_keys:
            raise ValueError(
                f"Invalid dictionary format for {cls.__name__}. Missing keys: {missing_keys}"
            )

    @classmethod
    @abc.abstractmethod
    def from_dict(cls: Type[S], data: Dict[str, Any]) -> S:
        """
        Create a statistic from a dictionary representation.

        Args:
            data: The dictionary produced by to_dict.

        Returns:
            A new statistic initialized with the given state.
        """
        pass

    def serialize(self, format: str = "json") -> Union[str, bytes]:
        """
        Serialize the statistic to a string or bytes.

        Args:
            format: The serialization format ('json' or 'binary').

        Returns:
            The serialized representation of the statistic.

        Raises:
            ValueError: If the format is not supported.
        """
        if format == "json":
            return json.dumps(self.to_dict())
        elif format == "binary":
            return json.dumps(self.to_dict()).encode("utf-8")
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    @classmethod
    def deserialize(cls: Type[S], data: Union[str, bytes], format: str = "json") -> S:
        """
        Deserialize a statistic from a string or bytes.

        Args:
            data: The serialized statistic.
            format: The serialization format ('json' or 'binary').

        Returns:
            A new statistic.

        Raises:
            ValueError: If the format is not supported.
        """
        if format == "json":
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return cls.from_dict(json.loads(data))
        elif format == "binary":
            if isinstance(data, str):
                data = data.encode("utf-8")
            return cls.from_dict(json.loads(data.decode("utf-8")))
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get the values this statistic currently reports.

        Derived classes extend the dictionary returned by super().get_stats()
        with their own values.

        Returns:
            A dictionary with the statistic type, nobs and reported values.
        """
        return {
            "type": self.__class__.__name__,
            "nobs": self._nobs,
        }

    @property
    def is_empty(self) -> bool:
        """Check if the statistic has absorbed any observations."""
        return self._nobs == 0

    def __repr__(self) -> str:
        stats = self.get_stats()
        stats.pop("type")
        body = ", ".join(f"{k}={v!r}" for k, v in stats.items())
        return f"{self.__class__.__name__}({body})"
