"""
Fixed-edge histogram for running-stats.

This module provides a histogram over a fixed, strictly increasing sequence
of edges. Bins are half-open, closed on the left ([a, b)) or on the right
((a, b]), and the outer boundary of the whole range can be made inclusive
so that values exactly at the first or last edge are counted.

Values outside the range are dropped: they are not counted in `nobs` and
do not raise. Their tallies are kept separately in `out_of_bounds`.
"""

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from running_stats.core.base import RunningStatistic
from running_stats.core.errors import IncompatibleMergeError, InvalidArgumentError
from running_stats.core.utils import require_non_negative, require_not_nan

logger = logging.getLogger(__name__)


@dataclass
class HistogramBin:
    """
    A bin of the histogram.

    Attributes:
        lower: The lower edge.
        upper: The upper edge.
        closed_left: Whether lower itself belongs to the bin.
        closed_right: Whether upper itself belongs to the bin.
        count: The number of observations in the bin.
    """

    lower: float
    upper: float
    closed_left: bool
    closed_right: bool
    count: int = 0

    @property
    def name(self) -> str:
        """The bin in interval notation, e.g. '[0.00, 1.00)'."""
        left = "[" if self.closed_left else "("
        right = "]" if self.closed_right else ")"
        return f"{left}{self.lower:.2f}, {self.upper:.2f}{right}"

    @property
    def midpoint(self) -> float:
        if math.isinf(self.lower):
            return self.lower
        if math.isinf(self.upper):
            return self.upper
        return self.lower + (self.upper - self.lower) / 2

    def contains(self, value: float) -> bool:
        """Check whether value falls in this bin, honouring open/closed ends."""
        if value < self.lower or value > self.upper:
            return False
        if value == self.lower:
            return self.closed_left
        if value == self.upper:
            return self.closed_right
        return True


class Histogram(RunningStatistic[float]):
    """
    Exact counts over bins defined by fixed edges.

    With edges e_0 < e_1 < ... < e_k there are k bins. If left_closed is
    true bin i is [e_i, e_{i+1}), otherwise (e_i, e_{i+1}]. If ends_closed
    is true the open end of the outermost bin is closed as well, so e_k
    (left-closed) or e_0 (right-closed) is counted.
    """

    def __init__(
        self,
        edges: Sequence[float],
        left_closed: bool = True,
        ends_closed: bool = True,
    ):
        """
        Initialize an empty histogram.

        Args:
            edges: At least two strictly increasing numbers.
            left_closed: Whether bins include their left edge.
            ends_closed: Whether the outer boundary of the range is inclusive.

        Raises:
            InvalidArgumentError: If there are fewer than two edges, an edge
                is NaN, or the edges are not strictly increasing.
        """
        super().__init__()
        edges = [require_not_nan(e) for e in edges]
        if len(edges) < 2:
            raise InvalidArgumentError("A histogram needs at least two edges")
        if any(b <= a for a, b in zip(edges, edges[1:])):
            raise InvalidArgumentError("Histogram edges must be strictly increasing")

        self._edges = edges
        self._left_closed = bool(left_closed)
        self._ends_closed = bool(ends_closed)
        self._counts = [0] * (len(edges) - 1)
        self._out_lower = 0
        self._out_upper = 0

    def _locate(self, value: float) -> int:
        """
        Find the bin index for value.

        Returns:
            The bin index, -1 if value is below the range or len(bins) if above.
        """
        first, last = self._edges[0], self._edges[-1]
        num_bins = len(self._counts)

        if value < first:
            return -1
        if value > last:
            return num_bins

        if self._left_closed:
            if value == last:
                return num_bins - 1 if self._ends_closed else num_bins
            return bisect.bisect_right(self._edges, value) - 1

        if value == first:
            return 0 if self._ends_closed else -1
        return bisect.bisect_left(self._edges, value) - 1

    def fit(self, value: float, count: int = 1) -> None:
        """
        Count a value in its bin.

        Values outside the range are tallied in out_of_bounds only.

        Raises:
            InvalidArgumentError: If value is NaN or count is negative.
        """
        value = require_not_nan(value)
        require_non_negative(count)
        if count == 0:
            return

        i = self._locate(value)
        if i < 0:
            self._out_lower += count
            logger.debug("Dropped %d observation(s) of %r below %r", count, value, self._edges[0])
        elif i >= len(self._counts):
            self._out_upper += count
            logger.debug("Dropped %d observation(s) of %r above %r", count, value, self._edges[-1])
        else:
            self._counts[i] += count
            self._nobs += count

    def merge(self, other: "Histogram") -> None:
        """
        Add the counts of another histogram with the same configuration.

        Raises:
            IncompatibleMergeError: If other is not a Histogram or its edges
                or flags differ.
        """
        self._check_same_type(other)
        if (
            self._edges != other._edges
            or self._left_closed != other._left_closed
            or self._ends_closed != other._ends_closed
        ):
            raise IncompatibleMergeError("Cannot merge histograms with different edges or closure flags")

        self._counts = [a + b for a, b in zip(self._counts, other._counts)]
        self._out_lower += other._out_lower
        self._out_upper += other._out_upper
        self._nobs += other._nobs

    def reset(self) -> None:
        super().reset()
        self._counts = [0] * len(self._counts)
        self._out_lower = 0
        self._out_upper = 0

    @property
    def edges(self) -> List[float]:
        return list(self._edges)

    @property
    def left_closed(self) -> bool:
        return self._left_closed

    @property
    def ends_closed(self) -> bool:
        return self._ends_closed

    @property
    def counts(self) -> List[int]:
        """The count of each bin, in edge order."""
        return list(self._counts)

    @property
    def out_of_bounds(self) -> Tuple[int, int]:
        """The number of dropped observations as (below range, above range)."""
        return self._out_lower, self._out_upper

    @property
    def bins(self) -> List[HistogramBin]:
        """Snapshot of the bins with their closure and counts."""
        num_bins = len(self._counts)
        result = []
        for i, count in enumerate(self._counts):
            if self._left_closed:
                closed_left = True
                closed_right = self._ends_closed and i == num_bins - 1
            else:
                closed_left = self._ends_closed and i == 0
                closed_right = True
            result.append(
                HistogramBin(self._edges[i], self._edges[i + 1], closed_left, closed_right, count)
            )
        return result

    def __iter__(self) -> Iterator[HistogramBin]:
        return iter(self.bins)

    def __len__(self) -> int:
        return len(self._counts)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update(
            {
                "edges": list(self._edges),
                "left_closed": self._left_closed,
                "ends_closed": self._ends_closed,
                "counts": list(self._counts),
                "out_of_bounds": [self._out_lower, self._out_upper],
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Histogram":
        cls._check_dict(data, ["edges", "left_closed", "ends_closed", "counts"])
        instance = cls(
            edges=data["edges"],
            left_closed=data["left_closed"],
            ends_closed=data["ends_closed"],
        )
        if len(data["counts"]) != len(instance._counts):
            raise ValueError("Invalid serialized data: counts do not match edges")
        if sum(data["counts"]) != data["nobs"]:
            raise ValueError("Invalid serialized data: counts do not sum to nobs")

        instance._counts = list(data["counts"])
        instance._nobs = data["nobs"]
        instance._out_lower, instance._out_upper = data.get("out_of_bounds", [0, 0])
        return instance

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update(
            {
                "num_bins": len(self._counts),
                "counts": list(self._counts),
                "out_of_bounds": self.out_of_bounds,
            }
        )
        return stats
