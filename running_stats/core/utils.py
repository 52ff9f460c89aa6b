"""
Small numeric helpers shared by the accumulators.
"""

import math

from running_stats.core.errors import InvalidArgumentError


def require_finite(value: float) -> float:
    """
    Check that a value is a finite number.

    Args:
        value: The value to check.

    Returns:
        The value converted to float.

    Raises:
        InvalidArgumentError: If the value is NaN, infinite, or not numeric.
    """
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Value must be a finite number, got {value!r}") from e
    if not math.isfinite(value):
        raise InvalidArgumentError(f"Value must be a finite number, got {value}")
    return value


def require_not_nan(value: float) -> float:
    """Like require_finite, but infinities are allowed."""
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Value must be a number, got {value!r}") from e
    if math.isnan(value):
        raise InvalidArgumentError("Value must not be NaN")
    return value


def require_non_negative(count: int, name: str = "count") -> int:
    """
    Check that a repeat count is a non-negative integer.

    Raises:
        InvalidArgumentError: If count is negative or not an integer.
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {count!r}")
    if count < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {count}")
    return count


def smooth(a: float, b: float, w: float) -> float:
    """Weighted interpolation from a towards b by weight w."""
    return a + w * (b - a)


def bessel_correction(n: int) -> float:
    """Factor n / (n - 1) turning a biased variance into the sample variance."""
    return n / (n - 1)
