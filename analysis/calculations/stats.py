"""
Statistics primitives.
Pure functions for mean, population variance, standard deviation and z-scores.
"""

import math
import numpy as np
from typing import Sequence, Union

from analysis.errors import EmptyInputError, InvalidInputError

Number = Union[int, float]


def _as_array(xs: Sequence[Number]) -> np.ndarray:
    """Validate a numeric sequence and convert it to a float array."""
    if xs is None or len(xs) == 0:
        raise EmptyInputError("Empty input: need at least 1 value")

    for x in xs:
        if isinstance(x, bool) or not isinstance(x, (int, float, np.integer, np.floating)):
            raise InvalidInputError(f"Non-numeric value not allowed: {x!r}")

    values = np.asarray(xs, dtype=np.float64)

    if np.any(np.isnan(values)):
        raise InvalidInputError("NaN values not allowed")

    if np.any(np.isinf(values)):
        raise InvalidInputError("Infinite values not allowed")

    return values


def mean(xs: Sequence[Number]) -> float:
    """
    Arithmetic mean.

    Args:
        xs: Non-empty sequence of numbers

    Returns:
        Mean as float

    Raises:
        EmptyInputError: If xs is empty
        InvalidInputError: If xs contains NaN, inf or non-numeric values
    """
    return float(np.mean(_as_array(xs)))


def variance(xs: Sequence[Number]) -> float:
    """
    Population variance (divides by n, not n - 1).

    Raises:
        EmptyInputError: If xs is empty
        InvalidInputError: If xs contains NaN, inf or non-numeric values
    """
    return float(np.var(_as_array(xs), ddof=0))


def stddev(xs: Sequence[Number]) -> float:
    """Population standard deviation."""
    return math.sqrt(variance(xs))


def z_score(x: Number, mu: Number, sigma: Number) -> float:
    """
    Signed z-score of x against a (mean, stddev) baseline.

    A zero standard deviation means the baseline has no dispersion, so no
    point can be scored against it and 0.0 is returned.

    Raises:
        InvalidInputError: If sigma is negative or any argument is NaN/inf
    """
    for name, v in (('x', x), ('mean', mu), ('stddev', sigma)):
        if not math.isfinite(v):
            raise InvalidInputError(f"{name} must be finite, got {v}")

    if sigma < 0:
        raise InvalidInputError(f"Standard deviation must be non-negative, got {sigma}")

    if sigma == 0:
        return 0.0

    return (x - mu) / sigma
