"""Percentile confidence intervals from an empirical distribution"""

import math
from typing import Mapping

import numpy as np

from bootci.bootstrap.distribution import EmpiricalDistribution
from bootci.errors import InsufficientDataError, InvalidInputError
from bootci.schemas import ConfidenceInterval, DimensionSummary, IntervalReport

MIN_REPLICATES = 2


def quantile_type7(sorted_values: np.ndarray, p: float) -> float:
    """Hyndman-Fan type 7 quantile of already-sorted values.

    Uses the 1-indexed position index = 1 + (n - 1) * p with lo = floor(index),
    hi = ceil(index) and h = index - lo, returning (1 - h) * x[lo] + h * x[hi].
    Interpolation is skipped when x[hi] == x[lo]. This is the arithmetic of R's
    default ``quantile``, so bounds match it bit for bit.
    """
    n = len(sorted_values)
    if n == 0:
        raise InsufficientDataError(0, 1)
    if not 0.0 <= p <= 1.0:
        raise InvalidInputError(f"Probability must be in [0, 1], got {p}")

    index = 1.0 + (n - 1) * float(p)
    lo = math.floor(index)
    hi = math.ceil(index)
    x_lo = float(sorted_values[lo - 1])
    x_hi = float(sorted_values[hi - 1])
    if index > lo and x_hi != x_lo:
        h = index - lo
        return (1.0 - h) * x_lo + h * x_hi
    return x_lo


def _check_level(confidence_level: float) -> None:
    if not 0.0 < confidence_level < 1.0:
        raise InvalidInputError(
            f"confidence_level must be in (0, 1), got {confidence_level}"
        )


def confidence_interval(
    distribution: EmpiricalDistribution,
    confidence_level: float = 0.95,
) -> dict[str, ConfidenceInterval]:
    """Percentile interval per dimension, using type 7 interpolation.

    Bounds are the quantiles at p_lo = (1 - level) / 2 and p_hi = 1 - p_lo of each
    dimension's sorted replicate values.

    Raises:
        InsufficientDataError: fewer than 2 successful replicates
    """
    _check_level(confidence_level)
    achieved = len(distribution)
    if achieved < MIN_REPLICATES:
        raise InsufficientDataError(achieved, MIN_REPLICATES)

    p_lo = (1.0 - confidence_level) / 2.0
    p_hi = 1.0 - p_lo

    intervals = {}
    for name in distribution.names:
        ordered = np.sort(distribution.values(name))
        intervals[name] = ConfidenceInterval(
            name=name,
            lower=quantile_type7(ordered, p_lo),
            upper=quantile_type7(ordered, p_hi),
            confidence_level=confidence_level,
        )
    return intervals


def summarize(
    distribution: EmpiricalDistribution,
    confidence_level: float = 0.95,
    observed: Mapping[str, float] | None = None,
) -> IntervalReport:
    """Interval report combining intervals, bootstrap moments and the full-data estimate."""
    intervals = confidence_interval(distribution, confidence_level)
    means = distribution.mean()
    stds = distribution.std()

    dimensions = [
        DimensionSummary(
            name=name,
            observed=observed.get(name) if observed else None,
            bootstrap_mean=means[name],
            std_error=stds[name],
            interval=interval,
        )
        for name, interval in intervals.items()
    ]
    return IntervalReport(
        replicates=distribution.requested,
        successful=len(distribution),
        failure_count=distribution.failure_count,
        confidence_level=confidence_level,
        threshold_exceeded=distribution.threshold_exceeded,
        dimensions=dimensions,
    )
