"""Tests for type 7 quantiles and percentile intervals"""

import numpy as np
import pytest
from pydantic import ValidationError

from bootci.bootstrap.distribution import EmpiricalDistribution
from bootci.bootstrap.intervals import confidence_interval, quantile_type7, summarize
from bootci.errors import InsufficientDataError, InvalidInputError
from bootci.schemas import ConfidenceInterval, StatisticResult


def _distribution(values, name="mean") -> EmpiricalDistribution:
    return EmpiricalDistribution([name], np.asarray(values, dtype=float).reshape(-1, 1))


def test_reference_values_for_1_to_1000():
    """95% interval of 1..1000 matches R's quantile(x, c(.025, .975), type = 7)."""
    dist = _distribution(np.arange(1, 1001))
    interval = confidence_interval(dist, 0.95)["mean"]

    assert interval.lower == pytest.approx(25.975, rel=1e-12)
    assert interval.upper == pytest.approx(975.025, rel=1e-12)
    assert interval.confidence_level == 0.95


def test_order_of_replicates_does_not_matter():
    rng = np.random.default_rng(0)
    values = rng.normal(size=257)
    shuffled = rng.permutation(values)

    a = confidence_interval(_distribution(values), 0.9)["mean"]
    b = confidence_interval(_distribution(shuffled), 0.9)["mean"]
    assert (a.lower, a.upper) == (b.lower, b.upper)


@pytest.mark.parametrize("p", [0.0, 0.01, 0.025, 0.3, 0.5, 0.77, 0.975, 1.0])
def test_quantile_type7_matches_numpy_linear(p):
    values = np.sort(np.random.default_rng(1).exponential(size=101))
    expected = np.quantile(values, p, method="linear")
    assert quantile_type7(values, p) == pytest.approx(expected, rel=1e-12, abs=1e-15)


def test_quantile_type7_small_cases():
    values = np.array([1.0, 2.0, 4.0])
    assert quantile_type7(values, 0.0) == 1.0
    assert quantile_type7(values, 0.25) == 1.5
    assert quantile_type7(values, 0.5) == 2.0
    assert quantile_type7(values, 0.75) == 3.0
    assert quantile_type7(values, 1.0) == 4.0


def test_two_replicates_is_enough():
    interval = confidence_interval(_distribution([1.0, 3.0]), 0.5)["mean"]
    assert interval.lower == pytest.approx(1.5)
    assert interval.upper == pytest.approx(2.5)


def test_insufficient_replicates():
    with pytest.raises(InsufficientDataError) as excinfo:
        confidence_interval(_distribution([1.0]), 0.95)
    assert excinfo.value.achieved == 1
    assert excinfo.value.required == 2


@pytest.mark.parametrize("level", [0.0, 1.0, -0.5, 1.5])
def test_invalid_confidence_level(level):
    with pytest.raises(InvalidInputError):
        confidence_interval(_distribution([1.0, 2.0, 3.0]), level)


def test_each_dimension_independent():
    results = [
        (i, StatisticResult(values={"intercept": float(i), "slope": float(-i)}))
        for i in range(101)
    ]
    dist = EmpiricalDistribution.from_results(results, ["intercept", "slope"])
    intervals = confidence_interval(dist, 0.9)

    assert list(intervals) == ["intercept", "slope"]
    assert intervals["intercept"].lower == pytest.approx(5.0)
    assert intervals["intercept"].upper == pytest.approx(95.0)
    assert intervals["slope"].lower == pytest.approx(-95.0)
    assert intervals["slope"].upper == pytest.approx(-5.0)


def test_from_results_sorts_by_replicate_index():
    results = [
        (2, StatisticResult(values={"mean": 3.0})),
        (0, StatisticResult(values={"mean": 1.0})),
        (1, StatisticResult(values={"mean": 2.0})),
    ]
    dist = EmpiricalDistribution.from_results(results, ["mean"], requested=4, failure_count=1)

    np.testing.assert_array_equal(dist.values("mean"), [1.0, 2.0, 3.0])
    assert dist.failure_rate == pytest.approx(0.25)
    frame = dist.to_frame()
    assert list(frame.columns) == ["replicate", "mean"]
    assert list(frame["replicate"]) == [0, 1, 2]


def test_confidence_interval_is_immutable_and_ordered():
    interval = ConfidenceInterval(name="mean", lower=1.0, upper=2.0, confidence_level=0.95)
    with pytest.raises(ValidationError):
        interval.lower = 0.0
    with pytest.raises(ValidationError):
        ConfidenceInterval(name="mean", lower=3.0, upper=2.0, confidence_level=0.95)


def test_summarize_report():
    dist = EmpiricalDistribution(
        ["mean"], np.arange(1.0, 101.0).reshape(-1, 1), requested=110, failure_count=10,
        failure_threshold=0.05,
    )
    report = summarize(dist, 0.9, observed={"mean": 50.0})

    assert report.replicates == 110
    assert report.successful == 100
    assert report.failure_count == 10
    assert report.threshold_exceeded
    dim = report.dimensions[0]
    assert dim.observed == 50.0
    assert dim.bootstrap_mean == pytest.approx(50.5)
    assert dim.interval.lower == pytest.approx(5.95)
    assert dim.interval.upper == pytest.approx(95.05)


def _r_quantile_type7(x, probs):
    """Vectorised transcription of R's quantile.default(type = 7) arithmetic."""
    x = np.sort(np.asarray(x, dtype=float))
    index = 1 + (len(x) - 1) * np.asarray(probs, dtype=float)
    lo = np.floor(index).astype(int)
    hi = np.ceil(index).astype(int)
    qs = x[lo - 1]
    interpolate = (index > lo) & (x[hi - 1] != qs)
    h = (index - lo)[interpolate]
    qs[interpolate] = (1 - h) * qs[interpolate] + h * x[hi - 1][interpolate]
    return qs


TAIL_PROBS = [0.005, 0.025, 0.05, 0.1, 0.9, 0.95, 0.975, 0.995]


@pytest.mark.parametrize("n", [2, 10, 37, 100, 999, 10_000])
def test_quantile_type7_bit_exact_against_r(n):
    """Bounds reproduce R's type 7 arithmetic exactly, not just approximately."""
    values = np.sort(np.random.default_rng(n).normal(size=n))
    expected = _r_quantile_type7(values, TAIL_PROBS)
    for p, reference in zip(TAIL_PROBS, expected):
        assert quantile_type7(values, p) == reference


def test_confidence_interval_bit_exact_against_r():
    values = np.random.default_rng(10).normal(size=10)
    interval = confidence_interval(_distribution(values), 0.8)["mean"]
    p_lo = (1 - 0.8) / 2
    lower, upper = _r_quantile_type7(values, [p_lo, 1 - p_lo])
    assert interval.lower == lower
    assert interval.upper == upper


def test_quantile_type7_ties_skip_interpolation():
    values = np.array([0.1, 0.1, 0.1, 0.7])
    assert quantile_type7(values, 0.3) == 0.1
