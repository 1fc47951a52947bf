"""Tests for built-in statistics and the statistic registry"""

import numpy as np
import pytest

from bootci.dataset.dataset import Dataset
from bootci.errors import ConfigurationError, InvalidInputError, SingularInputError
from bootci.registry import get_statistic, list_statistics, register_statistic
from bootci.schemas import StatisticResult
from bootci.statistics.base import validate_columns
from bootci.statistics.builtins import LinearRegressionStatistic, MeanStatistic


def test_mean_statistic():
    ds = Dataset({"y": [1.0, 2.0, 3.0, 4.0, 5.0]})
    result = MeanStatistic("y").compute(ds)

    assert result.names == ("mean",)
    assert result.values["mean"] == pytest.approx(3.0)


def test_mean_missing_column():
    ds = Dataset({"y": [1.0, 2.0]})
    with pytest.raises(InvalidInputError):
        MeanStatistic("x").compute(ds)


def test_regression_recovers_exact_line():
    """Noise-free data gives the generating coefficients."""
    x = np.linspace(0.0, 10.0, 11)
    ds = Dataset({"x": x, "y": 1.5 + 2.0 * x})
    result = LinearRegressionStatistic("y", "x").compute(ds)

    assert result.names == ("intercept", "slope")
    assert result.values["intercept"] == pytest.approx(1.5)
    assert result.values["slope"] == pytest.approx(2.0)


def test_regression_matches_normal_equations():
    rng = np.random.default_rng(0)
    x = rng.normal(size=40)
    y = 0.3 - 1.2 * x + rng.normal(scale=0.5, size=40)
    ds = Dataset({"x": x, "y": y})

    design = np.column_stack([np.ones_like(x), x])
    expected = np.linalg.solve(design.T @ design, design.T @ y)
    result = LinearRegressionStatistic("y", "x").compute(ds)

    assert result.as_tuple() == pytest.approx(tuple(expected))


def test_regression_zero_variance_predictor_is_singular():
    ds = Dataset({"x": [2.0, 2.0, 2.0], "y": [1.0, 2.0, 3.0]})
    with pytest.raises(SingularInputError):
        LinearRegressionStatistic("y", "x").compute(ds)


def test_regression_single_point_is_singular():
    ds = Dataset({"x": [2.0], "y": [1.0]})
    with pytest.raises(SingularInputError):
        LinearRegressionStatistic("y", "x").compute(ds)


def test_validate_columns_is_eager():
    ds = Dataset({"dose": [1.0, 2.0]})
    validate_columns(MeanStatistic("dose"), ds)
    with pytest.raises(InvalidInputError):
        validate_columns(LinearRegressionStatistic("response", "dose"), ds)


def test_registry_builds_builtins():
    assert {"mean", "linear_regression"} <= set(list_statistics())

    stat = get_statistic("linear_regression", {"response_column": "y", "predictor_column": "x"})
    assert isinstance(stat, LinearRegressionStatistic)
    assert stat.required_columns == ("y", "x")


def test_registry_errors():
    with pytest.raises(ConfigurationError):
        get_statistic("median")
    with pytest.raises(ConfigurationError):
        get_statistic("mean", {"col": "y"})


def test_register_custom_statistic():
    """Callers can plug in their own statistic."""
    register_statistic("mean_alias", MeanStatistic)
    stat = get_statistic("mean_alias", {"column": "y"})
    assert stat.compute(Dataset({"y": [2.0, 4.0]})).values == {"mean": 3.0}


def test_validate_columns_accepts_compute_only_statistic():
    class ComputeOnly:
        def compute(self, sample):
            return StatisticResult(values={"n": float(len(sample))})

    validate_columns(ComputeOnly(), Dataset({"y": [1.0]}))
