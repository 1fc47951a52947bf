"""Statistic registry for config-driven runs"""

from typing import Any, Callable

from bootci.errors import ConfigurationError
from bootci.statistics.base import Statistic
from bootci.statistics.builtins import LinearRegressionStatistic, MeanStatistic


StatisticFactory = Callable[..., Statistic]

_registry: dict[str, StatisticFactory] = {}


def register_statistic(name: str, factory: StatisticFactory) -> None:
    """Register a statistic factory under ``name``.

    Args:
        name: Registry key used in config files
        factory: Callable taking the config ``params`` as keyword arguments
    """
    _registry[name] = factory


def list_statistics() -> list[str]:
    """List all registered statistic names."""
    return list(_registry.keys())


def get_statistic(name: str, params: dict[str, Any] | None = None) -> Statistic:
    """Build a statistic by registry name.

    Args:
        name: One of ``list_statistics()``, e.g. 'mean' or 'linear_regression'
        params: Keyword arguments for the statistic's constructor
    """
    factory = _registry.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown statistic: {name}. Available: {list_statistics()}"
        )
    try:
        return factory(**(params or {}))
    except TypeError as e:
        raise ConfigurationError(f"Bad parameters for statistic '{name}': {e}") from e


register_statistic("mean", MeanStatistic)
register_statistic("linear_regression", LinearRegressionStatistic)
