"""Flat vs grouped resampling comparison"""

import logging

import pandas as pd

from bootci.bootstrap.driver import run_bootstrap
from bootci.bootstrap.intervals import confidence_interval
from bootci.dataset.dataset import Dataset
from bootci.resample.schemes import Flat, Grouped
from bootci.statistics.base import Statistic

logger = logging.getLogger(__name__)


def compare_schemes(
    dataset: Dataset,
    group_key: str,
    statistic: Statistic,
    replicate_count: int,
    seed: int,
    confidence_level: float = 0.95,
    max_workers: int = 1,
) -> pd.DataFrame:
    """Bootstrap the same statistic under both schemes with the same seed.

    Whether uneven group sizes bias the flat interval is an empirical question;
    this only reports both distributions side by side.

    Returns:
        DataFrame with columns scheme, dimension, mean, std_error, lower, upper, failures
    """
    rows = []
    for scheme in (Flat(), Grouped(group_key=group_key)):
        distribution, failure_count = run_bootstrap(
            dataset, scheme, statistic, replicate_count, seed, max_workers=max_workers
        )
        intervals = confidence_interval(distribution, confidence_level)
        means = distribution.mean()
        stds = distribution.std()
        for name, interval in intervals.items():
            rows.append({
                "scheme": scheme.name,
                "dimension": name,
                "mean": means[name],
                "std_error": stds[name],
                "lower": interval.lower,
                "upper": interval.upper,
                "failures": failure_count,
            })

    df = pd.DataFrame(rows)
    logger.info("Scheme comparison:\n%s", df.to_string(index=False))
    return df
