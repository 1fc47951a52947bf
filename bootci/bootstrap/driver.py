"""Bootstrap driver: R independently seeded resample-and-evaluate replicates"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import NamedTuple

import numpy as np
from tqdm import tqdm

from bootci.bootstrap.distribution import EmpiricalDistribution
from bootci.dataset.dataset import Dataset
from bootci.errors import ConfigurationError, InvalidInputError, SingularInputError
from bootci.resample.schemes import ResamplingScheme, check_scheme, resample
from bootci.schemas import StatisticResult
from bootci.statistics.base import Statistic, validate_columns

logger = logging.getLogger(__name__)

# Errors absorbed at the replicate boundary; everything else aborts the run.
RECOVERABLE_ERRORS = (SingularInputError,)

# Replicates submitted per worker at a time in the threaded path; bounds memory for large R.
SUBMIT_WINDOW_PER_WORKER = 64


class BootstrapRun(NamedTuple):
    """Result of ``run_bootstrap``; unpacks as ``(distribution, failure_count)``."""
    distribution: EmpiricalDistribution
    failure_count: int


def replicate_rng(seed: int, replicate_index: int) -> np.random.Generator:
    """Generator for one replicate, keyed by ``(seed, replicate_index)``.

    Equal to ``SeedSequence(seed).spawn(R)[replicate_index]`` for any R, so streams
    are independent across replicates and do not depend on execution order.
    """
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(replicate_index,)))


def _run_replicate(
    dataset: Dataset,
    scheme: ResamplingScheme,
    statistic: Statistic,
    seed: int,
    replicate_index: int,
) -> StatisticResult | None:
    """One replicate; returns None when the statistic is undefined for the sample."""
    sample = resample(dataset, scheme, replicate_rng(seed, replicate_index))
    try:
        return statistic.compute(sample)
    except RECOVERABLE_ERRORS as e:
        logger.debug("Replicate %d skipped: %s", replicate_index, e)
        return None


def run_bootstrap(
    dataset: Dataset,
    scheme: ResamplingScheme,
    statistic: Statistic,
    replicate_count: int,
    seed: int,
    max_workers: int = 1,
    failure_threshold: float | None = None,
    show_progress: bool = False,
) -> BootstrapRun:
    """Run ``replicate_count`` bootstrap replicates of ``statistic`` over ``dataset``.

    Args:
        dataset: Source data, shared read-only by all replicates
        scheme: Flat() or Grouped(group_key)
        statistic: Any object satisfying the Statistic protocol
        replicate_count: Number of replicates R (>= 1)
        seed: Top-level seed; replicate i draws from (seed, i)
        max_workers: Thread count; results are identical for any value
        failure_threshold: Failure fraction above which the run is flagged
        show_progress: Show a tqdm progress bar

    Returns:
        BootstrapRun(distribution, failure_count) with len(distribution) ==
        replicate_count - failure_count
    """
    if isinstance(replicate_count, bool) or not isinstance(replicate_count, int) or replicate_count < 1:
        raise InvalidInputError(f"replicate_count must be a positive integer, got {replicate_count!r}")
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise InvalidInputError(f"seed must be a non-negative integer, got {seed!r}")
    seed = int(seed)
    if max_workers < 1:
        raise InvalidInputError(f"max_workers must be >= 1, got {max_workers}")
    if failure_threshold is not None and not 0.0 <= failure_threshold <= 1.0:
        raise InvalidInputError(f"failure_threshold must be in [0, 1], got {failure_threshold}")
    if len(dataset) == 0:
        raise InvalidInputError("Cannot bootstrap an empty dataset")

    check_scheme(dataset, scheme)
    validate_columns(statistic, dataset)

    logger.info(
        "Bootstrapping %s over %d records: %d replicates, %s scheme, seed=%d, workers=%d",
        getattr(statistic, "name", type(statistic).__name__),
        len(dataset), replicate_count, scheme.name, seed, max_workers,
    )

    results: list[tuple[int, StatisticResult]] = []
    failure_count = 0
    names: tuple[str, ...] | None = None

    def collect(index: int, result: StatisticResult | None) -> None:
        nonlocal failure_count, names
        if result is None:
            failure_count += 1
            return
        if names is None:
            names = result.names
        elif result.names != names:
            raise ConfigurationError(
                f"Replicate {index} returned dimensions {list(result.names)}, "
                f"expected {list(names)}"
            )
        results.append((index, result))

    with tqdm(total=replicate_count, desc="Replicates", disable=not show_progress) as pbar:
        if max_workers == 1:
            for i in range(replicate_count):
                collect(i, _run_replicate(dataset, scheme, statistic, seed, i))
                pbar.update(1)
        else:
            executor = ThreadPoolExecutor(max_workers=max_workers)
            window = max_workers * SUBMIT_WINDOW_PER_WORKER
            try:
                for start in range(0, replicate_count, window):
                    future_to_index = {
                        executor.submit(_run_replicate, dataset, scheme, statistic, seed, i): i
                        for i in range(start, min(start + window, replicate_count))
                    }
                    for future in as_completed(future_to_index):
                        collect(future_to_index[future], future.result())
                        pbar.update(1)
            finally:
                # Fatal error: drop replicates that have not started yet
                executor.shutdown(wait=True, cancel_futures=True)

    if names is None:
        names = tuple(getattr(statistic, "dimensions", ()))

    distribution = EmpiricalDistribution.from_results(
        results,
        names,
        requested=replicate_count,
        failure_count=failure_count,
        failure_threshold=failure_threshold,
    )

    if distribution.threshold_exceeded:
        logger.warning(
            "%d of %d replicates failed (%.1f%%), above threshold %.1f%%",
            failure_count, replicate_count,
            100 * distribution.failure_rate, 100 * failure_threshold,
        )
    elif failure_count:
        logger.warning(
            "%d of %d replicates failed and were excluded", failure_count, replicate_count
        )
    logger.info("Bootstrap finished: %d usable replicates", len(distribution))

    return BootstrapRun(distribution, failure_count)
