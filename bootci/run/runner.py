"""End-to-end experiment runner"""

import logging
from datetime import datetime
from pathlib import Path

from bootci.bootstrap.compare import compare_schemes
from bootci.bootstrap.driver import run_bootstrap
from bootci.bootstrap.intervals import summarize
from bootci.config import ExperimentConfig, load_config
from bootci.dataset.dataset import Dataset
from bootci.dataset.load import load_dataset
from bootci.errors import ConfigurationError
from bootci.registry import get_statistic
from bootci.utils.io import write_json

logger = logging.getLogger(__name__)


def make_run_id(experiment_name: str) -> str:
    """Generate timestamped run ID."""
    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    return f"{timestamp}_{experiment_name}"


def resolve_data_path(config_path: Path, data_path: str) -> Path:
    """Dataset path as given, falling back to the config file's directory."""
    path = Path(data_path)
    if path.is_absolute() or path.exists():
        return path
    return config_path.parent / path


def _load(config_path: Path, config: ExperimentConfig) -> Dataset:
    return load_dataset(
        resolve_data_path(config_path, config.dataset.path),
        columns=config.dataset.columns,
        group_column=config.dataset.group_column,
    )


def _make_run_dir(config: ExperimentConfig) -> Path:
    run_dir = Path(config.output.runs_dir) / make_run_id(config.experiment_name)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def run_experiment(config_path: str | Path, show_progress: bool = False) -> Path:
    """Run a complete bootstrap experiment.

    Writes ``distribution.csv``, ``intervals.json`` and ``meta.json`` into a fresh
    run directory.

    Returns:
        Path to run directory
    """
    config_path = Path(config_path)
    config = load_config(config_path)

    dataset = _load(config_path, config)
    statistic = get_statistic(config.statistic.name, config.statistic.params)
    scheme = config.resampling.to_scheme()
    boot = config.bootstrap

    # Point estimate on the full data; a singular full dataset is fatal here
    observed = statistic.compute(dataset)

    distribution, failure_count = run_bootstrap(
        dataset,
        scheme,
        statistic,
        boot.replicates,
        boot.seed,
        max_workers=boot.max_workers,
        failure_threshold=boot.failure_threshold,
        show_progress=show_progress,
    )
    report = summarize(distribution, boot.confidence_level, observed=observed.values)

    run_dir = _make_run_dir(config)
    distribution.to_frame().to_csv(run_dir / "distribution.csv", index=False)
    write_json(run_dir / "intervals.json", report.to_dict())

    meta = {
        "run_id": run_dir.name,
        "config": config.model_dump(),
        "dataset": {
            "records": len(dataset),
            "columns": list(dataset.columns),
            "group_column": dataset.group_column,
        },
        "scheme": scheme.name,
        "statistic": statistic.name,
        "replicates": boot.replicates,
        "failure_count": failure_count,
        "threshold_exceeded": distribution.threshold_exceeded,
        "random_seed": boot.seed,
        "package_versions": _get_package_versions(),
    }
    write_json(run_dir / "meta.json", meta)

    logger.info("Run %s written to %s", run_dir.name, run_dir)
    return run_dir


def compare_experiment(config_path: str | Path, group_key: str | None = None) -> Path:
    """Run the flat-vs-grouped comparison for a config and write ``comparison.csv``.

    The group key defaults to ``resampling.group_key`` then ``dataset.group_column``.
    """
    config_path = Path(config_path)
    config = load_config(config_path)

    key = group_key or config.resampling.group_key or config.dataset.group_column
    if key is None:
        raise ConfigurationError(
            "Scheme comparison needs a group key (resampling.group_key or dataset.group_column)"
        )

    dataset = _load(config_path, config)
    statistic = get_statistic(config.statistic.name, config.statistic.params)
    boot = config.bootstrap

    comparison = compare_schemes(
        dataset,
        key,
        statistic,
        boot.replicates,
        boot.seed,
        confidence_level=boot.confidence_level,
        max_workers=boot.max_workers,
    )

    run_dir = _make_run_dir(config)
    comparison.to_csv(run_dir / "comparison.csv", index=False)
    write_json(run_dir / "meta.json", {
        "run_id": run_dir.name,
        "config": config.model_dump(),
        "group_key": key,
        "package_versions": _get_package_versions(),
    })
    return run_dir


def _get_package_versions() -> dict[str, str]:
    """Get versions of key packages."""
    versions = {}
    packages = ["numpy", "pandas", "scipy", "pydantic"]
    for pkg in packages:
        try:
            mod = __import__(pkg)
            versions[pkg] = getattr(mod, "__version__", "unknown")
        except ImportError:
            versions[pkg] = "not_installed"
    return versions
