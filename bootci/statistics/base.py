"""Statistic evaluator interface"""

from typing import Protocol

from bootci.dataset.dataset import Dataset
from bootci.errors import InvalidInputError
from bootci.schemas import StatisticResult


class Statistic(Protocol):
    """Protocol for statistics evaluated on every bootstrap sample."""

    name: str

    @property
    def required_columns(self) -> tuple[str, ...]:
        """Columns the statistic reads; checked once against the source dataset."""
        ...

    @property
    def dimensions(self) -> tuple[str, ...]:
        """Names of the scalars returned by ``compute``, in order."""
        ...

    def compute(self, sample: Dataset) -> StatisticResult:
        """Evaluate the statistic on one sample.

        Raises:
            InvalidInputError: sample unusable for this statistic
            SingularInputError: statistic undefined for this particular sample
        """
        ...


def validate_columns(statistic: Statistic, dataset: Dataset) -> None:
    """Fail fast if ``dataset`` lacks a column the statistic needs.

    Statistics that only implement ``compute`` declare no columns and pass.
    """
    required = getattr(statistic, "required_columns", ())
    missing = [c for c in required if not dataset.has_column(c)]
    if missing:
        name = getattr(statistic, "name", type(statistic).__name__)
        raise InvalidInputError(
            f"Statistic '{name}' needs columns {missing}; "
            f"dataset has {list(dataset.columns)}"
        )
