"""Built-in statistics: column mean and simple OLS regression"""

import numpy as np
from scipy.stats import linregress

from bootci.dataset.dataset import Dataset
from bootci.errors import InvalidInputError, SingularInputError
from bootci.schemas import StatisticResult


class MeanStatistic:
    """Arithmetic mean of one column."""

    name = "mean"

    def __init__(self, column: str):
        self.column = column

    def __repr__(self) -> str:
        return f"MeanStatistic(column={self.column!r})"

    @property
    def required_columns(self) -> tuple[str, ...]:
        return (self.column,)

    @property
    def dimensions(self) -> tuple[str, ...]:
        return ("mean",)

    def compute(self, sample: Dataset) -> StatisticResult:
        if len(sample) == 0:
            raise InvalidInputError("Cannot compute mean of an empty sample")
        values = sample.column(self.column)
        return StatisticResult(values={"mean": float(np.mean(values))})


class LinearRegressionStatistic:
    """Ordinary least squares fit of ``response = intercept + slope * predictor``.

    A sample whose predictor has zero variance has no unique fit and raises
    SingularInputError, which the bootstrap driver treats as a skipped replicate.
    """

    name = "linear_regression"

    def __init__(self, response_column: str, predictor_column: str):
        self.response_column = response_column
        self.predictor_column = predictor_column

    def __repr__(self) -> str:
        return (
            f"LinearRegressionStatistic(response_column={self.response_column!r}, "
            f"predictor_column={self.predictor_column!r})"
        )

    @property
    def required_columns(self) -> tuple[str, ...]:
        return (self.response_column, self.predictor_column)

    @property
    def dimensions(self) -> tuple[str, ...]:
        return ("intercept", "slope")

    def compute(self, sample: Dataset) -> StatisticResult:
        if len(sample) == 0:
            raise InvalidInputError("Cannot fit a regression on an empty sample")
        x = sample.column(self.predictor_column)
        y = sample.column(self.response_column)

        # linregress raises ValueError for constant x; map it to the recoverable kind
        if len(x) < 2 or np.all(x == x[0]):
            raise SingularInputError(
                f"Predictor '{self.predictor_column}' has zero variance in sample"
            )
        fit = linregress(x, y)
        return StatisticResult(values={
            "intercept": float(fit.intercept),
            "slope": float(fit.slope),
        })
