"""Empirical distribution of statistic values across bootstrap replicates"""

from typing import Sequence

import numpy as np
import pandas as pd

from bootci.errors import InvalidInputError
from bootci.schemas import StatisticResult


class EmpiricalDistribution:
    """Successful replicate results of one run, one row per replicate.

    Rows are ordered by replicate index. The semantic content is the multiset of
    rows, so every summary here is order-independent.
    """

    def __init__(
        self,
        names: Sequence[str],
        values: np.ndarray,
        replicate_indices: Sequence[int] | np.ndarray | None = None,
        requested: int | None = None,
        failure_count: int = 0,
        failure_threshold: float | None = None,
    ):
        values = np.array(values, dtype=np.float64)
        if values.ndim != 2:
            values = values.reshape(len(values), len(names))
        if replicate_indices is None:
            replicate_indices = np.arange(len(values))
        replicate_indices = np.array(replicate_indices, dtype=np.int64)
        if len(replicate_indices) != len(values):
            raise InvalidInputError(
                f"{len(replicate_indices)} replicate indices for {len(values)} rows"
            )
        values.setflags(write=False)
        replicate_indices.setflags(write=False)

        self._names = tuple(names)
        self._values = values
        self._indices = replicate_indices
        self.failure_count = failure_count
        self.requested = requested if requested is not None else len(values) + failure_count
        self.failure_threshold = failure_threshold

    @classmethod
    def from_results(
        cls,
        results: Sequence[tuple[int, StatisticResult]],
        names: Sequence[str],
        requested: int | None = None,
        failure_count: int = 0,
        failure_threshold: float | None = None,
    ) -> "EmpiricalDistribution":
        """Reduce ``(replicate_index, result)`` pairs, in any order, into a distribution."""
        ordered = sorted(results, key=lambda pair: pair[0])
        values = np.array([result.as_tuple() for _, result in ordered], dtype=np.float64)
        return cls(
            names,
            values.reshape(len(ordered), len(names)),
            replicate_indices=[index for index, _ in ordered],
            requested=requested,
            failure_count=failure_count,
            failure_threshold=failure_threshold,
        )

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return (
            f"EmpiricalDistribution(names={list(self._names)}, size={len(self)}, "
            f"failures={self.failure_count})"
        )

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def array(self) -> np.ndarray:
        """Read-only (R', d) matrix of replicate values."""
        return self._values

    @property
    def replicate_indices(self) -> np.ndarray:
        return self._indices

    @property
    def failure_rate(self) -> float:
        return self.failure_count / self.requested if self.requested else 0.0

    @property
    def threshold_exceeded(self) -> bool:
        if self.failure_threshold is None:
            return False
        return self.failure_rate > self.failure_threshold

    def values(self, name: str) -> np.ndarray:
        """All replicate values of one dimension."""
        try:
            return self._values[:, self._names.index(name)]
        except ValueError:
            raise InvalidInputError(
                f"Unknown dimension '{name}'; available: {list(self._names)}"
            ) from None

    def mean(self) -> dict[str, float]:
        return {name: float(np.mean(self._values[:, j])) for j, name in enumerate(self._names)}

    def std(self) -> dict[str, float]:
        """Bootstrap standard error per dimension (sample std, ddof=1)."""
        if len(self) < 2:
            return {name: float("nan") for name in self._names}
        return {
            name: float(np.std(self._values[:, j], ddof=1))
            for j, name in enumerate(self._names)
        }

    def to_frame(self) -> pd.DataFrame:
        """DataFrame with a ``replicate`` column plus one column per dimension."""
        df = pd.DataFrame(self._values, columns=list(self._names))
        df.insert(0, "replicate", self._indices)
        return df
