"""Immutable tabular container with a fixed numeric schema"""

from numbers import Real
from typing import Any, Hashable, Iterator, Mapping, Sequence

import numpy as np
import pandas as pd

from bootci.errors import InvalidInputError


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class Dataset:
    """Ordered sequence of records sharing one schema of named numeric columns.

    Each record may also carry a group key (stored under ``group_column``) used by
    grouped resampling. The schema is validated once here; afterwards the arrays are
    read-only and the dataset can be shared across workers.
    """

    def __init__(
        self,
        columns: Mapping[str, Sequence[float] | np.ndarray],
        groups: Sequence[Hashable] | np.ndarray | None = None,
        group_column: str | None = None,
    ):
        if not columns:
            raise InvalidInputError("Dataset needs at least one numeric column")
        if groups is not None and group_column is None:
            group_column = "group"
        if group_column is not None and group_column in columns:
            raise InvalidInputError(f"Group column '{group_column}' clashes with a numeric column")

        arrays: dict[str, np.ndarray] = {}
        n: int | None = None
        for name, values in columns.items():
            arr = _to_numeric(name, values)
            if n is None:
                n = len(arr)
            elif len(arr) != n:
                raise InvalidInputError(
                    f"Column '{name}' has {len(arr)} values, expected {n}"
                )
            arrays[name] = _readonly(arr)

        if not n:
            raise InvalidInputError("Dataset must contain at least one record")

        labels = None
        if groups is not None:
            labels = np.asarray(groups, dtype=object) if not isinstance(groups, np.ndarray) else groups.copy()
            if labels.ndim != 1 or len(labels) != n:
                raise InvalidInputError(
                    f"Group labels have {len(labels)} values, expected {n}"
                )
            if pd.isna(labels).any():
                raise InvalidInputError(f"Group column '{group_column}' has missing values")
            labels = _readonly(labels)

        self._columns = arrays
        self._groups = labels
        self._group_column = group_column if labels is not None else None
        self._n = n
        self._group_index_cache: dict[str, dict[Hashable, np.ndarray]] = {}

    @classmethod
    def _from_validated(
        cls,
        columns: dict[str, np.ndarray],
        groups: np.ndarray | None,
        group_column: str | None,
    ) -> "Dataset":
        # Skips validation; inputs come from an already-validated Dataset.
        obj = cls.__new__(cls)
        obj._columns = {name: _readonly(arr) for name, arr in columns.items()}
        obj._groups = _readonly(groups) if groups is not None else None
        obj._group_column = group_column
        obj._n = len(next(iter(columns.values())))
        obj._group_index_cache = {}
        return obj

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, Any]],
        group_column: str | None = None,
    ) -> "Dataset":
        """Build a dataset from uniform-schema records.

        Args:
            records: Mappings from column name to numeric value
            group_column: Optional key holding each record's group label
        """
        if not records:
            raise InvalidInputError("Dataset must contain at least one record")

        schema = set(records[0])
        if group_column is not None and group_column not in schema:
            raise InvalidInputError(f"Group column '{group_column}' missing from records")
        for i, record in enumerate(records):
            if set(record) != schema:
                raise InvalidInputError(
                    f"Record {i} has columns {sorted(record)}, expected {sorted(schema)}"
                )

        names = [name for name in records[0] if name != group_column]
        columns = {name: [record[name] for record in records] for name in names}
        groups = [record[group_column] for record in records] if group_column else None
        return cls(columns, groups=groups, group_column=group_column)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        columns: Sequence[str] | None = None,
        group_column: str | None = None,
    ) -> "Dataset":
        """Build a dataset from a DataFrame, keeping ``columns`` (default: all non-group)."""
        if group_column is not None and group_column not in df.columns:
            raise InvalidInputError(f"Group column '{group_column}' not found in frame")
        names = list(columns) if columns is not None else [c for c in df.columns if c != group_column]
        missing = [name for name in names if name not in df.columns]
        if missing:
            raise InvalidInputError(f"Columns not found in frame: {missing}")
        for name in names:
            if not pd.api.types.is_numeric_dtype(df[name]) or pd.api.types.is_bool_dtype(df[name]):
                raise InvalidInputError(f"Column '{name}' is not numeric (dtype {df[name].dtype})")

        data = {str(name): df[name].to_numpy(dtype=np.float64) for name in names}
        groups = df[group_column].to_numpy(dtype=object) if group_column else None
        return cls(data, groups=groups, group_column=group_column)

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        group = f", group_column={self._group_column!r}" if self._group_column else ""
        return f"Dataset(n={self._n}, columns={list(self._columns)}{group})"

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._columns)

    @property
    def group_column(self) -> str | None:
        return self._group_column

    @property
    def groups(self) -> np.ndarray | None:
        return self._groups

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def column(self, name: str) -> np.ndarray:
        """Read-only float64 values of a numeric column."""
        try:
            return self._columns[name]
        except KeyError:
            raise InvalidInputError(
                f"Column '{name}' not found; available: {list(self._columns)}"
            ) from None

    def records(self) -> Iterator[dict[str, Any]]:
        """Iterate records as plain dicts (group label included under ``group_column``)."""
        for i in range(self._n):
            record: dict[str, Any] = {name: float(arr[i]) for name, arr in self._columns.items()}
            if self._groups is not None:
                record[self._group_column] = self._groups[i]
            yield record

    def take(self, indices: Sequence[int] | np.ndarray) -> "Dataset":
        """New dataset made of the records at ``indices``, in that order."""
        idx = np.asarray(indices, dtype=np.intp)
        if idx.size == 0:
            raise InvalidInputError("Cannot take an empty selection")
        columns = {name: arr[idx] for name, arr in self._columns.items()}
        groups = self._groups[idx] if self._groups is not None else None
        return Dataset._from_validated(columns, groups, self._group_column)

    def can_group_by(self, key: str) -> bool:
        return key == self._group_column or key in self._columns

    def _group_labels(self, key: str) -> np.ndarray:
        if key == self._group_column and self._groups is not None:
            return self._groups
        if key in self._columns:
            return self._columns[key]
        raise KeyError(key)

    def group_indices(self, key: str) -> dict[Hashable, np.ndarray]:
        """Row indices per group, groups in order of first appearance."""
        cached = self._group_index_cache.get(key)
        if cached is not None:
            return cached
        labels = self._group_labels(key)
        codes, uniques = pd.factorize(labels, sort=False)
        partition = {
            uniques[code]: _readonly(np.flatnonzero(codes == code))
            for code in range(len(uniques))
        }
        self._group_index_cache[key] = partition
        return partition

    def group_sizes(self, key: str) -> dict[Hashable, int]:
        return {label: len(idx) for label, idx in self.group_indices(key).items()}


def _to_numeric(name: str, values: Sequence[float] | np.ndarray) -> np.ndarray:
    if isinstance(values, np.ndarray):
        if not np.issubdtype(values.dtype, np.number) or values.dtype == np.bool_:
            raise InvalidInputError(f"Column '{name}' is not numeric (dtype {values.dtype})")
        arr = values.astype(np.float64, copy=True)
    else:
        for i, value in enumerate(values):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidInputError(
                    f"Column '{name}' row {i}: expected a number, got {value!r}"
                )
        arr = np.array([float(v) for v in values], dtype=np.float64)

    if arr.ndim != 1:
        raise InvalidInputError(f"Column '{name}' must be one-dimensional")
    if not np.isfinite(arr).all():
        bad = int(np.flatnonzero(~np.isfinite(arr))[0])
        raise InvalidInputError(f"Column '{name}' row {bad}: non-finite value {arr[bad]}")
    return arr
