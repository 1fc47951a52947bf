"""Resampling schemes: flat (row-level) and grouped (cluster-preserving)"""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from bootci.dataset.dataset import Dataset
from bootci.errors import ConfigurationError, InvalidInputError


class Flat(BaseModel):
    """Draw n rows uniformly with replacement from the whole dataset."""
    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return "flat"


class Grouped(BaseModel):
    """Resample rows within each group, keeping every group's size fixed."""
    model_config = ConfigDict(frozen=True)

    group_key: str = Field(..., min_length=1, description="Group column (or numeric column) to partition by")

    @property
    def name(self) -> str:
        return "grouped"


ResamplingScheme = Flat | Grouped


def check_scheme(dataset: Dataset, scheme: ResamplingScheme) -> None:
    """Raise ConfigurationError if ``scheme`` cannot be applied to ``dataset``."""
    if isinstance(scheme, Grouped):
        if not dataset.can_group_by(scheme.group_key):
            if dataset.group_column is None:
                raise ConfigurationError(
                    f"Grouped resampling by '{scheme.group_key}' on an ungrouped dataset"
                )
            raise ConfigurationError(
                f"Group key '{scheme.group_key}' not in dataset "
                f"(group column is '{dataset.group_column}')"
            )
    elif not isinstance(scheme, Flat):
        raise ConfigurationError(f"Unknown resampling scheme: {scheme!r}")


def resample(dataset: Dataset, scheme: ResamplingScheme, rng: np.random.Generator) -> Dataset:
    """Draw one bootstrap sample of ``dataset``.

    Flat: n indices uniform on [0, n) with replacement, records kept in draw order.
    Grouped: for each group G_i (in order of first appearance) draw |G_i| indices
    with replacement from G_i, then concatenate.
    """
    n = len(dataset)
    if n == 0:
        raise InvalidInputError("Cannot resample an empty dataset")
    check_scheme(dataset, scheme)

    if isinstance(scheme, Flat):
        indices = rng.integers(0, n, size=n)
    else:
        parts = [
            members[rng.integers(0, len(members), size=len(members))]
            for members in dataset.group_indices(scheme.group_key).values()
        ]
        indices = np.concatenate(parts)
    return dataset.take(indices)
