"""Load a Dataset from a CSV file"""

from pathlib import Path

import pandas as pd

from bootci.dataset.dataset import Dataset


def load_dataset(
    path: str | Path,
    columns: list[str] | None = None,
    group_column: str | None = None,
) -> Dataset:
    """Load a CSV file into a Dataset.

    Args:
        path: Path to CSV file with a header row
        columns: Numeric columns to keep (default: every column except the group column)
        group_column: Optional column holding group labels for grouped resampling
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    df = pd.read_csv(path)
    return Dataset.from_frame(df, columns=columns, group_column=group_column)
