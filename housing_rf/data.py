"""
Data loading for the housing-sale files.
"""

import os
from typing import NamedTuple

import pandas as pd

from .exceptions import DataLoadError


class HousingData(NamedTuple):
    train: pd.DataFrame
    test: pd.DataFrame
    sample_submission: pd.DataFrame


def read_table(path: str) -> pd.DataFrame:
    """
    Read one delimited file with a header row.

    Column types are inferred by pandas; 'NA' and empty cells become NaN.

    Args:
        path: CSV file path

    Returns:
        DataFrame with inferred dtypes
    """
    if not os.path.exists(path):
        raise DataLoadError(path, "file not found")
    try:
        return pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        raise DataLoadError(path, str(e)) from e


def load_datasets(
    train_path: str,
    test_path: str,
    sample_submission_path: str,
    verbose: bool = False
) -> HousingData:
    """Load the training, test and example-submission tables."""
    data = HousingData(
        train=read_table(train_path),
        test=read_table(test_path),
        sample_submission=read_table(sample_submission_path),
    )

    if verbose:
        print(f"  Train:             {data.train.shape[0]:,} rows × {data.train.shape[1]} columns")
        print(f"  Test:              {data.test.shape[0]:,} rows × {data.test.shape[1]} columns")
        print(f"  Sample submission: {data.sample_submission.shape[0]:,} rows")

    return data
