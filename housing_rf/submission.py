"""
Submission formatting: identifiers + predicted prices, aligned by position.
"""

import os
from typing import List

import numpy as np
import pandas as pd

from . import config
from .exceptions import SubmissionError


def format_submission(ids, prices, template: pd.DataFrame = None) -> pd.DataFrame:
    """
    Build the two-column submission table in input row order.

    No sorting or deduplication is applied.

    Args:
        ids: Identifier column from the unlabeled table
        prices: Predicted prices, same length and order as ids
        template: Example submission; its two column names are reused

    Returns:
        DataFrame with columns [Id, SalePrice] (or the template's names)
    """
    ids = np.asarray(ids)
    prices = np.asarray(prices, dtype=float)

    if len(ids) != len(prices):
        raise SubmissionError(
            f"Got {len(ids)} identifiers but {len(prices)} predictions",
            details={"n_ids": len(ids), "n_predictions": len(prices)}
        )

    columns = submission_columns(template)
    return pd.DataFrame({columns[0]: ids, columns[1]: prices})


def submission_columns(template: pd.DataFrame = None) -> List[str]:
    if template is None:
        return list(config.SUBMISSION_COLUMNS)

    columns = list(template.columns)
    if len(columns) != 2:
        raise SubmissionError(
            f"Example submission must have exactly 2 columns, found {columns}",
            details={"template_columns": columns}
        )
    return columns


def write_submission(submission: pd.DataFrame, path: str, verbose: bool = False) -> None:
    """Write the submission as CSV with a header row and no index."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    submission.to_csv(path, index=False)

    if verbose:
        print(f"  Submission saved: {path} ({len(submission):,} rows)")
