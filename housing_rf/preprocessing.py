"""
Data Preprocessing Module for Housing Sale Price Regression

This module contains every table transformation applied before training and
prediction:
1. Column renaming for names that are not valid identifiers (e.g. '1stFlrSF')
2. Projection onto Id + the 36 numeric feature columns (+ SalePrice when labeled)
3. log1p target transform and its inverse
4. Per-column mean imputation

All functions return new DataFrames; inputs are never mutated.

NOTE: Imputation statistics are computed per table. The test table is filled
with its own means, not the training means. This train/inference skew is a
known limitation that is kept on purpose to match the reference workflow.
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Tuple

from . import config
from .exceptions import SchemaError, ImputationError


def rename_columns(
    df: pd.DataFrame,
    renames: Dict[str, str] = None,
    table: str = "input table"
) -> pd.DataFrame:
    """
    Rename columns whose source names start with a digit.

    Args:
        df: Raw table
        renames: Mapping of source -> identifier-safe name (default: config.COLUMN_RENAMES)
        table: Name used in error messages

    Returns:
        DataFrame with renamed columns
    """
    if renames is None:
        renames = config.COLUMN_RENAMES

    missing = [col for col in renames if col not in df.columns]
    if missing:
        raise SchemaError(missing, table=table)

    return df.rename(columns=renames)


def select_features(
    df: pd.DataFrame,
    include_target: bool = False,
    feature_columns: List[str] = None
) -> pd.DataFrame:
    """
    Project a renamed table onto the identifier and numeric feature columns.

    Categorical and text columns are discarded. Column order is fixed:
    Id, features..., [SalePrice].

    Args:
        df: Renamed table
        include_target: Keep SalePrice (labeled table only)
        feature_columns: Feature list (default: config.FEATURE_COLUMNS)

    Returns:
        Projected DataFrame
    """
    if feature_columns is None:
        feature_columns = config.FEATURE_COLUMNS

    required = [config.ID_COL] + list(feature_columns)
    if include_target:
        required.append(config.PRICE_COL)

    table = table_name(include_target)

    missing = [col for col in required if col not in df.columns]
    if missing:
        raise SchemaError(missing, table=table)

    # Text in a numeric column makes pandas read the whole column as strings
    non_numeric = [
        col for col in required[1:]
        if not pd.api.types.is_numeric_dtype(df[col])
    ]
    if non_numeric:
        raise SchemaError(non_numeric, table=table, problem="non_numeric")

    return df[required].copy()


def table_name(labeled: bool) -> str:
    return "labeled table" if labeled else "unlabeled table"


def normalize_table(df: pd.DataFrame, labeled: bool) -> pd.DataFrame:
    """Rename then project a raw table."""
    renamed = rename_columns(df, table=table_name(labeled))
    return select_features(renamed, include_target=labeled)


def add_log_target(df: pd.DataFrame) -> pd.DataFrame:
    """
    Append logSalePrice = ln(SalePrice + 1).

    Args:
        df: Labeled table with a non-negative SalePrice column

    Returns:
        DataFrame with the target column appended
    """
    if config.PRICE_COL not in df.columns:
        raise SchemaError([config.PRICE_COL], table="labeled table", stage="target")

    prices = df[config.PRICE_COL]
    if prices.isna().any() or (prices < -1).any():
        raise SchemaError(
            [config.PRICE_COL],
            table="labeled table",
            stage="target",
            problem="invalid_values"
        )

    df = df.copy()
    df[config.TARGET_COL] = np.log1p(prices.astype(float))
    return df


def inverse_log_target(values) -> np.ndarray:
    """Map log-space values back to prices: exp(v) - 1."""
    return np.expm1(np.asarray(values, dtype=float))


def compute_imputation_values(
    df: pd.DataFrame,
    columns: List[str],
    table: str = "table"
) -> Dict[str, float]:
    """
    Compute the mean of observed values for each designated column.

    Raises:
        SchemaError: A designated column is absent
        ImputationError: A designated column has no observed values
    """
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise SchemaError(missing, table=table, stage="impute")

    imputation_values = {}
    for col in columns:
        observed = df[col].dropna()
        if observed.empty:
            raise ImputationError(col, table=table)
        imputation_values[col] = float(observed.mean())

    return imputation_values


def impute_with_column_means(
    df: pd.DataFrame,
    columns: List[str] = None,
    table: str = "table"
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """
    Fill missing values in each designated column with that column's mean.

    The mean comes from the same table. Columns outside `columns` are left
    as they are, missing values included.

    Args:
        df: Input table
        columns: Designated numeric columns (default: config.FEATURE_COLUMNS)
        table: Name used in error messages

    Returns:
        Imputed DataFrame, imputation values used
    """
    if columns is None:
        columns = config.FEATURE_COLUMNS

    imputation_values = compute_imputation_values(df, columns, table=table)

    df = df.copy()
    for col, value in imputation_values.items():
        df[col] = df[col].fillna(value)

    return df, imputation_values


def split_features_and_target(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series]:
    """Return X (feature columns in fixed order) and y (logSalePrice)."""
    X = df[config.FEATURE_COLUMNS]
    y = df[config.TARGET_COL]
    return X, y


# ==================== COMPLETE PREPROCESSING PIPELINE ====================

def prepare_tables(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    verbose: bool = False
) -> Dict[str, object]:
    """
    Run normalization, target transform and imputation on both tables.

    Returns:
        Dictionary containing:
        - train: labeled table with logSalePrice, imputed
        - test: unlabeled table, imputed
        - train_imputation_values, test_imputation_values
    """
    if verbose:
        print("\n[2/7] Normalizing columns...")
    train = normalize_table(train_df, labeled=True)
    test = normalize_table(test_df, labeled=False)
    if verbose:
        print(f"  Kept {len(config.FEATURE_COLUMNS)} numeric features "
              f"(dropped {train_df.shape[1] - train.shape[1]} columns)")

    if verbose:
        print("\n[3/7] Log-transforming target...")
    train = add_log_target(train)

    if verbose:
        print("\n[4/7] Imputing missing values with per-table means...")
    n_missing_train = int(train[config.FEATURE_COLUMNS].isna().sum().sum())
    n_missing_test = int(test[config.FEATURE_COLUMNS].isna().sum().sum())
    train, train_values = impute_with_column_means(train, table="labeled table")
    test, test_values = impute_with_column_means(test, table="unlabeled table")
    if verbose:
        print(f"  Filled {n_missing_train:,} train cells and {n_missing_test:,} test cells")

    return {
        'train': train,
        'test': test,
        'train_imputation_values': train_values,
        'test_imputation_values': test_values,
    }
