"""
Model Training Module for Housing Sale Price Regression

This module handles:
1. K-fold partitioning with an explicit seed
2. Random forest grid search over max_features (features tried per split)
3. Prediction back in price space
4. Diagnostics (metrics, feature importance, mean-predictor baseline)

Key Technical Decisions:
- Model: scikit-learn RandomForestRegressor (bagged trees, random feature subsets)
- Target: log1p(SalePrice), scored by RMSE in log space
- Folds are computed once and shared by every candidate
- The seed is passed to folds and forest explicitly, never set globally
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Any

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestRegressor
from sklearn.metrics import r2_score, mean_absolute_error, mean_squared_error
from sklearn.model_selection import GridSearchCV, KFold

from . import config
from .exceptions import CrossValidationConfigError, InferenceShapeError
from .preprocessing import inverse_log_target


Fold = Tuple[np.ndarray, np.ndarray]


@dataclass
class TrainingResult:
    """Output of the grid search: final model plus per-candidate CV errors."""
    model: RandomForestRegressor
    best_max_features: int
    best_rmse: float
    cv_errors: pd.DataFrame
    feature_columns: List[str]
    folds: List[Fold] = field(repr=False, default_factory=list)


def make_folds(n_rows: int, n_folds: int = config.N_FOLDS, random_seed: int = config.RANDOM_SEED) -> List[Fold]:
    """
    Partition row positions into shuffled k folds.

    Args:
        n_rows: Number of labeled rows
        n_folds: Number of folds (k)
        random_seed: Seed for the shuffle

    Returns:
        List of (train_indices, holdout_indices) pairs, one per fold
    """
    if n_folds < 2:
        raise CrossValidationConfigError(
            f"Cross-validation needs at least 2 folds, got {n_folds}",
            details={"n_folds": n_folds}
        )
    if n_folds > n_rows:
        raise CrossValidationConfigError(
            f"Cannot split {n_rows} rows into {n_folds} folds",
            details={"n_folds": n_folds, "n_rows": n_rows}
        )

    kfold = KFold(n_splits=n_folds, shuffle=True, random_state=random_seed)
    return list(kfold.split(np.arange(n_rows)))


def validate_grid(max_features_grid: List[int], n_features: int) -> List[int]:
    """Check every candidate lies in 1..n_features; return the sorted grid."""
    if not max_features_grid:
        raise CrossValidationConfigError(
            "Hyperparameter grid is empty",
            details={"max_features_grid": []}
        )

    invalid = [m for m in max_features_grid if m < 1 or m > n_features]
    if invalid:
        raise CrossValidationConfigError(
            f"max_features candidates {invalid} outside 1..{n_features}",
            details={"invalid_candidates": invalid, "n_features": n_features}
        )

    return sorted(set(max_features_grid))


def train_random_forest(
    X: pd.DataFrame,
    y: pd.Series,
    max_features_grid: List[int] = None,
    n_folds: int = config.N_FOLDS,
    random_seed: int = config.RANDOM_SEED,
    n_estimators: int = config.N_ESTIMATORS,
    n_jobs: int = config.N_JOBS,
    verbose: bool = False
) -> TrainingResult:
    """
    Select max_features by k-fold CV RMSE, then refit on all rows.

    Every candidate is scored on the same folds. A fold's holdout rows are
    never part of that fold's training rows. Ties go to the smaller
    candidate.

    Args:
        X: Imputed feature matrix
        y: Log-transformed target
        max_features_grid: Candidate values for features tried per split
        n_folds: Number of CV folds
        random_seed: Seed for fold shuffling and forest randomization
        n_estimators: Trees per forest
        n_jobs: Parallel jobs for tree building (scikit-learn semantics)
        verbose: Print the CV error table

    Returns:
        TrainingResult with the refit model and the CV error table
    """
    if max_features_grid is None:
        max_features_grid = config.MAX_FEATURES_GRID

    grid = validate_grid(max_features_grid, X.shape[1])
    folds = make_folds(len(X), n_folds=n_folds, random_seed=random_seed)

    estimator = RandomForestRegressor(
        n_estimators=n_estimators,
        random_state=random_seed,
        n_jobs=n_jobs
    )
    search = GridSearchCV(
        estimator,
        param_grid={'max_features': grid},
        scoring='neg_root_mean_squared_error',
        cv=folds,
        refit=True,
        error_score='raise'
    )

    if verbose:
        print(f"  Grid: max_features ∈ {grid}")
        print(f"  Folds: {n_folds}, trees per forest: {n_estimators}, seed: {random_seed}")

    search.fit(X, y)

    results = search.cv_results_
    cv_errors = pd.DataFrame({
        'max_features': [params['max_features'] for params in results['params']],
        'mean_rmse': -results['mean_test_score'],
        'std_rmse': results['std_test_score'],
        'rank': results['rank_test_score'],
    })

    best_max_features = int(search.best_params_['max_features'])
    best_rmse = float(-search.best_score_)

    if verbose:
        print(f"\n{'max_features':>12} {'CV RMSE':>10} {'std':>8}")
        for _, row in cv_errors.iterrows():
            marker = "  <- selected" if row['max_features'] == best_max_features else ""
            print(f"{int(row['max_features']):>12} {row['mean_rmse']:>10.5f} {row['std_rmse']:>8.5f}{marker}")

    return TrainingResult(
        model=search.best_estimator_,
        best_max_features=best_max_features,
        best_rmse=best_rmse,
        cv_errors=cv_errors,
        feature_columns=list(X.columns),
        folds=folds
    )


def predict_prices(model: Any, X: pd.DataFrame, feature_columns: List[str] = None) -> np.ndarray:
    """
    Predict sale prices for an imputed unlabeled table.

    The model predicts log1p(price); the result is expm1 of that, one value
    per input row in input order. Negative values are returned as-is.

    Args:
        model: Fitted regressor trained on log1p(SalePrice)
        X: Feature matrix
        feature_columns: Trained column order (default: model.feature_names_in_)

    Returns:
        Predicted prices
    """
    if feature_columns is None:
        if not hasattr(model, 'feature_names_in_'):
            raise InferenceShapeError(None, list(X.columns))
        feature_columns = list(model.feature_names_in_)

    actual = list(X.columns)
    if actual != list(feature_columns):
        raise InferenceShapeError(list(feature_columns), actual)

    y_pred_log = model.predict(X)
    return inverse_log_target(y_pred_log)


# ==================== DIAGNOSTICS ====================

def compute_metrics(
    y_true_log: np.ndarray,
    y_pred_log: np.ndarray,
    dataset_name: str = "Dataset",
    verbose: bool = False
) -> Dict[str, float]:
    """
    Compute regression metrics.

    - RMSE in log space (the selection criterion)
    - MAE and R² in original price space

    Args:
        y_true_log: True values (log space)
        y_pred_log: Predicted values (log space)
        dataset_name: Name for printing
        verbose: Print the metrics

    Returns:
        Dictionary with rmse_log, mae, r2
    """
    y_true_log = np.asarray(y_true_log, dtype=float)
    y_pred_log = np.asarray(y_pred_log, dtype=float)

    rmse_log = float(np.sqrt(mean_squared_error(y_true_log, y_pred_log)))

    y_true = inverse_log_target(y_true_log)
    y_pred = inverse_log_target(y_pred_log)
    mae = float(mean_absolute_error(y_true, y_pred))
    r2 = float(r2_score(y_true, y_pred))

    if verbose:
        print(f"\n{dataset_name.upper()} METRICS")
        print(f"  RMSE (log): {rmse_log:.5f}")
        print(f"  MAE:        {mae:,.2f}")
        print(f"  R² Score:   {r2:.4f}")

    return {'rmse_log': rmse_log, 'mae': mae, 'r2': r2}


def baseline_cv_rmse(y: pd.Series, folds: List[Fold]) -> float:
    """
    CV RMSE of predicting each fold's training mean.

    A forest that does not beat this number has learned nothing.
    """
    y = np.asarray(y, dtype=float)
    fold_rmse = []
    for train_idx, holdout_idx in folds:
        prediction = y[train_idx].mean()
        fold_rmse.append(np.sqrt(np.mean((y[holdout_idx] - prediction) ** 2)))
    return float(np.mean(fold_rmse))


def get_feature_importance(
    model: RandomForestRegressor,
    feature_columns: List[str],
    top_n: int = 10
) -> pd.DataFrame:
    """
    Impurity-based feature importance from a fitted forest.

    Args:
        model: Fitted RandomForestRegressor
        feature_columns: Column names in training order
        top_n: Number of top features to return

    Returns:
        DataFrame with features sorted by importance
    """
    importance_df = pd.DataFrame({
        'feature': feature_columns,
        'importance': model.feature_importances_
    }).sort_values('importance', ascending=False).reset_index(drop=True)

    return importance_df.head(top_n)
