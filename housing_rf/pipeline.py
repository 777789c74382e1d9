"""
End-to-end run: Loader -> Normalizer -> Target -> Imputer -> Trainer -> Predictor -> Formatter.

Each stage returns a new table; the first PipelineError stops the run.
"""

from dataclasses import dataclass
from typing import Dict

import pandas as pd

from . import config
from .config import PipelineConfig
from .data import HousingData, load_datasets
from .model import (
    TrainingResult, train_random_forest, predict_prices,
    compute_metrics, baseline_cv_rmse, get_feature_importance
)
from .preprocessing import prepare_tables, split_features_and_target
from .submission import format_submission, write_submission


@dataclass
class PipelineResult:
    submission: pd.DataFrame
    training: TrainingResult
    train_imputation_values: Dict[str, float]
    test_imputation_values: Dict[str, float]
    train_metrics: Dict[str, float]
    baseline_rmse: float
    feature_importance: pd.DataFrame


def run_pipeline(cfg: PipelineConfig, data: HousingData = None) -> PipelineResult:
    """
    Run the complete workflow for one configuration.

    Args:
        cfg: Validated run configuration
        data: Pre-loaded tables (skips reading cfg's paths when given)

    Returns:
        PipelineResult with the submission and training diagnostics
    """
    verbose = cfg.verbose

    if verbose:
        print("=" * 80)
        print("HOUSING SALE PRICE PIPELINE")
        print("=" * 80)
        print("\n[1/7] Loading data...")
    if data is None:
        data = load_datasets(
            cfg.train_path, cfg.test_path, cfg.sample_submission_path, verbose=verbose
        )

    tables = prepare_tables(data.train, data.test, verbose=verbose)
    train, test = tables['train'], tables['test']
    X_train, y_train = split_features_and_target(train)

    if verbose:
        print(f"\n[5/7] Grid search ({cfg.n_folds}-fold CV)...")
    training = train_random_forest(
        X_train, y_train,
        max_features_grid=cfg.max_features_grid,
        n_folds=cfg.n_folds,
        random_seed=cfg.random_seed,
        n_estimators=cfg.n_estimators,
        n_jobs=cfg.n_jobs,
        verbose=verbose
    )

    baseline = baseline_cv_rmse(y_train, training.folds)
    train_metrics = compute_metrics(
        y_train, training.model.predict(X_train), "Train (in-sample)", verbose=verbose
    )
    importance = get_feature_importance(training.model, training.feature_columns)
    if verbose:
        print(f"\n  Mean-predictor CV RMSE: {baseline:.5f}")
        print(f"  Selected max_features={training.best_max_features} "
              f"with CV RMSE {training.best_rmse:.5f}")

    if verbose:
        print("\n[6/7] Predicting test prices...")
    prices = predict_prices(
        training.model, test[config.FEATURE_COLUMNS], training.feature_columns
    )

    if verbose:
        print("\n[7/7] Formatting submission...")
    submission = format_submission(
        test[config.ID_COL], prices, template=data.sample_submission
    )
    if cfg.output_path:
        write_submission(submission, cfg.output_path, verbose=verbose)

    if verbose:
        print("\n" + "=" * 80)
        print("PIPELINE COMPLETE")
        print("=" * 80)

    return PipelineResult(
        submission=submission,
        training=training,
        train_imputation_values=tables['train_imputation_values'],
        test_imputation_values=tables['test_imputation_values'],
        train_metrics=train_metrics,
        baseline_rmse=baseline,
        feature_importance=importance
    )
