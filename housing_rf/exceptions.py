"""
Pipeline Exception Classes

Every failure is fatal at the point of detection. Each exception records the
stage that raised it and structured details naming the column or condition.
"""

from typing import Optional, Dict, Any, List


class PipelineError(Exception):
    """
    Base exception for all pipeline errors.

    Args:
        message: Human-readable description
        stage: Pipeline stage that failed (e.g. 'normalize', 'impute')
        details: Structured context (columns, counts, paths)
    """

    stage = "pipeline"

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if stage is not None:
            self.stage = stage
        self.details = details or {}
        super().__init__(message)


class DataLoadError(PipelineError):
    """Raised when an input file cannot be read."""

    stage = "load"

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Cannot read '{path}': {reason}",
            details={"path": path, "reason": reason}
        )


class SchemaError(PipelineError):
    """Raised when required columns are missing from a table or hold invalid values."""

    stage = "normalize"

    def __init__(
        self,
        columns: List[str],
        table: str = "table",
        stage: Optional[str] = None,
        problem: str = "missing"
    ):
        descriptions = {
            "missing": "is missing required columns",
            "non_numeric": "has non-numeric values in numeric columns",
            "invalid_values": "has missing or out-of-range values in columns",
        }
        message = f"{table} {descriptions[problem]}: {', '.join(columns)}"
        super().__init__(
            message=message,
            stage=stage,
            details={"table": table, "problem": problem, f"{problem}_columns": list(columns)}
        )


class ImputationError(PipelineError):
    """Raised when a designated column has no observed values to average."""

    stage = "impute"

    def __init__(self, column: str, table: str = "table"):
        super().__init__(
            message=f"cannot impute: no observed values in column '{column}' of {table}",
            details={"table": table, "column": column}
        )


class CrossValidationConfigError(PipelineError):
    """Raised when folds or the hyperparameter grid cannot be satisfied."""

    stage = "train"


class InferenceShapeError(PipelineError):
    """Raised when prediction features do not match the trained schema."""

    stage = "predict"

    def __init__(self, expected: Optional[List[str]], actual: List[str]):
        if expected is None:
            super().__init__(
                message="Model has no recorded feature names; pass feature_columns explicitly",
                details={"missing_columns": [], "unexpected_columns": [], "actual_columns": list(actual)}
            )
            return

        missing = [c for c in expected if c not in actual]
        unexpected = [c for c in actual if c not in expected]
        if missing or unexpected:
            reason = f"missing {missing}, unexpected {unexpected}"
        else:
            reason = "columns are out of order"
        super().__init__(
            message=f"Feature columns do not match trained model: {reason}",
            details={"missing_columns": missing, "unexpected_columns": unexpected}
        )


class SubmissionError(PipelineError):
    """Raised when identifiers and predictions cannot be aligned."""

    stage = "format"
