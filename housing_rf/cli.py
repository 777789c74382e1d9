"""
Command-line entry point.

    python -m housing_rf --train train.csv --test test.csv --output submission.csv
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import config
from .config import PipelineConfig
from .exceptions import PipelineError
from .pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="housing-rf",
        description="Train a random forest on housing sales and write a submission."
    )
    parser.add_argument("--train", default=config.TRAIN_PATH, help="Labeled CSV")
    parser.add_argument("--test", default=config.TEST_PATH, help="Unlabeled CSV")
    parser.add_argument("--sample-submission", default=config.SAMPLE_SUBMISSION_PATH,
                        help="Example submission CSV")
    parser.add_argument("--output", default=config.SUBMISSION_PATH,
                        help="Submission output path ('' to skip writing)")
    parser.add_argument("--seed", type=int, default=config.RANDOM_SEED)
    parser.add_argument("--folds", type=int, default=config.N_FOLDS)
    parser.add_argument("--max-features", type=int, nargs="+", default=config.MAX_FEATURES_GRID,
                        help="Candidate values for features tried per split")
    parser.add_argument("--n-estimators", type=int, default=config.N_ESTIMATORS)
    parser.add_argument("--n-jobs", type=int, default=config.N_JOBS)
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = PipelineConfig(
            train_path=args.train,
            test_path=args.test,
            sample_submission_path=args.sample_submission,
            output_path=args.output or None,
            random_seed=args.seed,
            n_folds=args.folds,
            max_features_grid=args.max_features,
            n_estimators=args.n_estimators,
            n_jobs=args.n_jobs,
            verbose=not args.quiet
        )
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    try:
        run_pipeline(cfg)
    except PipelineError as e:
        print(f"Pipeline failed at stage '{e.stage}': {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
