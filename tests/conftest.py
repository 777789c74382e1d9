import numpy as np
import pandas as pd
import pytest

from housing_rf import config
from housing_rf.config import PipelineConfig
from housing_rf.data import HousingData

RAW_NAMES = {new: old for old, new in config.COLUMN_RENAMES.items()}


def make_raw_table(n_rows, labeled, seed=0, start_id=1):
    """Kaggle-shaped table: raw column names, one text column, some gaps."""
    rng = np.random.RandomState(seed)
    data = {'Id': np.arange(start_id, start_id + n_rows)}
    for col in config.FEATURE_COLUMNS:
        data[RAW_NAMES.get(col, col)] = rng.randint(1, 100, size=n_rows).astype(float)
    data['MSZoning'] = rng.choice(['RL', 'RM', 'FV'], size=n_rows)
    df = pd.DataFrame(data)

    df.loc[::4, 'LotFrontage'] = np.nan
    df.loc[1, 'GarageYrBlt'] = np.nan

    if labeled:
        df['SalePrice'] = (
            50000 + 2000 * df['OverallQual'] + 300 * df['GrLivArea'] + rng.randint(0, 5000, size=n_rows)
        ).astype(float)
    return df


@pytest.fixture
def raw_train():
    return make_raw_table(40, labeled=True, seed=1)


@pytest.fixture
def raw_test():
    return make_raw_table(12, labeled=False, seed=2, start_id=1461)


@pytest.fixture
def sample_submission(raw_test):
    return pd.DataFrame({'Id': raw_test['Id'], 'SalePrice': 180000.0})


@pytest.fixture
def housing_data(raw_train, raw_test, sample_submission):
    return HousingData(train=raw_train, test=raw_test, sample_submission=sample_submission)


@pytest.fixture
def small_config():
    return PipelineConfig(
        n_folds=4,
        max_features_grid=[2, 3, 5],
        n_estimators=15,
        n_jobs=1,
        verbose=False
    )


@pytest.fixture
def csv_files(tmp_path, raw_train, raw_test, sample_submission):
    paths = {
        'train': tmp_path / "train.csv",
        'test': tmp_path / "test.csv",
        'sample': tmp_path / "sample_submission.csv",
    }
    raw_train.to_csv(paths['train'], index=False)
    raw_test.to_csv(paths['test'], index=False)
    sample_submission.to_csv(paths['sample'], index=False)
    return {k: str(v) for k, v in paths.items()}
