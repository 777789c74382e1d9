import numpy as np
import pandas as pd
import pytest

from housing_rf import config
from housing_rf.exceptions import SchemaError, ImputationError
from housing_rf.preprocessing import (
    rename_columns, select_features, normalize_table, add_log_target,
    inverse_log_target, impute_with_column_means, prepare_tables
)


def test_rename_columns_maps_digit_names(raw_train):
    renamed = rename_columns(raw_train)
    assert {'FirstFlrSF', 'SecondFlrSF', 'ThreeSsnPorch'} <= set(renamed.columns)
    assert '1stFlrSF' not in renamed.columns
    assert '1stFlrSF' in raw_train.columns


def test_rename_columns_missing_source_column(raw_train):
    with pytest.raises(SchemaError) as exc_info:
        rename_columns(raw_train.drop(columns=['3SsnPorch']))
    assert exc_info.value.details['missing_columns'] == ['3SsnPorch']
    assert exc_info.value.stage == "normalize"


def test_normalized_tables_share_column_order(raw_train, raw_test):
    train = normalize_table(raw_train, labeled=True)
    test = normalize_table(raw_test, labeled=False)

    assert list(train.columns) == ['Id'] + config.FEATURE_COLUMNS + ['SalePrice']
    assert list(test.columns) == ['Id'] + config.FEATURE_COLUMNS
    assert 'MSZoning' not in train.columns


def test_select_features_reports_every_missing_column(raw_test):
    df = rename_columns(raw_test).drop(columns=['LotArea', 'PoolArea'])
    with pytest.raises(SchemaError) as exc_info:
        select_features(df)
    assert exc_info.value.details['missing_columns'] == ['LotArea', 'PoolArea']


def test_select_features_requires_target_for_labeled(raw_test):
    with pytest.raises(SchemaError):
        normalize_table(raw_test, labeled=True)


def test_log_target_scenario():
    df = pd.DataFrame({'SalePrice': [100.0, 200.0], 'featureA': [5.0, np.nan]})

    with_target = add_log_target(df)
    np.testing.assert_allclose(with_target['logSalePrice'], [4.61512, 5.30330], atol=1e-4)

    imputed, values = impute_with_column_means(with_target, ['featureA'])
    assert imputed['featureA'].tolist() == [5.0, 5.0]
    assert values == {'featureA': 5.0}


def test_log_target_of_zero_price_is_zero():
    out = add_log_target(pd.DataFrame({'SalePrice': [0.0]}))
    assert out['logSalePrice'].iloc[0] == 0.0


def test_add_log_target_rejects_missing_price():
    with pytest.raises(SchemaError):
        add_log_target(pd.DataFrame({'SalePrice': [100.0, np.nan]}))


def test_log_transform_round_trip():
    prices = np.array([0.0, 1.0, 12345.0, 755000.0])
    restored = inverse_log_target(np.log1p(prices))
    np.testing.assert_allclose(restored, prices, rtol=1e-12)


def test_imputation_leaves_observed_and_unlisted_values_alone():
    df = pd.DataFrame({
        'a': [1.0, np.nan, 3.0],
        'b': [np.nan, 2.0, np.nan],
    })

    imputed, _ = impute_with_column_means(df, ['a'])

    assert imputed['a'].tolist() == [1.0, 2.0, 3.0]
    assert imputed['b'].isna().sum() == 2
    assert df['a'].isna().sum() == 1


def test_imputation_all_missing_column_fails():
    df = pd.DataFrame({'a': [np.nan, np.nan], 'b': [1.0, 2.0]})
    with pytest.raises(ImputationError, match="no observed values") as exc_info:
        impute_with_column_means(df, ['b', 'a'], table="unlabeled table")
    assert exc_info.value.details['column'] == 'a'
    assert exc_info.value.stage == "impute"


def test_imputation_uses_each_tables_own_mean():
    train = pd.DataFrame({'a': [10.0, np.nan]})
    test = pd.DataFrame({'a': [100.0, np.nan]})

    train_out, _ = impute_with_column_means(train, ['a'])
    test_out, _ = impute_with_column_means(test, ['a'])

    assert train_out['a'].iloc[1] == 10.0
    assert test_out['a'].iloc[1] == 100.0


def test_prepare_tables(raw_train, raw_test):
    tables = prepare_tables(raw_train, raw_test)
    train, test = tables['train'], tables['test']

    assert train[config.FEATURE_COLUMNS].isna().sum().sum() == 0
    assert test[config.FEATURE_COLUMNS].isna().sum().sum() == 0
    assert 'logSalePrice' in train.columns
    assert 'logSalePrice' not in test.columns
    assert test['Id'].tolist() == raw_test['Id'].tolist()
    assert tables['train_imputation_values']['LotFrontage'] == pytest.approx(
        raw_train['LotFrontage'].mean()
    )


def test_select_features_rejects_text_in_numeric_columns(raw_train):
    raw_train['LotArea'] = raw_train['LotArea'].astype(object)
    raw_train.loc[0, 'LotArea'] = 'abc'

    with pytest.raises(SchemaError) as exc_info:
        normalize_table(raw_train, labeled=True)
    assert exc_info.value.stage == "normalize"
    assert exc_info.value.details['non_numeric_columns'] == ['LotArea']
    assert 'labeled table' in exc_info.value.message


def test_missing_renamed_column_names_the_table(raw_test):
    with pytest.raises(SchemaError) as exc_info:
        normalize_table(raw_test.drop(columns=['1stFlrSF']), labeled=False)
    assert exc_info.value.details['table'] == 'unlabeled table'
    assert exc_info.value.details['missing_columns'] == ['1stFlrSF']


def test_add_log_target_rejects_price_below_minus_one():
    with pytest.raises(SchemaError) as exc_info:
        add_log_target(pd.DataFrame({'SalePrice': [100.0, -2.0]}))
    assert exc_info.value.stage == "target"
    assert exc_info.value.details['invalid_values_columns'] == ['SalePrice']
