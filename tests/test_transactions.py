import numpy as np
import pandas as pd
import pytest

from src.preprocessing.transactions import (
    load_transactions, to_onehot, transactions_from_long, transactions_from_onehot,
    transactions_from_rows, transactions_from_wide
)
from src.rule_mining.itemsets import EmptyInputError


def test_rows_skip_id_blanks_and_placeholders():
    rows = [
        ['T1', 'bread', ' milk ', ''],
        ['T2', 'null', 'undefined'],
        ['', 'eggs'],
        ['T3', '"butter"', 'bread', 'butter'],
        ['T4'],
    ]
    assert transactions_from_rows(rows) == [['bread', 'milk'], ['butter', 'bread']]


def test_rows_without_id():
    assert transactions_from_rows([['a', 'b'], [None, 'c']], has_id=False) == [['a', 'b'], ['c']]


def test_wide_dataframe():
    df = pd.DataFrame({
        'transaction_id': ['1', '2', '3'],
        'item_1': ['bread', 'milk', np.nan],
        'item_2': ['milk', np.nan, np.nan],
    })
    assert transactions_from_wide(df) == [['bread', 'milk'], ['milk']]


def test_wide_dataframe_with_id_not_first():
    df = pd.DataFrame({'a': ['x', 'y'], 'tid': ['1', '2'], 'b': ['z', None]})
    assert transactions_from_wide(df, id_col='tid') == [['x', 'z'], ['y']]


def test_long_dataframe():
    df = pd.DataFrame({
        'order': [10, 10, 11, 10, 12],
        'product': ['bread', 'milk', 'eggs', 'bread', None],
    })
    assert transactions_from_long(df, 'order', 'product') == [['bread', 'milk'], ['eggs']]


def test_long_dataframe_missing_column():
    with pytest.raises(ValueError):
        transactions_from_long(pd.DataFrame({'order': [1]}), 'order', 'product')


def test_onehot_dataframe():
    df = pd.DataFrame({
        'bread': [True, False, True],
        'milk': [1, 0, 0],
        'eggs': [False, False, False],
    })
    assert transactions_from_onehot(df) == [['bread', 'milk'], ['bread']]


def test_to_onehot(basket_transactions):
    encoded = to_onehot(basket_transactions)
    assert list(encoded.columns) == ['bread', 'butter', 'eggs', 'milk']
    assert encoded.shape == (5, 4)
    assert encoded['bread'].sum() == 4
    assert transactions_from_onehot(encoded)[0] == ['bread', 'eggs', 'milk']


def test_load_wide_csv(tmp_path):
    path = tmp_path / 'baskets.csv'
    path.write_text(
        "transaction_id,item1,item2,item3\n"
        "T1,bread,milk,eggs\n"
        "T2,bread,butter,\n"
        "T3,,,\n"
    )
    assert load_transactions(path) == [['bread', 'milk', 'eggs'], ['bread', 'butter']]


def test_load_long_csv(tmp_path):
    path = tmp_path / 'lines.csv'
    path.write_text("order;product\n1;bread\n1;milk\n2;eggs\n")
    transactions = load_transactions(path, layout='long', id_col='order', item_col='product', sep=';')
    assert transactions == [['bread', 'milk'], ['eggs']]


def test_load_long_requires_columns(tmp_path):
    path = tmp_path / 'lines.csv'
    path.write_text("order,product\n1,bread\n")
    with pytest.raises(ValueError):
        load_transactions(path, layout='long')


def test_load_wide_excel(tmp_path):
    path = tmp_path / 'baskets.xlsx'
    pd.DataFrame({
        'id': [1, 2],
        'item1': ['bread', 'milk'],
        'item2': ['butter', None],
    }).to_excel(path, index=False)
    assert load_transactions(path) == [['bread', 'butter'], ['milk']]


def test_load_onehot_excel(tmp_path):
    path = tmp_path / 'onehot.xlsx'
    pd.DataFrame({
        'id': [1, 2],
        'bread': [True, False],
        'milk': [True, True],
    }).to_excel(path, index=False)
    assert load_transactions(path, layout='onehot', id_col='id') == [['bread', 'milk'], ['milk']]


def test_load_unsupported_format(tmp_path):
    path = tmp_path / 'baskets.json'
    path.write_text("[]")
    with pytest.raises(ValueError):
        load_transactions(path)


def test_load_unknown_layout(tmp_path):
    path = tmp_path / 'baskets.csv'
    path.write_text("id,item\n1,a\n")
    with pytest.raises(ValueError):
        load_transactions(path, layout='sparse')


def test_load_file_without_transactions(tmp_path):
    path = tmp_path / 'empty.csv'
    path.write_text("transaction_id,item1\nT1,\n")
    with pytest.raises(EmptyInputError):
        load_transactions(path)


def test_onehot_text_tokens():
    df = pd.DataFrame({
        'bread': ['yes', 'no', 'Y'],
        'milk': ['0', '1', None],
        'eggs': ['false', 'x', ''],
    })
    assert transactions_from_onehot(df) == [['bread'], ['milk', 'eggs'], ['bread']]


def test_onehot_rejects_non_flag_text():
    df = pd.DataFrame({'bread': ['yes', 'wholegrain']})
    with pytest.raises(ValueError):
        transactions_from_onehot(df)


def test_load_onehot_csv_with_text_flags(tmp_path):
    path = tmp_path / 'onehot.csv'
    path.write_text("id,bread,milk,eggs\n1,yes,no,no\n2,no,yes,yes\n3,no,no,no\n")
    assert load_transactions(path, layout='onehot', id_col='id') == [['bread'], ['milk', 'eggs']]
