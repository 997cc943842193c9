"""
Convert uploaded tables into transaction lists.

Supported layouts:
- 'wide':   one row per basket, first column is the transaction id and the
            remaining cells hold items
- 'long':   one row per (transaction id, item) pair
- 'onehot': one boolean column per item
"""
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd
from mlxtend.preprocessing import TransactionEncoder

from src.rule_mining.itemsets import EmptyInputError

MISSING_TOKENS = {'', 'null', 'undefined', 'nan', 'none'}
TRUE_TOKENS = {'1', 'true', 'yes', 'y', 'x'}
FALSE_TOKENS = MISSING_TOKENS | {'0', 'false', 'no', 'n'}


def _clean_item(value: Any) -> Optional[str]:
    """Strip a cell and drop blanks, NaN and placeholder tokens."""
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    item = str(value).strip().strip('"\'').strip()
    if item.lower() in MISSING_TOKENS:
        return None
    return item


def transactions_from_rows(rows: Iterable[Sequence[Any]], has_id: bool = True) -> List[List[str]]:
    """
    Build transactions from raw rows.

    Args:
        rows: Row sequences, e.g. parsed CSV lines without the header
        has_id: If True, the first cell is a transaction id and is skipped.
                Rows whose id is blank are dropped.

    Returns:
        List of transactions (item lists with duplicates removed, order kept).
        Rows without any item are skipped.
    """
    transactions = []
    for row in rows:
        cells = list(row)
        if has_id:
            if not cells or _clean_item(cells[0]) is None:
                continue
            cells = cells[1:]

        items = []
        for cell in cells:
            item = _clean_item(cell)
            if item is not None and item not in items:
                items.append(item)

        if items:
            transactions.append(items)
    return transactions


def transactions_from_wide(df: pd.DataFrame, id_col: Optional[str] = None) -> List[List[str]]:
    """
    Wide layout: one row per basket.

    Args:
        df: Input table
        id_col: Transaction id column. Defaults to the first column; pass
                False to treat every column as an item column.
    """
    if id_col is False:
        return transactions_from_rows(df.itertuples(index=False, name=None), has_id=False)

    id_col = id_col or df.columns[0]
    ordered = df[[id_col] + [c for c in df.columns if c != id_col]]
    return transactions_from_rows(ordered.itertuples(index=False, name=None), has_id=True)


def transactions_from_long(df: pd.DataFrame, id_col: str, item_col: str) -> List[List[str]]:
    """
    Long layout: one row per (transaction id, item).

    Transactions are returned in order of first appearance of their id.
    """
    missing = [c for c in (id_col, item_col) if c not in df.columns]
    if missing:
        raise ValueError(f"Columns not found: {missing}")

    baskets = {}
    for transaction_id, value in df[[id_col, item_col]].itertuples(index=False, name=None):
        if _clean_item(transaction_id) is None:
            continue
        item = _clean_item(value)
        if item is None:
            continue
        basket = baskets.setdefault(transaction_id, [])
        if item not in basket:
            basket.append(item)

    return [items for items in baskets.values() if items]


def _onehot_flags(column: pd.Series) -> pd.Series:
    """Boolean flags for a one-hot column; text cells must be yes/no style tokens."""
    if pd.api.types.is_bool_dtype(column) or pd.api.types.is_numeric_dtype(column):
        return column.fillna(0).astype(bool)

    def flag(value):
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return False
        if isinstance(value, (bool, int, float)):
            return bool(value)
        token = str(value).strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS:
            return False
        raise ValueError(f"Column '{column.name}' is not one-hot encoded: unexpected value {value!r}")

    return column.map(flag).astype(bool)


def transactions_from_onehot(df: pd.DataFrame) -> List[List[str]]:
    """
    One-hot layout: every set cell adds its column name to the basket.

    Boolean and numeric columns count non-zero cells. Text columns accept
    1/0, true/false, yes/no, y/n and x; blanks are unset.

    Raises:
        ValueError: if a text cell is not one of those tokens
    """
    columns = [str(c) for c in df.columns]
    flags = pd.DataFrame({column: _onehot_flags(df[original]) for column, original in zip(columns, df.columns)})
    transactions = []
    for row in flags.itertuples(index=False, name=None):
        items = [column for column, present in zip(columns, row) if present]
        if items:
            transactions.append(items)
    return transactions


def to_onehot(transactions: Iterable[Iterable[str]]) -> pd.DataFrame:
    """Encode transactions as a boolean DataFrame with one column per item."""
    baskets = [sorted(set(transaction)) for transaction in transactions]
    te = TransactionEncoder()
    te_array = te.fit(baskets).transform(baskets)
    return pd.DataFrame(te_array, columns=te.columns_)


def read_table(path, sep: str = ',', as_text: bool = True) -> pd.DataFrame:
    """Read a CSV / Excel / Parquet file; with ``as_text`` every cell is read as a string."""
    path = Path(path)
    dtype = str if as_text else None
    if path.suffix == '.csv':
        return pd.read_csv(path, sep=sep, dtype=dtype)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path, dtype=dtype)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def load_transactions(
    path,
    layout: str = 'wide',
    id_col: Optional[str] = None,
    item_col: Optional[str] = None,
    sep: str = ','
) -> List[List[str]]:
    """
    Read a CSV / Excel / Parquet file and convert it into transactions.

    Args:
        path: Input file
        layout: 'wide', 'long' or 'onehot'
        id_col: Transaction id column ('wide' defaults to the first column)
        item_col: Item column (required for 'long')
        sep: CSV separator

    Raises:
        ValueError: for unknown layouts or file formats
        EmptyInputError: if the file yields no transactions
    """
    layout = layout.lower()
    if layout == 'onehot':
        # native dtypes so boolean columns survive
        df = read_table(path, sep=sep, as_text=False)
        if id_col:
            df = df.drop(columns=[id_col])
        transactions = transactions_from_onehot(df)
    elif layout == 'wide':
        transactions = transactions_from_wide(read_table(path, sep=sep), id_col=id_col)
    elif layout == 'long':
        if not id_col or not item_col:
            raise ValueError("Layout 'long' requires id_col and item_col")
        transactions = transactions_from_long(read_table(path, sep=sep), id_col, item_col)
    else:
        raise ValueError(f"Unknown layout: {layout}")

    if not transactions:
        raise EmptyInputError(f"No valid transactions found in {path}")
    return transactions
