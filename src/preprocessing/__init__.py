from .transactions import (
    load_transactions,
    transactions_from_rows,
    transactions_from_wide,
    transactions_from_long,
    transactions_from_onehot,
    to_onehot
)

__all__ = [
    'load_transactions',
    'transactions_from_rows',
    'transactions_from_wide',
    'transactions_from_long',
    'transactions_from_onehot',
    'to_onehot'
]
