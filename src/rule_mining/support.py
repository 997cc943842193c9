"""
Support counting over transaction lists.

All functions are pure: transactions are read, never modified.
"""
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Sequence

from src.rule_mining.itemsets import EmptyInputError, Item, Itemset


def normalize_transactions(transactions: Iterable[Iterable[Item]]) -> List[FrozenSet[Item]]:
    """
    Freeze every transaction into a set of items.

    Duplicate items inside a transaction collapse into one. Empty transactions
    are kept so they still count toward the transaction total.

    Raises:
        EmptyInputError: if there are no transactions at all
    """
    if transactions is None:
        raise EmptyInputError("No transactions provided")
    normalized = [frozenset(transaction) for transaction in transactions]
    if not normalized:
        raise EmptyInputError("No transactions provided")
    return normalized


def count_support(transactions: Sequence[FrozenSet[Item]], itemset: Iterable[Item]) -> int:
    """Number of transactions containing every item of ``itemset``."""
    wanted = frozenset(itemset)
    return sum(1 for transaction in transactions if wanted <= transaction)


def count_items(transactions: Iterable[Iterable[Item]]) -> Counter:
    """Occurrence count of each individual item."""
    counts = Counter()
    for transaction in transactions:
        counts.update(transaction)
    return counts


def count_candidates(
    transactions: Sequence[FrozenSet[Item]],
    candidates: Iterable[Itemset]
) -> Dict[Itemset, int]:
    """
    Count a batch of same-size candidates in one pass over the transactions.

    Transactions shorter than the candidate size are skipped without testing.
    """
    candidate_sets = [(candidate, frozenset(candidate)) for candidate in candidates]
    counts = {candidate: 0 for candidate, _ in candidate_sets}
    if not candidate_sets:
        return counts

    size = len(candidate_sets[0][0])
    for transaction in transactions:
        if len(transaction) < size:
            continue
        for candidate, members in candidate_sets:
            if members <= transaction:
                counts[candidate] += 1
    return counts
