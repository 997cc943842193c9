"""
Level-wise Apriori frequent itemset mining.

Candidates of size k are produced by joining frequent (k-1)-itemsets that share
their first k-2 items, pruned when any (k-1)-subset is infrequent, and counted
in a single pass over the transactions per level.
"""
import logging
import time
from itertools import combinations
from typing import Any, Dict, Iterable, List, Set, Tuple

from src.rule_mining.base import HybridMiner
from src.rule_mining.itemsets import (
    FrequentItemset, Item, Itemset, min_count_for, validate_threshold
)
from src.rule_mining.support import count_candidates, count_items, normalize_transactions

logger = logging.getLogger(__name__)


def generate_candidates(frequent: Iterable[Itemset]) -> List[Itemset]:
    """
    Join frequent (k-1)-itemsets into k-item candidates.

    Two itemsets are joined only when they share their first k-2 items, so
    each candidate is produced at most once. Candidates with an infrequent
    (k-1)-subset are dropped.
    """
    previous = sorted(set(frequent))
    if not previous:
        return []

    known: Set[Itemset] = set(previous)
    k = len(previous[0]) + 1
    candidates = []

    for i, left in enumerate(previous):
        for right in previous[i + 1:]:
            if left[:-1] != right[:-1]:
                # sorted order: no later itemset shares this prefix either
                break
            candidate = left + (right[-1],)
            if all(subset in known for subset in combinations(candidate, k - 1)):
                candidates.append(candidate)

    return candidates


def mine_apriori(transactions: Iterable[Iterable[Item]], min_support: float) -> List[FrequentItemset]:
    """
    Mine all frequent itemsets with the Apriori algorithm.

    Args:
        transactions: Baskets, each an iterable of item labels
        min_support: Minimum relative support in (0, 1]

    Returns:
        Frequent itemsets ordered by size, then lexicographically

    Raises:
        InvalidParameterError: if min_support is outside (0, 1]
        EmptyInputError: if there are no transactions
    """
    min_support = validate_threshold('min_support', min_support)
    baskets = normalize_transactions(transactions)
    total = len(baskets)
    min_count = min_count_for(min_support, total)

    item_counts = count_items(baskets)
    level = {
        (item,): count
        for item, count in item_counts.items()
        if count >= min_count
    }

    results: List[FrequentItemset] = []
    k = 1
    while level:
        logger.debug("Apriori level %d: %d frequent itemsets", k, len(level))
        results.extend(
            FrequentItemset.from_count(itemset, level[itemset], total)
            for itemset in sorted(level)
        )

        candidates = generate_candidates(level)
        if not candidates:
            break
        k += 1
        counts = count_candidates(baskets, candidates)
        level = {
            itemset: count
            for itemset, count in counts.items()
            if count >= min_count
        }

    logger.debug(
        "Apriori found %d itemsets (min_count=%d, transactions=%d)",
        len(results), min_count, total
    )
    return results


class AprioriMiner(HybridMiner):
    """Native breadth-first Apriori miner."""

    algorithm_name = 'apriori'

    def mine_itemsets(self, transactions) -> Tuple[List[FrequentItemset], Dict[str, Any]]:
        start_time = time.time()
        baskets = normalize_transactions(transactions)
        itemsets = mine_apriori(baskets, self.min_support)
        execution_time = time.time() - start_time
        return itemsets, self._itemset_stats(itemsets, len(baskets), execution_time)

    def __repr__(self):
        return f"AprioriMiner(min_support={self.min_support}, min_confidence={self.min_confidence})"
