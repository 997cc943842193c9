"""
FP-Growth frequent itemset mining over conditional FP-Trees.
"""
import logging
import time
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from src.rule_mining.base import HybridMiner
from src.rule_mining.fp_tree import FPTree
from src.rule_mining.itemsets import (
    FrequentItemset, Item, min_count_for, validate_threshold
)
from src.rule_mining.support import normalize_transactions

logger = logging.getLogger(__name__)


def fp_growth(tree: FPTree, min_count: int, prefix: Tuple[Item, ...] = ()) -> Iterator[Tuple[Tuple[Item, ...], int]]:
    """
    Yield (itemset, count) for every frequent itemset extending ``prefix``.

    Items are visited least frequent first (ties by label). Each conditional
    tree is built with the same absolute ``min_count``.
    """
    items = sorted(tree.header_table.items(), key=lambda pair: (pair[1].count, pair[0]))
    for item, entry in items:
        itemset = prefix + (item,)
        yield itemset, entry.count

        pattern_base = tree.conditional_pattern_base(item)
        if not pattern_base:
            continue

        conditional_tree = FPTree(pattern_base, min_count)
        if conditional_tree.is_empty:
            continue
        logger.debug("Conditional tree for %s: %r", itemset, conditional_tree)
        yield from fp_growth(conditional_tree, min_count, itemset)


def mine_fp_growth(transactions: Iterable[Iterable[Item]], min_support: float) -> List[FrequentItemset]:
    """
    Mine all frequent itemsets with FP-Growth.

    Args:
        transactions: Baskets, each an iterable of item labels
        min_support: Minimum relative support in (0, 1]

    Returns:
        Frequent itemsets in discovery order; supports are relative to the
        full transaction count

    Raises:
        InvalidParameterError: if min_support is outside (0, 1]
        EmptyInputError: if there are no transactions
    """
    min_support = validate_threshold('min_support', min_support)
    baskets = normalize_transactions(transactions)
    total = len(baskets)
    min_count = min_count_for(min_support, total)

    tree = FPTree.from_transactions(baskets, min_count)
    logger.debug("Built %r from %d transactions", tree, total)

    results = [
        FrequentItemset.from_count(itemset, count, total)
        for itemset, count in fp_growth(tree, min_count)
    ]
    logger.debug(
        "FP-Growth found %d itemsets (min_count=%d, transactions=%d)",
        len(results), min_count, total
    )
    return results


class FPGrowthMiner(HybridMiner):
    """Native FP-Growth miner."""

    algorithm_name = 'fp-growth'

    def mine_itemsets(self, transactions) -> Tuple[List[FrequentItemset], Dict[str, Any]]:
        start_time = time.time()
        baskets = normalize_transactions(transactions)
        itemsets = mine_fp_growth(baskets, self.min_support)
        execution_time = time.time() - start_time
        return itemsets, self._itemset_stats(itemsets, len(baskets), execution_time)

    def __repr__(self):
        return f"FPGrowthMiner(min_support={self.min_support}, min_confidence={self.min_confidence})"
