"""
Association rule generation from frequent itemsets.

Confidence and lift are computed from absolute frequencies, so every miner
yields the same metrics for the same itemsets.
"""
import logging
from itertools import combinations
from typing import Dict, Iterable, List

from src.rule_mining.itemsets import (
    AssociationRule, FrequentItemset, InvalidParameterError, Itemset,
    canonical_itemset, validate_threshold
)

logger = logging.getLogger(__name__)


def _frequency(lookup: Dict[Itemset, FrequentItemset], items: Itemset) -> int:
    itemset = lookup.get(items)
    return itemset.frequency if itemset is not None else 0


def _conviction(consequent_support: float, confidence: float) -> float:
    if confidence >= 1.0:
        return float('inf')
    return (1.0 - consequent_support) / (1.0 - confidence)


def generate_rules(
    frequent_itemsets: Iterable[FrequentItemset],
    min_confidence: float,
    total_transactions: int
) -> List[AssociationRule]:
    """
    Derive every rule whose confidence reaches ``min_confidence``.

    Each itemset with two or more items is split into every non-empty
    antecedent / consequent pair (2^n - 2 splits). Splits whose sides are not
    in the itemset list, or have zero support, are skipped.

    Args:
        frequent_itemsets: Output of either miner, including all singletons
        min_confidence: Minimum confidence in (0, 1]
        total_transactions: Number of transactions the itemsets were mined from

    Returns:
        List of AssociationRule, in no particular order
    """
    min_confidence = validate_threshold('min_confidence', min_confidence)
    if total_transactions is None or total_transactions <= 0:
        raise InvalidParameterError(
            f"total_transactions must be a positive integer, got {total_transactions!r}"
        )

    itemsets = list(frequent_itemsets)
    lookup: Dict[Itemset, FrequentItemset] = {
        canonical_itemset(itemset.items): itemset for itemset in itemsets
    }

    rules = []
    for itemset, frequent in lookup.items():
        if len(itemset) < 2:
            continue

        for size in range(1, len(itemset)):
            for antecedent in combinations(itemset, size):
                consequent = tuple(item for item in itemset if item not in antecedent)

                antecedent_count = _frequency(lookup, antecedent)
                consequent_count = _frequency(lookup, consequent)
                if not antecedent_count or not consequent_count:
                    continue

                # count ratios round once, so a confidence equal to the threshold is kept
                confidence = frequent.frequency / antecedent_count
                if confidence < min_confidence:
                    continue

                antecedent_support = antecedent_count / total_transactions
                consequent_support = consequent_count / total_transactions
                rules.append(AssociationRule(
                    antecedent=antecedent,
                    consequent=consequent,
                    support=frequent.support,
                    confidence=confidence,
                    lift=confidence * total_transactions / consequent_count,
                    leverage=frequent.support - antecedent_support * consequent_support,
                    conviction=_conviction(consequent_support, confidence)
                ))

    logger.debug(
        "Generated %d rules from %d itemsets (min_confidence=%s)",
        len(rules), len(itemsets), min_confidence
    )
    return rules
