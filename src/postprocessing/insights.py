"""
Summary insights over mined itemsets and rules, as shown on the results dashboard.
"""
from collections import Counter
from typing import Any, Dict, List

from src.rule_mining.itemsets import AssociationRule, FrequentItemset


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_insights(
    itemsets: List[FrequentItemset],
    rules: List[AssociationRule],
    top_n: int = 5,
    strong_lift: float = 1.5,
    top_items: int = 10
) -> Dict[str, Any]:
    """
    Collect headline figures for a finished analysis.

    Args:
        itemsets: Frequent itemsets of the analysis
        rules: Association rules of the analysis
        top_n: Number of top itemsets / strong rules to keep
        strong_lift: Rules with lift above this value count as strong
        top_items: Number of individual items to rank

    Returns:
        Dict with 'top_itemsets', 'strong_rules', 'top_items', 'patterns'
        (itemset counts by size) and 'stats'. Averages of empty collections are 0.0.
    """
    top_itemsets = sorted(itemsets, key=lambda i: (-i.support, len(i.items), i.items))[:top_n]

    strong = [rule for rule in rules if rule.lift > strong_lift]
    strong.sort(key=lambda r: (-r.lift, r.antecedent, r.consequent))

    # item weight = summed frequency of the itemsets it occurs in
    item_frequency = Counter()
    for itemset in itemsets:
        for item in itemset.items:
            item_frequency[item] += itemset.frequency
    ranked_items = sorted(item_frequency.items(), key=lambda pair: (-pair[1], pair[0]))[:top_items]

    sizes = Counter(len(itemset.items) for itemset in itemsets)

    return {
        'top_itemsets': top_itemsets,
        'strong_rules': strong[:top_n],
        'top_items': [{'item': item, 'frequency': freq} for item, freq in ranked_items],
        'patterns': {
            'single': sizes.get(1, 0),
            'pairs': sizes.get(2, 0),
            'triples': sizes.get(3, 0),
            'larger': sum(count for size, count in sizes.items() if size > 3),
            'total': len(itemsets)
        },
        'stats': {
            'avg_support': _mean([i.support for i in itemsets]),
            'avg_confidence': _mean([r.confidence for r in rules]),
            'avg_lift': _mean([r.lift for r in rules]),
            'max_lift': max((r.lift for r in rules), default=0.0),
            'strong_rules_count': len(strong)
        }
    }
