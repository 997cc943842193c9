from typing import List, Tuple, Dict, Any


def _metric(record, criterion: str) -> float:
    """Read a metric from a result object or a plain dict record."""
    if isinstance(record, dict):
        return record.get(criterion, float("-inf"))
    return getattr(record, criterion, float("-inf"))


def _items(record, *keys) -> Tuple[str, ...]:
    for key in keys:
        value = record.get(key) if isinstance(record, dict) else getattr(record, key, None)
        if value is not None:
            return tuple(value)
    return ()


def filter_rules(rules, criterion: str, threshold: float):
    """
    Filters rules based on a criterion >= threshold.

    Args:
        rules: List of AssociationRule (or rule dictionaries)
        criterion: The rule metric to filter on (e.g., 'support', 'confidence', 'lift')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        List of rules meeting the criterion
    """
    # Fast filtering with list comprehension
    filtered_rule_list = [rule for rule in rules if _metric(rule, criterion) >= threshold]

    return filtered_rule_list


def filter_rules_by_pattern(
    rules,
    antecedent_contains: list = None,
    consequent_contains: list = None,
    antecedent_excludes: list = None,
    consequent_excludes: list = None,
    match_any: bool = False
):
    """
    Filter rules by antecedent/consequent item patterns.

    Patterns are matched case-insensitively as substrings of item labels,
    so 'milk' matches both 'milk' and 'Oat Milk'.

    Args:
        rules: List of AssociationRule (or rule dictionaries)
        antecedent_contains: List of patterns that must appear in antecedent
        consequent_contains: List of patterns that must appear in consequent
        antecedent_excludes: List of patterns that must NOT appear in antecedent
        consequent_excludes: List of patterns that must NOT appear in consequent
        match_any: If True, match if ANY pattern matches. If False, ALL must match.

    Returns:
        List of filtered rules
    """
    def matches_patterns(itemset, patterns, match_any_pattern):
        """Check if itemset matches the given patterns."""
        if not patterns:
            return True
        itemset_normalized = {str(item).lower() for item in itemset}
        patterns_lower = [p.lower() for p in patterns]

        if match_any_pattern:
            return any(
                any(p in item for item in itemset_normalized)
                for p in patterns_lower
            )
        else:
            return all(
                any(p in item for item in itemset_normalized)
                for p in patterns_lower
            )

    def excludes_patterns(itemset, patterns):
        """Check if itemset does NOT contain any of the patterns."""
        if not patterns:
            return True
        itemset_normalized = {str(item).lower() for item in itemset}
        patterns_lower = [p.lower() for p in patterns]

        return not any(
            any(p in item for item in itemset_normalized)
            for p in patterns_lower
        )

    filtered = []
    for rule in rules:
        ant = _items(rule, 'antecedent', 'antecedents')
        cons = _items(rule, 'consequent', 'consequents')

        ant_match = matches_patterns(ant, antecedent_contains, match_any)
        cons_match = matches_patterns(cons, consequent_contains, match_any)
        ant_exclude = excludes_patterns(ant, antecedent_excludes)
        cons_exclude = excludes_patterns(cons, consequent_excludes)

        if ant_match and cons_match and ant_exclude and cons_exclude:
            filtered.append(rule)

    return filtered


def filter_rules_by_consequent(rules, targets: list, match_any: bool = True):
    """
    Filter rules to keep only those with consequent matching target patterns.

    Args:
        rules: List of rules
        targets: List of target patterns (e.g., ['milk'])
        match_any: If True, match if any target matches

    Returns:
        List of filtered rules
    """
    return filter_rules_by_pattern(rules, consequent_contains=targets, match_any=match_any)


def filter_rules_by_antecedent(rules, patterns: list, match_any: bool = True):
    """Filter rules to keep only those with antecedent matching patterns."""
    return filter_rules_by_pattern(rules, antecedent_contains=patterns, match_any=match_any)


def filter_itemsets(itemsets, criterion: str = 'support', threshold: float = 0.0):
    """
    Filters frequent itemsets based on a criterion >= threshold.
    Returns both filtered itemsets and a stats dictionary.

    Args:
        itemsets: List of FrequentItemset (or dicts with a 'support' key)
        criterion: The metric to filter on (default: 'support')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        Tuple of (filtered_itemsets, stats) where:
            filtered_itemsets: List of itemsets meeting the criterion
            stats: Dictionary with average statistics for filtered itemsets
    """
    filtered_itemset_list = [itemset for itemset in itemsets if _metric(itemset, criterion) >= threshold]

    count = len(filtered_itemset_list)
    if count == 0:
        stats = {
            "num_itemsets": 0,
            "average_support": 0.0,
        }
        return filtered_itemset_list, stats

    avg_support = sum(_metric(item, "support") for item in filtered_itemset_list) / count

    stats = {
        "num_itemsets": count,
        "average_support": round(avg_support, 3),
    }

    return filtered_itemset_list, stats


def sort_rules(rules) -> List:
    """Order rules by confidence desc, then lift desc, then antecedent and consequent."""
    return sorted(
        rules,
        key=lambda r: (
            -_metric(r, 'confidence'),
            -_metric(r, 'lift'),
            _items(r, 'antecedent', 'antecedents'),
            _items(r, 'consequent', 'consequents')
        )
    )


def sort_itemsets(itemsets) -> List:
    """Order itemsets by support desc, then size, then items."""
    def key(itemset):
        items = _items(itemset, 'items', 'itemset')
        return -_metric(itemset, 'support'), len(items), items

    return sorted(itemsets, key=key)


def rule_stats(rules) -> Dict[str, Any]:
    count = len(rules)
    if count == 0:
        return {"num_rules": 0, "average_confidence": 0.0, "average_lift": 0.0}
    return {
        "num_rules": count,
        "average_confidence": round(sum(_metric(r, "confidence") for r in rules) / count, 3),
        "average_lift": round(sum(_metric(r, "lift") for r in rules) / count, 3),
    }
