"""
Base interfaces for frequent itemset and association rule miners.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Any, Iterable

from src.rule_mining.itemsets import (
    AssociationRule, FrequentItemset, Item, min_count_for, validate_threshold
)
from src.rule_mining.rules import generate_rules

Transactions = Iterable[Iterable[Item]]


class FrequentItemsetMiner(ABC):
    """
    Base class for frequent itemset mining algorithms.

    These algorithms discover frequently co-occurring items without forming
    rules (no antecedent -> consequent structure).
    """

    algorithm_name = 'itemsets'

    def __init__(self, min_support: float = 0.1, **kwargs):
        self.min_support = validate_threshold('min_support', min_support)
        self.config = kwargs

    @abstractmethod
    def mine_itemsets(self, transactions: Transactions) -> Tuple[List[FrequentItemset], Dict[str, Any]]:
        """
        Mine frequent itemsets from transactions.

        Args:
            transactions: List of baskets, each an iterable of item labels

        Returns:
            Tuple of (itemsets, stats) where:
                itemsets: List of FrequentItemset
                stats: Dict with mining statistics (execution_time, num_itemsets, etc.)
        """
        pass

    def _itemset_stats(
        self,
        itemsets: List[FrequentItemset],
        total_transactions: int,
        execution_time: float
    ) -> Dict[str, Any]:
        return {
            'num_itemsets': len(itemsets),
            'execution_time': execution_time,
            'average_support': sum(i.support for i in itemsets) / len(itemsets) if itemsets else 0.0,
            'total_transactions': total_transactions,
            'min_count': min_count_for(self.min_support, total_transactions),
            'algorithm': self.algorithm_name,
            'mode': 'itemsets'
        }


class AssociationRuleMiner(ABC):
    """
    Base class for association rule mining algorithms.

    These algorithms discover rules in the form: antecedent -> consequent
    with quality metrics (support, confidence, lift).
    """

    algorithm_name = 'rules'

    def __init__(self, min_support: float = 0.1, min_confidence: float = 0.5, **kwargs):
        self.min_support = validate_threshold('min_support', min_support)
        self.min_confidence = validate_threshold('min_confidence', min_confidence)
        self.config = kwargs

    @abstractmethod
    def mine_rules(self, transactions: Transactions) -> Tuple[List[AssociationRule], Dict[str, Any]]:
        """
        Mine association rules from transactions.

        Args:
            transactions: List of baskets, each an iterable of item labels

        Returns:
            Tuple of (rules, stats) where:
                rules: List of AssociationRule
                stats: Dict with mining statistics
        """
        pass


class HybridMiner(FrequentItemsetMiner, AssociationRuleMiner):
    """
    Base class for miners that produce frequent itemsets and derive rules from them.

    Subclasses only implement ``mine_itemsets``; rules are always generated
    from the mined itemsets by the shared rule generator, whichever algorithm
    produced them.
    """

    def __init__(self, min_support: float = 0.1, min_confidence: float = 0.5, **kwargs):
        AssociationRuleMiner.__init__(self, min_support, min_confidence, **kwargs)

    @abstractmethod
    def mine_itemsets(self, transactions: Transactions) -> Tuple[List[FrequentItemset], Dict[str, Any]]:
        """Mine frequent itemsets."""
        pass

    def mine_rules(self, transactions: Transactions) -> Tuple[List[AssociationRule], Dict[str, Any]]:
        import time

        itemsets, itemset_stats = self.mine_itemsets(transactions)

        start_time = time.time()
        rules = generate_rules(itemsets, self.min_confidence, itemset_stats['total_transactions'])
        execution_time = itemset_stats['execution_time'] + (time.time() - start_time)

        stats = {
            'num_rules': len(rules),
            'num_itemsets': len(itemsets),
            'execution_time': execution_time,
            'average_support': sum(r.support for r in rules) / len(rules) if rules else 0.0,
            'average_confidence': sum(r.confidence for r in rules) / len(rules) if rules else 0.0,
            'average_lift': sum(r.lift for r in rules) / len(rules) if rules else 0.0,
            'total_transactions': itemset_stats['total_transactions'],
            'algorithm': self.algorithm_name,
            'mode': 'rules'
        }
        return rules, stats
