"""
Rule Mining Module

Frequent itemset mining and association rule generation:
- Apriori (level-wise candidate generation)
- FP-Growth (conditional FP-Trees)
- MLxtend reference miners
- Rule generation shared by all miners
"""
from .itemsets import (
    AssociationRule,
    EmptyInputError,
    FrequentItemset,
    InvalidParameterError,
    MiningError,
    canonical_itemset
)
from .apriori_miner import AprioriMiner, mine_apriori
from .fpgrowth_miner import FPGrowthMiner, mine_fp_growth
from .rules import generate_rules

__all__ = [
    'AssociationRule',
    'FrequentItemset',
    'MiningError',
    'EmptyInputError',
    'InvalidParameterError',
    'canonical_itemset',
    'AprioriMiner',
    'FPGrowthMiner',
    'mine_apriori',
    'mine_fp_growth',
    'generate_rules'
]
