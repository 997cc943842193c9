import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional

from src.preprocessing.transactions import load_transactions
from src.rule_mining.apriori_miner import AprioriMiner
from src.rule_mining.fpgrowth_miner import FPGrowthMiner
from src.rule_mining.mlxtend_miner import MLxtendMiner
from src.rule_mining.itemsets import AssociationRule, FrequentItemset, MiningError
from src.rule_mining.rules import generate_rules
from src.postprocessing.rule import filter_rules, filter_itemsets, sort_rules, sort_itemsets, rule_stats

from .config import DataConfig, MiningConfig, AnalysisConfig, FilterConfig

logger = logging.getLogger(__name__)

ALGORITHM_LABELS = {
    'apriori': 'Apriori',
    'fpgrowth': 'FP-Growth',
    'fp-growth': 'FP-Growth',
    'mlxtend_apriori': 'MLxtend Apriori',
    'mlxtend_fpgrowth': 'MLxtend FP-Growth'
}

ITEMSET_METRICS = ('support', 'frequency')


@dataclass
class AnalysisResult:
    algorithm: str
    min_support: float
    min_confidence: float
    status: str = 'pending'  # 'pending', 'completed', 'failed'
    summary: Optional[str] = None
    error_message: Optional[str] = None
    itemsets: List[FrequentItemset] = field(default_factory=list)
    rules: List[AssociationRule] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            'algorithm': self.algorithm,
            'min_support': self.min_support,
            'min_confidence': self.min_confidence
        }


def load_data(config: DataConfig) -> List[List[str]]:
    return load_transactions(
        config.path,
        layout=config.layout,
        id_col=config.id_col,
        item_col=config.item_col,
        sep=config.sep
    )


def create_miner(config: MiningConfig):
    algorithm = config.algorithm.lower()

    if algorithm == 'apriori':
        return AprioriMiner(min_support=config.min_support, min_confidence=config.min_confidence)

    elif algorithm in ('fpgrowth', 'fp-growth'):
        return FPGrowthMiner(min_support=config.min_support, min_confidence=config.min_confidence)

    elif algorithm in ('mlxtend_apriori', 'mlxtend_fpgrowth'):
        return MLxtendMiner(
            algorithm=algorithm.split('_', 1)[1],
            min_support=config.min_support,
            min_confidence=config.min_confidence
        )

    else:
        raise ValueError(f"Unknown algorithm: {config.algorithm}")


def apply_filters(
    data: List,
    filters: List[FilterConfig],
    mode: str = 'rules'
) -> List:
    if not filters:
        return data

    result = data
    for f in filters:
        if mode == 'rules':
            result = filter_rules(result, criterion=f.metric, threshold=f.threshold)
        elif f.metric in ITEMSET_METRICS:
            result, _ = filter_itemsets(result, criterion=f.metric, threshold=f.threshold)

    return result


def build_summary(algorithm: str, num_itemsets: int, num_rules: int, min_support: float, min_confidence: float) -> str:
    label = ALGORITHM_LABELS.get(algorithm.lower(), algorithm)
    return (
        f"{label} analysis completed successfully. Found {num_itemsets} frequent itemsets "
        f"and {num_rules} association rules with min_support={min_support} "
        f"and min_confidence={min_confidence}."
    )


def run_analysis(transactions, config: AnalysisConfig) -> AnalysisResult:
    """
    Mine itemsets and rules for one analysis and record its outcome.

    Invalid input (no transactions, thresholds outside (0, 1]) does not raise:
    the result is marked 'failed' with the error message and carries no
    itemsets or rules. Any other error propagates.

    Args:
        transactions: List of baskets
        config: Analysis configuration

    Returns:
        AnalysisResult with itemsets sorted by support and rules sorted by
        confidence then lift
    """
    mining = config.mining
    result = AnalysisResult(
        algorithm=mining.algorithm,
        min_support=mining.min_support,
        min_confidence=mining.min_confidence,
        status='processing'
    )

    try:
        miner = create_miner(mining)
        itemsets, itemset_stats = miner.mine_itemsets(transactions)

        start_time = time.time()
        rules = generate_rules(itemsets, miner.min_confidence, itemset_stats['total_transactions'])
        rule_time = time.time() - start_time
    except MiningError as e:
        logger.error("%s analysis '%s' failed: %s", mining.algorithm, config.name, e)
        result.status = 'failed'
        result.error_message = str(e)
        result.completed_at = datetime.now()
        return result

    itemsets = sort_itemsets(apply_filters(itemsets, config.filters, mode='itemsets'))
    rules = sort_rules(apply_filters(rules, config.filters, mode='rules'))

    result.itemsets = itemsets
    result.rules = rules
    result.stats = {
        **itemset_stats,
        **rule_stats(rules),
        'num_itemsets': len(itemsets),
        'rule_generation_time': rule_time,
        'mode': 'both'
    }
    result.summary = build_summary(
        mining.algorithm, len(itemsets), len(rules), mining.min_support, mining.min_confidence
    )
    result.status = 'completed'
    result.completed_at = datetime.now()

    logger.info(result.summary)
    return result


def generate_output_filename(
    analysis_name: str,
    algorithm: str,
    dataset_name: str
) -> str:
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{timestamp}_{analysis_name}_{algorithm}_{dataset_name}"
