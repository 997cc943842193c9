"""
MLxtend-backed reference miners.

Runs mlxtend's Apriori or FP-Growth on a one-hot encoding of the transactions
and converts the result into the same FrequentItemset objects the native
miners produce, so both implementations can be compared directly.
"""
import time
from typing import Any, Dict, List, Tuple

import pandas as pd
from mlxtend.frequent_patterns import apriori, fpgrowth
from mlxtend.preprocessing import TransactionEncoder

from src.rule_mining.base import HybridMiner
from src.rule_mining.itemsets import FrequentItemset, min_count_for
from src.rule_mining.support import normalize_transactions


class MLxtendMiner(HybridMiner):
    """
    MLxtend itemset miner with multiple algorithm support.

    Supports algorithms:
    - 'fpgrowth': FP-Growth (default, fast)
    - 'apriori': Apriori (classic algorithm)
    """

    def __init__(
        self,
        algorithm: str = 'fpgrowth',
        min_support: float = 0.1,
        min_confidence: float = 0.5,
        **kwargs
    ):
        """
        Initialize MLxtend miner.

        Args:
            algorithm: Mining algorithm ('fpgrowth', 'apriori')
            min_support: Minimum support threshold
            min_confidence: Minimum confidence threshold
        """
        super().__init__(min_support, min_confidence, **kwargs)
        self.algorithm = algorithm.lower()

        # Validate algorithm
        valid_algorithms = ['fpgrowth', 'apriori']
        if self.algorithm not in valid_algorithms:
            raise ValueError(f"Algorithm must be one of {valid_algorithms}, got '{self.algorithm}'")

    @property
    def algorithm_name(self) -> str:
        return f'mlxtend_{self.algorithm}'

    def _prepare_data(self, transactions) -> pd.DataFrame:
        """
        One-hot encode transactions for mlxtend.

        Args:
            transactions: List of frozen transactions

        Returns:
            Boolean DataFrame, one column per item
        """
        te = TransactionEncoder()
        te_array = te.fit(transactions).transform(transactions)
        return pd.DataFrame(te_array, columns=te.columns_)

    def mine_itemsets(self, transactions) -> Tuple[List[FrequentItemset], Dict[str, Any]]:
        """
        Mine frequent itemsets with the selected mlxtend algorithm.

        The relative threshold is replaced by ``min_count / total`` so the
        reference miner applies exactly the same absolute cut-off as the
        native ones.

        Args:
            transactions: List of baskets

        Returns:
            Tuple of (itemsets, stats)
        """
        start_time = time.time()

        baskets = normalize_transactions(transactions)
        total = len(baskets)
        min_count = min_count_for(self.min_support, total)

        # Prepare data
        df_encoded = self._prepare_data([sorted(basket) for basket in baskets])

        itemsets = []
        if df_encoded.shape[1] > 0:
            mine = fpgrowth if self.algorithm == 'fpgrowth' else apriori
            frequent_itemsets_df = mine(
                df_encoded,
                min_support=min_count / total,
                use_colnames=True
            )

            # Convert to standard format
            for _, row in frequent_itemsets_df.iterrows():
                count = int(round(float(row['support']) * total))
                if count < min_count:
                    continue
                itemsets.append(FrequentItemset.from_count(row['itemsets'], count, total))

        execution_time = time.time() - start_time
        return itemsets, self._itemset_stats(itemsets, total, execution_time)

    def __repr__(self):
        return (f"MLxtendMiner(algorithm='{self.algorithm}', min_support={self.min_support}, "
                f"min_confidence={self.min_confidence})")
