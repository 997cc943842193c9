"""
Market Basket Analysis Experiment

Loads a transaction file, mines frequent itemsets and association rules with
both Apriori and FP-Growth, checks that the two algorithms agree and writes
one workbook plus one text report per algorithm.
"""
import logging
from pathlib import Path
from datetime import datetime

from src.experiments.base import load_data, run_analysis, generate_output_filename
from src.experiments.config import DataConfig, MiningConfig, AnalysisConfig, FilterConfig
from src.postprocessing.insights import summarize_insights
from src.utils.excel_io import save_analysis_results, save_rules_text

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')

# =============================================================================
# CONFIGURATION
# =============================================================================

DATA_PATH = "../../data/raw/transactions.csv"
OUTPUT_DIR = "../../out/basket_analysis"

# 'wide' (id, item, item, ...), 'long' (id, item) or 'onehot'
DATA_LAYOUT = 'wide'

ALGORITHMS = ['apriori', 'fpgrowth']

MIN_SUPPORT = 0.05
MIN_CONFIDENCE = 0.5

# Post-mining filter thresholds
MIN_LIFT = 1.0


# =============================================================================
# EXPERIMENT
# =============================================================================

def run_experiment(data_path=DATA_PATH, output_dir=OUTPUT_DIR, layout=DATA_LAYOUT):
    print("=" * 70)
    print("MARKET BASKET ANALYSIS EXPERIMENT")
    print("=" * 70)

    # Load data
    print("\n[1] Loading data...")
    data_config = DataConfig(path=str(data_path), name=Path(data_path).stem, layout=layout)
    transactions = load_data(data_config)
    print(f"  Transactions: {len(transactions)}")
    print(f"  Distinct items: {len({item for t in transactions for item in t})}")

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    results = {}

    print("\n[2] Mining...")
    for algorithm in ALGORITHMS:
        config = AnalysisConfig(
            name='basket_analysis',
            data=data_config,
            mining=MiningConfig(
                algorithm=algorithm,
                min_support=MIN_SUPPORT,
                min_confidence=MIN_CONFIDENCE
            ),
            filters=[FilterConfig(metric='lift', threshold=MIN_LIFT)],
            output_dir=str(output_path)
        )

        result = run_analysis(transactions, config)
        results[algorithm] = result

        if result.status == 'failed':
            print(f"  [{algorithm}] Error: {result.error_message}")
            continue

        print(f"  [{algorithm}] {len(result.itemsets)} itemsets, {len(result.rules)} rules "
              f"in {result.stats['execution_time'] + result.stats['rule_generation_time']:.3f}s")

        filename = generate_output_filename(config.name, algorithm, data_config.name)
        save_analysis_results(
            result,
            output_path / filename,
            metadata={'dataset': data_config.name, 'num_transactions': len(transactions)}
        )
        save_rules_text(
            result.rules,
            output_path / filename,
            title=f"{algorithm.upper()} ASSOCIATION RULES",
            metadata=result.parameters
        )

    # Compare algorithms
    completed = [r for r in results.values() if r.status == 'completed']
    if len(completed) > 1:
        print("\n[3] Comparing algorithms...")
        keys = [
            {(i.items, i.frequency) for i in r.itemsets}
            for r in completed
        ]
        agree = all(k == keys[0] for k in keys[1:])
        print(f"  Itemsets identical across algorithms: {agree}")

    # Print final summary
    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    for algorithm, result in results.items():
        if result.status != 'completed':
            continue
        insights = summarize_insights(result.itemsets, result.rules)
        print(f"\n{result.summary}")
        print(f"  Patterns: {insights['patterns']}")
        for rule in insights['strong_rules']:
            print(f"    {', '.join(rule.antecedent)} -> {', '.join(rule.consequent)} "
                  f"(conf={rule.confidence:.3f}, lift={rule.lift:.3f})")

    print(f"\nOutput: {output_path}")
    print(f"Finished: {datetime.now().isoformat()}")
    print("=" * 70)

    return results


if __name__ == '__main__':
    run_experiment()
