import pandas as pd
import pytest

from src.experiments import (
    AnalysisConfig, FilterConfig, MiningConfig, apply_filters, build_summary,
    create_miner, run_analysis
)
from src.experiments.base import load_data
from src.experiments.config import DataConfig
from src.rule_mining.apriori_miner import AprioriMiner
from src.rule_mining.fpgrowth_miner import FPGrowthMiner
from src.rule_mining.mlxtend_miner import MLxtendMiner


def make_config(algorithm='fpgrowth', min_support=0.4, min_confidence=0.5, filters=None):
    return AnalysisConfig(
        name='test',
        mining=MiningConfig(algorithm=algorithm, min_support=min_support, min_confidence=min_confidence),
        filters=filters or []
    )


@pytest.mark.parametrize("algorithm,expected", [
    ('apriori', AprioriMiner),
    ('fpgrowth', FPGrowthMiner),
    ('FP-Growth', FPGrowthMiner),
    ('mlxtend_apriori', MLxtendMiner),
    ('mlxtend_fpgrowth', MLxtendMiner),
])
def test_create_miner(algorithm, expected):
    miner = create_miner(MiningConfig(algorithm=algorithm, min_support=0.2, min_confidence=0.6))
    assert isinstance(miner, expected)
    assert miner.min_support == 0.2
    assert miner.min_confidence == 0.6


def test_create_miner_unknown():
    with pytest.raises(ValueError):
        create_miner(MiningConfig(algorithm='eclat'))


def test_run_analysis_completed(basket_transactions):
    result = run_analysis(basket_transactions, make_config())

    assert result.status == 'completed'
    assert result.error_message is None
    assert len(result.itemsets) == 9
    assert len(result.rules) == 10
    assert result.summary == (
        "FP-Growth analysis completed successfully. Found 9 frequent itemsets "
        "and 10 association rules with min_support=0.4 and min_confidence=0.5."
    )
    assert result.completed_at >= result.created_at
    assert result.stats['total_transactions'] == 5
    assert result.stats['num_rules'] == 10
    assert result.parameters == {'algorithm': 'fpgrowth', 'min_support': 0.4, 'min_confidence': 0.5}


def test_run_analysis_orders_results(basket_transactions):
    result = run_analysis(basket_transactions, make_config(algorithm='apriori'))
    confidences = [r.confidence for r in result.rules]
    assert confidences == sorted(confidences, reverse=True)
    assert result.itemsets[0].items == ('bread',)
    top = result.rules[0]
    assert top.confidence == pytest.approx(2 / 3)
    assert top.lift == pytest.approx((2 / 3) / 0.6)


@pytest.mark.parametrize("algorithm", ['apriori', 'fpgrowth', 'mlxtend_apriori', 'mlxtend_fpgrowth'])
def test_algorithms_agree(random_transactions, algorithm):
    reference = run_analysis(random_transactions, make_config('apriori', 0.1, 0.4))
    result = run_analysis(random_transactions, make_config(algorithm, 0.1, 0.4))
    assert [(i.items, i.frequency) for i in result.itemsets] == \
        [(i.items, i.frequency) for i in reference.itemsets]
    assert [(r.antecedent, r.consequent) for r in result.rules] == \
        [(r.antecedent, r.consequent) for r in reference.rules]


def test_run_analysis_filters(basket_transactions):
    config = make_config(filters=[FilterConfig(metric='lift', threshold=1.0)])
    result = run_analysis(basket_transactions, config)
    assert len(result.rules) == 4
    assert len(result.itemsets) == 9


def test_run_analysis_empty_input_fails():
    result = run_analysis([], make_config())
    assert result.status == 'failed'
    assert 'No transactions' in result.error_message
    assert result.itemsets == []
    assert result.rules == []
    assert result.summary is None
    assert result.completed_at is not None


@pytest.mark.parametrize("min_support,min_confidence", [(0, 0.5), (0.5, 1.5)])
def test_run_analysis_invalid_parameters_fail(basket_transactions, min_support, min_confidence):
    result = run_analysis(basket_transactions, make_config(min_support=min_support, min_confidence=min_confidence))
    assert result.status == 'failed'
    assert 'must be in (0, 1]' in result.error_message
    assert result.itemsets == [] and result.rules == []


def test_run_analysis_unknown_algorithm_raises(basket_transactions):
    with pytest.raises(ValueError):
        run_analysis(basket_transactions, make_config(algorithm='eclat'))


def test_run_analysis_no_frequent_items(basket_transactions):
    result = run_analysis(basket_transactions, make_config(min_support=1.0))
    assert result.status == 'completed'
    assert result.itemsets == []
    assert result.rules == []


def test_apply_filters_itemsets_ignores_rule_metrics(basket_transactions):
    result = run_analysis(basket_transactions, make_config())
    filters = [FilterConfig('lift', 5.0), FilterConfig('support', 0.6)]
    assert len(apply_filters(result.itemsets, filters, mode='itemsets')) == 4
    assert apply_filters(result.rules, filters, mode='rules') == []
    assert apply_filters(result.rules, [], mode='rules') == result.rules


def test_build_summary_labels():
    assert build_summary('apriori', 3, 2, 0.2, 0.6).startswith("Apriori analysis completed successfully.")
    assert build_summary('custom', 0, 0, 0.2, 0.6).startswith("custom analysis")


def test_config_to_dict(tmp_path):
    config = AnalysisConfig(
        name='demo',
        data=DataConfig(path='x.csv', name='x'),
        mining=MiningConfig(algorithm='apriori'),
        filters=[FilterConfig('lift', 1.2)],
        output_dir=str(tmp_path / 'out')
    )
    record = config.to_dict()
    assert record['mining'] == {'algorithm': 'apriori', 'min_support': 0.1, 'min_confidence': 0.5}
    assert record['filters'] == [{'metric': 'lift', 'threshold': 1.2}]
    assert record['data']['layout'] == 'wide'
    assert config.get_output_path() == tmp_path / 'out'
    assert config.get_output_path('.xlsx') == tmp_path / 'out' / 'demo.xlsx'
    assert (tmp_path / 'out').is_dir()


def test_load_data_long_layout(tmp_path):
    path = tmp_path / 'lines.csv'
    pd.DataFrame({'order': [1, 1, 2], 'product': ['bread', 'milk', 'eggs']}).to_csv(path, index=False)
    config = DataConfig(path=str(path), name='lines', layout='long', id_col='order', item_col='product')
    assert load_data(config) == [['bread', 'milk'], ['eggs']]
