from itertools import combinations

import pytest

from src.rule_mining.apriori_miner import mine_apriori
from src.rule_mining.fp_tree import FPTree
from src.rule_mining.fpgrowth_miner import FPGrowthMiner, fp_growth, mine_fp_growth
from src.rule_mining.itemsets import EmptyInputError, InvalidParameterError
from src.rule_mining.mlxtend_miner import MLxtendMiner


def as_counts(itemsets):
    return {itemset.items: itemset.frequency for itemset in itemsets}


def test_basket_example(basket_transactions):
    itemsets = mine_fp_growth(basket_transactions, 0.4)
    supports = {i.items: i.support for i in itemsets}
    assert len(itemsets) == 9
    assert supports[('bread',)] == pytest.approx(0.8)
    assert supports[('bread', 'milk')] == pytest.approx(0.4)
    assert supports[('eggs', 'milk')] == pytest.approx(0.4)
    assert ('butter', 'eggs') not in supports


def test_keys_are_canonical(basket_transactions):
    for itemset in mine_fp_growth(basket_transactions, 0.4):
        assert list(itemset.items) == sorted(itemset.items)


def test_recursive_worker_order(basket_transactions):
    tree = FPTree.from_transactions(basket_transactions, 2)
    found = list(fp_growth(tree, 2))
    # least frequent first, ties by label: butter, eggs, milk, bread
    assert [itemset for itemset, _ in found if len(itemset) == 1] == [
        ('butter',), ('eggs',), ('milk',), ('bread',)
    ]
    assert (('milk', 'eggs'), 2) in found


@pytest.mark.parametrize("min_support", [0.05, 0.1, 0.2, 0.4])
def test_equivalent_to_apriori(random_transactions, min_support):
    assert as_counts(mine_fp_growth(random_transactions, min_support)) == \
        as_counts(mine_apriori(random_transactions, min_support))


def test_equivalent_to_apriori_on_basket_example(basket_transactions):
    fp = {i.items: i.support for i in mine_fp_growth(basket_transactions, 0.4)}
    ap = {i.items: i.support for i in mine_apriori(basket_transactions, 0.4)}
    assert fp == ap


@pytest.mark.parametrize("algorithm", ['apriori', 'fpgrowth'])
def test_equivalent_to_mlxtend(random_transactions, algorithm):
    reference, _ = MLxtendMiner(algorithm=algorithm, min_support=0.1).mine_itemsets(random_transactions)
    assert as_counts(mine_fp_growth(random_transactions, 0.1)) == as_counts(reference)
    assert as_counts(mine_apriori(random_transactions, 0.1)) == as_counts(reference)


def test_support_relative_to_full_total(random_transactions):
    total = len(random_transactions)
    for itemset in mine_fp_growth(random_transactions, 0.1):
        expected = sum(1 for t in random_transactions if set(itemset.items) <= t)
        assert itemset.frequency == expected
        assert itemset.support == pytest.approx(expected / total)
        assert itemset.support >= 0.1 - 1e-9


def test_anti_monotonicity(random_transactions):
    keys = {i.items for i in mine_fp_growth(random_transactions, 0.05)}
    for key in keys:
        for subset in combinations(key, len(key) - 1):
            if subset:
                assert subset in keys


def test_no_duplicate_itemsets(random_transactions):
    itemsets = mine_fp_growth(random_transactions, 0.05)
    assert len({i.items for i in itemsets}) == len(itemsets)


def test_idempotent(random_transactions):
    assert mine_fp_growth(random_transactions, 0.1) == mine_fp_growth(random_transactions, 0.1)


def test_min_support_one_without_common_item(basket_transactions):
    assert mine_fp_growth(basket_transactions, 1.0) == []


def test_empty_transactions_raise():
    with pytest.raises(EmptyInputError):
        mine_fp_growth([], 0.5)


@pytest.mark.parametrize("min_support", [0, 2, float('nan')])
def test_invalid_min_support(basket_transactions, min_support):
    with pytest.raises(InvalidParameterError):
        mine_fp_growth(basket_transactions, min_support)


def test_single_item_transactions():
    itemsets = mine_fp_growth([['a'], ['a'], ['b']], 0.5)
    assert as_counts(itemsets) == {('a',): 2}


def test_miner_class(basket_transactions):
    miner = FPGrowthMiner(min_support=0.4, min_confidence=0.5)
    itemsets, stats = miner.mine_itemsets(basket_transactions)
    assert len(itemsets) == 9
    assert stats['algorithm'] == 'fp-growth'
    assert stats['min_count'] == 2
    assert stats['average_support'] == pytest.approx(sum(i.support for i in itemsets) / 9)

    rules, rule_stats = miner.mine_rules(basket_transactions)
    assert len(rules) == 10
    assert rule_stats['num_itemsets'] == 9


def test_mlxtend_miner_stats(basket_transactions):
    miner = MLxtendMiner(algorithm='apriori', min_support=0.4)
    itemsets, stats = miner.mine_itemsets(basket_transactions)
    assert len(itemsets) == 9
    assert stats['algorithm'] == 'mlxtend_apriori'


def test_mlxtend_miner_unknown_algorithm():
    with pytest.raises(ValueError):
        MLxtendMiner(algorithm='eclat')
