"""pytest configuration and shared fixtures."""
import random

import pytest


@pytest.fixture
def basket_transactions():
    return [
        {'bread', 'milk', 'eggs'},
        {'bread', 'butter'},
        {'milk', 'eggs', 'butter'},
        {'bread', 'milk', 'butter'},
        {'bread', 'eggs'},
    ]


@pytest.fixture
def random_transactions():
    """Seeded baskets with a skewed item distribution so several levels are frequent."""
    rng = random.Random(781)
    items = [f"item_{i:02d}" for i in range(12)]
    weights = [12 - i for i in range(12)]
    transactions = []
    for _ in range(80):
        size = rng.randint(1, 6)
        transactions.append(set(rng.choices(items, weights=weights, k=size)))
    return transactions
