"""
Result types, canonical itemset keys and input validation shared by the miners.
"""
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Tuple

Item = str
Itemset = Tuple[Item, ...]


class MiningError(ValueError):
    """Base class for fatal mining input errors."""


class EmptyInputError(MiningError):
    """Raised when a miner receives no transactions."""


class InvalidParameterError(MiningError):
    """Raised when a threshold or the transaction total is out of range."""


def canonical_itemset(items: Iterable[Item]) -> Itemset:
    """Deduplicate and sort items so equal sets always produce the same key."""
    return tuple(sorted(set(items)))


def validate_threshold(name: str, value: float) -> float:
    """Check that a support/confidence threshold lies in (0, 1]."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number in (0, 1], got {value!r}")
    if math.isnan(value) or not 0.0 < value <= 1.0:
        raise InvalidParameterError(f"{name} must be in (0, 1], got {value}")
    return value


def min_count_for(min_support: float, total_transactions: int) -> int:
    """
    Convert a relative support threshold into an absolute transaction count.

    The product is nudged down by a small tolerance before taking the ceiling,
    so that values such as 0.7 * 10 (7.000000000000001) give 7 rather than 8.
    """
    return max(1, math.ceil(min_support * total_transactions - 1e-9))


@dataclass(frozen=True)
class FrequentItemset:
    items: Itemset
    support: float
    frequency: int

    @classmethod
    def from_count(cls, items: Iterable[Item], count: int, total_transactions: int) -> 'FrequentItemset':
        return cls(
            items=canonical_itemset(items),
            support=count / total_transactions,
            frequency=int(count)
        )

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'itemset': list(self.items),
            'support': self.support,
            'frequency': self.frequency
        }


@dataclass(frozen=True)
class AssociationRule:
    """
    An association rule ``antecedent -> consequent``.

    ``support`` is the support of the union of both sides, ``confidence`` is
    support / support(antecedent) and ``lift`` is confidence / support(consequent).
    Leverage and conviction are derived from the same three supports.
    """
    antecedent: Itemset
    consequent: Itemset
    support: float
    confidence: float
    lift: float
    leverage: float = 0.0
    conviction: float = 0.0

    @property
    def items(self) -> Itemset:
        return canonical_itemset(self.antecedent + self.consequent)

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['antecedent'] = list(self.antecedent)
        record['consequent'] = list(self.consequent)
        return record
