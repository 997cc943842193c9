"""
Arena-backed FP-Tree.

Nodes live in a flat list and refer to each other by integer handle: a node
owns its children through ``children`` (item -> handle), while ``parent`` and
``link`` (next node carrying the same item) are plain indices. Handle 0 is the
root sentinel.
"""
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from src.rule_mining.itemsets import Item

ROOT = 0

PatternBase = List[Tuple[Tuple[Item, ...], int]]


class FPNode:
    __slots__ = ('item', 'count', 'parent', 'children', 'link')

    def __init__(self, item: Optional[Item], count: int = 0, parent: Optional[int] = None):
        self.item = item
        self.count = count
        self.parent = parent
        self.children: Dict[Item, int] = {}
        self.link: Optional[int] = None

    def __repr__(self):
        return f"FPNode(item={self.item!r}, count={self.count})"


class HeaderEntry:
    """Aggregate count of an item plus the ends of its node-link chain."""

    __slots__ = ('count', 'head', 'tail')

    def __init__(self, count: int):
        self.count = count
        self.head: Optional[int] = None
        self.tail: Optional[int] = None

    def __repr__(self):
        return f"HeaderEntry(count={self.count}, head={self.head})"


class FPTree:
    """
    Prefix tree of (weighted) transactions restricted to frequent items.

    Args:
        patterns: Iterable of (items, weight) pairs. Plain transactions use
            weight 1, conditional pattern bases carry their path counts.
        min_count: Absolute count an item needs to enter the tree
    """

    def __init__(self, patterns: Iterable[Tuple[Sequence[Item], int]], min_count: int):
        self.min_count = min_count
        self.nodes: List[FPNode] = [FPNode(None)]
        self._header: Dict[Item, HeaderEntry] = {}

        patterns = [(tuple(items), weight) for items, weight in patterns]

        # Pass 1: weighted item counts
        counts = Counter()
        for items, weight in patterns:
            for item in set(items):
                counts[item] += weight

        frequent = [(item, count) for item, count in counts.items() if count >= min_count]
        frequent.sort(key=lambda pair: (-pair[1], pair[0]))
        self.item_order: List[Item] = [item for item, _ in frequent]
        rank = {item: position for position, item in enumerate(self.item_order)}
        for item, count in frequent:
            self._header[item] = HeaderEntry(count)

        # Pass 2: insert filtered, frequency-ordered paths
        for items, weight in patterns:
            path = sorted({item for item in items if item in rank}, key=rank.__getitem__)
            if path:
                self._insert(path, weight)

    @classmethod
    def from_transactions(cls, transactions: Iterable[Iterable[Item]], min_count: int) -> 'FPTree':
        return cls(((transaction, 1) for transaction in transactions), min_count)

    def _insert(self, path: Sequence[Item], weight: int):
        current = ROOT
        for item in path:
            child = self.nodes[current].children.get(item)
            if child is None:
                child = len(self.nodes)
                self.nodes.append(FPNode(item, 0, current))
                self.nodes[current].children[item] = child
                self._link(item, child)
            self.nodes[child].count += weight
            current = child

    def _link(self, item: Item, handle: int):
        entry = self._header[item]
        if entry.head is None:
            entry.head = handle
        else:
            self.nodes[entry.tail].link = handle
        entry.tail = handle

    @property
    def header_table(self) -> Mapping[Item, HeaderEntry]:
        return self._header

    @property
    def root(self) -> FPNode:
        return self.nodes[ROOT]

    @property
    def is_empty(self) -> bool:
        return not self.nodes[ROOT].children

    def __len__(self) -> int:
        return len(self.nodes) - 1

    def __contains__(self, item: Item) -> bool:
        return item in self._header

    def node_chain(self, item: Item) -> Iterator[FPNode]:
        """Walk the node-link chain of ``item``."""
        entry = self._header.get(item)
        handle = entry.head if entry is not None else None
        while handle is not None:
            node = self.nodes[handle]
            yield node
            handle = node.link

    def _path_to_root(self, node: FPNode) -> Tuple[Item, ...]:
        path = []
        handle = node.parent
        while handle is not None and handle != ROOT:
            parent = self.nodes[handle]
            path.append(parent.item)
            handle = parent.parent
        path.reverse()
        return tuple(path)

    def conditional_pattern_base(self, item: Item) -> PatternBase:
        """
        Prefix paths preceding ``item``, each paired with the count of the node it leads to.

        Paths run from the root down to (excluding) the item. Nodes sitting
        directly below the root contribute no path.
        """
        base = []
        for node in self.node_chain(item):
            path = self._path_to_root(node)
            if path:
                base.append((path, node.count))
        return base

    def prefix_paths(self, item: Item) -> List[Tuple[Item, ...]]:
        """Conditional pattern base with every path repeated once per unit of count."""
        return [path for path, count in self.conditional_pattern_base(item) for _ in range(count)]

    def __repr__(self):
        return f"FPTree(items={len(self._header)}, nodes={len(self)}, min_count={self.min_count})"
