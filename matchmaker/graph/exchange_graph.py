"""Directed graph of exchanges.

Nodes are exchanges submitted inside signed intents. An edge A→B labelled
with token T means "A sells T and B wants to buy T", so following edges
traces the direction tokens flow when a cycle settles.

Node indices are stable: removing a node never renumbers the others, and
indices are never reused within one graph's history.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from matchmaker.models.intent import SignedExchange, SignedIntent
from matchmaker.models.types import HexBytes


class ExchangeNode(BaseModel):
    """Graph node payload: one exchange of one intent.

    Attributes:
        id: Opaque identifier of the intent the exchange came from
        exchange: The signed exchange (token pair, bounds, owner)
        intent: The signed parent intent
    """

    id: HexBytes
    exchange: SignedExchange
    intent: SignedIntent

    model_config = ConfigDict(frozen=True)

    @property
    def owner(self) -> str:
        return self.exchange.data.addr

    @property
    def token_sell(self) -> str:
        return self.exchange.data.token_sell

    @property
    def token_buy(self) -> str:
        return self.exchange.data.token_buy


@dataclass
class ExchangeGraph:
    """Directed graph with at most one labelled edge per ordered node pair.

    Attributes:
        nodes: index -> node payload
        next_index: Index the next added node will receive
    """

    nodes: dict[int, ExchangeNode] = field(default_factory=dict)
    next_index: int = 0
    # source -> target -> token label
    _out: dict[int, dict[int, str]] = field(default_factory=dict, repr=False)
    # target -> set of sources
    _in: dict[int, set[int]] = field(default_factory=dict, repr=False)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._out.values())

    def __contains__(self, index: object) -> bool:
        return index in self.nodes

    def __getitem__(self, index: int) -> ExchangeNode:
        return self.nodes[index]

    def node_indices(self) -> list[int]:
        """All node indices in ascending order."""
        return sorted(self.nodes)

    def add_node(self, node: ExchangeNode) -> int:
        """Add a node and return its index."""
        index = self.next_index
        self.nodes[index] = node
        self._out[index] = {}
        self._in[index] = set()
        self.next_index += 1
        return index

    def restore_node(self, index: int, node: ExchangeNode) -> None:
        """Place a node at an explicit index when rebuilding a graph.

        Raises:
            ValueError: If the index is taken or not below next_index
        """
        if index in self.nodes:
            raise ValueError(f"Node index {index} already in graph")
        if not 0 <= index < self.next_index:
            raise ValueError(f"Node index {index} outside [0, {self.next_index})")
        self.nodes[index] = node
        self._out[index] = {}
        self._in[index] = set()

    def update_edge(self, source: int, target: int, label: str) -> None:
        """Add edge source→target, or relabel it if it already exists.

        Raises:
            KeyError: If either endpoint is not in the graph
        """
        if source not in self.nodes or target not in self.nodes:
            raise KeyError(f"Edge endpoint not in graph: {source}->{target}")
        self._out[source][target] = label
        self._in[target].add(source)

    def contains_edge(self, source: int, target: int) -> bool:
        return target in self._out.get(source, {})

    def edge_label(self, source: int, target: int) -> str | None:
        return self._out.get(source, {}).get(target)

    def successors(self, index: int) -> list[int]:
        """Targets of edges leaving index, ascending."""
        return sorted(self._out.get(index, {}))

    def predecessors(self, index: int) -> list[int]:
        """Sources of edges entering index, ascending."""
        return sorted(self._in.get(index, set()))

    def edges(self) -> Iterator[tuple[int, int, str]]:
        """Iterate (source, target, label) in ascending (source, target) order."""
        for source in sorted(self._out):
            targets = self._out[source]
            for target in sorted(targets):
                yield source, target, targets[target]

    def remove_node(self, index: int) -> ExchangeNode:
        """Remove a node and every edge touching it.

        Raises:
            KeyError: If index is not in the graph
        """
        node = self.nodes.pop(index)
        for target in self._out.pop(index):
            self._in[target].discard(index)
        for source in self._in.pop(index):
            del self._out[source][index]
        return node

    def depth_first_search(self, roots: Iterable[int] | None = None) -> Iterator[int]:
        """Yield node indices in depth-first discovery order.

        Every root that is still undiscovered starts a new search, so
        passing all nodes (the default) covers every component, including
        ones that are not reachable from the first root.
        """
        if roots is None:
            roots = self.node_indices()

        discovered: set[int] = set()
        for root in roots:
            if root in discovered or root not in self.nodes:
                continue
            discovered.add(root)
            yield root
            # Stack of successor iterators keeps discovery order identical
            # to the recursive walk without recursion depth limits
            stack = [iter(self.successors(root))]
            while stack:
                for nxt in stack[-1]:
                    if nxt not in discovered:
                        discovered.add(nxt)
                        yield nxt
                        stack.append(iter(self.successors(nxt)))
                        break
                else:
                    stack.pop()


__all__ = ["ExchangeNode", "ExchangeGraph"]
