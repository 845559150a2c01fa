"""Exchange graph, its persistence, and the graph algorithms used for matching."""

from matchmaker.graph.codec import decode, encode
from matchmaker.graph.exchange_graph import ExchangeGraph, ExchangeNode
from matchmaker.graph.insert import find_to_update_node, insert
from matchmaker.graph.ordering import candidate_rings, is_simple_ring, order_cycle, shortest_path
from matchmaker.graph.scc import MIN_CYCLE_SIZE, find_cycles, tarjan_scc

__all__ = [
    "ExchangeGraph",
    "ExchangeNode",
    "encode",
    "decode",
    "find_to_update_node",
    "insert",
    "MIN_CYCLE_SIZE",
    "tarjan_scc",
    "find_cycles",
    "order_cycle",
    "is_simple_ring",
    "shortest_path",
    "candidate_rings",
]
