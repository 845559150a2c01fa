"""Serialization of the exchange graph between invocations.

The graph is persisted as UTF-8 JSON:

    {"next_index": 3,
     "nodes": [{"index": 0, "node": {...}}, ...],
     "edges": [{"source": 0, "target": 2, "label": "<token>"}, ...]}

Nodes and edges are written in ascending index order, so encoding is
deterministic and every validator persists identical bytes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from matchmaker.errors import FormatError
from matchmaker.graph.exchange_graph import ExchangeGraph, ExchangeNode


class _NodeEntry(BaseModel):
    index: int = Field(ge=0)
    node: ExchangeNode


class _EdgeEntry(BaseModel):
    source: int = Field(ge=0)
    target: int = Field(ge=0)
    label: str


class _GraphState(BaseModel):
    next_index: int = Field(default=0, ge=0)
    nodes: list[_NodeEntry] = Field(default_factory=list)
    edges: list[_EdgeEntry] = Field(default_factory=list)


def encode(graph: ExchangeGraph) -> bytes:
    """Serialize a graph to bytes."""
    state = _GraphState(
        next_index=graph.next_index,
        nodes=[_NodeEntry(index=i, node=graph[i]) for i in graph.node_indices()],
        edges=[_EdgeEntry(source=s, target=t, label=label) for s, t, label in graph.edges()],
    )
    return state.model_dump_json().encode()


def decode(data: bytes) -> ExchangeGraph:
    """Rebuild a graph from bytes produced by encode().

    Args:
        data: Persisted graph bytes; empty bytes mean an empty graph

    Returns:
        The decoded graph

    Raises:
        FormatError: If the bytes are not a well-formed graph
    """
    if not data:
        return ExchangeGraph()

    try:
        state = _GraphState.model_validate_json(data)
    except ValidationError as err:
        raise FormatError(f"Malformed graph state: {err.error_count()} error(s)") from err

    graph = ExchangeGraph(next_index=state.next_index)
    for entry in state.nodes:
        if entry.index in graph:
            raise FormatError(f"Duplicate node index {entry.index}")
        if entry.index >= state.next_index:
            raise FormatError(
                f"Node index {entry.index} is not below next_index {state.next_index}"
            )
        graph.restore_node(entry.index, entry.node)

    for edge in state.edges:
        if edge.source not in graph or edge.target not in graph:
            raise FormatError(f"Edge references unknown node: {edge.source}->{edge.target}")
        source = graph[edge.source]
        target = graph[edge.target]
        if not (source.token_sell == target.token_buy == edge.label):
            raise FormatError(
                f"Edge {edge.source}->{edge.target} label {edge.label!r} does not match "
                f"sell token {source.token_sell!r} / buy token {target.token_buy!r}"
            )
        graph.update_edge(edge.source, edge.target, edge.label)

    return graph


__all__ = ["encode", "decode"]
