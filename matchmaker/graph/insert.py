"""Incremental insertion of exchanges into the graph.

A new exchange is wired to every existing exchange it can trade with:
- new→existing when existing buys what new sells
- existing→new when existing sells what new buys
"""

from __future__ import annotations

import structlog

from matchmaker.graph.exchange_graph import ExchangeGraph, ExchangeNode

logger = structlog.get_logger()


def find_to_update_node(
    graph: ExchangeGraph,
    new_index: int,
) -> tuple[list[int], list[int]]:
    """Partition existing nodes by how they connect to a new node.

    Walks the whole graph depth-first, restarting at every undiscovered
    node, so nodes in components disconnected from the first node are
    still found.

    Args:
        graph: Graph that already contains the new node
        new_index: Index of the new node

    Returns:
        (connect_sell, connect_buy): nodes buying the new node's sell token,
        and nodes selling the new node's buy token
    """
    new_node = graph[new_index]
    connect_sell: list[int] = []
    connect_buy: list[int] = []

    for index in graph.depth_first_search():
        if index == new_index:
            continue
        current = graph[index]
        if new_node.token_sell == current.token_buy:
            connect_sell.append(index)
        if new_node.token_buy == current.token_sell:
            connect_buy.append(index)

    return connect_sell, connect_buy


def insert(graph: ExchangeGraph, node: ExchangeNode) -> int:
    """Add a node and the edges to every compatible existing node.

    Args:
        graph: Graph to mutate in place
        node: Exchange node to add

    Returns:
        Index of the new node
    """
    new_index = graph.add_node(node)
    logger.debug(
        "graph_before_insert",
        nodes=graph.node_count - 1,
        edges=graph.edge_count,
    )

    connect_sell, connect_buy = find_to_update_node(graph, new_index)
    for index in connect_sell:
        graph.update_edge(new_index, index, node.token_sell)
    for index in connect_buy:
        graph.update_edge(index, new_index, node.token_buy)

    logger.debug(
        "graph_node_inserted",
        index=new_index,
        token_sell=node.token_sell,
        token_buy=node.token_buy,
        out_edges=len(connect_sell),
        in_edges=len(connect_buy),
        nodes=graph.node_count,
        edges=graph.edge_count,
    )
    return new_index


__all__ = ["find_to_update_node", "insert"]
