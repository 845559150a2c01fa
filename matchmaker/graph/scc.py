"""Strongly connected component discovery.

Every cycle of compatible exchanges lies inside one strongly connected
component, so a single Tarjan pass finds all candidate matches in
O(V + E).
"""

from __future__ import annotations

from matchmaker.graph.exchange_graph import ExchangeGraph

# A node is a cycle with itself; trading with yourself is not a match
MIN_CYCLE_SIZE = 2


def tarjan_scc(graph: ExchangeGraph) -> list[list[int]]:
    """Find strongly connected components with Tarjan's algorithm.

    Iterative to avoid recursion limits on long chains. Output is
    canonical: each component is sorted ascending and components are
    ordered by their smallest index, so results do not depend on the
    order nodes were inserted or edges were added.

    Args:
        graph: Graph to decompose

    Returns:
        List of components (lists of node indices), singletons included
    """
    index_of: dict[int, int] = {}
    lowlink: dict[int, int] = {}
    on_stack: set[int] = set()
    stack: list[int] = []
    components: list[list[int]] = []
    counter = 0

    for root in graph.node_indices():
        if root in index_of:
            continue

        # Each frame is (node, iterator over its successors)
        index_of[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph.successors(root)))]

        while work:
            node, successors = work[-1]
            advanced = False
            for succ in successors:
                if succ not in index_of:
                    index_of[succ] = lowlink[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, iter(graph.successors(succ))))
                    advanced = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[succ])
            if advanced:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index_of[node]:
                component: list[int] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component))

    components.sort(key=lambda c: c[0])
    return components


def find_cycles(graph: ExchangeGraph) -> list[list[int]]:
    """Components that can settle: those with at least MIN_CYCLE_SIZE nodes."""
    return [c for c in tarjan_scc(graph) if len(c) >= MIN_CYCLE_SIZE]


__all__ = ["MIN_CYCLE_SIZE", "tarjan_scc", "find_cycles"]
