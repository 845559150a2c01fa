"""Turning a strongly connected component into a settlement ring.

Tarjan returns component members without edges. A settlement needs them
in flow order: ring[i] gives its sell token to ring[i + 1], and the last
member gives to the first.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence

import structlog

from matchmaker.errors import StructuralInvariantViolation
from matchmaker.graph.exchange_graph import ExchangeGraph

logger = structlog.get_logger()


def order_cycle(graph: ExchangeGraph, members: Sequence[int]) -> list[int]:
    """Order cycle members so that consecutive members share an edge.

    Starts from the first member and rotates the rest through a queue,
    placing a candidate whenever the last placed node has an edge to it.

    Args:
        graph: Graph containing the members
        members: Node indices forming a cycle (size >= 2)

    Returns:
        Permutation of members where every consecutive pair, including
        last→first, is an edge of the graph

    Raises:
        StructuralInvariantViolation: If members cannot be arranged into a
            ring this way (a full rotation places nothing, or the last
            member has no edge back to the first)
    """
    if len(members) < 2:
        raise StructuralInvariantViolation(f"A cycle needs at least 2 members, got {len(members)}")

    remaining = deque(members)
    to_connect = remaining.popleft()
    ordered = [to_connect]
    misses = 0

    while remaining:
        candidate = remaining.popleft()
        if graph.contains_edge(to_connect, candidate):
            ordered.append(candidate)
            to_connect = candidate
            misses = 0
        else:
            remaining.append(candidate)
            misses += 1
            if misses >= len(remaining):
                raise StructuralInvariantViolation(
                    f"No edge from {to_connect} to any of {sorted(remaining)}"
                )

    if not graph.contains_edge(ordered[-1], ordered[0]):
        raise StructuralInvariantViolation(
            f"Ring {ordered} does not close: no edge {ordered[-1]}->{ordered[0]}"
        )
    return ordered


def is_simple_ring(graph: ExchangeGraph, members: Sequence[int]) -> bool:
    """Check whether every member has exactly one successor and one predecessor among members."""
    member_set = set(members)
    if len(member_set) < 2:
        return False
    for index in member_set:
        out_degree = sum(1 for s in graph.successors(index) if s in member_set)
        in_degree = sum(1 for p in graph.predecessors(index) if p in member_set)
        if out_degree != 1 or in_degree != 1:
            return False
    return True


def shortest_path(
    graph: ExchangeGraph,
    source: int,
    target: int,
    members: Sequence[int],
) -> list[int] | None:
    """Shortest path source→target that stays inside members.

    Breadth-first search visiting successors in ascending order, so the
    result is deterministic.

    Returns:
        Path including both endpoints, or None if target is unreachable
    """
    member_set = set(members)
    parent: dict[int, int] = {}
    queue = deque([source])
    seen = {source}

    while queue:
        node = queue.popleft()
        if node == target:
            path = [node]
            while path[-1] != source:
                path.append(parent[path[-1]])
            path.reverse()
            return path
        for succ in graph.successors(node):
            if succ in member_set and succ not in seen:
                seen.add(succ)
                parent[succ] = node
                queue.append(succ)

    return None


def _rotate_to_smallest(ring: list[int]) -> list[int]:
    start = ring.index(min(ring))
    return ring[start:] + ring[:start]


def candidate_rings(graph: ExchangeGraph, component: Sequence[int]) -> Iterator[list[int]]:
    """Yield rings to try settling from a strongly connected component.

    A component that is exactly one ring yields that ring, ordered with
    order_cycle. Larger components (several intents on the same token
    pair, rings sharing a member) have no single ring through every
    member. For those, every edge s→t inside the component is closed
    into a ring by the shortest path t→s, visiting s and t in ascending
    order. Duplicates are skipped.

    Every ring starts at its smallest index, so the same ring is always
    yielded in the same rotation.

    Args:
        graph: Graph containing the component
        component: Strongly connected node indices (size >= 2)

    Yields:
        Rings in flow order
    """
    if is_simple_ring(graph, component):
        yield order_cycle(graph, sorted(component))
        return

    members = sorted(component)
    member_set = set(members)
    seen: set[tuple[int, ...]] = set()
    for source in members:
        for target in graph.successors(source):
            if target not in member_set:
                continue
            path = shortest_path(graph, target, source, members)
            if path is None:
                raise StructuralInvariantViolation(
                    f"Component {members} is not strongly connected: no path {target}->{source}"
                )
            ring = _rotate_to_smallest([source] + path[:-1])
            key = tuple(ring)
            if key in seen:
                continue
            seen.add(key)
            logger.debug(
                "ring_candidate",
                component_size=len(members),
                ring=ring,
            )
            yield ring


__all__ = ["order_cycle", "is_simple_ring", "shortest_path", "candidate_rings"]
