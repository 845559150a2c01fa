"""Matchmaker that turns submitted intents into settlements.

One invocation handles one intent:
1. Decode the intent and load the persisted graph
2. Insert one node per exchange of the intent
3. Find strongly connected components and candidate rings within them
4. Solve transfer amounts; infeasible rings are skipped and stay in the graph
5. Assemble settlements and remove the settled nodes
6. Submit the settlements and persist the graph

Nothing is submitted or persisted until every ring has been processed,
so a fatal error leaves the ledger and the stored graph untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from matchmaker.config import DEFAULT_CONFIG, MatchmakerConfig
from matchmaker.errors import InfeasibleCycle
from matchmaker.graph.codec import decode, encode
from matchmaker.graph.exchange_graph import ExchangeGraph, ExchangeNode
from matchmaker.graph.insert import insert
from matchmaker.graph.ordering import candidate_rings
from matchmaker.graph.scc import find_cycles
from matchmaker.matching.amounts import CycleAmounts, solve_amounts
from matchmaker.matching.assembler import build_settlement, encode_settlement, remove_settled
from matchmaker.models.intent import SignedIntent
from matchmaker.models.settlement import IntentTransfers
from matchmaker.ports import SettlementSubmitter, StateStore, decode_intent

logger = structlog.get_logger()


@dataclass
class Settlement:
    """A ring that was settled.

    Attributes:
        ring: Graph indices in flow order (indices as they were before removal)
        intent_ids: Intent identifier of each ring member
        amounts: Solved amounts
        payload: Settlement payload handed to the submitter
    """

    ring: list[int]
    intent_ids: list[str]
    amounts: CycleAmounts
    payload: IntentTransfers


@dataclass
class UnresolvedCycle:
    """A ring that was found but not settled; its nodes stay in the graph."""

    ring: list[int]
    reason: str


@dataclass
class MatchResult:
    """Outcome of one invocation.

    Attributes:
        inserted: Indices of the nodes added for the intent
        settlements: Settled rings, in the order they were submitted
        unresolved: Rings left in the graph
        node_count: Nodes remaining in the graph afterwards
    """

    inserted: list[int] = field(default_factory=list)
    settlements: list[Settlement] = field(default_factory=list)
    unresolved: list[UnresolvedCycle] = field(default_factory=list)
    node_count: int = 0

    @property
    def matched(self) -> bool:
        return bool(self.settlements)


def _settle_component(
    graph: ExchangeGraph,
    component: list[int],
    config: MatchmakerConfig,
    attempted: set[tuple[int, ...]],
    unresolved: list[UnresolvedCycle],
) -> Settlement | None:
    """Settle the first feasible candidate ring of a component.

    Rings already attempted in this invocation are skipped; rings that
    cannot settle, including rings whose members all share one owner, are
    appended to unresolved.
    """
    for ring in candidate_rings(graph, component):
        key = tuple(ring)
        if key in attempted:
            continue
        attempted.add(key)

        if len({graph[i].owner for i in ring}) == 1:
            logger.info("cycle_self_trade", ring=ring, owner=graph[ring[0]].owner)
            unresolved.append(UnresolvedCycle(ring=ring, reason="self_trade"))
            continue

        if config.max_cycle_size is not None and len(ring) > config.max_cycle_size:
            logger.info("cycle_too_large", ring=ring, max_cycle_size=config.max_cycle_size)
            unresolved.append(UnresolvedCycle(ring=ring, reason="cycle_too_large"))
            continue

        try:
            amounts = solve_amounts([graph[i] for i in ring], ring)
        except InfeasibleCycle as err:
            logger.info("cycle_infeasible", ring=ring, reason=err.reason)
            unresolved.append(UnresolvedCycle(ring=ring, reason=err.reason))
            continue

        return Settlement(
            ring=ring,
            intent_ids=[graph[i].id for i in ring],
            amounts=amounts,
            payload=build_settlement(graph, ring, amounts),
        )

    return None


def find_match_and_remove_nodes(
    graph: ExchangeGraph,
    config: MatchmakerConfig = DEFAULT_CONFIG,
) -> tuple[list[Settlement], list[UnresolvedCycle]]:
    """Settle every feasible ring in the graph and remove its nodes.

    Components from one Tarjan pass are disjoint, so all of a pass's
    rings are assembled before any node is removed. At most one ring
    settles per component per pass; with resolve_until_stable the search
    repeats until a pass settles nothing.

    Args:
        graph: Graph to search and mutate in place
        config: Matchmaker configuration

    Returns:
        (settlements, unresolved)
    """
    settlements: list[Settlement] = []
    unresolved: list[UnresolvedCycle] = []
    attempted: set[tuple[int, ...]] = set()

    while True:
        components = find_cycles(graph)
        logger.debug("cycles_found", components=len(components), nodes=graph.node_count)

        to_remove: list[int] = []
        for component in components:
            settlement = _settle_component(graph, component, config, attempted, unresolved)
            if settlement is not None:
                settlements.append(settlement)
                to_remove.extend(settlement.ring)

        remove_settled(graph, to_remove)
        if not to_remove or not config.resolve_until_stable:
            break

    return settlements, unresolved


class Matchmaker:
    """Runs one insert → match → settle sequence per submitted intent.

    Args:
        store: Persistence for the graph between invocations
        submitter: Receives encoded settlement payloads
        decoder: Turns submitted bytes into a signed intent
        config: Matchmaker configuration
    """

    def __init__(
        self,
        store: StateStore,
        submitter: SettlementSubmitter,
        decoder: Callable[[bytes], SignedIntent] = decode_intent,
        config: MatchmakerConfig = DEFAULT_CONFIG,
    ) -> None:
        self.store = store
        self.submitter = submitter
        self.decoder = decoder
        self.config = config

    def add_intent(self, intent_id: str, data: bytes) -> MatchResult:
        """Decode a submitted intent and match it.

        Raises:
            FormatError: If the intent or the stored graph is malformed
        """
        intent = self.decoder(data)
        return self.add_signed_intent(intent_id, intent)

    def add_signed_intent(self, intent_id: str, intent: SignedIntent) -> MatchResult:
        """Match an already decoded intent.

        Args:
            intent_id: Opaque identifier of the intent (hex)
            intent: The signed intent

        Returns:
            MatchResult describing what was settled

        Raises:
            FormatError: If the stored graph is malformed
        """
        logger.info(
            "intent_received",
            intent_id=intent_id,
            owner=intent.data.addr,
            exchanges=len(intent.data.exchange),
        )

        graph = decode(self.store.load_state())
        result = MatchResult()
        for exchange in intent.data.exchange:
            node = ExchangeNode(id=intent_id, exchange=exchange, intent=intent)
            result.inserted.append(insert(graph, node))

        result.settlements, result.unresolved = find_match_and_remove_nodes(graph, self.config)
        result.node_count = graph.node_count

        for settlement in result.settlements:
            self.submitter.submit(encode_settlement(settlement.payload))
            logger.info(
                "settlement_submitted",
                intent_ids=settlement.intent_ids,
                transfers=len(settlement.payload.transfers),
            )

        self.store.save_state(encode(graph))
        logger.debug("graph_saved", nodes=graph.node_count, edges=graph.edge_count)
        return result

    def load_graph(self) -> ExchangeGraph:
        """Decode the currently stored graph."""
        return decode(self.store.load_state())


__all__ = [
    "Settlement",
    "UnresolvedCycle",
    "MatchResult",
    "find_match_and_remove_nodes",
    "Matchmaker",
]
