"""Assembly of settlement payloads from solved rings.

A settlement carries one transfer per hop plus the signed exchange and
signed intent of every ring member, in ring order, so the ledger can
check each transfer against the signatures that authorized it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog
from pydantic import ValidationError

from matchmaker.errors import FormatError, StructuralInvariantViolation
from matchmaker.graph.exchange_graph import ExchangeGraph
from matchmaker.matching.amounts import CycleAmounts
from matchmaker.models.settlement import IntentTransfers, Transfer

logger = structlog.get_logger()


def create_transfer(graph: ExchangeGraph, source: int, target: int, amount: int) -> Transfer:
    """Build the transfer for one hop of a ring.

    Raises:
        StructuralInvariantViolation: If source→target is not an edge
    """
    label = graph.edge_label(source, target)
    if label is None:
        raise StructuralInvariantViolation(f"Ring hop {source}->{target} is not an edge")
    giver = graph[source]
    receiver = graph[target]
    return Transfer(
        source=giver.owner,
        target=receiver.owner,
        token=label,
        amount=amount,
    )


def build_settlement(
    graph: ExchangeGraph,
    ring: Sequence[int],
    amounts: CycleAmounts,
) -> IntentTransfers:
    """Package a solved ring as a settlement payload.

    Args:
        graph: Graph containing the ring
        ring: Node indices in flow order
        amounts: Solved amounts, amounts.amounts[i] given by ring[i]

    Returns:
        IntentTransfers with transfers in ring order
    """
    if len(amounts.amounts) != len(ring):
        raise StructuralInvariantViolation(
            f"{len(amounts.amounts)} amounts for a ring of {len(ring)} nodes"
        )

    tx_data = IntentTransfers.empty()
    n = len(ring)
    for i, index in enumerate(ring):
        node = graph[index]
        tx_data.transfers.append(
            create_transfer(graph, index, ring[(i + 1) % n], amounts.amounts[i])
        )
        tx_data.exchanges.append(node.exchange)
        tx_data.intents.append(node.intent)

    logger.info(
        "settlement_assembled",
        ring=list(ring),
        transfers=len(tx_data.transfers),
        volume=amounts.volume,
    )
    return tx_data


def encode_settlement(tx_data: IntentTransfers) -> bytes:
    """Serialize a settlement payload for submission."""
    return tx_data.model_dump_json().encode()


def decode_settlement(data: bytes) -> IntentTransfers:
    """Parse a settlement payload produced by encode_settlement().

    Raises:
        FormatError: If the bytes are not a valid payload
    """
    try:
        return IntentTransfers.model_validate_json(data)
    except ValidationError as err:
        raise FormatError(f"Malformed settlement: {err.error_count()} error(s)") from err


def remove_settled(graph: ExchangeGraph, indices: Iterable[int]) -> None:
    """Remove settled nodes, highest index first."""
    for index in sorted(set(indices), reverse=True):
        graph.remove_node(index)


__all__ = [
    "create_transfer",
    "build_settlement",
    "encode_settlement",
    "decode_settlement",
    "remove_settled",
]
