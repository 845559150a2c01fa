"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_exchange, make_intent, make_node
    # or
    from tests.helpers.factories import make_graph

    node = make_node(addr=ALICE, token_sell=BTC, token_buy=ETH)
"""

from matchmaker.graph.exchange_graph import ExchangeGraph, ExchangeNode
from matchmaker.graph.insert import insert
from matchmaker.models.intent import (
    Exchange,
    FungibleTokenIntent,
    SignedExchange,
    SignedIntent,
)
from tests.helpers.constants import ALICE, BTC, ETH, SIG


def make_exchange(
    addr: str = ALICE,
    token_sell: str = BTC,
    token_buy: str = ETH,
    rate_min: str | int = "1",
    max_sell: int = 100,
    min_buy: int = 0,
) -> Exchange:
    """Create an exchange with sensible defaults.

    Args:
        addr: Owner address (default: ALICE)
        token_sell: Token given (default: BTC)
        token_buy: Token wanted (default: ETH)
        rate_min: Minimum received/given ratio (default: "1")
        max_sell: Most the owner gives (default: 100)
        min_buy: Least the owner accepts (default: 0)

    Returns:
        Exchange instance ready for testing
    """
    return Exchange(
        addr=addr,
        token_sell=token_sell,
        token_buy=token_buy,
        rate_min=rate_min,
        max_sell=max_sell,
        min_buy=min_buy,
    )


def sign_exchange(exchange: Exchange) -> SignedExchange:
    return SignedExchange(data=exchange, sig=SIG)


def make_intent(
    addr: str = ALICE,
    exchanges: list[Exchange] | None = None,
    **exchange_kwargs,
) -> SignedIntent:
    """Create a signed intent.

    Either pass a list of exchanges, or keyword arguments for a single
    exchange owned by addr.
    """
    if exchanges is None:
        exchanges = [make_exchange(addr=addr, **exchange_kwargs)]
    intent = FungibleTokenIntent(addr=addr, exchange=[sign_exchange(e) for e in exchanges])
    return SignedIntent(data=intent, sig=SIG)


def make_node(intent_id: str = "0x01", addr: str = ALICE, **exchange_kwargs) -> ExchangeNode:
    """Create a graph node for a single-exchange intent."""
    intent = make_intent(addr=addr, **exchange_kwargs)
    return ExchangeNode(id=intent_id, exchange=intent.data.exchange[0], intent=intent)


def make_graph(*nodes: ExchangeNode) -> ExchangeGraph:
    """Create a graph by inserting nodes in order."""
    graph = ExchangeGraph()
    for node in nodes:
        insert(graph, node)
    return graph


def intent_bytes(intent: SignedIntent) -> bytes:
    """Encode an intent the way it is submitted to the matchmaker."""
    return intent.model_dump_json().encode()


__all__ = [
    "make_exchange",
    "sign_exchange",
    "make_intent",
    "make_node",
    "make_graph",
    "intent_bytes",
]
