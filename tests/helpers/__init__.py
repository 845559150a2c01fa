"""Test helpers module for shared test utilities.

- constants: Token and owner addresses
- factories: Exchange, intent, node and graph factory functions
"""

from tests.helpers.constants import ALICE, BOB, BTC, CAROL, DAVE, ETH, NAM, SIG, XAN
from tests.helpers.factories import (
    intent_bytes,
    make_exchange,
    make_graph,
    make_intent,
    make_node,
    sign_exchange,
)

__all__ = [
    # Constants
    "BTC",
    "ETH",
    "XAN",
    "NAM",
    "ALICE",
    "BOB",
    "CAROL",
    "DAVE",
    "SIG",
    # Factories
    "make_exchange",
    "sign_exchange",
    "make_intent",
    "make_node",
    "make_graph",
    "intent_bytes",
]
