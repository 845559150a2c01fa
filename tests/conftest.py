"""Pytest configuration and fixtures."""

import pytest

from matchmaker.config import MatchmakerConfig
from matchmaker.matchmaker import Matchmaker
from matchmaker.ports import InMemoryStateStore, RecordingSubmitter
from tests.helpers import ALICE, BOB, BTC, CAROL, ETH, XAN, make_node

# =============================================================================
# Ports
# =============================================================================


@pytest.fixture
def store() -> InMemoryStateStore:
    """An empty in-memory state store."""
    return InMemoryStateStore()


@pytest.fixture
def submitter() -> RecordingSubmitter:
    """A submitter that records every payload."""
    return RecordingSubmitter()


@pytest.fixture
def matchmaker(store: InMemoryStateStore, submitter: RecordingSubmitter) -> Matchmaker:
    """A matchmaker with default configuration over the in-memory ports."""
    return Matchmaker(store=store, submitter=submitter)


@pytest.fixture
def make_matchmaker(store: InMemoryStateStore, submitter: RecordingSubmitter):
    """Build a matchmaker over the shared ports with a custom configuration.

    Usage:
        mm = make_matchmaker(max_cycle_size=2)
    """

    def _make(**config_kwargs) -> Matchmaker:
        config = MatchmakerConfig(**config_kwargs)
        return Matchmaker(store=store, submitter=submitter, config=config)

    return _make


# =============================================================================
# Nodes
# =============================================================================


@pytest.fixture
def pair_nodes():
    """Two nodes forming a 2-cycle: ALICE sells BTC for ETH, BOB the reverse."""
    return (
        make_node("0x01", addr=ALICE, token_sell=BTC, token_buy=ETH),
        make_node("0x02", addr=BOB, token_sell=ETH, token_buy=BTC),
    )


@pytest.fixture
def ring_nodes():
    """Three nodes forming a 3-ring.

    ALICE gives BTC to BOB, BOB gives ETH to CAROL, CAROL gives XAN to ALICE.
    """
    return (
        make_node("0x01", addr=ALICE, token_sell=BTC, token_buy=XAN),
        make_node("0x02", addr=BOB, token_sell=ETH, token_buy=BTC),
        make_node("0x03", addr=CAROL, token_sell=XAN, token_buy=ETH),
    )
