"""API endpoints for the matchmaker."""

import os

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from matchmaker.config import MatchmakerConfig
from matchmaker.errors import FormatError
from matchmaker.matchmaker import Matchmaker
from matchmaker.models.intent import SignedIntent
from matchmaker.models.settlement import Transfer
from matchmaker.models.types import HexBytes
from matchmaker.ports import InMemoryStateStore, RecordingSubmitter

logger = structlog.get_logger()

router = APIRouter()

_default_matchmaker: Matchmaker | None = None


class IntentSubmission(BaseModel):
    """Request body for POST /intents."""

    id: HexBytes = Field(min_length=1, description="Opaque intent identifier (hex)")
    intent: SignedIntent


class SettlementView(BaseModel):
    intent_ids: list[str]
    transfers: list[Transfer]
    volume: int


class UnresolvedView(BaseModel):
    ring: list[int]
    reason: str


class MatchResponse(BaseModel):
    """Response body for POST /intents."""

    inserted: list[int]
    settlements: list[SettlementView]
    unresolved: list[UnresolvedView]
    node_count: int


class NodeView(BaseModel):
    index: int
    id: str
    owner: str
    token_sell: str
    token_buy: str


class EdgeView(BaseModel):
    source: int
    target: int
    label: str


class GraphView(BaseModel):
    nodes: list[NodeView]
    edges: list[EdgeView]


def _create_default_matchmaker() -> Matchmaker:
    """Create an in-memory matchmaker.

    Configuration via environment variables:
    - MATCHMAKER_MAX_CYCLE_SIZE: Longest ring to settle (default: unlimited)
    """
    max_cycle_size = os.environ.get("MATCHMAKER_MAX_CYCLE_SIZE")
    config = MatchmakerConfig(max_cycle_size=int(max_cycle_size) if max_cycle_size else None)
    logger.info("matchmaker_created", max_cycle_size=config.max_cycle_size)
    return Matchmaker(
        store=InMemoryStateStore(),
        submitter=RecordingSubmitter(),
        config=config,
    )


def get_matchmaker() -> Matchmaker:
    """Dependency provider for the matchmaker instance.

    Override this in tests to inject a matchmaker with its own ports:
        app.dependency_overrides[get_matchmaker] = lambda: matchmaker

    Returns:
        The matchmaker instance to use for submitted intents.
    """
    global _default_matchmaker
    if _default_matchmaker is None:
        _default_matchmaker = _create_default_matchmaker()
    return _default_matchmaker


# Endpoints are async and run the matchmaker inline: invocations must not
# overlap, and the event loop runs them one at a time.
@router.post("/intents")
async def submit_intent(
    submission: IntentSubmission,
    matchmaker: Matchmaker = Depends(get_matchmaker),
) -> MatchResponse:
    """Insert an intent and settle any rings it completes.

    Error Handling:
        - Invalid intent schema: Returns 422 Validation Error (Pydantic)
        - Malformed stored graph: Returns 500, nothing is submitted or saved
    """
    try:
        result = matchmaker.add_signed_intent(submission.id, submission.intent)
    except FormatError as err:
        logger.exception("stored_graph_malformed", intent_id=submission.id)
        raise HTTPException(status_code=500, detail=str(err)) from err

    return MatchResponse(
        inserted=result.inserted,
        settlements=[
            SettlementView(
                intent_ids=s.intent_ids,
                transfers=s.payload.transfers,
                volume=s.amounts.volume,
            )
            for s in result.settlements
        ],
        unresolved=[UnresolvedView(ring=u.ring, reason=u.reason) for u in result.unresolved],
        node_count=result.node_count,
    )


@router.get("/graph")
async def get_graph(matchmaker: Matchmaker = Depends(get_matchmaker)) -> GraphView:
    """List the intents currently waiting for a match."""
    try:
        graph = matchmaker.load_graph()
    except FormatError as err:
        logger.exception("stored_graph_malformed")
        raise HTTPException(status_code=500, detail=str(err)) from err

    return GraphView(
        nodes=[
            NodeView(
                index=i,
                id=graph[i].id,
                owner=graph[i].owner,
                token_sell=graph[i].token_sell,
                token_buy=graph[i].token_buy,
            )
            for i in graph.node_indices()
        ],
        edges=[EdgeView(source=s, target=t, label=label) for s, t, label in graph.edges()],
    )
