"""FastAPI application for the matchmaker.

Runs the matchmaker as a local service with in-memory state. The ledger
host normally drives the matchmaker directly; this adapter is for
running and inspecting it outside a host.
"""

import os
from dataclasses import dataclass

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from matchmaker import __version__
from matchmaker.api.endpoints import get_matchmaker, router
from matchmaker.errors import FormatError
from matchmaker.matchmaker import Matchmaker

logger = structlog.get_logger()


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ServerSettings:
    """Where and how the HTTP adapter listens.

    Attributes:
        host: Interface to bind
        port: TCP port
        reload: Restart on code changes (development only)
        max_body_bytes: Largest accepted request body; one signed intent
            is a few kilobytes
    """

    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False
    max_body_bytes: int = 64 * 1024

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Read MATCHMAKER_HOST, MATCHMAKER_PORT, MATCHMAKER_DEBUG and
        MATCHMAKER_MAX_BODY_BYTES, falling back to the defaults."""
        defaults = cls()
        return cls(
            host=os.environ.get("MATCHMAKER_HOST", defaults.host),
            port=int(os.environ.get("MATCHMAKER_PORT", defaults.port)),
            reload=_env_flag("MATCHMAKER_DEBUG"),
            max_body_bytes=int(
                os.environ.get("MATCHMAKER_MAX_BODY_BYTES", defaults.max_body_bytes)
            ),
        )


settings = ServerSettings.from_env()

app = FastAPI(
    title="Intent Matchmaker",
    description="Finds and settles cycles of compatible barter intents",
    version=__version__,
)


@app.middleware("http")
async def reject_oversized_body(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Answer 413 before reading a body declared larger than max_body_bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > settings.max_body_bytes:
        logger.warning(
            "request_body_too_large",
            path=request.url.path,
            content_length=int(declared),
            limit=settings.max_body_bytes,
        )
        return JSONResponse(
            status_code=413,
            content={"detail": f"Body exceeds {settings.max_body_bytes} bytes"},
        )
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health(
    response: Response,
    matchmaker: Matchmaker = Depends(get_matchmaker),
) -> dict[str, object]:
    """Report whether the stored graph decodes, and how much is waiting in it.

    A stored graph that fails to decode makes every submission fail, so
    it is reported as 503.
    """
    try:
        graph = matchmaker.load_graph()
    except FormatError as err:
        logger.exception("health_graph_unreadable")
        response.status_code = 503
        return {"status": "graph_unreadable", "detail": str(err)}

    return {
        "status": "ok",
        "nodes": graph.node_count,
        "edges": graph.edge_count,
        "max_cycle_size": matchmaker.config.max_cycle_size,
        "resolve_until_stable": matchmaker.config.resolve_until_stable,
    }


def run() -> None:
    """Run the matchmaker API server with settings from the environment."""
    logger.info("server_starting", host=settings.host, port=settings.port)
    uvicorn.run(
        "matchmaker.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
