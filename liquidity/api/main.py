"""FastAPI application exposing the pool lifecycle actions.

Serves a single operator driving a single pool. Requests for actions are
serialized by the orchestrator's busy flag, not by the server.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from liquidity import __version__
from liquidity.api.endpoints import close_default_orchestrator, router
from liquidity.log_config import configure_logging

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LIQUIDITY_HOST", "127.0.0.1")
PORT = int(os.environ.get("LIQUIDITY_PORT", "8000"))
DEBUG = os.environ.get("LIQUIDITY_DEBUG", "false").lower() in ("true", "1", "yes")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Close the orchestrator's network client on shutdown."""
    yield
    await close_default_orchestrator()


app = FastAPI(
    title="Liquidity Pool Orchestrator",
    description="Create, trade against and withdraw from a constant-product pool on testnet",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - LIQUIDITY_HOST: Host to bind to (default: 127.0.0.1)
    - LIQUIDITY_PORT: Port to bind to (default: 8000)
    - LIQUIDITY_DEBUG: Enable debug logging (default: false)

    Reload mode is never used: the orchestrator's state lives in process
    memory and would be lost on reload.
    """
    configure_logging(debug=DEBUG)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
