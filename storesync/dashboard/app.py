"""FastAPI dashboard application."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..config import Config
from ..session import ActionOutcome, ActionResult, Session

logger = logging.getLogger(__name__)


def _store_payload(session: Session) -> list[dict[str, Any]]:
    storefront = session.storefront_url()
    return [
        {**store.to_dict(), "storefront_url": storefront}
        for store in session.stores
    ]


def _action_response(result: ActionResult) -> dict[str, Any]:
    if result.outcome == ActionOutcome.FAILED:
        raise HTTPException(
            status_code=502,
            detail={"alert": result.alert, "error": result.error},
        )
    return {"outcome": result.outcome.value}


def create_app(config: Config, session: Session | None = None) -> FastAPI:
    """Create the FastAPI dashboard application.

    The app's lifespan starts the session (and with it, polling) and
    disposes it on shutdown.

    Args:
        config: Application configuration.
        session: Optional pre-built session; one is created from ``config``
            otherwise.

    Returns:
        Configured FastAPI application.
    """
    session = session or Session(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await session.start()
        try:
            yield
        finally:
            await session.dispose()

    app = FastAPI(
        title="storesync dashboard",
        description="Live view of provisioned stores",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.session = session

    @app.get("/api/stores")
    async def api_stores() -> dict[str, Any]:
        """Current store snapshot, in authority order."""
        return {"stores": _store_payload(session)}

    @app.get("/api/logs")
    async def api_logs() -> dict[str, Any]:
        """Event log, newest first."""
        return {"logs": [e.to_dict() for e in session.logs]}

    @app.get("/api/state")
    async def api_state() -> dict[str, Any]:
        state = session.state.to_dict()
        state["stores"] = _store_payload(session)
        return state

    @app.get("/api/health")
    async def api_health() -> dict[str, Any]:
        """Health check endpoint.

        Always returns 200 OK; sync problems show up in the body.
        """
        status = session.get_status()
        status["status"] = "ok" if status["consecutive_failures"] == 0 else "degraded"
        return status

    @app.post("/api/provision")
    async def api_provision():
        result = await session.create()
        if result.outcome == ActionOutcome.SKIPPED:
            return JSONResponse(
                status_code=409,
                content={"outcome": result.outcome.value, "detail": "A create is already in flight"},
            )
        return _action_response(result)

    @app.delete("/api/stores/{name}")
    async def api_delete_store(name: str, confirm: bool = False):
        """Delete a store; the first call without ``confirm`` only asks."""
        try:
            proposal = session.propose_delete(name)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if not confirm:
            return JSONResponse(
                status_code=428,
                content={"name": proposal.name, "prompt": proposal.prompt},
            )

        result = await session.execute_delete(proposal, confirmed=True)
        return _action_response(result)

    return app
