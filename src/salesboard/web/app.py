"""FastAPI application wiring for the TV display server."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salesboard.database.base import Database
from salesboard.domain.cycle_reset import Clock, CycleResetEngine, utc_now
from salesboard.domain.errors import DomainError, NotFoundError
from salesboard.realtime.broadcast import BroadcastHub
from salesboard.realtime.scheduler import DEFAULT_INTERVAL, CycleScheduler
from salesboard.web.routes import router, ws_router

logger = logging.getLogger(__name__)


def create_app(
    db: Database,
    hub: Optional[BroadcastHub] = None,
    scheduler: Optional[CycleScheduler] = None,
    admin_token: Optional[str] = None,
    reset_interval: float = DEFAULT_INTERVAL,
    start_scheduler: bool = True,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    Build the web application around a database.

    Args:
        db: Database instance shared by every request
        hub: Broadcast hub; a fresh one is created when omitted
        scheduler: Cycle scheduler; built from the database when omitted
        admin_token: Bearer token required by mutating endpoints, if set
        reset_interval: Seconds between scheduled reset passes
        start_scheduler: Whether the lifespan starts periodic reset checks
        clock: Source of the current UTC time

    Returns:
        Configured FastAPI application
    """
    hub = hub or BroadcastHub()
    if scheduler is None:
        engine = CycleResetEngine(db, clock=clock)
        scheduler = CycleScheduler(engine, hub, interval=reset_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_scheduler:
            await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            db.disconnect()

    app = FastAPI(title="Salesboard", lifespan=lifespan)
    app.state.db = db
    app.state.hub = hub
    app.state.scheduler = scheduler
    app.state.admin_token = admin_token
    app.state.clock = clock

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        return JSONResponse(status_code=status_code, content={"message": str(exc)})

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "connections": hub.connection_count}

    app.include_router(router, prefix="/api")
    app.include_router(ws_router)
    return app
