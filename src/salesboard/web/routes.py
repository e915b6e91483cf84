"""
HTTP and WebSocket endpoints for the salesboard server.

Every agent, team, sale and currency change broadcasts an event envelope to
the connected displays after the change is committed; displays then re-fetch
``/api/dashboard``.

Handlers are ``async`` and call the database directly on the event loop. The
app shares one SQLAlchemy session, which must not be used from several
threads at once, so storage calls are serialized on the loop instead of
being moved to a thread pool.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from fastapi.websockets import WebSocketState

from salesboard.database.base import Database
from salesboard.domain.agent import AgentService
from salesboard.domain.category import CategoryService
from salesboard.domain.cycle_reset import CycleFailure
from salesboard.domain.dashboard import DashboardService
from salesboard.domain.entities import EntityKind, LeaderboardRow
from salesboard.domain.errors import NotFoundError, agent_not_found, team_not_found
from salesboard.domain.sale import SaleService
from salesboard.domain.settings import SettingsService
from salesboard.domain.team import TeamService
from salesboard.realtime.broadcast import BroadcastHub, jsonable
from salesboard.realtime.scheduler import CycleScheduler
from salesboard.web.schemas import (
    AgentCreate,
    AgentIn,
    CategoryIn,
    CurrencyIn,
    SaleCreate,
    SaleUpdate,
    TeamCreate,
    TeamIn,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_hub(request: Request) -> BroadcastHub:
    return request.app.state.hub


def get_scheduler(request: Request) -> CycleScheduler:
    return request.app.state.scheduler


def require_admin(request: Request) -> None:
    """Reject the request unless it carries the configured admin token."""
    token = request.app.state.admin_token
    if not token:
        return
    if request.headers.get("Authorization") != f"Bearer {token}":
        raise HTTPException(status_code=401, detail="Authentication required")


def _given(model, *fields: str) -> dict[str, Any]:
    return {
        field: getattr(model, field)
        for field in fields
        if getattr(model, field) is not None
    }


def _naive_utc(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)


def _row_payload(row: LeaderboardRow) -> dict:
    payload = jsonable(row)
    payload["volume_progress"] = str(row.volume_progress)
    payload["units_progress"] = str(row.units_progress)
    return payload


_CYCLE_FIELDS = ("target_volume", "target_units", "target_cycle", "reset_day", "reset_month")


# Dashboard
@router.get("/dashboard")
async def dashboard(request: Request, db: Database = Depends(get_db)) -> dict:
    """Ranked agents and teams for the current periods, plus the latest sales."""
    snapshot = DashboardService(db, clock=request.app.state.clock).build()
    return {
        "generated_at": jsonable(snapshot.generated_at),
        "agents": [_row_payload(row) for row in snapshot.agents],
        "teams": [_row_payload(row) for row in snapshot.teams],
        "recent_sales": jsonable(snapshot.recent_sales),
        "currency": jsonable(SettingsService(db).get_currency()),
    }


# Teams
@router.get("/teams")
async def list_teams(db: Database = Depends(get_db)) -> list:
    return jsonable(TeamService(db).list_teams())


@router.post("/teams", status_code=201, dependencies=[Depends(require_admin)])
async def create_team(
    body: TeamCreate, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> dict:
    service = TeamService(db)
    team_id = service.create_team(
        name=body.name,
        category_targets=body.category_target_tuples(),
        **_given(body, "color", *_CYCLE_FIELDS),
    )
    team = jsonable(service.get_team(team_id))
    await hub.broadcast("team_created", team)
    return team


@router.put("/teams/{team_id}", dependencies=[Depends(require_admin)])
async def update_team(
    team_id: int,
    body: TeamIn,
    db: Database = Depends(get_db),
    hub: BroadcastHub = Depends(get_hub),
) -> dict:
    team = jsonable(
        TeamService(db).update_team(
            team_id,
            category_targets=body.category_target_tuples(),
            **_given(body, "name", "color", "is_active", *_CYCLE_FIELDS),
        )
    )
    await hub.broadcast("team_updated", team)
    return team


@router.delete("/teams/{team_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_team(
    team_id: int, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> Response:
    service = TeamService(db)
    if service.delete_team(team_id):
        await hub.broadcast("team_deleted", {"id": team_id})
    else:
        await hub.broadcast("team_updated", jsonable(service.get_team(team_id)))
    return Response(status_code=204)


@router.get("/teams/{team_id}/target-history")
async def team_target_history(team_id: int, db: Database = Depends(get_db)) -> list:
    if db.get_team(team_id) is None:
        raise NotFoundError(team_not_found(team_id))
    return jsonable(db.list_target_history(EntityKind.TEAM, team_id))


# Agents
@router.get("/agents")
async def list_agents(
    team_id: Optional[int] = None, db: Database = Depends(get_db)
) -> list:
    return jsonable(AgentService(db).list_agents(team_id=team_id))


@router.post("/agents", status_code=201, dependencies=[Depends(require_admin)])
async def create_agent(
    body: AgentCreate, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> dict:
    service = AgentService(db)
    agent_id = service.create_agent(
        name=body.name,
        team_id=body.team_id,
        category=body.category,
        category_targets=body.category_target_tuples(),
        **_given(body, "photo", *_CYCLE_FIELDS),
    )
    agent = jsonable(service.get_agent(agent_id))
    await hub.broadcast("agent_created", agent)
    return agent


@router.put("/agents/{agent_id}", dependencies=[Depends(require_admin)])
async def update_agent(
    agent_id: int,
    body: AgentIn,
    db: Database = Depends(get_db),
    hub: BroadcastHub = Depends(get_hub),
) -> dict:
    agent = jsonable(
        AgentService(db).update_agent(
            agent_id,
            category_targets=body.category_target_tuples(),
            **_given(body, "name", "team_id", "category", "photo", "is_active", *_CYCLE_FIELDS),
        )
    )
    await hub.broadcast("agent_updated", agent)
    return agent


@router.delete("/agents/{agent_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_agent(
    agent_id: int, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> Response:
    service = AgentService(db)
    if service.delete_agent(agent_id):
        await hub.broadcast("agent_deleted", {"id": agent_id})
    else:
        await hub.broadcast("agent_updated", jsonable(service.get_agent(agent_id)))
    return Response(status_code=204)


@router.get("/agents/{agent_id}/target-history")
async def agent_target_history(agent_id: int, db: Database = Depends(get_db)) -> list:
    if db.get_agent(agent_id) is None:
        raise NotFoundError(agent_not_found(agent_id))
    return jsonable(db.list_target_history(EntityKind.AGENT, agent_id))


# Categories
@router.get("/categories")
async def list_categories(db: Database = Depends(get_db)) -> list:
    return jsonable(CategoryService(db).list_categories())


@router.post("/categories", status_code=201, dependencies=[Depends(require_admin)])
async def create_category(body: CategoryIn, db: Database = Depends(get_db)) -> dict:
    service = CategoryService(db)
    category_id = service.create_category(body.name)
    return {"id": category_id, "name": body.name.strip()}


# Sales
@router.get("/sales")
async def list_sales(
    agent_id: Optional[int] = None, db: Database = Depends(get_db)
) -> list:
    return jsonable(SaleService(db).list_sales(agent_id=agent_id))


@router.post("/sales", status_code=201, dependencies=[Depends(require_admin)])
async def create_sale(
    body: SaleCreate, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> dict:
    service = SaleService(db)
    sale_id = service.create_sale(
        agent_id=body.agent_id,
        amount=body.amount,
        client_name=body.client_name,
        units=body.units,
        category=body.category,
        description=body.description,
        created_at=_naive_utc(body.created_at),
    )
    sale = jsonable(service.get_sale(sale_id))
    await hub.broadcast("sale_created", sale)
    return sale


@router.put("/sales/{sale_id}", dependencies=[Depends(require_admin)])
async def update_sale(
    sale_id: int,
    body: SaleUpdate,
    db: Database = Depends(get_db),
    hub: BroadcastHub = Depends(get_hub),
) -> dict:
    sale = jsonable(
        SaleService(db).update_sale(
            sale_id, **_given(body, "amount", "units", "category", "client_name", "description")
        )
    )
    await hub.broadcast("sale_updated", sale)
    return sale


@router.delete("/sales/{sale_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_sale(
    sale_id: int, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> Response:
    SaleService(db).delete_sale(sale_id)
    await hub.broadcast("sale_deleted", {"id": sale_id})
    return Response(status_code=204)


# Settings
@router.get("/settings/currency")
async def get_currency(db: Database = Depends(get_db)) -> dict:
    return jsonable(SettingsService(db).get_currency())


@router.put("/settings/currency", dependencies=[Depends(require_admin)])
async def update_currency(
    body: CurrencyIn, db: Database = Depends(get_db), hub: BroadcastHub = Depends(get_hub)
) -> dict:
    currency = jsonable(SettingsService(db).set_currency(**_given(body, "symbol", "code", "name")))
    await hub.broadcast("currency_changed", currency)
    return currency


# Target cycles
def _failure_response(message: str, failures=()) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"message": message, "failures": [_failure_payload(f) for f in failures]},
    )


def _failure_payload(failure: CycleFailure) -> dict:
    return {
        "entity_type": failure.entity_kind.value,
        "entity_id": failure.entity_id,
        "error": failure.error,
    }


@router.post("/target-cycles/initialize", dependencies=[Depends(require_admin)])
async def initialize_target_cycles(
    scheduler: CycleScheduler = Depends(get_scheduler),
):
    """Establish cycle state for every entity that has none."""
    try:
        result = await scheduler.initialize()
    except Exception as e:
        logger.exception("Manual target cycle initialization failed")
        return _failure_response(f"Failed to initialize target cycles: {e}")
    if not result.ok:
        return _failure_response("Failed to initialize some target cycles", result.failures)
    return {"initialized": [cycle.to_payload() for cycle in result.initialized]}


@router.post("/target-cycles/reset", dependencies=[Depends(require_admin)])
async def reset_target_cycles(
    scheduler: CycleScheduler = Depends(get_scheduler),
):
    """Run a reset pass now. Closes only periods that have actually elapsed."""
    try:
        result = await scheduler.run_pass()
    except Exception as e:
        logger.exception("Manual target cycle reset failed")
        return _failure_response(f"Failed to reset target cycles: {e}")
    if result is None:
        return JSONResponse(
            status_code=409, content={"message": "A target cycle pass is already running"}
        )
    if not result.ok:
        return _failure_response("Failed to reset some target cycles", result.failures)
    return {
        "transitions": [transition.to_payload() for transition in result.transitions],
        "initialized": [cycle.to_payload() for cycle in result.initialized],
    }


# Real-time
ws_router = APIRouter()


@ws_router.websocket("/ws")
async def display_updates(websocket: WebSocket) -> None:
    """
    Real-time channel for TV displays.

    The server only pushes ``{"type", "data"}`` envelopes; a client may send
    "ping" and receives a "pong" envelope back. Other frames, binary ones
    included, are ignored.
    """
    hub: BroadcastHub = websocket.app.state.hub
    await websocket.accept()
    hub.register(websocket)
    try:
        while websocket.client_state == WebSocketState.CONNECTED:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug("Display websocket closed by client")
                break
            text = message.get("text")
            if text is not None and text.strip().lower() == "ping":
                await websocket.send_json({"type": "pong", "data": None})
    except WebSocketDisconnect:
        logger.debug("Display websocket closed while sending")
    finally:
        hub.unregister(websocket)
