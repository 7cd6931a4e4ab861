"""REST API routes: lobby, table creation and table events."""
from __future__ import annotations
import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from poker_ui.controller.errors import ControllerError
from poker_ui.engine.client import EngineError
from poker_ui.managers.connection_manager import connection_manager
from poker_ui.managers.table_manager import TableLimitError, table_manager
from poker_ui.models.events import UIEvent
from poker_ui.table.session import TableSession

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_table_or_404(table_id: str) -> TableSession:
    table = table_manager.get_table(table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table


@router.get("/", response_class=HTMLResponse)
async def lobby_page(request: Request):
    templates = request.app.state.templates
    tables = table_manager.list_tables()
    return templates.TemplateResponse(request, "lobby.html", {"tables": tables})


@router.get("/table/{table_id}", response_class=HTMLResponse)
async def table_page(request: Request, table_id: str):
    templates = request.app.state.templates
    table = _get_table_or_404(table_id)
    return templates.TemplateResponse(request, "table.html", {
        "table_id": table_id,
        "view": table.view(),
    })


@router.post("/api/tables")
async def create_table(request: Request) -> Dict[str, Any]:
    settings = request.app.state.settings
    try:
        table = table_manager.create_table(request.app.state.engine, settings.hero_index)
    except TableLimitError as e:
        raise HTTPException(status_code=400, detail=str(e))

    async def broadcast_cb(table_id: str, view: dict) -> None:
        await connection_manager.broadcast(table_id, "table_state", view)

    table.set_on_change(broadcast_cb)

    try:
        await table.start()
    except (EngineError, ValidationError) as e:
        table_manager.delete_table(table.table_id)
        raise HTTPException(status_code=502, detail=f"Engine error: {e}")

    return {"table_id": table.table_id, "version": table.version}


@router.get("/api/tables")
async def list_tables() -> Dict[str, Any]:
    return {"tables": table_manager.list_tables()}


@router.get("/api/tables/{table_id}/state")
async def get_table_state(table_id: str) -> Dict[str, Any]:
    return _get_table_or_404(table_id).view()


@router.post("/api/tables/{table_id}/events")
async def post_table_event(table_id: str, event: UIEvent) -> Dict[str, Any]:
    table = _get_table_or_404(table_id)
    try:
        return await table.handle_event(event)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    except ControllerError as e:
        logger.warning(f"Rejected {event.type} event at table {table_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except EngineError as e:
        raise HTTPException(status_code=502, detail=f"Engine error: {e}")


@router.post("/api/tables/{table_id}/refresh")
async def refresh_table(table_id: str) -> Dict[str, Any]:
    """Re-query the engine for the current snapshot, e.g. after an outage."""
    table = _get_table_or_404(table_id)
    try:
        await table.refresh()
    except (EngineError, ValidationError) as e:
        raise HTTPException(status_code=502, detail=f"Engine error: {e}")
    return table.view()


@router.delete("/api/tables/{table_id}")
async def close_table(table_id: str) -> Dict[str, Any]:
    if not table_manager.delete_table(table_id):
        raise HTTPException(status_code=404, detail="Table not found")
    return {"table_id": table_id, "closed": True}
