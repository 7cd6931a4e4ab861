"""WebSocket endpoint: UI events in, table views out."""
from __future__ import annotations
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from poker_ui.controller.errors import ControllerError
from poker_ui.engine.client import EngineError
from poker_ui.managers.connection_manager import connection_manager
from poker_ui.managers.table_manager import table_manager
from poker_ui.models.events import UIEvent

logger = logging.getLogger(__name__)
ws_router = APIRouter()


@ws_router.websocket("/ws/{table_id}/{client_id}")
async def websocket_endpoint(websocket: WebSocket, table_id: str, client_id: str):
    table = table_manager.get_table(table_id)
    if not table:
        await websocket.close(code=4004, reason="Table not found")
        return

    await connection_manager.connect(table_id, client_id, websocket)

    # Send current table view immediately on connect
    await connection_manager.send_personal(table_id, client_id, "table_state", table.view())

    try:
        while True:
            data = await websocket.receive_json()

            if data.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            try:
                # the session broadcasts the new view to every client
                if data.get("type") == "refresh":
                    await table.refresh()
                else:
                    event = UIEvent.model_validate(data)
                    view = await table.handle_event(event)
                    if event.type == "input":
                        await connection_manager.send_personal(table_id, client_id, "table_state", view)
            except (ValidationError, ControllerError, EngineError) as e:
                logger.warning(f"Rejected event from {client_id} at {table_id}: {e}")
                await connection_manager.send_personal(
                    table_id, client_id, "error", {"message": str(e)},
                )

    except WebSocketDisconnect:
        connection_manager.disconnect(table_id, client_id)
        logger.info(f"Client {client_id} disconnected from table {table_id}")
    except Exception as e:
        logger.error(f"WebSocket error for {client_id} at {table_id}: {e}")
        connection_manager.disconnect(table_id, client_id)
