"""
WebSocket connection registry.

Maintains a mapping: table_id → client_id → WebSocket. Every client watching
a table receives the same table view.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Dict

from fastapi import WebSocket

from poker_ui.models.events import ServerEvent

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        # table_id → { client_id → WebSocket }
        self._connections: Dict[str, Dict[str, WebSocket]] = {}

    async def connect(self, table_id: str, client_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        if table_id not in self._connections:
            self._connections[table_id] = {}
        self._connections[table_id][client_id] = websocket
        logger.info(f"Connected: {client_id} at table {table_id}")

    def disconnect(self, table_id: str, client_id: str) -> None:
        if table_id in self._connections:
            self._connections[table_id].pop(client_id, None)
            if not self._connections[table_id]:
                del self._connections[table_id]
        logger.info(f"Disconnected: {client_id} from table {table_id}")

    async def send_personal(
        self,
        table_id: str,
        client_id: str,
        event_type: str,
        payload: dict,
    ) -> None:
        """Send a message to one client."""
        ws = self._connections.get(table_id, {}).get(client_id)
        if ws:
            await self._safe_send(ws, table_id, client_id, event_type, payload)

    async def broadcast(self, table_id: str, event_type: str, payload: dict) -> None:
        """Send the same event to every client at a table."""
        connections = self._connections.get(table_id, {})
        tasks = [
            self._safe_send(ws, table_id, client_id, event_type, payload)
            for client_id, ws in list(connections.items())
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _safe_send(
        self,
        ws: WebSocket,
        table_id: str,
        client_id: str,
        event_type: str,
        payload: dict,
    ) -> None:
        try:
            await ws.send_json(ServerEvent(type=event_type, payload=payload).model_dump())
        except Exception as e:
            logger.warning(f"WS send failed {client_id}: {e}")
            self.disconnect(table_id, client_id)

    def is_connected(self, table_id: str, client_id: str) -> bool:
        return client_id in self._connections.get(table_id, {})

    def client_count(self, table_id: str) -> int:
        return len(self._connections.get(table_id, {}))


# Global singleton
connection_manager = ConnectionManager()
