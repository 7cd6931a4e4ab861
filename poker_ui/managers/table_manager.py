"""In-memory TableSession store."""
from __future__ import annotations
import uuid
from typing import Dict, List, Optional

from poker_ui.engine.client import EngineClient
from poker_ui.table.session import TableSession


class TableLimitError(Exception):
    pass


class TableManager:
    def __init__(self, max_tables: int = 16) -> None:
        self.max_tables = max_tables
        self._tables: Dict[str, TableSession] = {}

    def create_table(self, engine: EngineClient, hero_index: int = 0) -> TableSession:
        if len(self._tables) >= self.max_tables:
            raise TableLimitError(f"At most {self.max_tables} tables can be open")
        table_id = str(uuid.uuid4())[:8]
        table = TableSession(table_id=table_id, engine=engine, hero_index=hero_index)
        self._tables[table_id] = table
        return table

    def get_table(self, table_id: str) -> Optional[TableSession]:
        return self._tables.get(table_id)

    def list_tables(self) -> List[dict]:
        result = []
        for tid, table in self._tables.items():
            snapshot = table.snapshot
            result.append({
                "table_id": tid,
                "version": table.version,
                "mode": table.controller.mode.value,
                "players": [p.name for p in snapshot.players],
                "pot": snapshot.pot_size,
            })
        return result

    def delete_table(self, table_id: str) -> bool:
        if table_id in self._tables:
            del self._tables[table_id]
            return True
        return False


# Global singleton
table_manager = TableManager()
