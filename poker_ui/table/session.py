"""
TableSession — one player's table bound to one engine game.

Snapshot lifecycle:
  engine snapshot → (actions, call amount, range) fetched together
                  → applied to the controller in one step → version += 1

Player events that can emit an intent are serialised behind a lock and
checked against the snapshot version they were issued for, so an event that
raced an engine round trip is rejected instead of being applied to the newer
snapshot.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from poker_ui.controller.action_controller import ActionController
from poker_ui.controller.actions import ActionIntent
from poker_ui.controller.errors import StaleSnapshotError
from poker_ui.engine.client import EngineClient
from poker_ui.models.events import ClickPayload, InputPayload, KeyPayload, UIEvent
from poker_ui.models.snapshot import GameSnapshot
from poker_ui.table.presenters import community_view, seat_order

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, dict], Awaitable[None]]


class TableSession:
    def __init__(self, table_id: str, engine: EngineClient, hero_index: int = 0) -> None:
        self.table_id = table_id
        self.hero_index = hero_index
        self._engine = engine
        self._outbox: List[ActionIntent] = []
        self.controller = ActionController(self._outbox.append)
        self._raw_game: Optional[Dict[str, Any]] = None
        self._snapshot = GameSnapshot()
        self._version = 0
        self._busy = False
        self._lock = asyncio.Lock()
        self._on_change: Optional[ChangeCallback] = None

    @property
    def version(self) -> int:
        return self._version

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def snapshot(self) -> GameSnapshot:
        return self._snapshot

    def set_on_change(self, cb: ChangeCallback) -> None:
        """cb(table_id, view) is awaited after every visible change."""
        self._on_change = cb

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Ask the engine for a new round and show it."""
        async with self._lock:
            game = await self._engine.new_game()
            await self._apply_game(game)
        await self._notify()

    async def refresh(self) -> None:
        """Re-query legality for the current snapshot (e.g. after an engine outage)."""
        if self._raw_game is None:
            await self.start()
            return
        async with self._lock:
            await self._apply_game(self._raw_game)
        await self._notify()

    async def _apply_game(self, game: Dict[str, Any]) -> None:
        snapshot = GameSnapshot.from_wire(game)
        actions, call_amount, amount_range = await asyncio.gather(
            self._engine.possible_actions(game),
            self._engine.call_amount(game),
            self._engine.raise_or_bet_range(game),
        )
        # nothing is replaced until all three answers are in
        self._raw_game = game
        self._snapshot = snapshot
        self.controller.apply_snapshot(actions, amount_range, call_amount)
        self._version += 1
        logger.debug(f"Table {self.table_id} at snapshot v{self._version}")

    # ------------------------------------------------------------------
    # UI events
    # ------------------------------------------------------------------

    async def handle_event(self, event: UIEvent) -> dict:
        """Apply one UI event; returns the resulting table view."""
        if event.type == "key":
            self.controller.handle_key(KeyPayload.model_validate(event.payload).key)
        elif event.type == "input":
            self.controller.set_amount(InputPayload.model_validate(event.payload).value)
        else:
            click = ClickPayload.model_validate(event.payload)
            if click.control == "cancel":
                self.controller.cancel_amount()
            else:
                issued_for = event.version if event.version is not None else self._version
                await self._handle_click(click, issued_for)
        # slider moves are answered to the sender only; a broadcast would
        # redraw the range input while it is being dragged
        if event.type != "input":
            await self._notify()
        return self.view()

    async def _handle_click(self, click: ClickPayload, issued_for: int) -> None:
        async with self._lock:
            if issued_for != self._version:
                raise StaleSnapshotError(
                    f"Event for snapshot v{issued_for}, table is at v{self._version}"
                )
            dispatch = {
                "call": self.controller.call,
                "check": self.controller.check,
                "fold": self.controller.fold,
                "bet": self.controller.choose_bet,
                "raise": self.controller.choose_raise,
            }
            if click.control == "commit":
                self.controller.commit_amount(click.value)
            else:
                dispatch[click.control]()
            await self._submit_pending()

    async def _submit_pending(self) -> None:
        if not self._outbox:
            return
        intent = self._outbox.pop(0)
        self._busy = True
        try:
            game = await self._engine.act(self._raw_game, intent)
            await self._apply_game(game)
        finally:
            self._busy = False
            self._outbox.clear()

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def view(self) -> dict:
        ctrl = self.controller
        return {
            "table_id": self.table_id,
            "version": self._version,
            "busy": self._busy,
            "players": seat_order(self._snapshot, self.hero_index),
            "community": community_view(self._snapshot),
            "actions": ctrl.render().to_dict(),
            "legality": ctrl.legality.to_dict(),
            "call_amount": ctrl.call_amount,
            "amount_range": ctrl.amount_range.to_dict() if ctrl.amount_range else None,
        }

    async def _notify(self) -> None:
        if self._on_change:
            await self._on_change(self.table_id, self.view())
