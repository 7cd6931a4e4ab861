"""
Async HTTP client for the remote poker engine.

Each engine command is a POST with a JSON body; snapshots travel in full in
both directions because the engine is stateless between calls.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from poker_ui.controller.actions import ActionIntent
from poker_ui.controller.amount_input import AmountRange

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """The engine rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EngineClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Engine commands
    # ------------------------------------------------------------------

    async def new_game(self) -> Dict[str, Any]:
        game = await self._post("/get_new_game")
        if not isinstance(game, dict):
            raise EngineError(f"Engine returned a malformed game: {game!r}")
        return game

    async def possible_actions(self, game: Dict[str, Any]) -> List[Any]:
        actions = await self._post("/get_possible_actions", {"game": game})
        if not isinstance(actions, list):
            raise EngineError(f"Engine returned malformed actions: {actions!r}")
        return actions

    async def call_amount(self, game: Dict[str, Any]) -> int:
        amount = await self._post("/get_call_amount", {"game": game})
        if amount is None:
            return 0
        try:
            return int(amount)
        except (TypeError, ValueError) as e:
            raise EngineError(f"Engine returned a malformed call amount {amount!r}") from e

    async def raise_or_bet_range(self, game: Dict[str, Any]) -> Optional[AmountRange]:
        raw = await self._post("/get_raise_or_bet_range", {"game": game})
        try:
            return AmountRange.from_wire(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise EngineError(f"Engine returned a malformed range {raw!r}: {e}") from e

    async def act(self, game: Dict[str, Any], intent: ActionIntent) -> Dict[str, Any]:
        logger.info(f"Submitting {intent} to engine")
        game = await self._post("/act", {"game": game, "action": intent.to_wire()})
        if not isinstance(game, dict):
            raise EngineError(f"Engine returned a malformed game: {game!r}")
        return game

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _post(self, path: str, body: Optional[dict] = None) -> Any:
        try:
            resp = await self._client.post(path, json=body or {})
        except httpx.HTTPError as e:
            logger.error(f"Engine unreachable on {path}: {e}")
            raise EngineError(f"Engine unreachable: {e}") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning(f"Engine rejected {path} ({resp.status_code}): {message}")
            raise EngineError(message, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise EngineError(f"Engine sent invalid JSON on {path}") from e


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    if isinstance(data, str):
        return data
    return resp.text
