"""Shared fixtures for all tests."""
import copy
import json

import httpx
import pytest

from poker_ui.engine.client import EngineClient
from poker_ui.managers.table_manager import table_manager


def _card(rank, suit):
    return {"rank": rank, "suit": suit}


HIDDEN = {"rank": -1, "suit": ""}


class FakeEngine:
    """In-memory stand-in for the remote engine, served through httpx.MockTransport.

    Legality, call amount and range are whatever the test sets; every act
    appends the action to the snapshot's history and bumps `step`.
    """

    def __init__(self) -> None:
        self.actions = ["Call", "Fold", {"Raise": 0}]
        self.call_amount = 10
        self.range = {"start": 40, "end": 990}
        self.act_error = None      # str → /act answers 400 with this detail
        self.down = False          # True → every call answers 503
        self.requests = []         # (path, body)

    def new_game(self) -> dict:
        return {
            "players": [
                {"name": "Hero", "hole": [_card(1, "Spade"), _card(13, "Heart")],
                 "bet_size": 10, "stack": 990, "folded": False},
                {"name": "Villain", "hole": [HIDDEN, HIDDEN],
                 "bet_size": 20, "stack": 980, "folded": False},
            ],
            "community": [],
            "pot_size": 0,
            "step": 0,
            "history": [],
            "deck": {"cards": [_card(2, "Club"), _card(7, "Diamond")]},
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        path = request.url.path
        self.requests.append((path, body))

        if self.down:
            return httpx.Response(503, json={"detail": "engine offline"})
        if path == "/get_new_game":
            return httpx.Response(200, json=self.new_game())
        if path == "/get_possible_actions":
            return httpx.Response(200, json=self.actions)
        if path == "/get_call_amount":
            return httpx.Response(200, content=json.dumps(self.call_amount),
                                  headers={"content-type": "application/json"})
        if path == "/get_raise_or_bet_range":
            return httpx.Response(200, content=json.dumps(self.range),
                                  headers={"content-type": "application/json"})
        if path == "/act":
            if self.act_error:
                return httpx.Response(400, json={"detail": self.act_error})
            game = copy.deepcopy(body["game"])
            game["step"] += 1
            game["history"].append(body["action"])
            return httpx.Response(200, json=game)
        return httpx.Response(404, json={"detail": f"unknown command {path}"})

    def paths(self) -> list:
        return [p for p, _ in self.requests]

    def acted(self) -> list:
        return [b["action"] for p, b in self.requests if p == "/act"]


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def engine_client(fake_engine):
    return EngineClient("http://engine.test", transport=httpx.MockTransport(fake_engine.handler))


@pytest.fixture(autouse=True)
def _close_tables():
    """Tables live in a module-level manager; drop them between tests."""
    yield
    for t in table_manager.list_tables():
        table_manager.delete_table(t["table_id"])
