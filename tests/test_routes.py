"""Unit tests for routes.py and websocket.py — REST and WebSocket endpoints."""
import pytest
from fastapi.testclient import TestClient

from poker_ui.config.settings import Settings
from poker_ui.main import create_app


@pytest.fixture
def client(engine_client):
    app = create_app(Settings(), engine=engine_client)
    with TestClient(app) as c:
        yield c


def _open_table(client) -> str:
    resp = client.post("/api/tables")
    assert resp.status_code == 200
    return resp.json()["table_id"]


class TestLobbyPage:
    def test_lobby_returns_html(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]

    def test_lobby_lists_tables(self, client):
        table_id = _open_table(client)
        assert table_id in client.get("/").text


class TestCreateTable:
    def test_create_table(self, client, fake_engine):
        resp = client.post("/api/tables")
        assert resp.status_code == 200
        data = resp.json()
        assert "table_id" in data
        assert data["version"] == 1
        assert fake_engine.paths()[0] == "/get_new_game"

    def test_engine_down(self, client, fake_engine):
        fake_engine.down = True
        resp = client.post("/api/tables")
        assert resp.status_code == 502
        assert "engine offline" in resp.json()["detail"]
        assert client.get("/api/tables").json()["tables"] == []

    def test_malformed_snapshot(self, client, fake_engine):
        fake_engine.new_game = lambda: {"players": "nobody", "pot_size": -5}
        resp = client.post("/api/tables")
        assert resp.status_code == 502
        assert client.get("/api/tables").json()["tables"] == []

    def test_table_limit(self, engine_client):
        app = create_app(Settings(max_tables=1), engine=engine_client)
        with TestClient(app) as c:
            assert c.post("/api/tables").status_code == 200
            resp = c.post("/api/tables")
            assert resp.status_code == 400


class TestTableState:
    def test_get_state(self, client):
        table_id = _open_table(client)
        data = client.get(f"/api/tables/{table_id}/state").json()
        assert data["table_id"] == table_id
        assert [p["name"] for p in data["players"]] == ["Villain", "Hero"]
        assert data["community"]["label"] == "POT SIZE: 0 (TOTAL: 30)"
        labels = [b["label"] for b in data["actions"]["buttons"]]
        assert labels == ["Call 10", "Raise", "Check", "Fold"]

    def test_get_state_not_found(self, client):
        assert client.get("/api/tables/nonexistent/state").status_code == 404

    def test_list_tables(self, client):
        table_id = _open_table(client)
        tables = client.get("/api/tables").json()["tables"]
        assert [t["table_id"] for t in tables] == [table_id]


class TestTablePage:
    def test_table_page(self, client):
        table_id = _open_table(client)
        resp = client.get(f"/table/{table_id}")
        assert resp.status_code == 200
        assert "Call 10" in resp.text
        assert "Villain" in resp.text

    def test_table_page_not_found(self, client):
        assert client.get("/table/nonexistent").status_code == 404


class TestTableEvents:
    def test_raise_then_commit(self, client, fake_engine):
        table_id = _open_table(client)
        url = f"/api/tables/{table_id}/events"
        data = client.post(url, json={"type": "click", "payload": {"control": "raise"}}).json()
        assert data["actions"]["mode"] == "entering_raise"
        assert data["actions"]["slider"]["value"] == 40
        client.post(url, json={"type": "input", "payload": {"value": 600}})
        data = client.post(url, json={"type": "click", "payload": {"control": "commit"}}).json()
        assert fake_engine.acted() == [{"Raise": 600}]
        assert data["version"] == 2
        assert data["actions"]["mode"] == "idle"

    def test_illegal_action_conflict(self, client, fake_engine):
        table_id = _open_table(client)
        resp = client.post(f"/api/tables/{table_id}/events",
                           json={"type": "click", "payload": {"control": "check"}})
        assert resp.status_code == 409
        assert fake_engine.acted() == []

    def test_stale_version_conflict(self, client):
        table_id = _open_table(client)
        url = f"/api/tables/{table_id}/events"
        assert client.post(url, json={"type": "click", "payload": {"control": "call"}, "version": 1}).status_code == 200
        resp = client.post(url, json={"type": "click", "payload": {"control": "fold"}, "version": 1})
        assert resp.status_code == 409

    def test_out_of_range_amount(self, client):
        table_id = _open_table(client)
        url = f"/api/tables/{table_id}/events"
        client.post(url, json={"type": "click", "payload": {"control": "raise"}})
        resp = client.post(url, json={"type": "input", "payload": {"value": 5}})
        assert resp.status_code == 409

    def test_unknown_event_type(self, client):
        table_id = _open_table(client)
        resp = client.post(f"/api/tables/{table_id}/events", json={"type": "hover", "payload": {}})
        assert resp.status_code == 422

    def test_malformed_payload(self, client):
        table_id = _open_table(client)
        resp = client.post(f"/api/tables/{table_id}/events",
                           json={"type": "input", "payload": {"value": "lots"}})
        assert resp.status_code == 422

    def test_engine_rejects(self, client, fake_engine):
        table_id = _open_table(client)
        fake_engine.act_error = "Player can't call at this point"
        resp = client.post(f"/api/tables/{table_id}/events",
                           json={"type": "click", "payload": {"control": "call"}})
        assert resp.status_code == 502
        assert "can't call" in resp.json()["detail"]

    def test_table_not_found(self, client):
        resp = client.post("/api/tables/nonexistent/events",
                           json={"type": "key", "payload": {"key": "Escape"}})
        assert resp.status_code == 404


class TestRefreshTable:
    def test_refresh_requeries_engine(self, client, fake_engine):
        table_id = _open_table(client)
        fake_engine.actions = ["Check"]
        fake_engine.call_amount = None
        resp = client.post(f"/api/tables/{table_id}/refresh")
        assert resp.status_code == 200
        data = resp.json()
        assert data["version"] == 2
        assert data["legality"]["check"] is True
        assert data["legality"]["call"] is False

    def test_refresh_engine_down(self, client, fake_engine):
        table_id = _open_table(client)
        fake_engine.down = True
        resp = client.post(f"/api/tables/{table_id}/refresh")
        assert resp.status_code == 502
        assert client.get(f"/api/tables/{table_id}/state").json()["version"] == 1

    def test_refresh_not_found(self, client):
        assert client.post("/api/tables/nonexistent/refresh").status_code == 404


class TestStaticAssets:
    def test_table_script_escapes_engine_text(self, client):
        script = client.get("/static/table.js").text
        assert "esc(p.name)" in script
        assert "${p.name}" not in script

    def test_table_script_follows_page_scheme(self, client):
        script = client.get("/static/table.js").text
        assert "location.protocol" in script
        assert "`ws://" not in script


class TestCloseTable:
    def test_close(self, client):
        table_id = _open_table(client)
        assert client.delete(f"/api/tables/{table_id}").json() == {"table_id": table_id, "closed": True}
        assert client.get(f"/api/tables/{table_id}/state").status_code == 404

    def test_close_not_found(self, client):
        assert client.delete("/api/tables/nonexistent").status_code == 404


class TestWebSocket:
    def test_initial_state_on_connect(self, client):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            msg = ws.receive_json()
            assert msg["type"] == "table_state"
            assert msg["payload"]["version"] == 1

    def test_click_broadcasts_new_state(self, client, fake_engine):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            ws.receive_json()
            ws.send_json({"type": "click", "payload": {"control": "fold"}})
            msg = ws.receive_json()
            assert msg["type"] == "table_state"
            assert msg["payload"]["version"] == 2
        assert fake_engine.acted() == ["Fold"]

    def test_escape_key(self, client):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            ws.receive_json()
            ws.send_json({"type": "click", "payload": {"control": "raise"}})
            assert ws.receive_json()["payload"]["actions"]["mode"] == "entering_raise"
            ws.send_json({"type": "key", "payload": {"key": "Escape"}})
            assert ws.receive_json()["payload"]["actions"]["mode"] == "idle"

    def test_illegal_click_sends_error(self, client):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            ws.receive_json()
            ws.send_json({"type": "click", "payload": {"control": "check"}})
            msg = ws.receive_json()
            assert msg["type"] == "error"
            assert "Check" in msg["payload"]["message"]

    def test_ping(self, client):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            ws.receive_json()
            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    def test_refresh_message(self, client, fake_engine):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws:
            ws.receive_json()
            fake_engine.actions = ["Check"]
            ws.send_json({"type": "refresh"})
            msg = ws.receive_json()
            assert msg["type"] == "table_state"
            assert msg["payload"]["version"] == 2
            assert msg["payload"]["legality"]["check"] is True

    def test_slider_input_answers_sender_only(self, client):
        table_id = _open_table(client)
        with client.websocket_connect(f"/ws/{table_id}/c1") as ws1, \
                client.websocket_connect(f"/ws/{table_id}/c2") as ws2:
            ws1.receive_json()
            ws2.receive_json()
            ws1.send_json({"type": "click", "payload": {"control": "raise"}})
            assert ws1.receive_json()["payload"]["actions"]["mode"] == "entering_raise"
            assert ws2.receive_json()["payload"]["actions"]["mode"] == "entering_raise"
            ws1.send_json({"type": "input", "payload": {"value": 400}})
            assert ws1.receive_json()["payload"]["actions"]["slider"]["value"] == 400
            ws1.send_json({"type": "key", "payload": {"key": "Escape"}})
            assert ws1.receive_json()["payload"]["actions"]["mode"] == "idle"
            # c2 saw no update for the slider move, only the Escape
            assert ws2.receive_json()["payload"]["actions"]["mode"] == "idle"
