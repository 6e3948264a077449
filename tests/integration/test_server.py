import asyncio
from typing import Sequence

from fastapi.testclient import TestClient

from cashflow.data import JsonSnapshotStore, get_storage_settings
from cashflow.game.state import PLAYER_COLORS
from cashflow.server import GameRegistry, app
from cashflow.server.app import _store_for, registry


def _create_game(client: TestClient, names: Sequence[str] = ("Alice", "Bob"), seed: int = 7) -> dict:
    resp = client.post("/games", json={"players": [{"name": n} for n in names], "seed": seed})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert "game_id" in data and isinstance(data["game_id"], str)
    return data


def test_create_game_deals_professions():
    client = TestClient(app)
    data = _create_game(client, names=["Alice", "Bob", "Charlie"])

    players = data["players"]
    assert [p["name"] for p in players] == ["Alice", "Bob", "Charlie"]
    assert [p["color"] for p in players] == list(PLAYER_COLORS[:3])
    assert all(p["profession"] for p in players)


def test_snapshot_view():
    client = TestClient(app)
    gid = _create_game(client)["game_id"]

    resp = client.get(f"/games/{gid}/snapshot")
    assert resp.status_code == 200
    data = resp.json()

    assert data["game_id"] == gid
    assert data["pending"] is None
    assert data["winner_id"] is None
    snapshot = data["snapshot"]
    assert snapshot["currentPlayerIndex"] == 0
    assert snapshot["gamePhase"] == "rat_race"
    assert len(snapshot["players"]) == 2
    assert "ratRace" in snapshot["players"][0]


def test_snapshot_404_for_unknown_game():
    client = TestClient(app)
    resp = client.get("/games/doesnotexist/snapshot")
    assert resp.status_code == 404


def test_legal_actions_endpoint():
    client = TestClient(app)
    data = _create_game(client)
    gid = data["game_id"]
    first, second = (p["player_id"] for p in data["players"])

    resp = client.get(f"/games/{gid}/legal_actions", params={"player_id": first})
    assert resp.status_code == 200
    assert resp.json()["actions"] == [{"action_type": "roll_dice", "params": {}}]

    resp = client.get(f"/games/{gid}/legal_actions", params={"player_id": second})
    assert resp.json()["actions"] == []


def test_roll_then_pass():
    client = TestClient(app)
    data = _create_game(client)
    gid = data["game_id"]
    first, second = (p["player_id"] for p in data["players"])

    resp = client.post(f"/games/{gid}/roll", json={"player_id": first})
    assert resp.status_code == 200, resp.text
    rolled = resp.json()["snapshot"]["players"][0]
    assert len(rolled["rolledDice"]) == 1

    resp = client.post(f"/games/{gid}/pass", json={"player_id": first})
    assert resp.status_code == 200, resp.text
    view = resp.json()
    assert view["snapshot"]["currentPlayerIndex"] == 1
    assert view["pending"] is None


def test_out_of_turn_actions_conflict():
    client = TestClient(app)
    data = _create_game(client)
    gid = data["game_id"]
    first, second = (p["player_id"] for p in data["players"])

    resp = client.post(f"/games/{gid}/roll", json={"player_id": second})
    assert resp.status_code == 409
    assert resp.json()["error"] == "NotYourTurnError"

    resp = client.post(f"/games/{gid}/pass", json={"player_id": first})
    assert resp.status_code == 409
    assert resp.json()["error"] == "RollRequiredError"

    resp = client.post(f"/games/{gid}/opportunity", json={"player_id": first, "buy": True})
    assert resp.status_code == 409
    assert resp.json()["error"] == "InvalidDecisionError"


def test_invalid_setup_rejected():
    client = TestClient(app)

    resp = client.post("/games", json={"players": []})
    assert resp.status_code == 422

    same_color = [{"name": "Alice", "color": "#ffffff"}, {"name": "Bob", "color": "#ffffff"}]
    resp = client.post("/games", json={"players": same_color})
    assert resp.status_code == 422
    assert resp.json()["error"] == "SetupError"


def test_game_log():
    client = TestClient(app)
    gid = _create_game(client)["game_id"]

    resp = client.get(f"/games/{gid}/log", params={"limit": 5})
    assert resp.status_code == 200
    events = resp.json()["events"]
    assert [e["event_type"] for e in events] == ["turn_start", "game_start"]
    assert events[0]["message"] == "It's Alice's turn."


def test_registry_saves_through_store_factory(tmp_path):
    registry = GameRegistry(store_factory=lambda game_id: JsonSnapshotStore(tmp_path / f"{game_id}.json"))

    game_id, session = asyncio.run(registry.create_game([("Alice", None)], seed=1))

    assert JsonSnapshotStore(tmp_path / f"{game_id}.json").load() == session.snapshot
    assert asyncio.run(registry.remove(game_id))
    assert asyncio.run(registry.get(game_id)) is None


def test_games_are_saved_and_restored(saves_dir):
    client = TestClient(app)
    data = _create_game(client)
    gid = data["game_id"]
    first = data["players"][0]["player_id"]
    client.post(f"/games/{gid}/roll", json={"player_id": first})
    client.post(f"/games/{gid}/pass", json={"player_id": first})

    assert (saves_dir / f"{gid}.json").exists()

    restarted = GameRegistry(store_factory=registry.store_factory)
    session = asyncio.run(restarted.get(gid))

    assert session is not None
    assert session.snapshot.turn_number == 1
    assert session.snapshot.current_player_index == 1


def test_delete_game_removes_save(saves_dir):
    client = TestClient(app)
    gid = _create_game(client)["game_id"]

    resp = client.delete(f"/games/{gid}")
    assert resp.status_code == 200
    assert resp.json() == {"game_id": gid, "deleted": True}

    assert not (saves_dir / f"{gid}.json").exists()
    assert client.get(f"/games/{gid}/snapshot").status_code == 404
    assert client.delete(f"/games/{gid}").status_code == 404


def test_default_store_uses_storage_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("CASHFLOW_STORAGE_BACKEND", "json")
    monkeypatch.setenv("CASHFLOW_JSON_PATH", str(tmp_path / "server.json"))
    get_storage_settings.cache_clear()
    try:
        store = _store_for("abc123")
    finally:
        get_storage_settings.cache_clear()

    assert isinstance(store, JsonSnapshotStore)
    assert store.path == tmp_path / "server_abc123.json"
