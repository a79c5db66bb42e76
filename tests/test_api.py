"""Test the FastAPI endpoints."""
import pytest
from httpx import ASGITransport, AsyncClient
import api.app as app_module
from api.app import app

CATALOG = {"creatures": [
    {"creature_id": 4, "color": 0, "type": 0},
    {"creature_id": 5, "color": 0, "type": 1},
    {"creature_id": 6, "color": 0, "type": 2},
]}


def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_root():
    async with client() as ac:
        response = await ac.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Seabed Scanner API"


@pytest.mark.asyncio
async def test_turn_before_start(monkeypatch):
    """Posting a turn without a session is refused."""
    monkeypatch.setattr(app_module, "engine", None)
    async with client() as ac:
        response = await ac.post("/bot/turn", json={"my_drones": []})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_start_and_play_turn():
    async with client() as ac:
        response = await ac.post("/bot/start", json=CATALOG)
        assert response.status_code == 200
        assert response.json() == {"session": "local", "creatures": 3}

        response = await ac.post("/bot/turn", json={
            "my_drones": [
                {"drone_id": 0, "pos": [5000, 5000], "battery": 20},
                {"drone_id": 1, "pos": [2000, 3000], "emergency": True},
            ],
            "visible": [{"creature_id": 6, "pos": [5100, 5000], "velocity": [0, 0]}],
            "radar": [{"drone_id": 1, "creature_id": 5, "radar": "BL"}],
        })

    assert response.status_code == 200
    assert response.json() == [
        {"drone_id": 0, "x": 5100, "y": 5000, "light": False, "line": "MOVE 5100 5000 0"},
        {"drone_id": 1, "x": 2000, "y": 0, "light": False, "line": "MOVE 2000 0 0"},
    ]


@pytest.mark.asyncio
async def test_bot_events():
    async with client() as ac:
        await ac.post("/bot/start", json=CATALOG)
        await ac.post("/bot/turn", json={"my_drones": [{"drone_id": 0, "pos": [3000, 1000]}]})
        response = await ac.get("/bot/events?since=0")

    assert response.status_code == 200
    data = response.json()
    assert data["next_offset"] == 1
    assert data["events"][0]["kind"] == "Exploration"
    assert data["events"][0]["data"]["to"] == [3536, 1268]


@pytest.mark.asyncio
async def test_unknown_creature():
    async with client() as ac:
        await ac.post("/bot/start", json=CATALOG)
        response = await ac.post("/bot/turn", json={
            "my_drones": [{"drone_id": 0, "pos": [5000, 5000]}],
            "visible": [{"creature_id": 99, "pos": [5100, 5000]}],
        })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_invalid_radar_label():
    async with client() as ac:
        await ac.post("/bot/start", json=CATALOG)
        response = await ac.post("/bot/turn", json={
            "my_drones": [{"drone_id": 0, "pos": [5000, 5000]}],
            "radar": [{"drone_id": 0, "creature_id": 4, "radar": "UP"}],
        })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_tuning_override():
    async with client() as ac:
        await ac.post("/bot/start", json={**CATALOG, "tuning": {"max_move": 100}})
        response = await ac.post("/bot/turn", json={"my_drones": [{"drone_id": 0, "pos": [5000, 5000]}]})
    assert response.json()[0]["y"] == 4900


@pytest.mark.asyncio
async def test_arena_before_start(monkeypatch):
    monkeypatch.setattr(app_module, "arena", None)
    async with client() as ac:
        response = await ac.post("/arena/step")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_arena_flow():
    async with client() as ac:
        response = await ac.post("/arena/start", json={"seed": 5, "max_turns": 3})
        assert response.status_code == 200
        assert response.json() == {"seed": 5, "creatures": 12, "drones": 4}

        for turn in range(1, 4):
            response = await ac.post("/arena/step")
            assert response.status_code == 200
            assert response.json()["turn"] == turn
        assert response.json()["done"] is True

        response = await ac.post("/arena/step")
        assert response.status_code == 400

        state = (await ac.get("/arena/state")).json()
        assert state["turn"] == 3
        assert len(state["drones"]) == 4

        events = (await ac.get("/arena/events?since=0")).json()
        assert events["events"][-1]["kind"] == "GameOver"
