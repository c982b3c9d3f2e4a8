import time

import pytest
from fastapi.testclient import TestClient

from tictactoe.config import GameConfig
from web.server import create_app


@pytest.fixture
def client():
    with TestClient(create_app(GameConfig(reveal_delay=0.01))) as client:
        yield client


def post_moves(client, *indices):
    for i in indices:
        client.post("/api/move", json={"index": i})


def wait_for_reveal(client, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if client.get("/api/state").json()["state"]["reveal"]:
            return True
        time.sleep(0.01)
    return False


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text


def test_initial_state(client):
    data = client.get("/api/state").json()
    assert data["status"] == "ok"
    assert data["state"]["board"] == [None] * 9
    assert data["state"]["status"] == "Next player: X"


def test_move_and_occupied_cell(client):
    first = client.post("/api/move", json={"index": 4}).json()
    assert first["accepted"] is True
    assert first["state"]["board"][4] == "X"

    again = client.post("/api/move", json={"index": 4}).json()
    assert again["status"] == "ok"
    assert again["accepted"] is False
    assert again["state"]["history_length"] == 2


def test_malformed_move_rejected(client):
    assert client.post("/api/move", json={"index": "centre"}).status_code == 422


def test_jump_and_branch(client):
    post_moves(client, 0, 3, 4, 5, 8)
    state = client.get("/api/state").json()["state"]
    assert state["outcome"]["winner"] == "X"

    jumped = client.post("/api/jump", json={"move": 2}).json()
    assert jumped["state"]["outcome"] == {"status": "in_progress"}
    assert jumped["state"]["history_length"] == 6

    moved = client.post("/api/move", json={"index": 1}).json()
    assert moved["state"]["history_length"] == 4


def test_jump_out_of_range(client):
    data = client.post("/api/jump", json={"move": 3}).json()
    assert data["status"] == "error"
    assert "not in history" in data["message"]


def test_sort_toggle(client):
    post_moves(client, 0)
    assert client.post("/api/sort").json()["ascending"] is False
    moves = client.get("/api/moves").json()["moves"]
    assert [m["move"] for m in moves] == [1, 0]
    moves = client.get("/api/moves", params={"ascending": True}).json()["moves"]
    assert [m["move"] for m in moves] == [0, 1]


def test_reveal_and_reset(client):
    post_moves(client, 0, 3, 4, 5, 8)
    assert wait_for_reveal(client)

    state = client.post("/api/reset").json()["state"]
    assert state["reveal"] is False
    assert state["history_length"] == 1


def test_websocket_updates(client):
    with client.websocket_connect("/ws") as ws:
        initial = ws.receive_json()
        assert initial["type"] == "state"
        assert initial["state"]["cursor"] == 0

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        client.post("/api/move", json={"index": 0})
        message = ws.receive_json()
        assert message["event"] == "move"
        assert message["state"]["board"][0] == "X"


def test_websocket_reveal_broadcast(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        post_moves(client, 0, 3, 4, 5, 8)
        events = [ws.receive_json()["event"] for _ in range(6)]
        assert events == ["move"] * 5 + ["reveal"]


def test_app_built_outside_loop_reveals_draw():
    app = create_app(GameConfig(reveal_delay=0.01))
    with TestClient(app) as client:
        post_moves(client, 0, 1, 2, 4, 3, 5, 7, 6, 8)
        state = client.get("/api/state").json()["state"]
        assert state["outcome"] == {"status": "draw"}
        assert state["history_length"] == 10
        assert wait_for_reveal(client)
        assert app.state.engine.get_reveal_flag()
