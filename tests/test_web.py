import threading

import chess
import pytest
from fastapi.testclient import TestClient

from masterbot import search
from masterbot.difficulty import ProgressionBoost
from masterbot.search import ScoredMove
from web import app as web_app


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(web_app, "_sessions", {})
    return TestClient(web_app.app)


@pytest.fixture
def session_id(client: TestClient) -> str:
    sid = client.post("/api/sessions").json()["session_id"]
    web_app._sessions[sid]._sleep = _no_sleep
    return sid


def test_low_power_move(client, session_id) -> None:
    resp = client.post(f"/api/sessions/{session_id}/move", json={"power": 10})
    assert resp.status_code == 200
    body = resp.json()
    assert chess.Move.from_uci(body["move"]) in chess.Board().legal_moves
    assert body["tier"] == "easy"
    assert body["game_over"] is False


def test_power_clamped(client, session_id) -> None:
    body = client.post(f"/api/sessions/{session_id}/move", json={"power": 250}).json()
    assert body["power"] == 100
    assert body["tier"] == "hard"


def test_moves_replayed_before_choosing(client, session_id) -> None:
    resp = client.post(
        f"/api/sessions/{session_id}/move",
        json={"moves": ["e2e4"], "power": 5},
    )
    board = chess.Board()
    board.push_uci("e2e4")
    assert chess.Move.from_uci(resp.json()["move"]) in board.legal_moves


def test_invalid_fen(client, session_id) -> None:
    resp = client.post(f"/api/sessions/{session_id}/move", json={"fen": "not a fen"})
    assert resp.status_code == 400


def test_illegal_move_list(client, session_id) -> None:
    resp = client.post(f"/api/sessions/{session_id}/move", json={"moves": ["e2e5"]})
    assert resp.status_code == 400


def test_game_over_rejected(client, session_id) -> None:
    mated = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
    resp = client.post(f"/api/sessions/{session_id}/move", json={"fen": mated})
    assert resp.status_code == 400
    assert "already over" in resp.json()["detail"]


def test_unknown_session(client) -> None:
    assert client.post("/api/sessions/nope/move", json={}).status_code == 404
    assert client.get("/api/sessions/nope/metrics").status_code == 404


def test_metrics_and_reset(client, session_id) -> None:
    client.post(f"/api/sessions/{session_id}/move", json={"power": 10})
    metrics = client.get(f"/api/sessions/{session_id}/metrics").json()
    assert metrics["lightweight_rate_pct"] == 100
    assert metrics["power_history"][0]["power"] == 10

    assert client.post(f"/api/sessions/{session_id}/reset").status_code == 200
    metrics = client.get(f"/api/sessions/{session_id}/metrics").json()
    assert metrics["avg_think_time_ms"] == 0
    assert metrics["power_history"] == []


def test_outcome_updates_progression(client, session_id) -> None:
    body = client.post(
        f"/api/sessions/{session_id}/outcome",
        json={"result": "win", "power": 100, "moves": ["e2e4", "e7e5"]},
    ).json()
    assert body["level"] == 2
    assert body["xp"] == 5
    assert body["leveled_up"] is True
    assert body["win_streak"] == 1

    session = web_app._sessions[session_id]
    assert session.progression.get_progression_boost() == ProgressionBoost(0, 0.006, 0.04)


def test_outcome_rejects_unknown_result(client, session_id) -> None:
    resp = client.post(f"/api/sessions/{session_id}/outcome", json={"result": "abandoned"})
    assert resp.status_code == 422


def test_delete_session(client, session_id) -> None:
    assert client.delete(f"/api/sessions/{session_id}").status_code == 200
    assert client.get(f"/api/sessions/{session_id}/metrics").status_code == 404


def test_metrics_answered_while_search_runs(monkeypatch) -> None:
    monkeypatch.setattr(web_app, "_sessions", {})
    entered = threading.Event()
    release = threading.Event()
    released_in_time = []

    def _blocking_search(board, depth, limit):
        entered.set()
        released_in_time.append(release.wait(timeout=5))
        return [ScoredMove(m, 0) for m in board.legal_moves]

    monkeypatch.setattr(search, "search_root", _blocking_search)

    with TestClient(web_app.app) as client:
        sid = client.post("/api/sessions").json()["session_id"]
        web_app._sessions[sid]._sleep = _no_sleep

        responses = []
        mover = threading.Thread(
            target=lambda: responses.append(client.post(f"/api/sessions/{sid}/move", json={"power": 90}))
        )
        mover.start()
        assert entered.wait(timeout=5)

        metrics = client.get(f"/api/sessions/{sid}/metrics")
        release.set()
        mover.join(timeout=10)

    assert metrics.status_code == 200
    assert released_in_time == [True]
    assert responses[0].status_code == 200


def test_oldest_session_dropped_over_limit(client, monkeypatch) -> None:
    monkeypatch.setattr(web_app, "MAX_SESSIONS", 2)
    ids = [client.post("/api/sessions").json()["session_id"] for _ in range(3)]

    assert client.get(f"/api/sessions/{ids[0]}/metrics").status_code == 404
    assert client.get(f"/api/sessions/{ids[1]}/metrics").status_code == 200
    assert client.get(f"/api/sessions/{ids[2]}/metrics").status_code == 200
