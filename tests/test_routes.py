from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from tests.conftest import KQK_FEN
from ucibridge.config import get_settings
from ucibridge.main import app


@pytest.fixture
def client_for(make_settings):
    """Yield a factory of TestClients whose engine runs the given fake scenario."""
    clients = []

    def _client(scenario="bestmove", **overrides):
        settings = make_settings(scenario, **overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _client

    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()


def test_health(client_for):
    client = client_for()
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json() == {"status": "ok"}


@pytest.mark.parametrize("path", ["/api/analyze", "/api/probe"])
@pytest.mark.parametrize("query", [{}, {"fen": ""}, {"fen": "   "}])
def test_missing_fen_is_rejected_without_spawning(client_for, path, query):
    client = client_for()
    with patch("ucibridge.engine.session.EngineProcess.start", new=AsyncMock()) as start:
        response = client.get(path, params=query)

    assert response.status_code == 400
    assert response.json() == {"error": "missing fen"}
    start.assert_not_called()


def test_fen_with_newline_is_rejected(client_for):
    client = client_for()
    response = client.get("/api/analyze", params={"fen": KQK_FEN + "\ngo infinite"})

    assert response.status_code == 400
    assert response.json() == {"error": "invalid fen"}


def test_analyze_returns_transcript_with_bestmove(client_for):
    client = client_for("bestmove")
    response = client.get("/api/analyze", params={"fen": KQK_FEN})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"raw"}
    assert any(line.startswith("bestmove") for line in body["raw"].split("\n"))


def test_probe_returns_hint_shape(client_for):
    client = client_for("hint")
    response = client.get("/api/probe", params={"fen": KQK_FEN})

    assert response.status_code == 200
    body = response.json()
    assert body["hint"] == "tablebase-info-line"
    assert "WDL" in body["line"]
    assert body["raw"].endswith(body["line"])
    assert "bestmove" not in body["raw"]


def test_probe_without_hint_returns_raw(client_for):
    client = client_for("bestmove")
    body = client.get("/api/probe", params={"fen": KQK_FEN}).json()

    assert set(body) == {"raw"}
    assert body["raw"].endswith("bestmove f1f7")


def test_engine_exit_returns_code(client_for):
    client = client_for("exit")
    response = client.get("/api/analyze", params={"fen": KQK_FEN})

    assert response.status_code == 200
    assert response.json() == {
        "raw": "id name FakeFish\nuciok\ninfo depth 1 score cp 0",
        "code": 3,
    }


def test_timeout_returns_fallback(client_for):
    client = client_for("silent", timeout_ms=300, kill_grace_ms=300)
    response = client.get("/api/probe", params={"fen": KQK_FEN})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"raw", "code"}
    assert body["code"] != 0


def test_spawn_failure_is_a_server_error(client_for):
    client = client_for(engine_path="/nonexistent/stockfish", engine_args=())
    response = client.get("/api/analyze", params={"fen": KQK_FEN})

    assert response.status_code == 500
    assert response.json()["error"].startswith("engine failed to start")
