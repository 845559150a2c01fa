"""Unit tests for the HTTP adapter."""

import pytest
from fastapi.testclient import TestClient

from matchmaker.api import endpoints
from matchmaker.api.endpoints import get_matchmaker
from matchmaker.api.main import ServerSettings, app, settings
from matchmaker.matchmaker import Matchmaker
from matchmaker.ports import InMemoryStateStore, RecordingSubmitter
from tests.helpers import ALICE, BOB, BTC, ETH, make_intent


@pytest.fixture
def matchmaker():
    """A fresh matchmaker per test."""
    return Matchmaker(store=InMemoryStateStore(), submitter=RecordingSubmitter())


@pytest.fixture
def client(matchmaker):
    """Create a test client wired to the per-test matchmaker."""
    app.dependency_overrides[get_matchmaker] = lambda: matchmaker
    yield TestClient(app)
    app.dependency_overrides.clear()


def _body(intent_id: str, **kwargs) -> dict:
    return {"id": intent_id, "intent": make_intent(**kwargs).model_dump(mode="json")}


class TestHealth:
    """Tests for GET /health."""

    def test_reports_graph_and_config(self, client):
        client.post("/intents", json=_body("0x01", addr=ALICE, token_sell=BTC, token_buy=ETH))
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "nodes": 1,
            "edges": 0,
            "max_cycle_size": None,
            "resolve_until_stable": True,
        }

    def test_unreadable_graph_is_unhealthy(self, client, matchmaker):
        matchmaker.store.save_state(b"corrupt")
        response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "graph_unreadable"


class TestSubmitIntent:
    """Tests for POST /intents."""

    def test_unmatched_intent(self, client):
        response = client.post("/intents", json=_body("0x01", addr=ALICE))
        assert response.status_code == 200
        data = response.json()
        assert data["inserted"] == [0]
        assert data["settlements"] == []
        assert data["unresolved"] == []
        assert data["node_count"] == 1

    def test_matching_intent_settles(self, client, matchmaker):
        client.post("/intents", json=_body("0x01", addr=ALICE, token_sell=BTC, token_buy=ETH))
        response = client.post(
            "/intents", json=_body("0x02", addr=BOB, token_sell=ETH, token_buy=BTC)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["node_count"] == 0
        assert len(data["settlements"]) == 1
        settlement = data["settlements"][0]
        assert settlement["intent_ids"] == ["0x01", "0x02"]
        assert settlement["volume"] == 100
        assert settlement["transfers"] == [
            {"source": ALICE, "target": BOB, "token": BTC, "amount": 100},
            {"source": BOB, "target": ALICE, "token": ETH, "amount": 100},
        ]
        assert len(matchmaker.submitter.payloads) == 1

    def test_float_rate_rejected(self, client):
        """Rates must be exact; a JSON float is a validation error."""
        body = _body("0x01", addr=ALICE)
        body["intent"]["data"]["exchange"][0]["data"]["rate_min"] = 1.5
        response = client.post("/intents", json=body)
        assert response.status_code == 422

    def test_missing_id_rejected(self, client):
        body = _body("0x01", addr=ALICE)
        del body["id"]
        assert client.post("/intents", json=body).status_code == 422

    def test_malformed_stored_graph_returns_500(self, client, matchmaker):
        """A corrupt store is reported and nothing is submitted."""
        matchmaker.store.save_state(b"corrupt")
        response = client.post("/intents", json=_body("0x01", addr=ALICE))
        assert response.status_code == 500
        assert "Malformed graph state" in response.json()["detail"]
        assert matchmaker.submitter.payloads == []

    def test_request_too_large(self, client):
        response = client.post(
            "/intents",
            content=b"x" * (settings.max_body_bytes + 1),
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 413
        assert response.json() == {"detail": f"Body exceeds {settings.max_body_bytes} bytes"}


class TestGetGraph:
    """Tests for GET /graph."""

    def test_lists_waiting_intents(self, client):
        client.post("/intents", json=_body("0x01", addr=ALICE, token_sell=BTC, token_buy=ETH))
        response = client.get("/graph")
        assert response.status_code == 200
        assert response.json() == {
            "nodes": [
                {"index": 0, "id": "0x01", "owner": ALICE, "token_sell": BTC, "token_buy": ETH}
            ],
            "edges": [],
        }


class TestDefaultMatchmaker:
    """Tests for the environment-configured default matchmaker."""

    def test_max_cycle_size_from_env(self, monkeypatch):
        monkeypatch.setenv("MATCHMAKER_MAX_CYCLE_SIZE", "3")
        matchmaker = endpoints._create_default_matchmaker()
        assert matchmaker.config.max_cycle_size == 3

    def test_unlimited_by_default(self, monkeypatch):
        monkeypatch.delenv("MATCHMAKER_MAX_CYCLE_SIZE", raising=False)
        matchmaker = endpoints._create_default_matchmaker()
        assert matchmaker.config.max_cycle_size is None

    def test_get_matchmaker_is_singleton(self, monkeypatch):
        monkeypatch.setattr(endpoints, "_default_matchmaker", None)
        assert get_matchmaker() is get_matchmaker()


class TestServerSettings:
    """Tests for environment-driven server settings."""

    def test_defaults(self, monkeypatch):
        for suffix in ("HOST", "PORT", "DEBUG", "MAX_BODY_BYTES"):
            monkeypatch.delenv(f"MATCHMAKER_{suffix}", raising=False)
        assert ServerSettings.from_env() == ServerSettings()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("MATCHMAKER_HOST", "0.0.0.0")
        monkeypatch.setenv("MATCHMAKER_PORT", "9100")
        monkeypatch.setenv("MATCHMAKER_DEBUG", "yes")
        monkeypatch.setenv("MATCHMAKER_MAX_BODY_BYTES", "2048")
        assert ServerSettings.from_env() == ServerSettings(
            host="0.0.0.0", port=9100, reload=True, max_body_bytes=2048
        )
