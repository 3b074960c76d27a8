"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient
from savings_gateway.api.dependencies import registry_holder
from savings_gateway.api.main import create_app
from savings_gateway.config import settings
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.infrastructure.snapshot.store import save_snapshot


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/calculate", json={"principal": 100000, "bank_id": "alpha"})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "savings_calculation_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_list_banks_default_order(client: TestClient):
    """Test GET /v1/banks sorted by rate, failed source last"""
    response = client.get("/v1/banks")

    assert response.status_code == 200
    data = response.json()
    assert data["sort"] == "rate"
    assert data["direction"] == "desc"
    assert data["principal"] == 100000
    assert [row["id"] for row in data["banks"]] == ["beta", "alpha", "gamma", "delta"]

    delta = data["banks"][-1]
    assert delta["usable"] is False
    assert delta["annual_rate_percent"] is None
    assert delta["daily_net"] is None
    assert delta["daily_net_display"] is None


def test_list_banks_sort_filter_and_principal(client: TestClient):
    response = client.get("/v1/banks", params={"sort": "name", "principal": 10000, "q": "a"})

    data = response.json()
    assert data["direction"] == "asc"
    assert [row["id"] for row in data["banks"]] == ["alpha", "beta", "gamma", "delta"]
    assert data["banks"][0]["annual_rate_percent"] == 30


def test_list_banks_daily_display(client: TestClient):
    response = client.get("/v1/banks", params={"sort": "daily", "withholding_rate": 0})

    row = response.json()["banks"][0]
    assert row["id"] == "alpha"
    assert row["daily_net"] == pytest.approx(100000 * 45 / 365 / 100)
    assert row["daily_net_display"] == "123,29 ₺"


def test_list_banks_rejects_bad_query(client: TestClient):
    assert client.get("/v1/banks", params={"principal": 0}).status_code == 422
    assert client.get("/v1/banks", params={"sort": "fee"}).status_code == 422


def test_get_bank_with_tiers(client: TestClient):
    response = client.get("/v1/banks/alpha")

    assert response.status_code == 200
    data = response.json()
    assert data["usable"] is True
    assert [tier["annual_rate_percent"] for tier in data["tiers"]] == [30, 45]
    assert data["tiers"][1]["max"] is None


def test_get_bank_not_found(client: TestClient):
    assert client.get("/v1/banks/unknown").status_code == 404


def test_summary(client: TestClient):
    response = client.get("/v1/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["best_bank_id"] == "alpha"
    assert data["best_rate"] == 45
    assert data["average_rate"] == pytest.approx(133 / 3)
    assert data["usable_count"] == 3
    assert data["total_count"] == 4
    assert data["last_updated"].startswith("2026-10-01")


def test_calculate_for_bank(client: TestClient):
    response = client.post("/v1/calculate", json={"principal": 100000, "bank_id": "beta"})

    assert response.status_code == 200
    data = response.json()
    assert data["bank_id"] == "beta"
    assert data["annual_rate_percent"] == 48
    assert data["effective_principal"] == 90000
    assert data["non_interest_balance"] == 10000
    assert data["withholding_rate_percent"] == 17.5


def test_calculate_custom_rate_takes_precedence(client: TestClient):
    """Custom rate wins over bank_id; custom NIB is deducted"""
    response = client.post(
        "/v1/calculate",
        json={"principal": 100000, "bank_id": "beta", "custom_rate": 33, "custom_nib": 0},
    )

    data = response.json()
    assert data["bank_id"] is None
    assert data["annual_rate_percent"] == 33
    assert data["daily_gross"] == pytest.approx(90.41, abs=0.01)
    assert data["daily_tax"] == pytest.approx(15.82, abs=0.01)
    assert data["daily_net"] == pytest.approx(74.59, abs=0.01)


def test_calculate_custom_nib(client: TestClient):
    response = client.post(
        "/v1/calculate",
        json={"principal": 100000, "custom_rate": 40, "custom_nib": 25000, "withholding_rate": 0},
    )

    data = response.json()
    assert data["effective_principal"] == 75000
    assert data["non_interest_balance"] == 25000
    assert data["yearly_total"] == pytest.approx(100000 + data["yearly_net"])


@pytest.mark.parametrize(
    "body",
    [
        {"principal": 0, "bank_id": "alpha"},
        {"principal": -100, "custom_rate": 40},
        {"principal": 100000, "bank_id": "delta"},
        {"principal": 100000},
        {"principal": 100000, "custom_rate": 0},
    ],
)
def test_calculate_rejects_non_positive_input(client: TestClient, body):
    response = client.post("/v1/calculate", json=body)
    assert response.status_code == 422


def test_calculate_unknown_bank(client: TestClient):
    response = client.post("/v1/calculate", json={"principal": 100000, "bank_id": "unknown"})
    assert response.status_code == 404


@pytest.fixture
def restore_registry():
    previous = registry_holder.current
    yield
    registry_holder.install(previous)


def test_startup_loads_snapshot(tmp_path, monkeypatch, registry, restore_registry):
    """Startup installs the snapshot found at the configured path"""
    path = save_snapshot(registry, tmp_path / "rates.json")
    monkeypatch.setattr(settings, "snapshot_path", str(path))

    with TestClient(create_app()) as client:
        response = client.get("/v1/banks/gamma")
        health = client.get("/health").json()

    assert response.status_code == 200
    assert response.json()["name"] == "Gamma Bank"
    assert health["banks"] == 4


def test_missing_snapshot_keeps_service_up(tmp_path, monkeypatch, restore_registry):
    monkeypatch.setattr(settings, "snapshot_path", str(tmp_path / "missing.json"))
    registry_holder.install(BankRegistry())

    with TestClient(create_app()) as client:
        assert client.get("/health").json()["banks"] == 0
        assert client.get("/v1/banks").json()["banks"] == []
        assert client.get("/v1/summary").json()["best_bank_id"] is None


@pytest.mark.parametrize(
    "payload",
    [
        '{"principal": NaN, "custom_rate": 40}',
        '{"principal": Infinity, "bank_id": "alpha"}',
        '{"principal": 100000, "custom_rate": NaN}',
    ],
)
def test_calculate_rejects_non_finite_numbers(client: TestClient, payload):
    response = client.post("/v1/calculate", content=payload, headers={"Content-Type": "application/json"})
    assert response.status_code == 422


def test_list_banks_rejects_infinite_principal(client: TestClient):
    assert client.get("/v1/banks", params={"principal": "inf"}).status_code == 422
    assert client.get("/v1/summary", params={"principal": "nan"}).status_code == 422
