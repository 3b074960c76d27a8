"""
E2E tests running a full ingestion against the mock source server.

These tests require the mock source server to be running:
    uvicorn mock.source_server.main:app --port 8001

Configured sources (data/sources.json):
- alpha: range headers + parallel rates, NIB share from description text
- beta: range records with a currency header row
- gamma: POST API with numeric limits and welcome-rate fallback
- delta: HTML rate table with a foreign-currency row
- epsilon: single headline rate in page text
- zeta: no fixture on the server, must fail without stopping the batch
- eta: disabled
"""

import pytest
from fastapi.testclient import TestClient
from savings_gateway.api.dependencies import get_registry
from savings_gateway.api.main import create_app
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.ingestion import run_ingestion
from savings_gateway.infrastructure.sources import load_sources


@pytest.fixture
async def batch():
    sources = load_sources("data/sources.json")
    return sources, await run_ingestion(sources.enabled_sources, timeout=5.0)


@pytest.mark.integration
async def test_every_shape_ingested(batch):
    """
    All fixture-backed sources yield tiers; the missing one fails alone
    Expected: 5 of 6 enabled sources usable, batch not degraded
    """
    _, result = batch
    banks = {bank.id: bank for bank in result.banks}

    assert [bank.id for bank in result.banks] == ["alpha", "beta", "gamma", "delta", "epsilon", "zeta"]
    assert result.succeeded == 5
    assert result.degraded is False
    assert banks["zeta"].tiers == ()

    assert [tier.annual_rate_percent for tier in banks["alpha"].tiers] == [40, 45, 47.5]
    assert banks["alpha"].tiers[0].nib_percentage == 10
    assert [tier.min for tier in banks["beta"].tiers] == [0, 50000]
    assert banks["gamma"].tiers[0].annual_rate_percent == 48
    assert banks["gamma"].tiers[1].annual_rate_percent == 42
    assert len(banks["delta"].tiers) == 3
    assert banks["epsilon"].tiers[0].annual_rate_percent == 49.5


@pytest.mark.integration
async def test_ingested_banks_served_by_api(batch):
    """
    Snapshot from the batch drives the listing
    Expected: failed source listed last, best offer picked by daily net
    """
    sources, result = batch
    registry = BankRegistry(
        banks=result.banks,
        default_withholding_rate_percent=sources.default_withholding_rate_percent,
    )
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    client = TestClient(app)

    listing = client.get("/v1/banks", params={"principal": 100000}).json()
    assert listing["banks"][-1]["id"] == "zeta"
    assert listing["banks"][-1]["usable"] is False

    summary = client.get("/v1/summary", params={"principal": 100000}).json()
    assert summary["usable_count"] == 5
    assert summary["best_bank_id"] is not None
