"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from savings_gateway.api.main import create_app
from savings_gateway.api.dependencies import get_registry
from savings_gateway.domain.models import Bank, Tier
from savings_gateway.domain.registry import BankRegistry


def _make_bank(bank_id: str, name: str, tiers=(), **kwargs) -> Bank:
    return Bank(
        id=bank_id,
        name=name,
        type=kwargs.get("type", "Dijital banka"),
        product_name=kwargs.get("product_name", f"{name} Hesap"),
        website=kwargs.get("website", f"https://{bank_id}.example"),
        tiers=tuple(tiers),
    )


@pytest.fixture
def make_bank():
    """Factory for banks with placeholder metadata"""
    return _make_bank


@pytest.fixture
def sample_banks() -> list[Bank]:
    """Three usable banks with different tier policies plus one failed source"""
    return [
        _make_bank(
            "alpha",
            "Alpha Bank",
            [
                Tier(min=0, max=49_999, annual_rate_percent=30),
                Tier(min=50_000, max=None, annual_rate_percent=45),
            ],
        ),
        _make_bank(
            "beta",
            "Beta Bank",
            [Tier(min=0, max=None, annual_rate_percent=48, nib_percentage=10)],
        ),
        _make_bank(
            "gamma",
            "Gamma Bank",
            [Tier(min=0, max=None, annual_rate_percent=40, nib=1_000)],
        ),
        _make_bank("delta", "Delta Bank"),
    ]


@pytest.fixture
def registry(sample_banks: list[Bank]) -> BankRegistry:
    return BankRegistry(
        banks=tuple(sample_banks),
        last_updated=datetime(2026, 10, 1, 6, 0, tzinfo=timezone.utc),
        default_withholding_rate_percent=17.5,
    )


@pytest.fixture
def client(registry: BankRegistry) -> TestClient:
    """Create FastAPI test client serving the sample registry"""
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    return TestClient(app)
