"""Unit tests for tier and NIB resolution"""

from savings_gateway.domain.models import Bank, Tier
from savings_gateway.domain.resolver import (
    effective_principal,
    nib_for_principal,
    rate_for_principal,
    resolve_tier,
)

TIERS = (
    Tier(min=0, max=49_999, annual_rate_percent=30),
    Tier(min=50_000, max=None, annual_rate_percent=45),
)


def _bank(tiers) -> Bank:
    return Bank(id="b", name="B", type="", product_name="", website="", tiers=tuple(tiers))


def test_resolve_tier_inclusive_bounds():
    """Both ends of a range belong to it"""
    assert resolve_tier(TIERS, 0).annual_rate_percent == 30
    assert resolve_tier(TIERS, 49_999).annual_rate_percent == 30
    assert resolve_tier(TIERS, 50_000).annual_rate_percent == 45
    assert resolve_tier(TIERS, 10_000_000).annual_rate_percent == 45


def test_resolve_tier_falls_back_to_last():
    """Principal below every lower bound or in a gap uses the last tier"""
    tiers = (
        Tier(min=1_000, max=10_000, annual_rate_percent=40),
        Tier(min=20_000, max=50_000, annual_rate_percent=44),
    )
    assert resolve_tier(tiers, 500).annual_rate_percent == 44
    assert resolve_tier(tiers, 15_000).annual_rate_percent == 44
    assert resolve_tier(tiers, 60_000).annual_rate_percent == 44


def test_resolve_tier_overlap_first_match_wins():
    tiers = (
        Tier(min=0, max=100_000, annual_rate_percent=40),
        Tier(min=50_000, max=None, annual_rate_percent=50),
    )
    assert resolve_tier(tiers, 75_000).annual_rate_percent == 40


def test_resolve_tier_empty():
    assert resolve_tier((), 1_000) is None
    assert rate_for_principal(_bank(()), 1_000) == 0.0
    assert nib_for_principal(_bank(()), 1_000) == 0.0


def test_nib_percentage_takes_precedence_over_fixed():
    bank = _bank([Tier(min=0, max=None, annual_rate_percent=40, nib=5_000, nib_percentage=10)])
    assert nib_for_principal(bank, 100_000) == 10_000
    assert effective_principal(bank, 100_000) == 90_000


def test_fixed_nib_and_effective_principal_floor():
    bank = _bank([Tier(min=0, max=None, annual_rate_percent=40, nib=1_000)])
    assert nib_for_principal(bank, 100_000) == 1_000
    assert effective_principal(bank, 100_000) == 99_000
    assert effective_principal(bank, 500) == 0.0


def test_shared_boundary_goes_to_first_containing_tier():
    """A principal equal to both a tier's max and the next tier's min resolves to the earlier tier"""
    bank = _bank(
        [
            Tier(min=0, max=50_000, annual_rate_percent=30),
            Tier(min=50_000, max=None, annual_rate_percent=35),
        ]
    )
    assert rate_for_principal(bank, 49_999) == 30
    assert rate_for_principal(bank, 50_000) == 30
    assert rate_for_principal(bank, 50_000.01) == 35
