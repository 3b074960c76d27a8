"""Tier and non-interest-bearing balance (NIB) resolution for a principal"""

from typing import Optional, Sequence

from savings_gateway.domain.models import Bank, Tier


def resolve_tier(tiers: Sequence[Tier], principal: float) -> Optional[Tier]:
    """
    Select the tier that applies to a principal.

    Scans in list order and returns the first tier whose inclusive range
    contains the principal. When none does (principal below every lower
    bound, or a gap in malformed data) the last tier applies, so a bad
    lower bound never makes a bank unusable. Empty list -> None.
    """
    if not tiers:
        return None
    for tier in tiers:
        if tier.contains(principal):
            return tier
    return tiers[-1]


def rate_for_principal(bank: Bank, principal: float) -> float:
    """Annual rate (%) for the principal, 0 for a bank without tiers"""
    tier = resolve_tier(bank.tiers, principal)
    return tier.annual_rate_percent if tier else 0.0


def nib_for_principal(bank: Bank, principal: float) -> float:
    """
    Non-interest-bearing amount held back from the principal.

    Percentage policies scale with the principal; otherwise the tier's
    fixed amount applies. Never negative.
    """
    tier = resolve_tier(bank.tiers, principal)
    if tier is None:
        return 0.0
    if tier.has_percentage_nib:
        return max(0.0, principal * (tier.nib_percentage / 100))
    return max(0.0, tier.nib or 0.0)


def effective_principal(bank: Bank, principal: float) -> float:
    """Interest-earning part of the principal, floored at zero"""
    return max(0.0, principal - nib_for_principal(bank, principal))
