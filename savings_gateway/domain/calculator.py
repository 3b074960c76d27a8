"""Return calculation engine - daily, monthly and yearly net interest"""

import math
from dataclasses import replace

from savings_gateway.domain.exceptions import InvalidCalculationInputError
from savings_gateway.domain.models import Bank, CalculationResult
from savings_gateway.domain.resolver import effective_principal, nib_for_principal, rate_for_principal

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30


def daily_gross(principal: float, annual_rate_percent: float) -> float:
    """Simple daily interest before tax: principal * rate / 365 / 100"""
    return principal * (annual_rate_percent / DAYS_PER_YEAR / 100)


def withholding_tax(gross_amount: float, withholding_rate_percent: float) -> float:
    """Tax withheld at source from a gross interest amount"""
    return gross_amount * (withholding_rate_percent / 100)


def daily_net(principal: float, annual_rate_percent: float, withholding_rate_percent: float) -> float:
    """Daily interest after withholding tax"""
    gross = daily_gross(principal, annual_rate_percent)
    return gross - withholding_tax(gross, withholding_rate_percent)


def compound_return(
    principal: float,
    annual_rate_percent: float,
    withholding_rate_percent: float,
    days: int,
) -> float:
    """
    Net interest earned over `days` when net daily interest is reinvested.

    daily_net_rate = (rate / 365 / 100) * (1 - withholding / 100)
    return = principal * ((1 + daily_net_rate) ** days - 1)
    """
    daily_net_rate = (annual_rate_percent / DAYS_PER_YEAR / 100) * (1 - withholding_rate_percent / 100)
    return principal * ((1 + daily_net_rate) ** days - 1)


def validate_calculation_input(principal: float, annual_rate_percent: float) -> None:
    """
    Reject requests that would yield misleading zero or negative results.

    Raises:
        InvalidCalculationInputError: principal or rate is not a positive
            finite number
    """
    if not principal or not math.isfinite(principal) or principal <= 0:
        raise InvalidCalculationInputError("Principal must be greater than zero")
    if not annual_rate_percent or not math.isfinite(annual_rate_percent) or annual_rate_percent <= 0:
        raise InvalidCalculationInputError("Annual rate must be greater than zero")


def calculate(
    principal: float,
    annual_rate_percent: float,
    withholding_rate_percent: float,
    original_principal: float | None = None,
) -> CalculationResult:
    """
    Bundle every return figure for a principal that is already NIB-adjusted.

    Args:
        principal: Interest-earning amount (effective principal)
        annual_rate_percent: Gross annual rate in percent
        withholding_rate_percent: Tax withheld from interest in percent
        original_principal: Amount deposited before any NIB deduction;
            defaults to `principal`. The held-back NIB is paid out at
            maturity, so yearly_total is based on this amount.

    Example:
        100,000 at 33% with 17.5% withholding
        -> daily gross 90.41, daily tax 15.82, daily net 74.59
    """
    deposited = principal if original_principal is None else original_principal

    gross = daily_gross(principal, annual_rate_percent)
    tax = withholding_tax(gross, withholding_rate_percent)
    yearly_net = compound_return(principal, annual_rate_percent, withholding_rate_percent, DAYS_PER_YEAR)

    return CalculationResult(
        principal=deposited,
        effective_principal=principal,
        annual_rate_percent=annual_rate_percent,
        daily_gross=gross,
        daily_tax=tax,
        daily_net=gross - tax,
        monthly_net=compound_return(principal, annual_rate_percent, withholding_rate_percent, DAYS_PER_MONTH),
        yearly_net=yearly_net,
        yearly_total=deposited + yearly_net,
        non_interest_balance=max(0.0, deposited - principal),
    )


def daily_net_for_bank(bank: Bank, principal: float, withholding_rate_percent: float) -> float:
    """Daily net return for a bank's tiered offer; 0 for an unusable bank"""
    if not bank.usable:
        return 0.0
    return daily_net(
        effective_principal(bank, principal),
        rate_for_principal(bank, principal),
        withholding_rate_percent,
    )


def calculate_for_bank(bank: Bank, principal: float, withholding_rate_percent: float) -> CalculationResult:
    """
    Tier-aware calculation for a bank's offer.

    Raises:
        InvalidCalculationInputError: principal not positive, or the bank
            has no usable rate for it
    """
    rate = rate_for_principal(bank, principal)
    validate_calculation_input(principal, rate)

    result = calculate(effective_principal(bank, principal), rate, withholding_rate_percent, principal)
    # Report the resolved NIB itself, not the clamped difference
    return replace(result, non_interest_balance=nib_for_principal(bank, principal))
