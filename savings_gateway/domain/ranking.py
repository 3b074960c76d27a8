"""Best-offer selection and summary statistics across banks"""

from typing import Iterable

from savings_gateway.domain.calculator import daily_net_for_bank
from savings_gateway.domain.models import Bank, RateSummary
from savings_gateway.domain.resolver import rate_for_principal


def summarize(banks: Iterable[Bank], principal: float, withholding_rate_percent: float) -> RateSummary:
    """
    Pick the best offer at a reference principal.

    Requirements:
    - Only usable banks take part
    - Best bank = highest daily net return; on an exact tie the bank met
      first in registry order wins
    - Average rate = plain mean of each usable bank's rate at the principal
    """
    all_banks = list(banks)
    usable = [bank for bank in all_banks if bank.usable]

    if not usable:
        return RateSummary(principal=principal, usable_count=0, total_count=len(all_banks))

    best = usable[0]
    best_daily_net = daily_net_for_bank(best, principal, withholding_rate_percent)
    for bank in usable[1:]:
        candidate = daily_net_for_bank(bank, principal, withholding_rate_percent)
        if candidate > best_daily_net:
            best, best_daily_net = bank, candidate

    average_rate = sum(rate_for_principal(bank, principal) for bank in usable) / len(usable)

    return RateSummary(
        principal=principal,
        usable_count=len(usable),
        total_count=len(all_banks),
        best_bank=best,
        best_rate=rate_for_principal(best, principal),
        average_rate=average_rate,
        best_daily_net=best_daily_net,
    )
