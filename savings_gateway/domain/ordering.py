"""Stable ordering and search filtering of bank listings"""

from enum import Enum
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List

from savings_gateway.domain.calculator import daily_net_for_bank
from savings_gateway.domain.models import Bank
from savings_gateway.domain.resolver import nib_for_principal, rate_for_principal
from savings_gateway.utils.collation import turkish_lower, turkish_sort_key


class SortField(str, Enum):
    NAME = "name"
    RATE = "rate"
    NIB = "nib"
    DAILY = "daily"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def default_direction(field: SortField) -> SortDirection:
    """Names read A-Z first, numeric columns best-first"""
    return SortDirection.ASC if field == SortField.NAME else SortDirection.DESC


def _sort_keys(principal: float, withholding_rate_percent: float) -> Dict[SortField, Callable[[Bank], object]]:
    return {
        SortField.NAME: lambda b: turkish_sort_key(b.name),
        SortField.RATE: lambda b: rate_for_principal(b, principal),
        SortField.NIB: lambda b: nib_for_principal(b, principal),
        SortField.DAILY: lambda b: daily_net_for_bank(b, principal, withholding_rate_percent),
    }


def _cmp(left, right) -> int:
    return (left > right) - (left < right)


def compare_banks(
    a: Bank,
    b: Bank,
    field: SortField,
    direction: SortDirection,
    principal: float,
    withholding_rate_percent: float,
) -> int:
    """
    Two-phase comparison of two banks for display.

    1. Usable banks always precede unusable ones, whatever the field or
       direction; two unusable banks compare by name A-Z.
    2. Two usable banks compare by the requested field and direction.

    Equal keys compare as 0, so a stable sort keeps their input order.
    """
    if a.usable != b.usable:
        return -1 if a.usable else 1
    if not a.usable:
        return _cmp(turkish_sort_key(a.name), turkish_sort_key(b.name))

    key = _sort_keys(principal, withholding_rate_percent)[SortField(field)]
    result = _cmp(key(a), key(b))
    return -result if SortDirection(direction) == SortDirection.DESC else result


def sort_banks(
    banks: Iterable[Bank],
    field: SortField,
    direction: SortDirection,
    principal: float,
    withholding_rate_percent: float,
) -> List[Bank]:
    """Order banks with compare_banks; unusable banks always end up last"""
    return sorted(
        banks,
        key=cmp_to_key(
            lambda a, b: compare_banks(a, b, field, direction, principal, withholding_rate_percent)
        ),
    )


def filter_banks(banks: Iterable[Bank], query: str) -> List[Bank]:
    """Keep banks whose name contains the query, ignoring case"""
    needle = turkish_lower(query.strip())
    if not needle:
        return list(banks)
    return [bank for bank in banks if needle in turkish_lower(bank.name)]
