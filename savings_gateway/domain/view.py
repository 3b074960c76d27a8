"""Immutable listing state and the controller that drives it.

Every user action produces a new ViewState; nothing is mutated in place.
Rows and summary figures are derived from a state on demand.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from savings_gateway.config import settings
from savings_gateway.domain.calculator import daily_net_for_bank
from savings_gateway.domain.models import Bank, RateSummary
from savings_gateway.domain.ordering import (
    SortDirection,
    SortField,
    default_direction,
    filter_banks,
    sort_banks,
)
from savings_gateway.domain.parsing import parse_amount_input
from savings_gateway.domain.ranking import summarize
from savings_gateway.domain.resolver import nib_for_principal, rate_for_principal
from savings_gateway.utils.debounce import Debouncer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BankRow:
    """One listing line; figures are None when the bank is unavailable"""

    bank: Bank
    annual_rate_percent: Optional[float]
    nib: Optional[float]
    daily_net: Optional[float]

    @property
    def usable(self) -> bool:
        return self.bank.usable


@dataclass(frozen=True)
class ViewState:
    """Everything a listing render depends on"""

    banks: Tuple[Bank, ...] = ()
    sort_field: SortField = SortField.RATE
    sort_direction: SortDirection = SortDirection.DESC
    search_query: str = ""
    withholding_rate_percent: float = settings.default_withholding_rate_percent
    table_principal: float = settings.default_table_principal


def with_banks(state: ViewState, banks: Sequence[Bank]) -> ViewState:
    """Swap in a new snapshot of banks wholesale"""
    return replace(state, banks=tuple(banks))


def with_sort(state: ViewState, field: SortField) -> ViewState:
    """Same field toggles direction; a new field starts at its default direction"""
    field = SortField(field)
    if field == state.sort_field:
        flipped = SortDirection.ASC if state.sort_direction == SortDirection.DESC else SortDirection.DESC
        return replace(state, sort_direction=flipped)
    return replace(state, sort_field=field, sort_direction=default_direction(field))


def with_search(state: ViewState, query: str) -> ViewState:
    return replace(state, search_query=query.strip())


def with_principal(state: ViewState, principal: float) -> ViewState:
    """Non-positive input keeps the previous principal"""
    if principal <= 0:
        return state
    return replace(state, table_principal=principal)


def with_withholding_rate(state: ViewState, rate_percent: float) -> ViewState:
    if rate_percent < 0:
        return state
    return replace(state, withholding_rate_percent=rate_percent)


def build_rows(state: ViewState) -> List[BankRow]:
    """Filtered, ordered rows for the current state"""
    visible = filter_banks(state.banks, state.search_query)
    ordered = sort_banks(
        visible,
        state.sort_field,
        state.sort_direction,
        state.table_principal,
        state.withholding_rate_percent,
    )

    rows = []
    for bank in ordered:
        if not bank.usable:
            rows.append(BankRow(bank=bank, annual_rate_percent=None, nib=None, daily_net=None))
            continue
        rows.append(
            BankRow(
                bank=bank,
                annual_rate_percent=rate_for_principal(bank, state.table_principal),
                nib=nib_for_principal(bank, state.table_principal),
                daily_net=daily_net_for_bank(bank, state.table_principal, state.withholding_rate_percent),
            )
        )
    return rows


def build_summary(state: ViewState) -> RateSummary:
    """Summary cards ignore the search filter and cover every bank"""
    return summarize(state.banks, state.table_principal, state.withholding_rate_percent)


class RatesController:
    """
    Owns the current ViewState and re-renders after each transition.

    Typing into the principal or search box goes through a debouncer so a
    burst of keystrokes triggers a single recomputation with the last value.
    """

    def __init__(
        self,
        render: Callable[[ViewState], None],
        state: ViewState | None = None,
        principal_delay: float | None = None,
        search_delay: float | None = None,
    ):
        self.render = render
        self.state = state or ViewState()
        self._principal_input = Debouncer(
            self._apply_principal_text,
            settings.principal_debounce_seconds if principal_delay is None else principal_delay,
        )
        self._search_input = Debouncer(
            lambda query: self.dispatch(with_search, query),
            settings.search_debounce_seconds if search_delay is None else search_delay,
        )

    def dispatch(self, transition, *args) -> ViewState:
        new_state = transition(self.state, *args)
        if new_state is not self.state:
            self.state = new_state
            self.render(new_state)
        return self.state

    def load(self, banks: Sequence[Bank], withholding_rate_percent: float | None = None) -> ViewState:
        state = with_banks(self.state, banks)
        if withholding_rate_percent is not None:
            state = with_withholding_rate(state, withholding_rate_percent)
        usable = sum(1 for bank in state.banks if bank.usable)
        logger.info(f"Loaded {usable}/{len(state.banks)} banks")
        return self.dispatch(lambda _: state)

    def sort_by(self, field: SortField) -> ViewState:
        return self.dispatch(with_sort, field)

    def principal_typed(self, text: str) -> None:
        self._principal_input.trigger(text)

    def search_typed(self, text: str) -> None:
        self._search_input.trigger(text)

    def _apply_principal_text(self, text: str) -> None:
        self.dispatch(with_principal, parse_amount_input(text))
