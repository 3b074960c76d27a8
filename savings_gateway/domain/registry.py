"""In-memory bank registry - one immutable snapshot per ingestion cycle"""

from dataclasses import dataclass
from functools import cached_property
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from savings_gateway.config import settings
from savings_gateway.domain.exceptions import UnknownBankError
from savings_gateway.domain.models import Bank


@dataclass(frozen=True)
class BankRegistry:
    """Banks from one ingestion cycle, in source configuration order"""

    banks: Tuple[Bank, ...] = ()
    last_updated: Optional[datetime] = None
    default_withholding_rate_percent: float = settings.default_withholding_rate_percent

    @cached_property
    def _by_id(self) -> Dict[str, Bank]:
        return {bank.id: bank for bank in self.banks}

    def get(self, bank_id: str) -> Bank:
        """
        Raises:
            UnknownBankError: bank_id is not in this snapshot
        """
        bank = self._by_id.get(bank_id)
        if bank is None:
            raise UnknownBankError(f"Unknown bank: {bank_id}")
        return bank

    def usable_banks(self) -> List[Bank]:
        return [bank for bank in self.banks if bank.usable]


class RegistryHolder:
    """Points at the current snapshot; a new cycle replaces it wholesale"""

    def __init__(self, registry: BankRegistry | None = None):
        self._registry = registry or BankRegistry()

    @property
    def current(self) -> BankRegistry:
        return self._registry

    def replace(
        self,
        banks: Sequence[Bank],
        last_updated: datetime | None = None,
        default_withholding_rate_percent: float | None = None,
    ) -> BankRegistry:
        self._registry = BankRegistry(
            banks=tuple(banks),
            last_updated=last_updated,
            default_withholding_rate_percent=(
                settings.default_withholding_rate_percent
                if default_withholding_rate_percent is None
                else default_withholding_rate_percent
            ),
        )
        return self._registry

    def install(self, registry: BankRegistry) -> BankRegistry:
        self._registry = registry
        return registry
