"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Tier:
    """Principal range with its own annual rate and NIB policy.

    `max` of None means the range is unbounded. A positive `nib_percentage`
    takes precedence over the fixed `nib` amount.
    """

    min: float
    max: Optional[float]
    annual_rate_percent: float
    nib: float = 0.0
    nib_percentage: Optional[float] = None

    @property
    def unbounded(self) -> bool:
        return self.max is None

    @property
    def has_percentage_nib(self) -> bool:
        return self.nib_percentage is not None and self.nib_percentage > 0

    def contains(self, principal: float) -> bool:
        return principal >= self.min and (self.max is None or principal <= self.max)


@dataclass(frozen=True)
class Bank:
    """Savings offer published by one source"""

    id: str
    name: str
    type: str
    product_name: str
    website: str
    tiers: Tuple[Tier, ...] = ()

    @property
    def usable(self) -> bool:
        """A bank is usable once ingestion produced at least one tier"""
        return len(self.tiers) > 0


@dataclass(frozen=True)
class CalculationResult:
    """Returns for one principal at one rate, after withholding tax"""

    principal: float
    effective_principal: float
    annual_rate_percent: float
    daily_gross: float
    daily_tax: float
    daily_net: float
    monthly_net: float
    yearly_net: float
    yearly_total: float
    non_interest_balance: float


@dataclass(frozen=True)
class RateSummary:
    """Headline figures across all usable banks at a reference principal"""

    principal: float
    usable_count: int
    total_count: int
    best_bank: Optional[Bank] = None
    best_rate: float = 0.0
    average_rate: float = 0.0
    best_daily_net: float = 0.0


class NormalizationStatus(str, Enum):
    """Outcome of turning one raw payload into tiers"""

    OK = "ok"
    NO_DATA = "no_data"  # payload lacked the expected structure entirely
    MALFORMED = "malformed"  # structure present, but no candidate tier survived validation


@dataclass
class NormalizationResult:
    """Tiers produced by an adapter plus diagnostics on what was dropped"""

    status: NormalizationStatus
    tiers: List[Tier] = field(default_factory=list)
    dropped: int = 0
    reason: str = ""
