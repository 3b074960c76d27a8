"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class TierSchema(BaseModel):
    """One principal range of a bank's offer"""

    min: float
    max: Optional[float] = None
    annual_rate_percent: float
    nib: float = 0.0
    nib_percentage: Optional[float] = None


class BankDetailResponse(BaseModel):
    """Response for GET /v1/banks/{bank_id}"""

    id: str
    name: str
    type: str
    product_name: str
    website: str
    usable: bool
    tiers: List[TierSchema]


class BankRowSchema(BaseModel):
    """Single listing row; figures are null for an unavailable bank"""

    id: str
    name: str
    type: str
    product_name: str
    website: str
    usable: bool
    annual_rate_percent: Optional[float] = None
    nib: Optional[float] = None
    daily_net: Optional[float] = None
    daily_net_display: Optional[str] = None


class BankListResponse(BaseModel):
    """Response for GET /v1/banks"""

    principal: float
    withholding_rate_percent: float
    sort: str
    direction: str
    last_updated: Optional[datetime] = None
    banks: List[BankRowSchema]


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    principal: float
    withholding_rate_percent: float
    usable_count: int
    total_count: int
    best_bank_id: Optional[str] = None
    best_bank_name: Optional[str] = None
    best_rate: Optional[float] = None
    average_rate: Optional[float] = None
    best_daily_net: Optional[float] = None
    last_updated: Optional[datetime] = None


class CalculationRequest(BaseModel):
    """Request body for POST /v1/calculate

    A custom rate takes precedence over the bank's tiered rate; the custom
    NIB only applies together with a custom rate.
    """

    principal: float = Field(..., allow_inf_nan=False, description="Deposited amount")
    bank_id: Optional[str] = Field(None, description="Bank whose tiered rate and NIB apply")
    custom_rate: Optional[float] = Field(None, allow_inf_nan=False, description="Annual rate in percent, overrides bank_id")
    custom_nib: float = Field(0.0, ge=0, allow_inf_nan=False, description="Non-interest-bearing amount for a custom rate")
    withholding_rate: Optional[float] = Field(None, ge=0, le=100, description="Withholding tax in percent")


class CalculationResponse(BaseModel):
    """Response for POST /v1/calculate"""

    bank_id: Optional[str] = None
    principal: float
    effective_principal: float
    non_interest_balance: float
    annual_rate_percent: float
    withholding_rate_percent: float
    daily_gross: float
    daily_tax: float
    daily_net: float
    monthly_net: float
    yearly_net: float
    yearly_total: float
