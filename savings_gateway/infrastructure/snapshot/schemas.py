"""Pydantic schemas for the rates snapshot file"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TierRecord(BaseModel):
    """One tier as stored in rates.json"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    min: float = 0
    max: Optional[float] = None
    annual_rate: float = Field(..., alias="annualRate")
    nib: Optional[float] = 0
    nib_percentage: Optional[float] = Field(None, alias="nibPercentage")


class BankRecord(BaseModel):
    """One source's bank entry; tiers are validated one by one on load"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    type: str = ""
    product_name: str = Field("", alias="productName")
    website: str = ""
    url: Optional[str] = None
    tiers: List[Any] = Field(default_factory=list)


class SnapshotRecord(BaseModel):
    """Whole rates.json document"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    last_updated: Optional[datetime] = Field(None, alias="lastUpdated")
    default_withholding_rate_percent: float = Field(
        17.5,
        validation_alias=AliasChoices("defaultWithholdingRatePercent", "defaultWithholdingRate"),
        serialization_alias="defaultWithholdingRatePercent",
    )
    banks: List[BankRecord] = Field(default_factory=list)
