"""GET /v1/summary - Best offer and average rate"""

from fastapi import APIRouter, Depends, Query

from savings_gateway.api.dependencies import get_registry
from savings_gateway.api.v1.schemas import SummaryResponse
from savings_gateway.config import settings
from savings_gateway.domain.ranking import summarize
from savings_gateway.domain.registry import BankRegistry

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    principal: float = Query(settings.default_table_principal, gt=0, allow_inf_nan=False, description="Reference principal"),
    withholding_rate: float | None = Query(None, ge=0, le=100, description="Withholding tax in percent"),
    registry: BankRegistry = Depends(get_registry),
):
    """
    Headline figures across usable banks.

    Returns:
        Best bank by daily net return, its rate, the plain average rate;
        figures are null when no bank is usable
    """
    withholding = registry.default_withholding_rate_percent if withholding_rate is None else withholding_rate
    summary = summarize(registry.banks, principal, withholding)
    best = summary.best_bank

    return SummaryResponse(
        principal=principal,
        withholding_rate_percent=withholding,
        usable_count=summary.usable_count,
        total_count=summary.total_count,
        best_bank_id=best.id if best else None,
        best_bank_name=best.name if best else None,
        best_rate=summary.best_rate if best else None,
        average_rate=summary.average_rate if best else None,
        best_daily_net=summary.best_daily_net if best else None,
        last_updated=registry.last_updated,
    )
