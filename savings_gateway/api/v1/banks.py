"""GET /v1/banks - Ordered bank listing at a reference principal"""

from fastapi import APIRouter, Depends, HTTPException, Query

from savings_gateway.api.dependencies import get_registry
from savings_gateway.api.v1.schemas import BankDetailResponse, BankListResponse, BankRowSchema, TierSchema
from savings_gateway.config import settings
from savings_gateway.domain.exceptions import UnknownBankError
from savings_gateway.domain.ordering import SortDirection, SortField, default_direction
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.domain.view import ViewState, build_rows
from savings_gateway.utils.formatting import format_try

router = APIRouter()


@router.get("/banks", response_model=BankListResponse)
def list_banks(
    principal: float = Query(settings.default_table_principal, gt=0, allow_inf_nan=False, description="Reference principal"),
    withholding_rate: float | None = Query(None, ge=0, le=100, description="Withholding tax in percent"),
    sort: SortField = Query(SortField.RATE, description="name, rate, nib or daily"),
    direction: SortDirection | None = Query(None, description="asc or desc; defaults per field"),
    q: str = Query("", description="Case-insensitive name filter"),
    registry: BankRegistry = Depends(get_registry),
):
    """
    List banks ordered by the requested field.

    Banks whose rates could not be retrieved are always listed last with
    null figures.
    """
    state = ViewState(
        banks=registry.banks,
        sort_field=sort,
        sort_direction=direction or default_direction(sort),
        search_query=q,
        withholding_rate_percent=(
            registry.default_withholding_rate_percent if withholding_rate is None else withholding_rate
        ),
        table_principal=principal,
    )

    rows = [
        BankRowSchema(
            id=row.bank.id,
            name=row.bank.name,
            type=row.bank.type,
            product_name=row.bank.product_name,
            website=row.bank.website,
            usable=row.usable,
            annual_rate_percent=row.annual_rate_percent,
            nib=row.nib,
            daily_net=row.daily_net,
            daily_net_display=format_try(row.daily_net) if row.daily_net is not None else None,
        )
        for row in build_rows(state)
    ]

    return BankListResponse(
        principal=state.table_principal,
        withholding_rate_percent=state.withholding_rate_percent,
        sort=state.sort_field.value,
        direction=state.sort_direction.value,
        last_updated=registry.last_updated,
        banks=rows,
    )


@router.get("/banks/{bank_id}", response_model=BankDetailResponse)
def get_bank(bank_id: str, registry: BankRegistry = Depends(get_registry)):
    """Bank details with its full tier table"""
    try:
        bank = registry.get(bank_id)
    except UnknownBankError:
        raise HTTPException(status_code=404, detail="Bank not found")

    return BankDetailResponse(
        id=bank.id,
        name=bank.name,
        type=bank.type,
        product_name=bank.product_name,
        website=bank.website,
        usable=bank.usable,
        tiers=[
            TierSchema(
                min=tier.min,
                max=tier.max,
                annual_rate_percent=tier.annual_rate_percent,
                nib=tier.nib,
                nib_percentage=tier.nib_percentage,
            )
            for tier in bank.tiers
        ],
    )
