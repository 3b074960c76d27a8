"""POST /v1/calculate - Return calculation for a bank offer or a custom rate"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from savings_gateway.api.dependencies import get_registry, get_request_id
from savings_gateway.api.v1.schemas import CalculationRequest, CalculationResponse
from savings_gateway.domain.calculator import calculate, calculate_for_bank, validate_calculation_input
from savings_gateway.domain.exceptions import InvalidCalculationInputError, UnknownBankError
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.infrastructure.observability.metrics import calculation_counter, rejected_calculation_counter

router = APIRouter()


@router.post("/calculate", response_model=CalculationResponse)
def create_calculation(
    request_body: CalculationRequest,
    request: Request,
    registry: BankRegistry = Depends(get_registry),
):
    """
    Calculate daily, monthly and yearly returns.

    Flow:
    1. A positive custom rate wins; the custom NIB is deducted from the principal
    2. Otherwise the bank's tier for the principal supplies rate and NIB
    3. Non-positive principal or rate is rejected before any computation
    """
    request_id = get_request_id(request)
    withholding = (
        registry.default_withholding_rate_percent
        if request_body.withholding_rate is None
        else request_body.withholding_rate
    )

    try:
        if request_body.custom_rate is not None and request_body.custom_rate > 0:
            validate_calculation_input(request_body.principal, request_body.custom_rate)
            effective = max(0.0, request_body.principal - request_body.custom_nib)
            result = calculate(effective, request_body.custom_rate, withholding, request_body.principal)
            bank_id = None
            calculation_counter.labels(mode="custom").inc()
        elif request_body.bank_id:
            bank = registry.get(request_body.bank_id)
            result = calculate_for_bank(bank, request_body.principal, withholding)
            bank_id = bank.id
            calculation_counter.labels(mode="bank").inc()
        else:
            raise InvalidCalculationInputError("Either a bank or a positive custom rate is required")

    except UnknownBankError:
        raise HTTPException(status_code=404, detail="Bank not found")

    except InvalidCalculationInputError as e:
        rejected_calculation_counter.inc()
        logging.warning(f"Rejected calculation: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return CalculationResponse(
        bank_id=bank_id,
        principal=result.principal,
        effective_principal=result.effective_principal,
        non_interest_balance=result.non_interest_balance,
        annual_rate_percent=result.annual_rate_percent,
        withholding_rate_percent=withholding,
        daily_gross=result.daily_gross,
        daily_tax=result.daily_tax,
        daily_net=result.daily_net,
        monthly_net=result.monthly_net,
        yearly_net=result.yearly_net,
        yearly_total=result.yearly_total,
    )
