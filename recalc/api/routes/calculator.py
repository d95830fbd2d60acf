"""Calculator routes: the four-step investment calculation and loan schedule."""

from fastapi import APIRouter, HTTPException

from recalc.api.schemas import (
    AmortizationPaymentResponse,
    AmortizationRequest,
    AmortizationResponse,
    CalculateRequest,
    CalculationResponse,
    YearlyDebtResponse,
)
from recalc.engine.debt import amortization_schedule, yearly_debt_summary
from recalc.engine.inputs import normalize_inputs
from recalc.engine.investment import calculate_investment
from recalc.engine.validation import InvalidInputError

router = APIRouter(prefix="/api/v1", tags=["calculator"])


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(req: CalculateRequest):
    """Partial input record -> full calculation result.

    With ``strict`` set, invalid inputs are rejected with 422 instead of being
    reported on the result.
    """
    try:
        result = calculate_investment(req.inputs.to_raw(), strict=req.strict)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return CalculationResponse.model_validate(result)


@router.post("/amortization", response_model=AmortizationResponse)
async def amortization(req: AmortizationRequest):
    """Month-by-month two-stage loan schedule with yearly totals."""
    schedule = amortization_schedule(normalize_inputs(req.inputs.to_raw()))

    return AmortizationResponse(
        promo_payment=schedule.promo_payment,
        float_payment=schedule.float_payment,
        total_interest=schedule.total_interest,
        total_principal=schedule.total_principal,
        payments=[AmortizationPaymentResponse.model_validate(p) for p in schedule.payments],
        yearly_summary=[YearlyDebtResponse.model_validate(y) for y in yearly_debt_summary(schedule)],
    )
