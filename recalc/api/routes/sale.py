"""Sale routes: holding-period analysis and comparison."""

from fastapi import APIRouter, HTTPException

from recalc.api.schemas import (
    CalculationResponse,
    SaleAnalysisRequest,
    SaleComparisonRequest,
    SaleComparisonResponse,
)
from recalc.engine.disposition import compare_sale_scenarios
from recalc.engine.holding import calculate_investment_with_sale
from recalc.engine.validation import InvalidInputError

router = APIRouter(prefix="/api/v1", tags=["sale"])


@router.post("/sale-analysis", response_model=CalculationResponse)
async def sale_analysis(req: SaleAnalysisRequest):
    """Calculation result with a sale section when the holding period is valid."""
    try:
        result = calculate_investment_with_sale(
            req.inputs.to_raw(), req.holding_period.to_config(), strict=req.strict
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return CalculationResponse.model_validate(result)


@router.post("/sale-comparison", response_model=SaleComparisonResponse)
async def sale_comparison(req: SaleComparisonRequest):
    base_config = req.base_config.to_config() if req.base_config else None
    try:
        comparison = compare_sale_scenarios(req.inputs.to_raw(), req.holding_periods, base_config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SaleComparisonResponse.model_validate(comparison)
