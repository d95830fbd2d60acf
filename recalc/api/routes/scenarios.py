"""Economic scenario routes."""

from fastapi import APIRouter

from recalc.api.schemas import GeneratedScenarioResponse, ScenariosRequest
from recalc.engine.scenarios import generate_scenarios

router = APIRouter(prefix="/api/v1", tags=["scenarios"])


@router.post("/scenarios", response_model=list[GeneratedScenarioResponse])
async def scenarios(req: ScenariosRequest):
    """Run the built-in economic scenarios against an input record."""
    holding_config = req.holding_period.to_config() if req.holding_period else None
    generated = generate_scenarios(
        req.inputs.to_raw(),
        context=req.to_context(),
        holding_config=holding_config,
        scenario_ids=req.scenario_ids,
    )
    return [GeneratedScenarioResponse.model_validate(g) for g in generated]
