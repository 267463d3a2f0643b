"""API routes that proxy the AI service: scenario generation and coaching chat."""
from typing import Annotated

from fastapi import APIRouter, Depends

from cybershield.deps import Runtime, get_runtime
from cybershield.schemas.ai import CoachingReplySchema, CoachingRequestSchema
from cybershield.schemas.scenario import ScenarioOutSchema, ScenarioRequestSchema

router = APIRouter(prefix="/api", tags=["ai"])


@router.post("/scenarios", response_model=ScenarioOutSchema)
async def generate_scenario(
    body: ScenarioRequestSchema,
    runtime: Annotated[Runtime, Depends(get_runtime)],
):
    """Generate one scenario; failures surface as 502 and the caller falls back."""
    scenario = await runtime.scenarios.generate_scenario(
        body.module_type,
        body.difficulty,
        body.previous_scenario_ids,
    )
    return ScenarioOutSchema(success=True, scenario=scenario)


@router.post("/ai", response_model=CoachingReplySchema)
async def coaching_chat(
    body: CoachingRequestSchema,
    runtime: Annotated[Runtime, Depends(get_runtime)],
):
    """Forward a chat transcript to the AI coach for the requested mode."""
    return await runtime.coaching.chat(body)
