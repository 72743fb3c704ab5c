"""AI workout generation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from looptimer.ai.cost import DEFAULT_SAMPLE_PROMPT, CostBreakdown, calculate_workout_generation_cost
from looptimer.ai.generation import Completion, generate_workout, make_agent_completion
from looptimer.ai.schemas import GenerateWorkoutRequest, GenerateWorkoutResponse
from looptimer.config.settings import settings
from looptimer.core.auth import get_current_user_id
from looptimer.core.errors import LooptimerError, WorkoutGenerationError
from looptimer.core.http import to_http_exception

router = APIRouter(prefix="/ai", tags=["ai"])


def get_completion() -> Completion:
    """Dependency providing the model completion function.

    Raises:
        HTTPException: 503 if no API key is configured for the provider
    """
    if not settings.ai_api_key:
        logger.warning(f"AI generation requested but no API key is set for provider={settings.ai_provider}")
        raise to_http_exception(WorkoutGenerationError("AI_UNAVAILABLE", "AI service not configured"))
    return make_agent_completion()


@router.post("/generate-workout", response_model=GenerateWorkoutResponse)
async def generate(
    payload: GenerateWorkoutRequest,
    user_id: str = Depends(get_current_user_id),
    complete: Completion = Depends(get_completion),
):
    """Generate a timer config from a natural language prompt.

    Args:
        payload: Prompt and, when editing, the current config
        user_id: Current authenticated user ID (from auth dependency)
        complete: Model completion function

    Returns:
        Validated config and the attempt that produced it

    Raises:
        HTTPException: 400 for rejected prompts or exhausted retries (with
            ``details`` and ``invalidJson``), 500 if the model call fails
    """
    logger.info(f"[API] POST /ai/generate-workout for user_id={user_id} prompt_length={len(payload.prompt)}")
    try:
        result = await generate_workout(payload.prompt, complete, payload.current_config)
    except LooptimerError as e:
        raise to_http_exception(e) from e
    return GenerateWorkoutResponse(config=result.config, attempt=result.attempt)


@router.get("/cost-estimate", response_model=CostBreakdown)
def cost_estimate(prompt: str = DEFAULT_SAMPLE_PROMPT, model: str | None = None):
    """Estimated token usage and USD cost of one generation request."""
    try:
        return calculate_workout_generation_cost(prompt, model or settings.ai_model)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
