"""Cost estimate for one AI workout generation request.

Token counts are estimated at four characters per token; output sizes are
typical values observed for the router and the workout JSON.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from looptimer.ai.prompts import AI_MODEL, build_initial_prompt, build_router_prompt

DEFAULT_SAMPLE_PROMPT = "30 minute workout with 5 exercises"

# USD per 1M tokens
GROQ_PRICING: dict[str, dict[str, float]] = {
    "llama-3.3-70b-versatile": {"input": 0.59, "output": 0.79},
}

ROUTER_OUTPUT_TOKENS = 50
WORKOUT_OUTPUT_TOKENS = 1500


class CostBreakdown(BaseModel):
    model: str
    router_input_tokens: int
    router_output_tokens: int
    workout_input_tokens: int
    workout_output_tokens: int
    total_input_tokens: int
    total_output_tokens: int
    router_cost: float
    workout_cost: float
    total_cost: float

    @property
    def requests_per_dollar(self) -> int:
        return round(1 / self.total_cost) if self.total_cost else 0


class PromptStats(BaseModel):
    router_prompt_length: int
    router_prompt_tokens: int
    workout_prompt_length: int
    workout_prompt_tokens: int
    total_characters: int
    total_tokens: int


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


def _price(tokens: int, per_million: float) -> float:
    return tokens * per_million / 1_000_000


def calculate_workout_generation_cost(user_prompt: str = DEFAULT_SAMPLE_PROMPT, model: str = AI_MODEL) -> CostBreakdown:
    """Estimate router plus generation cost for a prompt.

    Raises:
        ValueError: If there is no pricing for the model
    """
    pricing = GROQ_PRICING.get(model)
    if pricing is None:
        raise ValueError(f"Pricing not available for model: {model}")

    router_input = estimate_tokens(build_router_prompt(user_prompt))
    workout_input = estimate_tokens(build_initial_prompt(user_prompt))

    router_cost = _price(router_input, pricing["input"]) + _price(ROUTER_OUTPUT_TOKENS, pricing["output"])
    workout_cost = _price(workout_input, pricing["input"]) + _price(WORKOUT_OUTPUT_TOKENS, pricing["output"])

    return CostBreakdown(
        model=model,
        router_input_tokens=router_input,
        router_output_tokens=ROUTER_OUTPUT_TOKENS,
        workout_input_tokens=workout_input,
        workout_output_tokens=WORKOUT_OUTPUT_TOKENS,
        total_input_tokens=router_input + workout_input,
        total_output_tokens=ROUTER_OUTPUT_TOKENS + WORKOUT_OUTPUT_TOKENS,
        router_cost=router_cost,
        workout_cost=workout_cost,
        total_cost=router_cost + workout_cost,
    )


def get_prompt_stats(user_prompt: str = DEFAULT_SAMPLE_PROMPT) -> PromptStats:
    router_prompt = build_router_prompt(user_prompt)
    workout_prompt = build_initial_prompt(user_prompt)
    return PromptStats(
        router_prompt_length=len(router_prompt),
        router_prompt_tokens=estimate_tokens(router_prompt),
        workout_prompt_length=len(workout_prompt),
        workout_prompt_tokens=estimate_tokens(workout_prompt),
        total_characters=len(router_prompt) + len(workout_prompt),
        total_tokens=estimate_tokens(router_prompt) + estimate_tokens(workout_prompt),
    )
