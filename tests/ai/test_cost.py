import pytest

from looptimer.ai.cost import (
    GROQ_PRICING,
    ROUTER_OUTPUT_TOKENS,
    WORKOUT_OUTPUT_TOKENS,
    calculate_workout_generation_cost,
    estimate_tokens,
    get_prompt_stats,
)
from looptimer.ai.prompts import AI_MODEL


def test_estimate_tokens_rounds_up():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_cost_breakdown_adds_up():
    cost = calculate_workout_generation_cost("20 minute tabata")
    pricing = GROQ_PRICING[AI_MODEL]

    assert cost.model == AI_MODEL
    assert cost.total_input_tokens == cost.router_input_tokens + cost.workout_input_tokens
    assert cost.total_output_tokens == ROUTER_OUTPUT_TOKENS + WORKOUT_OUTPUT_TOKENS
    assert cost.total_cost == pytest.approx(cost.router_cost + cost.workout_cost)
    expected_workout = (cost.workout_input_tokens * pricing["input"] + WORKOUT_OUTPUT_TOKENS * pricing["output"]) / 1e6
    assert cost.workout_cost == pytest.approx(expected_workout)
    assert cost.requests_per_dollar > 0


def test_longer_prompts_cost_more():
    short = calculate_workout_generation_cost("hiit")
    long = calculate_workout_generation_cost("hiit " * 100)

    assert long.total_cost > short.total_cost


def test_unpriced_model_is_rejected():
    with pytest.raises(ValueError, match="Pricing not available"):
        calculate_workout_generation_cost("hiit", model="unknown-model")


def test_prompt_stats():
    stats = get_prompt_stats("yoga flow")

    assert stats.total_characters == stats.router_prompt_length + stats.workout_prompt_length
    assert stats.total_tokens == stats.router_prompt_tokens + stats.workout_prompt_tokens
