"""AI workout generation with validation-driven retries.

Flow: an intent router rejects prompts that are not about exercise, then up
to AI_MAX_RETRIES generation attempts run. Every answer is strictly
validated; a failed attempt feeds its JSON and the validation errors into
the next prompt.
"""

from __future__ import annotations

import json
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from looptimer.ai.model import get_model
from looptimer.ai.prompts import (
    AI_MAX_RETRIES,
    AI_TIMEOUT_SECONDS,
    build_initial_prompt,
    build_retry_prompt,
    build_router_prompt,
    sanitize_prompt,
)
from looptimer.config.settings import settings
from looptimer.core.errors import WorkoutGenerationError
from looptimer.timers.models import AdvancedConfig
from looptimer.timers.processing import strip_colors_and_sounds
from looptimer.timers.validation import validate_advanced_config

Completion = Callable[[str], Awaitable[str]]

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

DEFAULT_REJECTION_REASON = (
    "Your request doesn't appear to be about workouts or exercises. Please describe a workout, "
    "exercise routine, stretch session, or training plan."
)


@dataclass
class GenerationResult:
    config: dict[str, Any]
    attempt: int


def extract_json(text: str) -> str:
    """Strip a markdown code fence around the model's JSON, if any."""
    match = _CODE_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def make_agent_completion(provider: str | None = None, model_name: str | None = None) -> Completion:
    """Completion backed by a pydantic_ai Agent for the configured provider."""
    agent = Agent(
        model=get_model(provider or settings.ai_provider, model_name or settings.ai_model),
        output_type=str,
        model_settings=ModelSettings(temperature=0.3, max_tokens=4096, timeout=AI_TIMEOUT_SECONDS),
    )

    async def complete(prompt: str) -> str:
        result = await agent.run(prompt)
        content = result.output
        if not content:
            raise RuntimeError("No content in AI response")
        return content

    return complete


async def check_exercise_intent(prompt: str, complete: Completion) -> tuple[bool, str]:
    """Ask the router whether the prompt is about exercise.

    Fails open: router errors and unparseable answers let the prompt through.
    """
    try:
        answer = await complete(build_router_prompt(prompt))
    except Exception as e:
        logger.warning(f"Router check failed, allowing prompt through: {type(e).__name__}: {e}")
        return True, "Router unavailable"

    try:
        verdict = json.loads(extract_json(answer))
    except json.JSONDecodeError:
        logger.warning("Router response parsing failed, allowing prompt through")
        return True, "Parser fallback"

    if not isinstance(verdict, dict):
        return True, "Parser fallback"
    return verdict.get("isExerciseRelated", True) is not False, str(verdict.get("reason") or "")


async def generate_workout(
    prompt: str,
    complete: Completion,
    current_config: AdvancedConfig | None = None,
) -> GenerationResult:
    """Generate a validated timer config from a natural language prompt.

    Args:
        prompt: User request, trimmed and cut to the maximum prompt length
        complete: Async function sending one prompt to the model
        current_config: Timer being edited; sent without colours and sounds

    Returns:
        GenerationResult with the raw validated config and the attempt number

    Raises:
        WorkoutGenerationError: INVALID_PROMPT, NOT_EXERCISE_RELATED,
            VALIDATION_FAILED after the last attempt, or AI_FAILED when the
            model call itself fails on the last attempt
    """
    if not isinstance(prompt, str) or not prompt.strip():
        raise WorkoutGenerationError("INVALID_PROMPT", "Prompt is required")
    user_prompt = sanitize_prompt(prompt)

    is_exercise, reason = await check_exercise_intent(user_prompt, complete)
    if not is_exercise:
        logger.info(f"Rejected non-exercise prompt: {reason}")
        raise WorkoutGenerationError(
            "NOT_EXERCISE_RELATED",
            "Invalid prompt: not exercise-related",
            [reason or DEFAULT_REJECTION_REASON],
        )

    stripped = strip_colors_and_sounds(current_config) if current_config else None
    last_json = ""
    last_errors: list[str] = []

    for attempt in range(1, AI_MAX_RETRIES + 1):
        if attempt == 1:
            full_prompt = build_initial_prompt(user_prompt, stripped)
        else:
            full_prompt = build_retry_prompt(user_prompt, last_json, last_errors, attempt)

        try:
            answer = await complete(full_prompt)
        except Exception as e:
            logger.warning(f"AI call failed on attempt {attempt}/{AI_MAX_RETRIES}: {type(e).__name__}: {e}")
            last_errors = [str(e)]
            if attempt == AI_MAX_RETRIES:
                raise WorkoutGenerationError("AI_FAILED", "AI generation failed", last_errors) from e
            continue

        last_json = extract_json(answer)
        try:
            parsed = json.loads(last_json)
        except json.JSONDecodeError as e:
            last_errors = [f"Invalid JSON syntax: {e.msg}"]
            logger.info(f"Attempt {attempt}/{AI_MAX_RETRIES} returned invalid JSON")
            if attempt == AI_MAX_RETRIES:
                raise WorkoutGenerationError(
                    "VALIDATION_FAILED",
                    "Failed to generate valid JSON after maximum retries",
                    last_errors,
                    invalid_json=last_json,
                ) from e
            continue

        validation = validate_advanced_config(parsed)
        if validation.valid:
            logger.info(f"Generated workout on attempt {attempt}")
            return GenerationResult(config=parsed, attempt=attempt)

        last_errors = validation.errors
        logger.info(f"Attempt {attempt}/{AI_MAX_RETRIES} failed validation with {len(last_errors)} errors")

    raise WorkoutGenerationError(
        "VALIDATION_FAILED",
        "Generated workout failed validation after maximum retries",
        last_errors,
        invalid_json=last_json,
    )
